"""Label normaliser: map free-form model labels onto :class:`ActivityLabel`.

Both functions are total.  Anything unrecognised becomes
``ActivityLabel.OTHER`` and out-of-range confidences are clamped, so no value
outside the closed vocabulary or the unit interval reaches the caller.
"""

from __future__ import annotations

import math

from capture_inference.models import ActivityLabel

_CANONICAL: dict[str, ActivityLabel] = {label.value: label for label in ActivityLabel}

# Keys are lower-cased with underscores removed.
_ALIASES: dict[str, ActivityLabel] = {
    "diaperwet": ActivityLabel.DIAPER_WET,
    "diaperbowel": ActivityLabel.DIAPER_BOWEL,
    "feeding": ActivityLabel.FEEDING,
    "sleepstart": ActivityLabel.SLEEP_START,
    "babyasleep": ActivityLabel.SLEEP_START,
    "wakeup": ActivityLabel.WAKE_UP,
    "babywakesup": ActivityLabel.WAKE_UP,
}


def normalize_label(raw_label: str) -> ActivityLabel:
    label = _CANONICAL.get(raw_label)
    if label is not None:
        return label
    return _ALIASES.get(raw_label.lower().replace("_", ""), ActivityLabel.OTHER)


def clamp_confidence(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)
