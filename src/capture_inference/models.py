"""Shared Pydantic models used across the inference pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ─────────────────────────────────────────────────────


class CaptureType(str, Enum):
    """Kinds of media a wearable capture session hands over for inference."""

    PHOTO = "photo"
    SHORT_VIDEO = "shortVideo"
    AUDIO_SNIPPET = "audioSnippet"


class ActivityLabel(str, Enum):
    """Closed vocabulary of baby-care activities.

    Nothing outside this set may leave the label normaliser.
    """

    DIAPER_WET = "diaperWet"
    DIAPER_BOWEL = "diaperBowel"
    FEEDING = "feeding"
    SLEEP_START = "sleepStart"
    WAKE_UP = "wakeUp"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[ActivityLabel, str] = {
    ActivityLabel.DIAPER_WET: "Diaper (Wet)",
    ActivityLabel.DIAPER_BOWEL: "Diaper (Bowel)",
    ActivityLabel.FEEDING: "Feeding",
    ActivityLabel.SLEEP_START: "Sleep Start",
    ActivityLabel.WAKE_UP: "Wake Up",
    ActivityLabel.OTHER: "Other",
}


# ── Inputs ────────────────────────────────────────────────────


class CaptureEnvelope(BaseModel):
    """One unit of work submitted for inference.

    ``local_media_path`` points at a photo or audio file, or at a segment
    manifest for ``shortVideo`` captures.
    """

    model_config = ConfigDict(frozen=True)

    capture_type: CaptureType
    local_media_path: Path
    captured_at: datetime


# ── Request parts ─────────────────────────────────────────────


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class InlineDataPart(BaseModel):
    """Binary media carried inline (base64-encoded on the wire)."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


RequestPart = Union[TextPart, InlineDataPart]


# ── Output ────────────────────────────────────────────────────


class InferenceResult(BaseModel):
    """Value returned by :meth:`InferenceClient.infer`."""

    model_config = ConfigDict(frozen=True)

    label: ActivityLabel
    confidence: float = Field(ge=0.0, le=1.0)
    rationale_short: str
    model_version: str

    def needs_review(self, threshold: float) -> bool:
        """Caller-side review policy: low-confidence results need a human look."""
        return self.confidence < threshold
