"""Frame discovery and even down-sampling for video segments."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence, TypeVar

T = TypeVar("T")

FRAME_EXTENSIONS = frozenset({".jpg", ".jpeg"})


def list_frames(frames_dir: Path) -> list[Path]:
    """Return the JPEG frames in *frames_dir*, oldest first.

    Frame filenames are monotonic with capture time, so lexicographic order
    is capture order.
    """
    frames = [
        p for p in frames_dir.iterdir()
        if p.suffix.lower() in FRAME_EXTENSIONS and p.is_file()
    ]
    return sorted(frames, key=lambda p: p.name)


def sample_indices(total: int, max_count: int) -> list[int]:
    """Indices of up to *max_count* items spread evenly over *total* items.

    The first and last item are always kept.  With ``max_count == 1`` only
    the first item is returned.
    """
    if max_count < 1:
        raise ValueError(f"max_count must be >= 1, got {max_count}")
    if total <= max_count:
        return list(range(total))
    if max_count == 1:
        return [0]

    last_index = total - 1
    indices = []
    for i in range(max_count):
        position = _round_half_up(i / (max_count - 1) * last_index)
        indices.append(min(max(position, 0), last_index))
    return indices


def sample_evenly(items: Sequence[T], max_count: int) -> list[T]:
    return [items[i] for i in sample_indices(len(items), max_count)]


def _round_half_up(value: float) -> int:
    # half-up, not round()'s half-to-even
    return math.floor(value + 0.5)
