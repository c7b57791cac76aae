"""Segment manifest reader.

A manifest is written by the capture subsystem next to the frames of one
video segment::

    {
      "startedAt": "2025-03-01T10:00:00Z",
      "endedAt": "2025-03-01T10:00:12Z",
      "frameCount": 24,
      "framesDirectory": "frames",
      "audio": {"included": true, "status": "recorded", "localFileName": "audio.wav"}
    }

The format belongs to the producer, so keys this reader does not know about
are ignored rather than rejected.  Known keys must carry their JSON types:
a quoted number, a numeric flag or an epoch timestamp is invalid.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from capture_inference.errors import InvalidManifest

logger = structlog.get_logger(__name__)

RECORDED_STATUS = "recorded"


class AudioDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True, extra="ignore")

    included: bool
    status: str
    local_file_name: str | None = Field(None, alias="localFileName")

    @property
    def is_recorded(self) -> bool:
        return self.included and self.status == RECORDED_STATUS and bool(self.local_file_name)


class SegmentManifest(BaseModel):
    """Decoded manifest of one captured video segment.

    ``frame_count`` is what the producer declared; sampling works from the
    files actually found in the frames directory.
    """

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True, extra="ignore")

    started_at: datetime = Field(alias="startedAt")
    ended_at: datetime = Field(alias="endedAt")
    frame_count: int = Field(alias="frameCount", ge=0)
    frames_directory: str = Field(alias="framesDirectory")
    audio: AudioDescriptor

    @model_validator(mode="after")
    def _check_interval(self) -> SegmentManifest:
        if as_utc(self.ended_at) < as_utc(self.started_at):
            raise ValueError("endedAt precedes startedAt")
        return self

    def frames_path(self, manifest_dir: Path) -> Path:
        return manifest_dir / self.frames_directory

    def audio_path(self, manifest_dir: Path) -> Path | None:
        if not self.audio.local_file_name:
            return None
        return manifest_dir / self.audio.local_file_name


def read_manifest(manifest_path: Path | str) -> SegmentManifest:
    """Load and validate the manifest at *manifest_path*.

    Raises :class:`InvalidManifest` when the file is unreadable, is not JSON,
    or does not have the required shape.  Whether the frames directory exists
    is checked later, by the payload builder.
    """
    path = Path(manifest_path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.warning("manifest.unreadable", path=str(path), error=str(exc))
        raise InvalidManifest(f"Cannot read segment manifest {path}: {exc.strerror or exc}") from exc

    try:
        return SegmentManifest.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("manifest.invalid", path=str(path), errors=exc.error_count())
        raise InvalidManifest(f"Segment manifest {path} is invalid: {_summarise(exc)}") from exc


def as_utc(value: datetime) -> datetime:
    """Naive timestamps from the capture side are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def _summarise(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(p) for p in first["loc"]) or "<document>"
    return f"{location}: {first['msg']}"
