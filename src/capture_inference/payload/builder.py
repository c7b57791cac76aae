"""Payload builder: turn a capture envelope into ordered request parts.

Every payload starts with the classification prompt.  Photos and audio
snippets add a single inline part; short videos go through the segment
manifest, which contributes a context line, evenly sampled frames and, when
recorded, the segment's audio track.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from capture_inference.config import ClientConfiguration
from capture_inference.errors import InvalidManifest, UnreadableMedia, UnsupportedCaptureType
from capture_inference.models import (
    ActivityLabel,
    CaptureEnvelope,
    CaptureType,
    InlineDataPart,
    RequestPart,
    TextPart,
)
from capture_inference.payload.sampling import list_frames, sample_evenly
from capture_inference.segments.manifest import format_timestamp, read_manifest

logger = structlog.get_logger(__name__)

FRAME_MIME_TYPE = "image/jpeg"
AUDIO_MIME_TYPE = "audio/wav"

_PHOTO_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".heic": "image/heic",
    ".webp": "image/webp",
}

PROMPT_TEMPLATE = """\
You classify baby-care media into one activity label.
Allowed labels: {labels}.
Use only evidence in the media.
Return JSON only following the schema.
Capture metadata: type={capture_type}, capturedAt={captured_at}."""


def prompt_text(capture: CaptureEnvelope) -> str:
    return PROMPT_TEMPLATE.format(
        labels=", ".join(label.value for label in ActivityLabel),
        capture_type=capture.capture_type.value,
        captured_at=format_timestamp(capture.captured_at),
    )


class PayloadBuilder:
    """Assemble the multimodal parts for one capture.

    Parameters
    ----------
    configuration : ClientConfiguration
        Supplies ``max_frames_per_segment`` and ``max_inline_bytes_per_part``.
    """

    def __init__(self, configuration: ClientConfiguration) -> None:
        self._max_frames = configuration.max_frames_per_segment
        self._max_part_bytes = configuration.max_inline_bytes_per_part

    def build(self, capture: CaptureEnvelope) -> list[RequestPart]:
        """Return the prompt followed by the capture's media parts."""
        if capture.capture_type == CaptureType.PHOTO:
            mime_type = _PHOTO_MIME_TYPES.get(capture.local_media_path.suffix.lower(), FRAME_MIME_TYPE)
            media: list[RequestPart] = [
                InlineDataPart(mime_type=mime_type, data=_read_media(capture.local_media_path))
            ]
        elif capture.capture_type == CaptureType.AUDIO_SNIPPET:
            media = [InlineDataPart(mime_type=AUDIO_MIME_TYPE, data=_read_media(capture.local_media_path))]
        elif capture.capture_type == CaptureType.SHORT_VIDEO:
            media = self.build_segment_parts(capture.local_media_path)
        else:
            raise UnsupportedCaptureType(capture.capture_type)

        return [TextPart(text=prompt_text(capture)), *media]

    def build_segment_parts(self, manifest_path: Path) -> list[RequestPart]:
        """Parts for one video segment: context text, frames, then audio.

        Raises :class:`InvalidManifest` if the manifest is unreadable, its
        frames directory is missing, or no media part survives the size gate.
        """
        manifest_path = Path(manifest_path)
        manifest = read_manifest(manifest_path)
        segment_dir = manifest_path.parent

        parts: list[RequestPart] = [
            TextPart(
                text=(
                    f"Segment context: frameCount={manifest.frame_count}, "
                    f"startedAt={format_timestamp(manifest.started_at)}, "
                    f"endedAt={format_timestamp(manifest.ended_at)}."
                )
            )
        ]

        frames_dir = manifest.frames_path(segment_dir)
        if not frames_dir.is_dir():
            logger.warning("manifest.frames_missing", manifest=str(manifest_path), frames_dir=str(frames_dir))
            raise InvalidManifest(f"Frames directory {frames_dir} does not exist.")

        try:
            frames = list_frames(frames_dir)
        except OSError as exc:
            raise InvalidManifest(f"Cannot list frames directory {frames_dir}: {exc}") from exc

        sampled = sample_evenly(frames, self._max_frames)
        for frame in sampled:
            data = _read_media(frame)
            if self._fits(data):
                parts.append(InlineDataPart(mime_type=FRAME_MIME_TYPE, data=data))
            else:
                logger.debug("payload.frame_dropped", frame=frame.name, size=len(data), limit=self._max_part_bytes)

        audio_path = manifest.audio_path(segment_dir)
        if manifest.audio.is_recorded and audio_path is not None and audio_path.is_file():
            data = _read_media(audio_path)
            if self._fits(data):
                parts.append(InlineDataPart(mime_type=AUDIO_MIME_TYPE, data=data))
            else:
                logger.debug("payload.audio_dropped", size=len(data), limit=self._max_part_bytes)

        if len(parts) <= 1:
            raise InvalidManifest(f"Segment {manifest_path} has no usable media.")

        logger.info(
            "payload.segment_built",
            frames_found=len(frames),
            frames_sampled=len(sampled),
            parts=len(parts),
        )
        return parts

    def _fits(self, data: bytes) -> bool:
        return len(data) <= self._max_part_bytes


def _read_media(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise UnreadableMedia(path, exc.strerror or str(exc)) from exc
