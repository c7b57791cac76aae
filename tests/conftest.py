"""Shared pytest fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from capture_inference.config import ClientConfiguration

FAKE_JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32 + b"\xff\xd9"
FAKE_WAV = b"RIFF\x24\x00\x00\x00WAVEfmt " + b"\x00" * 24


@pytest.fixture
def configuration() -> ClientConfiguration:
    return ClientConfiguration(
        api_key="test-key",
        model="gemini-test",
        api_base_url="https://gemini.test/v1beta",
        max_frames_per_segment=8,
        max_inline_bytes_per_part=1_000,
    )


@pytest.fixture
def photo_file(tmp_path: Path) -> Path:
    path = tmp_path / "photo.jpg"
    path.write_bytes(FAKE_JPEG)
    return path


@pytest.fixture
def make_segment(tmp_path: Path) -> Callable[..., Path]:
    """Write a segment (frames + optional audio + manifest) and return the manifest path."""

    def _make(
        frames: list[bytes] | None = None,
        *,
        frame_names: list[str] | None = None,
        audio: bytes | None = None,
        audio_status: str = "recorded",
        audio_included: bool = True,
        manifest_overrides: dict[str, Any] | None = None,
        create_frames_dir: bool = True,
    ) -> Path:
        segment_dir = tmp_path / "segment"
        frames_dir = segment_dir / "frames"
        segment_dir.mkdir(exist_ok=True)
        frames = frames if frames is not None else [FAKE_JPEG] * 3
        if create_frames_dir:
            frames_dir.mkdir(exist_ok=True)
            names = frame_names or [f"frame_{i:04d}.jpg" for i in range(len(frames))]
            for name, data in zip(names, frames):
                (frames_dir / name).write_bytes(data)

        audio_block: dict[str, Any] = {"included": audio_included, "status": audio_status}
        if audio is not None:
            (segment_dir / "audio.wav").write_bytes(audio)
            audio_block["localFileName"] = "audio.wav"

        manifest = {
            "startedAt": "2025-03-01T10:00:00Z",
            "endedAt": "2025-03-01T10:00:12Z",
            "frameCount": len(frames),
            "framesDirectory": "frames",
            "audio": audio_block,
        }
        manifest.update(manifest_overrides or {})
        path = segment_dir / "manifest.json"
        path.write_text(json.dumps(manifest))
        return path

    return _make


def gemini_body(output: dict[str, Any] | str) -> dict[str, Any]:
    """A generateContent response whose single text part carries *output*."""
    text = output if isinstance(output, str) else json.dumps(output)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class StubGemini:
    """Records requests and answers with a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else gemini_body(
            {"label": "diaperWet", "confidence": 0.92, "rationaleShort": "visible diaper change"}
        )
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def sent_json(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def stub_gemini() -> StubGemini:
    return StubGemini()
