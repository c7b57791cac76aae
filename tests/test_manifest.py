"""Tests for the segment manifest reader."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from capture_inference.errors import InvalidManifest
from capture_inference.segments.manifest import read_manifest


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "manifest.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return path


def _manifest(**overrides):
    data = {
        "startedAt": "2025-03-01T10:00:00Z",
        "endedAt": "2025-03-01T10:00:12Z",
        "frameCount": 24,
        "framesDirectory": "frames",
        "audio": {"included": True, "status": "recorded", "localFileName": "audio.wav"},
    }
    data.update(overrides)
    return data


class TestReadManifest:
    def test_reads_valid_manifest(self, tmp_path: Path):
        manifest = read_manifest(_write(tmp_path, _manifest()))
        assert manifest.frame_count == 24
        assert manifest.frames_directory == "frames"
        assert manifest.started_at == datetime(2025, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert manifest.audio.is_recorded
        assert manifest.frames_path(tmp_path) == tmp_path / "frames"
        assert manifest.audio_path(tmp_path) == tmp_path / "audio.wav"

    def test_audio_file_name_is_optional(self, tmp_path: Path):
        manifest = read_manifest(_write(tmp_path, _manifest(audio={"included": False, "status": "none"})))
        assert manifest.audio.local_file_name is None
        assert manifest.audio_path(tmp_path) is None
        assert not manifest.audio.is_recorded

    def test_unknown_keys_ignored(self, tmp_path: Path):
        manifest = read_manifest(_write(tmp_path, _manifest(schemaVersion=2, deviceId="glasses-1")))
        assert manifest.frame_count == 24

    def test_does_not_require_frames_directory_on_disk(self, tmp_path: Path):
        read_manifest(_write(tmp_path, _manifest(framesDirectory="missing")))

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(InvalidManifest):
            read_manifest(tmp_path / "nope.json")

    def test_not_json(self, tmp_path: Path):
        with pytest.raises(InvalidManifest):
            read_manifest(_write(tmp_path, "not json {"))

    @pytest.mark.parametrize("field", ["startedAt", "endedAt", "frameCount", "framesDirectory", "audio"])
    def test_missing_required_field(self, tmp_path: Path, field: str):
        data = _manifest()
        del data[field]
        with pytest.raises(InvalidManifest, match=field):
            read_manifest(_write(tmp_path, data))

    def test_bad_timestamp(self, tmp_path: Path):
        with pytest.raises(InvalidManifest):
            read_manifest(_write(tmp_path, _manifest(startedAt="yesterday")))

    def test_end_before_start(self, tmp_path: Path):
        with pytest.raises(InvalidManifest):
            read_manifest(_write(tmp_path, _manifest(endedAt="2025-03-01T09:59:00Z")))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"frameCount": "24"},
            {"startedAt": 1740823200, "endedAt": 1740823212},
            {"audio": {"included": "yes", "status": "recorded", "localFileName": "audio.wav"}},
            {"audio": {"included": 1, "status": "recorded", "localFileName": "audio.wav"}},
        ],
    )
    def test_wrong_json_types_rejected(self, tmp_path: Path, overrides):
        with pytest.raises(InvalidManifest):
            read_manifest(_write(tmp_path, _manifest(**overrides)))
