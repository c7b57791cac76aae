"""Tests for label normalisation and confidence clamping."""

import pytest

from capture_inference.labels import clamp_confidence, normalize_label
from capture_inference.models import ActivityLabel


class TestNormalizeLabel:
    @pytest.mark.parametrize("label", list(ActivityLabel))
    def test_canonical_values(self, label: ActivityLabel):
        assert normalize_label(label.value) is label

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("DIAPER_WET", ActivityLabel.DIAPER_WET),
            ("diaper_bowel", ActivityLabel.DIAPER_BOWEL),
            ("Feeding", ActivityLabel.FEEDING),
            ("SLEEP_START", ActivityLabel.SLEEP_START),
            ("baby_asleep", ActivityLabel.SLEEP_START),
            ("BabyAsleep", ActivityLabel.SLEEP_START),
            ("wake_up", ActivityLabel.WAKE_UP),
            ("baby_wakes_up", ActivityLabel.WAKE_UP),
            ("OTHER", ActivityLabel.OTHER),
        ],
    )
    def test_aliases(self, raw: str, expected: ActivityLabel):
        assert normalize_label(raw) is expected

    @pytest.mark.parametrize(
        "raw",
        ["", " ", "bath time", "diaper wet", "diaper-wet", "crying", "null", "💤", "feeding!!", "\x00"],
    )
    def test_unknown_falls_back_to_other(self, raw: str):
        assert normalize_label(raw) is ActivityLabel.OTHER

    def test_always_in_vocabulary(self):
        samples = ["", "x" * 10_000, "Sleep_Start_", "__", "wakeUp ", "diaperWET"]
        for raw in samples:
            assert normalize_label(raw) in set(ActivityLabel)


class TestClampConfidence:
    @pytest.mark.parametrize(
        "raw,expected",
        [(-0.5, 0.0), (0.0, 0.0), (0.5, 0.5), (1.0, 1.0), (1.7, 1.0)],
    )
    def test_clamps_to_unit_interval(self, raw: float, expected: float):
        assert clamp_confidence(raw) == expected

    def test_nan_is_zero(self):
        assert clamp_confidence(float("nan")) == 0.0

    def test_infinities(self):
        assert clamp_confidence(float("inf")) == 1.0
        assert clamp_confidence(float("-inf")) == 0.0
