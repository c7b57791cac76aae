"""Request / response models for the HTTP API."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from capture_inference.models import ActivityLabel, CaptureType, InferenceResult


class InferRequest(BaseModel):
    capture_type: CaptureType
    local_media_path: Path
    captured_at: datetime | None = None  # defaults to receipt time


class InferResponse(BaseModel):
    label: ActivityLabel
    display_name: str
    confidence: float
    rationale_short: str
    model_version: str
    needs_review: bool

    @classmethod
    def from_result(cls, result: InferenceResult, review_threshold: float) -> InferResponse:
        return cls(
            label=result.label,
            display_name=result.label.display_name,
            confidence=result.confidence,
            rationale_short=result.rationale_short,
            model_version=result.model_version,
            needs_review=result.needs_review(review_threshold),
        )


class LabelInfo(BaseModel):
    label: ActivityLabel
    display_name: str
