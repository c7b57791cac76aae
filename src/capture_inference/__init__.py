"""Capture-segment to activity-label inference for wearable baby-care capture."""

from capture_inference.client import InferenceClient, make_client
from capture_inference.config import ClientConfiguration
from capture_inference.models import ActivityLabel, CaptureEnvelope, CaptureType, InferenceResult

__all__ = [
    "ActivityLabel",
    "CaptureEnvelope",
    "CaptureType",
    "ClientConfiguration",
    "InferenceClient",
    "InferenceResult",
    "make_client",
]
