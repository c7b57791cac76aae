"""Payload sub-package — request-part assembly and frame sampling."""

from capture_inference.payload.builder import PayloadBuilder
from capture_inference.payload.sampling import sample_evenly, sample_indices

__all__ = ["PayloadBuilder", "sample_evenly", "sample_indices"]
