"""Typed errors raised by the inference pipeline.

Every failure surfaces to the caller as one of these; nothing is retried.
``http_status`` is only consulted by the API layer.
"""

from __future__ import annotations

from pathlib import Path


class InferenceError(Exception):
    http_status: int = 500
    default_detail: str = "Inference failed."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class UnsupportedCaptureType(InferenceError):
    http_status = 400
    default_detail = "Unsupported capture type."

    def __init__(self, capture_type: object) -> None:
        value = getattr(capture_type, "value", capture_type)
        super().__init__(f"Unsupported capture type for inference: {value}")
        self.capture_type = capture_type


class InvalidManifest(InferenceError):
    http_status = 422
    default_detail = "Segment manifest is invalid or unreadable."


class UnreadableMedia(InferenceError):
    http_status = 422
    default_detail = "Media file is missing or unreadable."

    def __init__(self, path: Path | str, reason: str = "") -> None:
        message = f"Cannot read media file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = Path(path)


class InvalidRequestURL(InferenceError):
    default_detail = "Failed to build inference request URL."


class TransportError(InferenceError):
    """Non-2xx answer (or no answer at all) from the inference service.

    ``status_code`` is ``None`` when the request never got a response.
    """

    http_status = 502

    def __init__(self, status_code: int | None, body_excerpt: str) -> None:
        if status_code is None:
            message = f"Inference request failed: {body_excerpt}"
        else:
            message = f"Inference request failed with HTTP {status_code}: {body_excerpt}"
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt


class NoModelResponse(InferenceError):
    http_status = 502
    default_detail = "Inference response did not contain a usable candidate."


class InvalidModelJSON(InferenceError):
    http_status = 502
    default_detail = "Model returned malformed JSON output."
