"""Protocol sub-package — Gemini request encoding and response parsing."""

from capture_inference.protocol.gemini import GeminiProtocol, sanitize_model_json
from capture_inference.protocol.schema import ACTIVITY_RESPONSE_SCHEMA, ModelOutput

__all__ = ["ACTIVITY_RESPONSE_SCHEMA", "GeminiProtocol", "ModelOutput", "sanitize_model_json"]
