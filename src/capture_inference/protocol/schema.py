"""Wire shapes for the Gemini ``generateContent`` API.

Covers the outbound request body (ordered content parts plus a response
schema constraint) and the two inbound shapes: the response envelope and the
JSON document the model is asked to produce.
"""

from __future__ import annotations

import base64
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field

from capture_inference.models import ActivityLabel, InlineDataPart, RequestPart, TextPart

RATIONALE_MAX_LENGTH = 160
MODEL_VERSION_MAX_LENGTH = 80

ACTIVITY_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "label": {
            "type": "STRING",
            "enum": [label.value for label in ActivityLabel],
        },
        "confidence": {
            "type": "NUMBER",
            "minimum": 0,
            "maximum": 1,
        },
        "rationaleShort": {
            "type": "STRING",
            "maxLength": RATIONALE_MAX_LENGTH,
        },
        "modelVersion": {
            "type": "STRING",
            "maxLength": MODEL_VERSION_MAX_LENGTH,
        },
    },
    "required": ["label", "confidence", "rationaleShort"],
}


# ── Outbound ──────────────────────────────────────────────────


def encode_part(part: RequestPart) -> dict[str, Any]:
    if isinstance(part, TextPart):
        return {"text": part.text}
    if isinstance(part, InlineDataPart):
        return {
            "inline_data": {
                "mime_type": part.mime_type,
                "data": base64.b64encode(part.data).decode("ascii"),
            }
        }
    raise TypeError(f"Unknown request part: {type(part).__name__}")


def build_request_body(parts: Sequence[RequestPart]) -> dict[str, Any]:
    """Request body with *parts* in their original order."""
    return {
        "contents": [
            {"role": "user", "parts": [encode_part(p) for p in parts]},
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": ACTIVITY_RESPONSE_SCHEMA,
        },
    }


# ── Inbound ───────────────────────────────────────────────────


class _ResponsePart(BaseModel):
    text: str | None = None


class _CandidateContent(BaseModel):
    parts: list[_ResponsePart] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: _CandidateContent | None = None


class GenerateContentResponse(BaseModel):
    candidates: list[_Candidate] | None = None

    def first_text(self) -> str | None:
        """First non-empty text part of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None:
            return None
        for part in content.parts:
            if part.text:
                return part.text
        return None


class ModelOutput(BaseModel):
    """The JSON object the model was constrained to return.

    Types are strict: a quoted number or a numeric label is rejected rather
    than coerced.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    label: str
    confidence: float
    rationale_short: str = Field(alias="rationaleShort")
    model_version: str | None = Field(None, alias="modelVersion")
