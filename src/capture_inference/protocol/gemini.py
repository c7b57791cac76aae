"""Gemini ``generateContent`` transport and response handling.

One POST per :meth:`GeminiProtocol.submit`; nothing is retried.  The
response is reduced to the first candidate's first non-empty text part, which
is sanitised and parsed into :class:`ModelOutput`.
"""

from __future__ import annotations

from typing import Sequence

import httpx
import structlog
from pydantic import ValidationError

from capture_inference.config import ClientConfiguration
from capture_inference.errors import InvalidModelJSON, InvalidRequestURL, NoModelResponse, TransportError
from capture_inference.models import RequestPart
from capture_inference.protocol.schema import GenerateContentResponse, ModelOutput, build_request_body

logger = structlog.get_logger(__name__)

BODY_EXCERPT_LIMIT = 500
_FENCE = "```"


def build_endpoint(configuration: ClientConfiguration) -> httpx.URL:
    """``{base}/models/{model}:generateContent?key=...``.

    Raises :class:`InvalidRequestURL` for a base URL that is not absolute
    http(s) or an empty model identifier.
    """
    base = configuration.api_base_url.rstrip("/")
    model = configuration.model.strip()
    if not model:
        raise InvalidRequestURL("Model identifier is empty.")
    try:
        url = httpx.URL(f"{base}/models/{model}:generateContent")
    except httpx.InvalidURL as exc:
        raise InvalidRequestURL(f"Invalid inference endpoint: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidRequestURL(f"Inference base URL must be absolute http(s): {configuration.api_base_url!r}")
    return url.copy_merge_params({"key": configuration.api_key})


def sanitize_model_json(raw_text: str) -> str:
    """Strip a Markdown code fence around the model's JSON, if present.

    Only fenced text is touched: everything outside the first ``{`` and the
    last ``}`` is dropped.  Unfenced text is returned trimmed.
    """
    trimmed = raw_text.strip()
    if trimmed.startswith(_FENCE):
        first = trimmed.find("{")
        last = trimmed.rfind("}")
        if first != -1 and last > first:
            return trimmed[first:last + 1]
    return trimmed


def parse_model_output(raw_text: str) -> ModelOutput:
    try:
        return ModelOutput.model_validate_json(sanitize_model_json(raw_text))
    except ValidationError as exc:
        logger.warning("gemini.invalid_model_json", errors=exc.error_count(), text_length=len(raw_text))
        raise InvalidModelJSON() from exc


def extract_model_text(body: bytes) -> str:
    try:
        envelope = GenerateContentResponse.model_validate_json(body)
    except ValidationError as exc:
        raise NoModelResponse("Inference response body is not a generateContent envelope.") from exc
    text = envelope.first_text()
    if text is None:
        raise NoModelResponse()
    return text


class GeminiProtocol:
    """Send ordered request parts to Gemini and return the parsed output.

    Parameters
    ----------
    configuration : ClientConfiguration
        Endpoint, credential and timeout.
    transport : httpx.AsyncBaseTransport, optional
        Replaces the network transport (tests pass an ``httpx.MockTransport``).
    """

    def __init__(
        self,
        configuration: ClientConfiguration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._configuration = configuration
        self._transport = transport

    async def submit(self, parts: Sequence[RequestPart]) -> ModelOutput:
        url = build_endpoint(self._configuration)
        body = build_request_body(parts)
        logger.info("gemini.request", model=self._configuration.model, parts=len(parts))

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._configuration.request_timeout,
            ) as client:
                resp = await client.post(url, json=body)
        except httpx.RequestError as exc:
            logger.warning("gemini.request_failed", error=type(exc).__name__)
            raise TransportError(None, f"{type(exc).__name__}: {exc}"[:BODY_EXCERPT_LIMIT]) from exc

        if not resp.is_success:
            excerpt = resp.content.decode("utf-8", errors="replace")[:BODY_EXCERPT_LIMIT]
            logger.warning("gemini.http_error", status=resp.status_code)
            raise TransportError(resp.status_code, excerpt)

        return parse_model_output(extract_model_text(resp.content))
