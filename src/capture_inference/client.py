"""Inference client: capture envelope in, :class:`InferenceResult` out.

Usage::

    client = InferenceClient(ClientConfiguration(api_key="..."))
    result = await client.infer(envelope)

Each call builds the payload, makes exactly one request and normalises the
answer.  The first failure propagates as a typed
:class:`~capture_inference.errors.InferenceError`; there are no retries and
no caching.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog

from capture_inference.config import ClientConfiguration, Settings, get_settings
from capture_inference.errors import UnsupportedCaptureType
from capture_inference.labels import clamp_confidence, normalize_label
from capture_inference.models import CaptureEnvelope, CaptureType, InferenceResult
from capture_inference.payload.builder import PayloadBuilder
from capture_inference.protocol.gemini import GeminiProtocol
from capture_inference.protocol.schema import ModelOutput

logger = structlog.get_logger(__name__)


def to_inference_result(output: ModelOutput, fallback_model_version: str) -> InferenceResult:
    return InferenceResult(
        label=normalize_label(output.label),
        confidence=clamp_confidence(output.confidence),
        rationale_short=output.rationale_short,
        model_version=output.model_version or fallback_model_version,
    )


class InferenceClient:
    """Classify one capture per :meth:`infer` call.

    The configuration is immutable and the client keeps no per-call state,
    so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        configuration: ClientConfiguration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._configuration = configuration
        self._builder = PayloadBuilder(configuration)
        self._protocol = GeminiProtocol(configuration, transport=transport)
        self.model_name = configuration.model

    @property
    def configuration(self) -> ClientConfiguration:
        return self._configuration

    async def infer(self, capture: CaptureEnvelope) -> InferenceResult:
        try:
            capture_type = CaptureType(capture.capture_type)
        except ValueError:
            raise UnsupportedCaptureType(capture.capture_type) from None
        if capture_type is not capture.capture_type:
            capture = capture.model_copy(update={"capture_type": capture_type})

        log = logger.bind(capture_type=capture_type.value, path=str(capture.local_media_path))
        # file reads run off the event loop; part order is fixed by the builder
        parts = await asyncio.to_thread(self._builder.build, capture)
        output = await self._protocol.submit(parts)
        result = to_inference_result(output, fallback_model_version=self._configuration.model)

        log.info(
            "inference.completed",
            label=result.label.value,
            confidence=result.confidence,
            model_version=result.model_version,
        )
        return result


def make_client(settings: Settings | None = None) -> InferenceClient | None:
    """Build a client from application settings.

    Returns ``None`` when no API key is configured.
    """
    settings = settings or get_settings()
    if not settings.api_key:
        logger.info("inference.client_disabled", reason="missing_api_key")
        return None
    return InferenceClient(settings.client_configuration())
