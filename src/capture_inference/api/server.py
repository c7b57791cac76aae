"""FastAPI application exposing capture inference over HTTP.

The capture app posts a capture envelope that references media already on
local storage; the service classifies it and returns the result together
with the caller-side review flag.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from capture_inference.api.auth import require_api_key, resolve_media_path
from capture_inference.api.schemas import InferRequest, InferResponse, LabelInfo
from capture_inference.client import InferenceClient, make_client
from capture_inference.config import get_settings
from capture_inference.errors import InferenceError
from capture_inference.models import ActivityLabel, CaptureEnvelope

logger = structlog.get_logger(__name__)

_client: InferenceClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the inference client once; it is shared by every request."""
    global _client

    _client = make_client(get_settings())
    logger.info("server.ready", inference_enabled=_client is not None)
    yield
    _client = None
    logger.info("server.shutdown")


app = FastAPI(
    title="Capture Inference",
    description="Classify wearable baby-care captures into activity labels.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(InferenceError)
async def inference_error_handler(request: Request, exc: InferenceError) -> JSONResponse:
    logger.warning("inference.failed", error=type(exc).__name__, detail=exc.detail)
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": type(exc).__name__, "detail": exc.detail},
    )


def get_client() -> InferenceClient:
    if _client is None:
        raise HTTPException(503, "Inference is not configured (GEMINI_API_KEY is missing).")
    return _client


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok", "model": _client.model_name if _client else None}


@app.get("/labels", response_model=list[LabelInfo], tags=["inference"])
async def list_labels():
    return [LabelInfo(label=label, display_name=label.display_name) for label in ActivityLabel]


@app.post(
    "/infer",
    response_model=InferResponse,
    tags=["inference"],
    dependencies=[Depends(require_api_key)],
)
async def infer(req: InferRequest, client: InferenceClient = Depends(get_client)):
    envelope = CaptureEnvelope(
        capture_type=req.capture_type,
        local_media_path=resolve_media_path(req.local_media_path),
        captured_at=req.captured_at or datetime.now(timezone.utc),
    )
    result = await client.infer(envelope)
    return InferResponse.from_result(result, get_settings().review_confidence_threshold)
