"""Request guards for the inference endpoint.

``require_api_key`` is a no-op while ``API_SECRET_KEY`` is unset.
``resolve_media_path`` confines capture paths to ``MEDIA_ROOT`` when one is
configured.
"""

from __future__ import annotations

import secrets
from pathlib import Path

import structlog
from fastapi import Header, HTTPException

from capture_inference.config import get_settings

logger = structlog.get_logger(__name__)


async def require_api_key(
    x_api_key: str | None = Header(None),
    authorization: str | None = Header(None),
) -> None:
    expected = get_settings().api_secret_key
    if not expected:
        return

    supplied = x_api_key or _extract_bearer(authorization or "")
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise HTTPException(401, "Invalid or missing API key.")


def resolve_media_path(path: Path) -> Path:
    """Return *path* resolved, or raise 403 if it lies outside the media root."""
    media_root = get_settings().media_root
    if media_root is None:
        return path

    root = media_root.resolve()
    candidate = (path if path.is_absolute() else root / path).resolve()
    if not candidate.is_relative_to(root):
        logger.warning("auth.media_path_rejected", path=str(path))
        raise HTTPException(403, "Media path is outside the configured media root.")
    return candidate


def _extract_bearer(auth_header: str) -> str:
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return ""
