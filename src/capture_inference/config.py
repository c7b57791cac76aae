"""Client configuration and environment-backed application settings.

:class:`ClientConfiguration` is what the inference core consumes: an
immutable value built once and shared by every ``infer`` call.
:class:`Settings` is only read by the application layer (CLI, API server),
which turns it into a :class:`ClientConfiguration`.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class ClientConfiguration(BaseModel):
    """Credentials, model identifier and payload limits for one client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    model: str = DEFAULT_MODEL
    api_base_url: str = DEFAULT_API_BASE_URL
    max_frames_per_segment: int = Field(8, ge=1)
    max_inline_bytes_per_part: int = Field(1_500_000, gt=0)
    request_timeout: float = Field(60.0, gt=0)


class Settings(BaseSettings):
    """All runtime configuration for the capture-inference service.

    Values are read from environment variables first, then from a *.env* file
    located at the project root.  Variable names are flat (``GEMINI_API_KEY``,
    ``GEMINI_MODEL``, ...).
    """

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Inference service ─────────────────────────────────────
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base_url: str = DEFAULT_API_BASE_URL
    gemini_request_timeout: float = 60.0

    # ── Payload limits ────────────────────────────────────────
    max_frames_per_segment: int = 8
    max_inline_bytes_per_part: int = 1_500_000  # transport caps total request size

    # ── Review policy (caller side) ───────────────────────────
    review_confidence_threshold: float = 0.6

    # ── API server ────────────────────────────────────────────
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_secret_key: str = ""
    media_root: Path | None = None  # when set, /infer only reads media under it

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def api_key(self) -> str:
        return self.gemini_api_key.strip()

    def client_configuration(self) -> ClientConfiguration:
        """Build the immutable configuration handed to the inference client."""
        return ClientConfiguration(
            api_key=self.api_key,
            model=self.gemini_model.strip() or DEFAULT_MODEL,
            api_base_url=self.gemini_api_base_url.strip(),
            max_frames_per_segment=self.max_frames_per_segment,
            max_inline_bytes_per_part=self.max_inline_bytes_per_part,
            request_timeout=self.gemini_request_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance."""
    return Settings()
