"""
Application Configuration - Environment-based settings

Uses Pydantic Settings for type-safe configuration.
Centralized configuration for the pixelcount service.
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


# Project root: two levels up from pixelcount/core/config.py
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # ─────────────────────────────────────────────
    # Application
    # ─────────────────────────────────────────────
    service_name: str = "pixelcount"
    environment: str = Field(default="development", alias="ENV")
    log_level: str = "INFO"
    debug: bool = False

    # ─────────────────────────────────────────────
    # Document
    # ─────────────────────────────────────────────
    document_path: str = Field(
        default="data/document.json",
        alias="PIXELCOUNT_DOCUMENT",
        description="Document JSON served by the API. Deferred page files resolve next to it.",
    )

    # ─────────────────────────────────────────────
    # Observability
    # ─────────────────────────────────────────────
    otlp_endpoint: Optional[str] = Field(default=None, alias="OTLP_ENDPOINT")

    # ─────────────────────────────────────────────
    # API
    # ─────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    allowed_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to reach the display API.",
    )
    event_queue_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum UI messages buffered per event stream subscriber.",
    )
    event_keepalive_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Idle seconds before the event stream sends a keepalive and rechecks the client.",
    )

    # ─── Computed properties ────────────────────

    @property
    def document_path_absolute(self) -> Path:
        """Resolve document_path to absolute path from project root."""
        path = Path(self.document_path)
        if not path.is_absolute():
            path = _PROJECT_ROOT / path
        return path.resolve()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


# Global settings instance
settings = Settings()
