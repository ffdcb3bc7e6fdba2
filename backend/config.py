"""Configuration and settings for the JusAI application.

Uses Pydantic Settings loaded from the environment (and optional .env file).
The Anthropic credential is not validated here: the completion gateway
rejects a missing or placeholder key when it is constructed, so the health
endpoint can still report the problem instead of the app failing to boot.
"""

import logging
import sys
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Completion service credential (checked by the gateway)
    anthropic_api_key: str = Field(
        default="", description="Anthropic API key for Claude"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # Upload Limits
    max_file_size_mb: int = Field(default=10, description="Max upload size in MiB")

    # Completion Settings
    llm_model: str = Field(
        default="claude-sonnet-4-20250514", description="Claude model for answers"
    )
    llm_max_tokens: int = Field(default=2048, description="Max tokens for generation")
    llm_temperature: float = Field(
        default=0.2, description="LLM temperature for factual responses"
    )
    llm_timeout_seconds: float = Field(
        default=60.0, description="Overall deadline for one completion attempt"
    )

    # Retry Settings (rate-limited completions only)
    llm_max_attempts: int = Field(
        default=3, ge=1, description="Total attempts including the first call"
    )
    llm_retry_base_delay_seconds: float = Field(
        default=2.0, ge=0, description="First backoff delay, doubled per retry"
    )

    @field_validator("anthropic_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Strip surrounding whitespace from the API key."""
        return (v or "").strip()

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# CORS Configuration
CORS_CONFIG: dict[str, Any] = {
    "allow_origins": [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    "allow_credentials": True,
    "allow_methods": ["GET", "POST", "OPTIONS"],
    "allow_headers": ["*"],
    "expose_headers": ["X-Request-ID"],
    "max_age": 600,
}

# FastAPI App Configuration
APP_CONFIG: dict[str, Any] = {
    "title": "JusAI",
    "description": (
        "Legal document assistant. Upload a contract or other legal document "
        "and ask questions about it in plain language."
    ),
    "version": "0.1.0",
    "docs_url": "/api/docs",
    "redoc_url": "/api/redoc",
    "openapi_url": "/api/openapi.json",
    "openapi_tags": [
        {
            "name": "Health",
            "description": "Completion service configuration status",
        },
        {
            "name": "Chat",
            "description": "Document-grounded legal Q&A",
        },
    ],
}


def get_app_config() -> dict[str, Any]:
    """Get FastAPI application configuration."""
    return APP_CONFIG.copy()


def get_cors_config() -> dict[str, Any]:
    """Get CORS middleware configuration."""
    return CORS_CONFIG.copy()
