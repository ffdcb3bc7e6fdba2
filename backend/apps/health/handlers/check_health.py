"""GET /health - Check that the completion service is usable."""

from datetime import UTC, datetime

from fastapi import Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from config import Settings, get_settings
from services.health import check_completion_service

# --- Response Schemas ---


class HealthResponse(BaseModel):
    """Health check response."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="healthy or error")
    message: str = Field(..., description="Human-readable status detail")
    api_key_configured: bool = Field(..., alias="apiKeyConfigured")
    model_available: bool = Field(..., alias="modelAvailable")
    model: str = Field(..., description="Configured completion model")
    timestamp: datetime


# --- Handler ---


async def check_health(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """Probe the completion service configuration without calling the model."""
    health = await check_completion_service(settings)

    body = HealthResponse(
        status="healthy" if health.healthy else "error",
        message=(
            "AI service API key is configured and the client initialized"
            if health.healthy
            else health.reason or "AI service is not available"
        ),
        api_key_configured=health.api_key_configured,
        model_available=health.model_available,
        model=settings.llm_model,
        timestamp=datetime.now(UTC),
    )

    return JSONResponse(
        status_code=200 if health.healthy else 500,
        content=body.model_dump(mode="json", by_alias=True),
    )
