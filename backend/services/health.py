"""Completion service health probe.

Builds a client handle from the configured credential without sending a
completion request, so the probe is cheap and free of side effects.
"""

import logging
from dataclasses import dataclass

from config import Settings
from llm import CompletionGateway, ConfigurationError, GatewayConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthStatus:
    """Result of probing the completion service configuration."""

    healthy: bool
    reason: str | None = None
    api_key_configured: bool = False
    model_available: bool = False


async def check_completion_service(settings: Settings) -> HealthStatus:
    """Check that a completion gateway can be constructed."""
    try:
        gateway = CompletionGateway(GatewayConfig.from_settings(settings))
    except ConfigurationError as e:
        logger.warning("Health check: %s", e)
        return HealthStatus(healthy=False, reason=str(e))
    except Exception as e:
        logger.error("Health check: client construction failed: %s", e)
        return HealthStatus(
            healthy=False,
            reason=f"Failed to initialize AI client: {e}",
            api_key_configured=True,
        )

    await gateway.close()
    return HealthStatus(healthy=True, api_key_configured=True, model_available=True)
