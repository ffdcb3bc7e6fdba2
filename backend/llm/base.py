"""Base completion gateway.

Defines the provider-agnostic part of talking to a completion service:
credential checks at construction, the overall call deadline, failure
classification and the bounded retry policy for rate-limited calls.
Providers only implement ``_request``.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from config import Settings
from llm.errors import (
    CompletionErrorKind,
    CompletionResult,
    ConfigurationError,
    classify_error,
)

logger = logging.getLogger(__name__)

# Values shipped in sample .env files; treated the same as no key at all
PLACEHOLDER_API_KEYS = frozenset(
    {
        "your_anthropic_api_key_here",
        "your-anthropic-api-key",
        "your_api_key_here",
        "your-api-key",
        "<your-api-key>",
        "sk-ant-xxx",
        "changeme",
    }
)

Sleep = Callable[[float], Awaitable[None]]


def ensure_credential(api_key: str | None) -> str:
    """Return the API key, or raise ConfigurationError if it is unusable."""
    key = (api_key or "").strip()
    if not key:
        raise ConfigurationError(
            "Anthropic API key not configured. Set ANTHROPIC_API_KEY."
        )
    if key.lower() in PLACEHOLDER_API_KEYS:
        raise ConfigurationError(
            "Anthropic API key is still set to a placeholder value. "
            "Set ANTHROPIC_API_KEY to a real key."
        )
    return key


@dataclass(frozen=True)
class GatewayConfig:
    """Immutable configuration for a completion gateway."""

    api_key: str
    model: str
    max_tokens: int = 2048
    temperature: float = 0.2
    timeout_seconds: float = 60.0
    max_attempts: int = 3
    initial_backoff_seconds: float = 2.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
            timeout_seconds=settings.llm_timeout_seconds,
            max_attempts=settings.llm_max_attempts,
            initial_backoff_seconds=settings.llm_retry_base_delay_seconds,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-based)."""
        return self.initial_backoff_seconds * 2 ** (attempt - 1)


class BaseCompletionGateway(ABC):
    """Abstract completion gateway.

    Raises ConfigurationError on construction if the credential is missing
    or a placeholder. Instances hold no mutable state after construction
    and are shared across concurrent requests.
    """

    def __init__(self, config: GatewayConfig, *, sleep: Sleep = asyncio.sleep) -> None:
        ensure_credential(config.api_key)
        self.config = config
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self.config.model

    @abstractmethod
    async def _request(self, prompt: str) -> str:
        """Send one completion request and return the generated text.

        Provider errors are raised unchanged; classification happens in
        :meth:`complete`.
        """

    async def close(self) -> None:
        """Release provider resources."""

    async def complete(self, prompt: str) -> CompletionResult:
        """Generate an answer for ``prompt``.

        Only rate-limited attempts are retried, with exponential backoff
        (2s, 4s, ... by default) up to ``max_attempts`` attempts in total.
        Every other failure is returned after the first attempt. The whole
        call, backoff included, is bounded by ``timeout_seconds``.
        """
        attempt = 0
        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                while True:
                    attempt += 1
                    result = await self._attempt(prompt, attempt)

                    if result.ok:
                        return result
                    if result.failure.kind is not CompletionErrorKind.RATE_LIMITED:
                        return result

                    if attempt >= self.config.max_attempts:
                        logger.error("Still rate limited after %d attempts", attempt)
                        return result

                    delay = self.config.backoff_delay(attempt)
                    logger.warning(
                        "Rate limited (attempt %d/%d), retrying in %.1fs",
                        attempt,
                        self.config.max_attempts,
                        delay,
                    )
                    await self._sleep(delay)
        except TimeoutError:
            logger.error(
                "Completion timed out after %.1fs", self.config.timeout_seconds
            )
            return CompletionResult.failed(
                CompletionErrorKind.TRANSIENT_NETWORK,
                f"Completion timed out after {self.config.timeout_seconds:g}s",
                attempts=attempt,
            )

    async def _attempt(self, prompt: str, attempt: int) -> CompletionResult:
        """Run one request and classify any failure."""
        try:
            text = await self._request(prompt)
        except Exception as e:
            kind = classify_error(e)
            message = str(e) or type(e).__name__
            if kind is CompletionErrorKind.RATE_LIMITED:
                logger.warning("Completion rate limited: %s", message)
            else:
                logger.error("Completion failed (%s): %s", kind.value, message)
            return CompletionResult.failed(kind, message, attempts=attempt)

        return CompletionResult.success(text, attempts=attempt)
