"""Anthropic Claude completion gateway."""

import asyncio
import logging

from anthropic import AsyncAnthropic

from .base import BaseCompletionGateway, GatewayConfig, Sleep

logger = logging.getLogger(__name__)


class AnthropicGateway(BaseCompletionGateway):
    """Completion gateway backed by the Anthropic Messages API."""

    def __init__(
        self,
        config: GatewayConfig,
        *,
        client: AsyncAnthropic | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        super().__init__(config, sleep=sleep)

        # SDK retries are disabled; BaseCompletionGateway owns the retry policy
        self._client = client or AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def _request(self, prompt: str) -> str:
        """Send the prompt as a single user message to Claude."""
        response = await self._client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        logger.debug(
            "Claude answered with %d chars (stop_reason=%s)",
            len(text),
            getattr(response, "stop_reason", None),
        )
        return text

    async def close(self) -> None:
        await self._client.close()
