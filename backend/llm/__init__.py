"""LLM module - completion gateway and prompts.

Usage:
    from llm import CompletionGateway, GatewayConfig

    gateway = CompletionGateway(GatewayConfig.from_settings(settings))
    result = await gateway.complete(prompt)
    if result.ok:
        print(result.text)

Structure:
    - errors.py: Error taxonomy and classification (classify_error)
    - base.py: Credential checks, deadline and retry loop (BaseCompletionGateway)
    - anthropic.py: Claude implementation (AnthropicGateway)
    - prompts/: Instructions and prompt assembly
"""

from llm.anthropic import AnthropicGateway
from llm.base import BaseCompletionGateway, GatewayConfig, ensure_credential
from llm.errors import (
    CompletionErrorKind,
    CompletionFailure,
    CompletionResult,
    ConfigurationError,
    classify_error,
)
from llm.prompts import LEGAL_ASSISTANT_INSTRUCTIONS, assemble_prompt

# Default provider - can be swapped by changing this alias
CompletionGateway = AnthropicGateway

__all__ = [
    "AnthropicGateway",
    "BaseCompletionGateway",
    "CompletionErrorKind",
    "CompletionFailure",
    "CompletionGateway",
    "CompletionResult",
    "ConfigurationError",
    "GatewayConfig",
    "LEGAL_ASSISTANT_INSTRUCTIONS",
    "assemble_prompt",
    "classify_error",
    "ensure_credential",
]
