"""FastAPI dependency injection for services.

The completion gateway is created once per process with @lru_cache and is
read-only afterwards. A failed construction raises ConfigurationError and
is not cached.
"""

from functools import lru_cache

from fastapi import Depends

from config import Settings, get_settings
from llm import CompletionGateway, GatewayConfig
from services.chat import ChatService
from services.document import DocumentExtractor

# --- Cached Singletons ---


@lru_cache
def get_completion_gateway() -> CompletionGateway:
    """Get cached completion gateway (expensive - has API client).

    Raises:
        ConfigurationError: If the API key is missing or a placeholder.
    """
    return CompletionGateway(GatewayConfig.from_settings(get_settings()))


# --- Lightweight Services (per-request is fine) ---


def get_document_extractor() -> DocumentExtractor:
    """Get document extractor (stateless, cheap to create)."""
    return DocumentExtractor()


# --- Composed Services ---


def get_chat_service(
    extractor: DocumentExtractor = Depends(get_document_extractor),
    settings: Settings = Depends(get_settings),
) -> ChatService:
    """Get chat service with injected dependencies.

    The gateway is passed as a provider so configuration problems surface
    only after the request itself has been validated.
    """
    return ChatService(
        extractor=extractor,
        gateway_provider=get_completion_gateway,
        settings=settings,
    )
