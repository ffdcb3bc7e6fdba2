"""Services module for the document Q&A pipeline.

Contains:
- Document text extraction
- Client-supplied chat history parsing
- Shared request-scoped types

The chat orchestration (services.chat) and the health probe
(services.health) depend on the llm package and are imported directly.
Service instances are managed via dependencies.py using FastAPI DI.
"""

from services.chat_history import parse_chat_history
from services.document import (
    DocumentExtractor,
    DocumentKind,
    ExtractionFailedError,
    UnsupportedMediaTypeError,
    resolve_media_type,
    sanitize_filename,
)
from services.types import (
    ChatResponse,
    ConversationTurn,
    DocumentMetadata,
    UploadedFile,
)

__all__ = [
    # Document services
    "DocumentExtractor",
    "DocumentKind",
    "ExtractionFailedError",
    "UnsupportedMediaTypeError",
    "resolve_media_type",
    "sanitize_filename",
    # Chat history
    "parse_chat_history",
    # Types
    "ChatResponse",
    "ConversationTurn",
    "DocumentMetadata",
    "UploadedFile",
]
