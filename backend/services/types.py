"""Shared types and dataclasses for services.

Every value here lives for a single request and is never persisted.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class UploadedFile:
    """A file received with a chat request."""

    data: bytes
    media_type: str
    size_bytes: int
    filename: str


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message of the conversation, oldest first."""

    role: Role
    content: str


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata echoed back for the document attached to a request."""

    filename: str
    media_type: str
    size_bytes: int

    def to_response(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "mimetype": self.media_type,
            "size": self.size_bytes,
        }


@dataclass
class ChatResponse:
    """Successful answer to a chat request."""

    answer: str
    question: str
    document: DocumentMetadata | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
