"""Conversation history supplied by the client.

The server keeps no history: the browser sends the prior turns with every
request as a JSON array of ``{"role": ..., "content": ...}`` objects.
Parsing is resilient - a missing or malformed payload is logged and treated
as an empty history so the question is still answered.
"""

import logging
from typing import Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from services.types import ConversationTurn

logger = logging.getLogger(__name__)


class ChatTurnPayload(BaseModel):
    """Wire format of one history entry."""

    role: Literal["user", "assistant"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")


_HISTORY_ADAPTER = TypeAdapter(list[ChatTurnPayload])


def parse_chat_history(payload: str | None) -> list[ConversationTurn]:
    """Parse a JSON-encoded history payload, oldest turn first.

    Returns:
        Conversation turns, or an empty list if the payload is missing
        or does not parse.
    """
    if payload is None or not payload.strip():
        return []

    try:
        entries = _HISTORY_ADAPTER.validate_json(payload)
    except ValidationError as e:
        logger.warning(
            "Ignoring unparseable chat history (%d errors): %s",
            e.error_count(),
            e.errors()[0].get("msg") if e.errors() else "unknown",
        )
        return []

    return [ConversationTurn(role=entry.role, content=entry.content) for entry in entries]
