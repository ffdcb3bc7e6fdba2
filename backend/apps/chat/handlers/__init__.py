"""Chat handlers."""

from apps.chat.handlers.send_message import send_message

__all__ = [
    "send_message",
]
