"""Completion service error taxonomy and classification.

Every failure from the completion call is classified here, once, into a
closed set of kinds. Classification first looks at structured information
(Anthropic SDK exception types and HTTP status codes); only when nothing
structured matches does it fall back to the substrings documented in
``_MESSAGE_MARKERS``.
"""

from dataclasses import dataclass
from enum import Enum

import anthropic
import httpx


class ConfigurationError(Exception):
    """Raised when the completion service credential is missing or a placeholder."""


class CompletionErrorKind(str, Enum):
    """Classified completion failures, in classification priority order."""

    AUTH = "AuthError"
    RATE_LIMITED = "RateLimited"
    TRANSIENT_NETWORK = "TransientNetworkError"
    MODEL_UNAVAILABLE = "ModelUnavailable"
    UNKNOWN = "UnknownCompletionError"


@dataclass(frozen=True)
class _Rule:
    kind: CompletionErrorKind
    exception_types: tuple[type[BaseException], ...]
    status_codes: frozenset[int]


_STRUCTURED_RULES: tuple[_Rule, ...] = (
    _Rule(
        CompletionErrorKind.AUTH,
        (anthropic.AuthenticationError, anthropic.PermissionDeniedError),
        frozenset({401, 403}),
    ),
    _Rule(
        CompletionErrorKind.RATE_LIMITED,
        (anthropic.RateLimitError,),
        frozenset({429}),
    ),
    _Rule(
        CompletionErrorKind.TRANSIENT_NETWORK,
        # APITimeoutError subclasses APIConnectionError
        (anthropic.APIConnectionError, httpx.TransportError, TimeoutError),
        frozenset({408, 504}),
    ),
    _Rule(
        CompletionErrorKind.MODEL_UNAVAILABLE,
        (anthropic.NotFoundError,),
        # 529 is Anthropic's "overloaded" status
        frozenset({404, 503, 529}),
    ),
)

# Fallback for errors without a recognised type or status, matched
# case-insensitively against str(exc) in the same priority order.
_MESSAGE_MARKERS: tuple[tuple[CompletionErrorKind, tuple[str, ...]], ...] = (
    (
        CompletionErrorKind.AUTH,
        ("api key", "api_key", "authentication", "unauthorized", "permission denied"),
    ),
    (
        CompletionErrorKind.RATE_LIMITED,
        ("rate limit", "rate_limit", "quota", "too many requests"),
    ),
    (
        CompletionErrorKind.TRANSIENT_NETWORK,
        ("timed out", "timeout", "connection error", "network"),
    ),
    (
        CompletionErrorKind.MODEL_UNAVAILABLE,
        ("model not found", "not_found_error", "overloaded", "unavailable"),
    ),
)


def classify_error(exc: BaseException) -> CompletionErrorKind:
    """Map a raw completion error onto :class:`CompletionErrorKind`."""
    status = getattr(exc, "status_code", None)

    for rule in _STRUCTURED_RULES:
        if isinstance(exc, rule.exception_types) or status in rule.status_codes:
            return rule.kind

    message = str(exc).lower()
    for kind, markers in _MESSAGE_MARKERS:
        if any(marker in message for marker in markers):
            return kind

    return CompletionErrorKind.UNKNOWN


@dataclass(frozen=True)
class CompletionFailure:
    """A classified completion failure."""

    kind: CompletionErrorKind
    message: str


@dataclass(frozen=True)
class CompletionResult:
    """Tagged outcome of a completion call: ``text`` or ``failure``."""

    text: str | None = None
    failure: CompletionFailure | None = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, text: str, attempts: int = 1) -> "CompletionResult":
        return cls(text=text, attempts=attempts)

    @classmethod
    def failed(
        cls, kind: CompletionErrorKind, message: str, attempts: int = 1
    ) -> "CompletionResult":
        return cls(failure=CompletionFailure(kind, message), attempts=attempts)
