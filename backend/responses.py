"""Standardized response infrastructure for API endpoints.

Errors cross the API boundary as ``{"error": <kind>, "message": <detail>}``.
The kind is a short machine-readable label, the message is human-readable
and never contains a traceback.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ResponseCode(str, Enum):
    """Error kinds returned by the API."""

    # Client errors
    VALIDATION_ERROR = "ValidationError"
    MISSING_QUESTION = "MissingQuestion"
    FILE_TOO_LARGE = "FileTooLarge"
    INVALID_FILE_TYPE = "InvalidFileType"
    FILE_PROCESSING_ERROR = "FileProcessingError"
    NOT_FOUND = "NotFound"

    # Completion service errors
    AUTH_ERROR = "AuthError"
    RATE_LIMITED = "RateLimited"
    TRANSIENT_NETWORK_ERROR = "TransientNetworkError"
    MODEL_UNAVAILABLE = "ModelUnavailable"
    UNKNOWN_COMPLETION_ERROR = "UnknownCompletionError"
    CONFIGURATION_ERROR = "ConfigurationError"

    # Server errors
    INTERNAL_ERROR = "InternalError"


RESPONSE_MESSAGES: dict[ResponseCode, str] = {
    ResponseCode.VALIDATION_ERROR: "Request validation failed",
    ResponseCode.MISSING_QUESTION: "Question is required",
    ResponseCode.FILE_TOO_LARGE: "The uploaded file exceeds the maximum allowed size",
    ResponseCode.INVALID_FILE_TYPE: "Only PDF, DOCX, TXT, and CSV files are allowed",
    ResponseCode.FILE_PROCESSING_ERROR: "The uploaded file could not be read",
    ResponseCode.NOT_FOUND: "Resource not found",
    ResponseCode.AUTH_ERROR: "The AI service rejected the configured API key",
    ResponseCode.RATE_LIMITED: "The AI service is rate limiting requests. Please retry shortly",
    ResponseCode.TRANSIENT_NETWORK_ERROR: "Could not reach the AI service. Please retry",
    ResponseCode.MODEL_UNAVAILABLE: "The configured AI model is currently unavailable",
    ResponseCode.UNKNOWN_COMPLETION_ERROR: "The AI service failed to generate a response",
    ResponseCode.CONFIGURATION_ERROR: "The AI service is not configured",
    ResponseCode.INTERNAL_ERROR: "An internal error occurred",
}

HTTP_STATUS_MAP: dict[ResponseCode, int] = {
    ResponseCode.VALIDATION_ERROR: 422,
    ResponseCode.MISSING_QUESTION: 400,
    ResponseCode.FILE_TOO_LARGE: 400,
    ResponseCode.INVALID_FILE_TYPE: 400,
    ResponseCode.FILE_PROCESSING_ERROR: 400,
    ResponseCode.NOT_FOUND: 404,
    ResponseCode.AUTH_ERROR: 401,
    ResponseCode.RATE_LIMITED: 500,
    ResponseCode.TRANSIENT_NETWORK_ERROR: 500,
    ResponseCode.MODEL_UNAVAILABLE: 500,
    ResponseCode.UNKNOWN_COMPLETION_ERROR: 500,
    ResponseCode.CONFIGURATION_ERROR: 503,
    ResponseCode.INTERNAL_ERROR: 500,
}


def get_message(code: ResponseCode) -> str:
    """Get the message for a response code."""
    return RESPONSE_MESSAGES.get(code, "Unknown error")


def get_http_status(code: ResponseCode) -> int:
    """Get HTTP status code for a response code."""
    return HTTP_STATUS_MAP.get(code, 500)


def error_dict(
    code: ResponseCode,
    custom_message: str | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dictionary."""
    return {
        "error": code.value,
        "message": custom_message or get_message(code),
    }


def chat_success_dict(
    question: str,
    answer: str,
    document: dict[str, Any] | None = None,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """Build the success body for a chat answer."""
    issued = timestamp or datetime.now(UTC)
    return {
        "message": "AI response generated successfully",
        "timestamp": issued.isoformat(),
        "question": question,
        "document": document,
        "response": answer,
    }


# --- JSONResponse helpers ---


def error_response(
    code: ResponseCode,
    custom_message: str | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a JSONResponse with error format."""
    response = JSONResponse(
        content=error_dict(code, custom_message),
        status_code=get_http_status(code),
    )
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def with_request_id(response: JSONResponse, request: Request) -> JSONResponse:
    """Stamp the request's tracing ID onto a response built outside the middleware."""
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())[:8]
    response.headers["X-Request-ID"] = request_id
    return response
