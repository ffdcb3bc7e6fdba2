"""Chat orchestration: validate, extract, assemble, complete.

Request lifecycle::

    Received -> Validated -> (FileExtracted | no file) -> Completed
                    any state -> Failed(kind)

Validation and extraction failures are raised before the completion
service is contacted, so a bad request never costs an upstream call.
"""

import logging
import uuid
from collections.abc import Callable

from config import Settings
from llm import (
    LEGAL_ASSISTANT_INSTRUCTIONS,
    BaseCompletionGateway,
    CompletionErrorKind,
    ConfigurationError,
    assemble_prompt,
)
from responses import ResponseCode
from services.chat_history import parse_chat_history
from services.document import (
    LEGACY_DOC_MEDIA_TYPE,
    SUPPORTED_MEDIA_TYPES,
    DocumentExtractor,
    ExtractionFailedError,
    UnsupportedMediaTypeError,
    sanitize_filename,
)
from services.types import ChatResponse, DocumentMetadata, UploadedFile
from utils import format_file_size, truncate_text

logger = logging.getLogger(__name__)

COMPLETION_ERROR_CODES: dict[CompletionErrorKind, ResponseCode] = {
    CompletionErrorKind.AUTH: ResponseCode.AUTH_ERROR,
    CompletionErrorKind.RATE_LIMITED: ResponseCode.RATE_LIMITED,
    CompletionErrorKind.TRANSIENT_NETWORK: ResponseCode.TRANSIENT_NETWORK_ERROR,
    CompletionErrorKind.MODEL_UNAVAILABLE: ResponseCode.MODEL_UNAVAILABLE,
    CompletionErrorKind.UNKNOWN: ResponseCode.UNKNOWN_COMPLETION_ERROR,
}


class ChatError(Exception):
    """A chat request failed; ``code`` selects the API error kind."""

    def __init__(self, code: ResponseCode, message: str | None = None) -> None:
        self.code = code
        self.message = message
        super().__init__(message or code.value)


class ChatService:
    """Answers one question, optionally grounded in an uploaded document.

    Args:
        extractor: Text extractor for uploads.
        gateway_provider: Returns the process-wide completion gateway.
            May raise ConfigurationError when no usable credential is set,
            or any other error if the client cannot be built.
        settings: Application settings (upload limits).
    """

    def __init__(
        self,
        extractor: DocumentExtractor,
        gateway_provider: Callable[[], BaseCompletionGateway],
        settings: Settings,
    ) -> None:
        self.extractor = extractor
        self.gateway_provider = gateway_provider
        self.settings = settings

    def validate(self, question: str | None, upload: UploadedFile | None) -> str:
        """Check the request; the first failing rule wins.

        Returns:
            The question, unchanged.
        """
        if question is None or not question.strip():
            raise ChatError(
                ResponseCode.MISSING_QUESTION,
                "Please provide a question in the request body",
            )

        if upload is not None:
            if upload.size_bytes > self.settings.max_file_size_bytes:
                raise ChatError(
                    ResponseCode.FILE_TOO_LARGE,
                    f"File size must be at most {self.settings.max_file_size_mb}MB "
                    f"(received {format_file_size(upload.size_bytes)})",
                )
            if upload.media_type == LEGACY_DOC_MEDIA_TYPE:
                raise ChatError(
                    ResponseCode.INVALID_FILE_TYPE,
                    "Legacy Word (.doc) files are not supported. "
                    "Please convert the document to DOCX or PDF",
                )
            if upload.media_type not in SUPPORTED_MEDIA_TYPES:
                raise ChatError(ResponseCode.INVALID_FILE_TYPE)

        return question

    async def extract_document(self, upload: UploadedFile) -> str:
        """Extract the upload's text or raise FILE_PROCESSING_ERROR."""
        try:
            return await self.extractor.extract_async(upload.data, upload.media_type)
        except (ExtractionFailedError, UnsupportedMediaTypeError) as e:
            raise ChatError(ResponseCode.FILE_PROCESSING_ERROR, str(e)) from e

    async def answer(
        self,
        question: str | None,
        upload: UploadedFile | None = None,
        history_payload: str | None = None,
        request_id: str | None = None,
    ) -> ChatResponse:
        """Run the full pipeline for one request.

        Raises:
            ChatError: On any validation, extraction, configuration or
                completion failure.
        """
        request_id = request_id or str(uuid.uuid4())[:8]

        question = self.validate(question, upload)
        logger.info("[%s] Question: %s", request_id, truncate_text(question))

        document_text = None
        document = None
        if upload is not None:
            document = DocumentMetadata(
                filename=sanitize_filename(upload.filename),
                media_type=upload.media_type,
                size_bytes=upload.size_bytes,
            )
            logger.info(
                "[%s] Document: %s (%s, %s)",
                request_id,
                document.filename,
                document.media_type,
                format_file_size(document.size_bytes),
            )
            document_text = await self.extract_document(upload)
            logger.info(
                "[%s] Extracted %d chars of text", request_id, len(document_text)
            )
            if not document_text.strip():
                logger.warning("[%s] Document contains no text", request_id)

        history = parse_chat_history(history_payload)

        prompt = assemble_prompt(
            LEGAL_ASSISTANT_INSTRUCTIONS, document_text, history, question
        )

        try:
            gateway = self.gateway_provider()
        except ConfigurationError as e:
            logger.error("[%s] Completion service not configured: %s", request_id, e)
            raise ChatError(ResponseCode.CONFIGURATION_ERROR, str(e)) from e
        except Exception as e:
            logger.error("[%s] Completion client failed to initialize: %s", request_id, e)
            raise ChatError(
                ResponseCode.CONFIGURATION_ERROR,
                "The AI client could not be initialized",
            ) from e

        result = await gateway.complete(prompt)
        if not result.ok:
            code = COMPLETION_ERROR_CODES[result.failure.kind]
            message = (
                result.failure.message
                if code is ResponseCode.UNKNOWN_COMPLETION_ERROR
                else None
            )
            raise ChatError(code, message)

        logger.info(
            "[%s] Answer generated (%d chars, %d attempt(s))",
            request_id,
            len(result.text),
            result.attempts,
        )
        return ChatResponse(answer=result.text, question=question, document=document)
