"""POST /chat - Answer a question about an optional uploaded document."""

import logging

from fastapi import Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from dependencies import get_chat_service
from responses import chat_success_dict, error_response, get_http_status
from services.chat import ChatError, ChatService
from services.document import resolve_media_type
from services.types import UploadedFile

logger = logging.getLogger(__name__)


async def _read_upload(upload: UploadFile | None) -> UploadedFile | None:
    """Convert a multipart upload into an UploadedFile, or None if absent."""
    if upload is None:
        return None

    data = await upload.read()
    # Browsers submit an empty part for an untouched file input
    if not upload.filename and not data:
        return None

    return UploadedFile(
        data=data,
        media_type=resolve_media_type(upload.content_type, upload.filename),
        size_bytes=upload.size if upload.size is not None else len(data),
        filename=upload.filename or "document",
    )


# --- Handler ---


async def send_message(
    request: Request,
    question: str | None = Form(None, description="Question about the document"),
    document: UploadFile | None = File(None, description="PDF, DOCX, TXT or CSV"),
    file: UploadFile | None = File(None, description="Alias of 'document'"),
    chat_history: str | None = Form(
        None,
        alias="chatHistory",
        description='JSON array of {"role": "user"|"assistant", "content": str}',
    ),
    chat_service: ChatService = Depends(get_chat_service),
) -> JSONResponse:
    """Answer a legal question, grounded in the uploaded document if any.

    Flow:
    1. Validate question and file (size, type)
    2. Extract document text
    3. Assemble prompt with client-supplied chat history
    4. Ask the completion service
    """
    request_id = getattr(request.state, "request_id", None)

    try:
        upload = await _read_upload(document or file)
        result = await chat_service.answer(
            question=question,
            upload=upload,
            history_payload=chat_history,
            request_id=request_id,
        )

    except ChatError as e:
        log_fn = logger.warning if get_http_status(e.code) < 500 else logger.error
        log_fn("[%s] %s: %s", request_id, e.code.value, e)
        return error_response(e.code, e.message, request_id)

    finally:
        for upload_file in (document, file):
            if upload_file is not None:
                await upload_file.close()

    return JSONResponse(
        content=chat_success_dict(
            question=result.question,
            answer=result.answer,
            document=result.document.to_response() if result.document else None,
            timestamp=result.timestamp,
        )
    )
