"""Document text extraction for PDF, Word, plain text and CSV uploads.

Handles:
- Media type resolution (declared type, falling back to the file extension)
- Text extraction from PDF (PyMuPDF), DOCX (python-docx), TXT and CSV
- Filename sanitization for anything echoed back to the client

Extraction works on in-memory bytes; nothing touches the filesystem.
The async wrapper runs the blocking parsers with asyncio.to_thread.
"""

import asyncio
import io
import logging
import re
from enum import Enum
from pathlib import Path

import fitz  # PyMuPDF
from docx import Document as DocxDocument

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
TEXT_MEDIA_TYPE = "text/plain"
CSV_MEDIA_TYPE = "text/csv"
LEGACY_DOC_MEDIA_TYPE = "application/msword"

SUPPORTED_MEDIA_TYPES = frozenset(
    {PDF_MEDIA_TYPE, DOCX_MEDIA_TYPE, TEXT_MEDIA_TYPE, CSV_MEDIA_TYPE}
)

# Used only when the client did not declare a usable media type
EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".pdf": PDF_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
    ".txt": TEXT_MEDIA_TYPE,
    ".csv": CSV_MEDIA_TYPE,
    ".doc": LEGACY_DOC_MEDIA_TYPE,
}

_GENERIC_MEDIA_TYPES = frozenset({"", "application/octet-stream"})


class DocumentKind(str, Enum):
    """Document families with a structural parser."""

    PDF = "PDF"
    DOCX = "DOCX"


class UnsupportedMediaTypeError(Exception):
    """Raised when no extractor exists for the declared media type."""

    def __init__(self, media_type: str) -> None:
        self.media_type = media_type
        super().__init__(f"Unsupported file type: {media_type or 'unknown'}")


class ExtractionFailedError(Exception):
    """Raised when a supported document cannot be parsed."""

    def __init__(self, kind: DocumentKind, message: str) -> None:
        self.kind = kind
        super().__init__(message)


def resolve_media_type(content_type: str | None, filename: str | None) -> str:
    """Return the effective media type of an upload.

    The declared content type wins; parameters like ``; charset=utf-8`` are
    dropped. Browsers sometimes send nothing or ``application/octet-stream``,
    in which case the filename extension decides.
    """
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared not in _GENERIC_MEDIA_TYPES:
        return declared

    ext = Path(filename or "").suffix.lower()
    return EXTENSION_MEDIA_TYPES.get(ext, declared)


def sanitize_filename(filename: str | None) -> str:
    """Sanitize filename to prevent path traversal and other issues."""
    filename = Path(filename or "").name
    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", filename)

    max_length = 255
    if len(filename) > max_length:
        name, ext = Path(filename).stem, Path(filename).suffix
        filename = name[: max_length - len(ext)] + ext

    if not filename or filename.startswith("."):
        filename = "document" + Path(filename).suffix

    return filename


class DocumentExtractor:
    """Extracts plain text from uploaded document bytes."""

    def extract(self, data: bytes, media_type: str) -> str:
        """Extract text from ``data`` according to ``media_type``.

        Raises:
            UnsupportedMediaTypeError: No extractor for the media type.
            ExtractionFailedError: The PDF or DOCX could not be parsed.
        """
        if media_type == PDF_MEDIA_TYPE:
            return self._extract_pdf(data)
        if media_type == DOCX_MEDIA_TYPE:
            return self._extract_docx(data)
        if media_type in (TEXT_MEDIA_TYPE, CSV_MEDIA_TYPE):
            return self._decode_text(data)
        raise UnsupportedMediaTypeError(media_type)

    async def extract_async(self, data: bytes, media_type: str) -> str:
        """Non-blocking variant of :meth:`extract`."""
        return await asyncio.to_thread(self.extract, data, media_type)

    def _extract_pdf(self, data: bytes) -> str:
        """Extract embedded text from every page of a PDF."""
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise ExtractionFailedError(
                DocumentKind.PDF, f"Failed to extract text from PDF: {e}"
            ) from e

        try:
            if doc.needs_pass:
                raise ExtractionFailedError(
                    DocumentKind.PDF,
                    "Failed to extract text from PDF: document is password protected",
                )

            text_parts = []
            for page_num, page in enumerate(doc, start=1):
                try:
                    page_text = page.get_text()
                except Exception as e:
                    raise ExtractionFailedError(
                        DocumentKind.PDF,
                        f"Failed to extract text from PDF page {page_num}: {e}",
                    ) from e
                if page_text.strip():
                    text_parts.append(page_text)

            # No pages, or pages without a text layer (scanned/image-only)
            if not text_parts:
                raise ExtractionFailedError(
                    DocumentKind.PDF,
                    "Failed to extract text from PDF: no text layer found "
                    "(scanned or image-only document)",
                )

            logger.debug("Extracted %d pages of text from PDF", len(text_parts))
            return "\n\n".join(text_parts)
        finally:
            doc.close()

    def _extract_docx(self, data: bytes) -> str:
        """Extract paragraph and table text from a Word document."""
        try:
            doc = DocxDocument(io.BytesIO(data))
            text_parts = [p.text for p in doc.paragraphs if p.text.strip()]

            for table in doc.tables:
                for row in table.rows:
                    row_text = " | ".join(cell.text.strip() for cell in row.cells)
                    if row_text.strip(" |"):
                        text_parts.append(row_text)

            return "\n\n".join(text_parts)

        except Exception as e:
            raise ExtractionFailedError(
                DocumentKind.DOCX, f"Failed to extract text from DOCX: {e}"
            ) from e

    def _decode_text(self, data: bytes) -> str:
        """Decode plain text leniently; undecodable bytes become U+FFFD."""
        return data.decode("utf-8-sig", errors="replace")
