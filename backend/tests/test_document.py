"""Tests for the document extraction service."""

import pytest

from conftest import TERMINATION_SENTENCE, make_docx, make_pdf
from services.document import (
    CSV_MEDIA_TYPE,
    DOCX_MEDIA_TYPE,
    LEGACY_DOC_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    TEXT_MEDIA_TYPE,
    DocumentExtractor,
    DocumentKind,
    ExtractionFailedError,
    UnsupportedMediaTypeError,
    resolve_media_type,
    sanitize_filename,
)


class TestDocumentExtractor:
    """Tests for DocumentExtractor."""

    def setup_method(self):
        """Set up test fixtures."""
        self.extractor = DocumentExtractor()

    def test_extract_pdf(self, sample_pdf):
        """Test text is extracted from every PDF page."""
        text = self.extractor.extract(sample_pdf, PDF_MEDIA_TYPE)

        assert "SERVICE AGREEMENT" in text
        assert TERMINATION_SENTENCE in text

    def test_extract_pdf_page_order(self):
        """Test pages are joined in document order."""
        text = self.extractor.extract(make_pdf("First page", "Second page"), PDF_MEDIA_TYPE)

        assert text.index("First page") < text.index("Second page")

    def test_extract_corrupt_pdf(self):
        """Test corrupt PDF bytes raise ExtractionFailed(PDF)."""
        with pytest.raises(ExtractionFailedError) as exc_info:
            self.extractor.extract(b"%PDF-1.4 this is not really a pdf", PDF_MEDIA_TYPE)

        assert exc_info.value.kind is DocumentKind.PDF
        assert "PDF" in str(exc_info.value)

    def test_extract_image_only_pdf(self):
        """Test a PDF with pages but no text layer is a failure."""
        with pytest.raises(ExtractionFailedError) as exc_info:
            self.extractor.extract(make_pdf(""), PDF_MEDIA_TYPE)

        assert exc_info.value.kind is DocumentKind.PDF

    def test_extract_docx(self, sample_docx):
        """Test paragraphs and table rows are extracted from DOCX."""
        text = self.extractor.extract(sample_docx, DOCX_MEDIA_TYPE)

        assert "LEASE AGREEMENT" in text
        assert "pay rent on the first day" in text
        assert "Monthly rent | $1,200" in text

    def test_extract_empty_docx(self):
        """Test an empty DOCX is a valid, empty result."""
        text = self.extractor.extract(make_docx(), DOCX_MEDIA_TYPE)

        assert text.strip() == ""

    def test_extract_corrupt_docx(self):
        """Test invalid DOCX bytes raise ExtractionFailed(DOCX)."""
        with pytest.raises(ExtractionFailedError) as exc_info:
            self.extractor.extract(b"PK\x03\x04 not a zip", DOCX_MEDIA_TYPE)

        assert exc_info.value.kind is DocumentKind.DOCX

    def test_extract_plain_text(self):
        """Test plain text is decoded as UTF-8 verbatim."""
        content = "Clause 1: The Seller warrants title.\n\nClause 2: Governing law."
        text = self.extractor.extract(content.encode("utf-8"), TEXT_MEDIA_TYPE)

        assert text == content

    def test_extract_csv(self):
        """Test CSV is returned as raw text without structural parsing."""
        content = "party,obligation\nLandlord,repairs\nTenant,rent\n"
        text = self.extractor.extract(content.encode("utf-8"), CSV_MEDIA_TYPE)

        assert text == content

    def test_extract_invalid_utf8_is_lenient(self):
        """Test malformed UTF-8 becomes replacement characters."""
        text = self.extractor.extract(b"Fee: \xff\xfe 100 EUR", TEXT_MEDIA_TYPE)

        assert "�" in text
        assert "100 EUR" in text

    def test_extract_strips_utf8_bom(self):
        """Test a leading BOM is not part of the text."""
        text = self.extractor.extract(b"\xef\xbb\xbfHello", TEXT_MEDIA_TYPE)

        assert text == "Hello"

    def test_extract_empty_text_is_valid(self):
        """Test empty or whitespace-only text is not a failure."""
        assert self.extractor.extract(b"", TEXT_MEDIA_TYPE) == ""
        assert self.extractor.extract(b"   \n", TEXT_MEDIA_TYPE) == "   \n"

    @pytest.mark.parametrize(
        "media_type",
        [LEGACY_DOC_MEDIA_TYPE, "image/png", "application/zip", ""],
    )
    def test_extract_unsupported_type(self, media_type):
        """Test unsupported media types never return text."""
        with pytest.raises(UnsupportedMediaTypeError):
            self.extractor.extract(b"Some text", media_type)

    @pytest.mark.asyncio
    async def test_extract_async(self, sample_pdf):
        """Test the async wrapper returns the same text."""
        text = await self.extractor.extract_async(sample_pdf, PDF_MEDIA_TYPE)

        assert text == self.extractor.extract(sample_pdf, PDF_MEDIA_TYPE)


class TestResolveMediaType:
    """Tests for resolve_media_type."""

    def test_declared_type_wins(self):
        assert resolve_media_type("application/pdf", "contract.txt") == PDF_MEDIA_TYPE

    def test_parameters_are_dropped(self):
        assert resolve_media_type("text/plain; charset=utf-8", "a.txt") == TEXT_MEDIA_TYPE

    def test_declared_type_is_lowercased(self):
        assert resolve_media_type("Application/PDF", None) == PDF_MEDIA_TYPE

    def test_octet_stream_falls_back_to_extension(self):
        assert resolve_media_type("application/octet-stream", "Lease.DOCX") == DOCX_MEDIA_TYPE

    def test_missing_type_falls_back_to_extension(self):
        assert resolve_media_type(None, "terms.csv") == CSV_MEDIA_TYPE
        assert resolve_media_type("", "old.doc") == LEGACY_DOC_MEDIA_TYPE

    def test_unknown_extension_keeps_declared(self):
        assert resolve_media_type("application/octet-stream", "x.bin") == "application/octet-stream"


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_sanitize_filename_basic(self):
        """Test basic filename sanitization."""
        assert sanitize_filename("contract.pdf") == "contract.pdf"

    def test_sanitize_filename_path_traversal(self):
        """Test path traversal prevention."""
        result = sanitize_filename("../../../etc/passwd")
        assert "/" not in result
        assert ".." not in result

    def test_sanitize_filename_special_chars(self):
        """Test special character removal."""
        result = sanitize_filename('doc<>:"|?*.pdf')
        assert "<" not in result
        assert ":" not in result
        assert result.endswith(".pdf")

    def test_sanitize_filename_long_name(self):
        """Test long filename truncation."""
        result = sanitize_filename("a" * 300 + ".pdf")
        assert len(result) <= 255
        assert result.endswith(".pdf")

    def test_sanitize_filename_empty(self):
        """Test empty filename handling."""
        assert sanitize_filename("").startswith("document")
        assert sanitize_filename(None).startswith("document")
