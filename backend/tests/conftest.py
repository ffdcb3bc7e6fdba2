"""Pytest configuration and fixtures for JusAI tests."""

import io
import os
import sys

# Set required env vars BEFORE any imports that might trigger Settings
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import fitz  # PyMuPDF
import pytest
from docx import Document as DocxDocument

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import Settings  # noqa: E402

TERMINATION_SENTENCE = "Either party may terminate with 30 days notice"


def make_pdf(*pages: str) -> bytes:
    """Build an in-memory PDF with one text page per argument."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(*paragraphs: str, table: list[list[str]] | None = None) -> bytes:
    """Build an in-memory DOCX document."""
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        grid = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                grid.cell(r, c).text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def claude_message(text: str) -> SimpleNamespace:
    """Minimal stand-in for an Anthropic Messages API response."""
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        stop_reason="end_turn",
    )


@pytest.fixture
def settings() -> Settings:
    """Application settings isolated from the developer's environment."""
    return Settings(
        _env_file=None,
        anthropic_api_key="test-anthropic-key",
        llm_model="claude-sonnet-4-20250514",
        max_file_size_mb=10,
    )


@pytest.fixture
def mock_anthropic_client():
    """Mock AsyncAnthropic client answering every request."""
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=claude_message("Mock answer"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_gateway():
    """Mock completion gateway returning a successful answer."""
    from llm import CompletionResult

    gateway = MagicMock()
    gateway.complete = AsyncMock(
        return_value=CompletionResult.success("Hello! How can I assist you today?")
    )
    return gateway


@pytest.fixture
def sample_pdf() -> bytes:
    """A contract PDF containing a termination clause."""
    return make_pdf(
        "SERVICE AGREEMENT",
        f"12. Termination. {TERMINATION_SENTENCE}.",
    )


@pytest.fixture
def sample_docx() -> bytes:
    """A lease agreement DOCX with a rent table."""
    return make_docx(
        "LEASE AGREEMENT",
        "The tenant shall pay rent on the first day of each month.",
        table=[["Term", "Amount"], ["Monthly rent", "$1,200"]],
    )
