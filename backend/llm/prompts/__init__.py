"""LLM prompts and prompt assembly."""

from llm.prompts.legal_qa import (
    DOCUMENT_SECTION_HEADER,
    HISTORY_SECTION_HEADER,
    LEGAL_ASSISTANT_INSTRUCTIONS,
    QUESTION_SECTION_HEADER,
    assemble_prompt,
)

__all__ = [
    "LEGAL_ASSISTANT_INSTRUCTIONS",
    "DOCUMENT_SECTION_HEADER",
    "HISTORY_SECTION_HEADER",
    "QUESTION_SECTION_HEADER",
    "assemble_prompt",
]
