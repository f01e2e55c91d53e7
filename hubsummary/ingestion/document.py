"""Extracted document dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExtractedDocument:
    """Plain-text representation of an uploaded payload.

    Attributes:
        text: Extracted plain-text content. ``""`` means "no content".
        file_type: Canonical parser name (``"pdf"``, ``"docx"``, ``"html"``, ``"text"``).
        mime_type: The declared MIME type the payload arrived with.
        metadata: Parser-specific metadata (title, author, etc.).
        page_count: Total number of pages, if applicable.
        page_texts: Per-page (PDF) or per-paragraph (DOCX) text.
        char_count: Character count of ``text``.
    """

    text: str
    file_type: str
    mime_type: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    page_count: int | None = None
    page_texts: list[str] | None = None
    char_count: int = 0
