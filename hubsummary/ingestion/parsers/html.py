"""HTML parser: visible text with boilerplate removed."""

from __future__ import annotations

import logging
import re
from typing import Any

from bs4 import BeautifulSoup

from ..document import ExtractedDocument
from .base import DEFAULT_MAX_BYTES, BaseParser

logger = logging.getLogger("hubsummary.ingestion.parsers.html")

# Tags whose content is never visible page text
BOILERPLATE_TAGS = ("head", "script", "style", "nav", "footer", "header", "aside", "noscript", "template")

_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_TRAILING_SPACE = re.compile(r"[ \t]+\n")


def html_to_text(html: str) -> tuple[str, dict[str, Any]]:
    """Return ``(visible_text, metadata)`` for an HTML string."""
    soup = BeautifulSoup(html, "html.parser")

    metadata: dict[str, Any] = {}
    if soup.title and soup.title.string:
        metadata["title"] = soup.title.string.strip()

    for tag in soup(list(BOILERPLATE_TAGS)):
        tag.decompose()

    text = soup.get_text(separator="\n")
    text = _TRAILING_SPACE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text).strip()
    return text, metadata


class HtmlParser(BaseParser):
    """Parse HTML payloads with ``beautifulsoup4``."""

    mime_types = ["text/html", "application/xhtml+xml"]

    def parse(
        self,
        data: bytes,
        *,
        mime_type: str = "text/html",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        self._check_size(data, max_bytes)
        text, metadata = html_to_text(data.decode("utf-8", errors="replace"))
        return ExtractedDocument(
            text=text,
            file_type="html",
            mime_type=mime_type,
            metadata=metadata,
            char_count=len(text),
        )
