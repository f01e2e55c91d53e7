"""Plain-text fallback parser."""

from __future__ import annotations

from typing import Any

from ..document import ExtractedDocument
from .base import DEFAULT_MAX_BYTES, BaseParser


class TextParser(BaseParser):
    """Decode the payload as UTF-8.

    Used for ``text/plain`` and for every MIME type no other parser
    claims.  Undecodable bytes are replaced rather than rejected, so this
    parser never raises for a payload within the size limit.
    """

    mime_types = ["text/plain"]

    def parse(
        self,
        data: bytes,
        *,
        mime_type: str = "",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        self._check_size(data, max_bytes)
        text = data.decode("utf-8", errors="replace")
        return ExtractedDocument(
            text=text,
            file_type="text",
            mime_type=mime_type,
            char_count=len(text),
        )
