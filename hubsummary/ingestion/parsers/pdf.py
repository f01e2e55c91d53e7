"""PDF parser backed by ``pypdf``."""

from __future__ import annotations

import io
import logging
from typing import Any

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from ...exceptions import ExtractionError
from ..document import ExtractedDocument
from .base import DEFAULT_MAX_BYTES, BaseParser

logger = logging.getLogger("hubsummary.ingestion.parsers.pdf")


class PdfParser(BaseParser):
    """Extract page text from a PDF in document order.

    Pages are joined by a blank line.  Corrupt or encrypted documents
    raise :class:`~hubsummary.exceptions.ExtractionError`.
    """

    mime_types = ["application/pdf"]

    def parse(
        self,
        data: bytes,
        *,
        mime_type: str = "application/pdf",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        self._check_size(data, max_bytes)
        if b"%PDF-" not in data[:1024]:
            raise ExtractionError("Invalid PDF: missing %PDF- header")

        try:
            reader = PdfReader(io.BytesIO(data), strict=False)
            if reader.is_encrypted:
                raise ExtractionError("PDF is encrypted")
            page_texts = [page.extract_text() or "" for page in reader.pages]
            metadata = self._metadata(reader)
        except ExtractionError:
            raise
        except PyPdfError as exc:
            logger.debug("pypdf rejected payload: %s", exc)
            raise ExtractionError(f"Invalid PDF: {exc}") from exc
        except Exception as exc:
            # malformed object streams surface as arbitrary builtin errors
            logger.debug("pypdf failed to read payload: %r", exc)
            raise ExtractionError(f"Invalid PDF: {exc}") from exc

        text = "\n\n".join(page_texts)
        return ExtractedDocument(
            text=text,
            file_type="pdf",
            mime_type=mime_type,
            metadata=metadata,
            page_count=len(page_texts),
            page_texts=page_texts,
            char_count=len(text),
        )

    @staticmethod
    def _metadata(reader: PdfReader) -> dict[str, Any]:
        info = reader.metadata
        if not info:
            return {}
        meta = {"title": info.title, "author": info.author}
        return {k: v for k, v in meta.items() if v}
