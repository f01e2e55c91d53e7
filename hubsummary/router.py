"""Ingestion entry points shared by the HTTP server and the CLI.

Each operation is stateless: it composes extraction and summarization
for a single request and keeps nothing between calls.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from .exceptions import ClientInputError, ExtractionError, HubSummaryError
from .ingestion import DEFAULT_MAX_BYTES, async_extract, extract_html_text
from .summarizer import Summarizer

logger = logging.getLogger("hubsummary.router")

MISSING_FILE_MESSAGE = (
    "File required (multipart/form-data, field name 'file'). Supported: PDF, Word, TXT"
)
MISSING_TEXT_MESSAGE = "Missing 'text' field in request body."
MISSING_HTML_MESSAGE = "Missing 'html' field in request body."


@dataclass(frozen=True)
class IngestionOutcome:
    """Extracted text plus its summary, returned for file uploads."""

    text: str
    summary: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class IngestionRouter:
    """Compose text extraction and summarization.

    Args:
        summarizer: The shared :class:`Summarizer`.
        max_upload_bytes: Upper bound for file payloads.
    """

    def __init__(self, summarizer: Summarizer, *, max_upload_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.summarizer = summarizer
        self.max_upload_bytes = max_upload_bytes

    async def handle_file_upload(self, file_bytes: bytes | None, mime_type: str | None) -> IngestionOutcome:
        """Extract text from an uploaded file and summarize it.

        Raises:
            ClientInputError: If no file payload was supplied.
            PayloadTooLargeError: If the payload exceeds the upload cap.
            ExtractionError: If the document cannot be parsed.
            BackendError: If summarization fails.
        """
        if not file_bytes:
            raise ClientInputError(MISSING_FILE_MESSAGE)

        try:
            doc = await async_extract(file_bytes, mime_type, max_bytes=self.max_upload_bytes)
        except HubSummaryError:
            raise
        except Exception as exc:
            raise ExtractionError(str(exc)) from exc

        logger.info("Extracted %d chars from %s payload (%d bytes)", doc.char_count, doc.file_type, len(file_bytes))
        summary = await self.summarizer.summarize(doc.text)
        return IngestionOutcome(text=doc.text, summary=summary)

    async def handle_raw_text(self, text: str | None) -> str:
        """Summarize already-plain text.

        Raises:
            ClientInputError: If *text* is missing or blank.
        """
        if not isinstance(text, str) or not text.strip():
            raise ClientInputError(MISSING_TEXT_MESSAGE)
        return await self.summarizer.summarize(text)

    async def handle_page_html(self, html: str | None) -> str:
        """Summarize the visible text of a captured page.

        Raises:
            ClientInputError: If *html* is missing or blank.
        """
        if not isinstance(html, str) or not html.strip():
            raise ClientInputError(MISSING_HTML_MESSAGE)
        text = extract_html_text(html)
        if not text:
            logger.info("Captured page has no visible text")
        return await self.summarizer.summarize(text)
