"""Payload ingestion: turn uploaded bytes into plain text.

Public API
----------
- :func:`extract` / :func:`async_extract`: pick a parser from the
  declared MIME type and return an :class:`ExtractedDocument`.
- :func:`extract_html_text`: visible text of an already-captured page.
- :func:`register_parser` / :func:`get_parser` / :func:`list_parsers`:
  parser registry (extensible).

Quick start::

    from hubsummary.ingestion import extract

    doc = extract(pdf_bytes, "application/pdf")
    print(doc.text[:200])
"""

from __future__ import annotations

import logging
from typing import Any

from .detect import FALLBACK_FILE_TYPE, detect_file_type_from_mime, normalize_mime_type
from .document import ExtractedDocument
from .parsers import (
    get_parser,
    is_parser_registered,
    list_parsers,
    parser_for_mime,
    register_parser,
    unregister_parser,
)
from .parsers.base import DEFAULT_MAX_BYTES

logger = logging.getLogger("hubsummary.ingestion")


def resolve_file_type(mime_type: str | None) -> str:
    """Map a declared MIME type to a registered parser name.

    Custom registrations take precedence over the built-in table; anything
    unrecognised falls back to the UTF-8 text parser.
    """
    normalized = normalize_mime_type(mime_type)
    registered = parser_for_mime(normalized) if normalized else None
    if registered and is_parser_registered(registered):
        return registered
    file_type = detect_file_type_from_mime(normalized)
    if not is_parser_registered(file_type):
        return FALLBACK_FILE_TYPE
    return file_type


def extract(
    data: bytes,
    mime_type: str | None = None,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    **kwargs: Any,
) -> ExtractedDocument:
    """Parse *data* into an :class:`ExtractedDocument`.

    Args:
        data: Raw payload bytes.
        mime_type: Declared content type of the payload.
        max_bytes: Maximum payload size in bytes.
        **kwargs: Forwarded to the parser's ``parse()`` method.

    Raises:
        PayloadTooLargeError: If *data* exceeds *max_bytes*.
        ExtractionError: If a PDF or Word payload is malformed.
    """
    file_type = resolve_file_type(mime_type)
    logger.debug("Extracting %d bytes as %s (declared %r)", len(data), file_type, mime_type)
    parser = get_parser(file_type)
    return parser.parse(data, mime_type=mime_type or "", max_bytes=max_bytes, **kwargs)


async def async_extract(
    data: bytes,
    mime_type: str | None = None,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    **kwargs: Any,
) -> ExtractedDocument:
    """Async version of :func:`extract`.

    Parsing runs in a worker thread via ``asyncio.to_thread()``.
    """
    file_type = resolve_file_type(mime_type)
    logger.debug("Extracting %d bytes as %s (declared %r)", len(data), file_type, mime_type)
    parser = get_parser(file_type)
    return await parser.async_parse(data, mime_type=mime_type or "", max_bytes=max_bytes, **kwargs)


def extract_html_text(html: str) -> str:
    """Return the visible text of an HTML document."""
    from .parsers.html import html_to_text

    text, _ = html_to_text(html)
    return text


__all__ = [
    "DEFAULT_MAX_BYTES",
    "ExtractedDocument",
    "async_extract",
    "detect_file_type_from_mime",
    "extract",
    "extract_html_text",
    "get_parser",
    "is_parser_registered",
    "list_parsers",
    "register_parser",
    "resolve_file_type",
    "unregister_parser",
]
