"""Base parser ABC for payload extraction."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from ...exceptions import PayloadTooLargeError
from ..document import ExtractedDocument

DEFAULT_MAX_BYTES = 20 * 1024 * 1024


class BaseParser(ABC):
    """Abstract base class for payload parsers.

    Subclasses must implement :meth:`parse`.  The default
    :meth:`async_parse` wraps the sync method via
    ``asyncio.to_thread()`` so CPU-bound parsing does not block the
    event loop.
    """

    # Subclasses should override with the MIME types they handle.
    mime_types: list[str] = []

    @abstractmethod
    def parse(
        self,
        data: bytes,
        *,
        mime_type: str = "",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        """Parse an in-memory payload into an :class:`ExtractedDocument`.

        Args:
            data: Raw payload bytes.
            mime_type: Declared MIME type, recorded on the result.
            max_bytes: Maximum allowed payload size.
            **kwargs: Parser-specific options.

        Raises:
            PayloadTooLargeError: If *data* exceeds *max_bytes*.
            ExtractionError: If the payload cannot be parsed.
        """

    async def async_parse(
        self,
        data: bytes,
        *,
        mime_type: str = "",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        """Async version of :meth:`parse`."""
        return await asyncio.to_thread(
            self.parse,
            data,
            mime_type=mime_type,
            max_bytes=max_bytes,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_size(data: bytes, max_bytes: int) -> None:
        if len(data) > max_bytes:
            raise PayloadTooLargeError(len(data), max_bytes)
