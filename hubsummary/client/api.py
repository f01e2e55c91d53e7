"""HTTP client for the summarization server."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..exceptions import BackendError
from .classifier import ContentSource, FileSource, HtmlPageSource, PlainTextSource

logger = logging.getLogger("hubsummary.client.api")

FILE_SUMMARY_PATH = "/buffer-to-file-summary"
TEXT_SUMMARY_PATH = "/summarize-text"
HTML_SUMMARY_PATH = "/summarize-html"


class SummaryApiClient:
    """Send a classified source to the endpoint that handles it.

    Args:
        base_url: Server root, e.g. ``http://localhost:3000``.
        client: Optional shared ``httpx.AsyncClient``; its own ``base_url``
            is ignored in favour of *base_url*.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _request_for(self, source: ContentSource) -> tuple[str, dict[str, Any]]:
        if isinstance(source, FileSource):
            return FILE_SUMMARY_PATH, {"files": {"file": ("document", source.content, source.mime_type)}}
        if isinstance(source, PlainTextSource):
            return TEXT_SUMMARY_PATH, {"json": {"text": source.text}}
        if isinstance(source, HtmlPageSource):
            return HTML_SUMMARY_PATH, {"json": {"html": source.html}}
        raise TypeError(f"Unsupported source type: {type(source).__name__}")

    async def summarize(self, source: ContentSource) -> str:
        """Return the summary HTML for *source*.

        Raises:
            BackendError: On transport failure or a non-2xx response.
        """
        path, kwargs = self._request_for(source)
        logger.debug("POST %s for %s", path, source.url)
        try:
            resp = await self.client.post(f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise BackendError(f"Request to {path} failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code >= 400:
            raise BackendError(body.get("error") or f"{path} returned HTTP {resp.status_code}")
        return body.get("summary") or ""
