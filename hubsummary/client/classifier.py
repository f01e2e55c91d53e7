"""Decide which ingestion path applies to the current page.

Classification is a fallback chain, each step attempted only after the
previous one is confirmed inapplicable:

1. a download affordance is present -> fetch the file
   (``text/*`` responses become :class:`PlainTextSource`, anything else
   :class:`FileSource`);
2. no affordance -> fetch the page URL itself; a non-HTML ``text/*``
   response becomes :class:`PlainTextSource`;
3. fetch failed or was inapplicable -> capture the rendered page as
   :class:`HtmlPageSource`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import httpx

from ..exceptions import ClassificationError
from ..ingestion.detect import is_text_mime_type, normalize_mime_type
from .page import Page
from .urls import LEARNING_HUB_CONTENT_URL, build_download_url, download_affordance_id, extract_ids

logger = logging.getLogger("hubsummary.client.classifier")

HTML_MIME_TYPES = frozenset({"text/html", "application/xhtml+xml"})


@dataclass(frozen=True)
class FileSource:
    url: str
    content: bytes
    mime_type: str


@dataclass(frozen=True)
class PlainTextSource:
    url: str
    text: str


@dataclass(frozen=True)
class HtmlPageSource:
    url: str
    html: str


ContentSource = Union[FileSource, PlainTextSource, HtmlPageSource]


@dataclass(frozen=True)
class FetchedResource:
    url: str
    content: bytes
    content_type: str
    # charset declared by the response, as resolved by httpx
    encoding: str = "utf-8"

    @property
    def mime_type(self) -> str:
        return normalize_mime_type(self.content_type)

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")


class ContentClassifier:
    """Pick a :data:`ContentSource` for a page.

    Args:
        client: Shared ``httpx.AsyncClient`` used for fetches.  One with
            *timeout* is created (and owned) when omitted.
        base_url: Learning-hub content base used to build download URLs.
        timeout: Fetch timeout in seconds.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str = LEARNING_HUB_CONTENT_URL,
        timeout: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self.base_url = base_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch(self, url: str) -> FetchedResource:
        """GET *url*; non-2xx responses raise ``httpx.HTTPStatusError``."""
        resp = await self.client.get(url)
        resp.raise_for_status()
        return FetchedResource(
            url=str(resp.url),
            content=resp.content,
            content_type=resp.headers.get("content-type", ""),
            encoding=resp.encoding or "utf-8",
        )

    def download_url_for(self, page: Page) -> str | None:
        """Return the direct download URL when the page shows a download affordance."""
        ids = extract_ids(page.url)
        if ids is None:
            return None
        if not page.has_element(download_affordance_id(ids)):
            return None
        return build_download_url(ids.course_id, ids.resource_id, self.base_url)

    async def classify(self, page: Page) -> ContentSource:
        """Run the fallback chain for *page*.

        Raises:
            ClassificationError: If no step yields any content.
        """
        download_url = self.download_url_for(page)
        if download_url is not None:
            logger.debug("Download affordance found, fetching %s", download_url)
            try:
                resource = await self.fetch(download_url)
            except httpx.HTTPError as exc:
                logger.warning("Download fetch failed (%s), capturing page instead", exc)
            else:
                return self._from_download(resource)
        else:
            try:
                resource = await self.fetch(page.url)
            except httpx.HTTPError as exc:
                logger.info("Page fetch failed (%s), capturing page instead", exc)
            else:
                if is_text_mime_type(resource.mime_type) and resource.mime_type not in HTML_MIME_TYPES:
                    return PlainTextSource(url=resource.url, text=resource.text)
                logger.debug("Page is %r, capturing rendered content", resource.mime_type or "untyped")

        return self._capture(page)

    @staticmethod
    def _from_download(resource: FetchedResource) -> ContentSource:
        if is_text_mime_type(resource.mime_type) and resource.mime_type not in HTML_MIME_TYPES:
            return PlainTextSource(url=resource.url, text=resource.text)
        # HTML from a download URL goes through the server's HTML parser
        return FileSource(
            url=resource.url,
            content=resource.content,
            mime_type=resource.mime_type or "application/octet-stream",
        )

    @staticmethod
    def _capture(page: Page) -> HtmlPageSource:
        html = page.content_html()
        if not html or not html.strip():
            raise ClassificationError(f"Could not determine content for {page.url}")
        return HtmlPageSource(url=page.url, html=html)
