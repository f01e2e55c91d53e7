"""Summary widget orchestration.

:class:`SummaryOrchestrator` owns the :class:`~hubsummary.client.state.SessionState`
of one page and drives it through the transition table in response to
user actions and request completion.  Rendering is delegated to a
:class:`~hubsummary.client.render.Renderer`.

At most one summarization request is in flight per page.  User actions
that would start another one while ``is_loading`` is set are ignored;
every request carries a generation number so a response that outlives a
forced reload is dropped instead of overwriting newer state.
"""

from __future__ import annotations

import asyncio
import logging
import weakref

import httpx

from ..exceptions import ClassificationError, HubSummaryError
from ..sanitize import html_to_plain_text, sanitize_summary_html
from ..settings import Settings
from .api import SummaryApiClient
from .classifier import ContentClassifier
from .page import Page
from .render import Renderer
from .state import Event, SessionState, ViewState

logger = logging.getLogger("hubsummary.client.orchestrator")

DOWNLOAD_FILENAME = "summary.txt"

# page -> orchestrator; an entry means the widget was already injected there
_INSTANCES: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()


class SummaryOrchestrator:
    """State machine behind the injected summary widget.

    Args:
        page: The page the widget lives on.
        renderer: Where surfaces are drawn.
        classifier: Picks the ingestion path for *page*.
        api: Sends the classified source to the server.
        request_timeout: Upper bound in seconds for one classify+summarize
            cycle; on expiry the cycle resolves to an empty summary.
    """

    def __init__(
        self,
        page: Page,
        renderer: Renderer,
        classifier: ContentClassifier,
        api: SummaryApiClient,
        *,
        request_timeout: float = 120.0,
    ) -> None:
        self.page = page
        self.renderer = renderer
        self.classifier = classifier
        self.api = api
        self.request_timeout = request_timeout
        self.session = SessionState(download_url=classifier.download_url_for(page) or "")
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> ViewState:
        return self.session.view

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def open(self) -> asyncio.Task:
        """Consume the trigger button and start the first summarization.

        The button is removed before this returns; await the returned task
        to wait for the request to settle.
        """
        self.session.apply(Event.OPEN)
        self.renderer.remove_button()
        self.renderer.show_popup(self.session.summary_text)
        return self._start_request()

    def reload(self, *, force: bool = False) -> asyncio.Task | None:
        """Start a fresh classification and summarization cycle.

        While a request is in flight the call is ignored and ``None`` is
        returned, unless *force* is set, in which case the in-flight
        request is cancelled and superseded.
        """
        if self.session.is_loading:
            if not force:
                logger.info("Summarization already in flight, ignoring reload")
                return None
            self._cancel_in_flight()
        else:
            self.session.apply(Event.RELOAD)
        return self._start_request()

    def minimize(self) -> None:
        """Swap the popup for the compact bar; the summary is retained."""
        self.session.apply(Event.MINIMIZE)
        self.renderer.remove_popup()
        self.renderer.remove_mini_bar()
        self.renderer.show_mini_bar()
        self.session.is_minimized = True
        self.renderer.set_loading(self.session.is_loading)

    def expand(self) -> None:
        """Re-open the popup from the retained summary without a request."""
        self.session.apply(Event.EXPAND)
        self.renderer.remove_mini_bar()
        self.renderer.show_popup(self.session.summary_text)
        self.session.is_minimized = False
        self.renderer.set_loading(self.session.is_loading)

    def summarize_from_mini_bar(self) -> asyncio.Task | None:
        """The mini bar's summarize control: expand, then reload."""
        self.expand()
        return self.reload()

    def download(self) -> str:
        """Offer the current summary as a plain-text file and return its content."""
        self.session.apply(Event.DOWNLOAD)
        content = html_to_plain_text(self.session.summary_text)
        self.renderer.offer_download(DOWNLOAD_FILENAME, content)
        return content

    async def aclose(self) -> None:
        self._cancel_in_flight()
        await self.classifier.aclose()
        await self.api.aclose()

    # ------------------------------------------------------------------
    # Request lifecycle
    # ------------------------------------------------------------------

    def settle(self, generation: int, summary: str) -> bool:
        """Apply a finished request's result.

        Returns False (and changes nothing) when *generation* is stale.
        """
        if not self.session.is_current(generation):
            logger.debug("Dropping stale response for request %d", generation)
            return False
        clean = sanitize_summary_html(summary)
        self.session.summary_text = clean
        self.session.is_loading = False
        self.session.apply(Event.SETTLE)
        self.renderer.set_summary(clean)
        self.renderer.set_loading(False)
        return True

    def _start_request(self) -> asyncio.Task:
        generation = self.session.begin_request()
        self.renderer.set_loading(True)
        self._task = asyncio.create_task(self._run(generation))
        return self._task

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _run(self, generation: int) -> str:
        summary = await self._fetch_summary()
        self.settle(generation, summary)
        return summary

    async def _classify_and_summarize(self) -> str:
        source = await self.classifier.classify(self.page)
        logger.info("Classified %s as %s", self.page.url, type(source).__name__)
        return await self.api.summarize(source)

    async def _fetch_summary(self) -> str:
        try:
            return await asyncio.wait_for(self._classify_and_summarize(), timeout=self.request_timeout)
        except asyncio.TimeoutError:
            logger.warning("Summarization timed out after %.1fs", self.request_timeout)
        except ClassificationError as exc:
            logger.warning("Could not classify page: %s", exc)
        except (HubSummaryError, httpx.HTTPError) as exc:
            logger.error("Summarization failed: %s", exc)
        except Exception:
            # the widget never surfaces raw errors; an empty pane is the failure state
            logger.exception("Unexpected error while summarizing %s", self.page.url)
        return ""


def inject(
    page: Page,
    renderer: Renderer,
    *,
    classifier: ContentClassifier | None = None,
    api: SummaryApiClient | None = None,
    settings: Settings | None = None,
) -> SummaryOrchestrator:
    """Install the widget on *page* and render the trigger button.

    Injecting twice into the same page returns the existing orchestrator
    without rendering anything.
    """
    existing = _INSTANCES.get(page)
    if existing is not None:
        logger.debug("Widget already injected on %s", page.url)
        return existing

    if settings is None:
        from ..settings import settings as default_settings

        settings = default_settings

    orchestrator = SummaryOrchestrator(
        page,
        renderer,
        classifier or ContentClassifier(timeout=settings.request_timeout),
        api or SummaryApiClient(settings.server_url, timeout=settings.request_timeout),
        request_timeout=settings.request_timeout,
    )
    _INSTANCES[page] = orchestrator
    renderer.show_button()
    logger.info("Widget injected on %s", page.url)
    return orchestrator
