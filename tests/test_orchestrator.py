"""Tests for the summary widget state machine and orchestrator."""

from __future__ import annotations

import asyncio

import pytest

from hubsummary.client import (
    TRANSITIONS,
    Event,
    MemoryRenderer,
    PlainTextSource,
    SessionState,
    StaticPage,
    SummaryOrchestrator,
    Surface,
    ViewState,
    inject,
    next_state,
)
from hubsummary.client.state import can_fire
from hubsummary.exceptions import BackendError, ClassificationError, InvalidTransitionError

TOPIC_URL = "https://learn.bcit.ca/d2l/le/content/123/viewContent/456/View"
SUMMARY = "<p><b>TLDR:</b> Short.</p><ol><li>One</li><li>Two</li></ol>"


class StubClassifier:
    def __init__(self, exc: Exception | None = None):
        self.exc = exc
        self.calls = 0
        self.closed = False

    def download_url_for(self, page):
        return None

    async def classify(self, page):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return PlainTextSource(url=page.url, text="Lecture text")

    async def aclose(self):
        self.closed = True


class StubApi:
    """Returns queued summaries; blocks on ``gate`` when one is set."""

    def __init__(self, *summaries: str, exc: Exception | None = None, gate: asyncio.Event | None = None):
        self.summaries = list(summaries) or [SUMMARY]
        self.exc = exc
        self.gate = gate
        self.calls = 0
        self.closed = False

    async def summarize(self, source):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.exc is not None:
            raise self.exc
        return self.summaries.pop(0) if len(self.summaries) > 1 else self.summaries[0]

    async def aclose(self):
        self.closed = True


def make_orchestrator(api=None, classifier=None, **kwargs):
    renderer = MemoryRenderer()
    orch = SummaryOrchestrator(
        StaticPage(TOPIC_URL, "<p>Lecture text</p>"),
        renderer,
        classifier or StubClassifier(),
        api or StubApi(),
        **kwargs,
    )
    return orch, renderer


# =============================================================================
# Transition table
# =============================================================================


class TestTransitions:
    def test_happy_path(self):
        assert next_state(ViewState.IDLE, Event.OPEN) is ViewState.LOADING
        assert next_state(ViewState.LOADING, Event.SETTLE) is ViewState.SUMMARIZED
        assert next_state(ViewState.SUMMARIZED, Event.RELOAD) is ViewState.LOADING

    def test_idle_is_never_reentered(self):
        """Once the trigger button is consumed there is no way back."""
        assert ViewState.IDLE not in TRANSITIONS.values()

    @pytest.mark.parametrize(
        "state,event",
        [
            (ViewState.IDLE, Event.SETTLE),
            (ViewState.IDLE, Event.DOWNLOAD),
            (ViewState.LOADING, Event.OPEN),
            (ViewState.LOADING, Event.RELOAD),
            (ViewState.SUMMARIZED, Event.OPEN),
            (ViewState.SUMMARIZED, Event.SETTLE),
        ],
    )
    def test_invalid_transitions(self, state, event):
        assert not can_fire(state, event)
        with pytest.raises(InvalidTransitionError):
            next_state(state, event)

    def test_session_begin_request(self):
        session = SessionState()
        first = session.begin_request()
        second = session.begin_request()
        assert second == first + 1
        assert session.is_loading
        assert session.has_summarized_once
        assert session.is_current(second)
        assert not session.is_current(first)


# =============================================================================
# Injection
# =============================================================================


class TestInject:
    def test_renders_button(self):
        renderer = MemoryRenderer()
        orch = inject(StaticPage(TOPIC_URL), renderer, classifier=StubClassifier(), api=StubApi())
        assert renderer.visible == {Surface.BUTTON}
        assert orch.state is ViewState.IDLE

    def test_no_request_until_opened(self):
        api = StubApi()
        inject(StaticPage(TOPIC_URL), MemoryRenderer(), classifier=StubClassifier(), api=api)
        assert api.calls == 0

    @pytest.mark.asyncio
    async def test_reinjection_returns_existing(self):
        """A second injection neither duplicates nor resurrects the button."""
        page = StaticPage(TOPIC_URL)
        renderer = MemoryRenderer()
        first = inject(page, renderer, classifier=StubClassifier(), api=StubApi())
        await first.open()

        second = inject(page, renderer, classifier=StubClassifier(), api=StubApi())
        assert second is first
        assert not renderer.is_visible(Surface.BUTTON)

    def test_distinct_pages_get_distinct_widgets(self):
        a = inject(StaticPage(TOPIC_URL), MemoryRenderer(), classifier=StubClassifier(), api=StubApi())
        b = inject(StaticPage(TOPIC_URL), MemoryRenderer(), classifier=StubClassifier(), api=StubApi())
        assert a is not b


# =============================================================================
# Open / settle
# =============================================================================


class TestOpen:
    @pytest.mark.asyncio
    async def test_button_removed_before_request_settles(self):
        orch, renderer = make_orchestrator()
        renderer.show_button()

        task = orch.open()
        assert not renderer.is_visible(Surface.BUTTON)
        assert renderer.is_visible(Surface.POPUP)
        assert orch.state is ViewState.LOADING
        assert Surface.POPUP in renderer.spinners
        assert Surface.POPUP in renderer.disabled

        await task
        assert orch.state is ViewState.SUMMARIZED
        assert renderer.summary_html == SUMMARY
        assert not renderer.loading
        assert renderer.spinners == set()
        assert orch.session.has_summarized_once

    @pytest.mark.asyncio
    async def test_open_twice_is_invalid(self):
        orch, _ = make_orchestrator()
        task = orch.open()
        with pytest.raises(InvalidTransitionError):
            orch.open()
        await task

    @pytest.mark.asyncio
    async def test_summary_sanitized_before_render(self):
        orch, renderer = make_orchestrator(api=StubApi('<p onclick="x()">ok</p><script>evil()</script>'))
        await orch.open()
        assert renderer.summary_html == "<p>ok</p>"


class TestFailures:
    @pytest.mark.asyncio
    async def test_backend_failure_resolves_empty(self):
        orch, renderer = make_orchestrator(api=StubApi(exc=BackendError("Failed to summarize: quota")))
        assert await orch.open() == ""
        assert orch.state is ViewState.SUMMARIZED
        assert renderer.summary_html == ""
        assert not orch.session.is_loading

    @pytest.mark.asyncio
    async def test_classification_failure_resolves_empty(self):
        orch, renderer = make_orchestrator(classifier=StubClassifier(ClassificationError("blank page")))
        await orch.open()
        assert orch.state is ViewState.SUMMARIZED
        assert renderer.summary_html == ""

    @pytest.mark.asyncio
    async def test_unexpected_error_resolves_empty(self):
        orch, _ = make_orchestrator(api=StubApi(exc=KeyError("boom")))
        assert await orch.open() == ""
        assert orch.state is ViewState.SUMMARIZED

    @pytest.mark.asyncio
    async def test_timeout_resolves_empty(self):
        orch, renderer = make_orchestrator(api=StubApi(gate=asyncio.Event()), request_timeout=0.01)
        await orch.open()
        assert orch.state is ViewState.SUMMARIZED
        assert renderer.summary_html == ""
        assert not renderer.loading

    @pytest.mark.asyncio
    async def test_failure_replaces_previous_summary(self):
        api = StubApi()
        orch, renderer = make_orchestrator(api=api)
        await orch.open()
        assert renderer.summary_html == SUMMARY

        api.exc = BackendError("down")
        await orch.reload()
        assert renderer.summary_html == ""


# =============================================================================
# Minimize / expand / reload
# =============================================================================


class TestMinimizeExpand:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_summary_without_network(self):
        api = StubApi()
        orch, renderer = make_orchestrator(api=api)
        await orch.open()

        orch.minimize()
        assert renderer.visible == {Surface.MINI_BAR}
        assert orch.session.is_minimized
        assert orch.state is ViewState.SUMMARIZED

        orch.expand()
        assert renderer.visible == {Surface.POPUP}
        assert renderer.summary_html == SUMMARY
        assert not orch.session.is_minimized
        assert api.calls == 1

    @pytest.mark.asyncio
    async def test_minimize_while_loading_shows_spinner_on_bar(self):
        gate = asyncio.Event()
        orch, renderer = make_orchestrator(api=StubApi(gate=gate))
        task = orch.open()

        orch.minimize()
        assert orch.state is ViewState.LOADING
        assert Surface.MINI_BAR in renderer.spinners
        assert Surface.MINI_BAR in renderer.disabled

        gate.set()
        await task
        assert renderer.spinners == set()

    def test_minimize_before_open_is_invalid(self):
        orch, _ = make_orchestrator()
        with pytest.raises(InvalidTransitionError):
            orch.minimize()

    @pytest.mark.asyncio
    async def test_summarize_from_mini_bar(self):
        api = StubApi("<p>first</p>", "<p>second</p>")
        orch, renderer = make_orchestrator(api=api)
        await orch.open()
        orch.minimize()

        task = orch.summarize_from_mini_bar()
        assert renderer.is_visible(Surface.POPUP)
        assert not renderer.is_visible(Surface.MINI_BAR)
        assert orch.state is ViewState.LOADING
        await task
        assert renderer.summary_html == "<p>second</p>"


class TestReload:
    @pytest.mark.asyncio
    async def test_reload_after_settle(self):
        api = StubApi("<p>first</p>", "<p>second</p>")
        orch, renderer = make_orchestrator(api=api)
        await orch.open()

        task = orch.reload()
        assert orch.state is ViewState.LOADING
        await task
        assert orch.state is ViewState.SUMMARIZED
        assert renderer.summary_html == "<p>second</p>"
        assert api.calls == 2

    @pytest.mark.asyncio
    async def test_reload_while_loading_is_ignored(self):
        """At most one request is in flight per page."""
        gate = asyncio.Event()
        api = StubApi(gate=gate)
        orch, _ = make_orchestrator(api=api)
        task = orch.open()
        await asyncio.sleep(0)

        assert orch.reload() is None
        gate.set()
        await task
        assert api.calls == 1

    @pytest.mark.asyncio
    async def test_forced_reload_drops_stale_response(self):
        gate = asyncio.Event()
        orch, renderer = make_orchestrator(api=StubApi("<p>fresh</p>", gate=gate))
        first = orch.open()
        stale_generation = orch.session.generation

        second = orch.reload(force=True)
        assert second is not None
        assert orch.session.generation == stale_generation + 1
        assert orch.settle(stale_generation, "<p>stale</p>") is False
        assert orch.state is ViewState.LOADING

        gate.set()
        await second
        with pytest.raises(asyncio.CancelledError):
            await first
        assert renderer.summary_html == "<p>fresh</p>"
        assert orch.state is ViewState.SUMMARIZED


class TestDownload:
    @pytest.mark.asyncio
    async def test_download_plain_text(self):
        orch, renderer = make_orchestrator()
        await orch.open()

        content = orch.download()
        assert content == "TLDR: Short.\n- One\n- Two"
        assert renderer.downloads == [("summary.txt", content)]
        assert orch.state is ViewState.SUMMARIZED

    def test_download_before_open_is_invalid(self):
        orch, renderer = make_orchestrator()
        with pytest.raises(InvalidTransitionError):
            orch.download()
        assert renderer.downloads == []


class TestClose:
    @pytest.mark.asyncio
    async def test_aclose_releases_clients(self):
        classifier, api = StubClassifier(), StubApi()
        orch, _ = make_orchestrator(api=api, classifier=classifier)
        await orch.aclose()
        assert classifier.closed and api.closed
