"""Client-side widget logic: classification, API calls and orchestration."""

from .api import SummaryApiClient
from .classifier import (
    ContentClassifier,
    ContentSource,
    FetchedResource,
    FileSource,
    HtmlPageSource,
    PlainTextSource,
)
from .orchestrator import DOWNLOAD_FILENAME, SummaryOrchestrator, inject
from .page import Page, StaticPage
from .render import MemoryRenderer, Renderer
from .state import TRANSITIONS, Event, SessionState, Surface, ViewState, next_state
from .urls import (
    ContentIds,
    build_download_url,
    download_affordance_id,
    extract_ids,
    matches_content_pattern,
    should_inject,
)

__all__ = [
    "DOWNLOAD_FILENAME",
    "TRANSITIONS",
    "ContentClassifier",
    "ContentIds",
    "ContentSource",
    "Event",
    "FetchedResource",
    "FileSource",
    "HtmlPageSource",
    "MemoryRenderer",
    "Page",
    "PlainTextSource",
    "Renderer",
    "SessionState",
    "StaticPage",
    "SummaryApiClient",
    "SummaryOrchestrator",
    "Surface",
    "ViewState",
    "build_download_url",
    "download_affordance_id",
    "extract_ids",
    "inject",
    "matches_content_pattern",
    "next_state",
    "should_inject",
]
