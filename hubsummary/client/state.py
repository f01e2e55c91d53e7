"""Session state and the transition table for the summary widget."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..exceptions import InvalidTransitionError


class ViewState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUMMARIZED = "summarized"


class Event(str, enum.Enum):
    OPEN = "open"
    SETTLE = "settle"
    MINIMIZE = "minimize"
    EXPAND = "expand"
    RELOAD = "reload"
    DOWNLOAD = "download"


class Surface(str, enum.Enum):
    BUTTON = "button"
    POPUP = "popup"
    MINI_BAR = "mini_bar"


# Single source of truth for legal transitions: (state, event) -> next state.
# IDLE has no incoming edge; once the trigger button is consumed it never returns.
TRANSITIONS: dict[tuple[ViewState, Event], ViewState] = {
    (ViewState.IDLE, Event.OPEN): ViewState.LOADING,
    (ViewState.LOADING, Event.SETTLE): ViewState.SUMMARIZED,
    (ViewState.LOADING, Event.MINIMIZE): ViewState.LOADING,
    (ViewState.LOADING, Event.EXPAND): ViewState.LOADING,
    (ViewState.LOADING, Event.DOWNLOAD): ViewState.LOADING,
    (ViewState.SUMMARIZED, Event.MINIMIZE): ViewState.SUMMARIZED,
    (ViewState.SUMMARIZED, Event.EXPAND): ViewState.SUMMARIZED,
    (ViewState.SUMMARIZED, Event.RELOAD): ViewState.LOADING,
    (ViewState.SUMMARIZED, Event.DOWNLOAD): ViewState.SUMMARIZED,
}


def next_state(state: ViewState, event: Event) -> ViewState:
    """Look up the target of *event* from *state*.

    Raises:
        InvalidTransitionError: If the table has no such edge.
    """
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(state, event) from None


def can_fire(state: ViewState, event: Event) -> bool:
    return (state, event) in TRANSITIONS


@dataclass
class SessionState:
    """Per-page widget state, owned by a single orchestrator."""

    download_url: str = ""
    view: ViewState = ViewState.IDLE
    is_minimized: bool = False
    has_summarized_once: bool = False
    summary_text: str = ""
    is_loading: bool = False
    # Bumped for every request; responses carrying an older value are stale.
    generation: int = 0

    def apply(self, event: Event) -> ViewState:
        self.view = next_state(self.view, event)
        return self.view

    def begin_request(self) -> int:
        self.generation += 1
        self.is_loading = True
        self.has_summarized_once = True
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation
