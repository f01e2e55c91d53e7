"""Rendering surfaces for the summary widget.

The orchestrator only talks to a :class:`Renderer`; the browser binding
and the in-memory :class:`MemoryRenderer` both implement it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .state import Surface


class Renderer(Protocol):
    def show_button(self) -> None: ...

    def remove_button(self) -> None: ...

    def show_popup(self, summary_html: str) -> None: ...

    def remove_popup(self) -> None: ...

    def show_mini_bar(self) -> None: ...

    def remove_mini_bar(self) -> None: ...

    def set_summary(self, summary_html: str) -> None: ...

    def set_loading(self, loading: bool) -> None: ...

    def offer_download(self, filename: str, content: str) -> None: ...


@dataclass
class MemoryRenderer:
    """Records what would be visible on the page.

    ``spinners`` holds the surfaces currently showing a spinner and
    ``disabled`` the surfaces whose trigger controls (summarize, reload)
    are disabled.
    """

    visible: set[Surface] = field(default_factory=set)
    summary_html: str = ""
    loading: bool = False
    spinners: set[Surface] = field(default_factory=set)
    disabled: set[Surface] = field(default_factory=set)
    downloads: list[tuple[str, str]] = field(default_factory=list)

    def is_visible(self, surface: Surface) -> bool:
        return surface in self.visible

    def show_button(self) -> None:
        self.visible.add(Surface.BUTTON)
        self._sync_loading()

    def remove_button(self) -> None:
        self.visible.discard(Surface.BUTTON)
        self._sync_loading()

    def show_popup(self, summary_html: str) -> None:
        if Surface.POPUP in self.visible:
            return
        self.visible.add(Surface.POPUP)
        self.summary_html = summary_html
        self._sync_loading()

    def remove_popup(self) -> None:
        self.visible.discard(Surface.POPUP)
        self._sync_loading()

    def show_mini_bar(self) -> None:
        self.visible.add(Surface.MINI_BAR)
        self._sync_loading()

    def remove_mini_bar(self) -> None:
        self.visible.discard(Surface.MINI_BAR)
        self._sync_loading()

    def set_summary(self, summary_html: str) -> None:
        self.summary_html = summary_html

    def set_loading(self, loading: bool) -> None:
        self.loading = loading
        self._sync_loading()

    def offer_download(self, filename: str, content: str) -> None:
        self.downloads.append((filename, content))

    def _sync_loading(self) -> None:
        active = set(self.visible) if self.loading else set()
        self.spinners = active
        self.disabled = set(active)
