"""Page abstraction shared by the classifier and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from bs4 import BeautifulSoup


class Page(Protocol):
    """The slice of a rendered page the widget needs."""

    url: str

    def has_element(self, element_id: str) -> bool: ...

    def content_html(self) -> str: ...


@dataclass(eq=False)
class StaticPage:
    """A page snapshot: its URL and rendered HTML.

    Compared by identity so each snapshot counts as its own page for the
    injection guard.
    """

    url: str
    html: str = ""

    def has_element(self, element_id: str) -> bool:
        if not self.html:
            return False
        return BeautifulSoup(self.html, "html.parser").find(id=element_id) is not None

    def content_html(self) -> str:
        return self.html
