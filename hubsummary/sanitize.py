"""Allow-list sanitizer for generated summary HTML.

The backend is instructed to emit only a tiny tag vocabulary.  This module
enforces that locally so a misbehaving (or prompt-injected) response can
never place scripts, links or styling into the rendered widget.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS = frozenset({"p", "b", "ol", "li"})

# Tags removed together with everything inside them
DROPPED_TAGS = ("script", "style", "iframe", "object", "embed", "template", "noscript", "svg", "math")

# Tags renamed onto the allowed vocabulary
_RENAMES = {"strong": "b", "ul": "ol"}
_HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around the whole response."""
    match = _CODE_FENCE.match(text.strip())
    return match.group(1).strip() if match else text


def sanitize_summary_html(html: str) -> str:
    """Return *html* reduced to :data:`ALLOWED_TAGS` with no attributes.

    Headings become bold paragraphs and ``<ul>`` becomes ``<ol>``.  A
    ``<br>`` turns into a newline; any other unknown tag is unwrapped so
    its text survives.
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup(list(DROPPED_TAGS)):
        tag.decompose()

    for tag in soup.find_all(True):
        name = tag.name.lower()
        if name == "br":
            tag.replace_with("\n")
            continue
        if name in _HEADINGS:
            tag.name = "p"
            tag.attrs = {}
            bold = soup.new_tag("b")
            for child in list(tag.contents):
                bold.append(child.extract())
            tag.append(bold)
            continue
        name = _RENAMES.get(name, name)
        if name in ALLOWED_TAGS:
            tag.name = name
            tag.attrs = {}
        else:
            tag.unwrap()

    return str(soup).strip()


def html_to_plain_text(html: str) -> str:
    """Flatten summary HTML to plain text (used for downloads).

    List items become ``- `` bullets, one block element per line.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for li in soup.find_all("li"):
        li.insert(0, "- ")
    for tag in soup.find_all(["p", "li", "ol", "ul", "br"] + sorted(_HEADINGS)):
        tag.insert_after("\n")
    lines = (" ".join(line.split()) for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)
