"""Learning-hub URL parsing helpers."""

from __future__ import annotations

import logging
import re
from typing import NamedTuple
from urllib.parse import urlparse

logger = logging.getLogger("hubsummary.client.urls")

LEARNING_HUB_CONTENT_URL = "https://learn.bcit.ca/d2l/le/content/"

# Path depth after the content base for pages that show a single topic
VALID_PATH_LENGTHS = (3, 4)

# 0-based indices into the URL path segments
COURSE_ID_SEGMENT = 3
RESOURCE_ID_SEGMENT = 5

_NUMERIC_ID = re.compile(r"^\d+$")


class ContentIds(NamedTuple):
    course_id: str
    resource_id: str


def _segments_after_base(url: str, base: str) -> list[str]:
    tail = url[len(base):].split("?", 1)[0].split("#", 1)[0].rstrip("/")
    return [segment for segment in tail.split("/") if segment]


def matches_content_pattern(url: str | None, base: str = LEARNING_HUB_CONTENT_URL) -> bool:
    """Return True when *url* is a topic page under the content base."""
    if not url or not url.startswith(base):
        return False
    return len(_segments_after_base(url, base)) in VALID_PATH_LENGTHS


def is_valid_id(value: str | None) -> bool:
    return bool(value) and bool(_NUMERIC_ID.match(value))


def extract_ids(url: str | None) -> ContentIds | None:
    """Parse course and resource ids out of a topic URL.

    ``https://learn.bcit.ca/d2l/le/content/123/viewContent/456/View``
    yields ``ContentIds("123", "456")``.  Returns ``None`` when either id
    is missing or not numeric.
    """
    if not url:
        return None
    try:
        path = urlparse(url).path
    except ValueError as exc:
        logger.error("Error parsing URL %r: %s", url, exc)
        return None

    segments = [segment for segment in path.split("/") if segment]
    course_id = segments[COURSE_ID_SEGMENT] if len(segments) > COURSE_ID_SEGMENT else None
    resource_id = segments[RESOURCE_ID_SEGMENT] if len(segments) > RESOURCE_ID_SEGMENT else None

    if not is_valid_id(course_id) or not is_valid_id(resource_id):
        logger.warning("Invalid ids extracted from %s: course=%r resource=%r", url, course_id, resource_id)
        return None
    return ContentIds(course_id, resource_id)


def build_download_url(course_id: str, resource_id: str, base: str = LEARNING_HUB_CONTENT_URL) -> str:
    """Direct download URL for a file topic."""
    return f"{base.rstrip('/')}/{course_id}/topics/files/download/{resource_id}/DirectFileTopicDownload"


def download_affordance_id(ids: ContentIds) -> str:
    """Element id of the download control rendered on file topic pages."""
    return f"d2l_content_{ids.course_id}_{ids.resource_id}_download"


def should_inject(url: str | None, base: str = LEARNING_HUB_CONTENT_URL) -> bool:
    """True for topic pages whose ids can be parsed, i.e. where the widget belongs."""
    return matches_content_pattern(url, base) and extract_ids(url) is not None
