"""File type detection based on the declared MIME type."""

from __future__ import annotations

# Parser used for every MIME type that is not recognised.
FALLBACK_FILE_TYPE = "text"

# MIME type -> canonical parser name
_MIME_MAP: dict[str, str] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "docx",
    "text/html": "html",
    "application/xhtml+xml": "html",
}


def normalize_mime_type(mime_type: str | None) -> str:
    """Lowercase *mime_type* and drop parameters such as ``; charset=utf-8``."""
    if not mime_type:
        return ""
    return mime_type.strip().lower().split(";")[0].strip()


def detect_file_type_from_mime(mime_type: str | None) -> str:
    """Detect canonical parser name from a MIME type string.

    Unknown or empty types map to :data:`FALLBACK_FILE_TYPE`; this never
    raises.
    """
    return _MIME_MAP.get(normalize_mime_type(mime_type), FALLBACK_FILE_TYPE)


def is_text_mime_type(mime_type: str | None) -> bool:
    """Return True for ``text/*`` types."""
    return normalize_mime_type(mime_type).startswith("text/")
