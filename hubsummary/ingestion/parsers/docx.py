"""Word document parser backed by ``python-docx``."""

from __future__ import annotations

import io
import logging
from typing import Any, Iterator

from docx import Document
from docx.table import Table

from ...exceptions import ExtractionError
from ..document import ExtractedDocument
from .base import DEFAULT_MAX_BYTES, BaseParser

logger = logging.getLogger("hubsummary.ingestion.parsers.docx")


class DocxParser(BaseParser):
    """Extract raw paragraph text from a Word package.

    Body paragraphs and table cells are read in document order, one
    paragraph per line.

    Formatting, images and embedded objects are discarded.  Legacy
    binary ``.doc`` payloads are routed here too; python-docx cannot open
    them, which surfaces as an :class:`~hubsummary.exceptions.ExtractionError`.
    """

    mime_types = [
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    ]

    def parse(
        self,
        data: bytes,
        *,
        mime_type: str = "",
        max_bytes: int = DEFAULT_MAX_BYTES,
        **kwargs: Any,
    ) -> ExtractedDocument:
        self._check_size(data, max_bytes)

        try:
            doc = Document(io.BytesIO(data))
        except Exception as exc:
            # PackageNotFoundError, zipfile.BadZipFile, KeyError and lxml errors all land here
            logger.debug("python-docx failed to open payload: %s", exc)
            raise ExtractionError(f"Invalid Word document: {exc}") from exc

        paragraphs = list(_iter_paragraph_text(doc))
        text = "\n".join(paragraphs).strip()

        metadata: dict[str, Any] = {}
        props = doc.core_properties
        if props.title:
            metadata["title"] = props.title
        if props.author:
            metadata["author"] = props.author

        non_empty = [p.strip() for p in paragraphs if p.strip()]
        return ExtractedDocument(
            text=text,
            file_type="docx",
            mime_type=mime_type,
            metadata=metadata,
            page_count=len(non_empty) if non_empty else None,
            page_texts=non_empty or None,
            char_count=len(text),
        )


def _iter_paragraph_text(container: Any) -> Iterator[str]:
    """Yield paragraph text from *container*, descending into tables.

    Horizontally merged cells are reported once per row by python-docx as
    repeated cell objects; those repeats are skipped.
    """
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                seen = set()
                for cell in row.cells:
                    if id(cell._tc) in seen:
                        continue
                    seen.add(id(cell._tc))
                    yield from _iter_paragraph_text(cell)
        else:
            yield block.text
