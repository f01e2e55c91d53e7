import io
from typing import Any

import pytest

from hubsummary.drivers.base import AsyncDriver
from hubsummary.summarizer import Summarizer

# A well-formed response in the shape the prompt asks for, with no
# whitespace between tags so the sanitizer returns it byte for byte
SAMPLE_SUMMARY_HTML = (
    "<p><b>TLDR:</b> The lecture covers three topics.</p>"
    "<p><b>Here are the main key points:</b></p>"
    "<ol>"
    "<li>Topic A introduces the basics.</li>"
    "<li>Topic B builds on Topic A.</li>"
    "<li>Topic C ties everything together.</li>"
    "</ol>"
    "<p>Each topic depends on the previous one.</p>"
)


class MockAsyncDriver(AsyncDriver):
    """Records every call and returns a canned response."""

    model = "mock-model"

    def __init__(self, text: str = SAMPLE_SUMMARY_HTML):
        self.text = text
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(self, prompt: str, options: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((prompt, options))
        return {
            "text": self.text,
            "meta": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15, "model_name": self.model},
        }

    async def aclose(self) -> None:
        self.closed = True


class FailingDriver(AsyncDriver):
    """Raises on every call."""

    model = "failing-model"

    def __init__(self, exc: Exception | None = None):
        self.exc = exc or RuntimeError("quota exceeded")
        self.calls = 0

    async def generate(self, prompt: str, options: dict[str, Any]) -> dict[str, Any]:
        self.calls += 1
        raise self.exc


@pytest.fixture
def mock_driver():
    return MockAsyncDriver()


@pytest.fixture
def summarizer(mock_driver):
    return Summarizer(mock_driver)


def make_pdf(pages: list[str]) -> bytes:
    """Build a minimal PDF with one line of Helvetica text per page."""
    objects: list[bytes] = []
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode())
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    for i, text in enumerate(pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
            ).encode()
        )
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode()
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


def make_docx(paragraphs: list[str]) -> bytes:
    """Build a .docx package in memory with python-docx."""
    from docx import Document

    doc = Document()
    for para in paragraphs:
        doc.add_paragraph(para)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes():
    return make_pdf(["Page one about Topic A", "Page two about Topic B"])


@pytest.fixture
def docx_bytes():
    return make_docx(["First paragraph.", "Second paragraph."])


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests that use real LLM APIs")
