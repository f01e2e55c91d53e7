"""hubsummary - summarize learning-hub documents with a generative-text backend."""

from dotenv import load_dotenv

# Load environment variables from .env file before settings are read
load_dotenv()

from .exceptions import (  # noqa: E402
    BackendError,
    ClassificationError,
    ClientInputError,
    ConfigurationError,
    ExtractionError,
    HubSummaryError,
    InvalidTransitionError,
    PayloadTooLargeError,
)
from .ingestion import ExtractedDocument, async_extract, extract  # noqa: E402
from .logging import JSONFormatter, configure_logging  # noqa: E402
from .router import IngestionOutcome, IngestionRouter  # noqa: E402
from .sanitize import sanitize_summary_html  # noqa: E402
from .settings import Settings, settings  # noqa: E402
from .summarizer import PROMPT_TEMPLATE, Summarizer, build_prompt  # noqa: E402

__version__ = "0.1.0"

__all__ = [
    "PROMPT_TEMPLATE",
    "BackendError",
    "ClassificationError",
    "ClientInputError",
    "ConfigurationError",
    "ExtractedDocument",
    "ExtractionError",
    "HubSummaryError",
    "IngestionOutcome",
    "IngestionRouter",
    "InvalidTransitionError",
    "JSONFormatter",
    "PayloadTooLargeError",
    "Settings",
    "Summarizer",
    "async_extract",
    "build_prompt",
    "configure_logging",
    "extract",
    "sanitize_summary_html",
    "settings",
]
