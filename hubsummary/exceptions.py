"""hubsummary exception hierarchy.

All exceptions inherit from :class:`HubSummaryError`.  Where appropriate,
exceptions also inherit from the stdlib exception they replace (e.g.
``ClientInputError`` extends ``ValueError``) so callers catching the
builtin keep working.

The HTTP layer maps each class to a status code:

* :class:`ClientInputError` -> 400 (:class:`PayloadTooLargeError` -> 413)
* :class:`ExtractionError` / :class:`BackendError` -> 500
"""


class HubSummaryError(Exception):
    """Base exception for all hubsummary errors."""


class ClientInputError(HubSummaryError, ValueError):
    """Raised when a required request field is missing or empty."""


class PayloadTooLargeError(ClientInputError):
    """Raised when an uploaded payload exceeds the configured size cap."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Payload of {size:,} bytes exceeds the maximum allowed ({limit:,} bytes).")


class ExtractionError(HubSummaryError, ValueError):
    """Raised when a document payload cannot be parsed into text."""


class BackendError(HubSummaryError, RuntimeError):
    """Raised when the generative-text backend call fails."""


class ConfigurationError(HubSummaryError, ValueError):
    """Raised for invalid configuration (missing keys, bad settings)."""


class ClassificationError(HubSummaryError):
    """Raised when the client cannot determine which ingestion path applies."""


class InvalidTransitionError(HubSummaryError, RuntimeError):
    """Raised when an event is not allowed from the current view state."""

    def __init__(self, state: object, event: object) -> None:
        self.state = state
        self.event = event
        super().__init__(f"Event {event} is not allowed in state {state}")
