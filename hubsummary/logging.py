"""Logging helpers for the ``hubsummary`` logger namespace."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "hubsummary"


class JSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object.

    Structured payloads attached as ``record.hubsummary_data`` (e.g. via
    ``logger.info("...", extra={"hubsummary_data": {...}})``) appear under
    the ``data`` key.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "hubsummary_data", None)
        if data is not None:
            payload["data"] = data
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(
    level: int | str = logging.INFO,
    *,
    json_format: bool = False,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Attach a handler to the ``hubsummary`` logger.

    Calling this repeatedly with the same *handler* does not add it twice.
    When no handler is given, the previously installed default handler is
    replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if handler is None:
        for existing in list(logger.handlers):
            if getattr(existing, "_hubsummary_default", False):
                logger.removeHandler(existing)
        handler = logging.StreamHandler()
        handler._hubsummary_default = True  # type: ignore[attr-defined]

    if json_format:
        handler.setFormatter(JSONFormatter())
    elif handler.formatter is None:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    if handler not in logger.handlers:
        logger.addHandler(handler)
    return logger
