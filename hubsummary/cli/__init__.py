"""Command-line entry point.

Usage:
    hubsummary serve
    hubsummary serve --port 3000 --json-logs
    hubsummary extract lecture.pdf
    hubsummary summarize notes.txt --mime-type text/plain
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

import click

from ..exceptions import ConfigurationError, HubSummaryError
from ..logging import configure_logging
from ..settings import settings

log = logging.getLogger("hubsummary.cli")


def _guess_mime_type(path: Path, override: str | None) -> str:
    if override:
        return override
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


@click.group()
@click.option("--log-level", default=settings.log_level, show_default=True, help="Logging level.")
@click.option("--json-logs/--no-json-logs", default=settings.log_json, help="Emit JSON log lines.")
def cli(log_level: str, json_logs: bool):
    """Extract and summarize learning-hub documents."""
    configure_logging(log_level, json_format=json_logs)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@cli.command()
@click.option("--host", default=settings.host, show_default=True)
@click.option("--port", default=settings.port, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    from .server import create_app

    try:
        app = create_app()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    log.info("Server running at http://%s:%s", host, port)
    if reload:
        # reload needs an import string so the worker can rebuild the app
        uvicorn.run(
            "hubsummary.cli.server:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_config=None,
        )
    else:
        uvicorn.run(app, host=host, port=port, log_config=None)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mime-type", help="Override the type guessed from the file extension.")
def extract(path: Path, mime_type: str | None):
    """Print the plain text extracted from PATH."""
    from ..ingestion import extract as extract_document

    try:
        doc = extract_document(
            path.read_bytes(),
            _guess_mime_type(path, mime_type),
            max_bytes=settings.max_upload_bytes,
        )
    except HubSummaryError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(doc.text)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mime-type", help="Override the type guessed from the file extension.")
def summarize(path: Path, mime_type: str | None):
    """Print the summary HTML for PATH."""
    from ..drivers import get_async_driver_for_model
    from ..router import IngestionRouter
    from ..summarizer import Summarizer

    try:
        driver = get_async_driver_for_model(settings.model, api_key=settings.require_api_key())
        router = IngestionRouter(
            Summarizer(driver, temperature=settings.temperature),
            max_upload_bytes=settings.max_upload_bytes,
        )
        outcome = asyncio.run(router.handle_file_upload(path.read_bytes(), _guess_mime_type(path, mime_type)))
    except HubSummaryError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(outcome.summary)


__all__ = ["cli"]
