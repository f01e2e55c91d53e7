"""HTTP API wrapping :class:`~hubsummary.router.IngestionRouter`.

Provides a FastAPI application with the upload and text summarization
endpoints used by the browser widget.  ``fastapi`` and
``python-multipart`` are lazy-imported so the rest of the package is
importable without them installed.

Usage::

    from hubsummary.cli.server import create_app
    app = create_app()

Endpoints:

* ``POST /buffer-to-file-summary`` (multipart, field ``file``) ->
  ``{"text", "summary"}``.  ``/buffer-to-text`` is kept as an alias.
* ``POST /summarize-text`` (JSON ``{"text"}``) -> ``{"summary"}``
* ``POST /summarize-html`` (JSON ``{"html"}``) -> ``{"summary"}``
* ``GET /health``

Every error is returned as ``{"error": "<message>"}``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from ..drivers.base import AsyncDriver
from ..exceptions import (
    BackendError,
    ClientInputError,
    ExtractionError,
    HubSummaryError,
    PayloadTooLargeError,
)
from ..router import IngestionRouter
from ..settings import Settings
from ..summarizer import Summarizer

logger = logging.getLogger("hubsummary.server")

# Allowance for multipart boundaries and headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024

UPLOAD_PATHS = frozenset({"/buffer-to-file-summary", "/buffer-to-text"})


def create_app(
    settings: Optional[Settings] = None,
    *,
    driver: Optional[AsyncDriver] = None,
    summarizer: Optional[Summarizer] = None,
) -> Any:
    """Create and return a FastAPI application.

    Parameters:
        settings: Application settings.  Defaults to the global
            :data:`hubsummary.settings.settings` singleton.
        driver: Backend driver.  Built from ``settings.model`` when omitted,
            which requires an API key.
        summarizer: Fully configured summarizer; overrides *driver*.

    Raises:
        ConfigurationError: If no driver is supplied and the API key is
            missing.
    """
    try:
        from fastapi import FastAPI, File, Request, UploadFile
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
        from pydantic import BaseModel
        from starlette.exceptions import HTTPException as StarletteHTTPException
    except ImportError as exc:
        raise ImportError("The server requires fastapi and python-multipart: pip install hubsummary") from exc

    if settings is None:
        from ..settings import settings as default_settings

        settings = default_settings

    if summarizer is None:
        if driver is None:
            from ..drivers import get_async_driver_for_model

            driver = get_async_driver_for_model(settings.model, api_key=settings.require_api_key())
            logger.info("Backend driver ready: %s", settings.model)
        summarizer = Summarizer(driver, temperature=settings.temperature)

    router = IngestionRouter(summarizer, max_upload_bytes=settings.max_upload_bytes)

    # ---- Request models ----

    class TextRequest(BaseModel):
        text: Optional[str] = None

    class HtmlRequest(BaseModel):
        html: Optional[str] = None

    # ---- App ----

    @asynccontextmanager
    async def lifespan(app):
        yield
        await summarizer.driver.aclose()

    app = FastAPI(title="hubsummary API", version="0.1.0", lifespan=lifespan)
    app.state.router = router

    def _error(status_code: int, message: str) -> JSONResponse:
        return JSONResponse({"error": message}, status_code=status_code)

    # ---- Middleware ----
    # Registered before CORSMiddleware, which therefore wraps both of them.

    @app.middleware("http")
    async def _upload_limit(request: Request, call_next):
        # Runs before the multipart body is parsed and spooled.
        if request.method == "POST" and request.url.path in UPLOAD_PATHS:
            declared = request.headers.get("content-length")
            if declared and declared.isdigit():
                limit = settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
                if int(declared) > limit:
                    exc = PayloadTooLargeError(int(declared), limit)
                    logger.warning("Rejected upload to %s: %s", request.url.path, exc)
                    return _error(413, str(exc))
        return await call_next(request)

    @app.middleware("http")
    async def _unexpected_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s", request.url.path)
            return _error(500, "Internal server error.")

    if settings.cors_origins or settings.cors_origin_regex:
        if "*" in settings.cors_origins:
            logger.warning(
                "CORS is configured to allow all origins ('*'). "
                "This is insecure for production deployments."
            )
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_origin_regex=settings.cors_origin_regex,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # ---- Error envelope ----

    @app.exception_handler(PayloadTooLargeError)
    async def _too_large(request: Request, exc: PayloadTooLargeError):
        return _error(413, str(exc))

    @app.exception_handler(ClientInputError)
    async def _client_input(request: Request, exc: ClientInputError):
        return _error(400, str(exc))

    @app.exception_handler(ExtractionError)
    async def _extraction(request: Request, exc: ExtractionError):
        logger.error("Extraction failed on %s: %s", request.url.path, exc)
        return _error(500, f"Failed to extract text from file: {exc}")

    @app.exception_handler(BackendError)
    async def _backend(request: Request, exc: BackendError):
        logger.error("Summarization failed on %s: %s", request.url.path, exc)
        return _error(500, f"Failed to summarize: {exc}")

    @app.exception_handler(HubSummaryError)
    async def _other(request: Request, exc: HubSummaryError):
        logger.error("Request to %s failed: %s", request.url.path, exc)
        return _error(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        return _error(400, "Malformed request body.")

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    # ---- Health endpoint ----

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ---- Summarization endpoints ----

    async def _file_summary(file: Optional[UploadFile]):
        # bounds the file itself; the middleware only sees the declared body size
        data = b""
        content_type = None
        if file is not None:
            data = await file.read(settings.max_upload_bytes + 1)
            content_type = file.content_type
            await file.close()
            if len(data) > settings.max_upload_bytes:
                raise PayloadTooLargeError(len(data), settings.max_upload_bytes)

        outcome = await router.handle_file_upload(data, content_type)
        return outcome.to_dict()

    @app.post("/buffer-to-file-summary")
    async def buffer_to_file_summary(file: Optional[UploadFile] = File(None)):
        return await _file_summary(file)

    @app.post("/buffer-to-text")
    async def buffer_to_text(file: Optional[UploadFile] = File(None)):
        return await _file_summary(file)

    @app.post("/summarize-text")
    async def summarize_text(req: TextRequest):
        summary = await router.handle_raw_text(req.text)
        return {"summary": summary}

    @app.post("/summarize-html")
    async def summarize_html(req: HtmlRequest):
        summary = await router.handle_page_html(req.html)
        return {"summary": summary}

    return app
