"""FastAPI application factory and lifespan."""

from __future__ import annotations

import argparse
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from typed_notes import __version__
from typed_notes.config import load_settings
from typed_notes.database.repositories import ArticleRepository
from typed_notes.errors import (
    ArticleNotFoundError,
    AuthorizationError,
    InvalidArticleIdError,
    MissingFieldError,
    PayloadTooLargeError,
    StorageFaultError,
)
from typed_notes.health import check_backend
from typed_notes.logging import configure_logging
from typed_notes.routes import articles_router, editor_router, home_router
from typed_notes.startup import init_backend

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from fastapi import Response

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
WRONG_PASSWORD_MESSAGE = "Wrong password, please go back and try again."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store once at startup and close it once at shutdown."""
    settings = app.state.settings
    if settings.app.is_development and not await check_backend(settings):
        raise RuntimeError("storage backend is not reachable")

    backend = await init_backend(settings)
    app.state.backend = backend
    app.state.articles = ArticleRepository(backend)
    logger.info("typed-notes started — version=%s backend=%s", __version__, settings.store.backend)
    try:
        yield
    finally:
        await backend.close()
        logger.info("typed-notes stopped")


def _not_found_page(request: Request) -> HTMLResponse:
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "404.html", {}, status_code=404)


def _server_error_page(request: Request) -> HTMLResponse:
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "500.html", {}, status_code=500)


async def handle_not_found(request: Request, exc: Exception) -> HTMLResponse:
    logger.info("Path %r not found: %s", request.url.path, exc)
    return _not_found_page(request)


async def handle_wrong_password(request: Request, exc: Exception) -> PlainTextResponse:
    logger.info("Path %r rejected: %s", request.url.path, exc)
    return PlainTextResponse(WRONG_PASSWORD_MESSAGE, status_code=401)


async def handle_too_large(request: Request, exc: Exception) -> PlainTextResponse:
    logger.info("Path %r rejected: %s", request.url.path, exc)
    return PlainTextResponse("Request body too large.", status_code=413)


async def handle_bad_request(request: Request, exc: Exception) -> PlainTextResponse:
    logger.info("Path %r rejected: %s", request.url.path, exc)
    return PlainTextResponse("Missing article body.", status_code=400)


async def handle_server_fault(request: Request, exc: Exception) -> HTMLResponse:
    logger.error("Path %r error: %s", request.url.path, exc, exc_info=exc)
    return _server_error_page(request)


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log every request, warning when it exceeds the slow-request threshold."""
    started_at = time.monotonic()
    try:
        response = await call_next(request)
    except Exception:
        # Unhandled errors are answered by the outermost 500 handler.
        _log_request(request, 500, started_at, logging.ERROR)
        raise
    _log_request(request, response.status_code, started_at)
    return response


def _log_request(request: Request, status: int, started_at: float, level: int | None = None) -> None:
    duration_ms = (time.monotonic() - started_at) * 1000
    if level is None:
        slow_ms = request.app.state.settings.app.slow_request_ms
        level = logging.WARNING if duration_ms > slow_ms else logging.DEBUG
    logger.log(
        level,
        "Request handled — method=%s path=%s status=%d duration_ms=%.0f",
        request.method,
        request.url.path,
        status,
        duration_ms,
    )


def create_app() -> FastAPI:
    """Build the application with settings read from the environment."""
    settings = load_settings()
    configure_logging(settings.app.log_level, log_file=settings.app.log_file or None)

    app = FastAPI(
        title="typed-notes",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

    app.add_exception_handler(ArticleNotFoundError, handle_not_found)
    app.add_exception_handler(InvalidArticleIdError, handle_not_found)
    app.add_exception_handler(AuthorizationError, handle_wrong_password)
    app.add_exception_handler(PayloadTooLargeError, handle_too_large)
    app.add_exception_handler(MissingFieldError, handle_bad_request)
    app.add_exception_handler(StorageFaultError, handle_server_fault)
    app.add_exception_handler(Exception, handle_server_fault)
    app.middleware("http")(log_requests)

    app.include_router(home_router)
    app.include_router(articles_router)
    app.include_router(editor_router)
    return app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="typed-notes")
    parser.add_argument("port", nargs="?", type=int, help="port to listen on (default: PORT or 4446)")
    parser.add_argument("--host", default="0.0.0.0", help="interface to bind")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the web process."""
    args = parse_args(argv)
    app = create_app()
    port = args.port or app.state.settings.app.port
    logger.info("Starting server — host=%s port=%d", args.host, port)
    uvicorn.run(app, host=args.host, port=port, log_config=None)


if __name__ == "__main__":
    main()
