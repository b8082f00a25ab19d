"""
FastAPI + Uvicorn ASGI application — the certificate listing web service.

Routes:
  GET /              HTML listing of every certificate in the certs directory
  GET /certs/<path>  raw certificate files (Starlette StaticFiles)
  GET /health        liveness probe: is the certs directory there?
  GET /info          application metadata

Every listing request re-scans and re-parses the directory; nothing is
cached and no state is shared between requests. The scan runs in a worker
thread so filesystem reads don't block the event loop.

Entry point for production: uvicorn cert_file_server.asgi:app --host 0.0.0.0 --port 2002
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import partial
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from cert_file_server import __version__
from cert_file_server.config import AppSettings
from cert_file_server.domain.result import FailureDescription
from cert_file_server.main import _create_adapters, configure_structlog
from cert_file_server.pipeline import render_listing

log = structlog.get_logger()


def _error_response(cause: str) -> PlainTextResponse:
    return PlainTextResponse(f"Something went wrong: {cause}", status_code=500)


def _failure_response(failure: FailureDescription) -> PlainTextResponse:
    log.error("listing.failed", code=failure.code.value, error=failure.cause)
    return _error_response(failure.cause)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """
    Build the ASGI application for the given settings.

    Wires the adapters into the listing pipeline (partial application),
    registers the routes and mounts the static certificate directory.
    """
    settings = settings or AppSettings()
    scanner, projector, renderer = _create_adapters(settings)

    listing_fn = partial(
        render_listing,
        directory=settings.certs_dir,
        scanner=scanner,
        projector=projector,
        renderer=renderer,
        strict=settings.strict_parsing,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_structlog(settings.log_level)
        log.info(
            "asgi.startup",
            version=__version__,
            certs_dir=str(settings.certs_dir),
            strict_parsing=settings.strict_parsing,
        )
        yield
        log.info("asgi.shutdown")

    app = FastAPI(
        title="cert-file-server",
        description="Read-only listing and download of X.509 certificate files",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.get("/", response_class=HTMLResponse)
    async def display_certs() -> Response:
        """
        Render the certificate listing page.

        Returns 200 with the HTML listing, even when some files were skipped.
        Returns 500 text/plain `Something went wrong: <cause>` when the
        directory can't be read or the template can't be rendered.
        """
        try:
            result = await asyncio.to_thread(listing_fn)
        except Exception as e:
            log.error("listing.exception", error=str(e))
            return _error_response(str(e))

        return result.either(
            on_success=lambda html: HTMLResponse(html),
            on_failure=_failure_response,
        )

    @app.get("/health")
    async def health() -> JSONResponse:
        """
        Liveness probe.

        Returns 200 when the certificate directory exists, 503 otherwise.
        """
        certs_dir = settings.certs_dir
        if not certs_dir.is_dir():
            log.warning("health.check_failed", certs_dir=str(certs_dir))
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "reason": "certificate directory not found",
                    "certs_dir": str(certs_dir),
                },
            )
        return JSONResponse(
            status_code=200,
            content={"status": "healthy", "certs_dir": str(certs_dir)},
        )

    @app.get("/info")
    async def info() -> dict[str, Any]:
        """Application metadata, for debugging and monitoring."""
        return {
            "name": "cert-file-server",
            "version": __version__,
            "certs_dir": str(settings.certs_dir),
            "templates_dir": str(settings.templates_dir),
            "template_name": settings.template_name,
            "strict_parsing": settings.strict_parsing,
        }

    app.mount(
        "/certs",
        StaticFiles(directory=settings.certs_dir, check_dir=False),
        name="certs",
    )

    return app


app = create_app()


if __name__ == "__main__":
    # For local testing: python -m cert_file_server.asgi
    import uvicorn

    _settings = AppSettings()
    uvicorn.run(
        "cert_file_server.asgi:app",
        host=_settings.host,
        port=_settings.port,
        reload=False,
        log_level=_settings.log_level.lower(),
    )
