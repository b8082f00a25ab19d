"""
Application entry point — wires dependencies and starts the HTTP server.

Composition root: creates the concrete adapters and hands them to the
ASGI application, then runs it under Uvicorn.

This is the ONLY place where concrete adapter classes are instantiated.
Everything else depends on Protocol interfaces.

Responsibilities:
  1. Configure structlog for structured logging
  2. Load and validate configuration from environment
  3. Create concrete adapter instances (scanner, projector, renderer)
  4. Serve the application on HOST:PORT
"""

from __future__ import annotations

import logging
import sys
from typing import TypeAlias

import structlog
import uvicorn

from cert_file_server import __version__
from cert_file_server.adapters.filesystem import DirectoryScanner
from cert_file_server.adapters.templates import JinjaPageRenderer
from cert_file_server.adapters.x509_projector import PemCertificateProjector
from cert_file_server.config import AppSettings


def configure_structlog(log_level: str = "DEBUG") -> None:
    """
    Configure structlog for the whole process.

    Colored, human-readable console output with ISO timestamps. Events
    below `log_level` are dropped; unknown level names fall back to DEBUG.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.DEBUG)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


_Adapters: TypeAlias = tuple[DirectoryScanner, PemCertificateProjector, JinjaPageRenderer]


def _create_adapters(settings: AppSettings) -> _Adapters:
    """Instantiate the scanner, projector and renderer from application settings."""
    scanner = DirectoryScanner()
    projector = PemCertificateProjector()
    renderer = JinjaPageRenderer(
        templates_dir=settings.templates_dir,
        template_name=settings.template_name,
    )
    return scanner, projector, renderer


def main() -> None:
    """Load settings, configure logging and serve the listing."""
    try:
        settings = AppSettings()
    except Exception as e:
        print(f"FATAL: Configuration error: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    log.info(
        "app.starting",
        version=__version__,
        log_level=settings.log_level,
        certs_dir=str(settings.certs_dir),
        templates_dir=str(settings.templates_dir),
        strict_parsing=settings.strict_parsing,
    )

    from cert_file_server.asgi import create_app

    app = create_app(settings)

    log.debug("app.listening", host=settings.host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
