"""
Template adapter — render a CertificateListing to HTML with Jinja2.

Adapter layer — implements the PageRenderer port.

Templates are loaded from a directory with FileSystemLoader, so any file
below it (subdirectories included) can be referenced by its relative name.
The listing template receives:

  certs          list[PresentationRecord]
  skipped        list[SkippedFile]
  skipped_count  int

A missing template, a syntax error or an undefined variable becomes
Failure(RENDERING_FAILURE).
"""

from __future__ import annotations

from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from cert_file_server.domain.models import CertificateListing
from cert_file_server.domain.result import ErrorCode, Result

log = structlog.get_logger()


class JinjaPageRenderer:
    """
    Render the certificate listing page from a template directory.

    Implements the PageRenderer port.
    """

    def __init__(self, templates_dir: Path, template_name: str = "certs.html") -> None:
        self._template_name = template_name
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, listing: CertificateListing) -> Result[str]:
        """
        Render `listing` with the configured template.

        Returns Result[str] with the HTML document, or
        Failure(RENDERING_FAILURE) when the template can't be loaded or rendered.
        """
        return Result.from_computation(
            lambda: self._render(listing),
            ErrorCode.RENDERING_FAILURE,
            f"Failed to render template {self._template_name}",
        ).peek(
            lambda html: log.debug(
                "listing.rendered",
                template=self._template_name,
                certificates=len(listing.records),
                skipped=listing.skipped_count,
                size=len(html),
            )
        )

    def _render(self, listing: CertificateListing) -> str:
        template = self._env.get_template(self._template_name)
        return template.render(
            certs=listing.records,
            skipped=listing.skipped,
            skipped_count=listing.skipped_count,
        )
