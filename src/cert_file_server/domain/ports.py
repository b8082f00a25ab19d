"""
Ports — Protocol-based interfaces for the pipeline's collaborators.

  Domain ← Ports (protocols) ← Adapters (implementations)

Adapters satisfy a port structurally, by implementing its method.
Every port returns a Result; adapters never raise into the pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from cert_file_server.domain.models import (
    CertificateFile,
    CertificateListing,
    PresentationRecord,
    ScanEntry,
)
from cert_file_server.domain.result import Result


@runtime_checkable
class CertificateScanner(Protocol):
    """
    Port: enumerate the regular files directly inside a directory.

    The outer Result fails when the directory itself cannot be listed.
    Each entry pairs a file path with its contents, or with the reason
    it could not be read.
    """

    def scan(self, directory: Path) -> Result[list[ScanEntry]]: ...


@runtime_checkable
class CertificateProjector(Protocol):
    """Port: turn one PEM file into the display fields of its certificate."""

    def project(self, file: CertificateFile) -> Result[PresentationRecord]: ...


@runtime_checkable
class PageRenderer(Protocol):
    """Port: render a listing into an HTML document."""

    def render(self, listing: CertificateListing) -> Result[str]: ...
