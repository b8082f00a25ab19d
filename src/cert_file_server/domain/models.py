"""
Domain models — immutable values flowing through the listing pipeline.

  CertificateFile      scanner output: one regular file and its raw bytes
  PresentationRecord   projector output: the display fields for one certificate
  SkippedFile          a file left out of the listing, with the reason
  CertificateListing   the records plus the skipped files of one scan

All models are frozen dataclasses. They live for a single request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeAlias

from cert_file_server.domain.result import ErrorCode, Result


def printable_path(path: Path | str) -> str:
    """
    Text form of a path that is always safe to log or render.

    Names that are not valid UTF-8 come back from the OS surrogate-escaped;
    their undecodable bytes are shown as backslash escapes instead.
    """
    text = os.fspath(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return os.fsencode(text).decode("utf-8", errors="backslashreplace")
    return text


@dataclass(frozen=True, slots=True)
class CertificateFile:
    """A regular file found directly inside the certificate directory."""

    path: Path
    content: bytes = field(repr=False)

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True, slots=True)
class PresentationRecord:
    """
    Display fields of one certificate, handed to the template.

    `common_name` and `issuer` hold the first CN of the subject and issuer
    names; both are empty strings (never None) when there is no CN.
    `not_after` is always UTC, formatted `YYYY-MM-DD HH:MM:SS UTC`.
    """

    common_name: str
    issuer: str
    not_after: str
    key_info: str
    source_path: str
    filename: str

    @property
    def name(self) -> str:
        """Display name: the subject CN, or the filename when there is none."""
        return self.common_name or self.filename


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A file excluded from the listing under the lenient policy."""

    path: str
    code: ErrorCode
    reason: str


@dataclass(frozen=True, slots=True)
class CertificateListing:
    """Result of one scan: ordered records plus whatever was skipped."""

    records: list[PresentationRecord] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def total_files(self) -> int:
        return len(self.records) + len(self.skipped)


# One scanned directory entry: the path, and its contents or why they couldn't be read.
ScanEntry: TypeAlias = tuple[Path, Result[CertificateFile]]
