"""
Filesystem adapter — enumerate and read the certificate directory.

Adapter layer — implements the CertificateScanner port with pathlib.

Only entries directly inside the directory are considered (no recursion).
Symlinks pointing at regular files count as regular files. Entries are
sorted by name so the listing order does not depend on the filesystem.

Failure policy:
  - directory missing / not listable → Failure(DIRECTORY_UNREADABLE)
  - one file unreadable              → that element is Failure(FILE_UNREADABLE),
                                       the remaining files are still read
"""

from __future__ import annotations

from pathlib import Path

import structlog

from cert_file_server.domain.models import CertificateFile, ScanEntry, printable_path
from cert_file_server.domain.result import ErrorCode, Result

log = structlog.get_logger()


class DirectoryScanner:
    """
    Read every regular file directly inside a directory.

    Implements the CertificateScanner port.
    """

    def scan(self, directory: Path) -> Result[list[ScanEntry]]:
        """
        List `directory` and read each regular file.

        Returns Success with one (path, Result) entry per file (possibly none),
        or Failure(DIRECTORY_UNREADABLE) when the directory can't be listed.
        """
        return Result.from_computation(
            lambda: _regular_files(directory),
            ErrorCode.DIRECTORY_UNREADABLE,
            f"Cannot read certificate directory {printable_path(directory)}",
        ).map(lambda paths: self._read_all(directory, paths))

    def _read_all(self, directory: Path, paths: list[Path]) -> list[ScanEntry]:
        entries = [(path, _read_file(path)) for path in paths]
        unreadable = sum(1 for _, f in entries if f.is_failure())
        log.debug(
            "scanner.scanned",
            directory=printable_path(directory),
            files=len(entries),
            unreadable=unreadable,
        )
        return entries


def _regular_files(directory: Path) -> list[Path]:
    """Sorted regular files directly under `directory`. Raises OSError if unlistable."""
    return sorted(
        (entry for entry in directory.iterdir() if _is_regular_file(entry)),
        key=lambda p: p.name,
    )


def _is_regular_file(entry: Path) -> bool:
    # is_file() follows symlinks; a dangling link or a racing delete is just "not a file"
    try:
        return entry.is_file()
    except OSError:
        return False


def _read_file(path: Path) -> Result[CertificateFile]:
    return (
        Result.from_computation(
            path.read_bytes,
            ErrorCode.FILE_UNREADABLE,
            f"Cannot read {printable_path(path)}",
        )
        .map(lambda content: CertificateFile(path=path, content=content))
        .peek_failure(
            lambda err: log.debug(
                "scanner.file_unreadable", path=printable_path(path), error=err.cause
            )
        )
    )
