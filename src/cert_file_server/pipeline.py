"""
Pipeline — scan the certificate directory, project each file, render the page.

Domain layer — no I/O of its own. The filesystem, the X.509 parsing and
the template engine are injected via ports.

  scan(directory)                       Failure → request fails (DIRECTORY_UNREADABLE)
    → for each file: project(file)      Failure → skipped (lenient) or request fails (strict)
      → CertificateListing
        → render(listing)               Failure → request fails (RENDERING_FAILURE)

Batch policy:
  - lenient (default): a bad file is logged, recorded in listing.skipped and
    left out; every valid certificate is still shown.
  - strict: the first bad file fails the whole listing.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from cert_file_server.domain.models import (
    CertificateListing,
    PresentationRecord,
    ScanEntry,
    SkippedFile,
    printable_path,
)
from cert_file_server.domain.ports import CertificateProjector, CertificateScanner, PageRenderer
from cert_file_server.domain.result import FailureDescription, Result

log = structlog.get_logger()


def _skipped_file(path: Path, failure: FailureDescription) -> SkippedFile:
    skipped = SkippedFile(path=printable_path(path), code=failure.code, reason=failure.cause)
    log.warning(
        "pipeline.file_skipped",
        path=skipped.path,
        code=skipped.code.value,
        reason=skipped.reason,
    )
    return skipped


def _collect(
    directory: Path,
    entries: list[ScanEntry],
    projector: CertificateProjector,
    strict: bool,
) -> Result[CertificateListing]:
    """Project every scanned file and gather (records, skipped) under the chosen policy."""
    projected = [(path, scanned.flat_map(projector.project)) for path, scanned in entries]

    if strict:
        return Result.all_of(result for _, result in projected).map(
            lambda records: CertificateListing(records=records)
        )

    records: list[PresentationRecord] = []
    skipped: list[SkippedFile] = []
    for path, result in projected:
        result.either(
            on_success=records.append,
            on_failure=lambda err, path=path: skipped.append(_skipped_file(path, err)),
        )

    log.info(
        "pipeline.listing_built",
        directory=printable_path(directory),
        certificates=len(records),
        skipped=len(skipped),
    )
    return Result.success(CertificateListing(records=records, skipped=skipped))


def build_listing(
    directory: Path,
    scanner: CertificateScanner,
    projector: CertificateProjector,
    strict: bool = False,
) -> Result[CertificateListing]:
    """
    Scan `directory` and project every regular file in it.

    Returns Result[CertificateListing] with records in filename order.
    Fails only when the directory cannot be read, or, with strict=True,
    when any single file cannot be read or projected.
    """
    return scanner.scan(directory).flat_map(
        lambda entries: _collect(directory, entries, projector, strict)
    )


def render_listing(
    directory: Path,
    scanner: CertificateScanner,
    projector: CertificateProjector,
    renderer: PageRenderer,
    strict: bool = False,
) -> Result[str]:
    """
    Build the listing for `directory` and render it to HTML.

    Chains build_listing and the renderer via flat_map; the first
    request-fatal failure short-circuits.
    """
    return build_listing(directory, scanner, projector, strict=strict).flat_map(renderer.render)
