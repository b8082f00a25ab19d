"""
Unit tests for the DirectoryScanner filesystem adapter.

Uses real temporary directories. Per-file read failures are simulated by
patching Path.read_bytes, since permission bits don't stop root.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cert_file_server.adapters import filesystem
from cert_file_server.adapters.filesystem import DirectoryScanner
from cert_file_server.domain.result import ErrorCode
from tests.support import ResultAssertions


@pytest.fixture()
def scanner() -> DirectoryScanner:
    return DirectoryScanner()


class TestScanDirectory:
    def test_empty_directory_yields_no_entries(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        """
        GIVEN an empty certificate directory
        WHEN scanned
        THEN the result is Success([]), not an error.
        """
        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))
        assert entries == []

    def test_entries_sorted_by_name(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        """
        GIVEN files created out of order
        WHEN scanned
        THEN entries come back sorted by filename.
        """
        for name in ("b.pem", "c.txt", "a.pem"):
            (certs_dir / name).write_bytes(name.encode())

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        assert [path.name for path, _ in entries] == ["a.pem", "b.pem", "c.txt"]

    def test_reads_raw_bytes(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        (certs_dir / "blob.bin").write_bytes(b"\x00\x01\xff")

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        (path, scanned), = entries
        file = ResultAssertions.assert_success(scanned)
        assert file.path == path == certs_dir / "blob.bin"
        assert file.content == b"\x00\x01\xff"

    def test_subdirectories_not_recursed(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        """
        GIVEN a subdirectory holding a file
        WHEN scanned
        THEN neither the subdirectory nor its contents are listed.
        """
        nested = certs_dir / "archive"
        nested.mkdir()
        (nested / "old.pem").write_bytes(b"old")
        (certs_dir / "current.pem").write_bytes(b"current")

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        assert [path.name for path, _ in entries] == ["current.pem"]

    def test_symlink_to_file_is_listed(self, scanner: DirectoryScanner, certs_dir: Path, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere.pem"
        target.write_bytes(b"linked")
        (certs_dir / "link.pem").symlink_to(target)

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        (_, scanned), = entries
        assert ResultAssertions.assert_success(scanned).content == b"linked"

    def test_dangling_symlink_ignored(self, scanner: DirectoryScanner, certs_dir: Path, tmp_path: Path) -> None:
        (certs_dir / "dangling.pem").symlink_to(tmp_path / "missing.pem")

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        assert entries == []

    def test_scan_is_repeatable(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        for name in ("x.pem", "y.pem"):
            (certs_dir / name).write_bytes(name.encode())

        first = ResultAssertions.assert_success(scanner.scan(certs_dir))
        second = ResultAssertions.assert_success(scanner.scan(certs_dir))

        assert first == second


class TestScanFailures:
    def test_missing_directory_fails(self, scanner: DirectoryScanner, tmp_path: Path) -> None:
        """
        GIVEN a directory that does not exist
        WHEN scanned
        THEN the whole scan fails with DIRECTORY_UNREADABLE.
        """
        result = scanner.scan(tmp_path / "nope")

        error = ResultAssertions.assert_failure(result, ErrorCode.DIRECTORY_UNREADABLE)
        assert "nope" in error.message
        assert isinstance(error.exception, FileNotFoundError)

    def test_file_instead_of_directory_fails(self, scanner: DirectoryScanner, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "certs.pem"
        not_a_dir.write_bytes(b"x")

        result = scanner.scan(not_a_dir)

        ResultAssertions.assert_failure(result, ErrorCode.DIRECTORY_UNREADABLE)

    def test_unreadable_file_is_isolated(
        self,
        scanner: DirectoryScanner,
        certs_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """
        GIVEN three files where one cannot be read
        WHEN scanned
        THEN the scan succeeds, the bad entry is FILE_UNREADABLE and the others are read.
        """
        for name in ("a.pem", "locked.pem", "z.pem"):
            (certs_dir / name).write_bytes(name.encode())

        original_read_bytes = Path.read_bytes

        def _read_bytes(self: Path) -> bytes:
            if self.name == "locked.pem":
                raise PermissionError(13, "Permission denied", str(self))
            return original_read_bytes(self)

        monkeypatch.setattr(Path, "read_bytes", _read_bytes)

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        outcomes = {path.name: scanned for path, scanned in entries}
        ResultAssertions.assert_failure(outcomes["locked.pem"], ErrorCode.FILE_UNREADABLE)
        assert ResultAssertions.assert_success(outcomes["a.pem"]).content == b"a.pem"
        assert ResultAssertions.assert_success(outcomes["z.pem"]).content == b"z.pem"

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that accepts raw byte names")
    def test_non_utf8_name_is_still_read(self, scanner: DirectoryScanner, certs_dir: Path) -> None:
        """
        GIVEN a file whose name is not valid UTF-8
        WHEN scanned
        THEN it is read like any other file (rejection happens in the projector).
        """
        raw_name = os.path.join(os.fsencode(certs_dir), b"bad\xff.pem")
        with open(raw_name, "wb") as fh:
            fh.write(b"content")

        entries = ResultAssertions.assert_success(scanner.scan(certs_dir))

        (path, scanned), = entries
        assert os.fsencode(path.name) == b"bad\xff.pem"
        assert ResultAssertions.assert_success(scanned).content == b"content"

    def test_unreadable_file_logged_at_debug(
        self,
        scanner: DirectoryScanner,
        certs_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """
        GIVEN a file that cannot be read
        WHEN scanned
        THEN the scanner reports it at debug; the pipeline owns the warning.
        """
        (certs_dir / "locked.pem").write_bytes(b"x")

        def _read_bytes(self: Path) -> bytes:
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_bytes", _read_bytes)
        log = MagicMock()
        monkeypatch.setattr(filesystem, "log", log)

        scanner.scan(certs_dir)

        log.warning.assert_not_called()
        events = [c.args[0] for c in log.debug.call_args_list]
        assert "scanner.file_unreadable" in events
