"""
Shared test fixtures for the cert-file-server test suite.

Provides a temporary certificate directory, the shipped template
directory, and settings that point the application at both.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cert_file_server.config import AppSettings

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


@pytest.fixture()
def certs_dir(tmp_path: Path) -> Path:
    """An empty certificate directory."""
    path = tmp_path / "certs"
    path.mkdir()
    return path


@pytest.fixture()
def templates_dir() -> Path:
    """The template directory shipped with the service."""
    return TEMPLATES_DIR


@pytest.fixture()
def settings(certs_dir: Path, templates_dir: Path) -> AppSettings:
    """Settings for a lenient service over the temporary certificate directory."""
    return AppSettings(
        _env_file=None,
        certs_dir=certs_dir,
        templates_dir=templates_dir,
        log_level="DEBUG",
        strict_parsing=False,
    )
