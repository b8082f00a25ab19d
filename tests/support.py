"""
Test helpers — certificate factories and Result assertions.

Certificates are generated on the fly with cryptography, so the suite
needs no binary fixtures. EC P-256 keys are the default (fast to generate).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519
from cryptography.x509.oid import NameOID

from cert_file_server.domain.result import ErrorCode, FailureDescription, Result

T = TypeVar("T")

NOT_BEFORE = datetime(2024, 1, 1, tzinfo=UTC)
NOT_AFTER = datetime(2030, 1, 1, tzinfo=UTC)


# ─────────────────────── Certificate Factories ───────────────────────


def _name(common_names: Sequence[str]) -> x509.Name:
    attributes = [x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Org")]
    attributes += [x509.NameAttribute(NameOID.COMMON_NAME, cn) for cn in common_names]
    return x509.Name(attributes)


def make_certificate(
    common_name: str | None = "example.com",
    issuer_cn: str | None = None,
    not_after: datetime = NOT_AFTER,
    key: Any = None,
    extra_common_names: Sequence[str] = (),
) -> x509.Certificate:
    """
    Build a certificate signed by its own key.

    With issuer_cn=None the certificate is self-issued (issuer == subject).
    common_name=None produces a subject with no CN attribute at all.
    """
    key = key or ec.generate_private_key(ec.SECP256R1())
    subject_cns = [] if common_name is None else [common_name]
    subject = _name([*subject_cns, *extra_common_names])
    issuer = subject if issuer_cn is None else _name([issuer_cn])

    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(NOT_BEFORE)
        .not_valid_after(not_after)
    )
    algorithm = (
        None
        if isinstance(key, ed25519.Ed25519PrivateKey | ed448.Ed448PrivateKey)
        else hashes.SHA256()
    )
    return builder.sign(key, algorithm)


def make_certificate_pem(**kwargs: Any) -> bytes:
    """PEM encoding of make_certificate(**kwargs)."""
    return make_certificate(**kwargs).public_bytes(serialization.Encoding.PEM)


def make_private_key_pem() -> bytes:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


# ─────────────────────── Result Assertions ───────────────────────


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Assert the Result is a Success and return the value."""
        context = f" — {message}" if message else ""
        assert result.is_success(), (
            f"Expected Success but got Failure("
            f"{result.error().code.value}: {result.error().cause!r}){context}"
        )
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Assert the Result is a Failure, optionally checking the error code."""
        context = f" — {message}" if message else ""
        assert result.is_failure(), f"Expected Failure but got Success({result.value()!r}){context}"
        error = result.error()
        if expected_code is not None:
            assert error.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {error.code.value}: {error.message!r}{context}"
            )
        return error
