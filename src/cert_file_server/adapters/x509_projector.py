"""
PEM/X.509 projector adapter — one certificate file → one PresentationRecord.

Adapter layer — implements the CertificateProjector port using:
  - asn1crypto: PEM armor decoding (first CERTIFICATE block, base64 body)
  - asn1crypto: subject and issuer Common Names, decoded per attribute
  - cryptography (PyCA): DER X.509 parsing, expiry and public key summary

Pipeline for a single file:
  raw bytes
    → asn1crypto: pem.unarmor()                 MALFORMED_PEM on failure
    → cryptography: load_der_x509_certificate() INVALID_CERTIFICATE on failure
    → subject CN, issuer CN, not-after, public key summary
    → path as text                              NON_TEXT_PATH on failure
    → PresentationRecord

Only the FIRST Common Name of a distinguished name is used. A name with no
CN, or a CN that is not decodable as text, yields "" rather than a failure.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from asn1crypto import pem
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

from cert_file_server.domain.models import CertificateFile, PresentationRecord, printable_path
from cert_file_server.domain.result import ErrorCode, Result

log = structlog.get_logger()

_CERTIFICATE_BLOCK_TYPES = frozenset({"CERTIFICATE", "X509 CERTIFICATE"})

NOT_AFTER_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

UNKNOWN_KEY = "unknown"


# ─────────────────────── PEM Decoding ───────────────────────


def _unarmor_certificate(raw: bytes) -> bytes:
    """
    Return the DER body of the first CERTIFICATE block in `raw`.

    Text before, between or after blocks is ignored; blocks of other
    types (keys, CRLs) are skipped. Raises ValueError when there is none.
    """
    if not pem.detect(raw):
        raise ValueError("no PEM armor found")
    for object_type, _headers, der_bytes in pem.unarmor(raw, multiple=True):
        if object_type in _CERTIFICATE_BLOCK_TYPES:
            return der_bytes
    raise ValueError("no CERTIFICATE block found")


# ─────────────────────── X.509 Field Extraction ───────────────────────


def _first_common_name(name: asn1_x509.Name) -> str:
    """
    First CN attribute of `name` as text, or "" if there is none.

    A CN whose bytes don't decode in its declared string type also yields "".
    """
    for rdn in name.chosen:
        for attribute in rdn:
            if attribute["type"].native != "common_name":
                continue
            try:
                value = attribute["value"].native
            except ValueError:
                return ""
            return value if isinstance(value, str) else ""
    return ""


def _format_not_after(cert: x509.Certificate) -> str:
    return cert.not_valid_after_utc.strftime(NOT_AFTER_FORMAT)


def _describe_public_key(cert: x509.Certificate) -> str:
    """
    Summarize the subject public key: algorithm plus size or curve.

    e.g. "RSA 2048", "EC secp256r1", "Ed25519". Keys cryptography cannot
    load are reported as "unknown".
    """
    try:
        key = cert.public_key()
    except (UnsupportedAlgorithm, ValueError) as e:
        log.debug("projector.public_key_unsupported", error=str(e))
        return UNKNOWN_KEY

    match key:
        case rsa.RSAPublicKey():
            return f"RSA {key.key_size}"
        case ec.EllipticCurvePublicKey():
            return f"EC {key.curve.name}"
        case dsa.DSAPublicKey():
            return f"DSA {key.key_size}"
        case ed25519.Ed25519PublicKey():
            return "Ed25519"
        case ed448.Ed448PublicKey():
            return "Ed448"
    return type(key).__name__


def _extract_display_fields(der_bytes: bytes) -> dict[str, str]:
    """
    Parse DER bytes and pull out the fields shown in the listing.

    cryptography validates the certificate and supplies expiry and key.
    Names are read through asn1crypto, which decodes each attribute on
    access, so a CN with undecodable bytes costs only that field.

    Raises ValueError when the bytes are not an X.509 certificate.
    """
    cert = x509.load_der_x509_certificate(der_bytes)
    names = asn1_x509.Certificate.load(der_bytes)
    return {
        "common_name": _first_common_name(names.subject),
        "issuer": _first_common_name(names.issuer),
        "not_after": _format_not_after(cert),
        "key_info": _describe_public_key(cert),
    }


def _path_as_text(path: Path) -> str:
    """The path as UTF-8 text. Raises UnicodeEncodeError for undecodable names."""
    text = str(path)
    text.encode("utf-8")
    return text


# ─────────────────────── Public Projector Class ───────────────────────


class PemCertificateProjector:
    """
    Project a PEM certificate file into its display fields.

    Implements the CertificateProjector port.
    Every exception is caught at this adapter boundary via Result.from_computation().
    """

    def project(self, file: CertificateFile) -> Result[PresentationRecord]:
        """
        Decode, parse and project one certificate file.

        Returns Result[PresentationRecord] on success, or a failure coded
        MALFORMED_PEM, INVALID_CERTIFICATE or NON_TEXT_PATH.
        """
        label = printable_path(file.path)
        return (
            Result.from_computation(
                lambda: _unarmor_certificate(file.content),
                ErrorCode.MALFORMED_PEM,
                f"{label} does not contain a PEM certificate",
            )
            .flat_map(
                lambda der_bytes: Result.from_computation(
                    lambda: _extract_display_fields(der_bytes),
                    ErrorCode.INVALID_CERTIFICATE,
                    f"{label} is not a valid X.509 certificate",
                )
            )
            .flat_map(lambda fields: self._to_record(file, fields, label))
            .peek_failure(
                lambda err: log.debug(
                    "projector.failed", path=label, code=err.code.value, error=err.cause
                )
            )
        )

    def _to_record(
        self,
        file: CertificateFile,
        fields: dict[str, str],
        label: str,
    ) -> Result[PresentationRecord]:
        return Result.from_computation(
            lambda: _path_as_text(file.path),
            ErrorCode.NON_TEXT_PATH,
            f"{label} is not representable as text",
        ).map(
            lambda source_path: PresentationRecord(
                source_path=source_path,
                filename=file.filename,
                **fields,
            )
        )
