"""
cert_file_server — read-only inventory service for X.509 certificate files.

Scans a directory of PEM certificates, parses each into display metadata
(subject CN, issuer CN, expiry, public key) and renders an HTML listing.
The raw files are served for download alongside it.

Built on Railway-Oriented Programming: every stage returns a Result, and
one malformed certificate never hides the others.
"""

__version__ = "0.1.0"
