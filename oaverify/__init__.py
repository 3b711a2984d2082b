"""OpenAttestation issuer identity verification (DNS-TXT)."""

__version__ = "0.1.0"
