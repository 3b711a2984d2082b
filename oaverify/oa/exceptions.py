"""
OpenAttestation verifier exceptions.

Domain invalidity (no matching DNS record, issuer not using DNS-TXT) is
never raised; it is returned as an InvalidIdentity. The exceptions below
cover malformed input and collaborator failures, and are converted into
ERROR fragments only by the verifier's error boundary.
"""

from typing import Optional

from oaverify.oa.api_models import OpenAttestationDnsTxtCode


class VerifierError(Exception):
    """Base exception for OpenAttestation verifier errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CodedError(VerifierError):
    """Error carrying its own reason code.

    The error boundary reports ``code`` instead of UNEXPECTED_ERROR.
    """

    def __init__(self, code: OpenAttestationDnsTxtCode, message: str):
        self.code = code
        super().__init__(message)


# =============================================================================
# Input errors (caller bugs)
# =============================================================================

class UnsupportedContractVariant(VerifierError):
    """Smart contract reference has a variant with no issuance handler."""

    def __init__(self, variant: object):
        self.variant = variant
        super().__init__(f"Smart contract type not supported: {variant}")


class UnsupportedIdentityType(VerifierError):
    """Issuer identity proof is not DNS-TXT."""

    def __init__(self, identity_type: Optional[str]):
        self.identity_type = identity_type
        super().__init__(f"Identity type not supported: {identity_type or '<empty>'}")


class MissingLocation(VerifierError):
    """Issuer identity proof has no location (domain)."""

    def __init__(self, message: str = "Location is missing"):
        super().__init__(message)


class DocumentFormatError(VerifierError):
    """Wrapped document is neither a schema v2 nor a schema v3 document."""


# =============================================================================
# Collaborator errors (transport/runtime)
# =============================================================================

class ChainReadError(VerifierError):
    """Chain JSON-RPC read failed or returned an unusable result."""


class DnsLookupError(VerifierError):
    """DNS TXT lookup failed or returned an unusable response."""
