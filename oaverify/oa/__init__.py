"""OpenAttestation DNS-TXT identity proof verification.

Issuance status (token registry / document store) and issuer identity
resolution, reduced to one ISSUER_IDENTITY verification fragment.
"""

from .api_models import (
    FRAGMENT_NAME,
    FRAGMENT_TYPE,
    DnsRecord,
    ErrorReason,
    FragmentStatus,
    Identity,
    InvalidIdentity,
    NetworkContext,
    OpenAttestationDnsTxtCode,
    ValidIdentity,
    VerificationFragment,
)
from .exceptions import (
    VerifierError,
    CodedError,
    UnsupportedContractVariant,
    UnsupportedIdentityType,
    MissingLocation,
    DocumentFormatError,
    ChainReadError,
    DnsLookupError,
)
from .document import DocumentIssuer, V2Document, V3Document, load_document, parse_wrapped_document
from .issued import ContractVariant, SmartContractReference, check_document_issued, contract_references, is_issued
from .identity import resolve_issuer_identity
from .options import VerificationOptions, default_options
from .verify import (
    OpenAttestationDnsTxtIdentityProof,
    openattestation_dns_txt_identity_proof,
    verify_document,
    with_coded_error_handler,
)

__all__ = [
    # Models
    "FRAGMENT_NAME",
    "FRAGMENT_TYPE",
    "DnsRecord",
    "ErrorReason",
    "FragmentStatus",
    "Identity",
    "InvalidIdentity",
    "NetworkContext",
    "OpenAttestationDnsTxtCode",
    "ValidIdentity",
    "VerificationFragment",
    # Exceptions
    "VerifierError",
    "CodedError",
    "UnsupportedContractVariant",
    "UnsupportedIdentityType",
    "MissingLocation",
    "DocumentFormatError",
    "ChainReadError",
    "DnsLookupError",
    # Documents
    "DocumentIssuer",
    "V2Document",
    "V3Document",
    "load_document",
    "parse_wrapped_document",
    # Issuance
    "ContractVariant",
    "SmartContractReference",
    "is_issued",
    "contract_references",
    "check_document_issued",
    # Identity
    "resolve_issuer_identity",
    "VerificationOptions",
    "default_options",
    "OpenAttestationDnsTxtIdentityProof",
    "openattestation_dns_txt_identity_proof",
    "verify_document",
    "with_coded_error_handler",
]
