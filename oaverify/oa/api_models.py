"""
OpenAttestation DNS-TXT identity proof result models.

Identities are produced once per issuer and fragments once per
verification run; both are immutable after construction.
"""

from enum import Enum, IntEnum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Fragment Status
# =============================================================================

class FragmentStatus(str, Enum):
    """Four-valued verification fragment status."""
    VALID = "VALID"        # Every issuer identity is anchored
    INVALID = "INVALID"    # At least one issuer identity is not anchored
    SKIPPED = "SKIPPED"    # No issuer uses DNS-TXT with a smart contract
    ERROR = "ERROR"        # Unexpected failure (transport, malformed input)


FRAGMENT_NAME = "OpenAttestationDnsTxtIdentityProof"
FRAGMENT_TYPE = "ISSUER_IDENTITY"


# =============================================================================
# Error Reasons
# =============================================================================

class OpenAttestationDnsTxtCode(IntEnum):
    """Reason codes for the DNS-TXT identity proof fragment."""
    UNEXPECTED_ERROR = 0
    INVALID_IDENTITY = 1
    SKIPPED = 2
    INVALID_ISSUERS = 3
    MATCHING_RECORD_NOT_FOUND = 4


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ErrorReason(_Frozen):
    """Reason attached to INVALID/SKIPPED/ERROR results."""
    code: int
    code_string: str = Field(alias="codeString")
    message: str

    @classmethod
    def from_code(cls, code: OpenAttestationDnsTxtCode, message: str) -> "ErrorReason":
        """Build a reason whose codeString is the code's name."""
        return cls(code=int(code), code_string=code.name, message=message)


# =============================================================================
# Identity
# =============================================================================

class ValidIdentity(_Frozen):
    status: Literal["VALID"] = "VALID"
    location: str
    value: str


class InvalidIdentity(_Frozen):
    status: Literal["INVALID"] = "INVALID"
    location: Optional[str] = None
    value: Optional[str] = None
    reason: ErrorReason


Identity = Annotated[Union[ValidIdentity, InvalidIdentity], Field(discriminator="status")]


# =============================================================================
# Collaborator Data
# =============================================================================

class NetworkContext(_Frozen):
    """Network the chain collaborator is connected to."""
    chain_id: str = Field(alias="chainId")  # decimal string


class DnsRecord(_Frozen):
    """One openatts TXT record, as published under an issuer's domain."""
    type: str
    net: str
    net_id: str = Field(alias="netId")
    addr: str
    dnssec: bool = False


# =============================================================================
# Verification Fragment
# =============================================================================

class VerificationFragment(_Frozen):
    """Terminal output of one verification run.

    v2 documents carry the per-issuer identities in ``data``; for v3
    documents the single identity's ``location``/``value`` are copied onto
    the fragment itself.
    """
    name: str = FRAGMENT_NAME
    type: str = FRAGMENT_TYPE
    status: FragmentStatus
    data: Optional[Union[Identity, List[Identity]]] = None
    location: Optional[str] = None
    value: Optional[str] = None
    reason: Optional[ErrorReason] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the output schema (camelCase, unset fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
