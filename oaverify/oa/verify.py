"""OpenAttestation DNS-TXT identity proof verifier.

Reduces the issuer identities of a v2 (many issuers) or v3 (one issuer)
document to a single ISSUER_IDENTITY fragment:

- v3: the single identity's status/location/value/reason are copied
  onto the fragment.
- v2: every issuer is resolved concurrently; ``data`` holds all
  identities in issuer order and the first invalid one decides.

Unexpected failures become ERROR fragments in with_coded_error_handler();
nothing else catches exceptions.
"""

import asyncio
import functools
import logging
from typing import Awaitable, Callable, List, Optional

from oaverify.core.config import IDENTITY_PROOF_TYPE_DNS_TXT
from oaverify.oa.api_models import (
    FRAGMENT_NAME,
    FRAGMENT_TYPE,
    ErrorReason,
    FragmentStatus,
    Identity,
    InvalidIdentity,
    OpenAttestationDnsTxtCode,
    VerificationFragment,
)
from oaverify.oa.document import Document, DocumentIssuer, V2Document, V3Document
from oaverify.oa.exceptions import CodedError
from oaverify.oa.identity import resolve_issuer_identity
from oaverify.oa.options import VerificationOptions

log = logging.getLogger(__name__)

SKIPPED_MESSAGE = (
    'Document issuers doesn\'t have "documentStore" / "tokenRegistry" property '
    f"or doesn't use {IDENTITY_PROOF_TYPE_DNS_TXT} type"
)
INVALID_ISSUERS_MESSAGE = f"Issuer is not using {IDENTITY_PROOF_TYPE_DNS_TXT} identityProof type"

VerifyFn = Callable[[Document, VerificationOptions], Awaitable[VerificationFragment]]


# =============================================================================
# Error Boundary
# =============================================================================


def with_coded_error_handler(
    name: str,
    fragment_type: str,
    unexpected_error_code: OpenAttestationDnsTxtCode,
) -> Callable[[VerifyFn], VerifyFn]:
    """Turn any exception raised by a verify function into an ERROR fragment.

    CodedError keeps its own code; every other exception is reported as
    ``unexpected_error_code`` with the exception message. Never retries.
    """

    def decorator(verify: VerifyFn) -> VerifyFn:
        @functools.wraps(verify)
        async def wrapper(*args, **kwargs) -> VerificationFragment:
            try:
                return await verify(*args, **kwargs)
            except Exception as e:
                code = e.code if isinstance(e, CodedError) else unexpected_error_code
                message = getattr(e, "message", None) or str(e) or type(e).__name__
                return VerificationFragment(
                    name=name,
                    type=fragment_type,
                    status=FragmentStatus.ERROR,
                    reason=ErrorReason.from_code(code, message),
                )

        return wrapper

    return decorator


# =============================================================================
# Verifier
# =============================================================================


def _uses_dns_txt(issuer: DocumentIssuer) -> bool:
    return issuer.identity_proof_type == IDENTITY_PROOF_TYPE_DNS_TXT


def _invalid_issuer() -> InvalidIdentity:
    return InvalidIdentity(
        reason=ErrorReason.from_code(
            OpenAttestationDnsTxtCode.INVALID_ISSUERS, INVALID_ISSUERS_MESSAGE
        )
    )


async def _resolve_v2_issuer(issuer: DocumentIssuer, options: VerificationOptions) -> Identity:
    if not _uses_dns_txt(issuer):
        return _invalid_issuer()
    return await resolve_issuer_identity(issuer, issuer.smart_contract_address or "", options)


class OpenAttestationDnsTxtIdentityProof:
    """Verifier for the ISSUER_IDENTITY fragment using DNS-TXT proofs."""

    name = FRAGMENT_NAME
    type = FRAGMENT_TYPE

    def test(self, document: Document) -> bool:
        """True if at least one issuer can be checked with DNS-TXT."""
        if isinstance(document, V3Document):
            return _uses_dns_txt(document.issuer)
        if isinstance(document, V2Document):
            return any(
                issuer.smart_contract_address and _uses_dns_txt(issuer)
                for issuer in document.issuers
            )
        return False

    async def skip(
        self, document: Document, options: Optional[VerificationOptions] = None
    ) -> VerificationFragment:
        return VerificationFragment(
            name=self.name,
            type=self.type,
            status=FragmentStatus.SKIPPED,
            reason=ErrorReason.from_code(OpenAttestationDnsTxtCode.SKIPPED, SKIPPED_MESSAGE),
        )

    @with_coded_error_handler(
        name=FRAGMENT_NAME,
        fragment_type=FRAGMENT_TYPE,
        unexpected_error_code=OpenAttestationDnsTxtCode.UNEXPECTED_ERROR,
    )
    async def verify(self, document: Document, options: VerificationOptions) -> VerificationFragment:
        if isinstance(document, V2Document):
            return await self._verify_v2(document, options)
        if isinstance(document, V3Document):
            return await self._verify_v3(document, options)
        raise TypeError(f"Unsupported document: {type(document).__name__}")

    async def _verify_v2(self, document: V2Document, options: VerificationOptions) -> VerificationFragment:
        # Every resolution runs to completion before the fragment is built;
        # the first failure in issuer order then goes to the error boundary.
        results = await asyncio.gather(
            *(_resolve_v2_issuer(issuer, options) for issuer in document.issuers),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        identities: List[Identity] = list(results)

        invalid = next((i for i in identities if i.status != FragmentStatus.VALID.value), None)
        if invalid is not None:
            return VerificationFragment(
                name=self.name,
                type=self.type,
                status=FragmentStatus.INVALID,
                data=identities,
                reason=invalid.reason,
            )
        return VerificationFragment(
            name=self.name,
            type=self.type,
            status=FragmentStatus.VALID,
            data=identities,
        )

    async def _verify_v3(self, document: V3Document, options: VerificationOptions) -> VerificationFragment:
        issuer = document.issuer
        identity = await resolve_issuer_identity(issuer, issuer.smart_contract_address or "", options)
        return VerificationFragment(
            name=self.name,
            type=self.type,
            status=FragmentStatus(identity.status),
            location=identity.location,
            value=identity.value,
            reason=identity.reason if isinstance(identity, InvalidIdentity) else None,
        )


openattestation_dns_txt_identity_proof = OpenAttestationDnsTxtIdentityProof()


async def verify_document(
    document: Document,
    options: VerificationOptions,
    verifier: Optional[OpenAttestationDnsTxtIdentityProof] = None,
) -> VerificationFragment:
    """Run the verifier on a document, skipping it when ``test`` is False."""
    verifier = verifier or openattestation_dns_txt_identity_proof
    if not verifier.test(document):
        log.info(f"{verifier.name}: skipped ({type(document).__name__})")
        return await verifier.skip(document, options)
    fragment = await verifier.verify(document, options)
    log.info(f"{verifier.name}: status={fragment.status.value}")
    return fragment
