"""Issuer identity resolution via DNS-TXT identity proofs.

An issuer's identity is anchored when a TXT record under its declared
domain names the document's smart contract address on the network the
verifier is connected to.
"""

import logging

from oaverify.core.config import (
    DNS_RECORD_NETWORK,
    DNS_RECORD_TYPE,
    IDENTITY_PROOF_TYPE_DNS_TXT,
)
from oaverify.oa.api_models import (
    DnsRecord,
    ErrorReason,
    Identity,
    InvalidIdentity,
    NetworkContext,
    OpenAttestationDnsTxtCode,
    ValidIdentity,
)
from oaverify.oa.document import DocumentIssuer
from oaverify.oa.exceptions import MissingLocation, UnsupportedIdentityType
from oaverify.oa.options import VerificationOptions

log = logging.getLogger(__name__)


def record_matches(record: DnsRecord, address: str, network: NetworkContext) -> bool:
    """True iff ``record`` anchors ``address`` on ``network``."""
    return (
        record.addr.lower() == address.lower()
        and record.net_id == network.chain_id
        and record.type == DNS_RECORD_TYPE
        and record.net == DNS_RECORD_NETWORK
    )


async def resolve_issuer_identity(
    issuer: DocumentIssuer,
    smart_contract_address: str,
    options: VerificationOptions,
) -> Identity:
    """Resolve an issuer's DNS-TXT identity for a smart contract address.

    The first matching record wins; duplicate or conflicting records at
    the same domain are not inspected.

    Args:
        issuer: Issuer declaration from the document.
        smart_contract_address: Address the TXT record must name.
        options: Chain and DNS collaborators.

    Returns:
        ValidIdentity if a matching record exists, otherwise
        InvalidIdentity with MATCHING_RECORD_NOT_FOUND.

    Raises:
        UnsupportedIdentityType: If the proof type is not DNS-TXT.
        MissingLocation: If the proof has no location.
    """
    if issuer.identity_proof_type != IDENTITY_PROOF_TYPE_DNS_TXT:
        raise UnsupportedIdentityType(issuer.identity_proof_type)
    location = issuer.identity_proof_location
    if not location:
        raise MissingLocation()

    network = await options.network.get_network()
    records = await options.dns.get_document_store_records(location)

    matching_record = next(
        (r for r in records if record_matches(r, smart_contract_address, network)),
        None,
    )
    if matching_record is not None:
        log.debug(f"DNS-TXT match: {location} -> {smart_contract_address} (chain {network.chain_id})")
        return ValidIdentity(location=location, value=smart_contract_address)

    log.debug(f"DNS-TXT no match: {location} has {len(records)} record(s) for chain {network.chain_id}")
    return InvalidIdentity(
        location=location,
        value=smart_contract_address,
        reason=ErrorReason.from_code(
            OpenAttestationDnsTxtCode.MATCHING_RECORD_NOT_FOUND,
            f"Matching DNS record not found for {smart_contract_address}",
        ),
    )
