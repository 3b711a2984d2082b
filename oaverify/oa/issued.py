"""Issuance status of a document hash on a smart contract.

Each contract variant has one handler. Call-handle failures propagate
unchanged; there is no retry here.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List

from oaverify.core.config import ZERO_ADDRESS
from oaverify.oa.chain import ContractCallHandle, encode_bytes32
from oaverify.oa.document import Document, V2Document
from oaverify.oa.exceptions import DocumentFormatError, UnsupportedContractVariant

log = logging.getLogger(__name__)


class ContractVariant(str, Enum):
    TOKEN_REGISTRY = "TOKEN_REGISTRY"
    DOCUMENT_STORE = "DOCUMENT_STORE"


@dataclass(frozen=True)
class SmartContractReference:
    """Contract to query for issuance.

    Attributes:
        variant: Contract variant, selects the issuance handler.
        address: Contract address.
        call_handle: Object exposing async ``owner_of(hash)`` (token
            registry) and/or ``is_issued(hash)`` (document store).
    """
    variant: ContractVariant
    address: str
    call_handle: Any


async def is_issued_on_token_registry(ref: SmartContractReference, hash: str) -> bool:
    """A token is issued iff its owner is not the zero address."""
    owner = await ref.call_handle.owner_of(hash)
    return owner.lower() != ZERO_ADDRESS


async def is_issued_on_document_store(ref: SmartContractReference, hash: str) -> bool:
    return bool(await ref.call_handle.is_issued(hash))


_HANDLERS: Dict[ContractVariant, Callable[[SmartContractReference, str], Awaitable[bool]]] = {
    ContractVariant.TOKEN_REGISTRY: is_issued_on_token_registry,
    ContractVariant.DOCUMENT_STORE: is_issued_on_document_store,
}


async def is_issued(ref: SmartContractReference, hash: str) -> bool:
    """Return whether ``hash`` is recorded as issued by ``ref``.

    Raises:
        UnsupportedContractVariant: If ``ref.variant`` has no handler.
    """
    handler = _HANDLERS.get(ref.variant)
    if handler is None:
        raise UnsupportedContractVariant(ref.variant)
    issued = await handler(ref, hash)
    log.debug(f"is_issued: contract={ref.address} hash={hash[:18]}... -> {issued}")
    return issued


def _variant(value: Any) -> Any:
    try:
        return ContractVariant(value)
    except ValueError:
        return value


def contract_references(document: Document, client: Any) -> List[SmartContractReference]:
    """Build one reference per issuer that declares a smart contract.

    Args:
        document: Classified wrapped document.
        client: Chain client with async ``call(to, data)``; each reference
            gets a ContractCallHandle bound to it.

    Raises:
        DocumentFormatError: If no issuer declares a smart contract.
    """
    issuers = document.issuers if isinstance(document, V2Document) else (document.issuer,)
    refs = [
        SmartContractReference(
            variant=_variant(issuer.contract_variant),
            address=issuer.smart_contract_address,
            call_handle=ContractCallHandle(client, issuer.smart_contract_address),
        )
        for issuer in issuers
        if issuer.smart_contract_address
    ]
    if not refs:
        raise DocumentFormatError("Document issuers do not declare a smart contract")
    return refs


async def check_document_issued(document: Document, client: Any) -> Dict[str, bool]:
    """Check the document's target hash on every declared smart contract.

    Returns:
        Contract address -> issued, in issuer order. The document is issued
        iff every value is True.

    Raises:
        DocumentFormatError: If the document has no well-formed target hash
            or no smart contract.
        UnsupportedContractVariant: If a contract's variant is unknown.
    """
    if not document.target_hash:
        raise DocumentFormatError("Document has no target hash")
    try:
        encode_bytes32(document.target_hash)
    except ValueError as e:
        raise DocumentFormatError(str(e)) from e
    refs = contract_references(document, client)
    results = await asyncio.gather(
        *(is_issued(ref, document.target_hash) for ref in refs), return_exceptions=True
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return {ref.address: issued for ref, issued in zip(refs, results)}
