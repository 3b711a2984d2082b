"""Wrapped OpenAttestation document ingestion.

Classifies a raw wrapped document as schema v2 or v3 once, at the
boundary, so verifiers receive an explicit ``V2Document | V3Document``
and never probe fields themselves.

v2 data values are salted as ``"<uuid>:<type>:<value>"``; get_data()
removes the salts. v3 documents are not salted.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from oaverify.core.config import V3_SCHEMA_ID
from oaverify.oa.exceptions import DocumentFormatError

log = logging.getLogger(__name__)

_SALTED_VALUE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}:",
    re.IGNORECASE,
)

# Issuer fields naming the smart contract, in precedence order, with the
# contract variant each one implies (certificate stores expose isIssued)
_SMART_CONTRACT_FIELDS = (
    ("documentStore", "DOCUMENT_STORE"),
    ("tokenRegistry", "TOKEN_REGISTRY"),
    ("certificateStore", "DOCUMENT_STORE"),
)


@dataclass(frozen=True)
class DocumentIssuer:
    """Issuer declaration: identity proof plus smart contract address."""
    identity_proof_type: str
    identity_proof_location: str
    smart_contract_address: Optional[str] = None
    name: Optional[str] = None
    contract_variant: Optional[str] = None  # DOCUMENT_STORE | TOKEN_REGISTRY


@dataclass(frozen=True)
class V2Document:
    """Schema v2 document: ordered issuers, order is preserved in results."""
    issuers: Tuple[DocumentIssuer, ...]
    target_hash: Optional[str] = None


@dataclass(frozen=True)
class V3Document:
    """Schema v3 document: a single issuer, contract address in proof.value."""
    issuer: DocumentIssuer
    proof_method: Optional[str] = None
    target_hash: Optional[str] = None


Document = Union[V2Document, V3Document]


def _unsalt_value(value: str) -> Any:
    if not _SALTED_VALUE.match(value):
        return value
    type_and_value = value[37:]
    value_type, _, raw = type_and_value.partition(":")
    if value_type == "number":
        try:
            number = float(raw)
        except ValueError:
            raise DocumentFormatError(f"Salted number is not numeric: {raw!r}") from None
        return int(number) if number.is_integer() else number
    if value_type == "boolean":
        return raw == "true"
    if value_type in ("null", "undefined"):
        return None
    return raw


def _unsalt(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: _unsalt(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_unsalt(item) for item in data]
    if isinstance(data, str):
        return _unsalt_value(data)
    return data


def get_data(wrapped: Dict[str, Any]) -> Dict[str, Any]:
    """Return the unsalted ``data`` of a wrapped v2 document."""
    return _unsalt(wrapped.get("data", {}))


def _identity_proof(issuer: Dict[str, Any]) -> Dict[str, Any]:
    proof = issuer.get("identityProof")
    return proof if isinstance(proof, dict) else {}


def _parse_v2_issuer(issuer: Dict[str, Any]) -> DocumentIssuer:
    proof = _identity_proof(issuer)
    address, variant = next(
        ((issuer[f], variant) for f, variant in _SMART_CONTRACT_FIELDS if issuer.get(f)),
        (None, None),
    )
    return DocumentIssuer(
        identity_proof_type=proof.get("type") or "",
        identity_proof_location=proof.get("location") or "",
        smart_contract_address=address,
        name=issuer.get("name"),
        contract_variant=variant,
    )


def is_wrapped_v3_document(raw: Dict[str, Any]) -> bool:
    return raw.get("version") == V3_SCHEMA_ID and isinstance(raw.get("proof"), dict)


def is_wrapped_v2_document(raw: Dict[str, Any]) -> bool:
    data = raw.get("data")
    return isinstance(data, dict) and isinstance(data.get("issuers"), list)


def parse_wrapped_document(raw: Dict[str, Any]) -> Document:
    """Classify a wrapped document and extract its issuer declarations.

    Args:
        raw: Wrapped document as decoded JSON.

    Returns:
        V3Document if ``version`` is the v3 schema id, V2Document if
        ``data.issuers`` is a list.

    Raises:
        DocumentFormatError: If the document matches neither shape.
    """
    if not isinstance(raw, dict):
        raise DocumentFormatError("Wrapped document must be a JSON object")

    signature = raw.get("signature") if isinstance(raw.get("signature"), dict) else {}

    if is_wrapped_v3_document(raw):
        issuer = raw.get("issuer") if isinstance(raw.get("issuer"), dict) else {}
        proof = raw["proof"]
        identity = _identity_proof(issuer)
        return V3Document(
            issuer=DocumentIssuer(
                identity_proof_type=identity.get("type") or "",
                identity_proof_location=identity.get("location") or "",
                smart_contract_address=proof.get("value"),
                name=issuer.get("name"),
                contract_variant=proof.get("method"),
            ),
            proof_method=proof.get("method"),
            target_hash=proof.get("targetHash"),
        )

    if is_wrapped_v2_document(raw):
        data = get_data(raw)
        issuers = tuple(
            _parse_v2_issuer(issuer) if isinstance(issuer, dict) else DocumentIssuer("", "")
            for issuer in data["issuers"]
        )
        return V2Document(issuers=issuers, target_hash=signature.get("targetHash"))

    raise DocumentFormatError("Document is neither a wrapped v2 nor a wrapped v3 document")


def load_document(path: Union[str, Path]) -> Document:
    """Read a wrapped document from a JSON file and classify it."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Document is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise DocumentFormatError(f"Document is not UTF-8 text: {e}") from e
    except OSError as e:
        raise DocumentFormatError(f"Document cannot be read: {e}") from e
    document = parse_wrapped_document(raw)
    log.debug(f"Loaded {type(document).__name__} from {path}")
    return document
