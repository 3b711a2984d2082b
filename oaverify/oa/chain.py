"""Ethereum JSON-RPC client for issuance and network reads.

Uses direct HTTP JSON-RPC, no web3 installation required. Provides:
- the network lookup (``eth_chainId``) used by identity resolution
- contract call handles for token registries (``ownerOf``) and
  document stores (``isIssued``)

Failures raise ChainReadError and are not retried.
"""

import itertools
import logging
import re
from typing import Any, List, Optional

import httpx

from oaverify.core.config import RPC_TIMEOUT_SECONDS
from oaverify.oa.api_models import NetworkContext
from oaverify.oa.exceptions import ChainReadError

log = logging.getLogger(__name__)

# 4-byte function selectors
OWNER_OF_SELECTOR = "0x6352211e"   # ownerOf(uint256)
IS_ISSUED_SELECTOR = "0x163aa631"  # isIssued(bytes32)

_HEX = re.compile(r"^0x[0-9a-fA-F]*$")
_HASH = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def encode_bytes32(hash: str) -> str:
    """Encode a 32-byte hex hash as an ABI word (no 0x prefix).

    Raises:
        ValueError: If ``hash`` is not 64 hex digits (optionally 0x-prefixed).
    """
    if not _HASH.match(hash):
        raise ValueError(f"Not a 32-byte hex hash: {hash}")
    return hash[2:].lower() if hash.startswith("0x") else hash.lower()


def _words(result: str) -> List[str]:
    body = result[2:]
    return [body[i:i + 64] for i in range(0, len(body), 64)]


def _first_word(result: str, method: str) -> str:
    words = _words(result)
    if not words or len(words[0]) != 64:
        raise ChainReadError(f"{method} returned no data: {result!r}")
    return words[0]


class EthereumRpcClient:
    """Minimal async Ethereum JSON-RPC client.

    Args:
        rpc_url: JSON-RPC endpoint.
        timeout: HTTP request timeout (seconds).
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = RPC_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def request(self, method: str, params: List[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result``.

        Raises:
            ChainReadError: On HTTP failure, JSON-RPC error or missing result.
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise ChainReadError(f"{method} request to {self.rpc_url} failed: {e}") from e
        except ValueError as e:
            raise ChainReadError(f"{method} returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise ChainReadError(f"{method} returned a malformed response")
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ChainReadError(f"{method} failed: {message}")
        if "result" not in body:
            raise ChainReadError(f"{method} response has no result")
        return body["result"]

    async def get_network(self) -> NetworkContext:
        """Read the connected network's chain id (decimal string)."""
        result = await self.request("eth_chainId", [])
        if not isinstance(result, str) or not _HEX.match(result) or len(result) < 3:
            raise ChainReadError(f"eth_chainId returned a non-hex result: {result!r}")
        chain_id = str(int(result, 16))
        log.debug(f"eth_chainId {self.rpc_url} -> {chain_id}")
        return NetworkContext(chain_id=chain_id)

    async def call(self, to: str, data: str) -> str:
        """Execute ``eth_call`` against the latest block, returning hex data."""
        result = await self.request("eth_call", [{"to": to, "data": data}, "latest"])
        if not isinstance(result, str) or not _HEX.match(result):
            raise ChainReadError(f"eth_call returned a non-hex result: {result!r}")
        return result


class ContractCallHandle:
    """Read-only calls on a token registry or document store contract."""

    def __init__(self, client: EthereumRpcClient, address: str):
        self.client = client
        self.address = address

    async def owner_of(self, hash: str) -> str:
        """Return the owner address of token ``hash`` (lowercase, 0x-prefixed)."""
        result = await self.client.call(self.address, OWNER_OF_SELECTOR + encode_bytes32(hash))
        word = _first_word(result, "ownerOf")
        return "0x" + word[-40:].lower()

    async def is_issued(self, hash: str) -> bool:
        result = await self.client.call(self.address, IS_ISSUED_SELECTOR + encode_bytes32(hash))
        return int(_first_word(result, "isIssued"), 16) != 0
