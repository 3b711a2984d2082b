"""Collaborators shared read-only by one verification run."""

from dataclasses import dataclass
from typing import Any, Optional

from oaverify.core.config import DNS_RESOLVER_URL, NETWORK, rpc_url_for_network
from oaverify.oa.chain import EthereumRpcClient
from oaverify.oa.dnsprove import DnsTxtClient


@dataclass(frozen=True)
class VerificationOptions:
    """Chain and DNS collaborators.

    Attributes:
        network: Exposes async ``get_network() -> NetworkContext``.
        dns: Exposes async ``get_document_store_records(domain) -> list[DnsRecord]``.
    """
    network: Any
    dns: Any


def default_options(
    network: str = NETWORK,
    rpc_url: Optional[str] = None,
    dns_resolver_url: str = DNS_RESOLVER_URL,
) -> VerificationOptions:
    """Build options backed by the JSON-RPC and DNS-over-HTTPS clients."""
    return VerificationOptions(
        network=EthereumRpcClient(rpc_url or rpc_url_for_network(network)),
        dns=DnsTxtClient(dns_resolver_url),
    )
