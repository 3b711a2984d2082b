"""
OpenAttestation verifier configuration constants.

Constants are organized into:
- NORMATIVE: Fixed by the DNS-TXT identity proof scheme, not configurable
- OPERATIONAL: Deployment-specific settings (env vars)
"""

import os

# =============================================================================
# NORMATIVE CONSTANTS
# =============================================================================

# Identity proof type declared by issuers using a DNS TXT anchor
IDENTITY_PROOF_TYPE_DNS_TXT: str = "DNS-TXT"

# TXT record fields required for a match
# e.g. "openatts net=ethereum netId=3 addr=0x2f60375e8144e16Adf1979936301D8341D58C36C"
DNS_RECORD_TYPE: str = "openatts"
DNS_RECORD_NETWORK: str = "ethereum"

# Token registry owner for an unissued token
ZERO_ADDRESS: str = "0x" + "0" * 40

# Schema id carried by wrapped v3 documents
V3_SCHEMA_ID: str = "https://schema.openattestation.com/3.0/schema.json"

# Public JSON-RPC endpoints for the named networks
NETWORK_RPC_URLS: dict[str, str] = {
    "homestead": "https://cloudflare-eth.com",
    "mainnet": "https://cloudflare-eth.com",
    "sepolia": "https://rpc.sepolia.org",
    "goerli": "https://rpc.ankr.com/eth_goerli",
}

# =============================================================================
# OPERATIONAL SETTINGS (deployment-specific, via environment variables)
# =============================================================================

# Network name used to pick a default RPC endpoint
NETWORK: str = os.getenv("OA_NETWORK", "homestead")

# DNS-over-HTTPS resolver (JSON API, application/dns-json)
DNS_RESOLVER_URL: str = os.getenv("OA_DNS_RESOLVER_URL", "https://dns.google/resolve")

# Per-request timeouts (seconds). Retries are left to the transport.
RPC_TIMEOUT_SECONDS: float = float(os.getenv("OA_RPC_TIMEOUT", "10.0"))
DNS_TIMEOUT_SECONDS: float = float(os.getenv("OA_DNS_TIMEOUT", "5.0"))


def rpc_url_for_network(network: str) -> str:
    """Return the JSON-RPC endpoint for a network name.

    OA_RPC_URL, when set, overrides the built-in table for every network.

    Raises:
        ValueError: If the network is unknown and OA_RPC_URL is not set.
    """
    override = os.getenv("OA_RPC_URL", "")
    if override:
        return override
    try:
        return NETWORK_RPC_URLS[network.lower()]
    except KeyError:
        raise ValueError(
            f"No RPC endpoint known for network '{network}', set OA_RPC_URL"
        ) from None
