"""Shared fixtures: collaborator mocks and sample issuers."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from oaverify.oa.api_models import DnsRecord, NetworkContext
from oaverify.oa.document import DocumentIssuer
from oaverify.oa.options import VerificationOptions

STORE_ADDRESS = "0x9178F546D3FF57D7A6352bD61B80cCCD46199C2d"
OTHER_ADDRESS = "0x532C9Ff853CA54370D7492cD84040F9f8099f11B"


def make_record(addr=STORE_ADDRESS, net_id="3", type="openatts", net="ethereum"):
    return DnsRecord(type=type, net=net, net_id=net_id, addr=addr)


@pytest.fixture
def options():
    """Options whose network is chain 3 and whose DNS publishes STORE_ADDRESS."""
    network = MagicMock()
    network.get_network = AsyncMock(return_value=NetworkContext(chain_id="3"))
    dns = MagicMock()
    dns.get_document_store_records = AsyncMock(return_value=[make_record()])
    return VerificationOptions(network=network, dns=dns)


@pytest.fixture
def dns_issuer():
    return DocumentIssuer(
        identity_proof_type="DNS-TXT",
        identity_proof_location="example.openattestation.com",
        smart_contract_address=STORE_ADDRESS,
    )
