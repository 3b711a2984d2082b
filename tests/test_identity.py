"""Tests for DNS-TXT issuer identity resolution."""

import pytest

from oaverify.oa.api_models import (
    InvalidIdentity,
    NetworkContext,
    OpenAttestationDnsTxtCode,
    ValidIdentity,
)
from oaverify.oa.document import DocumentIssuer
from oaverify.oa.exceptions import DnsLookupError, MissingLocation, UnsupportedIdentityType
from oaverify.oa.identity import record_matches, resolve_issuer_identity

from .conftest import OTHER_ADDRESS, STORE_ADDRESS, make_record

LOCATION = "example.openattestation.com"


class TestRecordMatches:
    """All four fields must match simultaneously."""

    network = NetworkContext(chain_id="3")

    def test_exact_match(self):
        assert record_matches(make_record(), STORE_ADDRESS, self.network)

    def test_address_case_insensitive(self):
        assert record_matches(make_record(addr=STORE_ADDRESS.upper().replace("0X", "0x")),
                              STORE_ADDRESS.lower(), self.network)

    @pytest.mark.parametrize("record", [
        make_record(addr=OTHER_ADDRESS),
        make_record(net_id="1"),
        make_record(net_id="03"),
        make_record(type="openatts2"),
        make_record(net="polygon"),
    ])
    def test_any_field_mismatch(self, record):
        assert not record_matches(record, STORE_ADDRESS, self.network)


class TestResolveIssuerIdentity:

    @pytest.mark.asyncio
    async def test_valid_when_record_matches(self, options, dns_issuer):
        identity = await resolve_issuer_identity(dns_issuer, STORE_ADDRESS, options)

        assert identity == ValidIdentity(location=LOCATION, value=STORE_ADDRESS)
        options.network.get_network.assert_awaited_once()
        options.dns.get_document_store_records.assert_awaited_once_with(LOCATION)

    @pytest.mark.asyncio
    async def test_value_is_target_address_verbatim(self, options, dns_issuer):
        target = STORE_ADDRESS.lower()
        identity = await resolve_issuer_identity(dns_issuer, target, options)
        assert identity.status == "VALID"
        assert identity.value == target

    @pytest.mark.asyncio
    async def test_invalid_when_no_record_matches(self, options, dns_issuer):
        identity = await resolve_issuer_identity(dns_issuer, OTHER_ADDRESS, options)

        assert isinstance(identity, InvalidIdentity)
        assert identity.location == LOCATION
        assert identity.value == OTHER_ADDRESS
        assert identity.reason.code == OpenAttestationDnsTxtCode.MATCHING_RECORD_NOT_FOUND
        assert identity.reason.code_string == "MATCHING_RECORD_NOT_FOUND"
        assert identity.reason.message == f"Matching DNS record not found for {OTHER_ADDRESS}"

    @pytest.mark.asyncio
    async def test_invalid_when_chain_differs(self, options, dns_issuer):
        options.network.get_network.return_value = NetworkContext(chain_id="1")
        identity = await resolve_issuer_identity(dns_issuer, STORE_ADDRESS, options)
        assert identity.status == "INVALID"

    @pytest.mark.asyncio
    async def test_invalid_when_no_records(self, options, dns_issuer):
        options.dns.get_document_store_records.return_value = []
        identity = await resolve_issuer_identity(dns_issuer, STORE_ADDRESS, options)
        assert identity.status == "INVALID"

    @pytest.mark.asyncio
    async def test_match_found_among_unrelated_records(self, options, dns_issuer):
        options.dns.get_document_store_records.return_value = [
            make_record(addr=OTHER_ADDRESS),
            make_record(net_id="1"),
            make_record(),
            make_record(),
        ]
        identity = await resolve_issuer_identity(dns_issuer, STORE_ADDRESS, options)
        assert identity.status == "VALID"


class TestPreconditions:
    """Malformed issuers raise before any external read."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identity_type", ["", "DID", "dns-txt"])
    async def test_unsupported_identity_type(self, options, identity_type):
        issuer = DocumentIssuer(identity_type, LOCATION, STORE_ADDRESS)

        with pytest.raises(UnsupportedIdentityType):
            await resolve_issuer_identity(issuer, STORE_ADDRESS, options)

        options.network.get_network.assert_not_awaited()
        options.dns.get_document_store_records.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_location(self, options):
        issuer = DocumentIssuer("DNS-TXT", "", STORE_ADDRESS)

        with pytest.raises(MissingLocation, match="Location is missing"):
            await resolve_issuer_identity(issuer, STORE_ADDRESS, options)

        options.network.get_network.assert_not_awaited()
        options.dns.get_document_store_records.assert_not_awaited()


class TestCollaboratorFailure:

    @pytest.mark.asyncio
    async def test_dns_failure_propagates(self, options, dns_issuer):
        options.dns.get_document_store_records.side_effect = DnsLookupError("SERVFAIL")
        with pytest.raises(DnsLookupError):
            await resolve_issuer_identity(dns_issuer, STORE_ADDRESS, options)
