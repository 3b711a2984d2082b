"""DNS TXT lookup of OpenAttestation document store records.

Queries a DNS-over-HTTPS resolver (JSON API) and parses ``openatts``
TXT records such as:

    "openatts net=ethereum netId=3 addr=0x2f60375e8144e16Adf1979936301D8341D58C36C"

Records are returned in answer order; the caller decides which one
matches. Nothing is cached.
"""

import logging
import re
from typing import List, Optional

import httpx

from oaverify.core.config import DNS_RECORD_TYPE, DNS_RESOLVER_URL, DNS_TIMEOUT_SECONDS
from oaverify.oa.api_models import DnsRecord
from oaverify.oa.exceptions import DnsLookupError

log = logging.getLogger(__name__)

TXT_RECORD_TYPE = 16
NXDOMAIN = 3

_QUOTED = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _txt_text(data: str) -> str:
    """Join the character-strings of a TXT answer (``"a" "b"`` -> ``ab``)."""
    parts = _QUOTED.findall(data)
    if not parts:
        return data.strip()
    return "".join(part.replace('\\"', '"') for part in parts)


def parse_openatts_record(data: str, dnssec: bool = False) -> Optional[DnsRecord]:
    """Parse one TXT answer into a DnsRecord.

    Returns None when the record is not an openatts record or lacks any
    of ``net``, ``netId`` or ``addr``.
    """
    tokens = _txt_text(data).split()
    if not tokens or tokens[0] != DNS_RECORD_TYPE:
        return None
    fields = {}
    for token in tokens[1:]:
        key, sep, value = token.partition("=")
        if sep:
            fields[key] = value
    if not all(fields.get(k) for k in ("net", "netId", "addr")):
        return None
    return DnsRecord(
        type=tokens[0],
        net=fields["net"],
        net_id=fields["netId"],
        addr=fields["addr"],
        dnssec=dnssec,
    )


class DnsTxtClient:
    """DNS-over-HTTPS client for openatts TXT records.

    Args:
        resolver_url: JSON API endpoint (Google/Cloudflare style).
        timeout: HTTP request timeout (seconds).
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        resolver_url: str = DNS_RESOLVER_URL,
        timeout: float = DNS_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.resolver_url = resolver_url
        self.timeout = timeout
        self._transport = transport

    async def get_document_store_records(self, domain: str) -> List[DnsRecord]:
        """Return every openatts record published under ``domain``.

        Raises:
            DnsLookupError: On HTTP failure, malformed response, or a DNS
                status other than NOERROR/NXDOMAIN.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    self.resolver_url,
                    params={"name": domain, "type": "TXT"},
                    headers={"accept": "application/dns-json"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise DnsLookupError(f"TXT lookup for {domain} failed: {e}") from e
        except ValueError as e:
            raise DnsLookupError(f"TXT lookup for {domain} returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise DnsLookupError(f"TXT lookup for {domain} returned a malformed response")

        status = body.get("Status", 0)
        if status == NXDOMAIN:
            log.info(f"TXT lookup: {domain} does not exist", extra={"domain": domain})
            return []
        if status != 0:
            raise DnsLookupError(f"TXT lookup for {domain} failed with DNS status {status}")

        dnssec = bool(body.get("AD", False))
        records = []
        for answer in body.get("Answer") or []:
            if not isinstance(answer, dict) or answer.get("type") != TXT_RECORD_TYPE:
                continue
            record = parse_openatts_record(str(answer.get("data", "")), dnssec=dnssec)
            if record is not None:
                records.append(record)

        log.info(f"TXT lookup: {domain} -> {len(records)} openatts record(s)", extra={"domain": domain})
        return records
