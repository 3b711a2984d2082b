"""Tests for the Ethereum JSON-RPC client and contract call handles."""

import json

import httpx
import pytest

from oaverify.oa.chain import (
    IS_ISSUED_SELECTOR,
    OWNER_OF_SELECTOR,
    ContractCallHandle,
    EthereumRpcClient,
    encode_bytes32,
)
from oaverify.oa.exceptions import ChainReadError

RPC_URL = "https://rpc.test"
STORE = "0x9178F546D3FF57D7A6352bD61B80cCCD46199C2d"
HASH = "0x" + "1f" * 32


def rpc_transport(result=None, error=None, status_code=200, requests=None):
    """MockTransport answering every JSON-RPC call with ``result``/``error``."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if requests is not None:
            requests.append(body)
        reply = {"jsonrpc": "2.0", "id": body["id"]}
        if error is not None:
            reply["error"] = error
        else:
            reply["result"] = result
        return httpx.Response(status_code, json=reply)

    return httpx.MockTransport(handler)


class TestEncodeBytes32:

    def test_strips_prefix_and_lowercases(self):
        assert encode_bytes32("0x" + "AB" * 32) == "ab" * 32

    def test_accepts_unprefixed(self):
        assert encode_bytes32("cd" * 32) == "cd" * 32

    @pytest.mark.parametrize("bad", ["0x1234", "zz" * 32, ""])
    def test_rejects_non_hash(self, bad):
        with pytest.raises(ValueError):
            encode_bytes32(bad)


class TestGetNetwork:

    @pytest.mark.asyncio
    async def test_hex_chain_id_to_decimal(self):
        requests = []
        client = EthereumRpcClient(RPC_URL, transport=rpc_transport("0xaa36a7", requests=requests))

        network = await client.get_network()

        assert network.chain_id == "11155111"
        assert requests[0]["method"] == "eth_chainId"
        assert requests[0]["params"] == []

    @pytest.mark.asyncio
    async def test_each_call_reads_again(self):
        requests = []
        client = EthereumRpcClient(RPC_URL, transport=rpc_transport("0x3", requests=requests))

        await client.get_network()
        await client.get_network()

        assert len(requests) == 2
        assert requests[0]["id"] != requests[1]["id"]

    @pytest.mark.asyncio
    async def test_non_hex_result_raises(self):
        client = EthereumRpcClient(RPC_URL, transport=rpc_transport("three"))
        with pytest.raises(ChainReadError):
            await client.get_network()


class TestRequestErrors:

    @pytest.mark.asyncio
    async def test_json_rpc_error_raises(self):
        client = EthereumRpcClient(
            RPC_URL, transport=rpc_transport(error={"code": 3, "message": "execution reverted"})
        )
        with pytest.raises(ChainReadError, match="execution reverted"):
            await client.request("eth_call", [])

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client = EthereumRpcClient(RPC_URL, transport=rpc_transport("0x1", status_code=503))
        with pytest.raises(ChainReadError, match="eth_chainId"):
            await client.get_network()

    @pytest.mark.asyncio
    async def test_connection_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = EthereumRpcClient(RPC_URL, transport=httpx.MockTransport(handler))
        with pytest.raises(ChainReadError, match="connection refused"):
            await client.get_network()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        client = EthereumRpcClient(RPC_URL, transport=transport)
        with pytest.raises(ChainReadError, match="invalid JSON"):
            await client.get_network()


class TestContractCallHandle:

    @pytest.mark.asyncio
    async def test_owner_of_encodes_call_and_decodes_address(self):
        requests = []
        owner_word = "0x" + "0" * 24 + "E94E4f16ad40ADc90C29Dc85b42F1213E034947C"
        handle = ContractCallHandle(
            EthereumRpcClient(RPC_URL, transport=rpc_transport(owner_word, requests=requests)),
            STORE,
        )

        owner = await handle.owner_of(HASH)

        assert owner == "0xe94e4f16ad40adc90c29dc85b42f1213e034947c"
        call, block = requests[0]["params"]
        assert requests[0]["method"] == "eth_call"
        assert call == {"to": STORE, "data": OWNER_OF_SELECTOR + "1f" * 32}
        assert block == "latest"

    @pytest.mark.asyncio
    async def test_owner_of_zero_address(self):
        handle = ContractCallHandle(
            EthereumRpcClient(RPC_URL, transport=rpc_transport("0x" + "0" * 64)), STORE
        )
        assert await handle.owner_of(HASH) == "0x" + "0" * 40

    @pytest.mark.asyncio
    @pytest.mark.parametrize("word,expected", [
        ("0x" + "0" * 63 + "1", True),
        ("0x" + "0" * 64, False),
    ])
    async def test_is_issued_decodes_bool(self, word, expected):
        requests = []
        handle = ContractCallHandle(
            EthereumRpcClient(RPC_URL, transport=rpc_transport(word, requests=requests)), STORE
        )

        assert await handle.is_issued(HASH) is expected
        assert requests[0]["params"][0]["data"] == IS_ISSUED_SELECTOR + "1f" * 32

    @pytest.mark.asyncio
    async def test_empty_result_raises(self):
        handle = ContractCallHandle(EthereumRpcClient(RPC_URL, transport=rpc_transport("0x")), STORE)
        with pytest.raises(ChainReadError, match="isIssued returned no data"):
            await handle.is_issued(HASH)
