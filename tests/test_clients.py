import json
from pathlib import Path

import httpx
import pytest

from eventscope.clients.abi import load_abi
from eventscope.clients.rpc import RPC, to_hex_block, topics_param
from eventscope.constants import TRANSFER_T0
from eventscope.errors import RpcError, SchemaError

from .helpers import RPC_LOG


def _rpc_with(handler) -> RPC:
    rpc = RPC("http://node.test")
    rpc.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return rpc


def test_helpers():
    assert to_hex_block(255) == "0xff"
    assert topics_param([]) == []
    assert topics_param([TRANSFER_T0.upper().replace("0X", "0x")]) == [[TRANSFER_T0]]


@pytest.mark.asyncio
async def test_get_logs_sends_filter_and_parses_result():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": [RPC_LOG]})

    rpc = _rpc_with(handler)
    try:
        logs = await rpc.get_logs(address="0xABC", topic0s=[TRANSFER_T0], from_block=16, to_block=31)
    finally:
        await rpc.aclose()

    assert seen[0]["method"] == "eth_getLogs"
    assert seen[0]["params"] == [
        {"address": "0xabc", "fromBlock": "0x10", "toBlock": "0x1f", "topics": [[TRANSFER_T0]]}
    ]
    assert len(logs) == 1
    assert logs[0].block_number == 16


@pytest.mark.asyncio
async def test_latest_block():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1234"})

    rpc = _rpc_with(handler)
    try:
        assert await rpc.latest_block() == 0x1234
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_rpc_error_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        error = {"code": -32005, "message": "query returned more than 10000 results"}
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": error})

    rpc = _rpc_with(handler)
    try:
        with pytest.raises(RpcError) as exc_info:
            await rpc.get_logs(address="0x1", topic0s=[], from_block=0, to_block=1)
    finally:
        await rpc.aclose()
    assert exc_info.value.code == -32005


@pytest.mark.asyncio
async def test_load_abi_from_file(commitment_abi_path: Path):
    abi = await load_abi(str(commitment_abi_path))
    assert any(entry.get("name") == "CommitmentStored" for entry in abi)


@pytest.mark.asyncio
async def test_load_abi_rejects_bad_json(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("[{")
    with pytest.raises(SchemaError):
        await load_abi(path)
