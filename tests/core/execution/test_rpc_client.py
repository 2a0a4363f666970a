"""
Tests for the JSON-RPC execution client using httpx's mock transport.
"""

import json

import httpx
import pytest

from app.core.execution.errors import NetworkError, RecoveryError, RpcError
from app.core.execution.executor import SubmissionPipeline
from app.core.execution.models import OperationKind, OperationRequest
from app.core.execution.nonce_manager import AccountSequencer
from app.core.execution.rpc_client import EthRpcClient


def _client(handler) -> EthRpcClient:
    transport = httpx.MockTransport(handler)
    return EthRpcClient("http://node", client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_get_transaction_count_uses_pending_tag():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.update(payload)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": "0x1a"})

    client = _client(handler)
    try:
        assert await client.get_transaction_count("0xabc") == 26
    finally:
        await client.close()

    assert seen["method"] == "eth_getTransactionCount"
    assert seen["params"] == ["0xabc", "pending"]


@pytest.mark.asyncio
async def test_rpc_error_keeps_code_and_data():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": 1,
                "error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"},
            },
        )

    client = _client(handler)
    with pytest.raises(RpcError) as exc_info:
        await client.call({"to": "0xabc", "data": "0x"})
    await client.close()

    assert exc_info.value.code == 3
    assert exc_info.value.data == "0x08c379a0"
    assert exc_info.value.message == "execution reverted"


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(NetworkError):
        await client.send_raw_transaction("0xf86c")
    await client.close()


@pytest.mark.asyncio
async def test_http_error_status_is_network_error():
    client = _client(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(NetworkError):
        await client.suggest_gas_price()
    await client.close()


@pytest.mark.asyncio
async def test_rpc_error_body_wins_over_http_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "nonce too low"}},
        )

    client = _client(handler)
    with pytest.raises(RpcError) as exc_info:
        await client.send_raw_transaction("0xf86c")
    await client.close()

    assert exc_info.value.code == -32000
    assert exc_info.value.message == "nonce too low"


@pytest.mark.asyncio
async def test_non_json_body_is_network_error():
    client = _client(lambda request: httpx.Response(200, text="<html>gateway</html>"))

    with pytest.raises(NetworkError):
        await client.get_transaction_count("0xabc")
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [None, "pending", 12])
async def test_missing_or_malformed_quantity_is_rpc_error(result):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    client = _client(handler)
    with pytest.raises(RpcError):
        await client.estimate_gas({"to": "0xabc", "data": "0x"})
    await client.close()


class _ScriptedNode:
    """Answers JSON-RPC by method; sends and nonce reads are scripted per call."""

    def __init__(self, sends, nonces):
        self.sends = list(sends)
        self.nonces = list(nonces)
        self.raw_sent = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method = payload["method"]
        if method == "eth_sendRawTransaction":
            self.raw_sent.append(payload["params"][0])
            return self.sends.pop(0)
        if method == "eth_getTransactionCount":
            return self.nonces.pop(0)
        results = {
            "eth_call": "0x",
            "eth_estimateGas": "0x5208",
            "eth_gasPrice": "0x3b9aca00",
        }
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": results[method]})


def _result(value) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": value})


def _request() -> OperationRequest:
    return OperationRequest(
        kind=OperationKind.REGISTER,
        to_address="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        data="0x1234",
    )


@pytest.mark.asyncio
async def test_pipeline_retries_nonce_conflict_reported_with_http_400(account):
    nonce_too_low = httpx.Response(
        400,
        json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "nonce too low"}},
    )
    node = _ScriptedNode(
        sends=[nonce_too_low, _result("0x" + "ab" * 32)],
        nonces=[_result("0x0"), _result("0x5")],
    )
    client = _client(node)
    sequencer = AccountSequencer(account)
    pipeline = SubmissionPipeline(client, sequencer)

    try:
        result = await pipeline.submit(_request())
    finally:
        await client.close()

    assert result.resynced
    assert result.attempts == 2
    assert result.nonce == 5
    assert result.tx_hash == "0x" + "ab" * 32
    assert len(node.raw_sent) == 2
    assert node.raw_sent[0] != node.raw_sent[1]
    assert sequencer.snapshot().next_nonce == 6


@pytest.mark.asyncio
async def test_pipeline_reports_unreadable_resync_as_recovery_error(account):
    nonce_too_low = httpx.Response(
        400,
        json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "nonce too low"}},
    )
    node = _ScriptedNode(
        sends=[nonce_too_low],
        nonces=[_result("0x0"), httpx.Response(200, text="<html>gateway</html>")],
    )
    client = _client(node)
    sequencer = AccountSequencer(account)
    pipeline = SubmissionPipeline(client, sequencer)

    try:
        with pytest.raises(RecoveryError):
            await pipeline.submit(_request())
    finally:
        await client.close()

    assert len(node.raw_sent) == 1
    assert sequencer.snapshot().next_nonce == 0
    assert not sequencer.locked
