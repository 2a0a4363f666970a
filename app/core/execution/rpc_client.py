"""
JSON-RPC client for the execution layer.

Thin async wrapper over the handful of eth_* methods the relay needs.
Transport failures raise ``NetworkError``; errors reported by the node
raise ``RpcError`` with the structured code preserved for classification.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .errors import NetworkError, RpcError


logger = logging.getLogger(__name__)


class ExecutionClient(Protocol):
    """Operations the pipeline consumes from the execution layer."""

    async def chain_id(self) -> int: ...

    async def suggest_gas_price(self) -> int: ...

    async def estimate_gas(self, call: Dict[str, Any]) -> int: ...

    async def get_transaction_count(self, address: str, block: str = "pending") -> int: ...

    async def call(self, call: Dict[str, Any], block: str = "latest") -> str: ...

    async def send_raw_transaction(self, raw_transaction: str) -> str: ...


class EthRpcClient:
    """Execution client speaking Ethereum JSON-RPC over HTTP."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def _rpc_call(self, method: str, params: List[Any]) -> Any:
        """Make an RPC call to the node.

        A JSON-RPC ``error`` object in the body raises ``RpcError`` whatever
        the HTTP status; bodies that are not JSON-RPC raise ``NetworkError``.
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            response = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"RPC transport error on {method}: {e}")
            raise NetworkError(f"{method} failed: {e}", method=method) from e

        try:
            result = response.json()
        except ValueError:
            result = None

        if isinstance(result, dict) and result.get("error"):
            error = result["error"]
            if isinstance(error, dict):
                raise RpcError(
                    error.get("message", "unknown RPC error"),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RpcError(str(error))

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"RPC transport error on {method}: {e}")
            raise NetworkError(f"{method} failed: {e}", method=method) from e

        if not isinstance(result, dict):
            raise NetworkError(f"{method} failed: response is not a JSON-RPC object", method=method)

        return result.get("result")

    async def _quantity(self, method: str, params: List[Any]) -> int:
        value = await self._rpc_call(method, params)
        if not isinstance(value, str):
            raise RpcError(f"{method} returned no quantity: {value!r}")
        try:
            return int(value, 16)
        except ValueError as e:
            raise RpcError(f"{method} returned a malformed quantity: {value!r}") from e

    async def chain_id(self) -> int:
        return await self._quantity("eth_chainId", [])

    async def suggest_gas_price(self) -> int:
        return await self._quantity("eth_gasPrice", [])

    async def estimate_gas(self, call: Dict[str, Any]) -> int:
        return await self._quantity("eth_estimateGas", [call])

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return await self._quantity("eth_getTransactionCount", [address, block])

    async def call(self, call: Dict[str, Any], block: str = "latest") -> str:
        """Dry-run a call against current state. Nothing is broadcast."""
        return await self._rpc_call("eth_call", [call, block])

    async def send_raw_transaction(self, raw_transaction: str) -> str:
        tx_hash = await self._rpc_call("eth_sendRawTransaction", [raw_transaction])
        logger.info(f"Transaction submitted: {tx_hash}")
        return tx_hash

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
