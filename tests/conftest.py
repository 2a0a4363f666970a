"""Shared fixtures: an in-memory execution layer and a relay account."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest
from eth_utils import keccak, to_hex

from app.core.execution import (
    AccountSequencer,
    ControlledAccount,
    SubmissionPipeline,
    TransactionSigner,
)

# Well-known development key (Hardhat/Anvil account #0)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_CHAIN_ID = 31337


class FakeExecutionClient:
    """Execution layer stub with scriptable failures."""

    def __init__(self, on_chain_nonce: int = 0, chain_id: int = TEST_CHAIN_ID):
        self.on_chain_nonce = on_chain_nonce
        self._chain_id = chain_id
        self.call_error: Optional[Exception] = None
        self.count_error: Optional[Exception] = None
        self.send_errors: List[Optional[Exception]] = []
        self.send_delay = 0.0
        self.calls: List[Dict[str, Any]] = []
        self.sent: List[str] = []
        self.send_attempts = 0
        self.count_calls = 0

    async def chain_id(self) -> int:
        return self._chain_id

    async def suggest_gas_price(self) -> int:
        return 1_000_000_000

    async def estimate_gas(self, call: Dict[str, Any]) -> int:
        return 100_000

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        self.count_calls += 1
        if self.count_error:
            raise self.count_error
        return self.on_chain_nonce

    async def call(self, call: Dict[str, Any], block: str = "latest") -> str:
        self.calls.append(call)
        if self.call_error:
            raise self.call_error
        return "0x"

    async def send_raw_transaction(self, raw_transaction: str) -> str:
        self.send_attempts += 1
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_errors:
            error = self.send_errors.pop(0)
            if error is not None:
                raise error
        self.sent.append(raw_transaction)
        return to_hex(keccak(hexstr=raw_transaction))


class RecordingSigner(TransactionSigner):
    """Signer that remembers every transaction it produced."""

    def __init__(self, account: ControlledAccount):
        super().__init__(account)
        self.signed = []

    def sign(self, operation):
        signed = super().sign(operation)
        self.signed.append(signed)
        return signed


@pytest.fixture
def account() -> ControlledAccount:
    return ControlledAccount.from_private_key(TEST_PRIVATE_KEY, chain_id=TEST_CHAIN_ID)


@pytest.fixture
def client() -> FakeExecutionClient:
    return FakeExecutionClient()


@pytest.fixture
def sequencer(account) -> AccountSequencer:
    return AccountSequencer(account)


@pytest.fixture
def signer(account) -> RecordingSigner:
    return RecordingSigner(account)


@pytest.fixture
def pipeline(client, sequencer, signer) -> SubmissionPipeline:
    return SubmissionPipeline(client, sequencer, signer=signer)
