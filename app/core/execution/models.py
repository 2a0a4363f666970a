"""
Transaction execution models and types.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class OperationKind(str, Enum):
    """Operations the relay submits on behalf of callers."""
    CREATE_ACCOUNT = "create_account"
    REGISTER = "register"


@dataclass(frozen=True)
class ControlledAccount:
    """The single account the relay signs for."""
    address: str
    private_key: str = field(repr=False)
    chain_id: int

    @classmethod
    def from_private_key(cls, private_key: str, chain_id: int) -> "ControlledAccount":
        from eth_account import Account

        account = Account.from_key(private_key)
        return cls(address=account.address, private_key=private_key, chain_id=chain_id)


@dataclass
class NonceState:
    """Tracks the next nonce for the controlled account."""
    address: str
    chain_id: int
    next_nonce: Optional[int] = None            # None until first sync
    last_synced_nonce: Optional[int] = None     # Last value read on-chain
    committed: int = 0                          # Sends confirmed this process
    resyncs: int = 0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class GasEstimate:
    """Gas estimation for a transaction."""
    gas_limit: int
    gas_price_wei: int
    estimated_cost_wei: int = 0

    def __post_init__(self):
        if self.estimated_cost_wei == 0:
            self.estimated_cost_wei = self.gas_limit * self.gas_price_wei


@dataclass(frozen=True)
class OperationRequest:
    """An operation to relay, before gas and nonce are known."""
    kind: OperationKind
    data: str                                   # Encoded calldata (hex)
    to_address: Optional[str] = None            # None deploys a contract
    value: int = 0
    description: str = ""

    def call_object(self, from_address: str) -> Dict[str, Any]:
        """Build the eth_call / eth_estimateGas call object."""
        call: Dict[str, Any] = {"from": from_address, "data": self.data}
        if self.to_address:
            call["to"] = self.to_address
        if self.value > 0:
            call["value"] = hex(self.value)
        return call


@dataclass(frozen=True)
class PendingOperation:
    """A transaction ready to be signed and broadcast."""
    kind: OperationKind
    chain_id: int
    from_address: str
    to_address: Optional[str]
    data: str
    gas_limit: int
    gas_price_wei: int
    value: int = 0
    nonce: Optional[int] = None

    def with_nonce(self, nonce: int) -> "PendingOperation":
        return replace(self, nonce=nonce)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary eth-account can sign."""
        if self.nonce is None:
            raise ValueError("PendingOperation has no nonce allocated")
        tx: Dict[str, Any] = {
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price_wei,
            "value": self.value,
            "data": self.data,
        }
        if self.to_address:
            tx["to"] = self.to_address
        return tx


@dataclass(frozen=True)
class SignedTransaction:
    """A signed, immutable transaction identified by its hash."""
    operation: PendingOperation
    raw_transaction: str                        # 0x-prefixed RLP bytes
    tx_hash: str

    @property
    def nonce(self) -> int:
        return self.operation.nonce  # type: ignore[return-value]


@dataclass
class SubmissionResult:
    """Outcome of a confirmed submission."""
    tx_hash: str
    nonce: int
    kind: OperationKind
    attempts: int = 1
    resynced: bool = False
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
