"""
Submission pipeline for relayed operations.

Handles the full lifecycle of a relayed submission:
- Dry-run (eth_call) before any nonce is touched
- Gas estimation
- Nonce allocation under the account lock
- Signing and broadcast
- One resynchronize-and-retry cycle on nonce conflicts
"""

from typing import Any, Iterable, Optional

import structlog
from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import to_bytes

from .errors import (
    GasEstimationError,
    NetworkError,
    NonceConflictError,
    RecoveryError,
    RelayerError,
    RpcError,
    SimulationError,
    classify_send_error,
)
from .models import (
    GasEstimate,
    OperationRequest,
    PendingOperation,
    SignedTransaction,
    SubmissionResult,
)
from .nonce_manager import AccountSequencer
from .rpc_client import ExecutionClient
from .signer import TransactionSigner


logger = structlog.stdlib.get_logger(__name__)

# Error(string) selector used by Solidity require/revert messages
REVERT_ERROR_SELECTOR = "0x08c379a0"


def decode_revert_reason(data: Any) -> Optional[str]:
    """Extract the revert message from eth_call error data, if any."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str) or not data.startswith(REVERT_ERROR_SELECTOR):
        return None
    try:
        (reason,) = abi_decode(["string"], to_bytes(hexstr=data[len(REVERT_ERROR_SELECTOR):]))
    except (DecodingError, ValueError):
        return None
    return reason


class SubmissionPipeline:
    """
    Relays operations for the controlled account.

    Responsibilities:
    - Simulate the operation before consuming a nonce
    - Estimate gas limit and price once per submission
    - Allocate, sign and send under the account lock
    - Classify send failures and resync the nonce once on conflicts
    """

    def __init__(
        self,
        client: ExecutionClient,
        sequencer: AccountSequencer,
        signer: Optional[TransactionSigner] = None,
        gas_multiplier: float = 1.1,
        nonce_error_codes: Iterable[int] = (),
    ):
        self.client = client
        self.sequencer = sequencer
        self.account = sequencer.account
        self.signer = signer or TransactionSigner(sequencer.account)
        self.gas_multiplier = gas_multiplier
        self.nonce_error_codes = tuple(nonce_error_codes)

    async def submit(self, request: OperationRequest) -> SubmissionResult:
        """
        Simulate, sign and send an operation.

        The account lock spans simulation through send so that at most one
        nonce-consuming transaction is in flight. The nonce is committed only
        after the execution layer accepted a send; cancellation or any
        terminal failure leaves the counter untouched.

        Raises:
            SimulationError: dry-run reverted; no nonce consumed
            GasEstimationError: gas limit or price unavailable
            RecoveryError: nonce resync after a conflict failed
            NonceConflictError: retry after resync conflicted again
            RelayerError: any other terminal failure
        """
        log = logger.bind(kind=request.kind.value, account=self.account.address)

        async with self.sequencer.exclusive():
            await self._simulate(request)

            if self.sequencer.needs_sync:
                await self._resynchronize()

            gas = await self.estimate_gas(request)
            signed = self._allocate_and_sign(request, gas)
            resynced = False

            try:
                tx_hash = await self._send(signed)
            except NonceConflictError as conflict:
                log.warning(
                    "nonce_conflict",
                    nonce=signed.nonce,
                    error=str(conflict),
                )
                await self._resynchronize()
                resynced = True

                signed = self._allocate_and_sign(request, gas)
                tx_hash = await self._send(signed)

            self.sequencer.commit()

        log.info(
            "submission_confirmed",
            tx_hash=tx_hash,
            nonce=signed.nonce,
            resynced=resynced,
        )
        return SubmissionResult(
            tx_hash=tx_hash,
            nonce=signed.nonce,
            kind=request.kind,
            attempts=2 if resynced else 1,
            resynced=resynced,
        )

    async def _simulate(self, request: OperationRequest) -> None:
        """Dry-run the operation; nothing is broadcast and no nonce is used."""
        try:
            await self.client.call(request.call_object(self.account.address))
        except RpcError as e:
            reason = decode_revert_reason(e.data)
            raise SimulationError(
                f"Simulation of {request.kind.value} failed: {reason or e.message}",
                revert_reason=reason,
            ) from e

    async def estimate_gas(self, request: OperationRequest) -> GasEstimate:
        """Estimate gas limit (with safety multiplier) and gas price."""
        try:
            gas_limit = await self.client.estimate_gas(request.call_object(self.account.address))
            gas_price = await self.client.suggest_gas_price()
        except NetworkError:
            raise
        except RelayerError as e:
            raise GasEstimationError(f"Failed to estimate gas: {e}") from e

        return GasEstimate(
            gas_limit=int(gas_limit * self.gas_multiplier),
            gas_price_wei=gas_price,
        )

    def _allocate_and_sign(self, request: OperationRequest, gas: GasEstimate) -> SignedTransaction:
        operation = PendingOperation(
            kind=request.kind,
            chain_id=self.account.chain_id,
            from_address=self.account.address,
            to_address=request.to_address,
            data=request.data,
            value=request.value,
            gas_limit=gas.gas_limit,
            gas_price_wei=gas.gas_price_wei,
        )
        return self.signer.sign(operation.with_nonce(self.sequencer.allocate()))

    async def _send(self, signed: SignedTransaction) -> str:
        try:
            tx_hash = await self.client.send_raw_transaction(signed.raw_transaction)
        except RelayerError as e:
            classified = classify_send_error(e, self.nonce_error_codes)
            if classified is e:
                raise
            raise classified from e
        return tx_hash or signed.tx_hash

    async def _resynchronize(self) -> int:
        try:
            return await self.sequencer.resynchronize(self.client)
        except RelayerError as e:
            raise RecoveryError(f"Failed to resynchronize nonce: {e}") from e
