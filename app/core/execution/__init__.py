"""
Transaction Execution Layer

Provides the infrastructure for relaying on-chain transactions:
- SubmissionPipeline: simulate, sign and send with one nonce resync on conflict
- AccountSequencer: serializes nonce allocation for the controlled account
- EthRpcClient: JSON-RPC client for the execution layer

Usage:
    from app.core.execution import (
        AccountSequencer,
        ControlledAccount,
        EthRpcClient,
        SubmissionPipeline,
    )

    account = ControlledAccount.from_private_key(key, chain_id=1)
    pipeline = SubmissionPipeline(EthRpcClient(rpc_url), AccountSequencer(account))

    result = await pipeline.submit(request)
"""

from .errors import (
    ErrorCategory,
    RelayerError,
    InputError,
    DecodeError,
    ParseError,
    TimestampRangeError,
    RpcError,
    SimulationError,
    GasEstimationError,
    NonceConflictError,
    RecoveryError,
    NetworkError,
    SigningError,
    TransactionSubmitError,
    SubmissionTimeoutError,
    ConfigurationError,
    classify_send_error,
    is_nonce_conflict,
)

from .models import (
    OperationKind,
    ControlledAccount,
    NonceState,
    GasEstimate,
    OperationRequest,
    PendingOperation,
    SignedTransaction,
    SubmissionResult,
)

from .nonce_manager import (
    AccountSequencer,
)

from .rpc_client import (
    ExecutionClient,
    EthRpcClient,
)

from .signer import (
    TransactionSigner,
)

from .executor import (
    SubmissionPipeline,
    decode_revert_reason,
)

__all__ = [
    # Errors
    "ErrorCategory",
    "RelayerError",
    "InputError",
    "DecodeError",
    "ParseError",
    "TimestampRangeError",
    "RpcError",
    "SimulationError",
    "GasEstimationError",
    "NonceConflictError",
    "RecoveryError",
    "NetworkError",
    "SigningError",
    "TransactionSubmitError",
    "SubmissionTimeoutError",
    "ConfigurationError",
    "classify_send_error",
    "is_nonce_conflict",
    # Models
    "OperationKind",
    "ControlledAccount",
    "NonceState",
    "GasEstimate",
    "OperationRequest",
    "PendingOperation",
    "SignedTransaction",
    "SubmissionResult",
    # Sequencer
    "AccountSequencer",
    # RPC
    "ExecutionClient",
    "EthRpcClient",
    # Signing
    "TransactionSigner",
    # Pipeline
    "SubmissionPipeline",
    "decode_revert_reason",
]
