"""
Error Classification

Defines the error taxonomy for the relay pipeline.
Client errors (malformed input) are rendered as 400s; everything else is
logged with context and surfaced as an opaque internal error.
"""

from enum import Enum
from typing import Any, Iterable, Optional


class ErrorCategory(str, Enum):
    """Categories of errors for rendering and logging decisions."""

    VALIDATION = "validation"           # Malformed client input
    SIMULATION = "simulation"           # Dry-run reverted
    GAS_ESTIMATION = "gas_estimation"   # Gas limit/price unavailable
    NONCE_CONFLICT = "nonce_conflict"   # Node rejected our nonce
    RECOVERY = "recovery"               # Resync itself failed
    NETWORK = "network"                 # Transport failure
    SIGNING = "signing"                 # Local signing failed
    SUBMIT = "submit"                   # Broadcast rejected
    TIMEOUT = "timeout"                 # Submission deadline hit
    CONFIGURATION = "configuration"     # Bad startup configuration
    RPC = "rpc"                         # Raw JSON-RPC error
    UNKNOWN = "unknown"


class RelayerError(Exception):
    """Base class for relay errors."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details


class InputError(RelayerError):
    """Client-caused error; safe to echo back in a bad-request response."""

    category = ErrorCategory.VALIDATION


class DecodeError(InputError):
    """Malformed hexadecimal input."""


class ParseError(InputError):
    """A proof integer is neither valid base-10 nor base-16."""


class TimestampRangeError(InputError):
    """Timestamp year does not fit the packed 8-bit year field."""


class RpcError(RelayerError):
    """Structured JSON-RPC error returned by the execution layer."""

    category = ErrorCategory.RPC

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message, code=code, data=data)
        self.code = code
        self.data = data


class SimulationError(RelayerError):
    """Dry-run of the operation reverted or failed to execute."""

    category = ErrorCategory.SIMULATION

    def __init__(self, message: str, revert_reason: Optional[str] = None):
        super().__init__(message, revert_reason=revert_reason)
        self.revert_reason = revert_reason


class GasEstimationError(RelayerError):
    category = ErrorCategory.GAS_ESTIMATION


class NonceConflictError(RelayerError):
    """Node reported the submitted nonce as too low, too high, or used."""

    category = ErrorCategory.NONCE_CONFLICT


class RecoveryError(RelayerError):
    """Resynchronizing the nonce with the execution layer failed."""

    category = ErrorCategory.RECOVERY


class NetworkError(RelayerError):
    """Execution layer could not be reached."""

    category = ErrorCategory.NETWORK


class SigningError(RelayerError):
    category = ErrorCategory.SIGNING


class TransactionSubmitError(RelayerError):
    """Broadcast rejected for a reason other than a nonce conflict."""

    category = ErrorCategory.SUBMIT


class SubmissionTimeoutError(RelayerError):
    category = ErrorCategory.TIMEOUT


class ConfigurationError(RelayerError):
    category = ErrorCategory.CONFIGURATION


# Message fragments that identify a nonce conflict when the node gives no
# structured code. Wording differs across clients and versions.
NONCE_CONFLICT_PATTERNS = (
    "nonce",
    "replacement transaction underpriced",
)


def is_nonce_conflict(error: Exception, nonce_error_codes: Iterable[int] = ()) -> bool:
    """Return True when a send failure means our nonce is out of sync."""
    if isinstance(error, NonceConflictError):
        return True

    if isinstance(error, RpcError) and error.code is not None:
        if error.code in set(nonce_error_codes):
            return True

    message = str(error).lower()
    return any(p in message for p in NONCE_CONFLICT_PATTERNS)


def classify_send_error(
    error: Exception,
    nonce_error_codes: Iterable[int] = (),
) -> RelayerError:
    """
    Classify a broadcast failure.

    Returns a ``NonceConflictError`` for nonce desynchronization, the error
    itself for already-terminal relay errors, and a
    ``TransactionSubmitError`` for anything else.
    """
    if is_nonce_conflict(error, nonce_error_codes):
        if isinstance(error, NonceConflictError):
            return error
        return NonceConflictError(str(error), cause=type(error).__name__)

    if isinstance(error, (NetworkError, SigningError)):
        return error

    if isinstance(error, RpcError):
        return TransactionSubmitError(error.message, code=error.code, data=error.data)

    return TransactionSubmitError(str(error))
