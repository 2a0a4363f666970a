"""
Call-data encoding for the relayed operations.

The registration contract exposes::

    register(
        bytes32 x, bytes32 y, bytes s, bytes n,
        (uint256[2] a, uint256[2][2] b, uint256[2] c) proof,
        uint256 date, uint256 extra
    )

The relay always passes zero for the trailing ``extra`` argument.
"""

from typing import Optional

from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address, to_hex

from ..execution.models import OperationKind, OperationRequest
from .proof import ProofSubmission, decode_hex
from .timestamp import pack_timestamp


REGISTER_SIGNATURE = (
    "register(bytes32,bytes32,bytes,bytes,(uint256[2],uint256[2][2],uint256[2]),uint256,uint256)"
)
REGISTER_ARG_TYPES = [
    "bytes32",
    "bytes32",
    "bytes",
    "bytes",
    "(uint256[2],uint256[2][2],uint256[2])",
    "uint256",
    "uint256",
]


class RegistrationContract:
    """Encodes ``register`` calls against a deployed registration contract."""

    def __init__(self, address: str):
        self.address = to_checksum_address(address)
        self.register_selector = function_signature_to_4byte_selector(REGISTER_SIGNATURE)

    def encode_register(self, submission: ProofSubmission) -> str:
        proof = submission.proof
        args = [
            submission.x,
            submission.y,
            submission.s,
            submission.n,
            (list(proof.a), [list(row) for row in proof.b], list(proof.c)),
            pack_timestamp(submission.timestamp),
            0,
        ]
        return to_hex(self.register_selector + abi_encode(REGISTER_ARG_TYPES, args))

    def build_register_request(self, submission: ProofSubmission) -> OperationRequest:
        """Same call data serves both the dry-run and the signed send."""
        return OperationRequest(
            kind=OperationKind.REGISTER,
            to_address=self.address,
            data=self.encode_register(submission),
            description=f"Register key 0x{submission.x.hex()[:8]}...",
        )


def build_raw_request(tx_data: str, target_address: Optional[str] = None) -> OperationRequest:
    """
    Relay an opaque, pre-encoded payload.

    Without a target address the payload is deployed as contract init code.
    Raises DecodeError when ``tx_data`` is not valid hex.
    """
    payload = decode_hex(tx_data)
    return OperationRequest(
        kind=OperationKind.CREATE_ACCOUNT,
        to_address=to_checksum_address(target_address) if target_address else None,
        data=to_hex(payload),
        description="Relay pre-built account creation payload",
    )
