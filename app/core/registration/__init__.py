"""
Registration material: proof decoding, date packing and call-data encoding.
"""

from .proof import (
    ProofPoints,
    ProofSubmission,
    decode_hex,
    decode_fixed_bytes,
    parse_big_int,
    parse_proof_points,
    materialize_registration,
)
from .timestamp import pack_timestamp, unpack_timestamp
from .contract import (
    REGISTER_SIGNATURE,
    RegistrationContract,
    build_raw_request,
)

__all__ = [
    "ProofPoints",
    "ProofSubmission",
    "decode_hex",
    "decode_fixed_bytes",
    "parse_big_int",
    "parse_proof_points",
    "materialize_registration",
    "pack_timestamp",
    "unpack_timestamp",
    "REGISTER_SIGNATURE",
    "RegistrationContract",
    "build_raw_request",
]
