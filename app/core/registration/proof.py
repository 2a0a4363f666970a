"""
Decoding of registration proof material.

Turns the hex and decimal strings of an inbound registration into the
fixed-width byte arrays and integers the registration contract expects.
"""

import binascii
import re
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..execution.errors import DecodeError, ParseError


UINT256_MAX = 2**256 - 1

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")

Pair = Tuple[int, int]


@dataclass(frozen=True)
class ProofPoints:
    """Groth16 proof points in affine form."""
    a: Pair
    b: Tuple[Pair, Pair]
    c: Pair


@dataclass(frozen=True)
class ProofSubmission:
    """Decoded registration: public key, signature, proof and timestamp."""
    x: bytes                                    # 32 bytes
    y: bytes                                    # 32 bytes
    s: bytes
    n: bytes
    proof: ProofPoints
    timestamp: int                              # Unix seconds


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def decode_hex(value: str) -> bytes:
    """Decode a hex string (optional ``0x`` prefix) into bytes."""
    try:
        return binascii.unhexlify(_strip_hex_prefix(value))
    except (binascii.Error, ValueError, TypeError) as e:
        raise DecodeError(f"invalid hex string {value!r}: {e}") from e


def decode_fixed_bytes(value: str, size: int = 32) -> bytes:
    """Decode hex into exactly ``size`` bytes, zero-padding short input on the right."""
    raw = decode_hex(value)
    if len(raw) > size:
        raise DecodeError(f"hex value is {len(raw)} bytes, expected at most {size}")
    return raw.ljust(size, b"\x00")


def parse_big_int(value: str) -> int:
    """Parse a base-10 integer, or base-16 when prefixed with ``0x``."""
    if value.startswith("0x"):
        digits, base, pattern = value[2:], 16, _HEX_RE
    else:
        digits, base, pattern = value, 10, _DECIMAL_RE

    if not pattern.fullmatch(digits):
        raise ParseError(f"can not parse string to integer: {value!r}")

    number = int(digits, base)
    if number > UINT256_MAX:
        raise ParseError(f"integer does not fit in uint256: {value!r}")
    return number


def _affine_pair(values: Sequence[str]) -> Pair:
    # snarkjs emits projective coordinates; the trailing element is dropped
    if len(values) < 2:
        raise ParseError(f"expected at least 2 proof coordinates, got {len(values)}")
    return parse_big_int(values[0]), parse_big_int(values[1])


def parse_proof_points(
    a: Sequence[str],
    b: Sequence[Sequence[str]],
    c: Sequence[str],
) -> ProofPoints:
    if len(b) < 2:
        raise ParseError(f"expected at least 2 rows in proof point B, got {len(b)}")
    return ProofPoints(
        a=_affine_pair(a),
        b=(_affine_pair(b[0]), _affine_pair(b[1])),
        c=_affine_pair(c),
    )


def materialize_registration(
    *,
    x: str,
    y: str,
    s: str,
    n: str,
    a: Sequence[str],
    b: Sequence[Sequence[str]],
    c: Sequence[str],
    timestamp: int,
) -> ProofSubmission:
    """
    Decode every field of a registration.

    Raises DecodeError or ParseError on the first malformed field; nothing
    is returned on failure.
    """
    return ProofSubmission(
        x=decode_fixed_bytes(x),
        y=decode_fixed_bytes(y),
        s=decode_hex(s),
        n=decode_hex(n),
        proof=parse_proof_points(a, b, c),
        timestamp=timestamp,
    )
