"""
Scalar / private-key normalisation.

Private keys arrive as ``int``, 32 raw bytes or a 64-character hex
string.  Each shape has its own explicit converter; ``normalize_private_key``
only dispatches.  The canonical internal form is an ``int`` in ``(0, n)``.
"""

from __future__ import annotations

from typing import Union

from .codec import bytes_to_number, hex_to_bytes
from .curve import ORDER, SCALAR_BYTES, is_within_curve_order
from .errors import InvalidScalar, UnsupportedKeyType

PrivateKey = Union[int, bytes, bytearray, str]


def check_scalar(num: int) -> int:
    """Return *num* if ``0 < num < n``, else raise ``InvalidScalar``."""
    if isinstance(num, bool) or not isinstance(num, int):
        raise UnsupportedKeyType(f"expected int scalar, got {type(num).__name__}")
    if not is_within_curve_order(num):
        raise InvalidScalar("expected valid scalar: 0 < scalar < curve.n")
    return num


# ── typed converters ────────────────────────────────────────────────────
def private_key_from_int(num: int) -> int:
    if not is_within_curve_order(num):
        raise InvalidScalar("expected private key: 0 < key < n")
    return num


def private_key_from_bytes(data: bytes) -> int:
    if len(data) != SCALAR_BYTES:
        raise InvalidScalar(f"expected {SCALAR_BYTES} bytes of private key, got {len(data)}")
    return private_key_from_int(bytes_to_number(data))


def private_key_from_hex(value: str) -> int:
    if len(value) != 2 * SCALAR_BYTES:
        raise InvalidScalar(
            f"expected {2 * SCALAR_BYTES} hex chars of private key, got {len(value)}"
        )
    return private_key_from_bytes(hex_to_bytes(value))


def normalize_private_key(key: PrivateKey) -> int:
    """Convert any accepted private-key shape to an ``int`` in ``(0, n)``."""
    if isinstance(key, bool):
        raise UnsupportedKeyType("expected valid private key, got bool")
    if isinstance(key, int):
        return private_key_from_int(key)
    if isinstance(key, str):
        return private_key_from_hex(key)
    if isinstance(key, (bytes, bytearray, memoryview)):
        return private_key_from_bytes(bytes(key))
    raise UnsupportedKeyType(f"expected valid private key, got {type(key).__name__}")


def negate_scalar(num: int) -> int:
    return ORDER - num
