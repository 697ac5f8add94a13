"""
Byte / hex / integer conversions used at the API boundary.

Every public operation accepts either raw bytes or a hex string; these
helpers turn both into ``bytes`` once, so the engine itself only ever
sees ``bytes`` and ``int``.
"""

from __future__ import annotations

from typing import Optional, Union

from .curve import FIELD_BYTES
from .errors import UnsupportedKeyType

BytesLike = Union[bytes, bytearray, memoryview, str]


def hex_to_bytes(value: str) -> bytes:
    if len(value) % 2:
        raise UnsupportedKeyType(f"hex string has odd length {len(value)}")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise UnsupportedKeyType(f"invalid hex string: {exc}") from exc


def ensure_bytes(value: BytesLike, length: Optional[int] = None) -> bytes:
    """Accept ``bytes``-like or hex ``str``; optionally enforce a length."""
    if isinstance(value, str):
        data = hex_to_bytes(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
    else:
        raise UnsupportedKeyType(
            f"expected bytes or hex string, got {type(value).__name__}"
        )
    if length is not None and len(data) != length:
        raise UnsupportedKeyType(f"expected {length} bytes, got {len(data)}")
    return data


def bytes_to_number(data: bytes) -> int:
    return int.from_bytes(data, "big")


def number_to_bytes32(num: int) -> bytes:
    """Big-endian, zero-padded to 32 bytes."""
    if num < 0 or num >= 1 << (8 * FIELD_BYTES):
        raise ValueError(f"expected 0 <= num < 2^256, got {num}")
    return num.to_bytes(FIELD_BYTES, "big")


def number_to_hex_unpadded(num: int) -> str:
    """Minimal big-endian hex with an even number of digits."""
    h = format(num, "x")
    return "0" + h if len(h) % 2 else h
