"""
Strict DER codec for ECDSA signatures.

    SEQUENCE { INTEGER r, INTEGER s }
    30 len 02 rlen r… 02 slen s…

Parsing rejects wrong tags, lengths that disagree with the data,
trailing bytes, non-minimal integers (a superfluous leading 0x00) and
negative integers (top bit set without the 0x00 pad).
"""

from __future__ import annotations

from typing import Tuple

from .codec import bytes_to_number, number_to_hex_unpadded
from .errors import InvalidSignatureEncoding

SEQUENCE_TAG = 0x30
INTEGER_TAG = 0x02


def _parse_int(data: bytes) -> Tuple[int, bytes]:
    """Parse one DER INTEGER; return ``(value, remaining bytes)``."""
    if len(data) < 2 or data[0] != INTEGER_TAG:
        raise InvalidSignatureEncoding(f"invalid signature integer tag: {data.hex()}")
    length = data[1]
    res = data[2:length + 2]
    if not length or len(res) != length:
        raise InvalidSignatureEncoding("invalid signature integer: wrong length")
    if res[0] & 0x80:
        raise InvalidSignatureEncoding("invalid signature integer: negative")
    if len(res) > 1 and res[0] == 0x00 and res[1] < 0x80:
        raise InvalidSignatureEncoding("invalid signature integer: non-minimal encoding")
    return bytes_to_number(res), data[length + 2:]


def decode_der(data: bytes) -> Tuple[int, int]:
    """Return ``(r, s)`` from a DER signature; range checks are the caller's."""
    if len(data) < 2 or data[0] != SEQUENCE_TAG:
        raise InvalidSignatureEncoding(f"invalid signature tag: {data.hex()}")
    if data[1] != len(data) - 2:
        raise InvalidSignatureEncoding("invalid signature: incorrect length")
    r, rest = _parse_int(data[2:])
    s, left = _parse_int(rest)
    if left:
        raise InvalidSignatureEncoding(
            f"invalid signature: left bytes after parsing: {left.hex()}"
        )
    return r, s


def _slice_der(h: str) -> str:
    # pad with 00 when the top bit would read as a sign
    return "00" + h if int(h[0], 16) >= 8 else h


def encode_der_hex(r: int, s: int) -> str:
    s_hex = _slice_der(number_to_hex_unpadded(s))
    r_hex = _slice_der(number_to_hex_unpadded(r))
    s_len = len(s_hex) // 2
    r_len = len(r_hex) // 2
    length = number_to_hex_unpadded(r_len + s_len + 4)
    return (
        f"30{length}"
        f"02{number_to_hex_unpadded(r_len)}{r_hex}"
        f"02{number_to_hex_unpadded(s_len)}{s_hex}"
    )


def encode_der(r: int, s: int) -> bytes:
    return bytes.fromhex(encode_der_hex(r, s))
