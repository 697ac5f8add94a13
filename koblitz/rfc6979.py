"""
Deterministic ECDSA nonces (RFC 6979, HMAC-SHA-256 instantiation).

The nonce generator is an HMAC-DRBG keyed from the private key and the
message hash, so signing the same message with the same key always
produces the same signature and never consumes fresh randomness.

References
----------
- Pornin (2013).  RFC 6979 §3.2, "Generation of k".
"""

from __future__ import annotations

import logging
from typing import Optional

from .codec import bytes_to_number, number_to_bytes32
from .config import get_config
from .curve import ORDER, SCALAR_BYTES
from .errors import ExhaustedNonceSpace
from .field import mod
from .hash import hmac_sha256

logger = logging.getLogger("koblitz.rfc6979")


# ── hash ↔ integer conversions ──────────────────────────────────────────
def truncate_hash(msg_hash: bytes, truncate_only: bool = False) -> int:
    """
    Interpret a message hash as an integer, keeping its leftmost 256 bits.

    Unless *truncate_only*, values ≥ n are reduced once by n.
    """
    delta = len(msg_hash) * 8 - 256
    h = bytes_to_number(msg_hash)
    if delta > 0:
        h >>= delta
    if not truncate_only and h >= ORDER:
        h -= ORDER
    return h


def bits2int(data: bytes) -> int:
    return bytes_to_number(data[:SCALAR_BYTES])


def int2octets(num: int) -> bytes:
    return number_to_bytes32(num)


def bits2octets(data: bytes) -> bytes:
    return int2octets(mod(bits2int(data), ORDER))


# ── HMAC-DRBG ───────────────────────────────────────────────────────────
class HmacDrbg:
    """
    HMAC-SHA-256 DRBG as used by RFC 6979.

    Each call to :meth:`generate` counts against the configured cap;
    exceeding it raises ``ExhaustedNonceSpace``.
    """

    def __init__(self, max_attempts: Optional[int] = None) -> None:
        self.v = b"\x01" * 32
        self.k = b"\x00" * 32
        self.counter = 0
        self.max_attempts = (
            get_config().max_nonce_attempts if max_attempts is None else max_attempts
        )

    def _hmac(self, *values: bytes) -> bytes:
        return hmac_sha256(self.k, *values)

    def _incr(self) -> None:
        if self.counter >= self.max_attempts:
            logger.warning(
                "RFC6979 generator exhausted after %d candidates", self.counter
            )
            raise ExhaustedNonceSpace(
                f"tried {self.max_attempts} k values for sign(), all were invalid"
            )
        self.counter += 1

    def reseed(self, seed: bytes = b"") -> None:
        self.k = self._hmac(self.v, b"\x00", seed)
        self.v = self._hmac(self.v)
        if not seed:
            return
        self.k = self._hmac(self.v, b"\x01", seed)
        self.v = self._hmac(self.v)

    def generate(self) -> bytes:
        """Next 32-byte candidate."""
        self._incr()
        out = b""
        while len(out) < SCALAR_BYTES:
            self.v = self._hmac(self.v)
            out += self.v
        return out[:SCALAR_BYTES]
