"""
Key handling: public-key derivation, ECDH and key utilities.

Public keys are accepted as a ``Point`` or as SEC 1 bytes / hex
(33-byte compressed, 65-byte uncompressed) or a 32-byte x-only key.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .codec import BytesLike, bytes_to_number, ensure_bytes, number_to_bytes32
from .config import get_config
from .curve import COMPRESSED_BYTES, ORDER, UNCOMPRESSED_BYTES, is_within_curve_order
from .errors import InvalidScalar, KoblitzError, UnsupportedKeyType
from .field import mod
from .hash import random_bytes
from .point import Point
from .scalar import PrivateKey, normalize_private_key

logger = logging.getLogger("koblitz.keys")

PublicKey = Union[Point, bytes, bytearray, str]

_PUBLIC_LENGTHS = (COMPRESSED_BYTES, UNCOMPRESSED_BYTES)


# ── normalisation ───────────────────────────────────────────────────────
def normalize_public_key(public_key: PublicKey) -> Point:
    """Decode and validate a public key; raises ``InvalidPoint``."""
    if isinstance(public_key, Point):
        public_key.assert_validity()
        return public_key
    if isinstance(public_key, (str, bytes, bytearray, memoryview)):
        return Point.from_hex(public_key)
    raise UnsupportedKeyType(
        f"expected Point, bytes or hex public key, got {type(public_key).__name__}"
    )


def _is_probably_public(item: object) -> bool:
    """Heuristic used to catch swapped ECDH arguments."""
    if isinstance(item, Point):
        return True
    if isinstance(item, str):
        return len(item) // 2 in _PUBLIC_LENGTHS and len(item) % 2 == 0
    if isinstance(item, (bytes, bytearray, memoryview)):
        return len(item) in _PUBLIC_LENGTHS
    return False


# ── public operations ───────────────────────────────────────────────────
def get_public_key(private_key: PrivateKey, compressed: bool = False) -> bytes:
    """SEC 1 encoding of  d·G  (uncompressed by default)."""
    return Point.from_private_key(private_key).to_bytes(compressed)


def get_shared_secret(
    private_a: PrivateKey,
    public_b: PublicKey,
    compressed: bool = False,
) -> bytes:
    """
    ECDH: SEC 1 encoding of  d_A · Q_B.

    The caller is expected to hash the result before using it as key
    material.
    """
    if _is_probably_public(private_a):
        raise UnsupportedKeyType("get_shared_secret: first arg must be private key")
    if not _is_probably_public(public_b):
        raise UnsupportedKeyType("get_shared_secret: second arg must be public key")
    b = normalize_public_key(public_b)
    return b.multiply(normalize_private_key(private_a)).to_bytes(compressed)


# ── utilities ───────────────────────────────────────────────────────────
def is_valid_private_key(private_key: PrivateKey) -> bool:
    try:
        normalize_private_key(private_key)
        return True
    except KoblitzError:
        return False


def random_private_key() -> bytes:
    """
    32 random bytes forming a valid private key in ``(1, n)``.

    Rejection-sampled; fails with ``InvalidScalar`` only if the RNG is
    broken.
    """
    attempts = get_config().max_key_attempts
    for _ in range(attempts):
        candidate = random_bytes(32)
        num = bytes_to_number(candidate)
        if is_within_curve_order(num) and num != 1:
            return candidate
    raise InvalidScalar(
        f"valid private key was not found in {attempts} iterations, PRNG is broken"
    )


def hash_to_private_key(data: BytesLike) -> bytes:
    """
    Reduce 40..1024 bytes of uniform input (e.g. a hash or KDF output)
    into a private key in ``[1, n)`` with negligible bias.
    """
    raw = ensure_bytes(data)
    if len(raw) < 40 or len(raw) > 1024:
        raise InvalidScalar("expected 40-1024 bytes of private key as per FIPS 186")
    num = mod(bytes_to_number(raw), ORDER - 1) + 1
    return number_to_bytes32(num)


def precompute(window_size: int = 8, point: Optional[Point] = None) -> Point:
    """
    Assign a wNAF window to *point* (default: the generator) and build its
    table immediately.

    Any point other than ``Point.BASE`` is copied first; multiply through
    the returned object to benefit from the table.
    """
    if point is None or point is Point.BASE:
        cached = Point.BASE
    else:
        if not isinstance(point, Point):
            raise UnsupportedKeyType("precompute: expected Point")
        point.assert_validity()
        cached = Point(point.x, point.y)
    cached.set_window_size(window_size)
    cached.multiply(3)
    logger.debug("precomputed window %d for %r", window_size, cached)
    return cached
