"""
ECDSA over secp256k1 with RFC 6979 deterministic nonces.

**Signing:**  for message hash *h* (as integer *m*) and key *d*

    k  ← HMAC-DRBG(d, h)           (RFC 6979)
    R  = k·G,   r = R.x mod n
    s  = k⁻¹ (m + r·d) mod n

with ``recovery = (0 if R.x == r else 2) | (R.y mod 2)``.  Canonical
(low-s) signing replaces  s > n/2  by  n − s  and flips the low
recovery bit, which removes the trivial malleability  (r, s) ↦ (r, −s).

**Verification:**  ``R' = (h·s⁻¹)·G + (r·s⁻¹)·Q``;  accept iff
``R'.x mod n == r``.  ``verify`` is a total predicate: malformed or
out-of-range input yields ``False``.

**Recovery:**  ``Q = r⁻¹ (s·R − h·G)`` with *R* rebuilt from *r* and the
recovery id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .codec import BytesLike, bytes_to_number, ensure_bytes, number_to_bytes32
from .curve import FIELD_PRIME, HALF_ORDER, ORDER, is_within_curve_order
from .der import decode_der, encode_der, encode_der_hex
from .errors import (
    InvalidPoint,
    InvalidSignatureEncoding,
    InvalidSignatureValue,
    KoblitzError,
)
from .field import invert, mod
from .hash import random_bytes
from .keys import PublicKey, normalize_public_key
from .point import Point
from .rfc6979 import HmacDrbg, bits2int, bits2octets, int2octets, truncate_hash
from .scalar import PrivateKey, normalize_private_key

logger = logging.getLogger("koblitz.signing")


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Signature:
    """ECDSA signature  (r, s)  with  0 < r, s < n."""

    r: int
    s: int

    def __post_init__(self) -> None:
        self.assert_validity()

    def assert_validity(self) -> None:
        if not is_within_curve_order(self.r):
            raise InvalidSignatureValue("invalid signature: r must be 0 < r < n")
        if not is_within_curve_order(self.s):
            raise InvalidSignatureValue("invalid signature: s must be 0 < s < n")

    # parsing ----------------------------------------------------------------
    @classmethod
    def from_der(cls, data: BytesLike) -> Signature:
        r, s = decode_der(ensure_bytes(data))
        return cls(r, s)

    @classmethod
    def from_compact(cls, data: BytesLike) -> Signature:
        """Parse 64 bytes  r ‖ s."""
        raw = ensure_bytes(data)
        if len(raw) != 64:
            raise InvalidSignatureEncoding(
                f"compact signature must be 64 bytes, got {len(raw)}"
            )
        return cls(bytes_to_number(raw[:32]), bytes_to_number(raw[32:]))

    @classmethod
    def from_hex(cls, data: BytesLike) -> Signature:
        return cls.from_der(data)

    # low-s ------------------------------------------------------------------
    def has_high_s(self) -> bool:
        return self.s > HALF_ORDER

    def normalize_s(self) -> Signature:
        if self.has_high_s():
            return Signature(self.r, mod(-self.s, ORDER))
        return self

    # serialisation ----------------------------------------------------------
    def to_der(self) -> bytes:
        return encode_der(self.r, self.s)

    def to_der_hex(self) -> str:
        return encode_der_hex(self.r, self.s)

    def to_compact(self) -> bytes:
        return number_to_bytes32(self.r) + number_to_bytes32(self.s)

    def to_compact_hex(self) -> str:
        return self.to_compact().hex()

    to_bytes = to_der
    to_hex = to_der_hex


SignatureLike = Union[Signature, bytes, bytearray, str]


def normalize_signature(signature: SignatureLike) -> Signature:
    """Accept a ``Signature``, DER bytes/hex, or compact 64-byte bytes/hex."""
    if isinstance(signature, Signature):
        signature.assert_validity()
        return signature
    data = ensure_bytes(signature)
    try:
        return Signature.from_der(data)
    except InvalidSignatureEncoding:
        return Signature.from_compact(data)


# ── signing ─────────────────────────────────────────────────────────────

def _kmd_to_sig(
    k_bytes: bytes,
    m: int,
    d: int,
    low_s: bool = True,
) -> Optional[Tuple[Signature, int]]:
    """Turn one DRBG candidate into ``(sig, recovery)`` or ``None`` if unusable."""
    k = truncate_hash(k_bytes, truncate_only=True)
    if not is_within_curve_order(k):
        return None
    kinv = invert(k, ORDER)
    q = Point.BASE.multiply(k)
    r = mod(q.x, ORDER)
    if r == 0:
        return None
    s = mod(kinv * mod(m + d * r, ORDER), ORDER)
    if s == 0:
        return None
    sig = Signature(r, s)
    recovery = (0 if q.x == sig.r else 2) | (q.y & 1)
    if low_s and sig.has_high_s():
        sig = sig.normalize_s()
        recovery ^= 1
    return sig, recovery


def sign(
    msg_hash: BytesLike,
    private_key: PrivateKey,
    *,
    recovered: bool = False,
    canonical: bool = True,
    der: bool = True,
    extra_entropy: Union[bool, BytesLike, None] = None,
) -> Union[bytes, Tuple[bytes, int]]:
    """
    Deterministically sign a message hash.

    Parameters
    ----------
    msg_hash : bytes or hex str
        Already-hashed message; only its leftmost 256 bits are used.
    private_key : int, 32 bytes or 64-char hex
    recovered : bool
        Also return the recovery id.
    canonical : bool
        Enforce low-s.
    der : bool
        DER output (default) or compact 64-byte ``r ‖ s``.
    extra_entropy : True, 32 bytes or None
        Mixed into the RFC 6979 seed (``True`` draws 32 random bytes).
    """
    h1 = ensure_bytes(msg_hash)
    d = normalize_private_key(private_key)
    seed_parts = [int2octets(d), bits2octets(h1)]
    if extra_entropy is not None and extra_entropy is not False:
        if extra_entropy is True:
            extra_entropy = random_bytes(32)
        seed_parts.append(ensure_bytes(extra_entropy, 32))
    m = bits2int(h1)

    drbg = HmacDrbg()
    drbg.reseed(b"".join(seed_parts))
    result = _kmd_to_sig(drbg.generate(), m, d, canonical)
    while result is None:
        logger.debug("RFC6979 candidate %d rejected, reseeding", drbg.counter)
        drbg.reseed()
        result = _kmd_to_sig(drbg.generate(), m, d, canonical)

    sig, recovery = result
    encoded = sig.to_der() if der else sig.to_compact()
    if recovered:
        return encoded, recovery
    return encoded


# ── verification ────────────────────────────────────────────────────────

def verify(
    signature: SignatureLike,
    msg_hash: BytesLike,
    public_key: PublicKey,
    *,
    strict: bool = True,
) -> bool:
    """
    Check an ECDSA signature; never raises on malformed input.

    With *strict* (default) high-s signatures are rejected.
    """
    try:
        sig = normalize_signature(signature)
        h_bytes = ensure_bytes(msg_hash)
    except KoblitzError:
        return False
    r, s = sig.r, sig.s
    if strict and sig.has_high_s():
        return False
    h = truncate_hash(h_bytes)
    try:
        Q = normalize_public_key(public_key)
    except KoblitzError:
        return False
    sinv = invert(s, ORDER)
    u1 = mod(h * sinv, ORDER)
    u2 = mod(r * sinv, ORDER)
    R = Point.BASE.multiply_and_add_unsafe(Q, u1, u2)
    if R is None:
        return False
    return mod(R.x, ORDER) == r


# ── public-key recovery ─────────────────────────────────────────────────

def point_from_signature(
    msg_hash: BytesLike,
    signature: SignatureLike,
    recovery: int,
) -> Point:
    """Rebuild the signer's public key point from ``(r, s)`` and the recovery id."""
    h = truncate_hash(ensure_bytes(msg_hash))
    sig = normalize_signature(signature)
    r, s = sig.r, sig.s
    if isinstance(recovery, bool) or recovery not in (0, 1, 2, 3):
        raise InvalidSignatureValue(f"cannot recover signature: invalid recovery id {recovery!r}")
    x = r + ORDER if recovery & 2 else r
    if x >= FIELD_PRIME:
        raise InvalidSignatureValue("cannot recover signature: r + n exceeds field")
    prefix = b"\x03" if recovery & 1 else b"\x02"
    R = Point.from_bytes(prefix + number_to_bytes32(x))
    rinv = invert(r, ORDER)
    u1 = mod(-h * rinv, ORDER)
    u2 = mod(s * rinv, ORDER)
    Q = Point.BASE.multiply_and_add_unsafe(R, u1, u2)
    if Q is None:
        raise InvalidPoint("cannot recover signature: point at infinity")
    Q.assert_validity()
    return Q


def recover_public_key(
    msg_hash: BytesLike,
    signature: SignatureLike,
    recovery: int,
    compressed: bool = False,
) -> bytes:
    return point_from_signature(msg_hash, signature, recovery).to_bytes(compressed)
