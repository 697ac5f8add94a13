"""
BIP-340 Schnorr signatures over secp256k1.

Public keys and nonce points are x-only: whenever  d·G  or  k·G  has an
odd y-coordinate the scalar is negated, so the committed point always
has even y and 32 bytes identify it.

**Signing:**

    t  = d ⊕ H_aux(a)
    k₀ = H_nonce(t ‖ P.x ‖ m) mod n            (k₀ ≠ 0)
    R  = k·G  with even y
    e  = H_challenge(R.x ‖ P.x ‖ m) mod n
    σ  = (R.x,  k + e·d mod n)

**Verification:**  ``R' = s·G − e·P``;  accept iff  R' ≠ O,  R'.y is
even and  R'.x = r.

References
----------
- Wuille, Nick, Ruffing (2020).  BIP-340 "Schnorr Signatures for
  secp256k1".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .codec import BytesLike, bytes_to_number, ensure_bytes, number_to_bytes32
from .curve import ORDER, is_valid_field_element, is_within_curve_order
from .errors import (
    InvalidNonce,
    InvalidSignatureEncoding,
    InvalidSignatureValue,
    KoblitzError,
    SelfVerificationError,
)
from .field import mod
from .hash import TAG_AUX, TAG_CHALLENGE, TAG_NONCE, random_bytes, tagged_hash
from .keys import PublicKey, normalize_public_key
from .point import Point
from .scalar import PrivateKey, check_scalar, negate_scalar, normalize_private_key

logger = logging.getLogger("koblitz.schnorr")


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SchnorrSignature:
    """BIP-340 signature  (r, s)  with  0 < r < P,  0 < s < n."""

    r: int
    s: int

    def __post_init__(self) -> None:
        self.assert_validity()

    def assert_validity(self) -> None:
        if not is_valid_field_element(self.r) or not is_within_curve_order(self.s):
            raise InvalidSignatureValue("invalid schnorr signature: r or s out of range")

    @classmethod
    def from_bytes(cls, data: BytesLike) -> SchnorrSignature:
        raw = ensure_bytes(data)
        if len(raw) != 64:
            raise InvalidSignatureEncoding(
                f"schnorr signature must be 64 bytes, got {len(raw)}"
            )
        return cls(bytes_to_number(raw[:32]), bytes_to_number(raw[32:]))

    from_hex = from_bytes

    def to_bytes(self) -> bytes:
        return number_to_bytes32(self.r) + number_to_bytes32(self.s)

    def to_hex(self) -> str:
        return self.to_bytes().hex()


# ── helpers ─────────────────────────────────────────────────────────────

def _challenge(rx: bytes, px: bytes, message: bytes) -> int:
    return mod(bytes_to_number(tagged_hash(TAG_CHALLENGE, rx, px, message)), ORDER)


def _even_y_scalar(k: int) -> Tuple[Point, int]:
    """Return ``(k·G, k')`` where ``k'·G`` is ``k·G`` with even y."""
    point = Point.BASE.multiply(k)
    return point, (k if point.has_even_y() else negate_scalar(k))


# ── public API ──────────────────────────────────────────────────────────

def schnorr_get_public_key(private_key: PrivateKey) -> bytes:
    """32-byte x-only public key."""
    return Point.from_private_key(private_key).to_raw_x()


def schnorr_sign(
    message: BytesLike,
    private_key: PrivateKey,
    aux_rand: Optional[BytesLike] = None,
) -> bytes:
    """
    Produce a 64-byte BIP-340 signature.

    *aux_rand* (32 bytes) defaults to fresh randomness; passing it makes
    the signature deterministic.  The result is verified before it is
    returned; a failure there raises ``SelfVerificationError``.
    """
    m = ensure_bytes(message)
    d0 = normalize_private_key(private_key)
    rand = ensure_bytes(random_bytes(32) if aux_rand is None else aux_rand, 32)

    P, d = _even_y_scalar(d0)
    px = P.to_raw_x()

    t = number_to_bytes32(d ^ bytes_to_number(tagged_hash(TAG_AUX, rand)))
    k0 = mod(bytes_to_number(tagged_hash(TAG_NONCE, t, px, m)), ORDER)
    if k0 == 0:
        raise InvalidNonce("sign: creation of signature failed, k is zero")

    R, k = _even_y_scalar(k0)
    rx = R.to_raw_x()
    e = _challenge(rx, px, m)
    sig = SchnorrSignature(R.x, mod(k + e * d, ORDER)).to_bytes()

    if not schnorr_verify(sig, m, px):
        logger.error("freshly produced schnorr signature failed self-verification")
        raise SelfVerificationError("sign: invalid signature produced")
    return sig


def schnorr_verify(
    signature: Union[SchnorrSignature, BytesLike],
    message: BytesLike,
    public_key: PublicKey,
) -> bool:
    """
    Check a BIP-340 signature; malformed input yields ``False``.

    Failures of the hash provider itself are not caught.
    """
    try:
        if isinstance(signature, SchnorrSignature):
            signature.assert_validity()
            sig = signature
        else:
            sig = SchnorrSignature.from_bytes(signature)
        m = ensure_bytes(message)
        P = normalize_public_key(public_key)
        # SEC 1 keys are reduced to the even-y lift of their x
        if not P.has_even_y():
            P = P.negate()
        e = _challenge(number_to_bytes32(sig.r), P.to_raw_x(), m)
        R = Point.BASE.multiply_and_add_unsafe(
            P, check_scalar(sig.s), mod(-e, ORDER)
        )
    except KoblitzError:
        return False
    if R is None or not R.has_even_y() or R.x != sig.r:
        return False
    return True
