"""
GLV endomorphism decomposition for secp256k1.

secp256k1 admits the efficiently computable automorphism

    φ(x, y) = (β·x, y) = λ·(x, y)

so any scalar *k* can be written as  k ≡ k₁ + k₂·λ (mod n)  with both
halves around 128 bits.  Scalar multiplication then runs two half-length
ladders and recombines them, roughly halving the doubling work.

The lattice basis below is the one published in libsecp256k1.
"""

from __future__ import annotations

from typing import Tuple

from .curve import ORDER
from .errors import EndomorphismError
from .field import div_nearest, mod

LAMBDA = 0x5363AD4CC05C30E0A5261C028812645A122E22EA20816678DF02967C1B23BD72

# ── lattice basis ───────────────────────────────────────────────────────
A1 = 0x3086D221A7D46BCDE86C90E49284EB15
B1 = -0xE4437ED6010E88286F547FA90ABFE4C3
A2 = 0x114CA50F7A8E2F3F657C1108D9D44CFD8
B2 = A1

POW_2_128 = 2**128


def split_scalar_endo(k: int) -> Tuple[bool, int, bool, int]:
    """
    Decompose *k* into ``(k1neg, k1, k2neg, k2)`` such that

        k ≡ (-1)^k1neg · k1  +  (-1)^k2neg · k2 · λ   (mod n)

    with ``k1, k2 ≤ 2^128``.

    Raises ``EndomorphismError`` if a half is still too wide; that only
    happens on an arithmetic defect, never for ``0 < k < n``.
    """
    n = ORDER
    c1 = div_nearest(B2 * k, n)
    c2 = div_nearest(-B1 * k, n)
    k1 = mod(k - c1 * A1 - c2 * A2, n)
    k2 = mod(-c1 * B1 - c2 * B2, n)
    k1neg = k1 > POW_2_128
    k2neg = k2 > POW_2_128
    if k1neg:
        k1 = n - k1
    if k2neg:
        k2 = n - k2
    if k1 > POW_2_128 or k2 > POW_2_128:
        raise EndomorphismError(f"split_scalar_endo: endomorphism failed, k={k}")
    return k1neg, k1, k2neg, k2
