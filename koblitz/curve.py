"""
secp256k1 domain parameters.

    y² = x³ + 7   over  F_P

References
----------
- SEC 2 v2 §2.4.1  secp256k1 domain parameters
- Gallant, Lambert, Vanstone (2001).  "Faster Point Multiplication on
  Elliptic Curves with Efficient Endomorphisms."  CRYPTO 2001.
"""

from __future__ import annotations

# ── secp256k1 constants ─────────────────────────────────────────────────
A = 0
B = 7
FIELD_PRIME = 2**256 - 2**32 - 977
ORDER = 2**256 - 432420386565659656852420866394968145599
COFACTOR = 1
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

# cube root of unity in F_P:  (β·x, y) = λ·(x, y)
BETA = 0x7AE96A2B657C07106E64479EAC3434E99CF0497512F58995C1396C28719501EE

P = FIELD_PRIME
N = ORDER
HALF_ORDER = ORDER >> 1

FIELD_BYTES = 32
SCALAR_BYTES = 32
COMPRESSED_BYTES = 33
UNCOMPRESSED_BYTES = 65


def weierstrass(x: int) -> int:
    """Right-hand side of the curve equation, ``x³ + 7 mod P``."""
    return (x * x * x + B) % P


def is_valid_field_element(num: int) -> bool:
    return 0 < num < P


def is_within_curve_order(num: int) -> bool:
    return 0 < num < N
