"""
Modular arithmetic over F_P and Z_n  (P = field prime, n = group order).

All values are plain Python ``int``; every helper returns a canonical
representative in ``[0, m)``.
"""

from __future__ import annotations

from typing import List, Sequence

from .curve import P
from .errors import DomainError


def mod(a: int, m: int = P) -> int:
    """Euclidean remainder in ``[0, m)``."""
    return a % m


def pow2(x: int, power: int) -> int:
    """``x^(2^power) mod P`` by repeated squaring."""
    res = x
    for _ in range(power):
        res = res * res % P
    return res


def div_nearest(a: int, b: int) -> int:
    """Round ``a / b`` to the nearest integer (``b > 0``)."""
    return (a + b // 2) // b


# ── inversion ───────────────────────────────────────────────────────────
def invert(number: int, modulo: int = P) -> int:
    """
    Multiplicative inverse via the extended Euclidean algorithm.

    Raises ``DomainError`` for a zero input, a non-positive modulus, or
    when ``gcd(number, modulo) != 1``.
    """
    if number == 0 or modulo <= 0:
        raise DomainError(
            f"invert: expected positive integers, got n={number} mod={modulo}"
        )
    a = mod(number, modulo)
    b = modulo
    x, y, u, v = 0, 1, 1, 0
    while a != 0:
        q, r = divmod(b, a)
        m, n = x - u * q, y - v * q
        b, a, x, y, u, v = a, r, u, v, m, n
    if b != 1:
        raise DomainError("invert: does not exist")
    return mod(x, modulo)


# ── batch inverse (Montgomery's trick) ──────────────────────────────────
def invert_batch(nums: Sequence[int], modulo: int = P) -> List[int]:
    """
    Invert every element of *nums* with a single modular inversion.

    Cost: 1 inversion + 3(n-1) multiplications.  Zero entries are passed
    through as zero, so Jacobian identities (``z = 0``) can be mixed in.
    """
    scratch = [0] * len(nums)

    # forward pass: scratch[i] = product of the non-zero entries before i
    acc = 1
    for i, num in enumerate(nums):
        if num == 0:
            continue
        scratch[i] = acc
        acc = acc * num % modulo

    acc = invert(acc, modulo)

    # backward pass
    for i in range(len(nums) - 1, -1, -1):
        num = nums[i]
        if num == 0:
            continue
        scratch[i] = acc * scratch[i] % modulo
        acc = acc * num % modulo
    return scratch


# ── square root ─────────────────────────────────────────────────────────
def sqrt_mod(x: int) -> int:
    r"""
    Candidate square root  ``x^((P+1)/4) mod P``  (valid since P ≡ 3 mod 4).

    The exponent has three blocks of 1s of lengths {2, 22, 223}; the
    addition chain below builds ``x^(2^k - 1)`` for the needed *k*.

    The result is **not** checked: when *x* is a non-residue it is the
    root of ``-x``.  Callers must validate the resulting point.
    """
    b2 = x * x * x % P           # x^(2^2 - 1)
    b3 = b2 * b2 * x % P         # x^(2^3 - 1)
    b6 = pow2(b3, 3) * b3 % P
    b9 = pow2(b6, 3) * b3 % P
    b11 = pow2(b9, 2) * b2 % P
    b22 = pow2(b11, 11) * b11 % P
    b44 = pow2(b22, 22) * b22 % P
    b88 = pow2(b44, 44) * b44 % P
    b176 = pow2(b88, 88) * b88 % P
    b220 = pow2(b176, 44) * b44 % P
    b223 = pow2(b220, 3) * b3 % P
    t1 = pow2(b223, 23) * b22 % P
    t2 = pow2(t1, 6) * b2 % P
    return pow2(t2, 2)
