"""
Group law on secp256k1 in affine and Jacobian coordinates.

``JacobianPoint`` carries all arithmetic: a Jacobian triple  (X, Y, Z)
represents the affine point  (X/Z², Y/Z³), so additions and doublings
need no field inversion.  ``Point`` is the immutable affine value used
for keys, encoding and validation.

Scalar multiplication
---------------------
``JacobianPoint.multiply`` splits the scalar with the GLV endomorphism
and runs a width-W windowed NAF over each half.  Every window performs
exactly one point addition: into the real accumulator when the digit is
non-zero, into a second "fake" accumulator otherwise.  This evens out
the work per window; it is **not** a verified constant-time
implementation and offers no guarantee against timing side channels.

``JacobianPoint.multiply_unsafe`` is plain double-and-add and must only
be used with public scalars (verification, recovery).

References
----------
- Explicit-Formulas Database, "Jacobian coordinates with a4=0"
  (add-1998-cmo-2, dbl-2009-l).
- Hankerson, Menezes, Vanstone (2004).  "Guide to Elliptic Curve
  Cryptography", §3.3 (wNAF).
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .codec import BytesLike, bytes_to_number, ensure_bytes, number_to_bytes32
from .config import get_config
from .curve import (
    BETA,
    COMPRESSED_BYTES,
    FIELD_BYTES,
    GX,
    GY,
    P,
    UNCOMPRESSED_BYTES,
    is_valid_field_element,
    weierstrass,
)
from .endomorphism import split_scalar_endo
from .errors import DomainError, InvalidPoint, UnsupportedKeyType
from .field import invert, invert_batch, mod, sqrt_mod
from .precompute import PRECOMPUTES
from .scalar import PrivateKey, check_scalar, normalize_private_key


def _const_time_negate(condition: bool, item: JacobianPoint) -> JacobianPoint:
    neg = item.negate()
    return neg if condition else item


def _check_public_scalar(num: int) -> int:
    """Like ``check_scalar`` but also admits zero."""
    if isinstance(num, int) and not isinstance(num, bool) and num == 0:
        return 0
    return check_scalar(num)


# ── Jacobian point ──────────────────────────────────────────────────────
class JacobianPoint:
    """Projective point  (X, Y, Z) ↦ (X/Z², Y/Z³);  identity is  (0, 1, 0)."""

    __slots__ = ("x", "y", "z")

    BASE: JacobianPoint
    ZERO: JacobianPoint

    def __init__(self, x: int, y: int, z: int) -> None:
        self.x = x
        self.y = y
        self.z = z

    # constructors -----------------------------------------------------------
    @classmethod
    def from_affine(cls, p: Point) -> JacobianPoint:
        if not isinstance(p, Point):
            raise TypeError("JacobianPoint.from_affine: expected Point")
        if p == Point.ZERO:
            return cls.ZERO
        return cls(p.x, p.y, 1)

    @staticmethod
    def to_affine_batch(points: List[JacobianPoint]) -> List[Point]:
        """Convert many points with one shared field inversion."""
        inv_zs = invert_batch([p.z for p in points])
        return [p.to_affine(inv_z) for p, inv_z in zip(points, inv_zs)]

    @classmethod
    def normalize_z(cls, points: List[JacobianPoint]) -> List[JacobianPoint]:
        """Rewrite every point with ``Z = 1`` (identities stay identities)."""
        return [cls.from_affine(p) for p in cls.to_affine_batch(points)]

    # predicates -------------------------------------------------------------
    def is_zero(self) -> bool:
        return self.z == 0

    def equals(self, other: JacobianPoint) -> bool:
        """Cross-multiplied comparison; no inversion needed."""
        if not isinstance(other, JacobianPoint):
            raise TypeError("JacobianPoint expected")
        X1, Y1, Z1 = self.x, self.y, self.z
        X2, Y2, Z2 = other.x, other.y, other.z
        Z1Z1 = Z1 * Z1 % P
        Z2Z2 = Z2 * Z2 % P
        U1 = X1 * Z2Z2 % P
        U2 = X2 * Z1Z1 % P
        S1 = Y1 * Z2 * Z2Z2 % P
        S2 = Y2 * Z1 * Z1Z1 % P
        return U1 == U2 and S1 == S2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JacobianPoint):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JacobianPoint(0x{self.x:x}, 0x{self.y:x}, 0x{self.z:x})"

    # group law --------------------------------------------------------------
    def negate(self) -> JacobianPoint:
        return JacobianPoint(self.x, mod(-self.y), self.z)

    def double(self) -> JacobianPoint:
        """
        dbl-2009-l for a = 0.
        Cost: 2M + 5S + 6add + 3*2 + 1*3 + 1*8.
        """
        X1, Y1, Z1 = self.x, self.y, self.z
        A = X1 * X1 % P
        B = Y1 * Y1 % P
        C = B * B % P
        D = 2 * ((X1 + B) * (X1 + B) - A - C) % P
        E = 3 * A % P
        F = E * E % P
        X3 = (F - 2 * D) % P
        Y3 = (E * (D - X3) - 8 * C) % P
        Z3 = 2 * Y1 * Z1 % P
        return JacobianPoint(X3, Y3, Z3)

    def add(self, other: JacobianPoint) -> JacobianPoint:
        """
        add-1998-cmo-2 for a = 0.
        Cost: 12M + 4S + 6add + 1*2.

        The identity is recognised by ``Z = 0``.
        """
        if not isinstance(other, JacobianPoint):
            raise TypeError("JacobianPoint expected")
        X1, Y1, Z1 = self.x, self.y, self.z
        X2, Y2, Z2 = other.x, other.y, other.z
        if Z2 == 0:
            return self
        if Z1 == 0:
            return other
        Z1Z1 = Z1 * Z1 % P
        Z2Z2 = Z2 * Z2 % P
        U1 = X1 * Z2Z2 % P
        U2 = X2 * Z1Z1 % P
        S1 = Y1 * Z2 * Z2Z2 % P
        S2 = Y2 * Z1 * Z1Z1 % P
        H = (U2 - U1) % P
        r = (S2 - S1) % P
        # same x: either the same point or inverses
        if H == 0:
            if r == 0:
                return self.double()
            return JacobianPoint.ZERO
        HH = H * H % P
        HHH = H * HH % P
        V = U1 * HH % P
        X3 = (r * r - HHH - 2 * V) % P
        Y3 = (r * (V - X3) - S1 * HHH) % P
        Z3 = Z1 * Z2 * H % P
        return JacobianPoint(X3, Y3, Z3)

    def subtract(self, other: JacobianPoint) -> JacobianPoint:
        return self.add(other.negate())

    __neg__ = negate
    __add__ = add
    __sub__ = subtract

    # scalar multiplication --------------------------------------------------
    def multiply_unsafe(self, scalar: int) -> JacobianPoint:
        """
        Double-and-add over both endomorphism halves.

        Work depends on the bits of *scalar*: use for public scalars only.
        Accepts ``0 <= scalar < n``.
        """
        n = _check_public_scalar(scalar)
        P0 = JacobianPoint.ZERO
        if n == 0:
            return P0
        if n == 1:
            return self
        k1neg, k1, k2neg, k2 = split_scalar_endo(n)
        k1p = P0
        k2p = P0
        d = self
        while k1 > 0 or k2 > 0:
            if k1 & 1:
                k1p = k1p.add(d)
            if k2 & 1:
                k2p = k2p.add(d)
            d = d.double()
            k1 >>= 1
            k2 >>= 1
        if k1neg:
            k1p = k1p.negate()
        if k2neg:
            k2p = k2p.negate()
        k2p = JacobianPoint(mod(k2p.x * BETA), k2p.y, k2p.z)
        return k1p.add(k2p)

    def precompute_window(self, W: int) -> List[JacobianPoint]:
        """
        Build the wNAF table for window width *W*.

        For each of the ``128/W + 1`` windows the table holds the
        multiples ``1·B, 2·B, …, 2^(W-1)·B`` of that window's base *B*;
        the next window starts at ``2^W·B``.
        """
        windows = 128 // W + 1
        points: List[JacobianPoint] = []
        p = self
        for _ in range(windows):
            base = p
            points.append(base)
            for _ in range(1, 2 ** (W - 1)):
                base = base.add(p)
                points.append(base)
            p = base.double()
        return points

    def wnaf(
        self,
        n: int,
        affine_point: Optional[Point] = None,
    ) -> Tuple[JacobianPoint, JacobianPoint]:
        """
        Windowed-NAF multiplication of a (≤129-bit) half scalar.

        Returns ``(p, f)``: *p* is ``n·self``; *f* absorbs an addition for
        every zero window so that each window costs one addition.  The
        caller must compute with *f* as well, not just discard it.
        """
        if affine_point is None and self.equals(JacobianPoint.BASE):
            affine_point = Point.BASE
        W = PRECOMPUTES.window_size(affine_point) if affine_point is not None else 1
        if 256 % W:
            raise ValueError("wnaf: invalid precomputation window, must divide 256")

        precomputes = PRECOMPUTES.get(affine_point) if affine_point is not None else None
        if precomputes is None:
            precomputes = self.precompute_window(W)
            if affine_point is not None and W != 1:
                precomputes = JacobianPoint.normalize_z(precomputes)
                PRECOMPUTES.store(affine_point, precomputes)

        p = JacobianPoint.ZERO
        f = JacobianPoint.BASE
        windows = 1 + 128 // W
        window_size = 2 ** (W - 1)
        mask = 2**W - 1
        max_number = 2**W

        for window in range(windows):
            offset = window * window_size
            wbits = n & mask
            n >>= W
            # recentre into [-2^(W-1), 2^(W-1)], borrowing from the next window
            if wbits > window_size:
                wbits -= max_number
                n += 1
            if wbits == 0:
                f = f.add(_const_time_negate(window % 2 != 0, precomputes[offset]))
            else:
                cached = precomputes[offset + abs(wbits) - 1]
                p = p.add(_const_time_negate(wbits < 0, cached))
        return p, f

    def multiply(
        self,
        scalar: int,
        affine_point: Optional[Point] = None,
    ) -> JacobianPoint:
        """
        ``scalar · self`` for secret scalars, ``0 < scalar < n``.

        *affine_point* is the affine twin of ``self`` whose cached table
        should be used; ``Point.BASE`` is picked automatically.
        """
        n = check_scalar(scalar)
        k1neg, k1, k2neg, k2 = split_scalar_endo(n)
        k1p, f1p = self.wnaf(k1, affine_point)
        k2p, f2p = self.wnaf(k2, affine_point)
        k1p = _const_time_negate(k1neg, k1p)
        k2p = _const_time_negate(k2neg, k2p)
        k2p = JacobianPoint(mod(k2p.x * BETA), k2p.y, k2p.z)
        point = k1p.add(k2p)
        fake = f1p.add(f2p)
        return JacobianPoint.normalize_z([point, fake])[0]

    # conversion -------------------------------------------------------------
    def to_affine(self, inv_z: Optional[int] = None) -> Point:
        is_zero = self.z == 0
        if inv_z is None:
            inv_z = 8 if is_zero else invert(self.z)
        iz2 = inv_z * inv_z % P
        iz3 = iz2 * inv_z % P
        ax = self.x * iz2 % P
        ay = self.y * iz3 % P
        zz = self.z * inv_z % P
        if is_zero:
            return Point.ZERO
        if zz != 1:
            raise DomainError("to_affine: supplied inverse of Z is invalid")
        return Point(ax, ay)


# ── affine point ────────────────────────────────────────────────────────
class Point:
    """
    Affine point on secp256k1.

    ``Point.ZERO`` = (0, 0) is a sentinel for the identity; it does not
    satisfy the curve equation and is never accepted as a key.
    """

    __slots__ = ("_x", "_y")

    BASE: Point
    ZERO: Point

    def __init__(self, x: int, y: int) -> None:
        self._x = x
        self._y = y

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    # constructors -----------------------------------------------------------
    @classmethod
    def _from_compressed(cls, data: bytes) -> Point:
        is_short = len(data) == FIELD_BYTES
        x = bytes_to_number(data if is_short else data[1:])
        if not is_valid_field_element(x):
            raise InvalidPoint("point is not on curve")
        y = sqrt_mod(weierstrass(x))
        is_y_odd = (y & 1) == 1
        if is_short:
            # x-only keys always carry the even root
            if is_y_odd:
                y = mod(-y)
        else:
            is_first_byte_odd = (data[0] & 1) == 1
            if is_first_byte_odd != is_y_odd:
                y = mod(-y)
        point = cls(x, y)
        point.assert_validity()
        return point

    @classmethod
    def _from_uncompressed(cls, data: bytes) -> Point:
        x = bytes_to_number(data[1:FIELD_BYTES + 1])
        y = bytes_to_number(data[FIELD_BYTES + 1:])
        point = cls(x, y)
        point.assert_validity()
        return point

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        """Decode x-only (32 B), SEC 1 compressed (33 B) or uncompressed (65 B)."""
        data = bytes(data)
        length = len(data)
        header = data[0] if data else None
        if length == FIELD_BYTES:
            return cls._from_compressed(data)
        if length == COMPRESSED_BYTES and header in (0x02, 0x03):
            return cls._from_compressed(data)
        if length == UNCOMPRESSED_BYTES and header == 0x04:
            return cls._from_uncompressed(data)
        raise InvalidPoint(
            f"invalid point encoding: expected {FIELD_BYTES}, {COMPRESSED_BYTES} "
            f"or {UNCOMPRESSED_BYTES} bytes with a matching prefix, got {length}"
        )

    @classmethod
    def from_hex(cls, value: BytesLike) -> Point:
        try:
            data = ensure_bytes(value)
        except UnsupportedKeyType as exc:
            raise InvalidPoint(str(exc)) from exc
        return cls.from_bytes(data)

    @classmethod
    def from_private_key(cls, private_key: PrivateKey) -> Point:
        """``d · G`` for a private key in any accepted encoding."""
        return cls.BASE.multiply(normalize_private_key(private_key))

    # validation -------------------------------------------------------------
    def assert_validity(self) -> None:
        """Raise ``InvalidPoint`` unless ``0 < x, y < P`` and ``y² = x³ + 7``."""
        x, y = self.x, self.y
        if not is_valid_field_element(x) or not is_valid_field_element(y):
            raise InvalidPoint("point is not on elliptic curve")
        left = y * y % P
        right = weierstrass(x)
        if (left - right) % P != 0:
            raise InvalidPoint("point is not on elliptic curve")

    def has_even_y(self) -> bool:
        return self.y % 2 == 0

    # precomputation ---------------------------------------------------------
    def set_window_size(self, window: int) -> None:
        """Use width-*window* wNAF tables for this exact object."""
        PRECOMPUTES.set_window_size(self, window)

    # serialisation ----------------------------------------------------------
    def to_bytes(self, compressed: bool = False) -> bytes:
        x = number_to_bytes32(self.x)
        if compressed:
            return (b"\x03" if self.y & 1 else b"\x02") + x
        return b"\x04" + x + number_to_bytes32(self.y)

    def to_hex(self, compressed: bool = False) -> str:
        return self.to_bytes(compressed).hex()

    def to_raw_x(self) -> bytes:
        """32-byte x-only encoding (BIP-340)."""
        return number_to_bytes32(self.x)

    def to_hex_x(self) -> str:
        return self.to_raw_x().hex()

    # group operations -------------------------------------------------------
    def negate(self) -> Point:
        return Point(self.x, mod(-self.y))

    def add(self, other: Point) -> Point:
        return JacobianPoint.from_affine(self).add(JacobianPoint.from_affine(other)).to_affine()

    def subtract(self, other: Point) -> Point:
        return self.add(other.negate())

    def multiply(self, scalar: int) -> Point:
        """``scalar · self`` using this point's own precompute table."""
        return JacobianPoint.from_affine(self).multiply(scalar, self).to_affine()

    def multiply_and_add_unsafe(self, Q: Point, a: int, b: int) -> Optional[Point]:
        """
        ``a·self + b·Q`` for public scalars; ``None`` if the sum is the identity.

        The generator keeps its precomputed table when ``a > 1``.
        """
        P_ = JacobianPoint.from_affine(self)
        if a == 0 or a == 1 or self is not Point.BASE:
            aP = P_.multiply_unsafe(a)
        else:
            aP = P_.multiply(a)
        bQ = JacobianPoint.from_affine(Q).multiply_unsafe(b)
        total = aP.add(bQ)
        if total.is_zero():
            return None
        return total.to_affine()

    __neg__ = negate
    __add__ = add
    __sub__ = subtract

    def __mul__(self, scalar: int) -> Point:
        if isinstance(scalar, bool) or not isinstance(scalar, int):
            return NotImplemented
        return self.multiply(scalar)

    __rmul__ = __mul__

    # comparison / hashing ---------------------------------------------------
    def equals(self, other: Point) -> bool:
        return self.x == other.x and self.y == other.y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        if self.x == 0 and self.y == 0:
            return "Point(ZERO)"
        return f"Point(0x{self.x:064x}, 0x{self.y:064x})"


# ── module-level constants ──────────────────────────────────────────────
Point.BASE = Point(GX, GY)
Point.ZERO = Point(0, 0)
JacobianPoint.BASE = JacobianPoint(GX, GY, 1)
JacobianPoint.ZERO = JacobianPoint(0, 1, 0)

G = Point.BASE

# the generator's table is built lazily on first use
Point.BASE.set_window_size(get_config().base_window)
