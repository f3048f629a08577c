"""Short Weierstrass curves y^2 = x^3 + A*x + B over GF(p).

CurveParams carries the curve constants, the base field, and the point format
selected for the curve's native point type (see primitives.affine).

Two families of group-law helpers live here:
- Jacobian arithmetic (x = X/Z^2, y = Y/Z^3) which never inverts; pass 1 of
  the divisor engine uses it to compute partial sums and operands.
- Affine arithmetic which inverts once per operation; only the reference
  implementation in ecip.naive uses it.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

import galois

from primitives.errors import Undefined
from primitives.field import FieldClass, SECP256K1_PRIME, prime_field

# --- Type Aliases ---

Point = Tuple[galois.FieldArray, galois.FieldArray]
AffinePoint = Optional[Point]
JacPoint = Tuple[galois.FieldArray, galois.FieldArray, galois.FieldArray]

INF: AffinePoint = None
"""Infinity point in affine coordinates."""


@dataclass(frozen=True)
class CurveParams:
    """Curve y^2 = x^3 + a*x + b over field, with its point format.

    Attributes:
        field: galois GF(p) class
        a: Curve constant A, in 0..p-1
        b: Curve constant B, in 0..p-1
        name: Label used in reprs and log lines
        point_format: Coordinate capability for this curve's points
    """
    field: FieldClass
    a: int
    b: int
    name: str = "curve"
    point_format: Optional[Any] = None

    def __post_init__(self) -> None:
        p = self.field.characteristic
        if not 0 <= self.a < p:
            raise ValueError(f"a not in 0..p-1: {self.a}")
        if not 0 <= self.b < p:
            raise ValueError(f"b not in 0..p-1: {self.b}")
        if (4 * self.a**3 + 27 * self.b**2) % p == 0:
            raise ValueError("zero discriminant")

    def __repr__(self) -> str:
        return f"CurveParams({self.name}, p={self.field.characteristic}, a={self.a}, b={self.b})"

    def with_format(self, point_format: Any) -> "CurveParams":
        """Same curve, different point format."""
        return replace(self, point_format=point_format)

    @property
    def A(self) -> galois.FieldArray:
        return self.field(self.a)

    @property
    def B(self) -> galois.FieldArray:
        return self.field(self.b)

    # --- Curve Relation ---

    def relation(self, x: galois.FieldArray) -> galois.FieldArray:
        """x^3 + A*x + B, for a scalar or a whole evaluation vector."""
        return (x * x + self.A) * x + self.B

    def is_on_curve(self, P: AffinePoint) -> bool:
        if P is INF:
            return True
        x, y = P
        return bool(y * y == self.relation(x))

    def is_on_curve_jac(self, Q: JacPoint) -> bool:
        """Y^2 = X^3 + A*X*Z^4 + B*Z^6, checked without inversion."""
        X, Y, Z = Q
        if Z == 0:
            return True
        Z2 = Z * Z
        Z4 = Z2 * Z2
        return bool(Y * Y == X * X * X + self.A * X * Z4 + self.B * Z4 * Z2)

    # --- Jacobian Arithmetic (inversion-free) ---

    def infinity_jac(self) -> JacPoint:
        F = self.field
        return F(1), F(1), F(0)

    def jac_from_aff(self, P: AffinePoint) -> JacPoint:
        if P is INF:
            return self.infinity_jac()
        return P[0], P[1], self.field(1)

    def negate_jac(self, Q: JacPoint) -> JacPoint:
        return Q[0], -Q[1], Q[2]

    def double_jac(self, Q: JacPoint) -> JacPoint:
        # point is assumed to be on curve
        F = self.field
        if Q[2] == 0 or Q[1] == 0:
            return self.infinity_jac()

        QZ2 = Q[2] * Q[2]
        QY2 = Q[1] * Q[1]
        W = F(3) * Q[0] * Q[0] + self.A * QZ2 * QZ2
        V = F(4) * Q[0] * QY2
        X = W * W - F(2) * V
        Y = W * (V - X) - F(8) * QY2 * QY2
        Z = F(2) * Q[1] * Q[2]
        return X, Y, Z

    def add_jac(self, Q: JacPoint, R: JacPoint) -> JacPoint:
        # points are assumed to be on curve
        if Q[2] == 0:
            return R
        if R[2] == 0:
            return Q

        RZ2 = R[2] * R[2]
        RZ3 = RZ2 * R[2]
        QZ2 = Q[2] * Q[2]
        QZ3 = QZ2 * Q[2]

        M = Q[0] * RZ2
        N = R[0] * QZ2
        T = Q[1] * RZ3
        U = R[1] * QZ3

        if M == N:  # same affine x
            if T == U:
                return self.double_jac(Q)
            # opposite points
            return self.infinity_jac()

        W = U - T
        V = N - M

        V2 = V * V
        V3 = V2 * V
        MV2 = M * V2

        X = W * W - V3 - self.field(2) * MV2
        Y = W * (MV2 - X) - T * V3
        Z = V * Q[2] * R[2]
        return X, Y, Z

    def mult_jac(self, m: int, Q: JacPoint) -> JacPoint:
        """Scalar multiplication, 'double & add', right-to-left."""
        if m < 0:
            raise ValueError(f"negative m: {m}")

        R = self.infinity_jac()
        while m > 0:
            if m & 1:
                R = self.add_jac(R, Q)
            Q = self.double_jac(Q)
            m >>= 1
        return R

    # --- Affine Arithmetic (one inversion per operation) ---

    def aff_from_jac(self, Q: JacPoint) -> AffinePoint:
        if Q[2] == 0:
            return INF
        Zinv = inverse(Q[2])
        Zinv2 = Zinv * Zinv
        return Q[0] * Zinv2, Q[1] * Zinv2 * Zinv

    def negate(self, P: AffinePoint) -> AffinePoint:
        if P is INF:
            return INF
        return P[0], -P[1]

    def add_aff(self, P: AffinePoint, Q: AffinePoint) -> AffinePoint:
        # points are assumed to be on curve
        if P is INF:
            return Q
        if Q is INF:
            return P

        if P[0] == Q[0]:
            if P[1] == Q[1] and P[1] != 0:
                return self.double_aff(P)
            # opposite points
            return INF

        lam = (Q[1] - P[1]) * inverse(Q[0] - P[0])
        x = lam * lam - P[0] - Q[0]
        y = lam * (P[0] - x) - P[1]
        return x, y

    def double_aff(self, P: AffinePoint) -> AffinePoint:
        # point is assumed to be on curve
        if P is INF or P[1] == 0:
            return INF

        F = self.field
        lam = (F(3) * P[0] * P[0] + self.A) * inverse(F(2) * P[1])
        x = lam * lam - P[0] - P[0]
        y = lam * (P[0] - x) - P[1]
        return x, y


def inverse(value: galois.FieldArray) -> galois.FieldArray:
    """Single field inversion, raising Undefined on zero."""
    if value == 0:
        raise Undefined("Cannot invert zero field element")
    return value ** -1


# --- Named Curves ---

SECP256K1_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
SECP256K1_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8


def secp256k1(point_format: Optional[Any] = None) -> CurveParams:
    """secp256k1: y^2 = x^3 + 7 over its 256-bit base field."""
    return CurveParams(prime_field(SECP256K1_PRIME), 0, 7, "secp256k1", point_format)


def secp256k1_generator() -> Point:
    F = prime_field(SECP256K1_PRIME)
    return F(SECP256K1_GX), F(SECP256K1_GY)
