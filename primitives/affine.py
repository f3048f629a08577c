"""Point-to-affine capability.

A PointFormat describes one curve's native point type. The only required
operation is an inversion-free map to Jacobian coordinates; converting a whole
batch to affine (x, y) then costs a single field inversion shared by every
point.

The conversion is split in two halves so the divisor engine can splice the
Z operands of the input points into its own run-wide batch:
    conversion_operands()  - pass 1, collect what must be inverted
    from_reciprocals()     - pass 2, finish with the resolved reciprocals

Curves whose native points cannot be mapped to short Weierstrass Jacobian
coordinates cheaply (e.g. some twisted Edwards forms) plug in their own
PointFormat subclass, chosen in CurveParams.point_format.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence

import galois

from primitives.batch_inverse import batch_inverse
from primitives.curve import INF, AffinePoint, CurveParams, JacPoint
from primitives.errors import CapabilityError


class PointFormat(ABC):
    """Coordinate capability for a curve's native point type."""

    name = "abstract"

    @abstractmethod
    def to_jacobian(self, point: Any, curve: CurveParams) -> JacPoint:
        """Map a native point to (X, Y, Z) without inverting.

        Raises:
            CapabilityError: If the point does not have this format's shape
        """

    def conversion_operands(self, points: Sequence[JacPoint], curve: CurveParams) -> galois.FieldArray:
        """Z coordinates of the finite points, in input order."""
        zs = [int(Q[2]) for Q in points if Q[2] != 0]
        if not zs:
            return curve.field.Zeros(0)
        return curve.field(zs)

    def from_reciprocals(
        self,
        points: Sequence[JacPoint],
        reciprocals: galois.FieldArray,
    ) -> List[AffinePoint]:
        """Finish the conversion given 1/Z for every finite point."""
        result: List[AffinePoint] = []
        k = 0
        for X, Y, Z in points:
            if Z == 0:
                result.append(INF)
                continue
            zinv = reciprocals[k]
            k += 1
            zinv2 = zinv * zinv
            result.append((X * zinv2, Y * zinv2 * zinv))
        if k != len(reciprocals):
            raise ValueError(f"Expected {k} reciprocals, got {len(reciprocals)}")
        return result

    def batch_to_affine(self, points: Sequence[Any], curve: CurveParams) -> List[AffinePoint]:
        """Convert native points to affine form with at most one inversion."""
        jac = [self.to_jacobian(P, curve) for P in points]
        operands = self.conversion_operands(jac, curve)
        return self.from_reciprocals(jac, batch_inverse(operands))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AffineFormat(PointFormat):
    """Points given as (x, y) tuples, or INF."""

    name = "affine"

    def to_jacobian(self, point: Any, curve: CurveParams) -> JacPoint:
        if point is INF:
            return curve.infinity_jac()
        if not isinstance(point, tuple) or len(point) != 2:
            raise CapabilityError(f"{self.name} format expects (x, y) tuples, got {point!r}")
        F = curve.field
        return F(int(point[0])), F(int(point[1])), F(1)


class JacobianFormat(PointFormat):
    """Points given as Jacobian (X, Y, Z): x = X/Z^2, y = Y/Z^3."""

    name = "jacobian"

    def to_jacobian(self, point: Any, curve: CurveParams) -> JacPoint:
        if not isinstance(point, tuple) or len(point) != 3:
            raise CapabilityError(f"{self.name} format expects (X, Y, Z) tuples, got {point!r}")
        F = curve.field
        return F(int(point[0])), F(int(point[1])), F(int(point[2]))


class ProjectiveFormat(PointFormat):
    """Points given as homogeneous (X : Y : Z): x = X/Z, y = Y/Z.

    (X*Z, Y*Z^2, Z) is the same point in Jacobian coordinates.
    """

    name = "projective"

    def to_jacobian(self, point: Any, curve: CurveParams) -> JacPoint:
        if not isinstance(point, tuple) or len(point) != 3:
            raise CapabilityError(f"{self.name} format expects (X, Y, Z) tuples, got {point!r}")
        F = curve.field
        X, Y, Z = F(int(point[0])), F(int(point[1])), F(int(point[2]))
        if Z == 0:
            return curve.infinity_jac()
        return X * Z, Y * Z * Z, Z


def require_format(curve: CurveParams) -> PointFormat:
    """Return the curve's point format, or fail before any arithmetic."""
    point_format = curve.point_format
    if not isinstance(point_format, PointFormat):
        raise CapabilityError(
            f"{curve.name} has no point format; configure CurveParams.point_format"
        )
    return point_format
