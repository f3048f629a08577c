"""Coefficient-form reference for the divisor product.

Walks the same merge schedule as ecip.engine but keeps every divisor as a pair
of galois.Poly, computes affine sums with one inversion per operation, and
divides by vertical lines exactly. Equal partial sums merge through the
tangent line; identical points inside a leaf stay undefined. Slow (O(n^2) per
merge, O(k) inversions) and only used to cross-check the two-pass engine in
tests.
"""

from typing import Any, Dict, Sequence, Tuple

import galois

from ecip.schedule import Leaf, MergeSchedule
from primitives.affine import require_format
from primitives.curve import INF, AffinePoint, CurveParams, inverse

PolyPair = Tuple[galois.Poly, galois.Poly]


def _poly(field, ascending) -> galois.Poly:
    """galois.Poly from ascending coefficients."""
    return galois.Poly(field([int(c) for c in ascending][::-1]))


class NaiveDivisor:
    """Divisor product over one curve, coefficient form."""

    def __init__(self, curve: CurveParams) -> None:
        self.curve = curve
        self.field = curve.field
        # y^2 = x^3 + A*x + B
        self.relation = _poly(self.field, [curve.b, curve.a, 0, 1])
        self.one = _poly(self.field, [1])
        self.zero = _poly(self.field, [0])

    def multiply(self, f: PolyPair, g: PolyPair) -> PolyPair:
        """(a1 - y*b1)(a2 - y*b2) reduced by the curve relation."""
        a1, b1 = f
        a2, b2 = g
        return a1 * a2 + self.relation * b1 * b2, a1 * b2 + b1 * a2

    def vertical(self, x0: galois.FieldArray) -> galois.Poly:
        return _poly(self.field, [-x0, 1])

    def chord(self, P: AffinePoint, Q: AffinePoint) -> Tuple[PolyPair, AffinePoint]:
        """Line y = m*x + c through P, Q as (m*x + c, 1), and P + Q.

        Raises:
            Undefined: If P and Q share an x coordinate
        """
        m = (Q[1] - P[1]) * inverse(Q[0] - P[0])
        c = P[1] - m * P[0]
        x3 = m * m - P[0] - Q[0]
        y3 = m * (P[0] - x3) - P[1]
        return (_poly(self.field, [c, m]), self.one), (x3, y3)

    def tangent(self, P: AffinePoint) -> Tuple[PolyPair, AffinePoint]:
        """Tangent y = m*x + c at P as (m*x + c, 1), and 2P.

        Raises:
            Undefined: If P is a 2-torsion point
        """
        F = self.field
        m = (F(3) * P[0] * P[0] + self.curve.A) * inverse(F(2) * P[1])
        c = P[1] - m * P[0]
        x3 = m * m - P[0] - P[0]
        y3 = m * (P[0] - x3) - P[1]
        return (_poly(F, [c, m]), self.one), (x3, y3)

    def divide(self, f: PolyPair, divisor: galois.Poly) -> PolyPair:
        a, b = f
        if a % divisor != self.zero or b % divisor != self.zero:
            raise ArithmeticError("vertical line does not divide the product")
        return a // divisor, b // divisor

    def compute(self, points: Sequence[Any]) -> Tuple[galois.FieldArray, galois.FieldArray]:
        """Ascending coefficients (a, b), trimmed like the engine's output."""
        point_format = require_format(self.curve)
        affine = [self.curve.aff_from_jac(point_format.to_jacobian(P, self.curve)) for P in points]

        schedule = MergeSchedule(len(affine))
        if schedule.root is None:
            return self.field([1]), self.field([0])

        nodes: Dict[int, PolyPair] = {}
        sums: Dict[int, AffinePoint] = {}
        for step in schedule.walk():
            if isinstance(step, Leaf):
                finite = [affine[i] for i in step.points if affine[i] is not INF]
                if not finite:
                    nodes[step.node], sums[step.node] = (self.one, self.zero), INF
                elif len(finite) == 1:
                    P = finite[0]
                    nodes[step.node], sums[step.node] = (self.vertical(P[0]), self.zero), P
                elif finite[0][0] == finite[1][0] and finite[0][1] == -finite[1][1]:
                    P = finite[0]
                    nodes[step.node], sums[step.node] = (self.vertical(P[0]), self.zero), INF
                else:
                    nodes[step.node], sums[step.node] = self.chord(*finite)
                continue

            product = self.multiply(nodes.pop(step.left), nodes.pop(step.right))
            S1, S2 = sums.pop(step.left), sums.pop(step.right)
            if S1 is INF or S2 is INF:
                nodes[step.node] = product
                sums[step.node] = S2 if S1 is INF else S1
            elif S1[0] == S2[0] and S1[1] == -S2[1]:
                nodes[step.node] = self.divide(product, self.vertical(S1[0]))
                sums[step.node] = INF
            elif S1[0] == S2[0]:
                # equal partial sums
                line, total = self.tangent(S1)
                vertical = self.vertical(S1[0])
                nodes[step.node] = self.divide(self.multiply(product, line), vertical * vertical)
                sums[step.node] = total
            else:
                line, total = self.chord(S1, S2)
                verticals = self.vertical(S1[0]) * self.vertical(S2[0])
                nodes[step.node] = self.divide(self.multiply(product, line), verticals)
                sums[step.node] = total

        a, b = nodes[schedule.root]
        return a.coeffs[::-1], b.coeffs[::-1]


def naive_divisor_product(
    points: Sequence[Any],
    curve: CurveParams,
) -> Tuple[galois.FieldArray, galois.FieldArray]:
    """Reference (a, b) for points on curve."""
    return NaiveDivisor(curve).compute(points)
