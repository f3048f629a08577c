"""Divisors in evaluation form.

A divisor function f(x, y) = a(x) - y*b(x) is stored as the evaluations of
a(x) and b(x) over the evaluation domain. Products are reduced with the curve
relation y^2 = x^3 + A*x + B, whose evaluations are shared by every divisor of
a run:

    f1 * f2 = a1*a2 - y*(a1*b2 + b1*a2) + y^2 * b1*b2
    a' = a1*a2 + (x^3 + A*x + B) * b1*b2
    b' = a1*b2 + b1*a2

Every operation is pointwise, so vector[i] == polynomial(domain[i]) holds at
every stage. Degree bounds follow from the pole order at infinity: a divisor
with pole order k has deg a <= k // 2 and deg b <= (k - 3) // 2.
"""

from typing import Union

import galois

from primitives.domain import EvaluationDomain


class Divisor:
    """f(x, y) = a(x) - y*b(x) as evaluation vectors.

    Attributes:
        a: Evaluations of a(x) over the domain
        b: Evaluations of b(x) over the domain
        relation: Evaluations of x^3 + A*x + B (shared, read-only)
        pole_order: Pole order at infinity (number of affine zeros)
    """

    def __init__(
        self,
        a: galois.FieldArray,
        b: galois.FieldArray,
        relation: galois.FieldArray,
        pole_order: int,
    ) -> None:
        self.a = a
        self.b = b
        self.relation = relation
        self.pole_order = pole_order

    @classmethod
    def one(cls, relation: galois.FieldArray) -> "Divisor":
        """The constant function 1."""
        field = type(relation)
        n = len(relation)
        return cls(field.Ones(n), field.Zeros(n), relation, 0)

    @property
    def a_degree(self) -> int:
        return self.pole_order // 2

    @property
    def b_degree(self) -> int:
        return (self.pole_order - 3) // 2

    def __len__(self) -> int:
        return len(self.a)

    def __repr__(self) -> str:
        return f"Divisor(n={len(self)}, pole_order={self.pole_order})"

    def __mul__(self, other: Union["Divisor", "LineDivisor"]) -> "Divisor":
        if isinstance(other, LineDivisor):
            return self.mul_line(other)

        a1, b1 = self.a, self.b
        a2, b2 = other.a, other.b
        a1a2 = a1 * a2
        b1b2 = b1 * b2
        # (a1 + b1)(a2 + b2) = a1a2 + a1b2 + b1a2 + b1b2
        cross = (a1 + b1) * (a2 + b2)
        b = cross - (a1a2 + b1b2)
        a = a1a2 + b1b2 * self.relation
        return Divisor(a, b, self.relation, self.pole_order + other.pole_order)

    def mul_line(self, line: "LineDivisor") -> "Divisor":
        """Product with a degree <= 1 line, whose b(x) is the constant 0 or 1."""
        l = line.evals
        if line.vertical:
            return Divisor(self.a * l, self.b * l, self.relation, self.pole_order + line.pole_order)

        a = self.a * l + self.relation * self.b
        b = self.a + self.b * l
        return Divisor(a, b, self.relation, self.pole_order + line.pole_order)

    def divide(self, reciprocals: galois.FieldArray, n_verticals: int) -> "Divisor":
        """Divide by a product of vertical lines, given its pointwise reciprocals."""
        return Divisor(
            self.a * reciprocals,
            self.b * reciprocals,
            self.relation,
            self.pole_order - 2 * n_verticals,
        )

    def evaluate(
        self,
        domain: EvaluationDomain,
        x: galois.FieldArray,
        y: galois.FieldArray,
    ) -> galois.FieldArray:
        """f(x, y) = a(x) - y*b(x) at an arbitrary point, in O(n)."""
        return domain.evaluate(self.a, x) - y * domain.evaluate(self.b, x)


class LineDivisor:
    """Degree <= 1 divisor built from one point pair.

    Chord through (x1, y1), (x2, y2) with slope m and intercept c:
        a(x) = m*x + c, b(x) = 1, zeros at both points and minus their sum.
    Vertical line through x0:
        a(x) = x - x0, b(x) = 0, zeros at (x0, y0) and (x0, -y0).

    Only a(x) is stored as a vector; the fast paths in Divisor.mul_line and
    LineDivisor.__mul__ exploit the constant b(x).
    """

    def __init__(
        self,
        evals: galois.FieldArray,
        relation: galois.FieldArray,
        vertical: bool,
    ) -> None:
        self.evals = evals
        self.relation = relation
        self.vertical = vertical
        self.pole_order = 2 if vertical else 3

    @classmethod
    def chord(
        cls,
        domain: EvaluationDomain,
        relation: galois.FieldArray,
        slope: galois.FieldArray,
        intercept: galois.FieldArray,
    ) -> "LineDivisor":
        return cls(domain.line(slope, intercept), relation, vertical=False)

    @classmethod
    def vertical_at(
        cls,
        domain: EvaluationDomain,
        relation: galois.FieldArray,
        x0: galois.FieldArray,
    ) -> "LineDivisor":
        field = domain.field
        return cls(domain.line(field(1), -x0), relation, vertical=True)

    def __repr__(self) -> str:
        kind = "vertical" if self.vertical else "chord"
        return f"LineDivisor({kind}, n={len(self.evals)})"

    def to_divisor(self) -> Divisor:
        field = type(self.evals)
        n = len(self.evals)
        b = field.Zeros(n) if self.vertical else field.Ones(n)
        return Divisor(self.evals, b, self.relation, self.pole_order)

    def __mul__(self, other: Union[Divisor, "LineDivisor"]) -> Divisor:
        if isinstance(other, Divisor):
            return other.mul_line(self)

        l1, l2 = self.evals, other.evals
        pole_order = self.pole_order + other.pole_order
        if self.vertical and other.vertical:
            field = type(l1)
            return Divisor(l1 * l2, field.Zeros(len(l1)), self.relation, pole_order)
        if self.vertical:
            # b = l1 * 1
            return Divisor(l1 * l2, l1, self.relation, pole_order)
        if other.vertical:
            return Divisor(l1 * l2, l2, self.relation, pole_order)
        return Divisor(l1 * l2 + self.relation, l1 + l2, self.relation, pole_order)
