"""Evaluation domain and barycentric interpolation.

Polynomials live in evaluation form over a fixed set of n distinct field
elements. The fields used here generally lack a usable power-of-two root of
unity, so conversions use barycentric interpolation instead of an NTT:

    f(z) = A(z) * sum_i w_i * f(x_i) / (z - x_i)
    A(z) = prod_i (z - x_i),  w_i = 1 / prod_{j != i} (x_i - x_j)

Weights and A(z) are computed once per domain. The default domain is
0, 1, ..., n-1 ("integer-indexed"), where w_i reduces to signed factorials:
    prod_{j != i} (i - j) = (-1)^(n-1-i) * i! * (n-1-i)!

Interpolation is only correct when n >= deg(f) + 1; a smaller domain returns
a wrong polynomial without signaling, so callers size the domain first.
"""

from typing import Iterable, Optional

import galois
import numpy as np

from primitives.batch_inverse import batch_inverse
from primitives.field import FieldClass


class EvaluationDomain:
    """Fixed evaluation domain with precomputed barycentric weights."""

    def __init__(self, field: FieldClass, size: int) -> None:
        """Build the integer-indexed domain 0..size-1.

        Args:
            field: galois GF(p) class
            size: Number of domain points (must not exceed p)
        """
        if size <= 0:
            raise ValueError(f"Domain size must be positive, got {size}")
        if size > field.characteristic:
            raise ValueError(f"Domain size {size} exceeds field order {field.characteristic}")
        self._setup(field, field(list(range(size))), integer_indexed=True)

    @classmethod
    def from_points(cls, field: FieldClass, points: Iterable[int]) -> "EvaluationDomain":
        """Build a domain over arbitrary distinct field elements."""
        values = [int(x) % field.characteristic for x in points]
        if not values:
            raise ValueError("Domain must contain at least one point")
        if len(set(values)) != len(values):
            raise ValueError("Domain points must be distinct")
        domain = cls.__new__(cls)
        domain._setup(field, field(values), integer_indexed=values == list(range(len(values))))
        return domain

    def _setup(self, field: FieldClass, points: galois.FieldArray, integer_indexed: bool) -> None:
        self.field = field
        self.points = points
        self.n = len(points)
        self.integer_indexed = integer_indexed

        if integer_indexed:
            self.weights = _integer_weights(field, self.n)
        else:
            self.weights = _generic_weights(points)

        # A(x) = prod (x - x_i), ascending coefficients, degree n
        self.vanishing = _vanishing_coefficients(points)

    def __len__(self) -> int:
        return self.n

    def __repr__(self) -> str:
        kind = "integer" if self.integer_indexed else "generic"
        return f"EvaluationDomain(n={self.n}, {kind}, p={self.field.characteristic})"

    # --- Lookup ---

    def index_of(self, x: galois.FieldArray) -> Optional[int]:
        """Position of x in the domain, or None."""
        if self.integer_indexed:
            value = int(x)
            return value if value < self.n else None
        hits = np.flatnonzero(self.points == x)
        return int(hits[0]) if len(hits) > 0 else None

    # --- Evaluation Form <-> Values ---

    def evaluate(self, evals: galois.FieldArray, x: galois.FieldArray) -> galois.FieldArray:
        """Evaluate the polynomial given by evals at x, in O(n).

        Direct lookup when x is a domain point; otherwise the barycentric
        formula with one batch inversion of (x - x_i).
        """
        x = self.field(int(x))
        idx = self.index_of(x)
        if idx is not None:
            return evals[idx]

        diffs = x - self.points
        Az = np.prod(diffs)
        return Az * np.sum(self.weights * evals * batch_inverse(diffs))

    def interpolate(self, evals: galois.FieldArray) -> galois.FieldArray:
        """Convert evaluation form to ascending coefficients, in O(n^2).

        Computes sum_i w_i f_i * A(x) / (x - x_i). The quotients A(x)/(x - x_i)
        are built for every i at once by synthetic division:
            q[n-1] = A[n],  q[k-1] = A[k] + x_i * q[k]
        """
        if len(evals) != self.n:
            raise ValueError(f"Expected {self.n} evaluations, got {len(evals)}")

        n = self.n
        scaled = self.weights * evals
        coeffs = self.field.Zeros(n)

        q = self.field.Ones(n)
        coeffs[n - 1] = np.sum(scaled * q)
        for k in range(n - 1, 0, -1):
            q = self.vanishing[k] + self.points * q
            coeffs[k - 1] = np.sum(scaled * q)
        return coeffs

    def evaluate_polynomial(self, coeffs: galois.FieldArray) -> galois.FieldArray:
        """Evaluate ascending coefficients over the whole domain (Horner)."""
        result = self.field.Zeros(self.n)
        for c in reversed(coeffs):
            result = result * self.points + c
        return result

    def line(self, slope: galois.FieldArray, intercept: galois.FieldArray) -> galois.FieldArray:
        """Evaluations of slope*x + intercept over the domain.

        Integer-indexed domains step incrementally: p(i+1) = p(i) + slope.
        """
        if self.integer_indexed:
            steps = self.field.Zeros(self.n) + slope
            steps[0] = intercept
            return np.cumsum(steps)
        return slope * self.points + intercept


def trim(coeffs: galois.FieldArray) -> galois.FieldArray:
    """Drop trailing zero coefficients, keeping at least one entry."""
    nonzero = np.flatnonzero(coeffs != 0)
    if len(nonzero) == 0:
        return type(coeffs).Zeros(1)
    return coeffs[: int(nonzero[-1]) + 1]


# --- Precomputation ---

def _integer_weights(field: FieldClass, n: int) -> galois.FieldArray:
    """Weights for 0..n-1 from factorials, with one batch inversion."""
    fact = field.Ones(n)
    if n > 1:
        fact[1:] = np.cumprod(field(list(range(1, n))))

    denominators = fact * fact[::-1]
    odd = np.array([(n - 1 - i) % 2 == 1 for i in range(n)])
    denominators[odd] = -denominators[odd]
    return batch_inverse(denominators)


def _generic_weights(points: galois.FieldArray) -> galois.FieldArray:
    """Weights for arbitrary distinct points, O(n^2)."""
    n = len(points)
    diffs = points[:, np.newaxis] - points[np.newaxis, :]
    diag = np.arange(n)
    diffs[diag, diag] = 1
    return batch_inverse(np.prod(diffs, axis=1))


def _vanishing_coefficients(points: galois.FieldArray) -> galois.FieldArray:
    """Ascending coefficients of prod (x - x_i)."""
    field = type(points)
    n = len(points)
    A = field.Zeros(n + 1)
    A[0] = 1
    for xi in points:
        shifted = field.Zeros(n + 1)
        shifted[1:] = A[:-1]
        A = shifted - xi * A
    return A
