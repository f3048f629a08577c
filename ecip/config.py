"""Divisor engine configuration.

Domain sizing rule:
    A divisor with k affine zeros has a pole of order k at infinity, so
    deg a(x) <= k // 2 and deg b(x) <= (k - 3) // 2. A product over m input
    points carries at most m + 1 zeros (the inputs plus minus their sum), hence
        domain_size >= (m + 1) // 2 + 1
    The default of 130 covers up to 258 points, sized for ~256-bit fields.
"""

from dataclasses import dataclass
from typing import Tuple

DEFAULT_DOMAIN_SIZE = 130


def degree_bound(n_points: int) -> Tuple[int, int]:
    """Upper bounds (deg a, deg b) for the product over n_points points.

    A negative bound means the polynomial is identically zero.
    """
    zeros = n_points + 1 if n_points > 0 else 0
    return zeros // 2, (zeros - 3) // 2


def required_domain_size(n_points: int) -> int:
    """Smallest domain size that interpolates the product exactly."""
    da, db = degree_bound(n_points)
    return max(da, db, 0) + 1


@dataclass(frozen=True)
class DivisorConfig:
    """Divisor engine configuration.

    Attributes:
        domain_size: Number of evaluation points (integer-indexed domain 0..n-1)
    """
    domain_size: int = DEFAULT_DOMAIN_SIZE

    def __post_init__(self) -> None:
        if self.domain_size <= 0:
            raise ValueError(f"domain_size must be positive, got {self.domain_size}")

    @classmethod
    def for_points(cls, n_points: int) -> "DivisorConfig":
        """Smallest configuration able to handle n_points points."""
        return cls(domain_size=required_domain_size(n_points))

    def max_points(self) -> int:
        """Largest point count this domain size can interpolate."""
        return 2 * (self.domain_size - 1)
