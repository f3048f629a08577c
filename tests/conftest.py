"""
Pytest configuration for the divisor engine tests.

Curves shared across test modules:
- secp256k1 over its 256-bit field, the production-sized case
- y^2 = x^3 + 2x + 3 over GF(97), small enough for hand-checked vectors
"""

import random
import sys
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

# Add the repository root to the path so absolute imports work
# (tests/ is inside the repository root, so parent is the root)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from primitives.affine import AffineFormat, JacobianFormat  # noqa: E402
from primitives.curve import CurveParams, secp256k1, secp256k1_generator  # noqa: E402
from primitives.field import prime_field  # noqa: E402

IntPoint = Tuple[int, int]


def toy_curve() -> CurveParams:
    """y^2 = x^3 + 2x + 3 over GF(97)."""
    return CurveParams(prime_field(97), 2, 3, "toy97", AffineFormat())


def sample_points(curve: CurveParams, count: int, offset: int = 1) -> List[IntPoint]:
    """offset*G, (offset+1)*G, ... on secp256k1 as integer (x, y) tuples.

    One scalar multiplication, then successive Jacobian additions and a
    single batch conversion to affine.
    """
    G = curve.jac_from_aff(secp256k1_generator())
    Q = curve.mult_jac(offset, G)
    jac = []
    for _ in range(count):
        jac.append(tuple(int(c) for c in Q))
        Q = curve.add_jac(Q, G)
    affine = JacobianFormat().batch_to_affine(jac, curve)
    return [(int(x), int(y)) for x, y in affine]


@pytest.fixture(scope="session")
def curve() -> CurveParams:
    return secp256k1(AffineFormat())


@pytest.fixture(scope="session")
def toy() -> CurveParams:
    return toy_curve()


@pytest.fixture(scope="session")
def points(curve: CurveParams) -> List[IntPoint]:
    """40 consecutive multiples of the secp256k1 generator."""
    return sample_points(curve, 40)


def points_for_scalars(curve: CurveParams, scalars: Iterable[int]) -> List[IntPoint]:
    """k*G on secp256k1 for each scalar k, as integer (x, y) tuples."""
    G = curve.jac_from_aff(secp256k1_generator())
    jac = [tuple(int(c) for c in curve.mult_jac(k, G)) for k in scalars]
    affine = JacobianFormat().batch_to_affine(jac, curve)
    return [(int(x), int(y)) for x, y in affine]


@pytest.fixture(scope="session")
def scattered_points(curve: CurveParams) -> List[IntPoint]:
    """24 multiples of the generator by distinct random 62-bit scalars."""
    rng = random.Random(0xEC1B)
    scalars = rng.sample(range(1, 2**62), 24)
    return points_for_scalars(curve, scalars)
