"""Primitives - Field, curve and evaluation-domain building blocks.

batch_inverse() is not re-exported here: the name would shadow the
primitives.batch_inverse submodule, whose _invert hook counts inversions.
"""

from primitives.affine import (
    AffineFormat,
    JacobianFormat,
    PointFormat,
    ProjectiveFormat,
    require_format,
)
from primitives.batch_inverse import batch_inverse_list
from primitives.curve import (
    INF,
    AffinePoint,
    CurveParams,
    JacPoint,
    Point,
    secp256k1,
    secp256k1_generator,
)
from primitives.domain import EvaluationDomain, trim
from primitives.errors import (
    CapabilityError,
    DegreeOverflow,
    SiteMismatch,
    Undefined,
)
from primitives.field import (
    GOLDILOCKS_PRIME,
    SECP256K1_PRIME,
    goldilocks_field,
    prime_field,
    secp256k1_field,
)

__all__ = [
    # Field
    "prime_field",
    "secp256k1_field",
    "goldilocks_field",
    "SECP256K1_PRIME",
    "GOLDILOCKS_PRIME",
    # Batch inversion
    "batch_inverse_list",
    # Curve
    "CurveParams",
    "Point",
    "AffinePoint",
    "JacPoint",
    "INF",
    "secp256k1",
    "secp256k1_generator",
    # Point formats
    "PointFormat",
    "AffineFormat",
    "JacobianFormat",
    "ProjectiveFormat",
    "require_format",
    # Evaluation domain
    "EvaluationDomain",
    "trim",
    # Errors
    "Undefined",
    "DegreeOverflow",
    "CapabilityError",
    "SiteMismatch",
]
