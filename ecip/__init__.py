"""ECIP - Elliptic curve divisor products with one inversion per run."""

from ecip.config import (
    DEFAULT_DOMAIN_SIZE,
    DivisorConfig,
    degree_bound,
    required_domain_size,
)
from ecip.divisor import Divisor, LineDivisor
from ecip.engine import DivisorEngine, NodeKind, compute_divisor_product
from ecip.inversion import InversionQueue, ResolvedInversions, RunStats, Site
from ecip.naive import NaiveDivisor, naive_divisor_product
from ecip.schedule import Leaf, Merge, MergeSchedule

__all__ = [
    # Config
    "DivisorConfig",
    "DEFAULT_DOMAIN_SIZE",
    "degree_bound",
    "required_domain_size",
    # Divisors
    "Divisor",
    "LineDivisor",
    # Schedule
    "MergeSchedule",
    "Leaf",
    "Merge",
    # Deferred inversion
    "InversionQueue",
    "ResolvedInversions",
    "RunStats",
    "Site",
    # Engine
    "DivisorEngine",
    "NodeKind",
    "compute_divisor_product",
    # Reference
    "NaiveDivisor",
    "naive_divisor_product",
]
