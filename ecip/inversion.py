"""Deferred inversions for the two-pass divisor run.

Pass 1 records every inversion the run will need as a PendingInversion
instead of performing it. resolve() inverts all recorded operands with one
Montgomery batch inversion. Pass 2 takes the reciprocals back in exactly the
order they were recorded; any divergence raises SiteMismatch instead of
silently pairing an operand with the wrong reciprocal.

A record may carry a numerator: the resolved value is numerator / operand.
This lets pass 1 describe affine quantities such as 1/(x2 - x1) from
Jacobian coordinates, where x2 - x1 = H / (Z1^2 * Z2^2).
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

import galois
import numpy as np

from primitives.batch_inverse import batch_inverse
from primitives.errors import SiteMismatch, Undefined
from primitives.field import FieldClass

logger = logging.getLogger(__name__)


class Site(NamedTuple):
    """Where a deferred inversion is consumed.

    kind is one of:
        "affine"      - 1/Z of the input points (node is -1)
        "slope"       - 1/(x2 - x1) of a leaf or merge chord
        "denominator" - pointwise 1/vertical-line evaluations of a merge
    """
    kind: str
    node: int


@dataclass
class PendingInversion:
    """One deferred inversion: numerator / operand, elementwise."""
    site: Site
    operand: galois.FieldArray
    numerator: galois.FieldArray

    @property
    def size(self) -> int:
        return len(self.operand)


@dataclass
class RunStats:
    """Inversion accounting for one run."""
    sites: int = 0
    operands: int = 0
    inversions: int = 0


class InversionQueue:
    """Pass-1 collector of pending inversions."""

    def __init__(self, field: FieldClass) -> None:
        self.field = field
        self.records: List[PendingInversion] = []

    def __len__(self) -> int:
        return len(self.records)

    def defer(
        self,
        site: Site,
        operand: galois.FieldArray,
        numerator: Optional[galois.FieldArray] = None,
    ) -> None:
        """Record that site needs numerator / operand (scalar or vector)."""
        operand = operand.reshape(-1)
        if numerator is None:
            numerator = self.field.Ones(len(operand))
        else:
            numerator = self.field.Ones(len(operand)) * numerator
        self.records.append(PendingInversion(site, operand, numerator))

    def resolve(self) -> "ResolvedInversions":
        """Invert every recorded operand with a single field inversion.

        Raises:
            Undefined: If any operand is zero; the whole batch fails
        """
        stats = RunStats(sites=len(self.records))
        if not self.records:
            return ResolvedInversions([], [], stats)

        operands = self.field(np.concatenate([r.operand for r in self.records]))
        numerators = self.field(np.concatenate([r.numerator for r in self.records]))
        stats.operands = len(operands)

        try:
            inverses = batch_inverse(operands)
        except Undefined as exc:
            site = next((r.site for r in self.records if np.any(r.operand == 0)), None)
            raise Undefined(f"Zero operand at inversion site {site}", site=site) from exc
        stats.inversions = 1 if len(operands) > 0 else 0

        values = inverses * numerators
        results = []
        offset = 0
        for r in self.records:
            results.append(values[offset:offset + r.size])
            offset += r.size

        logger.debug("resolved %d sites, %d operands", stats.sites, stats.operands)
        return ResolvedInversions([r.site for r in self.records], results, stats)


class ResolvedInversions:
    """Pass-2 cursor over batch-resolved reciprocals."""

    def __init__(self, sites: List[Site], values: List[galois.FieldArray], stats: RunStats) -> None:
        self.sites = sites
        self.values = values
        self.stats = stats
        self._cursor = 0

    def take(self, site: Site) -> galois.FieldArray:
        """Next resolved vector; must belong to site."""
        if self._cursor >= len(self.sites):
            raise SiteMismatch(f"Pass 2 requested {site} after all {len(self.sites)} sites were consumed")
        expected = self.sites[self._cursor]
        if expected != site:
            raise SiteMismatch(f"Pass 2 requested {site} but pass 1 recorded {expected} at position {self._cursor}")
        self._cursor += 1
        return self.values[self._cursor - 1]

    def take_scalar(self, site: Site) -> galois.FieldArray:
        return self.take(site)[0]

    def finish(self) -> None:
        """Check that pass 2 consumed every recorded site."""
        if self._cursor != len(self.sites):
            raise SiteMismatch(f"Pass 2 consumed {self._cursor} of {len(self.sites)} sites")
