"""Tests for deferred inversion records and the pass-2 cursor."""

import numpy as np
import pytest

from ecip.inversion import InversionQueue, Site
from primitives.errors import SiteMismatch, Undefined
from primitives.field import goldilocks_field

GL = goldilocks_field()


def _queue() -> InversionQueue:
    queue = InversionQueue(GL)
    queue.defer(Site("affine", -1), GL([2, 3, 4]))
    queue.defer(Site("slope", 0), GL(5), GL(10))
    queue.defer(Site("denominator", 3), GL([7, 8]), GL(3))
    return queue


class TestInversionQueue:

    def test_resolve_values(self) -> None:
        resolved = _queue().resolve()
        assert np.array_equal(resolved.take(Site("affine", -1)), GL([2, 3, 4]) ** -1)
        assert resolved.take_scalar(Site("slope", 0)) == GL(2)
        assert np.array_equal(resolved.take(Site("denominator", 3)), GL(3) / GL([7, 8]))
        resolved.finish()

    def test_stats(self) -> None:
        resolved = _queue().resolve()
        assert resolved.stats.sites == 3
        assert resolved.stats.operands == 6
        assert resolved.stats.inversions == 1

    def test_empty_queue(self) -> None:
        resolved = InversionQueue(GL).resolve()
        assert resolved.stats.inversions == 0
        resolved.finish()

    def test_empty_operand_record(self) -> None:
        queue = InversionQueue(GL)
        queue.defer(Site("affine", -1), GL.Zeros(0))
        resolved = queue.resolve()
        assert len(resolved.take(Site("affine", -1))) == 0
        assert resolved.stats.inversions == 0

    def test_zero_operand_names_site(self) -> None:
        queue = _queue()
        queue.defer(Site("slope", 4), GL(0))
        with pytest.raises(Undefined) as excinfo:
            queue.resolve()
        assert excinfo.value.site == Site("slope", 4)


class TestResolvedCursor:

    def test_out_of_order_take(self) -> None:
        resolved = _queue().resolve()
        with pytest.raises(SiteMismatch):
            resolved.take(Site("slope", 0))

    def test_wrong_node(self) -> None:
        resolved = _queue().resolve()
        resolved.take(Site("affine", -1))
        with pytest.raises(SiteMismatch):
            resolved.take(Site("slope", 1))

    def test_take_past_end(self) -> None:
        queue = InversionQueue(GL)
        queue.defer(Site("slope", 0), GL(2))
        resolved = queue.resolve()
        resolved.take(Site("slope", 0))
        with pytest.raises(SiteMismatch):
            resolved.take(Site("slope", 0))

    def test_unconsumed_sites(self) -> None:
        resolved = _queue().resolve()
        resolved.take(Site("affine", -1))
        with pytest.raises(SiteMismatch):
            resolved.finish()
