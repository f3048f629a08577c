"""Unit tests for Montgomery batch inversion."""

import inspect
import time

import numpy as np
import pytest

import primitives.batch_inverse as batch_module
from primitives.batch_inverse import batch_inverse, batch_inverse_list
from primitives.errors import Undefined
from primitives.field import goldilocks_field, secp256k1_field

GL = goldilocks_field()
FP = secp256k1_field()


class TestBatchInverseGoldilocks:
    """Tests for batch inversion over the Goldilocks field."""

    def test_empty(self) -> None:
        """Empty input returns empty output."""
        assert len(batch_inverse(GL.Zeros(0))) == 0
        assert batch_inverse_list([]) == []

    def test_single_element(self) -> None:
        """Single element is inverted correctly."""
        result = batch_inverse(GL([12345]))
        assert len(result) == 1
        assert result[0] * GL(12345) == GL(1)

    def test_two_elements(self) -> None:
        """Two elements are inverted correctly."""
        vals = GL([123, 456])
        results = batch_inverse(vals)
        assert np.array_equal(vals * results, GL.Ones(2))

    def test_many_elements(self) -> None:
        """Many elements are inverted correctly."""
        vals = GL(list(range(1, 101)))
        results = batch_inverse(vals)
        assert len(results) == 100
        assert np.array_equal(vals * results, GL.Ones(100))

    def test_matches_scalar_inversion(self) -> None:
        """Batch inversion matches scalar inversion."""
        vals = GL([i * 7 + 13 for i in range(50)])
        batch_results = batch_inverse(vals)
        scalar_results = [v ** -1 for v in vals]
        for b, s in zip(batch_results, scalar_results):
            assert b == s

    @pytest.mark.parametrize("k", [1, 2, 3, 17, 256, 1000])
    def test_random_nonzero(self, k: int) -> None:
        """Random nonzero inputs of any length invert exactly."""
        vals = GL.Random(k, low=1)
        assert np.array_equal(vals * batch_inverse(vals), GL.Ones(k))

    def test_list_interface(self) -> None:
        """List interface matches the array interface."""
        vals = [GL(3), GL(5), GL(7)]
        results = batch_inverse_list(vals)
        assert len(results) == 3
        for v, r in zip(vals, results):
            assert v * r == GL(1)

    def test_performance(self) -> None:
        """4096 inversions complete in reasonable time."""
        vals = GL(list(range(1, 4097)))

        t0 = time.time()
        results = batch_inverse(vals)
        elapsed = time.time() - t0

        assert np.array_equal(vals * results, GL.Ones(4096))
        assert elapsed < 1.0, f"Batch inversion took {elapsed:.3f}s, expected < 1s"


class TestBatchInverseSecp256k1:
    """Tests for batch inversion over the 256-bit secp256k1 field."""

    @pytest.mark.parametrize("k", [1, 2, 64])
    def test_random_nonzero(self, k: int) -> None:
        vals = FP.Random(k, low=1)
        assert np.array_equal(vals * batch_inverse(vals), FP.Ones(k))

    def test_large_values(self) -> None:
        """Values near the modulus invert correctly."""
        p = FP.characteristic
        vals = FP([p - 1, p - 2, 2, 3])
        results = batch_inverse(vals)
        assert results[0] == FP(p - 1)
        assert np.array_equal(vals * results, FP.Ones(4))


class TestBatchInverseFailure:
    """Zero operands and inversion accounting."""

    @pytest.mark.parametrize("position", [0, 4, 9])
    def test_zero_raises_undefined(self, position: int) -> None:
        """A zero anywhere fails the whole batch."""
        vals = GL(list(range(1, 11)))
        vals[position] = 0
        with pytest.raises(Undefined, match=f"position {position}"):
            batch_inverse(vals)

    def test_undefined_is_zero_division(self) -> None:
        with pytest.raises(ZeroDivisionError):
            batch_inverse(GL([0]))

    @pytest.mark.parametrize("k", [1, 2, 50])
    def test_single_field_inversion(self, k: int, monkeypatch: pytest.MonkeyPatch) -> None:
        """A batch of any size performs exactly one field inversion."""
        calls = []
        original = batch_module._invert

        def counting_invert(value):
            calls.append(value)
            return original(value)

        monkeypatch.setattr(batch_module, "_invert", counting_invert)
        batch_inverse(GL.Random(k, low=1))
        assert len(calls) == 1

    def test_module_import_exposes_hook(self) -> None:
        """Importing the package must not shadow the submodule."""
        import primitives  # noqa: F401

        assert inspect.ismodule(batch_module)
        assert batch_module.batch_inverse is batch_inverse
