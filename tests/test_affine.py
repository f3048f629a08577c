"""Tests for point formats and batch affine conversion."""

from typing import List, Tuple

import pytest

import primitives.batch_inverse as batch_module
from primitives.affine import (
    AffineFormat,
    JacobianFormat,
    ProjectiveFormat,
    require_format,
)
from primitives.curve import INF, CurveParams, secp256k1
from primitives.errors import CapabilityError

IntPoint = Tuple[int, int]


def _scaled_jacobian(curve: CurveParams, points: List[IntPoint], z: int) -> list:
    F = curve.field
    Z = F(z)
    return [(int(F(x) * Z * Z), int(F(y) * Z * Z * Z), z) for x, y in points]


def _scaled_projective(curve: CurveParams, points: List[IntPoint], z: int) -> list:
    F = curve.field
    Z = F(z)
    return [(int(F(x) * Z), int(F(y) * Z), z) for x, y in points]


class TestFormats:

    def test_affine_round_trip(self, curve: CurveParams, points: List[IntPoint]) -> None:
        affine = AffineFormat().batch_to_affine(points[:5], curve)
        assert [(int(x), int(y)) for x, y in affine] == points[:5]

    @pytest.mark.parametrize("z", [1, 2, 0xDEADBEEF])
    def test_jacobian(self, curve: CurveParams, points: List[IntPoint], z: int) -> None:
        native = _scaled_jacobian(curve, points[:6], z)
        affine = JacobianFormat().batch_to_affine(native, curve)
        assert [(int(x), int(y)) for x, y in affine] == points[:6]

    @pytest.mark.parametrize("z", [1, 5, 0xC0FFEE])
    def test_projective(self, curve: CurveParams, points: List[IntPoint], z: int) -> None:
        native = _scaled_projective(curve, points[:6], z)
        fmt = ProjectiveFormat()
        for P in native:
            assert curve.is_on_curve_jac(fmt.to_jacobian(P, curve))
        affine = fmt.batch_to_affine(native, curve)
        assert [(int(x), int(y)) for x, y in affine] == points[:6]

    def test_infinity_passes_through(self, curve: CurveParams, points: List[IntPoint]) -> None:
        native = [points[0], INF, points[1]]
        affine = AffineFormat().batch_to_affine(native, curve)
        assert affine[1] is INF
        assert (int(affine[2][0]), int(affine[2][1])) == points[1]

    def test_all_infinity(self, curve: CurveParams) -> None:
        assert AffineFormat().batch_to_affine([INF, INF], curve) == [INF, INF]
        assert JacobianFormat().batch_to_affine([(1, 1, 0)], curve) == [INF]

    def test_single_inversion(
        self,
        curve: CurveParams,
        points: List[IntPoint],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        calls = []
        original = batch_module._invert

        def counting_invert(value):
            calls.append(value)
            return original(value)

        monkeypatch.setattr(batch_module, "_invert", counting_invert)
        JacobianFormat().batch_to_affine(_scaled_jacobian(curve, points[:20], 3), curve)
        assert len(calls) == 1


class TestCapability:

    def test_missing_format(self) -> None:
        with pytest.raises(CapabilityError):
            require_format(secp256k1())

    def test_non_format_object(self) -> None:
        with pytest.raises(CapabilityError):
            require_format(secp256k1("affine"))

    def test_configured_format_returned(self, curve: CurveParams) -> None:
        assert isinstance(require_format(curve), AffineFormat)

    @pytest.mark.parametrize("fmt,point", [
        (AffineFormat(), (1, 2, 3)),
        (AffineFormat(), [1, 2]),
        (JacobianFormat(), (1, 2)),
        (ProjectiveFormat(), "point"),
    ])
    def test_wrong_shape(self, curve: CurveParams, fmt, point) -> None:
        with pytest.raises(CapabilityError):
            fmt.to_jacobian(point, curve)

    def test_capability_error_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            require_format(secp256k1())
