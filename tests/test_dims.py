"""Tests for dimension token parsing."""

from __future__ import annotations

import pytest

from tfcv_opgen.exceptions import DimensionFormatError, DimensionSizeError, ShapeError
from tfcv_opgen.shape.dims import DimensionDescriptor, DimKind, parse_dim_token


class TestParseDimToken:
    """Mat and vector dimension grammars."""

    @pytest.mark.parametrize("token,expected", [
        ("none", DimensionDescriptor(DimKind.MAT)),
        ("3", DimensionDescriptor(DimKind.MAT, 3)),
        (100, DimensionDescriptor(DimKind.MAT, 100)),
        ("vector:none", DimensionDescriptor(DimKind.VECTOR)),
        ("vector:10", DimensionDescriptor(DimKind.VECTOR, 10)),
    ])
    def test_valid(self, token, expected: DimensionDescriptor) -> None:
        assert parse_dim_token(token) == expected

    def test_dynamic(self) -> None:
        assert parse_dim_token("none").is_dynamic
        assert not parse_dim_token("vector:4").is_dynamic

    @pytest.mark.parametrize("token", ["0", "vector:0", 0])
    def test_zero_size_has_its_own_error(self, token) -> None:
        with pytest.raises(DimensionSizeError, match="dimension should > 0"):
            parse_dim_token(token)

    @pytest.mark.parametrize("token", [
        "", "-1", "03", "None", "vector:", "vector:abc", "vec:3", "3.0", " 3", True, None,
    ])
    def test_malformed(self, token) -> None:
        with pytest.raises(DimensionFormatError, match="Invalid dimensional descriptor format"):
            parse_dim_token(token)

    def test_errors_are_shape_errors(self) -> None:
        with pytest.raises(ShapeError) as exc:
            parse_dim_token("x")
        assert exc.value.token == "x"
        assert not isinstance(exc.value, DimensionSizeError)

    def test_str_round_trip(self) -> None:
        for token in ("none", "7", "vector:none", "vector:2"):
            assert str(parse_dim_token(token)) == token
