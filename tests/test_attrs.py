"""Tests for attribute type expressions."""

from __future__ import annotations

import pytest

from tfcv_opgen.attrs import AttrType, parse_attr_type
from tfcv_opgen.exceptions import AttributeTypeError


class TestParseAttrType:
    """``<type> = <default>`` with a type-checked default."""

    @pytest.mark.parametrize("expression,expected", [
        ("int = 3", AttrType("int", "3")),
        ("int=-12", AttrType("int", "-12")),
        ("int = 0", AttrType("int", "0")),
        ("float = 0.5", AttrType("float", "0.5")),
        ("float = .5", AttrType("float", ".5")),
        ("float = -10", AttrType("float", "-10")),
        ("bool = True", AttrType("bool", "True")),
        ("bool = 0", AttrType("bool", "0")),
        ("string = 'BGR'", AttrType("string", "'BGR'")),
        ('string = "a b"', AttrType("string", '"a b"')),
        ("int = 7  ", AttrType("int", "7")),
    ])
    def test_valid(self, expression: str, expected: AttrType) -> None:
        assert parse_attr_type(expression) == expected

    def test_str(self) -> None:
        assert str(parse_attr_type("float =   1.25")) == "float = 1.25"

    @pytest.mark.parametrize("expression", [
        "int", "int =", "long = 3", "Int = 3", " int = 3", "int = ", 3, None,
    ])
    def test_malformed_expression(self, expression) -> None:
        with pytest.raises(AttributeTypeError, match="Invalid attribute type format"):
            parse_attr_type(expression)

    @pytest.mark.parametrize("expression", [
        "int = 007", "int = -0", "int = 1.5", "int = 1e3",
        "float = 01.5", "float = 1.", "float = abc",
        "bool = yes", "bool = TRUE",
        "string = BGR", "string = 'BGR\"", "string = '",
    ])
    def test_bad_default(self, expression: str) -> None:
        with pytest.raises(AttributeTypeError, match="Invalid default value for") as exc:
            parse_attr_type(expression)
        assert exc.value.token == expression
