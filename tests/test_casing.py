"""Tests for identifier casing."""

from __future__ import annotations

import pytest

from tfcv_opgen._casing import camel_case, pascal_case, snake_case


class TestCasing:
    """Word splitting on separators and case changes."""

    @pytest.mark.parametrize("text,expected", [
        ("fooBar", "foo_bar"),
        ("FooBar", "foo_bar"),
        ("foo-bar baz", "foo_bar_baz"),
        ("CAPiTaL", "ca_pi_ta_l"),
        ("__under__score__", "under_score"),
        ("HTTPServer", "http_server"),
        ("version2Beta", "version2_beta"),
        ("already_snake", "already_snake"),
    ])
    def test_snake_case(self, text: str, expected: str) -> None:
        assert snake_case(text) == expected

    def test_pascal_case(self) -> None:
        assert pascal_case("detect_edges") == "DetectEdges"
        assert pascal_case("DetectEdges") == "DetectEdges"
        assert pascal_case("gaussian-blur.op") == "GaussianBlurOp"

    def test_camel_case(self) -> None:
        assert camel_case("detect_edges") == "detectEdges"
        assert camel_case("") == ""
