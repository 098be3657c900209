"""Tests for the C++ statement tree."""

from __future__ import annotations

from tfcv_opgen.codegen.ast import (
    Assign,
    Break,
    Call,
    Declare,
    ElementAccess,
    For,
    If,
    InitList,
    Literal,
    Member,
    MethodCall,
    Name,
    Scope,
    String,
    Subscript,
    render,
    subscripts,
)
from tfcv_opgen.shape.data import ContainerKind


class TestExpressions:
    """Single-line rendering."""

    def test_call_and_method(self) -> None:
        assert Call(Name("f"), (Literal(1), Name("x"))).render() == "f(1, x)"
        assert MethodCall(Name("v"), "size").render() == "v.size()"
        assert MethodCall(Name("t"), "flat<float>", arrow=True).render() == "t->flat<float>()"

    def test_member_subscript(self) -> None:
        assert Subscript(Member(Name("m"), "size"), Literal(1)).render() == "m.size[1]"
        assert subscripts(Name("v"), (Name("i0"), Name("i1"))).render() == "v[i0][i1]"
        assert subscripts(Name("v"), ()).render() == "v"

    def test_string_escapes(self) -> None:
        assert String('say "hi"').render() == '"say \\"hi\\""'

    def test_init_list(self) -> None:
        assert InitList().render() == "{}"
        assert InitList((Literal(0), Name("n"))).render() == "{ 0, n }"

    def test_element_access(self) -> None:
        access = ElementAccess(Name("m"), ContainerKind.MAT, (Name("i"),), "Vec<uint8_t, 3>")
        assert access.render() == "m.at<Vec<uint8_t, 3>>(i)"
        fixed = ElementAccess(Name("m"), ContainerKind.MATX, (Name("i"), Name("j")), "float")
        assert fixed.render() == "m(i, j)"


class TestStatements:
    """Multi-line rendering and indentation."""

    def test_declarations(self) -> None:
        assert Declare("Mat", "m").lines() == ["Mat m;"]
        assert Declare("vector<int>", "v", args=(Name("n"),)).lines() == ["vector<int> v(n);"]
        shape = Declare("int", "s", init=InitList((Name("a"),)), const=True, array=True)
        assert shape.lines(1) == ["  const int s[] = { a };"]

    def test_for_nest(self) -> None:
        loop = For("i", Name("n"), (For("j", Name("m"), (Assign(Name("x"), Literal(0)),)),))
        assert render([loop]) == (
            "for (int i = 0; i < n; i++) {\n"
            "  for (int j = 0; j < m; j++) {\n"
            "    x = 0;\n"
            "  }\n"
            "}"
        )

    def test_break_guard_single_line(self) -> None:
        assert If(Name("done"), (Break(),)).lines(2) == ["    if (done) { break; }"]

    def test_if_else(self) -> None:
        stmt = If(Name("c"), (Assign(Name("a"), Literal(1)),), (Assign(Name("a"), Literal(2)),))
        assert render([stmt]) == "if (c) {\n  a = 1;\n} else {\n  a = 2;\n}"

    def test_scope_is_braced(self) -> None:
        scope = Scope((Declare("int", "a"), Declare("int", "b")))
        assert scope.lines(1) == ["  {", "    int a;", "    int b;", "  }"]
