"""A small C++ statement/expression tree.

The loop synthesizer builds these nodes and nothing is turned into text
until :func:`render` is called, so tests can inspect the structure of a
conversion (how many loops, which bound, which guard) without diffing
strings.

Expressions render to a single line; statements render to a list of
lines at a given indentation level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from tfcv_opgen.shape.data import ContainerKind, render_access

INDENT = "  "


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class Expr:
    """Base class of expression nodes."""

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Name(Expr):
    """An identifier, or any expression text that needs no structure."""

    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class Literal(Expr):
    value: Union[int, float]

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class String(Expr):
    """A double-quoted C++ string literal."""

    value: str

    def render(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True)
class Call(Expr):
    """``func(args...)``; also used for Eigen tensor map indexing."""

    func: Expr
    args: Tuple[Expr, ...] = ()

    def render(self) -> str:
        return f"{self.func.render()}({', '.join(a.render() for a in self.args)})"


@dataclass(frozen=True)
class MethodCall(Expr):
    """``base.method(args...)`` (or ``base->method`` when ``arrow``)."""

    base: Expr
    method: str
    args: Tuple[Expr, ...] = ()
    arrow: bool = False

    def render(self) -> str:
        sep = "->" if self.arrow else "."
        args = ", ".join(a.render() for a in self.args)
        return f"{self.base.render()}{sep}{self.method}({args})"


@dataclass(frozen=True)
class Member(Expr):
    """``base.name``."""

    base: Expr
    name: str

    def render(self) -> str:
        return f"{self.base.render()}.{self.name}"


@dataclass(frozen=True)
class Subscript(Expr):
    """``base[index]``."""

    base: Expr
    index: Expr

    def render(self) -> str:
        return f"{self.base.render()}[{self.index.render()}]"


@dataclass(frozen=True)
class ElementAccess(Expr):
    """One element of an OpenCV container, spelled the container's way."""

    base: Expr
    container: ContainerKind
    index_args: Tuple[Expr, ...]
    element_type: str

    def render(self) -> str:
        args = [a.render() for a in self.index_args]
        return self.base.render() + render_access(self.container, args, self.element_type)


@dataclass(frozen=True)
class BinOp(Expr):
    op: str
    left: Expr
    right: Expr

    def render(self) -> str:
        return f"{self.left.render()} {self.op} {self.right.render()}"


@dataclass(frozen=True)
class InitList(Expr):
    """``{ a, b, c }``; renders ``{}`` when empty."""

    items: Tuple[Expr, ...] = ()

    def render(self) -> str:
        if not self.items:
            return "{}"
        return "{ " + ", ".join(i.render() for i in self.items) + " }"


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


class Stmt:
    """Base class of statement nodes."""

    def lines(self, level: int = 0) -> List[str]:
        raise NotImplementedError


def _pad(level: int) -> str:
    return INDENT * level


@dataclass(frozen=True)
class Declare(Stmt):
    """A variable declaration.

    ``T x;``, ``T x = init;``, ``T x(args);`` or, with ``array=True``,
    ``T x[] = init;``.
    """

    ctype: str
    name: str
    init: Optional[Expr] = None
    args: Tuple[Expr, ...] = ()
    const: bool = False
    array: bool = False

    def lines(self, level: int = 0) -> List[str]:
        prefix = "const " if self.const else ""
        target = f"{self.name}[]" if self.array else self.name
        text = f"{prefix}{self.ctype} {target}"
        if self.args:
            text += f"({', '.join(a.render() for a in self.args)})"
        if self.init is not None:
            text += f" = {self.init.render()}"
        return [f"{_pad(level)}{text};"]


@dataclass(frozen=True)
class Assign(Stmt):
    target: Expr
    value: Expr

    def lines(self, level: int = 0) -> List[str]:
        return [f"{_pad(level)}{self.target.render()} = {self.value.render()};"]


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr

    def lines(self, level: int = 0) -> List[str]:
        return [f"{_pad(level)}{self.expr.render()};"]


@dataclass(frozen=True)
class Break(Stmt):
    def lines(self, level: int = 0) -> List[str]:
        return [f"{_pad(level)}break;"]


@dataclass(frozen=True)
class For(Stmt):
    """``for (int var = 0; var < bound; var++) { body }``."""

    var: str
    bound: Expr
    body: Tuple[Stmt, ...] = ()

    def lines(self, level: int = 0) -> List[str]:
        out = [
            f"{_pad(level)}for (int {self.var} = 0; {self.var} < {self.bound.render()}; "
            f"{self.var}++) {{"
        ]
        for stmt in self.body:
            out.extend(stmt.lines(level + 1))
        out.append(f"{_pad(level)}}}")
        return out


@dataclass(frozen=True)
class If(Stmt):
    """``if (cond) { body } else { orelse }``; a lone ``break`` stays on one line."""

    cond: Expr
    body: Tuple[Stmt, ...] = ()
    orelse: Tuple[Stmt, ...] = ()

    def lines(self, level: int = 0) -> List[str]:
        head = f"{_pad(level)}if ({self.cond.render()}) {{"
        if not self.orelse and len(self.body) == 1 and isinstance(self.body[0], Break):
            return [f"{head} break; }}"]
        out = [head]
        for stmt in self.body:
            out.extend(stmt.lines(level + 1))
        if self.orelse:
            out.append(f"{_pad(level)}}} else {{")
            for stmt in self.orelse:
                out.extend(stmt.lines(level + 1))
        out.append(f"{_pad(level)}}}")
        return out


@dataclass(frozen=True)
class Scope(Stmt):
    """A braced block; its declarations end with the closing brace."""

    stmts: Tuple[Stmt, ...] = field(default_factory=tuple)

    def lines(self, level: int = 0) -> List[str]:
        out = [f"{_pad(level)}{{"]
        for stmt in self.stmts:
            out.extend(stmt.lines(level + 1))
        out.append(f"{_pad(level)}}}")
        return out


def render(stmts: Iterable[Stmt], level: int = 0) -> str:
    """Render statements to C++ text, one statement per line."""
    out: List[str] = []
    for stmt in stmts:
        out.extend(stmt.lines(level))
    return "\n".join(out)


def subscripts(base: Expr, index: Sequence[Expr]) -> Expr:
    """``base[i0][i1]...``; returns ``base`` for an empty index."""
    for expr in index:
        base = Subscript(base, expr)
    return base
