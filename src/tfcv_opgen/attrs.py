"""Attribute type expressions.

An operator attribute is declared as ``<type> = <default>``, e.g.::

    "int = 3"
    "float = -0.5"
    "string = 'BGR'"
    "bool = true"

The default is mandatory and validated against the type, so the
``REGISTER_OP`` line generated from it is always accepted by TensorFlow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict

from tfcv_opgen._exceptions import AttributeTypeError

ATTR_TYPES = ("string", "int", "float", "bool")

_EXPRESSION = re.compile(r"^(string|int|float|bool) *= *([^ ].*)")
_INT_DEFAULT = re.compile(r"^(0|-?[1-9]\d*)$")
_FLOAT_DEFAULT = re.compile(r"^-?(0|0\.\d+|\.\d+|[1-9]\d*(\.\d+)?)$")
_BOOL_DEFAULTS = frozenset({"0", "1", "false", "true", "False", "True"})


@dataclass(frozen=True)
class AttrType:
    """A parsed attribute type expression.

    Attributes:
        type: One of ``string``, ``int``, ``float``, ``bool``.
        default: The default value, as written (quotes kept for strings).
    """

    type: str
    default: str

    @property
    def cpp_type(self) -> str:
        """C++ type of the kernel member holding the attribute."""
        return self.type

    def __str__(self) -> str:
        return f"{self.type} = {self.default}"


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"')


# fmt: off
_DEFAULT_CHECKS: Dict[str, Callable[[str], bool]] = {
    "string": _is_quoted,
    "int":    lambda value: _INT_DEFAULT.match(value) is not None,
    "float":  lambda value: _FLOAT_DEFAULT.match(value) is not None,
    "bool":   lambda value: value in _BOOL_DEFAULTS,
}
# fmt: on


def parse_attr_type(expression: str) -> AttrType:
    """Parse ``"<type> = <default>"``.

    Raises:
        AttributeTypeError: The expression does not match the grammar, or
            the default is not a valid literal of the declared type.

    Example::

        parse_attr_type("float = .5")      # => AttrType(type="float", default=".5")
        parse_attr_type("int = 007")       # raises AttributeTypeError
    """
    if not isinstance(expression, str):
        raise AttributeTypeError(
            f"Invalid attribute type format: {expression}", token=expression
        )

    match = _EXPRESSION.match(expression)
    if match is None:
        raise AttributeTypeError(
            f"Invalid attribute type format: {expression}", token=expression
        )

    attr_type = match.group(1)
    default = match.group(2).strip()
    if not _DEFAULT_CHECKS[attr_type](default):
        raise AttributeTypeError(
            f"Invalid default value for {attr_type}: {default} from {expression}",
            token=expression,
        )
    return AttrType(attr_type, default)
