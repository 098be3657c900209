"""Custom exception hierarchy for tfcv-opgen.

Provides distinct exception types so callers can tell a malformed shape
descriptor apart from a malformed attribute or operator spec file.

Every exception carries the offending raw token (or string) in ``.token``.

Usage::

    from tfcv_opgen._exceptions import ShapeError

    try:
        classify_shape(["3", "vector:10", "CV_16U"])
    except ShapeError as e:
        print(f"bad shape: {e} (token={e.token!r})")
"""

from __future__ import annotations

from typing import Any


class OpGenError(Exception):
    """Base exception for all tfcv-opgen errors.

    Catch this to handle any error raised by the library without
    catching unrelated exceptions.
    """

    def __init__(self, message: str, token: Any = None) -> None:
        super().__init__(message)
        self.token = token


class ShapeError(OpGenError, ValueError):
    """Raised when a shape descriptor cannot be parsed or classified."""


class DimensionFormatError(ShapeError):
    """Raised when a dimension token matches neither dimension grammar."""


class DimensionSizeError(ShapeError):
    """Raised when a dimension token carries the literal size 0."""


class DataDescriptorError(ShapeError):
    """Raised when the trailing data token is malformed."""


class UnsupportedDepthError(DataDescriptorError):
    """Raised when a depth/signedness pair is not one of the seven OpenCV depths."""


class ChannelCountError(DataDescriptorError):
    """Raised when a channel count falls outside 1..4."""


class ContainerKindError(DataDescriptorError):
    """Raised when a static container kind is combined with multiple channels."""


class ShapeStructureError(ShapeError):
    """Raised when well-formed tokens describe an unsupported structure.

    Examples:
    - a Mat dimension in front of a vector dimension
    - a scalar of OpenCV type, or a Mat of a primitive type
    - a fixed ``Matx``/``Vec`` element with an unknown dimension size
    """


class UnsupportedTypeError(OpGenError, KeyError):
    """Raised when a type table lookup misses."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead
        return str(self.args[0]) if self.args else ""


class AttributeTypeError(OpGenError, ValueError):
    """Raised when an attribute type expression or its default is malformed."""


class SpecError(OpGenError, ValueError):
    """Raised when an operator spec file is unreadable or inconsistent."""
