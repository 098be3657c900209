"""Dimension tokens: ``"none"``, ``"3"``, ``"vector:none"``, ``"vector:10"``."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional, Union

from tfcv_opgen._exceptions import DimensionFormatError, DimensionSizeError

_VECTOR_FORMAT = re.compile(r"^vector:(none|0|[1-9]\d*)$")
_MAT_FORMAT = re.compile(r"^(none|0|[1-9]\d*)$")

UNKNOWN = "none"


class DimKind(enum.Enum):
    """Which container a dimension belongs to."""

    MAT = "Mat"
    VECTOR = "vector"


@dataclass(frozen=True)
class DimensionDescriptor:
    """One parsed axis token.

    Attributes:
        kind: ``DimKind.VECTOR`` for ``vector:`` tokens, ``DimKind.MAT`` otherwise.
        size: The literal axis length, or ``None`` when it is only known at
            runtime (``"none"``).
    """

    kind: DimKind
    size: Optional[int] = None

    @property
    def is_vector(self) -> bool:
        return self.kind is DimKind.VECTOR

    @property
    def is_dynamic(self) -> bool:
        return self.size is None

    def __str__(self) -> str:
        size = UNKNOWN if self.size is None else str(self.size)
        return f"vector:{size}" if self.is_vector else size


def parse_dim_token(token: Union[str, int]) -> DimensionDescriptor:
    """Parse one dimension token.

    Args:
        token: ``"none"``, a positive integer (as ``str`` or ``int``), or the
            same prefixed with ``"vector:"``.

    Raises:
        DimensionSizeError: The token is well-formed but its size is ``0``.
        DimensionFormatError: The token matches neither grammar.

    Example::

        parse_dim_token("vector:none")
        # => DimensionDescriptor(kind=DimKind.VECTOR, size=None)
    """
    if isinstance(token, bool) or not isinstance(token, (str, int)):
        raise DimensionFormatError(
            f"Invalid dimensional descriptor format: {token}", token=token
        )
    text = str(token)

    match = _VECTOR_FORMAT.match(text)
    kind = DimKind.VECTOR
    if match is None:
        match = _MAT_FORMAT.match(text)
        kind = DimKind.MAT
    if match is None:
        raise DimensionFormatError(
            f"Invalid dimensional descriptor format: {token}", token=token
        )

    size_text = match.group(1)
    if size_text == UNKNOWN:
        return DimensionDescriptor(kind)
    if int(size_text) < 1:
        raise DimensionSizeError(
            "Invalid dimensional descriptor format: dimension should > 0", token=token
        )
    return DimensionDescriptor(kind, int(size_text))
