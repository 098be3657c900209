"""Data tokens: the last element of a shape descriptor.

Data token format can be one of the following:

1. ``CV_<bit-depth>{U|S|F}C<channels>[:{Mat|Matx|Vec}]``
2. ``CV_<bit-depth>{U|S|F}[:{Mat|Matx|Vec}]`` (channels = 1)
3. A primitive type: ``char``, ``int``, ``float`` or ``double``.

The optional suffix selects the OpenCV container that holds the block part
of the shape.  ``Mat`` is the default; ``Matx`` and ``Vec`` are the
statically sized containers and cannot be multichannel.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from tfcv_opgen import types
from tfcv_opgen._exceptions import (
    ChannelCountError,
    ContainerKindError,
    DataDescriptorError,
    UnsupportedDepthError,
)

MAX_CHANNELS = 4

_CV_FORMAT = re.compile(r"^CV_([1-9]\d*)(U|S|F)(?:C([1-9]\d*))?$")
_PRIMITIVE_FORMAT = re.compile(r"^(char|int|float|double)$")


class Domain(enum.Enum):
    """Whether the element is an OpenCV depth/channel type or a plain C++ type."""

    CV = "cv"
    STD = "std"


class ContainerKind(enum.Enum):
    """OpenCV container holding the block axes of a shape."""

    MAT = "Mat"
    MATX = "Matx"
    VEC = "Vec"

    @property
    def is_fixed(self) -> bool:
        return self is not ContainerKind.MAT


def render_access(kind: ContainerKind, index_args: Sequence[str], element_type: str) -> str:
    """Return the element access suffix for a container.

    Example::

        render_access(ContainerKind.MAT, ["i", "j"], "float")   # => ".at<float>(i, j)"
        render_access(ContainerKind.MATX, ["i", "j"], "float")  # => "(i, j)"
        render_access(ContainerKind.VEC, ["i"], "float")        # => "[i]"
    """
    args = ", ".join(index_args)
    if kind is ContainerKind.MATX:
        return f"({args})"
    if kind is ContainerKind.VEC:
        return f"[{args}]"
    return f".at<{element_type}>({args})"


@dataclass(frozen=True)
class DataDescriptor:
    """A parsed data token.

    Attributes:
        domain: ``Domain.CV`` or ``Domain.STD``.
        canonical: The token without its container suffix (``"CV_32FC2"``,
            ``"int"``).
        channels: Channel count, always 1 for primitives.
        depth: OpenCV depth code (``"32F"``) for CV tokens, else ``None``.
        type_name: Primitive type name for STD tokens, else ``None``.
        container: Container kind of the block part (``Mat`` by default).
    """

    domain: Domain
    canonical: str
    channels: int = 1
    depth: Optional[str] = None
    type_name: Optional[str] = None
    container: ContainerKind = ContainerKind.MAT

    @property
    def is_cv(self) -> bool:
        return self.domain is Domain.CV

    @property
    def scalar_type(self) -> str:
        """C++ type of one channel value as held by the container."""
        if self.is_cv:
            return types.depth_to_scalar(self.depth)
        return self.type_name

    @property
    def array_scalar_type(self) -> str:
        """C++ element type of the TensorFlow tensor map."""
        if self.is_cv:
            return types.depth_to_scalar(self.depth)
        return types.primitive_to_array_scalar(self.type_name)

    @property
    def array_dtype(self) -> str:
        """TensorFlow dtype name used when registering the port."""
        if self.is_cv:
            return types.depth_to_array(self.depth)
        return types.primitive_to_array(self.type_name)

    @property
    def element_type(self) -> str:
        """C++ type of one container element (``Vec<T, n>`` when multichannel)."""
        if self.channels > 1:
            return f"Vec<{self.scalar_type}, {self.channels}>"
        return self.scalar_type

    @property
    def cv_type(self) -> str:
        """OpenCV type constant for ``Mat`` construction (``"CV_8UC3"``)."""
        if self.is_cv:
            return self.canonical
        return types.primitive_to_depth(self.type_name)

    @property
    def is_floating(self) -> bool:
        if self.is_cv:
            return types.is_floating_depth(self.depth)
        return self.type_name in ("float", "double")

    def access(self, index_args: Sequence[str]) -> str:
        """Element access suffix for this descriptor's container."""
        return render_access(self.container, index_args, self.element_type)

    def __str__(self) -> str:
        return self.canonical


def parse_data_token(token: str) -> DataDescriptor:
    """Parse the data token of a shape descriptor.

    Raises:
        UnsupportedDepthError: The depth is not one of the seven OpenCV depths.
        ChannelCountError: The channel count is greater than 4.
        ContainerKindError: ``Matx``/``Vec`` was combined with several channels.
        DataDescriptorError: Anything else that is malformed.

    Example::

        parse_data_token("CV_32FC2")
        # => DataDescriptor(domain=Domain.CV, canonical="CV_32FC2", channels=2,
        #                   depth="32F", container=ContainerKind.MAT)

        parse_data_token("CV_64F:Vec").container
        # => ContainerKind.VEC
    """
    if not isinstance(token, str):
        raise DataDescriptorError(f"Invalid data descriptor format: {token}", token=token)

    if not token.startswith("CV"):
        if _PRIMITIVE_FORMAT.match(token) is None:
            raise DataDescriptorError(f"Invalid data descriptor format: {token}", token=token)
        return DataDescriptor(Domain.STD, canonical=token, type_name=token)

    canonical, _, suffix = token.partition(":")
    match = _CV_FORMAT.match(canonical)
    if match is None:
        raise DataDescriptorError(f"Invalid data descriptor format: {token}", token=token)

    depth = match.group(1) + match.group(2)
    channels_text = match.group(3)
    channels = int(channels_text) if channels_text else 1
    if channels > MAX_CHANNELS:
        raise ChannelCountError(
            "Invalid Data Cell format of channel: expect number between 1, "
            f"{MAX_CHANNELS} but get {channels} from {token}",
            token=token,
        )
    if depth not in types.DEPTHS:
        raise UnsupportedDepthError(
            f"Invalid Data Cell format of depth: {depth} from {token}", token=token
        )

    container = ContainerKind.MAT
    if suffix:
        try:
            container = ContainerKind(suffix)
        except ValueError:
            raise DataDescriptorError(
                f"Invalid data descriptor format: {token}", token=token
            ) from None
    if container.is_fixed and channels > 1:
        raise ContainerKindError(
            "Invalid data descriptor format: static Mat type does not support multichannels",
            token=token,
        )

    return DataDescriptor(
        Domain.CV,
        canonical=canonical,
        channels=channels,
        depth=depth,
        container=container,
    )
