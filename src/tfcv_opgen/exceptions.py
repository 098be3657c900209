"""Public exception hierarchy for tfcv-opgen.

All exceptions inherit from :class:`OpGenError`, so callers can
``except OpGenError`` to catch any library error, or be specific with a
subclass.

Example::

    from tfcv_opgen.exceptions import OpGenError, ShapeStructureError

    try:
        classify_shape(tokens)
    except ShapeStructureError:
        print("tokens are well-formed but describe an unsupported layout")
    except OpGenError as e:
        print(f"tfcv-opgen error: {e}")
"""

from tfcv_opgen._exceptions import (  # noqa: F401
    AttributeTypeError,
    ChannelCountError,
    ContainerKindError,
    DataDescriptorError,
    DimensionFormatError,
    DimensionSizeError,
    OpGenError,
    ShapeError,
    ShapeStructureError,
    SpecError,
    UnsupportedDepthError,
    UnsupportedTypeError,
)

__all__ = [
    "OpGenError",
    "ShapeError",
    "DimensionFormatError",
    "DimensionSizeError",
    "DataDescriptorError",
    "UnsupportedDepthError",
    "ChannelCountError",
    "ContainerKindError",
    "ShapeStructureError",
    "UnsupportedTypeError",
    "AttributeTypeError",
    "SpecError",
]
