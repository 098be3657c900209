"""Shape descriptor parsing and classification.

Usage::

    from tfcv_opgen.shape import classify_shape

    shape = classify_shape(["3", "3", "CV_32F:Matx"])
    shape.declaration   # => "Matx<float, 3, 3>"
"""

from tfcv_opgen.shape.classifier import (
    MAX_ARRAY_RANK,
    ParsedShape,
    ShapeKind,
    array_rank_of,
    classify_shape,
    declare_vector,
)
from tfcv_opgen.shape.data import (
    MAX_CHANNELS,
    ContainerKind,
    DataDescriptor,
    Domain,
    parse_data_token,
    render_access,
)
from tfcv_opgen.shape.dims import DimensionDescriptor, DimKind, parse_dim_token

__all__ = [
    "MAX_ARRAY_RANK",
    "MAX_CHANNELS",
    "ContainerKind",
    "DataDescriptor",
    "DimKind",
    "DimensionDescriptor",
    "Domain",
    "ParsedShape",
    "ShapeKind",
    "array_rank_of",
    "classify_shape",
    "declare_vector",
    "parse_data_token",
    "parse_dim_token",
    "render_access",
]
