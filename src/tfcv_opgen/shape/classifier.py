"""Shape descriptor classification.

A shape descriptor is a list of tokens::

    [ Dim. descriptor, Dim. descriptor, ..., Data descriptor ]

It may hold any number of dimension tokens but exactly one data token,
always last.  Vector dimensions must form a contiguous prefix: "Mat of
vector" and "vector of Mat of vector" are not supported.

Every valid descriptor falls into exactly one of four kinds:

1. ``SCALAR``       - a primitive value, ``["int"]``
2. ``VEC_OF_PRIM``  - vector... of a primitive, ``["vector:none", "double"]``
3. ``VEC_OF_MAT``   - vector... of Mat, ``["vector:none", "100", "CV_8S"]``
4. ``MAT``          - a single Mat, ``["none", "none", "CV_64FC3"]``

The tensor rank counts the channel axis of a multichannel element, the
OpenCV (block) rank does not::

    |       Vector of Mat       |
    |<- vecDims ->|<- matDims ->|
    |      1      |      2      |
    |<-       block rank      ->|   3
    |<-          tensor rank            ->|   4
    [ vector:none , none, none  , CV_64FC3 ]
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from tfcv_opgen import types
from tfcv_opgen._exceptions import ShapeStructureError
from tfcv_opgen._logging import get_logger
from tfcv_opgen.shape.data import ContainerKind, DataDescriptor, Domain, parse_data_token
from tfcv_opgen.shape.dims import DimensionDescriptor, parse_dim_token

logger = get_logger(__name__)

# TensorShape refuses more dimensions than this.
MAX_ARRAY_RANK = 254


class ShapeKind(enum.Enum):
    """The four supported shape layouts."""

    SCALAR = "SCALAR"
    VEC_OF_PRIM = "VEC_OF_PRIM"
    VEC_OF_MAT = "VEC_OF_MAT"
    MAT = "MAT"

    @property
    def has_block(self) -> bool:
        return self in (ShapeKind.VEC_OF_MAT, ShapeKind.MAT)


@dataclass(frozen=True)
class ParsedShape:
    """Classified shape of one operator port.

    Attributes:
        array_rank: Rank of the TensorFlow tensor (counts the channel axis).
        block_rank: Number of dimension tokens (OpenCV rank).
        vector_dims: Number of leading vector dimensions.
        block_dims: Number of trailing Mat dimensions.
        dims: All dimension descriptors, in token order.
        block_dim_descriptors: The Mat dimensions after the last vector one.
        data: The parsed data descriptor.
        kind: The shape layout.
        declaration: C++ type of the whole container (``vector<Mat>``).
        element_declaration: C++ type of one block (``Mat``,
            ``Matx<float, 3, 3>``), only set for kinds that hold blocks.
    """

    array_rank: int
    block_rank: int
    vector_dims: int
    block_dims: int
    dims: Tuple[DimensionDescriptor, ...]
    block_dim_descriptors: Tuple[DimensionDescriptor, ...]
    data: DataDescriptor
    kind: ShapeKind
    declaration: str
    element_declaration: Optional[str] = None


def array_rank_of(block_rank: int, data: DataDescriptor) -> int:
    """Tensor rank of ``block_rank`` dimensions holding ``data``."""
    if data.is_cv and data.channels > 1:
        # A multichannel element contributes one extra tensor axis.
        return block_rank + 1
    return block_rank


def _classify(vector_dims: int, block_rank: int, domain: Domain, tokens: Sequence) -> ShapeKind:
    if vector_dims == 0:
        if domain is Domain.CV:
            if block_rank == 0:
                raise ShapeStructureError(
                    "Invalid shape format: scalar of OpenCV type is not allowed", token=tokens
                )
            return ShapeKind.MAT
        if block_rank > 0:
            raise ShapeStructureError(
                "Invalid shape format: Mat of primary type is not allowed", token=tokens
            )
        return ShapeKind.SCALAR

    if vector_dims == block_rank:
        if domain is Domain.CV:
            raise ShapeStructureError(
                "Invalid shape format: vector of OpenCV type is not allowed", token=tokens
            )
        return ShapeKind.VEC_OF_PRIM

    if domain is Domain.STD:
        raise ShapeStructureError(
            "Invalid shape format: Mat of primary type is not allowed", token=tokens
        )
    return ShapeKind.VEC_OF_MAT


def declare_vector(core: str, layers: int) -> str:
    """Wrap ``core`` in ``layers`` levels of ``vector<...>``."""
    for _ in range(layers):
        core = f"vector<{core}>"
    return core


def _declare_element(
    data: DataDescriptor, block_dims: Tuple[DimensionDescriptor, ...], tokens: Sequence
) -> str:
    container = data.container
    if not container.is_fixed:
        return ContainerKind.MAT.value

    if any(dim.is_dynamic for dim in block_dims):
        raise ShapeStructureError(
            "Invalid shape format: dynamic dimension size is not allowed for static Mat type",
            token=tokens,
        )
    if container is ContainerKind.VEC and len(block_dims) > 1:
        raise ShapeStructureError(
            "Invalid shape format: Vec type should be one-dimensional", token=tokens
        )

    sizes = [str(dim.size) for dim in block_dims]
    if container is ContainerKind.MATX and len(sizes) == 1:
        # A one-axis Matx is a single row.
        sizes.insert(0, "1")
    return f"{container.value}<{types.depth_to_scalar(data.depth)}, {', '.join(sizes)}>"


def classify_shape(tokens: Sequence[Union[str, int]]) -> ParsedShape:
    """Parse and classify a shape descriptor.

    Args:
        tokens: Dimension tokens followed by one data token.

    Returns:
        The immutable :class:`ParsedShape`.

    Raises:
        ShapeError: Any token is malformed or the layout is unsupported.

    Example::

        shape = classify_shape(["vector:none", "100", "CV_8S"])
        shape.kind                  # => ShapeKind.VEC_OF_MAT
        shape.declaration           # => "vector<Mat>"
        (shape.vector_dims, shape.block_dims)   # => (1, 1)
    """
    if isinstance(tokens, (str, bytes)) or not isinstance(tokens, Sequence):
        raise ShapeStructureError("Invalid arguments: no shape array found.", token=tokens)
    if len(tokens) == 0:
        raise ShapeStructureError("Invalid shape format: empty shape array.", token=tokens)

    data = parse_data_token(tokens[-1])
    dims = tuple(parse_dim_token(token) for token in tokens[:-1])

    block_rank = len(dims)
    array_rank = array_rank_of(block_rank, data)
    if array_rank > MAX_ARRAY_RANK:
        raise ShapeStructureError(
            f"Invalid shape format: rank {array_rank} exceeds {MAX_ARRAY_RANK}", token=tokens
        )

    last_vector = -1
    for idx, dim in enumerate(dims):
        if dim.is_vector:
            last_vector = idx
    if any(not dim.is_vector for dim in dims[:max(last_vector, 0)]):
        raise ShapeStructureError(
            "Invalid shape format: Mat of vector or vector of Mat of vector is not allowed",
            token=tokens,
        )

    vector_dims = last_vector + 1
    block_dims = block_rank - vector_dims
    block_dim_descriptors = dims[vector_dims:]

    kind = _classify(vector_dims, block_rank, data.domain, tokens)

    element_declaration: Optional[str] = None
    if kind is ShapeKind.SCALAR:
        declaration = data.type_name
    elif kind is ShapeKind.VEC_OF_PRIM:
        declaration = declare_vector(data.type_name, vector_dims)
    else:
        element_declaration = _declare_element(data, block_dim_descriptors, tokens)
        declaration = declare_vector(element_declaration, vector_dims)

    logger.debug(
        "classified %s as %s (tensor rank %d, vector dims %d, block dims %d)",
        list(tokens), kind.value, array_rank, vector_dims, block_dims,
    )
    return ParsedShape(
        array_rank=array_rank,
        block_rank=block_rank,
        vector_dims=vector_dims,
        block_dims=block_dims,
        dims=dims,
        block_dim_descriptors=block_dim_descriptors,
        data=data,
        kind=kind,
        declaration=declaration,
        element_declaration=element_declaration,
    )
