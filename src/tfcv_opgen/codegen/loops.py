"""Nested-loop synthesis between TensorFlow tensors and OpenCV containers.

For one port and one direction, :func:`synthesize` returns a
:class:`Conversion`: the size variable declarations, the copy statements,
and (tensor side) the output shape.  Every shape kind has one contract per
direction:

=============  ===========================================  ==========================================
Kind           Tensor -> OpenCV                             OpenCV -> Tensor
=============  ===========================================  ==========================================
SCALAR         ``T a_cv = a_in_data(0);``                   ``a_out_data(0) = a_cv;``
VEC_OF_PRIM    grow nested vectors, ``push_back`` values    sizes from ``.size()`` of first elements
VEC_OF_MAT     build one block per vector index, push it    vector sizes, then first block's sizes
MAT            allocate the block, copy through accessor    sizes from ``a_cv.size[i]`` or literals
=============  ===========================================  ==========================================

Names are stable per axis so that size declarations and loops agree::

    a_dims_<i>        loop index of axis i
    a_dims_size_<i>   extent of axis i

Example, a jagged vector of doubles::

    // input shape: [ vector:none, vector:none, double ]
    vector<vector<double>> a_cv(a_dims_size_0);
    for (int a_dims_0 = 0; a_dims_0 < a_dims_size_0; a_dims_0++) {
      for (int a_dims_1 = 0; a_dims_1 < a_dims_size_1; a_dims_1++) {
        if (std::isnan(a_in_data(a_dims_0, a_dims_1))) { break; }
        a_cv[a_dims_0].push_back(a_in_data(a_dims_0, a_dims_1));
      }
    }

A NaN in a rectangular, NaN-padded tensor marks the end of a row, which is
how variable row lengths travel through a tensor.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tfcv_opgen._logging import get_logger
from tfcv_opgen.codegen.ast import (
    Assign,
    BinOp,
    Break,
    Call,
    Declare,
    ElementAccess,
    Expr,
    ExprStmt,
    For,
    If,
    InitList,
    Literal,
    Member,
    MethodCall,
    Name,
    Stmt,
    String,
    Subscript,
    subscripts,
)
from tfcv_opgen.shape.classifier import ParsedShape, ShapeKind

logger = get_logger(__name__)


class Direction(enum.Enum):
    """Which way values are copied."""

    TENSOR_TO_CV = "tensor_to_cv"
    CV_TO_TENSOR = "cv_to_tensor"


@dataclass(frozen=True)
class PortNames:
    """C++ identifiers generated for one port."""

    name: str

    @property
    def tensor_in(self) -> str:
        return f"{self.name}_in"

    @property
    def tensor_out(self) -> str:
        return f"{self.name}_out"

    @property
    def data_in(self) -> str:
        return f"{self.name}_in_data"

    @property
    def data_out(self) -> str:
        return f"{self.name}_out_data"

    @property
    def cv(self) -> str:
        return f"{self.name}_cv"

    @property
    def shape(self) -> str:
        return f"{self.name}_shape"

    @property
    def mat_shape(self) -> str:
        return f"{self.name}_mat_shape"

    @property
    def mat(self) -> str:
        return f"{self.name}_mat"

    def index(self, axis: int) -> Name:
        return Name(f"{self.name}_dims_{axis}")

    def size(self, axis: int) -> Name:
        return Name(f"{self.name}_dims_size_{axis}")

    def indices(self, start: int, end: int) -> Tuple[Expr, ...]:
        return tuple(self.index(axis) for axis in range(start, end))

    def sizes(self, start: int, end: int) -> Tuple[Expr, ...]:
        return tuple(self.size(axis) for axis in range(start, end))


@dataclass(frozen=True)
class Conversion:
    """Synthesized copy code for one port.

    Attributes:
        direction: The copy direction.
        sizes: Size variable declarations (and extent checks).
        body: Container declarations and the copy loops.
        shape: Output tensor extents, OpenCV -> Tensor only.
        empty_guard: Condition under which the container is empty and
            ``sizes``/``body`` must be skipped, OpenCV -> Tensor only.
        empty_shape: Output tensor extents to allocate when ``empty_guard``
            holds.
    """

    direction: Direction
    sizes: Tuple[Stmt, ...] = ()
    body: Tuple[Stmt, ...] = ()
    shape: Tuple[Expr, ...] = ()
    empty_guard: Optional[Expr] = None
    empty_shape: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class _Level:
    """One loop of a nest, with statements before and after the inner loop."""

    var: str
    bound: Expr
    head: Tuple[Stmt, ...] = ()
    tail: Tuple[Stmt, ...] = ()


def nest(levels: Sequence[_Level], inner: Sequence[Stmt]) -> Tuple[Stmt, ...]:
    """Wrap ``inner`` in ``levels`` (outermost first), innermost loop built first."""
    body: Tuple[Stmt, ...] = tuple(inner)
    for level in reversed(levels):
        body = (For(level.var, level.bound, level.head + body + level.tail),)
    return body


def _zeros(count: int) -> Tuple[Expr, ...]:
    return tuple(Literal(0) for _ in range(count))


def _declare_size(names: PortNames, axis: int, value: Expr) -> Stmt:
    return Declare(
        "int32", names.size(axis).text,
        init=Call(Name("static_cast<int32>"), (value,)), const=True,
    )


def _requires(condition: Expr, message: str) -> Stmt:
    return ExprStmt(Call(Name("OP_REQUIRES"), (
        Name("context"),
        condition,
        Call(Name("errors::InvalidArgument"), (String(message),)),
    )))


def _block_copy(
    names: PortNames, shape: ParsedShape, target: Expr, direction: Direction
) -> Tuple[Stmt, ...]:
    """Innermost copy statements between a tensor element and a block element.

    The block is indexed from the first block axis; the tensor by all axes,
    plus the channel index for multichannel data.
    """
    data = shape.data
    block_index = names.indices(shape.vector_dims, shape.block_rank)
    tensor_index = names.indices(0, shape.block_rank)
    element = ElementAccess(target, data.container, block_index, data.element_type)

    if direction is Direction.TENSOR_TO_CV:
        tensor = Name(names.data_in)
    else:
        tensor = Name(names.data_out)

    pairs: List[Tuple[Expr, Expr]] = []
    if data.channels == 1:
        pairs.append((element, Call(tensor, tensor_index)))
    else:
        # Channel counts are small constants; unroll instead of looping.
        for channel in range(data.channels):
            pairs.append((
                Subscript(element, Literal(channel)),
                Call(tensor, tensor_index + (Literal(channel),)),
            ))

    if direction is Direction.TENSOR_TO_CV:
        return tuple(Assign(cv_side, tf_side) for cv_side, tf_side in pairs)
    return tuple(Assign(tf_side, cv_side) for cv_side, tf_side in pairs)


# ---------------------------------------------------------------------------
# Tensor -> OpenCV
# ---------------------------------------------------------------------------


def _tensor_sizes(names: PortNames, shape: ParsedShape) -> Tuple[Stmt, ...]:
    stmts: List[Stmt] = [
        _declare_size(names, axis, MethodCall(Name(names.tensor_in), "dim_size", (Literal(axis),)))
        for axis in range(shape.array_rank)
    ]
    data = shape.data
    if shape.kind.has_block and data.container.is_fixed:
        for axis, dim in enumerate(shape.block_dim_descriptors, start=shape.vector_dims):
            stmts.append(_requires(
                BinOp("==", names.size(axis), Literal(dim.size)),
                f"{names.name} must have {dim.size} elements in dimension {axis}",
            ))
    if shape.kind.has_block and data.channels > 1:
        stmts.append(_requires(
            BinOp("==", names.size(shape.block_rank), Literal(data.channels)),
            f"{names.name} must have {data.channels} channels in dimension {shape.block_rank}",
        ))
    return tuple(stmts)


def _vector_levels(
    names: PortNames, shape: ParsedShape, warn: Callable[[int], None]
) -> List[_Level]:
    """Loops over the vector axes, each one growing its vector layer.

    The outermost vector is pre-sized when it holds further vectors; deeper
    layers gain one element per iteration, after the NaN early-stop check,
    so a short row ends up short.
    """
    cv = Name(names.cv)
    data = shape.data
    levels: List[_Level] = []
    for axis in range(shape.vector_dims):
        head: List[Stmt] = []
        if axis > 0 and shape.dims[axis].is_dynamic:
            if data.is_floating:
                probe = Call(
                    Name(names.data_in),
                    names.indices(0, axis + 1) + _zeros(shape.array_rank - axis - 1),
                )
                head.append(If(Call(Name("std::isnan"), (probe,)), (Break(),)))
            else:
                warn(axis)
        if 0 < axis < shape.vector_dims - 1:
            layer = subscripts(cv, names.indices(0, axis))
            head.append(ExprStmt(MethodCall(layer, "emplace_back")))
        levels.append(_Level(names.index(axis).text, names.size(axis), tuple(head)))
    return levels


def _declare_outer_vector(names: PortNames, shape: ParsedShape) -> Stmt:
    if shape.vector_dims > 1:
        return Declare(shape.declaration, names.cv, args=(names.size(0),))
    return Declare(shape.declaration, names.cv)


def _push_target(names: PortNames, shape: ParsedShape) -> Expr:
    """The vector layer that receives innermost values."""
    return subscripts(Name(names.cv), names.indices(0, shape.vector_dims - 1))


def _scalar_to_cv(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    body = (Declare(shape.declaration, names.cv, init=Call(Name(names.data_in), (Literal(0),))),)
    return Conversion(Direction.TENSOR_TO_CV, body=body)


def _vec_of_prim_to_cv(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    value = Call(Name(names.data_in), names.indices(0, shape.vector_dims))
    push = ExprStmt(MethodCall(_push_target(names, shape), "push_back", (value,)))
    body = (_declare_outer_vector(names, shape),) + nest(_vector_levels(names, shape, warn), [push])
    return Conversion(Direction.TENSOR_TO_CV, sizes=_tensor_sizes(names, shape), body=body)


def _declare_block(names: PortNames, shape: ParsedShape, var: str, dims_name: str, first_axis: int) -> Tuple[Stmt, ...]:
    """Allocate one block holding the axes from ``first_axis`` on."""
    if shape.data.container.is_fixed:
        return (Declare(shape.element_declaration, var),)
    return (Declare("Mat", var, args=(
        Literal(shape.block_rank - first_axis), Name(dims_name), Name(shape.data.cv_type),
    )),)


def _block_levels(names: PortNames, shape: ParsedShape) -> List[_Level]:
    return [
        _Level(names.index(axis).text, names.size(axis))
        for axis in range(shape.vector_dims, shape.block_rank)
    ]


def _vec_of_mat_to_cv(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    body: List[Stmt] = [_declare_outer_vector(names, shape)]
    if not shape.data.container.is_fixed:
        body.append(Declare(
            "int", names.mat_shape,
            init=InitList(names.sizes(shape.vector_dims, shape.block_rank)),
            const=True, array=True,
        ))

    mat = Name(names.mat)
    inner: List[Stmt] = list(_declare_block(names, shape, names.mat, names.mat_shape, shape.vector_dims))
    inner.extend(nest(
        _block_levels(names, shape),
        _block_copy(names, shape, mat, Direction.TENSOR_TO_CV),
    ))
    inner.append(ExprStmt(MethodCall(_push_target(names, shape), "push_back", (mat,))))

    body.extend(nest(_vector_levels(names, shape, warn), inner))
    return Conversion(Direction.TENSOR_TO_CV, sizes=_tensor_sizes(names, shape), body=tuple(body))


def _mat_to_cv(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    body: List[Stmt] = []
    if not shape.data.container.is_fixed:
        body.append(Declare(
            "int", names.shape, init=InitList(names.sizes(0, shape.block_rank)),
            const=True, array=True,
        ))
    body.extend(_declare_block(names, shape, names.cv, names.shape, 0))
    body.extend(nest(
        _block_levels(names, shape),
        _block_copy(names, shape, Name(names.cv), Direction.TENSOR_TO_CV),
    ))
    return Conversion(Direction.TENSOR_TO_CV, sizes=_tensor_sizes(names, shape), body=tuple(body))


# ---------------------------------------------------------------------------
# OpenCV -> Tensor
# ---------------------------------------------------------------------------


def _output_shape(names: PortNames, shape: ParsedShape) -> Tuple[Expr, ...]:
    extents = names.sizes(0, shape.block_rank)
    if shape.array_rank > shape.block_rank:
        extents += (Literal(shape.data.channels),)
    return extents


def _empty_shape(shape: ParsedShape) -> Tuple[Expr, ...]:
    """Extents of the zero-element tensor written for an empty container."""
    extents: List[Expr] = [Literal(0)]
    extents.extend(Literal(dim.size or 0) for dim in shape.dims[1:])
    if shape.array_rank > shape.block_rank:
        extents.append(Literal(shape.data.channels))
    return tuple(extents)


def _vector_sizes(names: PortNames, shape: ParsedShape) -> List[Stmt]:
    # Rectangular containers are assumed: every size comes from the first element.
    cv = Name(names.cv)
    return [
        _declare_size(names, axis, MethodCall(subscripts(cv, _zeros(axis)), "size"))
        for axis in range(shape.vector_dims)
    ]


def _block_sizes(names: PortNames, shape: ParsedShape, block: Expr) -> List[Stmt]:
    stmts: List[Stmt] = []
    for offset, dim in enumerate(shape.block_dim_descriptors):
        axis = shape.vector_dims + offset
        if shape.data.container.is_fixed:
            value: Expr = Literal(dim.size)
        else:
            value = Subscript(Member(block, "size"), Literal(offset))
        stmts.append(_declare_size(names, axis, value))
    return stmts


def _all_levels(names: PortNames, shape: ParsedShape) -> List[_Level]:
    return [_Level(names.index(axis).text, names.size(axis)) for axis in range(shape.block_rank)]


def _scalar_to_tensor(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    body = (Assign(Call(Name(names.data_out), (Literal(0),)), Name(names.cv)),)
    return Conversion(Direction.CV_TO_TENSOR, body=body)


def _vec_of_prim_to_tensor(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    index = names.indices(0, shape.vector_dims)
    copy = Assign(Call(Name(names.data_out), index), subscripts(Name(names.cv), index))
    return Conversion(
        Direction.CV_TO_TENSOR,
        sizes=tuple(_vector_sizes(names, shape)),
        body=nest(_all_levels(names, shape), [copy]),
        shape=_output_shape(names, shape),
        empty_guard=MethodCall(Name(names.cv), "empty"),
        empty_shape=_empty_shape(shape),
    )


def _vec_of_mat_to_tensor(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    cv = Name(names.cv)
    sizes = _vector_sizes(names, shape)
    sizes.extend(_block_sizes(names, shape, subscripts(cv, _zeros(shape.vector_dims))))
    block = subscripts(cv, names.indices(0, shape.vector_dims))
    return Conversion(
        Direction.CV_TO_TENSOR,
        sizes=tuple(sizes),
        body=nest(_all_levels(names, shape), _block_copy(names, shape, block, Direction.CV_TO_TENSOR)),
        shape=_output_shape(names, shape),
        empty_guard=MethodCall(cv, "empty"),
        empty_shape=_empty_shape(shape),
    )


def _mat_to_tensor(names: PortNames, shape: ParsedShape, warn) -> Conversion:
    cv = Name(names.cv)
    return Conversion(
        Direction.CV_TO_TENSOR,
        sizes=tuple(_block_sizes(names, shape, cv)),
        body=nest(_all_levels(names, shape), _block_copy(names, shape, cv, Direction.CV_TO_TENSOR)),
        shape=_output_shape(names, shape),
    )


_SYNTHESIZERS: Dict[Tuple[ShapeKind, Direction], Callable[..., Conversion]] = {
    (ShapeKind.SCALAR, Direction.TENSOR_TO_CV): _scalar_to_cv,
    (ShapeKind.VEC_OF_PRIM, Direction.TENSOR_TO_CV): _vec_of_prim_to_cv,
    (ShapeKind.VEC_OF_MAT, Direction.TENSOR_TO_CV): _vec_of_mat_to_cv,
    (ShapeKind.MAT, Direction.TENSOR_TO_CV): _mat_to_cv,
    (ShapeKind.SCALAR, Direction.CV_TO_TENSOR): _scalar_to_tensor,
    (ShapeKind.VEC_OF_PRIM, Direction.CV_TO_TENSOR): _vec_of_prim_to_tensor,
    (ShapeKind.VEC_OF_MAT, Direction.CV_TO_TENSOR): _vec_of_mat_to_tensor,
    (ShapeKind.MAT, Direction.CV_TO_TENSOR): _mat_to_tensor,
}


def synthesize(name: str, shape: ParsedShape, direction: Direction) -> Conversion:
    """Build the copy code of port ``name`` for ``direction``.

    Args:
        name: The port name; all generated identifiers derive from it.
        shape: The port's classified shape.
        direction: ``TENSOR_TO_CV`` for inputs, ``CV_TO_TENSOR`` for outputs.

    Returns:
        The :class:`Conversion`, still as statement trees.
    """
    names = PortNames(name)

    def warn(axis: int) -> None:
        logger.warning(
            "%s: dimension %d is a dynamic vector dimension of %s elements; "
            "integers have no NaN end marker, so every row is copied to the full tensor extent",
            name, axis, shape.data.scalar_type,
        )

    conversion = _SYNTHESIZERS[(shape.kind, direction)](names, shape, warn)
    logger.debug(
        "synthesized %s conversion for %s (%s, %d loops deep)",
        direction.value, name, shape.kind.value, shape.block_rank,
    )
    return conversion
