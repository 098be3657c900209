"""Per-port and per-attribute C++ fragments of a kernel source file.

Each function returns finished text (one line, or a block rendered at
indentation level 0) that the kernel template places in the matching
section:

- ``REGISTER_OP`` chain: :func:`register_input`, :func:`register_output`,
  :func:`register_attr`, :func:`shape_fn`
- kernel constructor and members: :func:`get_attr`, :func:`declare_attr`
- ``Compute``: :func:`compute_input`, :func:`compute_execute`,
  :func:`compute_output`
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from tfcv_opgen._casing import snake_case
from tfcv_opgen.attrs import AttrType
from tfcv_opgen.codegen.ast import (
    Call,
    Declare,
    Expr,
    ExprStmt,
    If,
    InitList,
    Literal,
    MethodCall,
    Name,
    Scope,
    Stmt,
    String,
    render,
)
from tfcv_opgen.codegen.loops import Direction, PortNames, synthesize
from tfcv_opgen.shape.classifier import ParsedShape

UNKNOWN_DIM = "InferenceContext::kUnknownDim"


# ── REGISTER_OP ────────────────────────────────────────────────────────────


def register_input(name: str, shape: ParsedShape) -> str:
    """``.Input("name: dtype")``."""
    return f'.Input("{snake_case(name)}: {shape.data.array_dtype}")'


def register_output(name: str, shape: ParsedShape) -> str:
    return f'.Output("{snake_case(name)}: {shape.data.array_dtype}")'


def register_attr(name: str, attr: AttrType) -> str:
    return f'.Attr("{snake_case(name)}: {attr}")'


def _inferred_dim(size) -> str:
    return UNKNOWN_DIM if size is None else str(size)


def shape_fn(index: int, shape: ParsedShape) -> str:
    """Shape inference statement for output ``index``.

    Uses the narrowest ``InferenceContext`` helper for the tensor rank; a
    multichannel element contributes its channel count as the last axis.

    Example::

        shape_fn(0, classify_shape(["none", "CV_64FC3"]))
        # => 'c->set_output(0, c->Matrix(InferenceContext::kUnknownDim, 3));'
    """
    extents = [_inferred_dim(dim.size) for dim in shape.dims]
    if shape.array_rank > shape.block_rank:
        extents.append(str(shape.data.channels))

    if shape.array_rank == 0:
        inferred = "c->Scalar()"
    elif shape.array_rank == 1:
        inferred = f"c->Vector({extents[0]})"
    elif shape.array_rank == 2:
        inferred = f"c->Matrix({extents[0]}, {extents[1]})"
    else:
        inferred = f"c->MakeShape({{ {', '.join(extents)} }})"
    return f"c->set_output({index}, {inferred});"


# ── Kernel members ─────────────────────────────────────────────────────────


def get_attr(name: str) -> str:
    return f'OP_REQUIRES_OK(context, context->GetAttr("{snake_case(name)}", &{name}_));'


def declare_attr(name: str, attr: AttrType) -> str:
    return f"{attr.cpp_type} {name}_;"


# ── Compute ────────────────────────────────────────────────────────────────


def _tensor_map(tensor: Expr, shape: ParsedShape, arrow: bool = False) -> Expr:
    """``t.tensor<T, rank>()``, or ``t.flat<T>()`` for a rank-0 tensor."""
    scalar = shape.data.array_scalar_type
    if shape.array_rank == 0:
        return MethodCall(tensor, f"flat<{scalar}>", arrow=arrow)
    return MethodCall(tensor, f"tensor<{scalar}, {shape.array_rank}>", arrow=arrow)


def compute_input(name: str, index: int, shape: ParsedShape) -> str:
    """Fetch input ``index``, check its rank and copy it into ``<name>_cv``.

    Example::

        const Tensor& a_in = context->input(0);
        OP_REQUIRES(context, a_in.dims() == 2,
          errors::InvalidArgument("a must be 2-dimensional", a_in.shape().DebugString()));
        auto a_in_data = a_in.tensor<float, 2>();
        const int32 a_dims_size_0 = static_cast<int32>(a_in.dim_size(0));
        ...
    """
    names = PortNames(name)
    tensor = Name(names.tensor_in)
    rank_check = ExprStmt(Call(Name("OP_REQUIRES"), (
        Name("context"),
        Name(f"{names.tensor_in}.dims() == {shape.array_rank}"),
        Call(Name("errors::InvalidArgument"), (
            String(f"{name} must be {shape.array_rank}-dimensional"),
            MethodCall(MethodCall(tensor, "shape"), "DebugString"),
        )),
    )))
    conversion = synthesize(name, shape, Direction.TENSOR_TO_CV)

    stmts: List[Stmt] = [
        Declare("Tensor&", names.tensor_in,
                init=MethodCall(Name("context"), "input", (Literal(index),), arrow=True),
                const=True),
        rank_check,
        Declare("auto", names.data_in, init=_tensor_map(tensor, shape)),
    ]
    stmts.extend(conversion.sizes)
    stmts.extend(conversion.body)
    return render(stmts)


def _allocate(index: int, tensor: str, extents: Sequence[Expr]) -> Stmt:
    shape = Call(Name("TensorShape"), (InitList(tuple(extents)),))
    allocate = MethodCall(
        Name("context"), "allocate_output",
        (Literal(index), shape, Name(f"&{tensor}")), arrow=True,
    )
    return ExprStmt(Call(Name("OP_REQUIRES_OK"), (Name("context"), allocate)))


def compute_output(name: str, index: int, shape: ParsedShape) -> str:
    """Allocate output ``index`` from ``<name>_cv`` and copy the values into it.

    Containers with vector dimensions may be empty; an empty one allocates
    a tensor whose first axis is 0 and skips the copy.  The copy always
    sits in its own block, so an input-output port can reuse the size
    names its input conversion declared.
    """
    names = PortNames(name)
    conversion = synthesize(name, shape, Direction.CV_TO_TENSOR)

    fill: List[Stmt] = list(conversion.sizes)
    fill.append(_allocate(index, names.tensor_out, conversion.shape))
    data_out = _tensor_map(Name(names.tensor_out), shape, arrow=True)
    fill.append(Declare("auto", names.data_out, init=data_out))
    fill.extend(conversion.body)

    stmts: List[Stmt] = [Declare("Tensor*", names.tensor_out, init=Name("nullptr"))]
    if conversion.empty_guard is None:
        stmts.append(Scope(tuple(fill)))
    else:
        empty = (_allocate(index, names.tensor_out, conversion.empty_shape),)
        stmts.append(If(conversion.empty_guard, empty, tuple(fill)))
    return render(stmts)


def compute_execute(
    fn_name: str,
    outputs: Sequence[Tuple[str, ParsedShape]],
    arguments: Sequence[Tuple[int, str]],
) -> str:
    """Declare the pure outputs and call the user function.

    Args:
        fn_name: Name of the user's C++ function.
        outputs: ``(name, shape)`` of every output that is not also an
            input; input-outputs were already declared by their input
            conversion.
        arguments: ``(id, C++ expression)`` of every port and attribute;
            the call passes them in id order.
    """
    stmts: List[Stmt] = [
        Declare(shape.declaration, PortNames(name).cv) for name, shape in outputs
    ]
    args = tuple(Name(expr) for _, expr in sorted(arguments, key=lambda item: item[0]))
    stmts.append(ExprStmt(Call(Name(fn_name), args)))
    return render(stmts)
