"""Assemble kernel sources and Python loaders from operator specs.

Generated files:
    <stem>_op.cc  : REGISTER_OP, shape function, OpKernel and
                    REGISTER_KERNEL_BUILDER for one operator
    <module>.py   : (wrapper) ``tf.load_op_library`` bindings for a
                    compiled library holding several operators
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tfcv_opgen._casing import snake_case
from tfcv_opgen._logging import get_logger
from tfcv_opgen.codegen import fragments
from tfcv_opgen.kernel_helper.spec import OpSpec, PortRole, load_op_spec
from tfcv_opgen.kernel_helper.template import KERNEL_TEMPLATE, WRAPPER_TEMPLATE, fill_section

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """Per-render settings.

    Attributes:
        device: Kernel device; ``None`` keeps the spec's device.
        header: User header included by the kernel; ``None`` means
            ``<fn_name>.hpp``.
        namespaces: Extra namespaces brought in with ``using namespace``.
    """

    device: Optional[str] = None
    header: Optional[str] = None
    namespaces: Tuple[str, ...] = field(default_factory=tuple)


def _registration(spec: OpSpec) -> List[str]:
    lines = [fragments.register_input(p.registered_input_name, p.shape) for p in spec.inputs]
    lines.extend(fragments.register_attr(a.name, a.attr) for a in spec.sorted_attrs)
    lines.extend(fragments.register_output(p.name, p.shape) for p in spec.outputs)
    return lines


def render_kernel(spec: OpSpec, options: Optional[RenderOptions] = None) -> str:
    """Render the complete kernel source of ``spec``."""
    options = options or RenderOptions()
    attrs = spec.sorted_attrs

    arguments = [(p.id, f"{p.name}_cv") for p in spec.ports]
    arguments.extend((a.id, f"{a.name}_") for a in attrs)
    pure_outputs = [
        (p.name, p.shape)
        for p in sorted(spec.ports, key=lambda p: p.id)
        if p.role is PortRole.OUTPUT
    ]

    using = "".join(f"using namespace {ns};\n" for ns in options.namespaces)

    source = KERNEL_TEMPLATE.format(
        header=options.header or f"{spec.fn_name}.hpp",
        using_namespaces=using,
        op_name=spec.op_name,
        device=options.device or spec.device,
        registration=fill_section(_registration(spec), 1),
        shape_fns=fill_section(
            (fragments.shape_fn(i, p.shape) for i, p in enumerate(spec.outputs)), 2
        ),
        get_attrs=fill_section((fragments.get_attr(a.name) for a in attrs), 2),
        compute_input=fill_section(
            (fragments.compute_input(p.name, i, p.shape) for i, p in enumerate(spec.inputs)), 2
        ),
        compute_execute=fill_section(
            [fragments.compute_execute(spec.fn_name, pure_outputs, arguments)], 2
        ),
        compute_output=fill_section(
            (fragments.compute_output(p.name, i, p.shape) for i, p in enumerate(spec.outputs)), 2
        ),
        declare_attrs=fill_section((fragments.declare_attr(a.name, a.attr) for a in attrs), 1),
    )
    logger.debug(
        "rendered kernel %s: %d inputs, %d outputs, %d attributes",
        spec.op_name, len(spec.inputs), len(spec.outputs), len(attrs),
    )
    return source


def render_wrapper(op_names: Iterable[str], library: str) -> str:
    """Render a Python module binding ``op_names`` from the shared ``library``.

    TensorFlow exposes an op registered as ``DetectEdges`` under the name
    ``detect_edges``.
    """
    bindings = [snake_case(name) for name in op_names]
    return WRAPPER_TEMPLATE.format(
        library=library,
        bindings="\n".join(f"{name} = _op_module.{name}" for name in bindings),
    )


def kernel_filename(spec_path: str) -> str:
    return f"{os.path.splitext(os.path.basename(spec_path))[0]}_op.cc"


def scaffold(
    spec_path: str,
    output_dir: Optional[str] = None,
    options: Optional[RenderOptions] = None,
) -> Dict[str, str]:
    """Render the spec at ``spec_path`` and write ``<stem>_op.cc``.

    Args:
        spec_path: JSON operator spec.
        output_dir: Where to write; defaults to the spec file's directory.
        options: Render settings.

    Returns:
        Dict mapping the written path to its content.
    """
    spec = load_op_spec(spec_path)
    source = render_kernel(spec, options)

    out_dir = output_dir or os.path.dirname(os.path.abspath(spec_path))
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, kernel_filename(spec_path))
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(source)

    logger.info("wrote %s", out_path)
    return {out_path: source}


def write_wrapper(op_names: Sequence[str], library: str, output_path: str) -> str:
    """Write the loader module to ``output_path`` and return its content."""
    source = render_wrapper(op_names, library)
    parent = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(parent, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(source)
    logger.info("wrote %s", output_path)
    return source
