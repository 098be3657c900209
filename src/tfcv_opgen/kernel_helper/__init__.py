"""TensorFlow custom-op scaffolding for OpenCV functions.

Wrapping an OpenCV routine as a TensorFlow op means writing the op
registration, a shape function, an ``OpKernel`` that converts every
tensor into the container the routine expects and back, and a Python
loader.  This package generates all of it from one JSON spec:

1. ``OpSpec`` / ``load_op_spec()``: declarative operator specification
2. ``render_kernel()``: the kernel source for one operator
3. ``scaffold()``: render a spec file and write ``<stem>_op.cc``
4. ``render_wrapper()``: the ``tf.load_op_library`` loader module

Usage::

    from tfcv_opgen.kernel_helper import RenderOptions, scaffold

    scaffold("ops/detect_edges.json", options=RenderOptions(header="edges.hpp"))
"""

from tfcv_opgen.kernel_helper.scaffold import (
    RenderOptions,
    render_kernel,
    render_wrapper,
    scaffold,
    write_wrapper,
)
from tfcv_opgen.kernel_helper.spec import (
    AttrSpec,
    OpSpec,
    PortRole,
    PortSpec,
    load_op_spec,
    op_spec_from_dict,
)

__all__ = [
    "AttrSpec",
    "OpSpec",
    "PortRole",
    "PortSpec",
    "RenderOptions",
    "load_op_spec",
    "op_spec_from_dict",
    "render_kernel",
    "render_wrapper",
    "scaffold",
    "write_wrapper",
]
