"""tfcv-opgen: TensorFlow custom ops around OpenCV functions.

A TensorFlow op is fed tensors; an OpenCV routine wants ``Mat``, ``Matx``,
``Vec``, ``std::vector`` or plain C++ values.  tfcv-opgen generates the
kernel in between from a short JSON description of each port's shape.

Architecture::

    ┌──────────────────────────────────────────────────────┐
    │  tfcv_opgen.cli / tfcv_opgen.kernel_helper            │
    │  spec files, kernel + loader assembly                 │
    ├──────────────────────────────────────────────────────┤
    │  tfcv_opgen.codegen                                   │
    │  statement trees, copy loops, per-port fragments      │
    ├──────────────────────────────────────────────────────┤
    │  tfcv_opgen.shape / tfcv_opgen.types                  │
    │  shape descriptor parsing and classification          │
    └──────────────────────────────────────────────────────┘

Shape descriptors
-----------------
A port's shape is a list of dimension tokens followed by one data token::

    ["none", "none", "CV_8UC3"]          # Mat, 2-D, 3 channels
    ["vector:none", "3", "3", "CV_32F:Matx"]   # vector<Matx<float, 3, 3>>
    ["vector:none", "vector:none", "double"]   # vector<vector<double>>
    ["int"]                              # int

Usage::

    from tfcv_opgen import classify_shape

    classify_shape(["vector:none", "100", "CV_8S"]).declaration
    # => "vector<Mat>"

Environment Variables
---------------------
``TFCV_OPGEN_LOG_LEVEL``
    Set to ``DEBUG`` to see every classification and conversion.
    Default: ``WARNING``.
``TFCV_OPGEN_LOG_VERBOSE``
    Set to ``1`` for timestamps and source locations in log lines.
"""

from __future__ import annotations

__version__ = "0.3.0"

from tfcv_opgen._logging import set_log_level
from tfcv_opgen.attrs import AttrType, parse_attr_type
from tfcv_opgen.codegen import Conversion, Direction, synthesize
from tfcv_opgen.kernel_helper import OpSpec, RenderOptions, load_op_spec, render_kernel, scaffold
from tfcv_opgen.shape import ParsedShape, ShapeKind, classify_shape

__all__ = [
    "AttrType",
    "Conversion",
    "Direction",
    "OpSpec",
    "ParsedShape",
    "RenderOptions",
    "ShapeKind",
    "__version__",
    "classify_shape",
    "load_op_spec",
    "parse_attr_type",
    "render_kernel",
    "scaffold",
    "set_log_level",
    "synthesize",
]
