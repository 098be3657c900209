"""C++ code generation: statement trees, copy loops and kernel fragments.

Usage::

    from tfcv_opgen.codegen import Direction, render, synthesize
    from tfcv_opgen.shape import classify_shape

    conversion = synthesize("a", classify_shape(["none", "none", "CV_64F"]),
                            Direction.TENSOR_TO_CV)
    print(render(conversion.sizes + conversion.body))
"""

from tfcv_opgen.codegen.ast import render
from tfcv_opgen.codegen.loops import Conversion, Direction, PortNames, synthesize

__all__ = ["Conversion", "Direction", "PortNames", "render", "synthesize"]
