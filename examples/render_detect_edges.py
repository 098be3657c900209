#!/usr/bin/env python3
"""Demo: generate a TensorFlow kernel around an OpenCV edge detector.

Run it from the repository root:

    pip install -e .
    python examples/render_detect_edges.py

You'll see:
1. How each port's shape descriptor is classified
2. The copy loops generated for one input
3. The path of the kernel source written next to the spec

Compile the kernel together with a ``detect_edges.hpp`` that declares::

    void detect_edges(const Mat& image, vector<Vec<int32_t, 2>>& corners,
                      Mat& edges, Matx<double, 3, 3>& homography,
                      float low_threshold, float high_threshold, string color_order);
"""

from __future__ import annotations

import os

import tfcv_opgen
from tfcv_opgen.codegen import fragments

SPEC = os.path.join(os.path.dirname(os.path.abspath(__file__)), "detect_edges.json")

# ── Step 1: Classify the ports ──────────────────────────────────────────
spec = tfcv_opgen.load_op_spec(SPEC)
print(f"tfcv-opgen v{tfcv_opgen.__version__}: {spec.op_name} -> {spec.fn_name}()")
for port in sorted(spec.ports, key=lambda p: p.id):
    shape = port.shape
    print(f"  {port.name:<12} {port.role.name:<13} {shape.kind.value:<12} {shape.declaration}")
print()

# ── Step 2: Show one conversion ─────────────────────────────────────────
corners = next(p for p in spec.inputs if p.name == "corners")
print(fragments.compute_input(corners.name, 1, corners.shape))
print()

# ── Step 3: Write the kernel ────────────────────────────────────────────
for path in tfcv_opgen.scaffold(SPEC):
    print(f"Wrote {path}")
