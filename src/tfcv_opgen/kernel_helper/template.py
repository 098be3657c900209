"""Source templates for the generated kernel and its Python loader.

Both are ``str.format`` templates; literal C++ braces are doubled.  Every
placeholder that receives a block of fragments is already indented by
:func:`fill_section` to the column it appears at.
"""

from __future__ import annotations

import textwrap
from typing import Iterable

KERNEL_TEMPLATE = """\
/** This file was generated automatically, please don't modify it unless you know what you are doing. **/

#include <cmath>

#include "tensorflow/core/framework/op_kernel.h"
#include "tensorflow/core/framework/shape_inference.h"

#include "opencv2/core.hpp"

#include "{header}"

using namespace std;
using namespace cv;
{using_namespaces}
namespace tensorflow {{

using shape_inference::InferenceContext;

REGISTER_OP("{op_name}")
{registration}
  .SetShapeFn([](InferenceContext* c) {{
{shape_fns}
    return Status::OK();
  }});

class {op_name}Op : public OpKernel {{
 public:
  explicit {op_name}Op(OpKernelConstruction* context) : OpKernel(context) {{
{get_attrs}
  }}

  void Compute(OpKernelContext* context) override {{
{compute_input}

{compute_execute}

{compute_output}
  }}

 private:
{declare_attrs}
}};

REGISTER_KERNEL_BUILDER(Name("{op_name}").Device({device}), {op_name}Op);

}}  // namespace tensorflow
"""

WRAPPER_TEMPLATE = """\
# This file was generated automatically, please don't modify it unless you know what you are doing.
import os.path

import tensorflow as tf

_op_module = tf.load_op_library(os.path.join(
    tf.compat.v1.resource_loader.get_data_files_path(), '{library}'
))

{bindings}
"""


def fill_section(fragments: Iterable[str], level: int) -> str:
    """Join fragments with newlines, indented ``level`` template steps (2 spaces)."""
    text = "\n".join(fragment for fragment in fragments if fragment)
    return textwrap.indent(text, "  " * level)
