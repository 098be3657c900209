"""Type tables shared by the shape parser and the code generator.

Three vocabularies meet in a generated kernel:

- **OpenCV depth codes** (``8U``, ``32F``, ...), the element depth of a
  ``Mat``/``Matx``/``Vec``;
- **C++ scalar types** (``uint8_t``, ``float``, ...), used in ``at<T>()``,
  ``Vec<T, n>`` and the ``tensor<T, N>()`` map of a TensorFlow tensor;
- **TensorFlow dtype names** (``uint8``, ``float32``, ...), used in
  ``REGISTER_OP``.

Primitive data descriptors (``char``, ``int``, ``float``, ``double``) are
mapped onto the same tables through their OpenCV depth.
"""

from __future__ import annotations

from typing import Dict

from tfcv_opgen._exceptions import UnsupportedTypeError

# fmt: off
_DEPTH_TO_SCALAR: Dict[str, str] = {
    "8U":  "uint8_t",
    "8S":  "int8_t",
    "16U": "uint16_t",
    "16S": "int16_t",
    "32S": "int32_t",
    "32F": "float",
    "64F": "double",
}

_DEPTH_TO_ARRAY: Dict[str, str] = {
    "8U":  "uint8",
    "8S":  "int8",
    "16U": "uint16",
    "16S": "int16",
    "32S": "int32",
    "32F": "float32",
    "64F": "float64",
}

_PRIMITIVE_TO_DEPTH: Dict[str, str] = {
    "char":   "8S",
    "int":    "32S",
    "float":  "32F",
    "double": "64F",
}
# fmt: on

_SCALAR_TO_DEPTH: Dict[str, str] = {v: k for k, v in _DEPTH_TO_SCALAR.items()}

#: The seven depth codes OpenCV supports, in OpenCV's own order.
DEPTHS = tuple(_DEPTH_TO_SCALAR)

#: Primitive type names accepted as data descriptors.
PRIMITIVES = tuple(_PRIMITIVE_TO_DEPTH)

_FLOATING_DEPTHS = frozenset({"32F", "64F"})


def _lookup(table: Dict[str, str], key: str, what: str) -> str:
    try:
        return table[key]
    except (KeyError, TypeError):
        raise UnsupportedTypeError(f"Unsupported {what}: {key}", token=key) from None


def depth_to_scalar(depth: str) -> str:
    """Map an OpenCV depth code to its C++ scalar type (``"16S"`` → ``"int16_t"``)."""
    return _lookup(_DEPTH_TO_SCALAR, depth, "OpenCV depth")


def depth_to_array(depth: str) -> str:
    """Map an OpenCV depth code to its TensorFlow dtype name (``"32F"`` → ``"float32"``)."""
    return _lookup(_DEPTH_TO_ARRAY, depth, "OpenCV depth")


def scalar_to_depth(scalar: str) -> str:
    """Inverse of :func:`depth_to_scalar`."""
    return _lookup(_SCALAR_TO_DEPTH, scalar, "C++ scalar type")


def primitive_to_depth(primitive: str) -> str:
    """Map a primitive type name to its OpenCV type constant (``"int"`` → ``"CV_32S"``)."""
    return "CV_" + _lookup(_PRIMITIVE_TO_DEPTH, primitive, "primitive type")


def primitive_to_array(primitive: str) -> str:
    """Map a primitive type name to its TensorFlow dtype name (``"double"`` → ``"float64"``)."""
    return _DEPTH_TO_ARRAY[_lookup(_PRIMITIVE_TO_DEPTH, primitive, "primitive type")]


def primitive_to_array_scalar(primitive: str) -> str:
    """C++ element type of a tensor holding a primitive (``"char"`` → ``"int8_t"``).

    ``tensor<char, N>()`` does not compile against TensorFlow's type traits,
    so primitives go through their OpenCV depth.
    """
    return _DEPTH_TO_SCALAR[_lookup(_PRIMITIVE_TO_DEPTH, primitive, "primitive type")]


def is_floating_depth(depth: str) -> bool:
    """Return True for the floating-point depths (``32F``, ``64F``)."""
    _lookup(_DEPTH_TO_SCALAR, depth, "OpenCV depth")
    return depth in _FLOATING_DEPTHS
