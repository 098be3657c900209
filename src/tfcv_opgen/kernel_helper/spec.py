"""Declarative operator specification.

An OpSpec describes a custom operator at the level its author thinks
about it: named ports with shape descriptors, named attributes with type
expressions, and the C++ function that does the work.  Every shape and
attribute is parsed when the spec is built, so a spec that constructs
successfully always renders.

Spec files are JSON::

    {
      "opName": "DetectEdges",
      "fnName": "detect_edges",
      "device": "DEVICE_CPU",
      "inputs":       {"image": {"id": 0, "shape": ["none", "none", "CV_8UC3"]}},
      "outputs":      {"edges": {"id": 1, "shape": ["none", "none", "CV_8U"]}},
      "inputoutputs": {},
      "attributes":   {"threshold": {"id": 2, "type": "float = 0.5"}}
    }

``opName`` and ``fnName`` default to the file name.
"""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Union

from tfcv_opgen._casing import pascal_case, snake_case
from tfcv_opgen._exceptions import SpecError
from tfcv_opgen.attrs import AttrType, parse_attr_type
from tfcv_opgen.shape.classifier import ParsedShape, classify_shape

DEFAULT_DEVICE = "DEVICE_CPU"


class PortRole(enum.Enum):
    """How a port travels between the kernel and the user function."""

    INPUT = "inputs"
    OUTPUT = "outputs"
    INPUT_OUTPUT = "inputoutputs"

    @property
    def is_input(self) -> bool:
        return self is not PortRole.OUTPUT

    @property
    def is_output(self) -> bool:
        return self is not PortRole.INPUT


@dataclass
class PortSpec:
    """One tensor port.

    Attributes:
        id: Position of the argument in the user function call.
        name: C++ identifier prefix of the port.
        role: Input, output, or both.
        tokens: The raw shape descriptor.
        shape: The classified shape (computed).
    """

    id: int
    name: str
    role: PortRole
    tokens: Sequence[Union[str, int]]
    shape: ParsedShape = field(init=False)

    def __post_init__(self) -> None:
        self.shape = classify_shape(self.tokens)

    @property
    def registered_input_name(self) -> str:
        """Input-outputs register their input side as ``<name>_in``."""
        if self.role is PortRole.INPUT_OUTPUT:
            return f"{self.name}_in"
        return self.name


@dataclass
class AttrSpec:
    """One operator attribute (``type = default``)."""

    id: int
    name: str
    expression: str
    attr: AttrType = field(init=False)

    def __post_init__(self) -> None:
        self.attr = parse_attr_type(self.expression)


@dataclass
class OpSpec:
    """Declarative specification of a TensorFlow custom operator.

    Attributes:
        op_name: Operator name (PascalCase, e.g. ``DetectEdges``).
        fn_name: The C++ function called by the kernel.
        ports: Every input, output and input-output port.
        attrs: Operator attributes.
        device: TensorFlow device the kernel is registered for.
    """

    op_name: str
    fn_name: str
    ports: List[PortSpec] = field(default_factory=list)
    attrs: List[AttrSpec] = field(default_factory=list)
    device: str = DEFAULT_DEVICE

    def __post_init__(self) -> None:
        """Validate names and ids."""
        if not self.op_name:
            raise SpecError("OpSpec.op_name cannot be empty")
        if not self.op_name[0].isupper():
            raise SpecError(
                f"OpSpec.op_name should be PascalCase, got '{self.op_name}'. "
                "Example: 'DetectEdges'",
                token=self.op_name,
            )
        if not self.fn_name:
            raise SpecError("OpSpec.fn_name cannot be empty")

        seen_ids: Dict[int, str] = {}
        seen_names = set()
        for item in list(self.ports) + list(self.attrs):
            if item.id in seen_ids:
                raise SpecError(
                    f"Duplicate id {item.id}: '{seen_ids[item.id]}' and '{item.name}'",
                    token=item.id,
                )
            if item.name in seen_names:
                raise SpecError(f"Duplicate name '{item.name}'", token=item.name)
            seen_ids[item.id] = item.name
            seen_names.add(item.name)

    @property
    def inputs(self) -> List[PortSpec]:
        """Ports read from input tensors, in registration order."""
        return sorted((p for p in self.ports if p.role.is_input), key=lambda p: p.id)

    @property
    def outputs(self) -> List[PortSpec]:
        """Ports written to output tensors, in registration order."""
        return sorted((p for p in self.ports if p.role.is_output), key=lambda p: p.id)

    @property
    def sorted_attrs(self) -> List[AttrSpec]:
        return sorted(self.attrs, key=lambda a: a.id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the spec file format."""
        data: Dict[str, Any] = {
            "opName": self.op_name,
            "fnName": self.fn_name,
            "device": self.device,
        }
        for role in PortRole:
            data[role.value] = {
                p.name: {"id": p.id, "shape": list(p.tokens)}
                for p in self.ports if p.role is role
            }
        data["attributes"] = {
            a.name: {"id": a.id, "type": a.expression} for a in self.attrs
        }
        return data


def _entries(data: Mapping[str, Any], section: str) -> List[tuple]:
    entries = data.get(section) or {}
    if not isinstance(entries, Mapping):
        raise SpecError(f"'{section}' must be an object mapping names to entries", token=section)

    result = []
    for raw_name, entry in entries.items():
        name = raw_name.strip()
        if not isinstance(entry, Mapping):
            raise SpecError(f"{section}.{name} must be an object", token=raw_name)
        entry_id = entry.get("id")
        if not isinstance(entry_id, int) or isinstance(entry_id, bool):
            raise SpecError(f"{section}.{name} needs an integer 'id'", token=entry_id)
        result.append((name, entry_id, entry))
    return result


def op_spec_from_dict(data: Mapping[str, Any], default_name: str) -> OpSpec:
    """Build an :class:`OpSpec` from parsed spec JSON.

    ``default_name`` (usually the file stem) supplies ``opName`` and
    ``fnName`` when the spec leaves them out.
    """
    if not isinstance(data, Mapping):
        raise SpecError("An operator spec must be a JSON object", token=data)

    ports: List[PortSpec] = []
    for role in PortRole:
        for name, entry_id, entry in _entries(data, role.value):
            if "shape" not in entry:
                raise SpecError(f"{role.value}.{name} has no 'shape'", token=name)
            ports.append(PortSpec(entry_id, name, role, entry["shape"]))

    attrs: List[AttrSpec] = []
    for name, entry_id, entry in _entries(data, "attributes"):
        if "type" not in entry:
            raise SpecError(f"attributes.{name} has no 'type'", token=name)
        attrs.append(AttrSpec(entry_id, name, entry["type"]))

    return OpSpec(
        op_name=pascal_case(data.get("opName") or default_name),
        fn_name=snake_case(data.get("fnName") or default_name),
        ports=ports,
        attrs=attrs,
        device=data.get("device") or DEFAULT_DEVICE,
    )


def load_op_spec(path: Union[str, "os.PathLike[str]"]) -> OpSpec:
    """Read and validate a JSON spec file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SpecError(f"Cannot read spec file {path}: {e}", token=str(path)) from e
    except json.JSONDecodeError as e:
        raise SpecError(f"Invalid JSON in {path}: {e}", token=str(path)) from e

    stem = os.path.splitext(os.path.basename(path))[0]
    return op_spec_from_dict(data, stem)
