"""Shared test fixtures for tfcv-opgen."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest


@pytest.fixture
def detect_edges_spec() -> Dict[str, Any]:
    """A spec touching every port role and an attribute."""
    return {
        "opName": "DetectEdges",
        "fnName": "detect_edges",
        "inputs": {"image": {"id": 0, "shape": ["none", "none", "CV_8UC3"]}},
        "outputs": {"edges": {"id": 2, "shape": ["none", "none", "CV_8U"]}},
        "inputoutputs": {"points": {"id": 1, "shape": ["vector:none", "vector:none", "float"]}},
        "attributes": {"threshold": {"id": 3, "type": "float = 0.5"}},
    }


@pytest.fixture
def write_spec(tmp_path: Path) -> Callable[..., Path]:
    """Write a spec dict as ``<stem>.json`` under ``tmp_path``."""

    def _write(data: Any, stem: str = "detect_edges") -> Path:
        path = tmp_path / f"{stem}.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
