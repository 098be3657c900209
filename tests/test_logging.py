"""Tests for the package logger."""

from __future__ import annotations

import logging

import pytest

from tfcv_opgen import set_log_level
from tfcv_opgen._logging import get_logger


class TestLogging:
    """Logger hierarchy and runtime level changes."""

    def test_child_logger_inherits_handler(self) -> None:
        logger = get_logger("tfcv_opgen.codegen.loops")
        assert logger.name == "tfcv_opgen.codegen.loops"
        assert logging.getLogger("tfcv_opgen").handlers

    def test_set_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        root = logging.getLogger("tfcv_opgen")
        set_log_level("debug")
        assert root.level == logging.DEBUG

        monkeypatch.setenv("TFCV_OPGEN_LOG_LEVEL", "ERROR")
        set_log_level()
        assert root.level == logging.ERROR

        monkeypatch.delenv("TFCV_OPGEN_LOG_LEVEL")
        set_log_level()
        assert root.level == logging.WARNING
