"""Structured logging for the op generator.

Every classified shape and every synthesized conversion is logged at DEBUG
level, so a surprising piece of generated C++ can be traced back to the
shape descriptor and the rule that produced it.

Usage:
    from tfcv_opgen._logging import get_logger
    logger = get_logger(__name__)
    logger.debug("classified %s as %s", tokens, kind)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional


# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

_LOG_FORMAT = "[tfcv-opgen] %(levelname)s %(name)s: %(message)s"
_LOG_FORMAT_VERBOSE = (
    "[tfcv-opgen %(asctime)s] %(levelname)s %(name)s (%(filename)s:%(lineno)d): %(message)s"
)

# Values: DEBUG, INFO, WARNING, ERROR, CRITICAL  (case-insensitive)
_ENV_LOG_LEVEL = "TFCV_OPGEN_LOG_LEVEL"

# When set to "1", use the verbose format that includes timestamps and line numbers.
_ENV_LOG_VERBOSE = "TFCV_OPGEN_LOG_VERBOSE"

_ROOT_NAME = "tfcv_opgen"


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------

_root_logger_configured = False


def _resolve_log_level() -> int:
    """Read the desired log level from the environment, defaulting to WARNING."""
    env_val = os.environ.get(_ENV_LOG_LEVEL, "").strip().upper()
    return getattr(logging, env_val, logging.WARNING)


def _configure_root_logger() -> None:
    """One-time setup of the ``tfcv_opgen`` logger hierarchy.

    A :class:`logging.StreamHandler` (stderr) is attached to the top-level
    ``tfcv_opgen`` logger so that every sub-logger (e.g.
    ``tfcv_opgen.codegen.loops``) inherits it.
    """
    global _root_logger_configured  # noqa: PLW0603
    if _root_logger_configured:
        return

    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(_resolve_log_level())

    # Only add our handler if one hasn't already been added (e.g. by a test
    # fixture or the user's own logging config).
    if not root.handlers:
        verbose = os.environ.get(_ENV_LOG_VERBOSE, "0").strip() == "1"
        fmt = _LOG_FORMAT_VERBOSE if verbose else _LOG_FORMAT
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    _root_logger_configured = True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Return a logger scoped under the ``tfcv_opgen`` namespace.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` that inherits the package's root handler.
    """
    _configure_root_logger()
    return logging.getLogger(name)


def set_log_level(level: Optional[str] = None) -> None:
    """Change the generator's log level at runtime.

    Args:
        level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"``,
            ``"CRITICAL"``.  If *None*, resets to the environment default.

    Example::

        import tfcv_opgen
        tfcv_opgen.set_log_level("DEBUG")  # see every classification
    """
    _configure_root_logger()
    root = logging.getLogger(_ROOT_NAME)
    if level is None:
        root.setLevel(_resolve_log_level())
    else:
        root.setLevel(getattr(logging, level.upper(), logging.WARNING))
