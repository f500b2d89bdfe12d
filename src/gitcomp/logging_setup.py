"""Logging setup for the gitcomp CLI."""

from __future__ import annotations

import logging
import os
import sys

from gitcomp.constants import DEBUG_ENV_VAR

_TRUTHY_VALUES = frozenset({"1", "true", "yes"})

LOG_FORMAT = "%(name)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s // %(filename)s:%(lineno)d"


def debug_from_env() -> bool:
    """Check ``GITCOMP_DEBUG`` (accepts 1/true/yes, case-insensitive)."""
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY_VALUES


def init_logger(debug: bool = False) -> None:
    """Send gitcomp log records to stderr.

    stdout is reserved for candidates, so nothing is ever logged there.
    Only warnings are shown unless *debug* or ``GITCOMP_DEBUG`` is set.
    """
    debug = debug or debug_from_env()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT if debug else LOG_FORMAT))

    logger = logging.getLogger("gitcomp")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
