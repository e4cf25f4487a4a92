# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging helpers for mta-hooks.

Handlers, level and format are configured once by the entry points
(:mod:`mta_hooks.server`, :mod:`mta_hooks.cli`) through
:func:`configure_logging`; modules only ask for a named logger.

Example:
    Typical usage in a module::

        from mta_hooks.logger import get_logger

        logger = get_logger(__name__)
        logger.info("hook endpoint called")
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "mta_hooks") -> logging.Logger:
    """Return the standard library logger bound to ``name``."""
    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger.

    Args:
        level: Level name. Defaults to ``MTH_LOG_LEVEL`` or INFO.
    """
    level_name = (level or os.getenv("MTH_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        force=True,  # avoid duplicate handlers when reconfigured
    )
