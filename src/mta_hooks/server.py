# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""ASGI application entry point for uvicorn.

Usage:
    uvicorn mta_hooks.server:app --host 0.0.0.0 --port 8080

Environment variables:
    MTH_CONFIG: Path to config.ini (optional).
    MTH_LOG_LEVEL: Logging level (default: INFO).
    MTH_HOOK_*, MTH_REST_*, MTH_TEMP_DIR: see :mod:`mta_hooks.config_loader`.

The /metrics counters are filled by a HookPipeline. This standalone app runs
no pipeline, so they stay at zero; an MTA that wants them embeds
``create_app(config, metrics=pipeline.metrics)`` instead.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import create_app
from .config_loader import load_hooks_config
from .logger import configure_logging

configure_logging()
_logger = logging.getLogger(__name__)

_config = load_hooks_config(os.environ.get("MTH_CONFIG"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown of the REST server."""
    host, port = _config.rest_server_address()
    _logger.info(f"Serving message bodies from {_config.temp_directory()} (advertised as {host}:{port})")
    try:
        yield
    finally:
        _logger.info("REST server stopped")


app = create_app(_config, lifespan=lifespan)
