# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""FastAPI application serving message bodies to data hook endpoints.

Routes:
    GET /msdata/{filename}: raw message stored for a running data hook.
    GET /status: liveness probe.
    GET /metrics: Prometheus metrics of the hook pipeline.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from pathlib import Path

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse, Response

from .msdata import MSDATA_PATH, is_msdata_filename
from .prometheus import HookMetrics
from .session import HookConfigProvider


def create_app(
    config: HookConfigProvider,
    metrics: HookMetrics | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager] | None = None,
) -> FastAPI:
    """Build the REST server application.

    Args:
        config: Provides ``temp_directory()``, where the data hook stores messages.
        metrics: Collector exposed on ``/metrics``. A fresh one is created
            when omitted.
        lifespan: Optional lifespan context manager.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(title="MTA Hooks", lifespan=lifespan)
    app.state.config = config
    app.state.metrics = metrics or HookMetrics()

    @app.get(f"{MSDATA_PATH}/{{filename}}")
    async def get_message_body(filename: str) -> FileResponse:
        """Return a message stored by a running data hook."""
        if not is_msdata_filename(filename):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")
        path = Path(app.state.config.temp_directory()) / filename
        if not path.is_file():
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Not found")
        return FileResponse(path, media_type="application/octet-stream")

    @app.get("/status")
    async def get_status() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/metrics")
    async def get_metrics() -> Response:
        return Response(
            content=app.state.metrics.generate_latest(),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    return app


__all__ = ["create_app"]
