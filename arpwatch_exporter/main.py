"""FastAPI application factory for the arpwatch exporter."""

from __future__ import annotations

import html
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, Response

from arpwatch_exporter import __version__
from arpwatch_exporter.config import Settings, get_settings
from arpwatch_exporter.devices import DeviceRefresher, RefreshLoop
from arpwatch_exporter.lib.auth import require_basic_auth
from arpwatch_exporter.lib.logger import configure_logging, get_logger
from arpwatch_exporter.lib.metrics import ExporterMetrics

logger = get_logger(__name__)

_LANDING_TEMPLATE = """<html>
<head><title>Arpwatch Exporter</title></head>
<body>
<h1>Arpwatch Exporter</h1>
<p><a href="{metrics_path}">Metrics</a></p>
</body>
</html>
"""


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    loop: RefreshLoop = app.state.refresh_loop
    loop.start()
    try:
        yield
    finally:
        await loop.stop()


def create_app(settings: Settings | None = None, metrics: ExporterMetrics | None = None) -> FastAPI:
    """Compose metrics, refresher, refresh loop and routes into one application."""

    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)
    if metrics is None:
        metrics = ExporterMetrics()
    refresher = DeviceRefresher(metrics)

    app = FastAPI(
        title="Arpwatch Exporter",
        version=__version__,
        lifespan=_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.refresher = refresher
    app.state.refresh_loop = RefreshLoop(refresher, settings.arpwatch_file, settings.refresh_interval_seconds)

    landing_page = _LANDING_TEMPLATE.format(metrics_path=html.escape(settings.telemetry_path, quote=True))

    async def metrics_endpoint(request: Request) -> Response:
        """Expose all instruments in the Prometheus text exposition format."""

        body, content_type = request.app.state.metrics.render()
        return Response(content=body, media_type=content_type)

    async def landing(request: Request) -> HTMLResponse:
        """Static landing page linking to the telemetry path."""

        return HTMLResponse(landing_page)

    gate = [Depends(require_basic_auth)]
    app.add_api_route(settings.telemetry_path, metrics_endpoint, methods=["GET"], dependencies=gate)
    app.add_api_route("/", landing, methods=["GET"], dependencies=gate, response_class=HTMLResponse)

    logger.info(
        "arpwatch.exporter.configured",
        extra={
            "listen_address": settings.listen_address,
            "telemetry_path": settings.telemetry_path,
            "arpwatch_file": settings.arpwatch_file,
            "refresh_interval_seconds": settings.refresh_interval_seconds,
            "basic_auth": "enabled" if settings.auth_enabled else "disabled",
        },
    )
    return app
