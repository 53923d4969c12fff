"""
Signal Heatmap Service
======================

FastAPI adapter over the HeatmapEngine.

The engine is pull-based; this module only re-exposes its commands and
snapshots over HTTP for capture clients and presentation clients.

Endpoints:
    GET    /                  - Service information
    GET    /health            - Liveness probe
    GET    /metrics           - Engine metrics
    POST   /recording/start   - Start a session
    POST   /recording/stop    - Stop the session and run the pipeline
    POST   /samples           - Record one sample
    DELETE /samples           - Clear all data
    GET    /samples/export    - Raw sample log as JSON
    POST   /samples/import    - Replace the log with a JSON sample set
    GET    /cells             - Current cells
    GET    /dead-zones        - Current dead zones
    GET    /statistics        - Current statistics
    GET    /snapshot          - Everything above in one payload
    GET    /config            - Heatmap configuration
    PATCH  /config            - Update configuration (values are clamped)
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from signal_heatmap.config import settings
from signal_heatmap.engine import HeatmapEngine
from signal_heatmap.errors import DataFormatError
from signal_heatmap.models.input import RecordRequest
from signal_heatmap.models.output import (
    CellView,
    DeadZoneView,
    StatisticsView,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_engine: Optional[HeatmapEngine] = None
_startup_time: float = 0.0


def get_engine() -> HeatmapEngine:
    """Return the engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = HeatmapEngine(config=settings.heatmap.model_copy())
    return _engine


# =============================================================================
# Request Models
# =============================================================================

class ConfigUpdate(BaseModel):
    """Partial configuration update. Omitted fields are left unchanged."""

    cell_size: Optional[float] = None
    smoothing_factor: Optional[float] = None
    interpolation_enabled: Optional[bool] = None
    interpolation_radius: Optional[int] = None
    dead_zone_threshold: Optional[int] = None
    cluster_distance: Optional[float] = None
    min_cluster_size: Optional[int] = None
    sampling_interval: Optional[float] = None


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _engine, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")
    _engine = HeatmapEngine(config=settings.heatmap.model_copy())

    yield

    if _engine is not None and _engine.is_recording:
        logger.info("Stopping active recording on shutdown")
        _engine.stop_recording()
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="SignalHeatmap",
    description="3D signal coverage heatmap engine",
    version=settings.service.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "SignalHeatmap",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": get_engine().status_message,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """Liveness probe. Always returns 200 while the process runs."""
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Engine metrics for observability."""
    return JSONResponse(get_engine().metrics())


@app.post("/recording/start")
async def start_recording() -> JSONResponse:
    engine = get_engine()
    started = engine.start_recording()
    return JSONResponse({"started": started, "status": engine.status_message})


@app.post("/recording/stop")
async def stop_recording() -> JSONResponse:
    engine = get_engine()
    result = engine.stop_recording()
    return JSONResponse({
        "stopped": result is not None,
        "status": engine.status_message,
        "statistics": StatisticsView.from_statistics(engine.statistics()).model_dump(mode="json"),
    })


@app.post("/samples")
async def record_sample(body: RecordRequest) -> JSONResponse:
    """Record one sample. Ignored (accepted=false) outside a session."""
    try:
        accepted = get_engine().record(
            (body.position.x, body.position.y, body.position.z),
            body.strength,
            ssid=body.ssid,
            bssid=body.bssid,
            frequency=body.frequency,
        )
    except ValueError as e:
        logger.warning(f"Sample rejected: {e}")
        return JSONResponse({"error": str(e)}, status_code=422)
    return JSONResponse({"accepted": accepted})


@app.delete("/samples")
async def clear_samples() -> JSONResponse:
    engine = get_engine()
    engine.clear()
    return JSONResponse({"status": engine.status_message})


@app.get("/samples/export")
async def export_samples() -> Response:
    return Response(
        content=get_engine().export_samples(),
        media_type="application/json",
    )


@app.post("/samples/import")
async def import_samples(request: Request) -> JSONResponse:
    """Replace the sample log. Malformed payloads return 400 and change nothing."""
    payload = await request.body()
    engine = get_engine()
    try:
        engine.import_samples(payload)
    except DataFormatError as e:
        logger.warning(f"Import rejected: {e.detail}")
        return JSONResponse({"error": str(e)}, status_code=400)
    return JSONResponse({
        "status": engine.status_message,
        "statistics": StatisticsView.from_statistics(engine.statistics()).model_dump(mode="json"),
    })


@app.get("/cells")
async def cells() -> JSONResponse:
    return JSONResponse([
        CellView.from_cell(c).model_dump(mode="json") for c in get_engine().cells()
    ])


@app.get("/dead-zones")
async def dead_zones() -> JSONResponse:
    return JSONResponse([
        DeadZoneView.from_zone(z).model_dump(mode="json") for z in get_engine().dead_zones()
    ])


@app.get("/statistics")
async def statistics() -> JSONResponse:
    stats = get_engine().statistics()
    return JSONResponse(StatisticsView.from_statistics(stats).model_dump(mode="json"))


@app.get("/snapshot")
async def snapshot() -> JSONResponse:
    return JSONResponse(get_engine().snapshot().model_dump(mode="json"))


@app.get("/config")
async def get_config() -> JSONResponse:
    return JSONResponse(get_engine().config.model_dump(mode="json"))


@app.patch("/config")
async def update_config(body: ConfigUpdate) -> JSONResponse:
    """Apply a partial update; out-of-range values are clamped."""
    config = get_engine().config
    for key, value in body.model_dump(exclude_none=True).items():
        setattr(config, key, value)
    logger.info(f"Configuration updated: {config.model_dump()}")
    return JSONResponse(config.model_dump(mode="json"))


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "signal_heatmap.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
