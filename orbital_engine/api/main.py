"""Orbital Engine FastAPI service entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orbital_engine.api.routers import bodies, comets, missions, stations
from orbital_engine.core.bodies import AstropyEphemeris, CelestialBodyProvider, EphemerisSource
from orbital_engine.core.tle_parser import TLECache
from orbital_engine.data.stations import default_tle_cache
from orbital_engine.utils.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(
        "Orbital Engine starting up (%d element sets cached)", len(app.state.tle_cache)
    )
    yield
    logger.info("Orbital Engine shutting down")


def create_app(
    tle_cache: Optional[TLECache] = None,
    ephemeris: Optional[EphemerisSource] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application; tests inject their own cache and ephemeris."""
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Orbital Engine",
        description="Time-driven positions for comets, stations, probes and planets",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tle_cache = tle_cache if tle_cache is not None else default_tle_cache()
    app.state.body_provider = CelestialBodyProvider(ephemeris or AstropyEphemeris())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(comets.router, prefix="/api/comets", tags=["Comets"])
    app.include_router(stations.router, prefix="/api/stations", tags=["Stations"])
    app.include_router(missions.router, prefix="/api/missions", tags=["Missions"])
    app.include_router(bodies.router, prefix="/api/bodies", tags=["Bodies"])

    @app.get("/api/health")
    async def health_check():
        return {"status": "ok", "service": "Orbital Engine"}

    return app


app = create_app()
