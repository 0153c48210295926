"""Planet and Moon position API routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from orbital_engine.api.deps import get_body_provider, resolve_time, vector
from orbital_engine.api.schemas import BodiesResponse, BodyPositionResponse
from orbital_engine.core.bodies import CelestialBodyProvider

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/positions", response_model=BodiesResponse)
def get_body_positions(
    at: Optional[datetime] = Query(default=None),
    provider: CelestialBodyProvider = Depends(get_body_provider),
):
    """Heliocentric planets plus the Moon, in scene units."""
    when = resolve_time(at)
    positions = list(provider.all_planet_positions(when).values())
    positions.append(provider.moon_heliocentric_position(when))
    return BodiesResponse(
        datetime_utc=when.isoformat(),
        bodies=[
            BodyPositionResponse(body=p.body, scene_position=vector(p.position))
            for p in positions
        ],
    )
