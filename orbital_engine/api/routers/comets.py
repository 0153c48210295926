"""Comet position API routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from orbital_engine.api.deps import resolve_time, vector
from orbital_engine.api.schemas import CometOrbitResponse, CometPositionResponse
from orbital_engine.core.coordinate_transforms import au_to_scene
from orbital_engine.core.kepler import KeplerState
from orbital_engine.data.comets import (
    Comet,
    comet_orbit,
    comet_position,
    comets_by_distance,
    get_comet,
)
from orbital_engine.utils.constants import COMET_VISIBILITY_RADIUS_AU
from orbital_engine.utils.formatting import format_comet_distance

logger = logging.getLogger(__name__)
router = APIRouter()


def _lookup(comet_id: str) -> Comet:
    try:
        return get_comet(comet_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown comet: {comet_id}")


def _response(comet: Comet, state: KeplerState, when: datetime) -> CometPositionResponse:
    return CometPositionResponse(
        id=comet.id,
        name=comet.name,
        datetime_utc=when.isoformat(),
        position_au=vector(state.position),
        scene_position=vector(au_to_scene(state.position)),
        distance_au=state.distance,
        distance_label=format_comet_distance(state.distance),
        speed_kms=state.speed,
        tail_direction=vector(state.direction),
        visible=state.distance < COMET_VISIBILITY_RADIUS_AU,
    )


@router.get("", response_model=list[CometPositionResponse])
def list_comets(at: Optional[datetime] = Query(default=None, description="UTC instant, default now")):
    """All bundled comets, nearest to the Sun first."""
    when = resolve_time(at)
    return [_response(comet, state, when) for comet, state in comets_by_distance(when)]


@router.get("/{comet_id}/position", response_model=CometPositionResponse)
def get_comet_position(comet_id: str, at: Optional[datetime] = Query(default=None)):
    comet = _lookup(comet_id)
    when = resolve_time(at)
    return _response(comet, comet_position(comet, when), when)


@router.get("/{comet_id}/orbit", response_model=CometOrbitResponse)
def get_comet_orbit(comet_id: str, segments: int = Query(default=256, ge=8, le=4096)):
    comet = _lookup(comet_id)
    points = comet_orbit(comet, segments=segments)
    return CometOrbitResponse(
        id=comet.id,
        segments=segments,
        points_au=[vector(p) for p in points],
    )
