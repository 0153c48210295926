"""Space station tracking API routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from orbital_engine.api.deps import get_tle_cache, resolve_time, vector
from orbital_engine.api.schemas import (
    GroundTrackPointResponse,
    StationPositionResponse,
    TLEResponse,
    TLEUpload,
)
from orbital_engine.core import propagator
from orbital_engine.core.tle_parser import (
    SatelliteElementSet,
    TLECache,
    TLEParseError,
    validate_tle_lines,
)
from orbital_engine.data.stations import SpaceStation, get_station
from orbital_engine.utils.formatting import region_for

logger = logging.getLogger(__name__)
router = APIRouter()


def _lookup(station_id: str) -> SpaceStation:
    try:
        return get_station(station_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown station: {station_id}")


def _element_set(cache: TLECache, station_id: str):
    try:
        return cache.get(station_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No element set for {station_id}")


@router.get("/{station_id}/position", response_model=StationPositionResponse)
def get_station_position(
    station_id: str,
    at: Optional[datetime] = Query(default=None),
    cache: TLECache = Depends(get_tle_cache),
):
    station = _lookup(station_id)
    element_set = _element_set(cache, station_id)
    when = resolve_time(at)
    state = propagator.propagate(element_set, when)

    return StationPositionResponse(
        id=station.id,
        name=station.name,
        datetime_utc=when.isoformat(),
        latitude=state.latitude,
        longitude=state.longitude,
        altitude_km=state.altitude,
        velocity_kms=state.speed,
        region=region_for(state.latitude, state.longitude),
        in_shadow=state.in_shadow,
        scene_position=vector(state.scene_position),
        tle_name=element_set.name,
    )


@router.get("/{station_id}/ground-track", response_model=list[GroundTrackPointResponse])
def get_ground_track(
    station_id: str,
    at: Optional[datetime] = Query(default=None),
    steps: int = Query(default=128, ge=1, le=2000),
    cache: TLECache = Depends(get_tle_cache),
):
    _lookup(station_id)
    element_set = _element_set(cache, station_id)
    track = propagator.ground_track(element_set, resolve_time(at), steps=steps)
    return [
        GroundTrackPointResponse(
            datetime_utc=p.datetime_utc.isoformat(),
            latitude=p.latitude,
            longitude=p.longitude,
            altitude_km=p.altitude,
        )
        for p in track
    ]


@router.put("/{station_id}/tle", response_model=TLEResponse)
def replace_tle(
    station_id: str,
    data: TLEUpload,
    cache: TLECache = Depends(get_tle_cache),
):
    """Replace the raw element lines for a station after validating them."""
    station = _lookup(station_id)
    line1, line2 = data.line1.rstrip(), data.line2.rstrip()
    try:
        validate_tle_lines(line1, line2)
    except TLEParseError as e:
        raise HTTPException(status_code=422, detail=f"Invalid TLE: {e}")
    catalog_number = SatelliteElementSet("", line1, line2).catalog_number
    if catalog_number != station.norad_id:
        raise HTTPException(
            status_code=422,
            detail=f"TLE is for NORAD {catalog_number}, not {station.name} ({station.norad_id})",
        )

    element_set = cache.replace(station_id, line1, line2, name=data.name)
    parsed = element_set.parse()
    return TLEResponse(
        id=station_id,
        name=element_set.name,
        line1=element_set.line1,
        line2=element_set.line2,
        epoch=parsed.epoch.isoformat() if parsed.epoch else None,
        inclination=parsed.inclination,
        mean_motion=parsed.mean_motion,
    )
