"""Deep-space mission API routes."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from orbital_engine.api.deps import resolve_time, vector
from orbital_engine.api.schemas import MilestoneResponse, MissionPositionResponse
from orbital_engine.core.coordinate_transforms import au_to_scene
from orbital_engine.core.ephemeris import Mission, active_milestones, light_travel_time_hours
from orbital_engine.data.voyager import get_mission

router = APIRouter()


def _lookup(mission_id: str) -> Mission:
    try:
        return get_mission(mission_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown mission: {mission_id}")


@router.get("/{mission_id}/position", response_model=MissionPositionResponse)
def get_mission_position(mission_id: str, at: Optional[datetime] = Query(default=None)):
    """Interpolated position; all position fields are null before the data starts."""
    mission = _lookup(mission_id)
    when = resolve_time(at)
    sample = mission.position_at(when)

    if sample is None:
        return MissionPositionResponse(
            id=mission.id, name=mission.name, datetime_utc=when.isoformat()
        )

    return MissionPositionResponse(
        id=mission.id,
        name=mission.name,
        datetime_utc=when.isoformat(),
        position_au=vector(sample.position),
        scene_position=vector(au_to_scene(sample.position)),
        distance_au=sample.distance,
        light_time_hours=light_travel_time_hours(sample.distance),
    )


@router.get("/{mission_id}/milestones", response_model=list[MilestoneResponse])
def get_milestones(mission_id: str, at: Optional[datetime] = Query(default=None)):
    """Milestones reached at or before ``at``."""
    mission = _lookup(mission_id)
    return [
        MilestoneResponse(
            date=m.timestamp.date().isoformat(),
            name=m.name,
            description=m.description,
            body=m.body,
        )
        for m in active_milestones(mission.milestones, resolve_time(at))
    ]
