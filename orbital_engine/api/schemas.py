"""Pydantic schemas for API responses and requests."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Vector3(BaseModel):
    x: float
    y: float
    z: float


# --- Comets ---


class CometPositionResponse(BaseModel):
    id: str
    name: str
    datetime_utc: str
    position_au: Vector3
    scene_position: Vector3
    distance_au: float
    distance_label: str
    speed_kms: float
    tail_direction: Vector3
    visible: bool


class CometOrbitResponse(BaseModel):
    id: str
    segments: int
    points_au: list[Vector3]


# --- Stations ---


class StationPositionResponse(BaseModel):
    id: str
    name: str
    datetime_utc: str
    latitude: float
    longitude: float
    altitude_km: float
    velocity_kms: float
    region: str
    in_shadow: bool
    scene_position: Vector3
    tle_name: str


class GroundTrackPointResponse(BaseModel):
    datetime_utc: str
    latitude: float
    longitude: float
    altitude_km: float


class TLEUpload(BaseModel):
    line1: str = Field(..., min_length=69)
    line2: str = Field(..., min_length=69)
    name: Optional[str] = None


class TLEResponse(BaseModel):
    id: str
    name: str
    line1: str
    line2: str
    epoch: Optional[str] = None
    inclination: float
    mean_motion: float


# --- Missions ---


class MissionPositionResponse(BaseModel):
    id: str
    name: str
    datetime_utc: str
    position_au: Optional[Vector3] = None
    scene_position: Optional[Vector3] = None
    distance_au: Optional[float] = None
    light_time_hours: Optional[float] = None


class MilestoneResponse(BaseModel):
    date: str
    name: str
    description: str
    body: Optional[str] = None


# --- Bodies ---


class BodyPositionResponse(BaseModel):
    body: str
    scene_position: Vector3


class BodiesResponse(BaseModel):
    datetime_utc: str
    bodies: list[BodyPositionResponse]
