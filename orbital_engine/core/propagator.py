"""Simplified near-circular satellite propagation.

A lightweight stand-in for SGP4 that is adequate for visualising low,
nearly circular orbits such as crewed stations:

- mean anomaly advances linearly with the TLE mean motion and is used
  directly as the true anomaly (no Kepler solve);
- the radius follows the conic equation with the TLE eccentricity;
- the Earth-fixed frame is obtained with the linear Earth rotation
  angle, and latitude/longitude/altitude by spherical projection.

Drag, oblateness and luni-solar perturbations are not modelled, and
objects on eccentric orbits will be misplaced.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from orbital_engine.core.coordinate_transforms import (
    ecef_to_geographic,
    eci_to_ecef,
    km_to_scene,
    perifocal_to_frame,
)
from orbital_engine.core.tle_parser import ParsedElements, SatelliteElementSet
from orbital_engine.utils.constants import (
    DEG_TO_RAD,
    MINUTES_PER_DAY,
    MU_EARTH,
    R_EARTH,
    TWO_PI,
)
from orbital_engine.utils.time_utils import (
    earth_rotation_angle,
    ensure_utc,
    sun_position_eci,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SatelliteState:
    """State of a satellite at a single instant."""

    datetime_utc: datetime
    latitude: float  # degrees [-90, 90]
    longitude: float  # degrees (-180, 180]
    altitude: float  # km above the mean-radius sphere
    speed: float  # km/s
    position_eci: np.ndarray  # [x, y, z] km
    position_ecef: np.ndarray  # [x, y, z] km
    scene_position: np.ndarray  # ECI in scene units
    in_shadow: bool


@dataclass(frozen=True, slots=True)
class GroundTrackPoint:
    """A single point on a satellite's ground track."""

    datetime_utc: datetime
    latitude: float  # degrees
    longitude: float  # degrees
    altitude: float  # km


def semi_major_axis_km(mean_motion_rev_day: float) -> float:
    """a = (mu / n^2)^(1/3) with n converted to rad/s."""
    if not mean_motion_rev_day > 0:
        return math.nan
    n_rad_s = mean_motion_rev_day * TWO_PI / (MINUTES_PER_DAY * 60.0)
    return (MU_EARTH / (n_rad_s * n_rad_s)) ** (1.0 / 3.0)


def minutes_since_epoch(elements: ParsedElements, dt: datetime) -> float:
    if elements.epoch is None:
        return math.nan
    return (ensure_utc(dt) - elements.epoch).total_seconds() / 60.0


def is_in_shadow(position_eci: np.ndarray, sun_eci: np.ndarray) -> bool:
    """Cylindrical Earth shadow model for a single point."""
    sun_hat = sun_eci / np.linalg.norm(sun_eci)

    proj = np.dot(position_eci, sun_hat)
    if proj > 0:
        return False

    perp = position_eci - proj * sun_hat
    return bool(np.linalg.norm(perp) < R_EARTH)


def position_eci(elements: ParsedElements, dt: datetime) -> tuple[np.ndarray, float]:
    """ECI position (km) and semi-major axis (km) at ``dt``."""
    n_rad_min = elements.mean_motion * TWO_PI / MINUTES_PER_DAY
    mean_anomaly = elements.mean_anomaly * DEG_TO_RAD + n_rad_min * minutes_since_epoch(
        elements, dt
    )
    # Near-circular assumption: mean anomaly stands in for true anomaly
    nu = mean_anomaly

    a = semi_major_axis_km(elements.mean_motion)
    e = elements.eccentricity
    r = a * (1.0 - e * e) / (1.0 + e * math.cos(nu))

    pos = perifocal_to_frame(
        r * math.cos(nu),
        r * math.sin(nu),
        elements.raan * DEG_TO_RAD,
        elements.inclination * DEG_TO_RAD,
        elements.arg_perigee * DEG_TO_RAD,
    )
    return pos, a


def propagate(element_set: SatelliteElementSet, dt: datetime) -> SatelliteState:
    """Propagate a satellite to ``dt``.

    Pure function of its inputs; malformed fields propagate as NaN.
    """
    return propagate_parsed(element_set.parse(), dt)


def propagate_parsed(elements: ParsedElements, dt: datetime) -> SatelliteState:
    """Same as :func:`propagate` for an already-parsed element set."""
    dt = ensure_utc(dt)
    pos_eci, a = position_eci(elements, dt)

    pos_ecef = eci_to_ecef(pos_eci, earth_rotation_angle(dt))
    lat, lon, alt = ecef_to_geographic(pos_ecef)

    # Circular-orbit speed
    speed = math.sqrt(MU_EARTH / a) if a > 0 else math.nan

    if np.all(np.isfinite(pos_eci)):
        in_shadow = is_in_shadow(pos_eci, sun_position_eci(dt))
    else:
        in_shadow = False

    return SatelliteState(
        datetime_utc=dt,
        latitude=lat,
        longitude=lon,
        altitude=alt,
        speed=speed,
        position_eci=pos_eci,
        position_ecef=pos_ecef,
        scene_position=km_to_scene(pos_eci),
        in_shadow=in_shadow,
    )


def _sample_times(start: datetime, duration_minutes: float, steps: int) -> list[datetime]:
    steps = max(1, steps)
    return [
        start + timedelta(minutes=duration_minutes * i / steps)
        for i in range(steps + 1)
    ]


def _period_minutes(elements: ParsedElements, period_minutes: float | None) -> float:
    if period_minutes is not None:
        return period_minutes
    period = elements.period_minutes
    if math.isnan(period):
        logger.warning("Mean motion unavailable, path sampling uses a zero-length window")
        return 0.0
    return period


def ground_track(
    element_set: SatelliteElementSet,
    start: datetime,
    periods: float = 1.0,
    steps: int = 128,
    period_minutes: float | None = None,
) -> list[GroundTrackPoint]:
    """Lat/lon ground track sampled at even time steps over N orbital periods."""
    elements = element_set.parse()
    duration = _period_minutes(elements, period_minutes) * periods
    track: list[GroundTrackPoint] = []
    for t in _sample_times(ensure_utc(start), duration, steps):
        state = propagate_parsed(elements, t)
        track.append(
            GroundTrackPoint(
                datetime_utc=t,
                latitude=state.latitude,
                longitude=state.longitude,
                altitude=state.altitude,
            )
        )
    return track


def orbit_path(
    element_set: SatelliteElementSet,
    start: datetime,
    period_minutes: float | None = None,
    segments: int = 128,
) -> np.ndarray:
    """Scene-unit orbit path over one period, shape (segments + 1, 3)."""
    elements = element_set.parse()
    duration = _period_minutes(elements, period_minutes)
    points = [
        km_to_scene(position_eci(elements, t)[0])
        for t in _sample_times(ensure_utc(start), duration, segments)
    ]
    return np.array(points)
