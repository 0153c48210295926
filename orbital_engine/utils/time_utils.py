"""Time conversion utilities for the orbital engine.

Provides conversions between Python datetime, Julian Date, the Earth
rotation angle and TLE epoch formats, plus display helpers for the
simulation clock. All datetimes are timezone-aware UTC; naive values
are interpreted as UTC.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np
from sgp4.api import jday

from orbital_engine.utils.constants import (
    AU_KM,
    DEG_TO_RAD,
    ERA_AT_J2000,
    ERA_RATE,
    JD_J2000,
    JD_UNIX_EPOCH,
    SECONDS_PER_DAY,
    TLE_CENTURY_PIVOT,
    TWO_PI,
)


@dataclass(frozen=True, slots=True)
class JulianDate:
    """Split Julian Date.

    The integer-ish and fractional parts are kept apart for numerical
    precision, matching the convention of the sgp4 library.
    """

    jd: float
    fr: float

    @property
    def full(self) -> float:
        return self.jd + self.fr


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_to_jd(dt: datetime) -> JulianDate:
    """Convert Python datetime (UTC) to split Julian Date."""
    dt = ensure_utc(dt)
    seconds = dt.second + dt.microsecond / 1e6
    jd_val, fr_val = jday(
        dt.year, dt.month, dt.day, dt.hour, dt.minute, seconds
    )
    return JulianDate(jd=jd_val, fr=fr_val)


def julian_to_datetime(jd: float) -> datetime:
    """Convert a Julian date to a UTC datetime."""
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
        days=jd - JD_UNIX_EPOCH
    )


def days_between(start: datetime, end: datetime) -> float:
    """Signed number of days from ``start`` to ``end``."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / SECONDS_PER_DAY


def days_since_jd(epoch_jd: float, dt: datetime) -> float:
    """Days elapsed from a Julian-date epoch to ``dt``.

    Computed from the split Julian date so the large integer part
    cancels before the fraction is added back.
    """
    jd = datetime_to_jd(dt)
    return (jd.jd - epoch_jd) + jd.fr


def earth_rotation_angle(dt: datetime) -> float:
    """Earth rotation angle in radians, linear in days since J2000.

    This is the IAU 2000 rotation angle; it stands in for GMST in the
    simplified satellite model.
    """
    jd = datetime_to_jd(dt)
    days = (jd.jd - JD_J2000) + jd.fr
    rotations = ERA_AT_J2000 + ERA_RATE * days
    return (rotations % 1.0) * TWO_PI


def tle_epoch_to_datetime(epoch_year: int, epoch_day: float) -> datetime:
    """Convert TLE epoch (2-digit year + fractional day-of-year) to datetime.

    Year rule: 0-56 -> 2000-2056; 57-99 -> 1957-1999.
    """
    if epoch_year < TLE_CENTURY_PIVOT:
        full_year = 2000 + epoch_year
    else:
        full_year = 1900 + epoch_year

    base = datetime(full_year, 1, 1, tzinfo=timezone.utc)
    return base + timedelta(days=epoch_day - 1.0)


def sun_position_eci(dt: datetime) -> np.ndarray:
    """Approximate Sun position in the Earth-centred inertial frame (km).

    Uses simplified solar position model accurate to ~1 degree,
    sufficient for umbra shadow detection.
    """
    jd = datetime_to_jd(dt)
    t = (jd.full - JD_J2000) / 36525.0

    # Mean longitude of Sun (degrees)
    l0 = (280.46646 + 36000.76983 * t) % 360.0
    # Mean anomaly of Sun (degrees)
    m = (357.52911 + 35999.05029 * t) % 360.0
    m_rad = m * DEG_TO_RAD

    # Equation of center
    c = 1.9146 * math.sin(m_rad) + 0.02 * math.sin(2.0 * m_rad)
    sun_lon = (l0 + c) * DEG_TO_RAD

    # Obliquity of ecliptic
    obliquity = (23.439 - 0.013 * t) * DEG_TO_RAD

    dist_km = (1.00014 - 0.01671 * math.cos(m_rad)) * AU_KM

    return np.array([
        dist_km * math.cos(sun_lon),
        dist_km * math.sin(sun_lon) * math.cos(obliquity),
        dist_km * math.sin(sun_lon) * math.sin(obliquity),
    ])


def format_sim_time(dt: datetime) -> str:
    """Format simulation time as ``YYYY-MM-DD HH:MM:SS UTC``."""
    return ensure_utc(dt).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_speed(speed: float) -> str:
    """Human-readable speed multiplier, e.g. ``3 day/s`` or ``10x``."""
    if speed >= 2592000:
        return f"{speed / 2592000:.0f} month/s"
    if speed >= 604800:
        return f"{speed / 604800:.0f} week/s"
    if speed >= 86400:
        return f"{speed / 86400:.0f} day/s"
    if speed >= 3600:
        return f"{speed / 3600:.0f} hr/s"
    if speed >= 60:
        return f"{speed / 60:.0f} min/s"
    return f"{speed:g}x"
