"""Voyager 1 and 2 trajectories and milestones.

The trajectories are an approximation built from known heliocentric
distances at key dates, sampled every 0.1 year. Positions are
heliocentric ecliptic, in AU. A real JPL Horizons export can be loaded
into :class:`~orbital_engine.core.ephemeris.Trajectory` in their place.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from orbital_engine.core.ephemeris import (
    Mission,
    MissionMilestone,
    Trajectory,
    TrajectorySample,
)
from orbital_engine.utils.constants import DEG_TO_RAD


def _date(iso: str) -> datetime:
    return datetime.fromisoformat(iso).replace(tzinfo=timezone.utc)


VOYAGER_1_MILESTONES: tuple[MissionMilestone, ...] = (
    MissionMilestone(_date("1977-09-05"), "Launch",
                     "Launched from Cape Canaveral aboard Titan IIIE rocket"),
    MissionMilestone(_date("1979-03-05"), "Jupiter Flyby",
                     "Closest approach to Jupiter at 349,000 km. Discovered "
                     "volcanic activity on Io.", body="jupiter"),
    MissionMilestone(_date("1980-11-12"), "Saturn Flyby",
                     "Closest approach to Saturn at 124,000 km. Studied "
                     "Titan's atmosphere.", body="saturn"),
    MissionMilestone(_date("1990-02-14"), "Pale Blue Dot",
                     "Turned cameras back to photograph Earth from 6 billion "
                     "km - the famous \"Pale Blue Dot\" image."),
    MissionMilestone(_date("2004-12-16"), "Termination Shock",
                     "Crossed the termination shock where solar wind slows "
                     "dramatically."),
    MissionMilestone(_date("2012-08-25"), "Interstellar Space",
                     "Became first human-made object to enter interstellar "
                     "space, crossing the heliopause."),
)

VOYAGER_2_MILESTONES: tuple[MissionMilestone, ...] = (
    MissionMilestone(_date("1977-08-20"), "Launch",
                     "Launched from Cape Canaveral, 16 days before Voyager 1 "
                     "(but on slower trajectory)"),
    MissionMilestone(_date("1979-07-09"), "Jupiter Flyby",
                     "Closest approach to Jupiter at 722,000 km.", body="jupiter"),
    MissionMilestone(_date("1981-08-26"), "Saturn Flyby",
                     "Closest approach to Saturn at 101,000 km.", body="saturn"),
    MissionMilestone(_date("1986-01-24"), "Uranus Flyby",
                     "First and only spacecraft to visit Uranus. Discovered 10 "
                     "new moons.", body="uranus"),
    MissionMilestone(_date("1989-08-25"), "Neptune Flyby",
                     "First and only spacecraft to visit Neptune. Discovered "
                     "Great Dark Spot.", body="neptune"),
    MissionMilestone(_date("2007-09-01"), "Termination Shock",
                     "Crossed the termination shock at 84 AU from the Sun."),
    MissionMilestone(_date("2018-11-05"), "Interstellar Space",
                     "Crossed the heliopause into interstellar space."),
)

# (decimal year, heliocentric distance in AU)
VOYAGER_1_CHECKPOINTS: tuple[tuple[float, float], ...] = (
    (1977.7, 1.0),  # launch
    (1979.2, 5.2),  # Jupiter
    (1980.9, 9.5),  # Saturn
    (1990.0, 40.0),  # Pale Blue Dot
    (2000.0, 76.0),
    (2012.0, 122.0),  # heliopause
    (2020.0, 150.0),
    (2026.0, 165.0),
)

VOYAGER_2_CHECKPOINTS: tuple[tuple[float, float], ...] = (
    (1977.6, 1.0),
    (1979.5, 5.2),
    (1981.7, 9.5),
    (1986.1, 19.2),  # Uranus
    (1989.7, 30.0),  # Neptune
    (2000.0, 63.0),
    (2018.0, 119.0),
    (2026.0, 137.0),
)


def _distance_at(year: float, checkpoints: tuple[tuple[float, float], ...]) -> float:
    y0, d0 = checkpoints[0]
    y1, d1 = checkpoints[-1]
    for (ya, da), (yb, db) in zip(checkpoints, checkpoints[1:]):
        if ya <= year <= yb:
            y0, d0, y1, d1 = ya, da, yb, db
            break
    return d0 + (year - y0) / (y1 - y0) * (d1 - d0)


def _decimal_year_to_date(year: float) -> datetime:
    year_int = math.floor(year)
    day_of_year = math.floor((year - year_int) * 365)
    return datetime(year_int, 1, 1, tzinfo=timezone.utc) + timedelta(days=day_of_year)


def generate_trajectory(
    checkpoints: tuple[tuple[float, float], ...],
    launch_year: float,
    base_angle_deg: float,
    elevation_deg: float,
    start_year: float | None = None,
    end_year: float | None = None,
    step_years: float = 0.1,
) -> Trajectory:
    """Approximate outbound spiral through the given distance checkpoints.

    The in-plane heading bends by ``base_angle_deg`` as gravity assists
    accumulate; ``elevation_deg`` tilts the path out of the ecliptic.
    Sampling spans the checkpoints unless ``start_year``/``end_year`` narrow it.
    """
    start_year = checkpoints[0][0] if start_year is None else start_year
    end_year = checkpoints[-1][0] if end_year is None else end_year
    samples: list[TrajectorySample] = []
    elevation = elevation_deg * DEG_TO_RAD
    n_steps = int(round((end_year - start_year) / step_years))

    for k in range(n_steps + 1):
        year = start_year + k * step_years
        dist = _distance_at(year, checkpoints)

        years_from_launch = year - launch_year
        if years_from_launch < 3:
            angle = 0.0
        elif years_from_launch < 5:
            angle = base_angle_deg * 0.3
        else:
            angle = base_angle_deg * min(1.0, (years_from_launch - 3) / 10)
        heading = angle * DEG_TO_RAD

        samples.append(
            TrajectorySample(
                timestamp=_decimal_year_to_date(year),
                x=dist * math.cos(heading) * math.cos(elevation),
                y=dist * math.sin(heading) * math.cos(elevation),
                z=dist * math.sin(elevation),
                distance=dist,
            )
        )

    return Trajectory(samples)


VOYAGER_1 = Mission(
    id="voyager1",
    name="Voyager 1",
    launch_date=_date("1977-09-05"),
    trajectory=generate_trajectory(VOYAGER_1_CHECKPOINTS, 1977.7, 35.0, 35.0),
    milestones=VOYAGER_1_MILESTONES,
    color=0x00FF88,
)

VOYAGER_2 = Mission(
    id="voyager2",
    name="Voyager 2",
    launch_date=_date("1977-08-20"),
    trajectory=generate_trajectory(VOYAGER_2_CHECKPOINTS, 1977.6, 55.0, -10.0),
    milestones=VOYAGER_2_MILESTONES,
    color=0x00AAFF,
)

MISSIONS: dict[str, Mission] = {m.id: m for m in (VOYAGER_1, VOYAGER_2)}


def get_mission(mission_id: str) -> Mission:
    """Look up a bundled mission; raises KeyError if unknown."""
    return MISSIONS[mission_id]
