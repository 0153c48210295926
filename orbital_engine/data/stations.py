"""Crewed space stations and their bundled element sets.

The bundled TLEs are placeholders; a :class:`~orbital_engine.utils.tle_feed.TLEFeed`
replaces them with fresh CelesTrak data at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from orbital_engine.core.tle_parser import SatelliteElementSet, TLECache


@dataclass(frozen=True, slots=True)
class SpaceStation:
    id: str
    name: str
    norad_id: int
    description: str
    launch_date: str
    country: str
    color: int
    orbit_period_minutes: float  # approximate
    crew: Optional[int] = None


SPACE_STATIONS: tuple[SpaceStation, ...] = (
    SpaceStation(
        id="iss",
        name="International Space Station",
        norad_id=25544,
        description=(
            "Joint project between NASA, Roscosmos, JAXA, ESA, and CSA. The "
            "largest modular space station in low Earth orbit."
        ),
        launch_date="1998-11-20",
        crew=7,
        country="International",
        color=0x00FF88,
        orbit_period_minutes=93.0,
    ),
    SpaceStation(
        id="tiangong",
        name="Tiangong Space Station",
        norad_id=48274,  # CSS (Tianhe core module)
        description=(
            "China's modular space station, operational since 2021. Third "
            "generation following Tiangong-1 and Tiangong-2."
        ),
        launch_date="2021-04-29",
        crew=3,
        country="China",
        color=0xFF4444,
        orbit_period_minutes=92.0,
    ),
)

STATIONS_BY_ID: dict[str, SpaceStation] = {s.id: s for s in SPACE_STATIONS}

DEFAULT_TLES: dict[str, SatelliteElementSet] = {
    "iss": SatelliteElementSet(
        name="ISS (ZARYA)",
        line1="1 25544U 98067A   24001.50000000  .00016717  00000-0  10270-3 0  9997",
        line2="2 25544  51.6400 100.0000 0001234  90.0000 270.0000 15.50000000000008",
    ),
    "tiangong": SatelliteElementSet(
        name="CSS (TIANHE)",
        line1="1 48274U 21035A   24001.50000000  .00020000  00000-0  15000-3 0  9999",
        line2="2 48274  41.4700 200.0000 0001000 180.0000  90.0000 15.60000000000006",
    ),
}


def get_station(station_id: str) -> SpaceStation:
    """Look up a bundled station; raises KeyError if unknown."""
    return STATIONS_BY_ID[station_id]


def default_tle_cache() -> TLECache:
    """New cache seeded with the bundled element sets."""
    return TLECache(dict(DEFAULT_TLES))
