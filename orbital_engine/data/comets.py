"""Notable comets and their heliocentric orbital elements.

Elements from the JPL Small-Body Database: semi-major axis in AU,
angles in degrees, epoch as a Julian date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

import numpy as np

from orbital_engine.core.coordinate_transforms import au_to_scene
from orbital_engine.core.kepler import KeplerState, OrbitalElements, orbit_path, propagate
from orbital_engine.utils.constants import COMET_VISIBILITY_RADIUS_AU

CometType = Literal["short-period", "long-period", "non-periodic"]


@dataclass(frozen=True, slots=True)
class Comet:
    id: str
    name: str
    designation: str
    elements: OrbitalElements
    period: Optional[float]  # years; None if non-periodic
    last_perihelion: str
    next_perihelion: Optional[str]
    description: str
    discovered: str
    type: CometType
    color: int


COMETS: tuple[Comet, ...] = (
    Comet(
        id="halley",
        name="Halley's Comet",
        designation="1P/Halley",
        elements=OrbitalElements(
            a=17.834, e=0.96714, i=162.26, om=58.42, w=111.33, ma=38.38,
            epoch=2449400.5,  # 1994-Feb-17
        ),
        period=75.32,
        last_perihelion="1986-02-09",
        next_perihelion="2061-07-28",
        description=(
            "The most famous periodic comet, visible from Earth every 75-76 "
            "years. Depicted in the Bayeux Tapestry (1066) and studied by "
            "Edmond Halley who predicted its return."
        ),
        discovered="Prehistoric (recorded since 240 BC)",
        type="short-period",
        color=0x88CCFF,
    ),
    Comet(
        id="hale-bopp",
        name="Comet Hale-Bopp",
        designation="C/1995 O1",
        elements=OrbitalElements(
            a=186.0, e=0.995, i=89.43, om=282.47, w=130.59, ma=0.0,
            epoch=2450538.0,  # 1997-Apr-01, near perihelion
        ),
        period=2533.0,
        last_perihelion="1997-04-01",
        next_perihelion="4530",
        description=(
            "One of the most widely observed comets of the 20th century. "
            "Visible to the naked eye for 18 months, setting a record. Its "
            "nucleus is estimated at 40-80 km diameter."
        ),
        discovered="1995 by Alan Hale and Thomas Bopp",
        type="long-period",
        color=0xFFFFAA,
    ),
    Comet(
        id="neowise",
        name="Comet NEOWISE",
        designation="C/2020 F3",
        elements=OrbitalElements(
            a=364.0, e=0.999, i=128.94, om=61.01, w=37.28, ma=0.0,
            epoch=2459034.0,  # 2020-Jul-03, perihelion
        ),
        period=6800.0,
        last_perihelion="2020-07-03",
        next_perihelion=None,
        description=(
            "A bright comet discovered by the NEOWISE space telescope in "
            "March 2020. Became visible to naked eye in July 2020, the "
            "brightest comet in the northern hemisphere since Hale-Bopp."
        ),
        discovered="2020 by NEOWISE space telescope",
        type="long-period",
        color=0xFFDD88,
    ),
    Comet(
        id="encke",
        name="Comet Encke",
        designation="2P/Encke",
        elements=OrbitalElements(
            a=2.215, e=0.848, i=11.78, om=334.57, w=186.54, ma=215.0,
            epoch=2459000.5,
        ),
        period=3.30,
        last_perihelion="2023-10-22",
        next_perihelion="2027-01-25",
        description=(
            "Has the shortest orbital period of any known comet (3.3 years). "
            "Source of the Taurid meteor shower. First comet (other than "
            "Halley) to have its return predicted."
        ),
        discovered="1786 by Pierre Méchain",
        type="short-period",
        color=0xAADDFF,
    ),
    Comet(
        id="tempel-1",
        name="Comet Tempel 1",
        designation="9P/Tempel",
        elements=OrbitalElements(
            a=3.138, e=0.512, i=10.53, om=68.93, w=178.93, ma=180.0,
            epoch=2453500.5,
        ),
        period=5.56,
        last_perihelion="2022-03-04",
        next_perihelion="2027-09-01",
        description=(
            "Target of NASA's Deep Impact mission (2005), which fired an "
            "impactor into the nucleus to study its composition. Later "
            "visited by Stardust spacecraft."
        ),
        discovered="1867 by Wilhelm Tempel",
        type="short-period",
        color=0x99BBDD,
    ),
    Comet(
        id="churyumov-gerasimenko",
        name="Comet 67P",
        designation="67P/Churyumov-Gerasimenko",
        elements=OrbitalElements(
            a=3.463, e=0.641, i=7.04, om=50.19, w=12.78, ma=180.0,
            epoch=2457260.5,  # 2015-Aug-13, perihelion
        ),
        period=6.44,
        last_perihelion="2021-11-02",
        next_perihelion="2028-03-28",
        description=(
            "Target of ESA's Rosetta mission, which orbited the comet and "
            "landed the Philae probe on its surface in 2014 - the first soft "
            "landing on a comet."
        ),
        discovered="1969 by Klim Churyumov and Svetlana Gerasimenko",
        type="short-period",
        color=0x778899,
    ),
    Comet(
        id="wirtanen",
        name="Comet Wirtanen",
        designation="46P/Wirtanen",
        elements=OrbitalElements(
            a=3.092, e=0.659, i=11.75, om=82.16, w=356.34, ma=0.0,
            epoch=2458468.5,  # 2018-Dec-12, perihelion
        ),
        period=5.44,
        last_perihelion="2024-01-28",
        next_perihelion="2029-06-20",
        description=(
            "A small comet that made a close approach to Earth in December "
            "2018 (0.077 AU). Was the original target of the Rosetta mission."
        ),
        discovered="1948 by Carl Wirtanen",
        type="short-period",
        color=0xAACCEE,
    ),
    Comet(
        id="hyakutake",
        name="Comet Hyakutake",
        designation="C/1996 B2",
        elements=OrbitalElements(
            a=2364.0, e=0.9999, i=124.92, om=188.04, w=130.17, ma=0.0,
            epoch=2450183.0,  # 1996-May-01, near perihelion
        ),
        period=114000.0,
        last_perihelion="1996-05-01",
        next_perihelion=None,
        description=(
            "Made one of the closest approaches to Earth by a comet in 200 "
            "years (0.10 AU in March 1996). Its ion tail extended over 500 "
            "million km."
        ),
        discovered="1996 by Yuji Hyakutake",
        type="long-period",
        color=0x66AAFF,
    ),
)

COMETS_BY_ID: dict[str, Comet] = {comet.id: comet for comet in COMETS}


def get_comet(comet_id: str) -> Comet:
    """Look up a bundled comet; raises KeyError if unknown."""
    return COMETS_BY_ID[comet_id]


def comet_position(comet: Comet, when: datetime) -> KeplerState:
    """Heliocentric position (AU), speed (km/s) and tail direction."""
    return propagate(comet.elements, when)


def comet_scene_position(comet: Comet, when: datetime) -> np.ndarray:
    return au_to_scene(comet_position(comet, when).position)


def comet_orbit(comet: Comet, segments: int = 256) -> np.ndarray:
    """Orbit path in AU, shape (N, 3)."""
    return orbit_path(comet.elements, segments=segments)


def is_visible(comet: Comet, when: datetime) -> bool:
    """True when the comet is close enough to the Sun to be potentially visible."""
    return comet_position(comet, when).distance < COMET_VISIBILITY_RADIUS_AU


def comets_by_distance(
    when: datetime, comets: tuple[Comet, ...] = COMETS
) -> list[tuple[Comet, KeplerState]]:
    """All comets with their positions, nearest to the Sun first."""
    positioned = [(comet, comet_position(comet, when)) for comet in comets]
    positioned.sort(key=lambda pair: pair[1].distance)
    return positioned
