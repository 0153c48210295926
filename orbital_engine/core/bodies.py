"""Planet and Moon positions in scene units.

Wraps an external ephemeris source that supplies heliocentric planet
vectors and the geocentric Moon vector. The source declares its own
distance unit; everything returned here is rescaled to scene units so
it can be added to positions produced by the other propagators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

import numpy as np

from orbital_engine.core.coordinate_transforms import km_to_scene
from orbital_engine.core.kepler import OrbitalElements, orbit_path
from orbital_engine.utils.constants import (
    AU_KM,
    JD_J2000,
    MOON_DISTANCE_KM,
    PLANETS,
    SCENE_SCALE_KM,
)
from orbital_engine.utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)


@runtime_checkable
class EphemerisSource(Protocol):
    """Two-operation contract for an astronomical ephemeris."""

    distance_unit_km: float

    def heliocentric_vector(self, body: str, when: datetime) -> np.ndarray:
        """[x, y, z] of ``body`` relative to the Sun, in the source's unit."""
        ...

    def geocentric_moon_vector(self, when: datetime) -> np.ndarray:
        """[x, y, z] of the Moon relative to Earth, in the source's unit."""
        ...


class AstropyEphemeris:
    """Ephemeris source backed by astropy's built-in analytic ephemeris.

    Vectors are ICRS-aligned and expressed in AU. The built-in
    ephemeris needs no kernel download.
    """

    distance_unit_km: float = AU_KM

    def __init__(self, ephemeris: str = "builtin"):
        self._ephemeris = ephemeris

    def _barycentric(self, body: str, when: datetime) -> np.ndarray:
        import astropy.units as u
        from astropy.coordinates import get_body_barycentric
        from astropy.time import Time

        t = Time(ensure_utc(when))
        cartesian = get_body_barycentric(body, t, ephemeris=self._ephemeris)
        return np.asarray(cartesian.xyz.to_value(u.AU), dtype=float)

    def heliocentric_vector(self, body: str, when: datetime) -> np.ndarray:
        return self._barycentric(body, when) - self._barycentric("sun", when)

    def geocentric_moon_vector(self, when: datetime) -> np.ndarray:
        return self._barycentric("moon", when) - self._barycentric("earth", when)


@dataclass(frozen=True, slots=True)
class BodyPosition:
    """Scene-unit position of a body."""

    body: str
    position: np.ndarray


class CelestialBodyProvider:
    """Scene-unit planet and Moon positions from an :class:`EphemerisSource`."""

    def __init__(self, source: EphemerisSource):
        self._source = source
        self._to_scene = source.distance_unit_km / SCENE_SCALE_KM

    def _scene(self, vector: np.ndarray) -> np.ndarray:
        return np.asarray(vector, dtype=float) * self._to_scene

    def heliocentric_position(self, body: str, when: datetime) -> BodyPosition:
        vector = self._source.heliocentric_vector(body, when)
        return BodyPosition(body=body, position=self._scene(vector))

    def earth_position(self, when: datetime) -> BodyPosition:
        return self.heliocentric_position("earth", when)

    def moon_geocentric_position(self, when: datetime) -> BodyPosition:
        vector = self._source.geocentric_moon_vector(when)
        return BodyPosition(body="moon", position=self._scene(vector))

    def moon_heliocentric_position(self, when: datetime) -> BodyPosition:
        """Earth heliocentric plus Moon geocentric, both in scene units."""
        earth = self.earth_position(when)
        moon = self.moon_geocentric_position(when)
        return BodyPosition(body="moon", position=earth.position + moon.position)

    def all_planet_positions(self, when: datetime) -> dict[str, BodyPosition]:
        return {body: self.heliocentric_position(body, when) for body in PLANETS}


# =============================================================================
# Approximate reference orbits for drawing
# =============================================================================

@dataclass(frozen=True, slots=True)
class ReferenceOrbit:
    """Approximate orbit used only to draw a guide ellipse."""

    semi_major_axis_km: float
    eccentricity: float
    inclination: float  # degrees
    period_days: float


def _au(value: float) -> float:
    return value * AU_KM


REFERENCE_ORBITS: dict[str, ReferenceOrbit] = {
    "mercury": ReferenceOrbit(_au(0.387), 0.206, 7.0, 87.97),
    "venus": ReferenceOrbit(_au(0.723), 0.007, 3.4, 224.7),
    "earth": ReferenceOrbit(_au(1.0), 0.017, 0.0, 365.25),
    "moon": ReferenceOrbit(MOON_DISTANCE_KM, 0.055, 5.1, 27.3),
    "mars": ReferenceOrbit(_au(1.524), 0.093, 1.85, 687.0),
    "jupiter": ReferenceOrbit(_au(5.203), 0.048, 1.3, 4333.0),
    "saturn": ReferenceOrbit(_au(9.537), 0.054, 2.5, 10759.0),
    "uranus": ReferenceOrbit(_au(19.19), 0.047, 0.8, 30687.0),
    "neptune": ReferenceOrbit(_au(30.07), 0.009, 1.8, 60190.0),
}


def get_reference_orbit(body: str) -> ReferenceOrbit:
    """Reference orbit for ``body``; unknown names fall back to Earth."""
    orbit = REFERENCE_ORBITS.get(body.lower())
    if orbit is None:
        logger.debug("No reference orbit for %s, using Earth", body)
        return REFERENCE_ORBITS["earth"]
    return orbit


def reference_orbit_path(
    body: str, center: np.ndarray | None = None, segments: int = 128
) -> np.ndarray:
    """Guide ellipse around ``center`` (scene units), shape (segments + 1, 3).

    The ellipse is tilted about the x-axis by the inclination, i.e. the
    shared perifocal rotation with both node and periapsis angles at 0.
    """
    orbit = get_reference_orbit(body)
    a_scene = float(km_to_scene(orbit.semi_major_axis_km))
    elements = OrbitalElements(
        a=a_scene,
        e=orbit.eccentricity,
        i=orbit.inclination,
        om=0.0,
        w=0.0,
        ma=0.0,
        epoch=JD_J2000,
    )
    path = orbit_path(elements, segments=segments, max_radius=np.inf)
    if center is not None:
        path = path + np.asarray(center, dtype=float)
    return path
