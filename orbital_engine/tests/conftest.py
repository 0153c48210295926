"""Shared fixtures: a real ISS element set and an offline ephemeris source."""
from datetime import datetime

import numpy as np
import pytest

from orbital_engine.core.tle_parser import SatelliteElementSet
from orbital_engine.utils.constants import AU_KM

ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


class FakeEphemeris:
    """Fixed vectors in AU regardless of the requested time."""

    distance_unit_km = AU_KM

    def __init__(self):
        self.calls: list[tuple[str, datetime]] = []

    def heliocentric_vector(self, body: str, when: datetime) -> np.ndarray:
        self.calls.append((body, when))
        if body == "earth":
            return np.array([1.0, 0.0, 0.0])
        return np.array([2.0, 1.0, 0.5])

    def geocentric_moon_vector(self, when: datetime) -> np.ndarray:
        self.calls.append(("moon", when))
        return np.array([0.0, 0.00257, 0.0])


@pytest.fixture
def iss_tle():
    return SatelliteElementSet(ISS_NAME, ISS_LINE1, ISS_LINE2)


@pytest.fixture
def fake_ephemeris():
    return FakeEphemeris()
