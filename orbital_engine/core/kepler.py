"""Two-body Keplerian propagation.

Solve Kepler's equation for elliptical orbits, place a body in its
parent's reference frame at a given time, and sample idealised orbit
paths. Heliocentric elements use AU and days with the Gaussian
gravitational constant; callers may pass another ``mu`` in units
consistent with their ``a``.

Only elliptical orbits (0 <= e < 1) are supported. Elements with
e >= 1 are accepted by the dataclass but the solver is undefined for
them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from orbital_engine.core.coordinate_transforms import perifocal_to_frame
from orbital_engine.utils.constants import (
    AU_KM,
    DEG_TO_RAD,
    GM_SUN_AU_DAY,
    KEPLER_HIGH_ECCENTRICITY,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    ORBIT_PATH_MAX_RADIUS_AU,
    SECONDS_PER_DAY,
    TWO_PI,
)
from orbital_engine.utils.time_utils import days_since_jd, julian_to_datetime


@dataclass(frozen=True, slots=True)
class OrbitalElements:
    """Classical orbital elements at an epoch."""

    a: float  # semi-major axis (AU for heliocentric orbits)
    e: float  # eccentricity
    i: float  # inclination, degrees
    om: float  # longitude of ascending node, degrees
    w: float  # argument of periapsis, degrees
    ma: float  # mean anomaly at epoch, degrees
    epoch: float  # Julian date

    @property
    def epoch_datetime(self) -> datetime:
        return julian_to_datetime(self.epoch)


@dataclass(frozen=True, slots=True)
class KeplerSolution:
    """Eccentric anomaly plus solver diagnostics."""

    eccentric_anomaly: float  # radians
    iterations: int
    last_step: float  # |dE| of the final Newton step

    @property
    def converged(self) -> bool:
        return self.last_step < KEPLER_TOLERANCE


@dataclass(frozen=True, slots=True)
class KeplerState:
    """Position of a body in its parent's frame at one instant."""

    x: float  # AU
    y: float  # AU
    z: float  # AU
    distance: float  # AU from the parent
    speed: float  # km/s
    direction: tuple[float, float, float]  # unit vector parent -> body

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


def mean_motion(a: float, mu: float = GM_SUN_AU_DAY) -> float:
    """Mean motion n = sqrt(mu / a^3) in radians per time unit of ``mu``."""
    return math.sqrt(mu / a ** 3)


def normalize_angle(angle: float) -> float:
    """Wrap an angle in radians into [0, 2*pi)."""
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    # fmod of a tiny negative value can round back up to 2*pi
    return 0.0 if wrapped >= TWO_PI else wrapped


def solve_kepler_detailed(
    mean_anomaly: float,
    eccentricity: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> KeplerSolution:
    """Solve M = E - e*sin(E) by Newton-Raphson.

    The initial guess is M for e < 0.8 and pi otherwise. Iteration stops
    once the step falls below ``tolerance`` or after ``max_iterations``;
    the last value is accepted either way.
    """
    m = normalize_angle(mean_anomaly)
    e = eccentricity
    ecc_anomaly = m if e < KEPLER_HIGH_ECCENTRICITY else math.pi

    step = math.inf
    iterations = 0
    for iterations in range(1, max_iterations + 1):
        step = (ecc_anomaly - e * math.sin(ecc_anomaly) - m) / (
            1.0 - e * math.cos(ecc_anomaly)
        )
        ecc_anomaly -= step
        if abs(step) < tolerance:
            break

    return KeplerSolution(
        eccentric_anomaly=ecc_anomaly,
        iterations=iterations,
        last_step=abs(step),
    )


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> float:
    """Eccentric anomaly (radians) for the given mean anomaly."""
    return solve_kepler_detailed(
        mean_anomaly, eccentricity, tolerance, max_iterations
    ).eccentric_anomaly


def true_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    """True anomaly from eccentric anomaly (half-angle form)."""
    e = eccentricity
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(eccentric_anomaly / 2.0),
        math.sqrt(1.0 - e) * math.cos(eccentric_anomaly / 2.0),
    )


def vis_viva_speed(radius: float, a: float, mu: float = GM_SUN_AU_DAY) -> float:
    """Vis-viva equation: v = sqrt(mu * (2/r - 1/a)), in the units of ``mu``."""
    if radius <= 0 or a <= 0:
        return 0.0
    return math.sqrt(max(0.0, mu * (2.0 / radius - 1.0 / a)))


def orbital_period_days(a: float, mu: float = GM_SUN_AU_DAY) -> float:
    """Orbital period T = 2*pi / n."""
    if a <= 0:
        return float("inf")
    return TWO_PI / mean_motion(a, mu)


def perihelion_distance(elements: OrbitalElements) -> float:
    return elements.a * (1.0 - elements.e)


def aphelion_distance(elements: OrbitalElements) -> float:
    return elements.a * (1.0 + elements.e)


def mean_anomaly_at(
    elements: OrbitalElements, when: datetime, mu: float = GM_SUN_AU_DAY
) -> float:
    """Mean anomaly (radians, in [0, 2*pi)) at ``when``."""
    dt_days = days_since_jd(elements.epoch, when)
    m = elements.ma * DEG_TO_RAD + mean_motion(elements.a, mu) * dt_days
    return normalize_angle(m)


def propagate(
    elements: OrbitalElements, when: datetime, mu: float = GM_SUN_AU_DAY
) -> KeplerState:
    """Position of a body on a Keplerian orbit at ``when``.

    Returns coordinates in the parent frame (ecliptic for heliocentric
    elements) and the vis-viva speed converted from AU/day to km/s.
    """
    e = elements.e
    m = mean_anomaly_at(elements, when, mu)
    ecc_anomaly = solve_kepler(m, e)
    nu = true_anomaly(ecc_anomaly, e)

    r = elements.a * (1.0 - e * math.cos(ecc_anomaly))
    x, y, z = perifocal_to_frame(
        r * math.cos(nu),
        r * math.sin(nu),
        elements.om * DEG_TO_RAD,
        elements.i * DEG_TO_RAD,
        elements.w * DEG_TO_RAD,
    )
    dist = math.sqrt(x * x + y * y + z * z)

    v_au_day = vis_viva_speed(dist, elements.a, mu)
    speed_km_s = v_au_day * AU_KM / SECONDS_PER_DAY

    if dist > 0:
        direction = (float(x / dist), float(y / dist), float(z / dist))
    else:
        direction = (0.0, 0.0, 0.0)

    return KeplerState(
        x=float(x),
        y=float(y),
        z=float(z),
        distance=dist,
        speed=speed_km_s,
        direction=direction,
    )


def orbit_path(
    elements: OrbitalElements,
    segments: int = 256,
    max_radius: float = ORBIT_PATH_MAX_RADIUS_AU,
) -> np.ndarray:
    """Sample the orbit at evenly spaced true anomalies.

    Stepping in true anomaly rather than time gives uniform angular
    coverage even for very eccentric orbits. Points whose conic radius
    is negative or above ``max_radius`` are dropped.

    Returns:
        shape (N, 3) array of positions in the parent frame, N <= segments + 1
    """
    a, e = elements.a, elements.e
    nu = np.linspace(0.0, TWO_PI, segments + 1)
    r = a * (1.0 - e * e) / (1.0 + e * np.cos(nu))

    keep = (r >= 0) & (r <= max_radius)
    nu = nu[keep]
    r = r[keep]
    if r.size == 0:
        return np.empty((0, 3))

    return perifocal_to_frame(
        r * np.cos(nu),
        r * np.sin(nu),
        elements.om * DEG_TO_RAD,
        elements.i * DEG_TO_RAD,
        elements.w * DEG_TO_RAD,
    )
