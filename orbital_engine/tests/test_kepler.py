"""
Tests for the Kepler equation solver and heliocentric propagation.
"""
import math
from datetime import timedelta

import numpy as np
import pytest

from orbital_engine.core.kepler import (
    OrbitalElements,
    aphelion_distance,
    mean_anomaly_at,
    normalize_angle,
    orbit_path,
    orbital_period_days,
    perihelion_distance,
    propagate,
    solve_kepler,
    solve_kepler_detailed,
    true_anomaly,
    vis_viva_speed,
)
from orbital_engine.utils.constants import (
    JD_J2000,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE,
    TWO_PI,
)


def _elements(a=1.0, e=0.0167, i=0.0, om=0.0, w=0.0, ma=0.0, epoch=JD_J2000):
    return OrbitalElements(a=a, e=e, i=i, om=om, w=w, ma=ma, epoch=epoch)


@pytest.mark.parametrize("e", [0.0, 0.1, 0.3, 0.5, 0.7, 0.79, 0.85, 0.9, 0.95, 0.99])
def test_solver_converges_over_dense_mean_anomalies(e):
    for m in np.linspace(0.0, TWO_PI, 721, endpoint=False):
        solution = solve_kepler_detailed(m, e)
        assert solution.converged, f"no convergence for M={m}, e={e}"
        assert solution.iterations <= KEPLER_MAX_ITERATIONS
        residual = solution.eccentric_anomaly - e * math.sin(solution.eccentric_anomaly) - m
        assert abs(residual) < 1e-9


def test_solver_circular_orbit_is_identity():
    assert solve_kepler(1.234, 0.0) == pytest.approx(1.234, abs=KEPLER_TOLERANCE)


def test_solver_normalizes_mean_anomaly():
    e = 0.3
    a = solve_kepler(0.5, e)
    b = solve_kepler(0.5 + 3 * TWO_PI, e)
    c = solve_kepler(0.5 - TWO_PI, e)
    assert b == pytest.approx(a, abs=1e-9)
    assert c == pytest.approx(a, abs=1e-9)


def test_normalize_angle_range():
    assert normalize_angle(-0.1) == pytest.approx(TWO_PI - 0.1)
    assert normalize_angle(TWO_PI) == 0.0
    assert normalize_angle(7.0) == pytest.approx(7.0 - TWO_PI)
    assert 0.0 <= normalize_angle(-1e-18) < TWO_PI


def test_true_anomaly_at_apsides():
    assert true_anomaly(0.0, 0.5) == pytest.approx(0.0)
    assert abs(true_anomaly(math.pi, 0.5)) == pytest.approx(math.pi)


def test_radius_at_periapsis_and_apoapsis():
    for e in (0.0, 0.2, 0.6, 0.95):
        peri = propagate(_elements(a=3.0, e=e, ma=0.0), _elements().epoch_datetime)
        apo = propagate(_elements(a=3.0, e=e, ma=180.0), _elements().epoch_datetime)
        assert peri.distance == pytest.approx(3.0 * (1 - e), rel=1e-6)
        assert apo.distance == pytest.approx(3.0 * (1 + e), rel=1e-6)


def test_earth_like_orbit_apsides():
    earth = _elements(a=1.0, e=0.0167)
    assert perihelion_distance(earth) == pytest.approx(0.9833)
    assert aphelion_distance(earth) == pytest.approx(1.0167)

    at_epoch = earth.epoch_datetime
    assert propagate(earth, at_epoch).distance == pytest.approx(0.9833, abs=1e-6)

    half_period = orbital_period_days(earth.a) / 2.0
    later = OrbitalElements(a=1.0, e=0.0167, i=0.0, om=0.0, w=0.0, ma=0.0,
                            epoch=JD_J2000 - half_period)
    assert propagate(later, at_epoch).distance == pytest.approx(1.0167, abs=1e-6)


def test_orbital_period_of_one_au_is_a_year():
    assert orbital_period_days(1.0) == pytest.approx(365.2569, abs=1e-3)
    assert orbital_period_days(0.0) == math.inf


def test_mean_anomaly_advances_with_time():
    earth = _elements(ma=10.0)
    m0 = mean_anomaly_at(earth, earth.epoch_datetime)
    assert m0 == pytest.approx(math.radians(10.0), abs=1e-9)

    one_day = mean_anomaly_at(earth, earth.epoch_datetime + timedelta(days=1))
    assert one_day - m0 == pytest.approx(0.01720209895, rel=1e-6)


def test_vis_viva_speed_for_circular_orbit_in_km_s():
    state = propagate(_elements(a=1.0, e=0.0), _elements().epoch_datetime)
    assert state.speed == pytest.approx(29.78, abs=0.01)


def test_vis_viva_degenerate_inputs():
    assert vis_viva_speed(0.0, 1.0) == 0.0
    assert vis_viva_speed(1.0, -1.0) == 0.0
    # Far outside a bound orbit the energy term is clamped at zero
    assert vis_viva_speed(10.0, 1.0) == 0.0


def test_propagated_direction_is_unit_vector():
    halley = OrbitalElements(a=17.834, e=0.96714, i=162.26, om=58.42, w=111.33,
                             ma=38.38, epoch=2449400.5)
    state = propagate(halley, _elements().epoch_datetime)
    np.testing.assert_allclose(np.linalg.norm(state.direction), 1.0, rtol=1e-12)
    np.testing.assert_allclose(np.linalg.norm(state.position), state.distance)
    assert perihelion_distance(halley) <= state.distance <= aphelion_distance(halley)


def test_inclined_orbit_leaves_the_plane():
    state = propagate(_elements(a=1.0, e=0.0, i=90.0, ma=90.0), _elements().epoch_datetime)
    np.testing.assert_allclose(state.position, [0.0, 0.0, 1.0], atol=1e-9)


def test_orbit_path_closes_and_starts_at_periapsis():
    path = orbit_path(_elements(a=2.0, e=0.5), segments=64)
    assert path.shape == (65, 3)
    np.testing.assert_allclose(path[0], [1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(path[0], path[-1], atol=1e-12)


def test_orbit_path_drops_points_beyond_max_radius():
    path = orbit_path(_elements(a=10.0, e=0.9), segments=128, max_radius=15.0)
    assert 0 < len(path) < 129
    assert np.all(np.linalg.norm(path, axis=1) <= 15.0 + 1e-9)


def test_orbit_path_drops_negative_radii():
    path = orbit_path(_elements(a=-2.0, e=1.5), segments=128)
    assert 0 < len(path) < 129
    assert np.all(np.linalg.norm(path, axis=1) > 0)


def test_orbit_path_empty_when_everything_is_clipped():
    path = orbit_path(_elements(a=10.0, e=0.1), max_radius=1.0)
    assert path.shape == (0, 3)
