"""Coordinate frame transformations and scale conversions.

Provides:
- Real-world distance (km, AU) <-> scene units
- Perifocal (orbital plane) -> parent frame rotation (3-1-3: Omega, i, omega)
- ECI (Earth-Centered Inertial) <-> ECEF (Earth-Centered Earth-Fixed)
- ECEF -> geographic latitude/longitude on a spherical Earth
- Axis swap for Y-up renderers

All angles in radians internally unless suffixed with _deg. Every
function accepts scalars or numpy arrays.
"""

from __future__ import annotations

import numpy as np

from orbital_engine.utils.constants import (
    AU_KM,
    R_EARTH,
    RAD_TO_DEG,
    SCENE_SCALE_KM,
)


# =============================================================================
# Scale conversion
# =============================================================================

def km_to_scene(value_km):
    """Convert km (scalar or array) to scene units."""
    return np.asarray(value_km, dtype=float) / SCENE_SCALE_KM


def scene_to_km(value_scene):
    """Convert scene units (scalar or array) back to km."""
    return np.asarray(value_scene, dtype=float) * SCENE_SCALE_KM


def au_to_km(value_au):
    return np.asarray(value_au, dtype=float) * AU_KM


def au_to_scene(value_au):
    """Convert AU to scene units via km, the same path every producer uses."""
    return km_to_scene(au_to_km(value_au))


# =============================================================================
# Perifocal -> parent frame
# =============================================================================

def perifocal_to_frame(x_orb, y_orb, raan: float, inc: float, argp: float) -> np.ndarray:
    """Rotate orbital-plane coordinates into the parent reference frame.

    Applies R3(-raan) . R1(-inc) . R3(-argp) to (x_orb, y_orb, 0). Shared
    by the Kepler and satellite propagators so both use the same
    right-handed convention.

    Args:
        x_orb: coordinate along the periapsis direction
        y_orb: in-plane coordinate 90 degrees ahead of periapsis
        raan: longitude of the ascending node in radians
        inc: inclination in radians
        argp: argument of periapsis in radians

    Returns:
        [x, y, z] for scalar inputs, or shape (N, 3) for array inputs
    """
    cos_om = np.cos(raan)
    sin_om = np.sin(raan)
    cos_i = np.cos(inc)
    sin_i = np.sin(inc)
    cos_w = np.cos(argp)
    sin_w = np.sin(argp)

    x = (cos_om * cos_w - sin_om * sin_w * cos_i) * x_orb + (
        -cos_om * sin_w - sin_om * cos_w * cos_i
    ) * y_orb
    y = (sin_om * cos_w + cos_om * sin_w * cos_i) * x_orb + (
        -sin_om * sin_w + cos_om * cos_w * cos_i
    ) * y_orb
    z = (sin_w * sin_i) * x_orb + (cos_w * sin_i) * y_orb

    return np.stack([x, y, z], axis=-1)


# =============================================================================
# ECI <-> ECEF
# =============================================================================

def eci_to_ecef(position_eci: np.ndarray, rotation_angle: float) -> np.ndarray:
    """Rotate ECI to ECEF by the Earth rotation angle.

    Args:
        position_eci: [x, y, z] in km, or shape (N, 3)
        rotation_angle: Earth rotation angle in radians (scalar or (N,))

    Returns:
        ECEF position(s) with the same shape as the input
    """
    position_eci = np.asarray(position_eci, dtype=float)
    cos_g = np.cos(rotation_angle)
    sin_g = np.sin(rotation_angle)
    x = position_eci[..., 0]
    y = position_eci[..., 1]
    z = position_eci[..., 2]
    return np.stack([
        cos_g * x + sin_g * y,
        -sin_g * x + cos_g * y,
        z,
    ], axis=-1)


def ecef_to_eci(position_ecef: np.ndarray, rotation_angle: float) -> np.ndarray:
    """Inverse of :func:`eci_to_ecef`."""
    position_ecef = np.asarray(position_ecef, dtype=float)
    cos_g = np.cos(rotation_angle)
    sin_g = np.sin(rotation_angle)
    x = position_ecef[..., 0]
    y = position_ecef[..., 1]
    z = position_ecef[..., 2]
    return np.stack([
        cos_g * x - sin_g * y,
        sin_g * x + cos_g * y,
        z,
    ], axis=-1)


# =============================================================================
# ECEF -> geographic (spherical Earth)
# =============================================================================

def ecef_to_geographic(
    position_ecef: np.ndarray,
) -> tuple[float, float, float]:
    """Project an ECEF position onto a spherical Earth.

    Args:
        position_ecef: [x, y, z] in km

    Returns:
        (latitude_deg, longitude_deg, altitude_km); longitude in (-180, 180]
    """
    x, y, z = position_ecef[0], position_ecef[1], position_ecef[2]
    p = np.hypot(x, y)
    lat = np.arctan2(z, p) * RAD_TO_DEG
    lon = np.arctan2(y, x) * RAD_TO_DEG
    alt = np.sqrt(p ** 2 + z ** 2) - R_EARTH
    return (float(lat), float(lon), float(alt))


# =============================================================================
# Vector helpers
# =============================================================================

def to_y_up(position: np.ndarray) -> np.ndarray:
    """Swap y and z for renderers whose vertical axis is +Y."""
    position = np.asarray(position, dtype=float)
    return position[..., [0, 2, 1]]


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(b, dtype=float) - np.asarray(a, dtype=float)))


def unit_vector(v: np.ndarray) -> np.ndarray:
    """Normalise ``v``; the zero vector is returned unchanged."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v.copy()
    return v / norm
