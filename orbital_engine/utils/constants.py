"""Physical constants and scene parameters for the orbital engine.

Satellite calculations use km and seconds; heliocentric calculations use
AU and days. Scene positions are expressed in scene units where
1 unit = 1000 km, keeping values in a comfortable range for 32-bit
renderers.
"""

import math

# --- Scene Scale ---
SCENE_SCALE_KM: float = 1000.0  # km per scene unit

# --- Distances ---
AU_KM: float = 149597870.7  # km -- 1 Astronomical Unit
AU_SCENE: float = AU_KM / SCENE_SCALE_KM
MOON_DISTANCE_KM: float = 384400.0

# --- Body Radii (km) ---
R_EARTH: float = 6371.0  # mean radius, used for the spherical projection

# --- Gravitational Parameters ---
MU_EARTH: float = 398600.4418  # km^3/s^2
GAUSSIAN_GRAVITATIONAL_CONSTANT: float = 0.01720209895  # sqrt(AU^3/day^2)
GM_SUN_AU_DAY: float = GAUSSIAN_GRAVITATIONAL_CONSTANT ** 2  # AU^3/day^2

# --- Time ---
SECONDS_PER_DAY: float = 86400.0
MINUTES_PER_DAY: float = 1440.0
JD_UNIX_EPOCH: float = 2440587.5
JD_J2000: float = 2451545.0

# Earth rotation angle (IAU 2000): theta = 2*pi*(ERA_AT_J2000 + ERA_RATE * days)
ERA_AT_J2000: float = 0.7790572732640
ERA_RATE: float = 1.00273781191135448  # rotations per UT1 day

# --- Light ---
LIGHT_MINUTES_PER_AU: float = 8.317

# --- Kepler Solver ---
KEPLER_TOLERANCE: float = 1e-8
KEPLER_MAX_ITERATIONS: int = 50
KEPLER_HIGH_ECCENTRICITY: float = 0.8  # switch initial guess from M to pi
ORBIT_PATH_MAX_RADIUS_AU: float = 1000.0
COMET_VISIBILITY_RADIUS_AU: float = 5.0

# --- TLE Conventions ---
TLE_CENTURY_PIVOT: int = 57  # two-digit years below this are 20xx
TLE_LINE_LENGTH: int = 69

# --- Derived Math Constants ---
TWO_PI: float = 2.0 * math.pi
DEG_TO_RAD: float = math.pi / 180.0
RAD_TO_DEG: float = 180.0 / math.pi

# --- Time Speed Presets (simulated seconds per wall second) ---
TIME_SPEEDS: tuple[tuple[str, float], ...] = (
    ("1x", 1.0),
    ("10x", 10.0),
    ("100x", 100.0),
    ("1000x", 1000.0),
    ("1 day/s", 86400.0),
    ("1 week/s", 604800.0),
    ("1 month/s", 2592000.0),
)

# --- Celestrak API ---
CELESTRAK_BASE_URL: str = "https://celestrak.org/NORAD/elements/gp.php"

# --- Planets served by the ephemeris provider ---
PLANETS: tuple[str, ...] = (
    "mercury",
    "venus",
    "earth",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
)
