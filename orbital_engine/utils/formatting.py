"""Display formatting for positions, distances and travel times."""

from __future__ import annotations

from orbital_engine.utils.constants import AU_KM


def format_coordinates(lat: float, lon: float) -> str:
    lat_dir = "N" if lat >= 0 else "S"
    lon_dir = "E" if lon >= 0 else "W"
    return f"{abs(lat):.2f}°{lat_dir}, {abs(lon):.2f}°{lon_dir}"


def format_altitude(altitude_km: float) -> str:
    return f"{altitude_km:.0f} km"


def format_velocity(speed_km_s: float, decimals: int = 2) -> str:
    return f"{speed_km_s:.{decimals}f} km/s"


def format_comet_distance(au: float) -> str:
    """Millions of km close in, AU further out."""
    if au < 0.1:
        return f"{au * AU_KM / 1e6:.1f} million km"
    if au < 10:
        return f"{au:.2f} AU"
    return f"{au:.0f} AU"


def format_distance_au(au: float) -> str:
    if au < 10:
        return f"{au:.2f} AU"
    return f"{au:.1f} AU"


def format_light_time(hours: float) -> str:
    if hours < 1:
        return f"{hours * 60:.0f} minutes"
    if hours < 24:
        return f"{hours:.1f} hours"
    return f"{hours / 24:.1f} days"


def region_for(lat: float, lon: float) -> str:
    """Very coarse named region under a sub-satellite point."""
    if lat > 60:
        return "Arctic"
    if lat < -60:
        return "Antarctic"

    if -30 < lon < 60:
        if lat > 35:
            return "Europe"
        if lat > 0:
            return "North Africa / Middle East"
        return "Africa"

    if 60 <= lon < 150:
        if lat > 35:
            return "Russia / Central Asia"
        if lat > 0:
            return "South Asia"
        return "Southeast Asia / Australia"

    if -170 <= lon < -30:
        if lat > 35:
            return "North America"
        if lat > 0:
            return "Central America / Caribbean"
        return "South America"

    return "Pacific Ocean"
