"""Request dependencies: shared state hangs off ``app.state``."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

from orbital_engine.core.bodies import CelestialBodyProvider
from orbital_engine.core.tle_parser import TLECache
from orbital_engine.utils.time_utils import ensure_utc


def get_tle_cache(request: Request) -> TLECache:
    return request.app.state.tle_cache


def get_body_provider(request: Request) -> CelestialBodyProvider:
    return request.app.state.body_provider


def resolve_time(at: Optional[datetime]) -> datetime:
    """Requested instant, defaulting to now."""
    if at is None:
        return datetime.now(timezone.utc)
    return ensure_utc(at)


def vector(values) -> dict[str, float]:
    x, y, z = (float(v) for v in values)
    return {"x": x, "y": y, "z": z}
