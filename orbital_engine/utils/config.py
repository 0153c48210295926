"""Runtime settings read from the environment.

Physical constants stay in ``utils.constants``; this module only holds
values an operator may want to change per deployment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from orbital_engine.utils.constants import CELESTRAK_BASE_URL

logger = logging.getLogger(__name__)

ENV_PREFIX = "ORBITAL_ENGINE_"
DEFAULT_CORS_ORIGINS: tuple[str, ...] = ("http://localhost:3000", "http://localhost:5173")


def _env(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    """Deployment settings for the service and the TLE feed."""

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    fetch_timeout: float = 30.0
    celestrak_url: str = CELESTRAK_BASE_URL
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS

    @classmethod
    def from_env(cls) -> Settings:
        origins = _env("CORS_ORIGINS", "")
        return cls(
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            host=_env("HOST", "127.0.0.1"),
            port=int(_env_float("PORT", 8000)),
            fetch_timeout=_env_float("FETCH_TIMEOUT", 30.0),
            celestrak_url=_env("CELESTRAK_URL", CELESTRAK_BASE_URL),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip())
            or DEFAULT_CORS_ORIGINS,
        )
