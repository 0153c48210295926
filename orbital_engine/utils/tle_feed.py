"""Fetch fresh TLE data from CelesTrak into a :class:`TLECache`.

This is the ingestion boundary: downloaded lines are validated here
before they are allowed to replace the cached element set. A failed
download or validation leaves the previous (stale) element set in
place. There is no retry or backoff; the next refresh simply tries
again.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from orbital_engine.core.tle_parser import (
    SatelliteElementSet,
    TLECache,
    TLEParseError,
    parse_tle_text,
)
from orbital_engine.utils.constants import CELESTRAK_BASE_URL

logger = logging.getLogger(__name__)


class TLEFeed:
    """Downloads TLEs by NORAD catalog number and updates a cache."""

    def __init__(
        self,
        cache: TLECache,
        session: Optional[requests.Session] = None,
        base_url: str = CELESTRAK_BASE_URL,
        timeout: float = 30.0,
    ):
        self._cache = cache
        self._session = session
        self._base_url = base_url
        self._timeout = timeout

    def _get_session(self) -> requests.Session:
        """Lazy-init a requests.Session (reuses TCP connections)."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "User-Agent": "OrbitalEngine/1.0"
            })
        return self._session

    def fetch_text(self, norad_id: int) -> str:
        """Raw TLE text for one catalog number.

        Raises:
            requests.RequestException: on network or HTTP errors
        """
        response = self._get_session().get(
            self._base_url,
            params={"CATNR": norad_id, "FORMAT": "tle"},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.text

    def fetch(self, norad_id: int) -> SatelliteElementSet:
        """Download and validate the element set for ``norad_id``.

        Raises:
            requests.RequestException: on network or HTTP errors
            TLEParseError: if the response holds no valid element set
        """
        tles = parse_tle_text(self.fetch_text(norad_id))
        for tle in tles:
            if tle.catalog_number == norad_id:
                return tle
        raise TLEParseError(f"No valid TLE for NORAD {norad_id} in response")

    def refresh(self, sat_id: str, norad_id: int) -> bool:
        """Replace the cached lines for ``sat_id`` with a fresh download.

        Returns True if the cache was updated; on failure the stale
        element set stays in use and False is returned.
        """
        try:
            tle = self.fetch(norad_id)
        except requests.RequestException as e:
            logger.warning("TLE download failed for %s (NORAD %d): %s", sat_id, norad_id, e)
            return False
        except TLEParseError as e:
            logger.warning("Rejected TLE for %s (NORAD %d): %s", sat_id, norad_id, e)
            return False

        self._cache.replace(sat_id, tle.line1, tle.line2, name=tle.name)
        return True

    def refresh_all(self, norad_ids: dict[str, int]) -> dict[str, bool]:
        """Refresh several satellites; maps sat_id -> updated."""
        return {sat_id: self.refresh(sat_id, norad_id) for sat_id, norad_id in norad_ids.items()}
