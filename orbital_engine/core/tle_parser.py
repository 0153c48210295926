"""TLE (Two-Line Element) parsing and caching.

Two parsing paths share the same column layout:

- :meth:`SatelliteElementSet.parse` is the lenient projection used on
  the propagation path. It never raises; fields that fail to parse
  become NaN (or ``None`` for the epoch).
- :func:`validate_tle_lines` / :func:`parse_tle_text` are the strict
  ingestion checks used by the fetch layer before raw lines are allowed
  into a :class:`TLECache`.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from orbital_engine.utils.constants import MINUTES_PER_DAY, TLE_LINE_LENGTH
from orbital_engine.utils.time_utils import tle_epoch_to_datetime

logger = logging.getLogger(__name__)


class TLEParseError(Exception):
    """Raised when TLE data cannot be parsed."""

    def __init__(self, message: str, line_number: int = 0, raw_line: str = ""):
        self.line_number = line_number
        self.raw_line = raw_line
        super().__init__(message)


class TLEChecksumError(TLEParseError):
    """Raised when a TLE line fails checksum validation."""


@dataclass(frozen=True, slots=True)
class ParsedElements:
    """Mean elements extracted from a two-line element set."""

    inclination: float  # degrees
    raan: float  # degrees
    eccentricity: float
    arg_perigee: float  # degrees
    mean_anomaly: float  # degrees
    mean_motion: float  # rev/day
    epoch: Optional[datetime]

    @property
    def period_minutes(self) -> float:
        """Orbital period in minutes from mean motion."""
        if not self.mean_motion > 0:
            return math.nan
        return MINUTES_PER_DAY / self.mean_motion


def _parse_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        return math.nan


def _parse_epoch(line1: str) -> Optional[datetime]:
    year = _parse_float(line1[18:20])
    day = _parse_float(line1[20:32])
    if math.isnan(year) or math.isnan(day):
        return None
    try:
        return tle_epoch_to_datetime(int(year), day)
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True, slots=True)
class SatelliteElementSet:
    """Raw two-line element set; the lines are the source of truth."""

    name: str
    line1: str = field(repr=False)
    line2: str = field(repr=False)

    @property
    def catalog_number(self) -> Optional[int]:
        try:
            return int(self.line1[2:7].strip())
        except ValueError:
            return None

    def parse(self) -> ParsedElements:
        """Fixed-column projection of the raw lines. Never raises."""
        line1 = self.line1
        line2 = self.line2
        return ParsedElements(
            inclination=_parse_float(line2[8:16]),
            raan=_parse_float(line2[17:25]),
            # Eccentricity has implied leading decimal point
            eccentricity=_parse_float("0." + line2[26:33].strip()),
            arg_perigee=_parse_float(line2[34:42]),
            mean_anomaly=_parse_float(line2[43:51]),
            mean_motion=_parse_float(line2[52:63]),
            epoch=_parse_epoch(line1),
        )


# =============================================================================
# Ingestion checks
# =============================================================================

def compute_checksum(line: str) -> int:
    """Modulo-10 checksum over the first 68 columns ('-' counts as 1)."""
    checksum = 0
    for ch in line[:68]:
        if ch.isdigit():
            checksum += int(ch)
        elif ch == "-":
            checksum += 1
    return checksum % 10


def validate_checksum(line: str) -> bool:
    """Validate TLE line checksum (last digit)."""
    if len(line) < TLE_LINE_LENGTH or not line[68].isdigit():
        return False
    return compute_checksum(line) == int(line[68])


def validate_tle_lines(line1: str, line2: str) -> None:
    """Reject element sets that would propagate to NaN.

    Raises:
        TLEParseError: wrong length, line markers, mismatched catalog
            numbers or unparseable fields
        TLEChecksumError: a line fails its checksum
    """
    for number, line in ((1, line1), (2, line2)):
        if len(line) < TLE_LINE_LENGTH:
            raise TLEParseError(
                f"Line {number} too short ({len(line)} chars)", number, line
            )
        if not line.startswith(f"{number} "):
            raise TLEParseError(f"Line {number} must start with '{number} '", number, line)
        if not validate_checksum(line):
            raise TLEChecksumError(f"Line {number} checksum failed", number, line)

    if line1[2:7] != line2[2:7]:
        raise TLEParseError("Catalog numbers of line 1 and line 2 differ", 2, line2)

    parsed = SatelliteElementSet("", line1, line2).parse()
    if parsed.epoch is None:
        raise TLEParseError("Unparseable epoch", 1, line1)
    for name in ("inclination", "raan", "eccentricity", "arg_perigee",
                 "mean_anomaly", "mean_motion"):
        if math.isnan(getattr(parsed, name)):
            raise TLEParseError(f"Unparseable {name.replace('_', ' ')}", 2, line2)


def parse_tle_text(text: str) -> list[SatelliteElementSet]:
    """Parse and validate all TLEs from a text block.

    Handles both 2-line format (no name) and 3-line format (name + 2 lines).
    Sets that fail validation are skipped with a warning.
    """
    lines = [line.rstrip() for line in text.strip().splitlines() if line.strip()]
    results: list[SatelliteElementSet] = []
    i = 0

    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            name, line1, line2 = f"SAT-{lines[i][2:7].strip()}", lines[i], lines[i + 1]
            step = 2
        elif (
            i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            name, line1, line2 = lines[i].strip(), lines[i + 1], lines[i + 2]
            step = 3
        else:
            i += 1
            continue

        try:
            validate_tle_lines(line1, line2)
            results.append(SatelliteElementSet(name, line1, line2))
        except TLEParseError as e:
            logger.warning("Skipping bad TLE at line %d: %s", i, e)
        i += step

    return results


# =============================================================================
# Cache
# =============================================================================

class TLECache:
    """Holds the current element set per satellite and memoises parses.

    The fetch layer calls :meth:`replace` when fresher lines arrive;
    propagation callers take a snapshot with :meth:`get`, so a
    replacement never affects a propagation already in progress.
    """

    def __init__(self, element_sets: Optional[dict[str, SatelliteElementSet]] = None):
        self._lock = threading.Lock()
        self._raw: dict[str, SatelliteElementSet] = dict(element_sets or {})
        self._parsed: dict[str, ParsedElements] = {}

    def __contains__(self, sat_id: str) -> bool:
        with self._lock:
            return sat_id in self._raw

    def __len__(self) -> int:
        with self._lock:
            return len(self._raw)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._raw)

    def get(self, sat_id: str) -> SatelliteElementSet:
        """Current element set for ``sat_id``; raises KeyError if unknown."""
        with self._lock:
            return self._raw[sat_id]

    def parsed(self, sat_id: str) -> ParsedElements:
        with self._lock:
            cached = self._parsed.get(sat_id)
            if cached is not None:
                return cached
            element_set = self._raw[sat_id]
        parsed = element_set.parse()
        with self._lock:
            # Only memoise if the lines were not replaced meanwhile
            if self._raw.get(sat_id) is element_set:
                self._parsed[sat_id] = parsed
        return parsed

    def replace(
        self, sat_id: str, line1: str, line2: str, name: Optional[str] = None
    ) -> SatelliteElementSet:
        """Atomically swap the raw lines for ``sat_id``."""
        with self._lock:
            previous = self._raw.get(sat_id)
            if name is None:
                name = previous.name if previous else sat_id
            element_set = SatelliteElementSet(name, line1.rstrip(), line2.rstrip())
            self._raw[sat_id] = element_set
            self._parsed.pop(sat_id, None)
        logger.info("Replaced element set for %s", sat_id)
        return element_set

    def invalidate(self, sat_id: Optional[str] = None) -> None:
        """Drop memoised parses for one satellite, or all when ``sat_id`` is None."""
        with self._lock:
            if sat_id is None:
                self._parsed.clear()
            else:
                self._parsed.pop(sat_id, None)
