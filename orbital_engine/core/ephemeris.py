"""Tabulated trajectory lookup and mission milestones.

Spacecraft whose path is supplied externally (rather than derived from
orbital elements) are positioned by linear interpolation over a
time-ordered table of samples.

Lookup policy:
- before the first sample -> ``None`` (no data yet)
- after the last sample -> the last sample (no extrapolation)
- on a sample timestamp -> that sample, unchanged
- otherwise -> per-axis linear interpolation by elapsed-time fraction
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Sequence

import numpy as np

from orbital_engine.core.coordinate_transforms import au_to_scene
from orbital_engine.utils.constants import LIGHT_MINUTES_PER_AU
from orbital_engine.utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)


class TrajectoryError(ValueError):
    """Raised when trajectory samples are not strictly time-ordered."""

    def __init__(self, message: str, index: int = 0):
        self.index = index
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class TrajectorySample:
    """One tabulated position."""

    timestamp: datetime
    x: float  # AU
    y: float  # AU
    z: float  # AU
    distance: float  # AU from the Sun

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


@dataclass(frozen=True, slots=True)
class MissionMilestone:
    """A named event on a mission timeline."""

    timestamp: datetime
    name: str
    description: str
    body: Optional[str] = None


def _lerp(a: float, b: float, t: float) -> float:
    value = a + t * (b - a)
    # Rounding must not push the result outside the bracketing pair
    return min(max(value, min(a, b)), max(a, b))


class Trajectory:
    """Immutable, strictly time-ordered sequence of samples."""

    def __init__(self, samples: Iterable[TrajectorySample]):
        self._samples: tuple[TrajectorySample, ...] = tuple(
            TrajectorySample(
                ensure_utc(s.timestamp), s.x, s.y, s.z, s.distance
            )
            for s in samples
        )
        self._times: list[datetime] = [s.timestamp for s in self._samples]
        for idx in range(1, len(self._times)):
            if self._times[idx] <= self._times[idx - 1]:
                raise TrajectoryError(
                    f"Sample {idx} at {self._times[idx].isoformat()} is not after "
                    f"sample {idx - 1} at {self._times[idx - 1].isoformat()}",
                    index=idx,
                )

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def __getitem__(self, index: int) -> TrajectorySample:
        return self._samples[index]

    @property
    def start(self) -> Optional[datetime]:
        return self._times[0] if self._times else None

    @property
    def end(self) -> Optional[datetime]:
        return self._times[-1] if self._times else None

    def position_at(self, when: datetime) -> Optional[TrajectorySample]:
        """Sample at ``when`` according to the lookup policy."""
        if not self._samples:
            return None
        when = ensure_utc(when)

        if when < self._times[0]:
            return None
        if when >= self._times[-1]:
            return self._samples[-1]

        # Index of the last sample with timestamp <= when
        idx = bisect.bisect_right(self._times, when) - 1
        p0 = self._samples[idx]
        if p0.timestamp == when:
            return p0
        p1 = self._samples[idx + 1]

        span = (p1.timestamp - p0.timestamp).total_seconds()
        t = (when - p0.timestamp).total_seconds() / span

        return TrajectorySample(
            timestamp=when,
            x=_lerp(p0.x, p1.x, t),
            y=_lerp(p0.y, p1.y, t),
            z=_lerp(p0.z, p1.z, t),
            distance=_lerp(p0.distance, p1.distance, t),
        )

    def samples_until(self, when: datetime) -> list[TrajectorySample]:
        """Stored samples with timestamp <= ``when``."""
        idx = bisect.bisect_right(self._times, ensure_utc(when))
        return list(self._samples[:idx])

    def scene_path_until(self, when: datetime) -> np.ndarray:
        """Flown path up to ``when`` in scene units, shape (N, 3)."""
        samples = self.samples_until(when)
        if not samples:
            return np.empty((0, 3))
        return au_to_scene(np.array([s.position for s in samples]))


@dataclass(frozen=True)
class Mission:
    """A spacecraft with a tabulated trajectory and milestone timeline."""

    id: str
    name: str
    launch_date: datetime
    trajectory: Trajectory
    milestones: tuple[MissionMilestone, ...] = field(default_factory=tuple)
    color: int = 0xFFFFFF

    def position_at(self, when: datetime) -> Optional[TrajectorySample]:
        return self.trajectory.position_at(when)

    def scene_position_at(self, when: datetime) -> Optional[np.ndarray]:
        sample = self.position_at(when)
        if sample is None:
            return None
        return au_to_scene(sample.position)


def active_milestones(
    milestones: Sequence[MissionMilestone], when: datetime
) -> list[MissionMilestone]:
    """Milestones whose timestamp is at or before ``when``, order preserved."""
    when = ensure_utc(when)
    return [m for m in milestones if ensure_utc(m.timestamp) <= when]


def latest_milestone(
    milestones: Sequence[MissionMilestone], when: datetime
) -> Optional[MissionMilestone]:
    """Most recent milestone at or before ``when``."""
    active = active_milestones(milestones, when)
    if not active:
        return None
    return max(active, key=lambda m: ensure_utc(m.timestamp))


def light_travel_time_hours(distance_au: float) -> float:
    """One-way light time from ``distance_au`` in hours."""
    return distance_au * LIGHT_MINUTES_PER_AU / 60.0
