"""Simulation clock with play/pause and speed control.

The controller owns the only mutable time state of the engine. It does
not schedule itself: a host loop (GUI timer, game loop, test) calls
:meth:`TimeController.tick` once per frame, and every other component is
queried with the time value it hands out.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from orbital_engine.utils.constants import TIME_SPEEDS
from orbital_engine.utils.time_utils import ensure_utc

logger = logging.getLogger(__name__)

TimeListener = Callable[[datetime], None]
WallClock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class ClockState:
    """Snapshot of the simulation clock."""

    current: datetime
    is_running: bool
    speed: float
    last_tick: float  # wall-clock seconds of the last reference refresh


class TimeController:
    """Drives simulated time from real elapsed time."""

    def __init__(
        self,
        initial_time: Optional[datetime] = None,
        clock: WallClock = time.perf_counter,
    ):
        self._clock = clock
        self._current = ensure_utc(initial_time) if initial_time else datetime.now(timezone.utc)
        self._is_running = True
        self._speed = 1.0
        self._last_tick = clock()
        self._listeners: list[TimeListener] = []

    # --- State ---

    @property
    def time(self) -> datetime:
        return self._current

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def speed(self) -> float:
        return self._speed

    def snapshot(self) -> ClockState:
        return ClockState(
            current=self._current,
            is_running=self._is_running,
            speed=self._speed,
            last_tick=self._last_tick,
        )

    # --- Transport ---

    def play(self) -> None:
        """Start the simulation."""
        self._is_running = True
        self._last_tick = self._clock()

    def pause(self) -> None:
        """Pause the simulation."""
        self._is_running = False

    def toggle(self) -> None:
        self._is_running = not self._is_running
        self._last_tick = self._clock()

    def set_speed(self, multiplier: float) -> None:
        """Set simulated seconds per wall-clock second."""
        multiplier = float(multiplier)
        if not math.isfinite(multiplier):
            logger.warning("Ignoring non-finite time speed %r", multiplier)
            return
        self._speed = multiplier
        self._last_tick = self._clock()

    def increase_speed(self) -> None:
        """Step up to the next preset above the current speed."""
        for _, value in TIME_SPEEDS:
            if value > self._speed:
                self.set_speed(value)
                return

    def decrease_speed(self) -> None:
        """Step down to the next preset below the current speed."""
        for _, value in reversed(TIME_SPEEDS):
            if value < self._speed:
                self.set_speed(value)
                return

    def set_time(self, dt: datetime) -> None:
        """Jump to a specific time without changing the running state."""
        self._current = ensure_utc(dt)
        self._last_tick = self._clock()
        self._notify()

    def reset(self) -> None:
        """Back to now, real-time speed, running."""
        self._current = datetime.now(timezone.utc)
        self._is_running = True
        self._speed = 1.0
        self._last_tick = self._clock()
        self._notify()

    # --- Frame advance ---

    def tick(self, wall_delta: Optional[float] = None) -> datetime:
        """Advance by one host frame.

        Args:
            wall_delta: real seconds since the previous frame; measured
                from the wall clock when omitted

        Returns:
            The simulated time after the frame.
        """
        now = self._clock()
        if wall_delta is None:
            wall_delta = now - self._last_tick
        # Refreshed while paused too, so resuming never applies a stale delta
        self._last_tick = now

        if self._is_running:
            self._current = _advance(self._current, wall_delta * self._speed)
        self._notify()
        return self._current

    # --- Listeners ---

    def subscribe(self, listener: TimeListener) -> Callable[[], None]:
        """Call ``listener`` with the new time after every update.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._current)
            except Exception:
                logger.exception("Time listener %r failed", listener)


EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
LATEST = datetime.max.replace(tzinfo=timezone.utc)


def _advance(current: datetime, seconds: float) -> datetime:
    """``current + seconds``, saturated at the representable datetime range."""
    if not math.isfinite(seconds):
        if math.isnan(seconds):
            return current
        return LATEST if seconds > 0 else EARLIEST
    try:
        return current + timedelta(seconds=seconds)
    except OverflowError:
        return LATEST if seconds > 0 else EARLIEST
