"""
Tests for the simulation clock, driven by an injected wall clock.
"""
from datetime import datetime, timedelta, timezone

import pytest

from orbital_engine.core.time_controller import EARLIEST, LATEST, TimeController
from orbital_engine.utils.constants import TIME_SPEEDS

START = datetime(2024, 6, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock(100.0)


@pytest.fixture
def controller(clock):
    return TimeController(START, clock=clock)


def test_initial_state(controller):
    assert controller.time == START
    assert controller.is_running
    assert controller.speed == 1.0
    assert controller.snapshot().last_tick == 100.0


def test_naive_initial_time_is_utc(clock):
    controller = TimeController(datetime(2024, 6, 1), clock=clock)
    assert controller.time == START


def test_tick_scales_wall_time_by_speed(controller, clock):
    controller.set_speed(60.0)
    clock.advance(2.0)
    assert controller.tick() == START + timedelta(minutes=2)


def test_tick_with_explicit_delta(controller):
    controller.set_speed(10.0)
    assert controller.tick(wall_delta=0.5) == START + timedelta(seconds=5)


def test_monotonic_while_running(controller, clock):
    controller.set_speed(1000.0)
    previous = controller.time
    for step in (0.016, 0.017, 0.0, 0.5, 0.001):
        clock.advance(step)
        current = controller.tick()
        assert current >= previous
        previous = current


def test_pause_freezes_time(controller, clock):
    controller.pause()
    clock.advance(30.0)
    assert controller.tick() == START
    assert not controller.is_running


def test_pause_and_resume_do_not_jump(controller, clock):
    clock.advance(1.0)
    controller.tick()
    controller.pause()

    clock.advance(3600.0)  # long pause with no frames
    controller.play()
    clock.advance(1.0)
    assert controller.tick() == START + timedelta(seconds=2)


def test_paused_ticks_refresh_reference(controller, clock):
    controller.pause()
    clock.advance(50.0)
    controller.tick()
    assert controller.snapshot().last_tick == 150.0


def test_toggle(controller, clock):
    controller.toggle()
    assert not controller.is_running
    clock.advance(10.0)
    controller.toggle()
    assert controller.is_running
    clock.advance(1.0)
    assert controller.tick() == START + timedelta(seconds=1)


def test_set_speed_is_not_clamped(controller, clock):
    controller.set_speed(-2.0)
    clock.advance(1.0)
    assert controller.tick() == START - timedelta(seconds=2)

    controller.set_speed(0.0)
    clock.advance(5.0)
    assert controller.tick() == START - timedelta(seconds=2)


def test_speed_presets_step_up_and_down(controller):
    values = [value for _, value in TIME_SPEEDS]
    seen = []
    for _ in range(len(values) + 2):
        controller.increase_speed()
        seen.append(controller.speed)
    assert seen[:len(values) - 1] == values[1:]
    assert controller.speed == values[-1]

    controller.decrease_speed()
    assert controller.speed == values[-2]

    controller.set_speed(1.0)
    controller.decrease_speed()
    assert controller.speed == 1.0

    controller.set_speed(50.0)
    controller.increase_speed()
    assert controller.speed == 100.0


def test_set_time_notifies_and_keeps_running_state(controller, clock):
    seen = []
    controller.subscribe(seen.append)
    controller.pause()
    target = datetime(1999, 12, 31, 23, 59)
    controller.set_time(target)
    assert controller.time == target.replace(tzinfo=timezone.utc)
    assert not controller.is_running
    assert seen == [controller.time]


def test_reset(controller):
    controller.set_speed(86400.0)
    controller.pause()
    controller.set_time(datetime(1900, 1, 1, tzinfo=timezone.utc))
    controller.reset()
    assert controller.is_running
    assert controller.speed == 1.0
    assert abs((datetime.now(timezone.utc) - controller.time).total_seconds()) < 60


def test_listeners_receive_every_tick(controller, clock):
    seen = []
    unsubscribe = controller.subscribe(seen.append)
    clock.advance(1.0)
    controller.tick()
    controller.pause()
    controller.tick()
    assert seen == [START + timedelta(seconds=1)] * 2

    unsubscribe()
    unsubscribe()
    controller.tick()
    assert len(seen) == 2


def test_failing_listener_does_not_stop_others(controller, caplog):
    def broken(_):
        raise RuntimeError("boom")

    seen = []
    controller.subscribe(broken)
    controller.subscribe(seen.append)
    controller.tick(wall_delta=1.0)
    assert seen == [START + timedelta(seconds=1)]
    assert "Time listener" in caplog.text


def test_tick_saturates_at_latest_time(controller):
    controller.set_speed(1e12)
    assert controller.tick(wall_delta=1.0) == LATEST
    assert controller.tick(wall_delta=1.0) == LATEST

    controller.set_speed(-1.0)
    assert controller.tick(wall_delta=1.0) == LATEST - timedelta(seconds=1)


def test_long_reverse_gap_saturates_at_earliest_time(controller, clock):
    controller.set_speed(-2592000.0)
    clock.advance(30000.0)
    assert controller.tick() == EARLIEST


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_speed_is_ignored(controller, bad):
    controller.set_speed(60.0)
    controller.set_speed(bad)
    assert controller.speed == 60.0
    assert controller.tick(wall_delta=1.0) == START + timedelta(minutes=1)


def test_non_finite_delta_never_raises(controller):
    assert controller.tick(wall_delta=float("nan")) == START
    assert controller.tick(wall_delta=float("inf")) == LATEST
