"""
Tick driver tests
"""

import pytest

from rover_nav.errors import ConfigError
from rover_nav.metrics import RunStatus
from rover_nav.rover import NavigationSession
from rover_nav.scenario import ObstacleEvent
from rover_nav.simulation import TickDriver, tick_delay_ms

from conftest import make_config


class FakeSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.mark.parametrize("speed,delay", [(1, 1000), (5, 600), (10, 100)])
def test_speed_mapping(speed, delay):
    assert tick_delay_ms(speed) == delay


@pytest.mark.parametrize("speed", [0, 11])
def test_invalid_speed(speed):
    with pytest.raises(ConfigError):
        tick_delay_ms(speed)
    session = NavigationSession(make_config())
    with pytest.raises(ConfigError):
        TickDriver(session, speed=speed)


def test_run_to_goal_sleeps_between_ticks():
    sleep = FakeSleep()
    session = NavigationSession(make_config())
    driver = TickDriver(session, speed=8, sleep=sleep)

    result = driver.run()

    assert result.status == RunStatus.SUCCESS
    assert result.is_success
    assert result.ticks == 9
    assert result.path[0] == (0, 0) and result.path[-1] == (9, 9)
    # No wait after the terminal tick
    assert sleep.calls == [0.3] * 8


def test_speed_change_between_ticks():
    sleep = FakeSleep()
    session = NavigationSession(make_config())
    driver = TickDriver(session, speed=1, sleep=sleep)

    driver.step()
    driver.speed = 10
    assert driver.delay_ms == 100
    driver.run()
    assert sleep.calls[0] == pytest.approx(0.1)


def test_step_limit():
    session = NavigationSession(make_config(width=30, height=5, goal=(29, 0)))
    driver = TickDriver(session, max_steps=5, sleep=FakeSleep())

    result = driver.run()

    assert result.status == RunStatus.STEP_LIMIT
    assert result.ticks == 5
    assert driver.step() is None


def test_default_step_limit_from_config():
    session = NavigationSession(make_config())
    assert TickDriver(session).max_steps == 1000


def test_pause_stops_the_driver():
    session = NavigationSession(make_config())

    def pause_after_third(report):
        if report.tick == 3:
            session.pause()

    session.subscribe(pause_after_third)
    driver = TickDriver(session, sleep=FakeSleep())
    result = driver.run()

    assert result.status == RunStatus.STOPPED
    assert result.ticks == 3
    assert driver.step() is None

    session.resume()
    result = driver.run()
    assert result.status == RunStatus.SUCCESS
    assert driver.steps == 9


def test_scripted_events_applied_at_tick_boundaries():
    session = NavigationSession(make_config())
    events = [ObstacleEvent(3, (4, 4)), ObstacleEvent(3, (0, 0)), ObstacleEvent(50, (8, 1))]
    driver = TickDriver(session, events=events, sleep=FakeSleep())

    reports = [driver.step() for _ in range(2)]
    assert session.knowledge.unknown == frozenset()

    third = driver.step()
    # Both cells are two away from (2, 2) and are detected on the same tick
    assert third.promoted == {(4, 4), (0, 0)}
    assert reports[1].position == (2, 2)

    result = driver.run()
    assert result.is_success
    assert (4, 4) not in result.path
    assert result.info['pending_events'] == 1


def test_rejected_events_are_counted():
    session = NavigationSession(make_config())
    events = [ObstacleEvent(2, (1, 1)), ObstacleEvent(2, (9, 9))]
    driver = TickDriver(session, events=events, sleep=FakeSleep())

    driver.step()
    driver.step()
    # (1, 1) is the rover's cell when tick 2 runs, (9, 9) is the goal
    assert driver.rejected_events == 2


def test_blocked_run():
    session = NavigationSession(make_config(goal=(5, 5)))
    for x in range(4, 7):
        for y in range(4, 7):
            if (x, y) != (5, 5):
                session.place_static_obstacle((x, y))

    result = TickDriver(session, sleep=FakeSleep()).run()
    assert result.status == RunStatus.BLOCKED
    assert result.ticks == 1
