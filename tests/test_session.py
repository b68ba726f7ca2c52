"""
Session boundary tests
"""

import pytest

from rover_nav.errors import ConfigError, InvalidGrid, SessionError
from rover_nav.planning import Algorithm
from rover_nav.rover import NavigationSession, RoverStatus

from conftest import make_config


def test_literal_journey_through_session(small_config):
    session = NavigationSession(small_config)
    reports = []
    session.subscribe(reports.append)

    while not session.is_finished:
        session.tick()

    assert len(reports) == 9
    assert reports[0].path[1] == (1, 1)
    assert session.status == RoverStatus.GOAL_REACHED
    assert session.last_report is reports[-1]


def test_placement_rejections_return_false(small_config):
    session = NavigationSession(small_config)

    assert session.place_unknown_obstacle((4, 4))
    assert not session.place_unknown_obstacle((4, 4))
    assert not session.place_unknown_obstacle((0, 0))
    assert not session.place_unknown_obstacle((9, 9))
    assert not session.place_unknown_obstacle((10, 10))
    assert session.knowledge.unknown == {(4, 4)}


def test_static_obstacles_and_goal_before_start_only(small_config):
    session = NavigationSession(small_config)
    assert session.place_static_obstacle((3, 3))
    assert session.set_goal((9, 0))
    assert not session.set_goal((3, 3))
    assert not session.set_goal((20, 0))

    session.start()
    with pytest.raises(SessionError):
        session.place_static_obstacle((4, 4))
    with pytest.raises(SessionError):
        session.set_goal((5, 5))

    # unknown placement is still accepted during the journey
    assert session.place_unknown_obstacle((6, 0))


def test_placements_during_tick_are_deferred(small_config):
    session = NavigationSession(small_config)
    seen = []

    def listener(report):
        if report.tick == 1:
            # Adjacent to the rover's new position (1, 1)
            assert session.place_unknown_obstacle((2, 2))
            seen.append(session.knowledge.is_unknown((2, 2)))

    session.subscribe(listener)
    first = session.tick()

    assert seen == [False]
    assert session.knowledge.is_unknown((2, 2))
    assert (2, 2) not in first.promoted

    second = session.tick()
    assert second.promoted == {(2, 2)}
    assert (2, 2) not in second.path


def test_algorithm_change_during_tick_applies_after(small_config):
    session = NavigationSession(small_config)
    session.subscribe(lambda report: session.set_algorithm('Field D*'))

    first = session.tick()
    assert first.algorithm is Algorithm.ASTAR
    assert session.state.algorithm is Algorithm.FIELD_DSTAR

    second = session.tick()
    assert second.algorithm is Algorithm.FIELD_DSTAR


def test_unsubscribe(small_config):
    session = NavigationSession(small_config)
    reports = []
    unsubscribe = session.subscribe(reports.append)
    session.tick()
    unsubscribe()
    session.tick()
    assert len(reports) == 1


def test_pause_and_resume(small_config):
    session = NavigationSession(small_config)
    assert not session.is_running
    session.start()
    assert session.is_running

    session.pause()
    assert session.is_paused and not session.is_running
    session.resume()
    assert session.is_running


def test_reset_restores_configured_start(small_config):
    session = NavigationSession(small_config)
    session.place_static_obstacle((5, 5))
    session.tick()
    session.tick()

    session.reset()

    assert not session.is_started
    assert session.state.position == (0, 0)
    assert session.state.tick == 0
    assert not session.knowledge.known
    assert session.stats.steps == 0


def test_enclosed_goal_session():
    session = NavigationSession(make_config(goal=(5, 5)))
    for x in range(4, 7):
        for y in range(4, 7):
            if (x, y) != (5, 5):
                assert session.place_static_obstacle((x, y))

    report = session.tick()
    assert report.status == RoverStatus.BLOCKED
    assert session.is_finished


def test_invalid_grid_fails_construction():
    config = make_config()
    config.grid.width = 0
    with pytest.raises((InvalidGrid, ConfigError)):
        NavigationSession(config)
