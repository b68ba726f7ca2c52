"""
Scenario generation and storage tests
"""

import numpy as np
import pytest

from rover_nav.config import Config
from rover_nav.environment import chebyshev
from rover_nav.scenario import ObstacleEvent, Scenario, ScenarioGenerator, is_reachable


def small_generator(seed, **scenario):
    config = Config()
    config.grid.width = 30
    config.grid.height = 20
    config.rover.start = (2, 2)
    config.rover.goal = (27, 17)
    for key, value in scenario.items():
        setattr(config.scenario, key, value)
    return ScenarioGenerator(config, seed=seed)


def test_is_reachable():
    occ = np.zeros((5, 5), dtype=bool)
    occ[2, :] = True
    assert not is_reachable(occ, (0, 0), (4, 4))

    occ[2, 4] = False
    assert is_reachable(occ, (0, 0), (4, 4))

    # Diagonal-only connection counts
    diag = np.ones((3, 3), dtype=bool)
    diag[0, 0] = diag[1, 1] = diag[2, 2] = False
    assert is_reachable(diag, (0, 0), (2, 2))


@pytest.mark.parametrize("seed", range(6))
def test_generated_scenarios_stay_connected(seed):
    scenario = small_generator(seed, num_static_blobs=(10, 20)).generate()

    assert scenario.is_connected()
    occ = scenario.occupancy()
    assert not occ[2, 2] and not occ[27, 17]
    assert not occ[0:5, 0:5].any()


def test_generation_is_reproducible():
    a = small_generator(11).generate()
    b = small_generator(11).generate()
    c = small_generator(12).generate()

    assert a.static_obstacles == b.static_obstacles
    assert a.events == b.events
    assert a.static_obstacles != c.static_obstacles or a.events != c.events


def test_events_avoid_static_cells_and_endpoints():
    scenario = small_generator(3, num_dynamic_obstacles=(10, 10)).generate()
    static = set(scenario.static_obstacles)

    assert len(scenario.events) == 10
    ticks = [e.tick for e in scenario.events]
    assert ticks == sorted(ticks)
    for event in scenario.events:
        assert 1 <= event.tick <= 40
        assert event.cell not in static
        assert chebyshev(event.cell, scenario.start) > 2
        assert chebyshev(event.cell, scenario.goal) > 2


def test_falls_back_to_empty_map():
    # Blobs cover the whole grid, so no attempt can connect start and goal
    generator = small_generator(0, num_static_blobs=(200, 200), blob_size=(10, 10),
                                clearance=0, max_attempts=2)
    scenario = generator.generate()
    assert scenario.static_obstacles == []


def test_npz_round_trip(tmp_path):
    scenario = small_generator(5).generate()
    path = tmp_path / 'scenario.npz'
    scenario.save_npz(path)

    loaded = Scenario.load_npz(path)

    assert loaded == scenario


def test_npz_round_trip_without_obstacles(tmp_path):
    scenario = Scenario(width=8, height=6, start=(0, 0), goal=(7, 5))
    path = tmp_path / 'empty.npz'
    scenario.save_npz(path)

    loaded = Scenario.load_npz(path)
    assert loaded.static_obstacles == [] and loaded.events == []
    assert loaded.seed is None


def test_build_session_places_static_map():
    scenario = Scenario(width=10, height=10, start=(0, 0), goal=(9, 9),
                        static_obstacles=[(4, 4), (4, 5)],
                        events=[ObstacleEvent(2, (7, 7))])
    session = scenario.build_session()

    assert session.knowledge.static == {(4, 4), (4, 5)}
    assert not session.is_started
    assert session.grid.width == 10
    assert session.state.goal == (9, 9)
