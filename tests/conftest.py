"""
Shared test setup
"""

import matplotlib

matplotlib.use('Agg')

import pytest

from rover_nav.config import Config


def make_config(width=10, height=10, start=(0, 0), goal=(9, 9),
                algorithm='A*', **simulation) -> Config:
    """Small deterministic configuration for session-level tests"""
    config = Config()
    config.grid.width = width
    config.grid.height = height
    config.rover.start = start
    config.rover.goal = goal
    config.rover.algorithm = algorithm
    for key, value in simulation.items():
        setattr(config.simulation, key, value)
    return config.validate()


@pytest.fixture
def small_config():
    return make_config()
