"""
Configuration tests
"""

import json

import pytest

from rover_nav.config import Config, SensingConfig
from rover_nav.errors import ConfigError


def test_defaults():
    config = Config()

    assert (config.grid.width, config.grid.height) == (50, 30)
    assert config.rover.start == (5, 5)
    assert config.rover.goal == (45, 25)
    assert config.rover.algorithm == 'D*-Lite'
    assert config.sensing.detection_radius == 2
    assert config.simulation.speed == 5
    assert config.simulation.tick_interval_ms == 600
    assert config.simulation.max_steps == 1000
    assert config.simulation.blocked_policy == 'retry'
    assert config.validate() is config


@pytest.mark.parametrize("section,name,value", [
    ('simulation', 'speed', 0),
    ('simulation', 'speed', 11),
    ('simulation', 'blocked_policy', 'wait'),
    ('simulation', 'max_steps', 0),
    ('rover', 'algorithm', 'Dijkstra'),
    ('sensing', 'detection_radius', 0),
    ('grid', 'width', -3),
])
def test_validation(section, name, value):
    config = Config()
    setattr(getattr(config, section), name, value)
    with pytest.raises(ConfigError):
        config.validate()


def test_from_dict_nested():
    config = Config.from_dict({
        'grid': {'width': 20, 'height': 12},
        'rover': {'start': [1, 1], 'goal': [18, 10], 'algorithm': 'Field D*'},
        'random_seed': 7,
    })

    assert config.grid.width == 20
    assert config.rover.start == (1, 1)
    assert config.rover.goal == (18, 10)
    assert config.rover.algorithm == 'Field D*'
    assert config.random_seed == 7


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigError):
        Config.from_dict({'grid': {'depth': 3}})
    with pytest.raises(ConfigError):
        Config.from_dict({'fov': {}})


def test_from_dict_validates():
    with pytest.raises(ConfigError):
        Config.from_dict({'simulation': {'speed': 42}})


def test_json_round_trip(tmp_path):
    config = Config(sensing=SensingConfig(detection_radius=3))
    config.simulation.speed = 9
    path = tmp_path / 'config.json'
    path.write_text(json.dumps(config.to_dict()))

    loaded = Config.from_json(path)

    assert loaded.sensing.detection_radius == 3
    assert loaded.simulation.speed == 9
    assert loaded.to_dict() == config.to_dict()
