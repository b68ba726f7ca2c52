"""
Configuration Settings Module
==============================

Dataclass-based configuration with validation and defaults.
Follows Single Responsibility Principle - only handles configuration.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Optional, Any, Tuple, Union

from ..errors import ConfigError


ALGORITHM_NAMES = ('A*', 'D*-Lite', 'Field D*')
BLOCKED_POLICIES = ('retry', 'freeze')


@dataclass
class GridConfig:
    """Grid dimensions (cells)"""
    width: int = 50
    height: int = 30


@dataclass
class RoverConfig:
    """Rover start pose, goal and initial planning algorithm"""
    start: Tuple[int, int] = (5, 5)
    goal: Tuple[int, int] = (45, 25)
    algorithm: str = 'D*-Lite'


@dataclass
class SensingConfig:
    """Obstacle detection parameters"""
    # Chebyshev radius at which unknown obstacles become known
    detection_radius: int = 2


@dataclass
class SimulationConfig:
    """External stepper and loop policy"""
    # 1 (slowest) .. 10 (fastest)
    speed: int = 5
    max_steps: int = 1000

    # 'retry': re-plan every tick while blocked
    # 'freeze': skip planning until obstacles or algorithm change
    blocked_policy: str = 'retry'

    @property
    def tick_interval_ms(self) -> int:
        """Delay between ticks for the current speed setting"""
        return 1100 - self.speed * 100


@dataclass
class ScenarioConfig:
    """Random scenario generation parameters"""
    num_static_blobs: Tuple[int, int] = (6, 12)  # min, max
    blob_size: Tuple[int, int] = (1, 4)  # half-extent in cells
    num_dynamic_obstacles: Tuple[int, int] = (8, 16)
    dynamic_window: Tuple[int, int] = (1, 40)  # tick range for placements
    clearance: int = 2  # free radius kept around start and goal
    max_attempts: int = 20


@dataclass
class VisualizationConfig:
    """Visualization and debugging configuration"""
    enabled: bool = True
    save_frames: bool = False
    frame_dir: str = 'frames'
    figure_size: Tuple[int, int] = (12, 8)
    dpi: int = 100

    # free, static, detected (blue), undetected (amber)
    cell_colors: tuple = ('white', 'dimgray', 'royalblue', 'orange')
    path_colors: Dict[str, str] = field(default_factory=lambda: {
        'planned': 'tab:blue',
        'traveled': 'tab:red',
        'trajectory': 'tab:purple',
    })


@dataclass
class LoggingConfig:
    """Logging sinks"""
    level: str = 'INFO'
    log_dir: Optional[str] = None


@dataclass
class Config:
    """
    Master configuration class combining all sub-configurations.

    Usage:
        config = Config()
        config = Config(sensing=SensingConfig(detection_radius=3))
    """
    grid: GridConfig = field(default_factory=GridConfig)
    rover: RoverConfig = field(default_factory=RoverConfig)
    sensing: SensingConfig = field(default_factory=SensingConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Global settings
    random_seed: Optional[int] = None
    verbose: bool = False

    _SECTIONS = {
        'grid': GridConfig,
        'rover': RoverConfig,
        'sensing': SensingConfig,
        'simulation': SimulationConfig,
        'scenario': ScenarioConfig,
        'visualization': VisualizationConfig,
        'logging': LoggingConfig,
    }

    def validate(self) -> 'Config':
        """
        Check value ranges.

        Raises:
            ConfigError: on the first invalid value found
        """
        if self.grid.width <= 0 or self.grid.height <= 0:
            raise ConfigError(
                f"grid must be positive, got {self.grid.width}x{self.grid.height}"
            )
        if self.rover.algorithm not in ALGORITHM_NAMES:
            raise ConfigError(
                f"unknown algorithm {self.rover.algorithm!r}, "
                f"expected one of {ALGORITHM_NAMES}"
            )
        if self.sensing.detection_radius < 1:
            raise ConfigError("detection_radius must be at least 1")
        if not 1 <= self.simulation.speed <= 10:
            raise ConfigError(f"speed must be in 1..10, got {self.simulation.speed}")
        if self.simulation.max_steps <= 0:
            raise ConfigError("max_steps must be positive")
        if self.simulation.blocked_policy not in BLOCKED_POLICIES:
            raise ConfigError(
                f"blocked_policy must be one of {BLOCKED_POLICIES}, "
                f"got {self.simulation.blocked_policy!r}"
            )
        return self

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Config':
        """Create Config from (possibly nested) dictionary"""
        config = cls()
        for key, value in d.items():
            section = cls._SECTIONS.get(key)
            if section is not None and isinstance(value, dict):
                current = getattr(config, key)
                for name, item in value.items():
                    if not hasattr(current, name):
                        raise ConfigError(f"unknown setting {key}.{name}")
                    if isinstance(item, list):
                        item = tuple(item)
                    setattr(current, name, item)
            elif hasattr(config, key):
                setattr(config, key, value)
            else:
                raise ConfigError(f"unknown setting {key}")
        return config.validate()

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'Config':
        """Load Config from a JSON file"""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return asdict(self)
