"""
Rover Navigation - Modular Architecture
=======================================

Grid rover navigation with incremental re-planning under partial obstacle
knowledge.

An external actor drops obstacles on the grid while the rover drives. The
rover only plans around obstacles it has detected within its sensing
radius, re-planning one step at a time.

Key Features:
- Three interchangeable planners: A*, D*-Lite (incremental), Field D*
- Unknown/known obstacle model with proximity detection
- Tick-driven controller with an explicit session boundary
- Random scenario generation with scripted obstacle events
- Live visualization and algorithm comparison

Version: 1.0.0
"""

from loguru import logger

__version__ = "1.0.0"

from .errors import (
    NavigationError,
    InvalidGrid,
    OutOfBounds,
    InvalidPlacement,
    NoPathFound,
    SessionError,
    ConfigError,
)
from .config import Config
from .environment import Cell, Grid, ObstacleKnowledge
from .planning import Algorithm, AStarPlanner, DStarLitePlanner, FieldDStarPlanner, create_planner
from .rover import RoverController, RoverStatus, TickReport, NavigationSession
from .metrics import JourneyStats, RunResult, RunStatus
from .scenario import Scenario, ScenarioGenerator
from .simulation import TickDriver, ExperimentRunner
from .visualization import LiveMonitor, MapVisualizer, create_tick_callback
from .logging_setup import setup_logger

# Library code stays silent until the application calls setup_logger()
logger.disable("rover_nav")

__all__ = [
    'NavigationError', 'InvalidGrid', 'OutOfBounds', 'InvalidPlacement',
    'NoPathFound', 'SessionError', 'ConfigError',
    'Config',
    'Cell', 'Grid', 'ObstacleKnowledge',
    'Algorithm', 'AStarPlanner', 'DStarLitePlanner', 'FieldDStarPlanner',
    'create_planner',
    'RoverController', 'RoverStatus', 'TickReport', 'NavigationSession',
    'JourneyStats', 'RunResult', 'RunStatus',
    'Scenario', 'ScenarioGenerator',
    'TickDriver', 'ExperimentRunner',
    'LiveMonitor', 'MapVisualizer', 'create_tick_callback',
    'setup_logger',
]
