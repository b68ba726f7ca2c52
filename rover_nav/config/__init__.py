"""
Configuration Module
====================

Centralized configuration management for the rover navigation system.
"""

from .settings import (
    Config,
    GridConfig,
    RoverConfig,
    SensingConfig,
    SimulationConfig,
    ScenarioConfig,
    VisualizationConfig,
    LoggingConfig,
    ALGORITHM_NAMES,
    BLOCKED_POLICIES,
)

__all__ = [
    'Config',
    'GridConfig',
    'RoverConfig',
    'SensingConfig',
    'SimulationConfig',
    'ScenarioConfig',
    'VisualizationConfig',
    'LoggingConfig',
    'ALGORITHM_NAMES',
    'BLOCKED_POLICIES',
]
