"""
Scenario Module
===============

Random scenario generation and NPZ storage.
"""

from .generator import (
    ObstacleEvent,
    Scenario,
    ScenarioGenerator,
    is_reachable,
)

__all__ = ['ObstacleEvent', 'Scenario', 'ScenarioGenerator', 'is_reachable']
