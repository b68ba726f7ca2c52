"""
Simulation Module
=================

External stepping of navigation sessions and algorithm comparison.
"""

from .driver import TickDriver, tick_delay_ms, MIN_SPEED, MAX_SPEED
from .experiments import ComparisonResult, ExperimentRunner

__all__ = [
    'TickDriver',
    'tick_delay_ms',
    'MIN_SPEED',
    'MAX_SPEED',
    'ComparisonResult',
    'ExperimentRunner',
]
