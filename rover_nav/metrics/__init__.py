"""
Metrics Module
==============

Journey statistics, backtracking analysis and run outcomes.
"""

from .journey import (
    JourneyStats,
    BacktrackingStats,
    compute_backtracking_stats,
    RunStatus,
    RunResult,
)

__all__ = [
    'JourneyStats',
    'BacktrackingStats',
    'compute_backtracking_stats',
    'RunStatus',
    'RunResult',
]
