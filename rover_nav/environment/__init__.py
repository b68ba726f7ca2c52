"""
Environment Module
==================

Grid representation and obstacle knowledge (sensing) model.
"""

from .grid import Cell, Grid, DIRECTIONS, as_cell, chebyshev
from .obstacles import ObstacleKnowledge, DEFAULT_DETECTION_RADIUS

__all__ = [
    'Cell',
    'Grid',
    'DIRECTIONS',
    'as_cell',
    'chebyshev',
    'ObstacleKnowledge',
    'DEFAULT_DETECTION_RADIUS',
]
