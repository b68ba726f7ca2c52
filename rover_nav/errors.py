"""
Errors Module
=============

Exception hierarchy shared by the navigation core.

All errors are local and non-fatal to a session, except InvalidGrid which
fails session construction.
"""

from typing import Optional, Tuple


class NavigationError(Exception):
    """Base class for all rover navigation errors"""


class InvalidGrid(NavigationError, ValueError):
    """Grid dimensions are zero or negative"""


class OutOfBounds(NavigationError, ValueError):
    """A cell reference lies outside the grid"""

    def __init__(self, cell: Tuple[int, int], width: int, height: int):
        self.cell = tuple(cell)
        self.width = width
        self.height = height
        super().__init__(
            f"cell {self.cell} outside grid [0, {width}) x [0, {height})"
        )


class InvalidPlacement(NavigationError):
    """Obstacle placement rejected (rover cell, goal cell or occupied cell)"""

    def __init__(self, cell: Tuple[int, int], reason: str):
        self.cell = tuple(cell)
        self.reason = reason
        super().__init__(f"cannot place obstacle at {self.cell}: {reason}")


class NoPathFound(NavigationError):
    """Planner cannot connect start to goal under the known obstacles"""

    def __init__(self, start: Tuple[int, int], goal: Tuple[int, int],
                 algorithm: Optional[str] = None):
        self.start = tuple(start)
        self.goal = tuple(goal)
        self.algorithm = algorithm
        via = f" ({algorithm})" if algorithm else ""
        super().__init__(f"no path from {self.start} to {self.goal}{via}")


class SessionError(NavigationError):
    """Operation not allowed in the current session phase"""


class ConfigError(NavigationError, ValueError):
    """Invalid configuration value"""
