"""
Planner Interface Module
========================

Shared planning capability and the closed family of algorithms that
implement it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Tuple

from ..environment import Cell, Grid, as_cell
from ..errors import ConfigError, NoPathFound


Path = List[Cell]


class Algorithm(str, Enum):
    """Available planning algorithms, valued by their display names"""
    ASTAR = 'A*'
    DSTAR_LITE = 'D*-Lite'
    FIELD_DSTAR = 'Field D*'

    @classmethod
    def from_name(cls, name) -> 'Algorithm':
        """Accept an Algorithm, its display name or its member name"""
        if isinstance(name, cls):
            return name
        for member in cls:
            if name == member.value or str(name).upper() == member.name:
                return member
        raise ConfigError(
            f"unknown algorithm {name!r}, expected one of {[m.value for m in cls]}"
        )


@dataclass
class PlannerStats:
    """Statistics from a planning run"""
    iterations: int = 0
    nodes_expanded: int = 0
    path_length: int = 0
    success: bool = False
    reason: str = ''


class PathPlanner(ABC):
    """
    Base class for grid planners.

    Contract for plan():
    - 8-connected moves; a diagonal step only needs a free destination
    - the start cell is always traversable
    - start == goal returns [start]
    - an unreachable goal raises NoPathFound, never a partial path
    """

    algorithm: Algorithm

    def __init__(self):
        self.last_stats: PlannerStats = PlannerStats()

    def plan(self,
             start: Tuple[int, int],
             goal: Tuple[int, int],
             obstacles: AbstractSet[Tuple[int, int]],
             grid: Grid) -> Path:
        """
        Find path from start to goal avoiding obstacles.

        Args:
            start: Current position
            goal: Goal position
            obstacles: Frozen snapshot of known obstacles
            grid: Grid the cells live in

        Returns:
            Cells from start (inclusive) to goal (inclusive)

        Raises:
            OutOfBounds: start or goal is off the grid
            NoPathFound: goal unreachable under obstacles
        """
        start = grid.require_in_bounds(start)
        goal = grid.require_in_bounds(goal)

        if start == goal:
            self.last_stats = PlannerStats(path_length=1, success=True, reason='at_goal')
            return [start]

        if goal in obstacles:
            self.last_stats = PlannerStats(reason='goal_blocked')
            raise NoPathFound(start, goal, self.algorithm.value)

        path = self._search(start, goal, obstacles, grid)
        if not path:
            if not self.last_stats.reason:
                self.last_stats.reason = 'no_path_found'
            self.last_stats.success = False
            raise NoPathFound(start, goal, self.algorithm.value)

        self.last_stats.path_length = len(path)
        self.last_stats.success = True
        self.last_stats.reason = 'success'
        return path

    @abstractmethod
    def _search(self, start: Cell, goal: Cell,
                obstacles: AbstractSet[Tuple[int, int]], grid: Grid) -> Path:
        """Algorithm body; return [] when no path exists"""

    def reset(self):
        """Discard any state carried between calls"""
        self.last_stats = PlannerStats()


def step_cost(a: Tuple[int, int], b: Tuple[int, int]) -> float:
    """Euclidean length of a single 8-connected step"""
    if a[0] != b[0] and a[1] != b[1]:
        return 2 ** 0.5
    return 1.0


def is_valid_path(path: Path, start, goal, obstacles, grid: Grid) -> bool:
    """Check path shape: endpoints, adjacency, bounds and obstacle avoidance"""
    if not path or as_cell(path[0]) != as_cell(start) or as_cell(path[-1]) != as_cell(goal):
        return False
    for prev, cur in zip(path, path[1:]):
        if max(abs(cur[0] - prev[0]), abs(cur[1] - prev[1])) != 1:
            return False
        if not grid.in_bounds(cur) or cur in obstacles:
            return False
    return True
