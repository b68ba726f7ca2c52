"""
A* Planner Module
=================

Classical best-first search with uniform step cost on the 8-connected grid.
"""

import heapq
from typing import AbstractSet, Dict, Tuple

from .base import Algorithm, Path, PathPlanner, PlannerStats
from ..environment import Cell, Grid, chebyshev


class AStarPlanner(PathPlanner):
    """
    A* planner over known obstacles.

    - Step cost 1 in all 8 directions
    - Heuristic: Chebyshev distance to goal (admissible and consistent)
    - Open set ordered by (f, h, x, y) so identical inputs give identical paths
    - No state kept between calls
    """

    algorithm = Algorithm.ASTAR

    def __init__(self, max_expansions: int = None):
        """
        Initialize A* planner.

        Args:
            max_expansions: Maximum node expansions (None for unlimited)
        """
        super().__init__()
        self.max_expansions = max_expansions

    def _search(self, start: Cell, goal: Cell,
                obstacles: AbstractSet[Tuple[int, int]], grid: Grid) -> Path:
        stats = PlannerStats()
        self.last_stats = stats

        max_iters = self.max_expansions if self.max_expansions is not None else grid.size * 8

        h0 = chebyshev(start, goal)
        open_set = [(h0, h0, start)]
        came_from: Dict[Cell, Cell] = {}
        g_score: Dict[Cell, int] = {start: 0}
        closed = set()

        while open_set and stats.iterations < max_iters:
            stats.iterations += 1

            _, _, current = heapq.heappop(open_set)

            if current in closed:
                continue
            closed.add(current)
            stats.nodes_expanded += 1

            if current == goal:
                return self._reconstruct_path(came_from, current)

            tentative_g = g_score[current] + 1
            for neighbor in grid.neighbors(current):
                if neighbor in closed or neighbor in obstacles:
                    continue
                if tentative_g < g_score.get(neighbor, tentative_g + 1):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    h = chebyshev(neighbor, goal)
                    heapq.heappush(open_set, (tentative_g + h, h, neighbor))

        stats.reason = 'no_path_found' if not open_set else 'max_iterations'
        return []

    def _reconstruct_path(self, came_from: Dict, current: Cell) -> Path:
        """Reconstruct path from came_from dict"""
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path
