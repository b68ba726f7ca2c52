"""
Field D* Planner Module
=======================

Interpolation-based planning (Ferguson & Stentz). Cost-to-goal values are
computed on cell nodes, but a node may reach any point on the segment
between an orthogonal and a diagonal neighbour; the value at that point is
the linear interpolation of the two neighbour values. This yields a smooth
cost field whose gradient gives continuous headings rather than the 8 fixed
grid directions.

The rover still moves cell to cell, so the continuous heading at each node
is snapped to the nearest grid direction. The continuous crossing points are
kept in `last_trajectory` for display.
"""

import heapq
import math
from typing import AbstractSet, Dict, List, Optional, Tuple

from .base import Algorithm, Path, PathPlanner, PlannerStats, step_cost
from ..environment import Cell, Grid


INF = math.inf
SQRT2 = math.sqrt(2.0)

# Heading offsets closer to the diagonal than this snap to the diagonal
SNAP_THRESHOLD = math.tan(math.pi / 8)

# (orthogonal, diagonal) neighbour pairs bounding the 8 triangles around a node
RING = (
    ((1, 0), (1, 1)), ((0, 1), (1, 1)),
    ((0, 1), (-1, 1)), ((-1, 0), (-1, 1)),
    ((-1, 0), (-1, -1)), ((0, -1), (-1, -1)),
    ((0, -1), (1, -1)), ((1, 0), (1, -1)),
)

EPS = 1e-9


def interpolated_cost(g1: float, g2: float) -> Tuple[float, float]:
    """
    Cheapest cost through the edge between an orthogonal neighbour (value
    g1) and a diagonal neighbour (value g2), unit traversal cost.

    The crossing point sits at offset y in [0, 1] from the orthogonal
    neighbour; travelling there costs sqrt(1 + y^2) and the remaining cost
    is (1 - y) * g1 + y * g2.

    Returns:
        (cost, y)
    """
    if g1 == INF and g2 == INF:
        return INF, 0.0
    if g2 == INF:
        return 1.0 + g1, 0.0
    if g1 == INF:
        return SQRT2 + g2, 1.0

    f = g1 - g2
    if f <= 0.0:
        return 1.0 + g1, 0.0
    if f >= 1.0 / SQRT2:
        return SQRT2 + g2, 1.0

    y = f / math.sqrt(1.0 - f * f)
    return math.sqrt(1.0 + y * y) + g1 - y * f, y


class FieldDStarPlanner(PathPlanner):
    """
    Field D* planner.

    - Backward sweep from the goal fills an interpolated cost field
    - Path follows the field's continuous heading snapped to 8 directions,
      falling back to steepest descent when the snapped cell does not
      lower the field value
    - Recomputed from scratch on every call
    """

    algorithm = Algorithm.FIELD_DSTAR

    def __init__(self):
        super().__init__()
        self.last_field: Dict[Cell, float] = {}
        self.last_trajectory: List[Tuple[float, float]] = []

    def reset(self):
        super().reset()
        self.last_field = {}
        self.last_trajectory = []

    def _search(self, start: Cell, goal: Cell,
                obstacles: AbstractSet[Tuple[int, int]], grid: Grid) -> Path:
        self.last_stats = PlannerStats()
        self.last_trajectory = []

        blocked = frozenset(c for c in obstacles if c != start)
        field = self._compute_field(goal, blocked, grid)
        self.last_field = field

        if field.get(start, INF) == INF:
            self.last_stats.reason = 'no_path_found'
            return []
        return self._extract_path(start, goal, field, blocked, grid)

    # ==================== Cost Field ====================

    def _node_cost(self, s: Cell, field: Dict[Cell, float],
                   blocked: AbstractSet[Cell],
                   grid: Grid) -> Tuple[float, Optional[Tuple[Cell, Cell, float]]]:
        """Best interpolated value of s and the (orthogonal, diagonal, y) it uses"""
        best = INF
        best_edge = None
        x, y = s
        for (ox, oy), (dx, dy) in RING:
            s1 = Cell(x + ox, y + oy)
            s2 = Cell(x + dx, y + dy)
            g1 = field.get(s1, INF) if grid.in_bounds(s1) and s1 not in blocked else INF
            g2 = field.get(s2, INF) if grid.in_bounds(s2) and s2 not in blocked else INF
            cost, offset = interpolated_cost(g1, g2)
            if cost < best:
                best = cost
                best_edge = (s1, s2, offset)
        return best, best_edge

    def _compute_field(self, goal: Cell, blocked: AbstractSet[Cell],
                       grid: Grid) -> Dict[Cell, float]:
        """Label-correcting backward sweep from the goal"""
        stats = self.last_stats
        field: Dict[Cell, float] = {goal: 0.0}
        open_list = [(0.0, goal)]

        while open_list:
            value, u = heapq.heappop(open_list)
            stats.iterations += 1
            if value > field.get(u, INF) + EPS:
                continue
            stats.nodes_expanded += 1

            for s in grid.neighbors(u):
                if s == goal or s in blocked:
                    continue
                cost, _ = self._node_cost(s, field, blocked, grid)
                if cost < field.get(s, INF) - EPS:
                    field[s] = cost
                    heapq.heappush(open_list, (cost, s))

        return field

    # ==================== Path Extraction ====================

    def _extract_path(self, start: Cell, goal: Cell, field: Dict[Cell, float],
                      blocked: AbstractSet[Cell], grid: Grid) -> Path:
        path = [start]
        trajectory = [(float(start.x), float(start.y))]
        current = start

        while current != goal:
            value = field[current]
            _, edge = self._node_cost(current, field, blocked, grid)
            s1, s2, offset = edge
            trajectory.append((s1.x + offset * (s2.x - s1.x),
                               s1.y + offset * (s2.y - s1.y)))

            snapped = s2 if offset > SNAP_THRESHOLD else s1
            if field.get(snapped, INF) < value and snapped not in blocked \
                    and grid.in_bounds(snapped):
                nxt = snapped
            else:
                nxt = self._steepest_descent(current, field, blocked, grid)
            if nxt is None or field.get(nxt, INF) >= value:
                self.last_stats.reason = 'extraction_failed'
                return []

            path.append(nxt)
            current = nxt

        trajectory[-1] = (float(goal.x), float(goal.y))
        self.last_trajectory = trajectory
        return path

    def _steepest_descent(self, current: Cell, field: Dict[Cell, float],
                          blocked: AbstractSet[Cell], grid: Grid) -> Optional[Cell]:
        candidates = [
            (field.get(n, INF), step_cost(current, n), n)
            for n in grid.neighbors(current)
            if n not in blocked
        ]
        if not candidates:
            return None
        value, _, best = min(candidates)
        return best if value < INF else None
