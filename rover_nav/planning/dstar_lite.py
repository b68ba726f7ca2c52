"""
D*-Lite Planner Module
======================

Incremental goal-rooted search (Koenig & Likhachev, 2002) on the
8-connected grid with unit step cost.

The planner keeps g/rhs estimates, the priority queue and the key modifier
k_m between calls. Each call compares the obstacle snapshot it receives with
the one it last saw and repairs only the vertices next to changed cells, so
successive calls from a moving rover reuse almost all previous work.
"""

import heapq
import math
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, FrozenSet, List, Optional, Tuple

from loguru import logger

from .base import Algorithm, Path, PathPlanner, PlannerStats
from ..environment import Cell, Grid, chebyshev


INF = math.inf

Key = Tuple[float, float]


@dataclass
class DStarLiteState:
    """Search state carried between planning calls"""
    grid: Grid
    goal: Cell
    last_start: Cell
    g: Dict[Cell, float] = field(default_factory=dict)
    rhs: Dict[Cell, float] = field(default_factory=dict)
    queue: List[Tuple[Key, Cell]] = field(default_factory=list)
    queued: Dict[Cell, Key] = field(default_factory=dict)
    km: float = 0.0
    blocked: FrozenSet[Cell] = frozenset()


class DStarLitePlanner(PathPlanner):
    """
    D*-Lite planner.

    Cold start on the first call, after reset(), and whenever the goal or
    grid differs from the previous call. Paths have the same length as a
    from-scratch search over the same obstacles.
    """

    algorithm = Algorithm.DSTAR_LITE

    def __init__(self):
        super().__init__()
        self.state: Optional[DStarLiteState] = None
        self._start: Optional[Cell] = None

    def reset(self):
        super().reset()
        self.state = None

    @property
    def is_warm(self) -> bool:
        """True when incremental state from a previous call is available"""
        return self.state is not None

    # ==================== Planning ====================

    def _search(self, start: Cell, goal: Cell,
                obstacles: AbstractSet[Tuple[int, int]], grid: Grid) -> Path:
        self.last_stats = PlannerStats()

        # The rover's own cell is always traversable
        blocked = frozenset(c for c in obstacles if c != start)

        self._start = start
        state = self.state
        if state is None or state.goal != goal or state.grid != grid:
            logger.debug("D*-Lite cold start towards {}", goal)
            state = self._initialize(start, goal, grid, blocked)
        else:
            state.km += chebyshev(state.last_start, start)
            state.last_start = start

            changed = blocked.symmetric_difference(state.blocked)
            state.blocked = blocked
            if changed:
                logger.debug("D*-Lite repairing {} changed cell(s)", len(changed))
            for cell in changed:
                self._update_vertex(cell)
                for neighbor in grid.neighbors(cell):
                    self._update_vertex(neighbor)

        self._compute_shortest_path()

        if state.rhs.get(start, INF) == INF:
            self.last_stats.reason = 'no_path_found'
            return []
        return self._extract_path(start)

    def _initialize(self, start: Cell, goal: Cell, grid: Grid,
                    blocked: FrozenSet[Cell]) -> DStarLiteState:
        self.state = DStarLiteState(grid=grid, goal=goal, last_start=start,
                                    blocked=blocked)
        self.state.rhs[goal] = 0.0
        self._push(goal, self._calculate_key(goal))
        return self.state

    # ==================== Core ====================

    def _cost(self, a: Cell, b: Cell) -> float:
        blocked = self.state.blocked
        if a in blocked or b in blocked:
            return INF
        return 1.0

    def _calculate_key(self, s: Cell) -> Key:
        g_rhs = min(self.state.g.get(s, INF), self.state.rhs.get(s, INF))
        return (g_rhs + chebyshev(self._start, s) + self.state.km, g_rhs)

    def _push(self, s: Cell, key: Key):
        self.state.queued[s] = key
        heapq.heappush(self.state.queue, (key, s))

    def _top(self) -> Optional[Tuple[Key, Cell]]:
        """Peek the queue, discarding stale entries"""
        queue = self.state.queue
        queued = self.state.queued
        while queue:
            key, s = queue[0]
            if queued.get(s) == key:
                return key, s
            heapq.heappop(queue)
        return None

    def _update_vertex(self, u: Cell):
        state = self.state
        if u != state.goal:
            best = INF
            for s in state.grid.neighbors(u):
                cost = self._cost(u, s)
                if cost < INF:
                    best = min(best, cost + state.g.get(s, INF))
            state.rhs[u] = best

        if state.g.get(u, INF) != state.rhs.get(u, INF):
            self._push(u, self._calculate_key(u))
        else:
            state.queued.pop(u, None)

    def _compute_shortest_path(self):
        state = self.state
        start = self._start
        while True:
            top = self._top()
            if top is None:
                break
            k_old, u = top
            if not (k_old < self._calculate_key(start)
                    or state.rhs.get(start, INF) != state.g.get(start, INF)):
                break

            self.last_stats.iterations += 1
            k_new = self._calculate_key(u)
            if k_old < k_new:
                self._push(u, k_new)
                continue

            heapq.heappop(state.queue)
            del state.queued[u]
            self.last_stats.nodes_expanded += 1

            if state.g.get(u, INF) > state.rhs.get(u, INF):
                state.g[u] = state.rhs[u]
                for s in state.grid.neighbors(u):
                    self._update_vertex(s)
            else:
                state.g[u] = INF
                self._update_vertex(u)
                for s in state.grid.neighbors(u):
                    self._update_vertex(s)

    def _extract_path(self, start: Cell) -> Path:
        """Follow minimum cost + g successors from start to goal"""
        state = self.state
        path = [start]
        current = start
        limit = state.grid.size
        while current != state.goal:
            best: Optional[Cell] = None
            best_val = INF
            for s in state.grid.neighbors(current):
                val = self._cost(current, s) + state.g.get(s, INF)
                if val < best_val:
                    best, best_val = s, val
            if best is None or len(path) > limit:
                self.last_stats.reason = 'extraction_failed'
                return []
            current = best
            path.append(current)
        return path
