"""
Rover Controller Module
=======================

Tick-driven re-planning loop.

Each tick, strictly in order:
1. Goal check
2. Detect unknown obstacles near the rover and snapshot the known map
3. Plan from the current position with the selected algorithm
4. Take only the first step of the plan
5. Commit the new position and report

No path is cached between ticks; every tick plans against the freshest
obstacle knowledge.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from loguru import logger

from ..environment import Cell, Grid, ObstacleKnowledge, DEFAULT_DETECTION_RADIUS, chebyshev
from ..errors import ConfigError, InvalidPlacement, NoPathFound
from ..metrics import JourneyStats
from ..planning import Algorithm, Path, PathPlanner, create_planner


class RoverStatus(str, Enum):
    """Loop state machine: Planning -> Moving -> ... -> GoalReached | Blocked"""
    PLANNING = 'Planning'
    MOVING = 'Moving'
    GOAL_REACHED = 'GoalReached'
    BLOCKED = 'Blocked'


@dataclass
class RoverState:
    """Rover state kept between ticks"""
    position: Cell
    goal: Cell
    algorithm: Algorithm
    status: RoverStatus = RoverStatus.PLANNING
    traveled_path: List[Cell] = field(default_factory=list)
    tick: int = 0


@dataclass(frozen=True)
class TickReport:
    """Outbound record emitted once per tick"""
    tick: int
    position: Cell
    path: Path
    promoted: FrozenSet[Cell]
    status: RoverStatus
    algorithm: Algorithm

    @property
    def is_terminal(self) -> bool:
        return self.status in (RoverStatus.GOAL_REACHED, RoverStatus.BLOCKED)


class RoverController:
    """
    Owns the grid, obstacle knowledge and planner for one journey.

    Features:
    - One cell of motion per tick
    - Blocked is re-planned every tick ('retry') or held until the obstacle
      map or algorithm changes ('freeze')
    - Planner instance replaced on algorithm switch (fresh incremental state)
    - Journey statistics and traveled path history
    """

    def __init__(self,
                 grid: Grid,
                 start: Tuple[int, int],
                 goal: Tuple[int, int],
                 algorithm=Algorithm.DSTAR_LITE,
                 detection_radius: int = DEFAULT_DETECTION_RADIUS,
                 blocked_policy: str = 'retry',
                 knowledge: Optional[ObstacleKnowledge] = None):
        """
        Initialize controller.

        Args:
            grid: Navigation grid
            start: Rover start cell
            goal: Goal cell
            algorithm: Algorithm or its name
            detection_radius: Chebyshev detection radius
            blocked_policy: 'retry' or 'freeze'
            knowledge: Existing obstacle model (new empty one if None)
        """
        if blocked_policy not in ('retry', 'freeze'):
            raise ConfigError(f"unknown blocked_policy {blocked_policy!r}")
        if detection_radius < 1:
            raise ConfigError("detection_radius must be at least 1")

        self.grid = grid
        self.knowledge = knowledge if knowledge is not None else ObstacleKnowledge(grid)
        self.detection_radius = detection_radius
        self.blocked_policy = blocked_policy

        start = grid.require_in_bounds(start)
        goal = grid.require_in_bounds(goal)
        for cell in (start, goal):
            if self.knowledge.is_known(cell) or self.knowledge.is_unknown(cell):
                raise InvalidPlacement(cell, 'rover and goal cells must be free')

        algorithm = Algorithm.from_name(algorithm)
        self.planner: PathPlanner = create_planner(algorithm)
        self.state = RoverState(position=start, goal=goal, algorithm=algorithm,
                                traveled_path=[start])
        self.stats = JourneyStats(optimal_steps=chebyshev(start, goal))

        # Set when something that could unblock the rover has changed
        self._changed_since_blocked = True

    # ==================== Properties ====================

    @property
    def position(self) -> Cell:
        return self.state.position

    @property
    def goal(self) -> Cell:
        return self.state.goal

    @property
    def status(self) -> RoverStatus:
        return self.state.status

    @property
    def algorithm(self) -> Algorithm:
        return self.state.algorithm

    # ==================== Inputs ====================

    def place_unknown(self, cell: Tuple[int, int]) -> Cell:
        """Place an undetected obstacle; rover and goal cells are protected"""
        cell = self.knowledge.place_unknown(cell, protected=(self.position, self.goal))
        self._changed_since_blocked = True
        return cell

    def place_static(self, cell: Tuple[int, int]) -> Cell:
        """Place an obstacle directly on the known map"""
        cell = self.knowledge.place_known(cell, protected=(self.position, self.goal))
        self._changed_since_blocked = True
        return cell

    def set_goal(self, goal: Tuple[int, int]) -> Cell:
        goal = self.grid.require_in_bounds(goal)
        if self.knowledge.is_known(goal) or self.knowledge.is_unknown(goal):
            raise InvalidPlacement(goal, 'goal cannot be on an obstacle')
        self.state.goal = goal
        self.state.status = RoverStatus.PLANNING
        self.stats.optimal_steps = chebyshev(self.position, goal)
        self._changed_since_blocked = True
        return goal

    def set_algorithm(self, algorithm) -> Algorithm:
        """
        Select the planning algorithm used from the next tick on.

        Position and obstacle sets are untouched. A real switch replaces the
        planner, discarding any incremental search state.
        """
        algorithm = Algorithm.from_name(algorithm)
        if algorithm != self.state.algorithm:
            logger.info("Algorithm switch {} -> {}",
                        self.state.algorithm.value, algorithm.value)
            self.planner = create_planner(algorithm)
            self.state.algorithm = algorithm
            self._changed_since_blocked = True
        return algorithm

    # ==================== Loop ====================

    def tick(self) -> TickReport:
        """
        Advance the loop exactly once.

        Returns:
            TickReport with position, path used, newly promoted cells and status
        """
        state = self.state
        if state.status == RoverStatus.GOAL_REACHED:
            return self._report([state.position], frozenset())

        state.tick += 1

        # 1. Goal check
        if state.position == state.goal:
            state.status = RoverStatus.GOAL_REACHED
            return self._report([state.position], frozenset())

        # 2. Detection
        promoted = frozenset(
            self.knowledge.promote_near(state.position, self.detection_radius)
        )
        self.stats.record_detection(len(promoted))
        if promoted:
            self._changed_since_blocked = True
        known = self.knowledge.known_snapshot()

        if (state.status == RoverStatus.BLOCKED
                and self.blocked_policy == 'freeze'
                and not self._changed_since_blocked):
            self.stats.blocked_ticks += 1
            return self._report([], promoted)

        # 3. Plan
        state.status = RoverStatus.PLANNING
        t0 = time.perf_counter()
        try:
            path = self.planner.plan(state.position, state.goal, known, self.grid)
        except NoPathFound as e:
            logger.warning("Tick {}: {}", state.tick, e)
            state.status = RoverStatus.BLOCKED
            self.stats.blocked_ticks += 1
            self._changed_since_blocked = False
            return self._report([], promoted)
        finally:
            self.stats.record_plan(time.perf_counter() - t0,
                                   self.planner.last_stats.nodes_expanded)

        # 4. Step
        next_cell = path[1]

        # 5. Commit
        self.stats.record_step(state.position, next_cell)
        state.position = next_cell
        state.traveled_path.append(next_cell)
        if next_cell == state.goal:
            state.status = RoverStatus.GOAL_REACHED
            logger.info("Goal {} reached after {} steps", state.goal, self.stats.steps)
        else:
            state.status = RoverStatus.MOVING

        logger.debug("Tick {}: moved to {} ({} cells left on plan)",
                     state.tick, next_cell, len(path) - 2)
        return self._report(path, promoted)

    def _report(self, path: Path, promoted: FrozenSet[Cell]) -> TickReport:
        return TickReport(
            tick=self.state.tick,
            position=self.state.position,
            path=list(path),
            promoted=promoted,
            status=self.state.status,
            algorithm=self.state.algorithm,
        )
