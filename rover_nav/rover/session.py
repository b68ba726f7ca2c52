"""
Navigation Session Module
=========================

Inbound/outbound boundary around the rover controller.

- Placement errors become False returns (no state change)
- Goal and static obstacles are fixed once the session starts
- Inputs arriving while a tick runs (e.g. from a listener) are queued and
  applied at the tick boundary, so planners always see a frozen map
- Listeners receive one TickReport per tick
"""

from typing import Callable, List, Optional, Tuple

from loguru import logger

from ..config import Config
from ..environment import Grid
from ..errors import InvalidPlacement, OutOfBounds, SessionError
from .controller import RoverController, RoverStatus, TickReport


TickListener = Callable[[TickReport], None]


class NavigationSession:
    """
    One interactive navigation session.

    Usage:
        session = NavigationSession(config)
        session.place_static_obstacle((10, 10))
        session.start()
        while not session.is_finished:
            report = session.tick()
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = (config or Config()).validate()
        self.grid = Grid.from_config(self.config.grid)

        self._listeners: List[TickListener] = []
        self._pending: List[Tuple[Callable, tuple]] = []
        self._in_tick = False
        self._started = False
        self._paused = False
        self.last_report: Optional[TickReport] = None

        self.controller = self._new_controller()

    def _new_controller(self) -> RoverController:
        rover = self.config.rover
        return RoverController(
            self.grid,
            start=rover.start,
            goal=rover.goal,
            algorithm=rover.algorithm,
            detection_radius=self.config.sensing.detection_radius,
            blocked_policy=self.config.simulation.blocked_policy,
        )

    # ==================== Properties ====================

    @property
    def knowledge(self):
        return self.controller.knowledge

    @property
    def state(self):
        return self.controller.state

    @property
    def stats(self):
        return self.controller.stats

    @property
    def status(self) -> RoverStatus:
        return self.controller.status

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_running(self) -> bool:
        """Whether an external stepper should keep calling tick()"""
        return self._started and not self._paused and not self.is_finished

    @property
    def is_finished(self) -> bool:
        return self.controller.status in (RoverStatus.GOAL_REACHED, RoverStatus.BLOCKED)

    # ==================== Inbound ====================

    def place_unknown_obstacle(self, cell: Tuple[int, int]) -> bool:
        """
        Place an undetected obstacle.

        Returns:
            False when the placement is rejected. Placements made during a
            tick are queued and return True; they are validated when applied.
        """
        if self._in_tick:
            self._pending.append((self.place_unknown_obstacle, (cell,)))
            return True
        return self._try_place(self.controller.place_unknown, cell)

    def place_static_obstacle(self, cell: Tuple[int, int]) -> bool:
        """Place a known obstacle before the session starts"""
        if self._started:
            raise SessionError("static obstacles can only be placed before start")
        return self._try_place(self.controller.place_static, cell)

    def _try_place(self, place: Callable, cell) -> bool:
        try:
            place(cell)
        except (InvalidPlacement, OutOfBounds) as e:
            logger.debug("Placement rejected: {}", e)
            return False
        return True

    def set_goal(self, cell: Tuple[int, int]) -> bool:
        """
        Move the goal (before start only).

        Raises:
            SessionError: session already started
        """
        if self._started:
            raise SessionError("goal can only be changed before start")
        try:
            goal = self.controller.set_goal(cell)
        except (InvalidPlacement, OutOfBounds) as e:
            logger.debug("Goal rejected: {}", e)
            return False
        self.config.rover.goal = tuple(goal)
        return True

    def set_algorithm(self, algorithm):
        """Select the algorithm used from the next tick on"""
        if self._in_tick:
            self._pending.append((self.set_algorithm, (algorithm,)))
            return
        self.controller.set_algorithm(algorithm)

    def start(self):
        if not self._started:
            self._started = True
            logger.info("Session started: {} -> {} using {}",
                        self.controller.position, self.controller.goal,
                        self.controller.algorithm.value)

    def pause(self):
        self._paused = True

    def resume(self):
        self._paused = False

    def tick(self) -> TickReport:
        """
        Advance the rover exactly once and notify listeners.

        Starts the session implicitly on the first call.
        """
        if self._in_tick:
            raise SessionError("tick() called re-entrantly")
        self.start()

        self._in_tick = True
        try:
            report = self.controller.tick()
            self.last_report = report
            for listener in list(self._listeners):
                listener(report)
        finally:
            self._in_tick = False
            self._apply_pending()
        return report

    def _apply_pending(self):
        pending, self._pending = self._pending, []
        for apply, args in pending:
            apply(*args)

    def reset(self):
        """Back to the pre-start state with the configured start, goal and algorithm"""
        self.controller = self._new_controller()
        self._pending = []
        self._started = False
        self._paused = False
        self.last_report = None
        logger.info("Session reset")

    # ==================== Outbound ====================

    def subscribe(self, listener: TickListener) -> Callable[[], None]:
        """
        Register a tick listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
