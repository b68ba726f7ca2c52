"""
Tick Driver Module
==================

External stepper for a navigation session. Calls tick() once per trigger,
waits between ticks according to the speed setting, drops scripted
obstacles at tick boundaries and stops on a terminal status, a pause or
the step limit.
"""

import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from ..errors import ConfigError
from ..metrics import RunResult, RunStatus, compute_backtracking_stats
from ..rover import NavigationSession, RoverStatus, TickReport
from ..environment import as_cell


MIN_SPEED = 1
MAX_SPEED = 10


def tick_delay_ms(speed: int) -> int:
    """Delay between ticks: speed 1 -> 1000 ms, speed 10 -> 100 ms"""
    if not MIN_SPEED <= speed <= MAX_SPEED:
        raise ConfigError(f"speed must be in {MIN_SPEED}..{MAX_SPEED}, got {speed}")
    return 1100 - 100 * speed


class TickDriver:
    """
    Drives a NavigationSession tick by tick.

    Features:
    - Adjustable speed (1-10)
    - Scheduled unknown obstacles keyed by tick number
    - Honours session pause
    - Safety step limit
    """

    def __init__(self,
                 session: NavigationSession,
                 speed: Optional[int] = None,
                 max_steps: Optional[int] = None,
                 events: Iterable = (),
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize driver.

        Args:
            session: Session to drive
            speed: 1 (slow) .. 10 (fast); default from session config
            max_steps: Safety limit on ticks; default from session config
            events: ObstacleEvent-like items with `tick` and `cell`
            sleep: Sleep function (seconds), replaceable for tests
        """
        self.session = session
        sim = session.config.simulation
        self.speed = speed if speed is not None else sim.speed
        self.max_steps = max_steps if max_steps is not None else sim.max_steps
        self.sleep = sleep

        self.steps = 0
        self.rejected_events = 0
        self._events: Dict[int, List] = {}
        for event in events:
            self.schedule(event.tick, event.cell)

    @property
    def speed(self) -> int:
        return self._speed

    @speed.setter
    def speed(self, value: int):
        tick_delay_ms(value)
        self._speed = value

    @property
    def delay_ms(self) -> int:
        return tick_delay_ms(self._speed)

    def schedule(self, tick: int, cell: Tuple[int, int]):
        """Place an unknown obstacle just before the given tick runs"""
        self._events.setdefault(int(tick), []).append(as_cell(cell))

    @property
    def pending_events(self) -> int:
        return sum(len(cells) for cells in self._events.values())

    def _apply_events(self, upcoming_tick: int):
        due = sorted(t for t in self._events if t <= upcoming_tick)
        for t in due:
            for cell in self._events.pop(t):
                if not self.session.place_unknown_obstacle(cell):
                    self.rejected_events += 1

    # ==================== Stepping ====================

    def step(self) -> Optional[TickReport]:
        """
        Run one tick unless paused, finished or at the step limit.

        Returns:
            The tick report, or None when no tick was run
        """
        session = self.session
        if session.is_paused or session.status == RoverStatus.GOAL_REACHED:
            return None
        if self.steps >= self.max_steps:
            return None

        self._apply_events(session.state.tick + 1)
        report = session.tick()
        self.steps += 1
        return report

    def run(self) -> RunResult:
        """
        Drive the session until it finishes, pauses or hits the step limit.

        Returns:
            RunResult summarizing the journey
        """
        session = self.session
        t0 = time.perf_counter()
        session.start()

        while True:
            report = self.step()
            if report is None or report.is_terminal:
                break
            self.sleep(self.delay_ms / 1000.0)

        status = self._classify()
        logger.info("Run finished: {} after {} tick(s)", status, self.steps)

        state = session.state
        return RunResult(
            status=status,
            algorithm=state.algorithm.value,
            ticks=self.steps,
            path=list(state.traveled_path),
            stats=session.stats,
            backtracking=compute_backtracking_stats(state.traveled_path, state.goal),
            total_time_s=time.perf_counter() - t0,
            info={
                'speed': self.speed,
                'rejected_events': self.rejected_events,
                'pending_events': self.pending_events,
                'known_obstacles': len(session.knowledge.known),
                'unknown_obstacles': len(session.knowledge.unknown),
            },
        )

    def _classify(self) -> str:
        status = self.session.status
        if status == RoverStatus.GOAL_REACHED:
            return RunStatus.SUCCESS
        if status == RoverStatus.BLOCKED:
            return RunStatus.BLOCKED
        if self.steps >= self.max_steps:
            return RunStatus.STEP_LIMIT
        return RunStatus.STOPPED
