"""
Scenario Generator Module
=========================

Random navigation scenarios: a static obstacle map plus a timeline of
obstacles dropped in front of the rover while it drives.
Single Responsibility: only generates, checks and stores scenarios.
"""

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from loguru import logger
from scipy.ndimage import label

from ..config import Config, ScenarioConfig
from ..environment import Cell, Grid, as_cell, chebyshev
from ..rover import NavigationSession


# 8-connectivity, same moves the planners allow
EIGHT_CONNECTED = np.ones((3, 3), dtype=int)


@dataclass(frozen=True)
class ObstacleEvent:
    """Unknown obstacle placed just before tick `tick` runs"""
    tick: int
    cell: Cell


@dataclass
class Scenario:
    """Container for one generated (or loaded) scenario"""
    width: int
    height: int
    start: Cell
    goal: Cell
    static_obstacles: List[Cell] = field(default_factory=list)
    events: List[ObstacleEvent] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def grid(self) -> Grid:
        return Grid(self.width, self.height)

    def occupancy(self) -> np.ndarray:
        """Static obstacle mask indexed [x, y]"""
        return self.grid.occupancy(self.static_obstacles)

    def is_connected(self) -> bool:
        return is_reachable(self.occupancy(), self.start, self.goal)

    def to_config(self, base: Optional[Config] = None) -> Config:
        """Config with this scenario's grid and endpoints"""
        config = copy.deepcopy(base) if base is not None else Config()
        config.grid.width = self.width
        config.grid.height = self.height
        config.rover.start = tuple(self.start)
        config.rover.goal = tuple(self.goal)
        return config.validate()

    def build_session(self, base: Optional[Config] = None) -> NavigationSession:
        """New, not yet started session with the static map placed"""
        session = NavigationSession(self.to_config(base))
        for cell in self.static_obstacles:
            session.place_static_obstacle(cell)
        return session

    # ==================== NPZ I/O ====================

    def save_npz(self, filepath: Union[str, Path]):
        """Save scenario to a compressed NPZ file"""
        np.savez_compressed(
            filepath,
            width=self.width,
            height=self.height,
            start=np.array(self.start),
            goal=np.array(self.goal),
            static=np.array(self.static_obstacles, dtype=np.int32).reshape(-1, 2),
            event_ticks=np.array([e.tick for e in self.events], dtype=np.int32),
            event_cells=np.array([e.cell for e in self.events], dtype=np.int32).reshape(-1, 2),
            seed=self.seed if self.seed is not None else -1,
        )

    @classmethod
    def load_npz(cls, filepath: Union[str, Path]) -> 'Scenario':
        """Load scenario from NPZ file"""
        with np.load(filepath) as data:
            seed = int(data['seed'])
            return cls(
                width=int(data['width']),
                height=int(data['height']),
                start=as_cell(data['start'].tolist()),
                goal=as_cell(data['goal'].tolist()),
                static_obstacles=[as_cell(c) for c in data['static'].tolist()],
                events=[
                    ObstacleEvent(int(t), as_cell(c))
                    for t, c in zip(data['event_ticks'].tolist(),
                                    data['event_cells'].tolist())
                ],
                seed=seed if seed >= 0 else None,
            )


def is_reachable(occupancy: np.ndarray, start: Tuple[int, int],
                 goal: Tuple[int, int]) -> bool:
    """
    Check that start and goal lie in the same free 8-connected region.

    Args:
        occupancy: Boolean obstacle mask indexed [x, y]
        start: Start cell
        goal: Goal cell
    """
    if occupancy[tuple(start)] or occupancy[tuple(goal)]:
        return False
    labels, _ = label(~occupancy, structure=EIGHT_CONNECTED)
    return labels[tuple(start)] == labels[tuple(goal)]


class ScenarioGenerator:
    """
    Random scenario generator.

    Creates:
    - Rectangular static obstacle blobs
    - A clear square around start and goal
    - Scheduled unknown obstacles for the tick driver

    Maps where start and goal are disconnected are regenerated.
    """

    def __init__(self, config: Optional[Config] = None, seed: Optional[int] = None):
        self.config = config or Config()
        self.seed = seed if seed is not None else self.config.random_seed
        self.rng = np.random.default_rng(self.seed)
        self.grid = Grid.from_config(self.config.grid)

    @property
    def params(self) -> ScenarioConfig:
        return self.config.scenario

    def generate(self, start: Optional[Tuple[int, int]] = None,
                 goal: Optional[Tuple[int, int]] = None) -> Scenario:
        """
        Generate a connected scenario.

        Args:
            start: Rover start (default: configured start)
            goal: Goal (default: configured goal)

        Returns:
            Scenario whose static map keeps start and goal connected
        """
        start = self.grid.require_in_bounds(start or self.config.rover.start)
        goal = self.grid.require_in_bounds(goal or self.config.rover.goal)

        occupancy = None
        for attempt in range(1, self.params.max_attempts + 1):
            candidate = self._generate_static(start, goal)
            if is_reachable(candidate, start, goal):
                occupancy = candidate
                logger.debug("Scenario map accepted on attempt {}", attempt)
                break
        if occupancy is None:
            logger.warning("No connected map after {} attempts, using an empty map",
                           self.params.max_attempts)
            occupancy = np.zeros((self.grid.width, self.grid.height), dtype=bool)

        static = [Cell(int(x), int(y)) for x, y in np.argwhere(occupancy)]
        events = self._generate_events(occupancy, start, goal)

        return Scenario(
            width=self.grid.width,
            height=self.grid.height,
            start=start,
            goal=goal,
            static_obstacles=static,
            events=events,
            seed=self.seed,
        )

    def _generate_static(self, start: Cell, goal: Cell) -> np.ndarray:
        """Random rectangular blobs, cleared around start and goal"""
        w, h = self.grid.width, self.grid.height
        occupancy = np.zeros((w, h), dtype=bool)

        lo, hi = self.params.num_static_blobs
        for _ in range(self.rng.integers(lo, hi + 1)):
            cx = self.rng.integers(0, w)
            cy = self.rng.integers(0, h)
            rx = self.rng.integers(*self.params.blob_size, endpoint=True)
            ry = self.rng.integers(*self.params.blob_size, endpoint=True)
            occupancy[max(0, cx - rx):min(w, cx + rx + 1),
                      max(0, cy - ry):min(h, cy + ry + 1)] = True

        self._clear_around(occupancy, start)
        self._clear_around(occupancy, goal)
        return occupancy

    def _clear_around(self, occupancy: np.ndarray, cell: Cell):
        r = self.params.clearance
        occupancy[max(0, cell.x - r):cell.x + r + 1,
                  max(0, cell.y - r):cell.y + r + 1] = False

    def _generate_events(self, occupancy: np.ndarray, start: Cell,
                         goal: Cell) -> List[ObstacleEvent]:
        """Scheduled unknown obstacles on free cells away from start and goal"""
        clearance = self.params.clearance
        free = [
            Cell(int(x), int(y)) for x, y in np.argwhere(~occupancy)
            if chebyshev((x, y), start) > clearance and chebyshev((x, y), goal) > clearance
        ]
        if not free:
            return []

        lo, hi = self.params.num_dynamic_obstacles
        count = min(int(self.rng.integers(lo, hi + 1)), len(free))
        picks = self.rng.choice(len(free), size=count, replace=False)
        first, last = self.params.dynamic_window
        ticks = self.rng.integers(first, last, size=count, endpoint=True)

        events = [ObstacleEvent(int(t), free[i]) for t, i in zip(ticks, picks)]
        events.sort(key=lambda e: (e.tick, e.cell))
        return events
