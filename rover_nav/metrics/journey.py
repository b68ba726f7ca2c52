"""
Journey Metrics Module
======================

Statistics tracked across the ticks of one rover journey.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np


@dataclass
class JourneyStats:
    """
    Running statistics for a journey.

    Tracks:
    - Steps taken and distance traveled
    - Re-routes (ticks where new obstacles were detected)
    - Planner effort and wall-clock planning time
    """

    steps: int = 0
    total_distance: float = 0.0  # cells, diagonal steps count sqrt(2)
    reroute_count: int = 0
    obstacles_detected: int = 0
    blocked_ticks: int = 0
    nodes_expanded: int = 0
    planning_time_s: float = 0.0

    # Straight-line lower bound for the journey (Chebyshev cells)
    optimal_steps: int = 0

    plan_times_s: List[float] = field(default_factory=list)

    def record_step(self, a: Tuple[int, int], b: Tuple[int, int]):
        """Add one executed move"""
        self.steps += 1
        self.total_distance += math.hypot(b[0] - a[0], b[1] - a[1])

    def record_detection(self, count: int):
        if count > 0:
            self.obstacles_detected += count
            self.reroute_count += 1

    def record_plan(self, seconds: float, nodes_expanded: int):
        self.planning_time_s += seconds
        self.nodes_expanded += nodes_expanded
        self.plan_times_s.append(seconds)

    @property
    def path_efficiency(self) -> float:
        """Optimal step count over steps actually taken, in percent"""
        if self.steps == 0:
            return 100.0
        return 100.0 * self.optimal_steps / self.steps

    @property
    def avg_plan_time_ms(self) -> float:
        return float(np.mean(self.plan_times_s)) * 1000.0 if self.plan_times_s else 0.0

    @property
    def max_plan_time_ms(self) -> float:
        return float(np.max(self.plan_times_s)) * 1000.0 if self.plan_times_s else 0.0

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'steps': self.steps,
            'total_distance': self.total_distance,
            'reroute_count': self.reroute_count,
            'obstacles_detected': self.obstacles_detected,
            'blocked_ticks': self.blocked_ticks,
            'nodes_expanded': self.nodes_expanded,
            'planning_time_s': self.planning_time_s,
            'avg_plan_time_ms': self.avg_plan_time_ms,
            'max_plan_time_ms': self.max_plan_time_ms,
            'optimal_steps': self.optimal_steps,
            'path_efficiency': self.path_efficiency,
        }


@dataclass
class BacktrackingStats:
    """Statistics about path backtracking (moving away from goal)"""
    backtrack_steps: int = 0
    total_steps: int = 0
    backtrack_ratio: float = 0.0
    revisits: int = 0


def compute_backtracking_stats(path: List[Tuple[int, int]],
                               goal: Tuple[int, int]) -> BacktrackingStats:
    """
    Compute backtracking statistics for a traveled path.

    Backtracking = steps that increase the Chebyshev distance to the goal.

    Args:
        path: List of (x, y) positions
        goal: Goal position

    Returns:
        BacktrackingStats object
    """
    if not path or len(path) < 2:
        return BacktrackingStats()

    def dist_to_goal(p):
        return max(abs(p[0] - goal[0]), abs(p[1] - goal[1]))

    back = 0
    prev_d = dist_to_goal(path[0])
    for cur in path[1:]:
        cur_d = dist_to_goal(cur)
        if cur_d > prev_d:
            back += 1
        prev_d = cur_d

    total = len(path) - 1
    return BacktrackingStats(
        backtrack_steps=back,
        total_steps=total,
        backtrack_ratio=back / total,
        revisits=len(path) - len({tuple(p) for p in path}),
    )


class RunStatus:
    """Enumeration of driven-run outcomes"""
    SUCCESS = 'success'
    BLOCKED = 'blocked'
    STEP_LIMIT = 'step_limit'
    STOPPED = 'stopped'


@dataclass
class RunResult:
    """Complete result of a driven journey"""
    status: str
    algorithm: str
    ticks: int = 0
    path: List[Tuple[int, int]] = field(default_factory=list)
    stats: Optional[JourneyStats] = None
    backtracking: Optional[BacktrackingStats] = None
    total_time_s: float = 0.0
    info: Dict = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def to_dict(self) -> Dict:
        return {
            'status': self.status,
            'algorithm': self.algorithm,
            'ticks': self.ticks,
            'path_length': len(self.path),
            'stats': self.stats.to_dict() if self.stats else None,
            'backtracking': {
                'backtrack_ratio': self.backtracking.backtrack_ratio,
                'backtrack_steps': self.backtracking.backtrack_steps,
                'revisits': self.backtracking.revisits,
            } if self.backtracking else None,
            'total_time_s': self.total_time_s,
            'info': self.info,
        }
