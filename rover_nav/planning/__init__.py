"""
Planning Module
===============

Path planning algorithms behind one shared planning interface.
"""

from .base import (
    Algorithm,
    Path,
    PathPlanner,
    PlannerStats,
    is_valid_path,
    step_cost,
)
from .astar import AStarPlanner
from .dstar_lite import DStarLitePlanner, DStarLiteState
from .field_dstar import FieldDStarPlanner, interpolated_cost

PLANNERS = {
    Algorithm.ASTAR: AStarPlanner,
    Algorithm.DSTAR_LITE: DStarLitePlanner,
    Algorithm.FIELD_DSTAR: FieldDStarPlanner,
}


def create_planner(algorithm) -> PathPlanner:
    """Fresh planner (cold state) for an Algorithm or algorithm name"""
    return PLANNERS[Algorithm.from_name(algorithm)]()


__all__ = [
    'Algorithm',
    'Path',
    'PathPlanner',
    'PlannerStats',
    'is_valid_path',
    'step_cost',
    'AStarPlanner',
    'DStarLitePlanner',
    'DStarLiteState',
    'FieldDStarPlanner',
    'interpolated_cost',
    'PLANNERS',
    'create_planner',
]
