"""
Obstacle Knowledge Module
=========================

Models the rover's sensing limitation as two disjoint obstacle sets:

- unknown: placed by an external actor, not yet detected (amber)
- known: authoritative map used for planning (static + detected)

Obstacles move from unknown to known only through proximity detection.
Planners are handed a frozen snapshot of the known set and never see the
unknown set.
"""

from typing import FrozenSet, Iterable, Set, Tuple

from loguru import logger

from .grid import Cell, Grid, as_cell, chebyshev
from ..errors import InvalidPlacement


DEFAULT_DETECTION_RADIUS = 2


class ObstacleKnowledge:
    """
    Unknown/known obstacle bookkeeping for one session.

    Invariants:
    - unknown and known are disjoint
    - known never shrinks during a session
    - unknown shrinks only by promotion
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self._unknown: Set[Cell] = set()
        self._static: Set[Cell] = set()
        self._promoted: Set[Cell] = set()

    # ==================== Placement ====================

    def place_unknown(self, cell: Tuple[int, int],
                      protected: Iterable[Tuple[int, int]] = ()) -> Cell:
        """
        Add an undetected obstacle.

        Args:
            cell: Target cell
            protected: Cells that may never hold an obstacle (rover, goal)

        Returns:
            The placed cell

        Raises:
            OutOfBounds: cell is off the grid
            InvalidPlacement: cell is protected or already occupied
        """
        cell = self._check_placement(cell, protected)
        self._unknown.add(cell)
        logger.debug("Placed unknown obstacle at {}", cell)
        return cell

    def place_known(self, cell: Tuple[int, int],
                    protected: Iterable[Tuple[int, int]] = ()) -> Cell:
        """Add a static obstacle directly to the known map"""
        cell = self._check_placement(cell, protected)
        self._static.add(cell)
        logger.debug("Placed static obstacle at {}", cell)
        return cell

    def _check_placement(self, cell: Tuple[int, int],
                         protected: Iterable[Tuple[int, int]]) -> Cell:
        cell = self.grid.require_in_bounds(cell)
        if cell in {as_cell(p) for p in protected}:
            raise InvalidPlacement(cell, 'protected cell (rover or goal)')
        if cell in self._static or cell in self._promoted:
            raise InvalidPlacement(cell, 'already a known obstacle')
        if cell in self._unknown:
            raise InvalidPlacement(cell, 'already an unknown obstacle')
        return cell

    # ==================== Detection ====================

    def promote_near(self, reference: Tuple[int, int],
                     radius: int = DEFAULT_DETECTION_RADIUS) -> Set[Cell]:
        """
        Promote every unknown obstacle within Chebyshev `radius` of reference.

        Args:
            reference: Detection origin (rover position)
            radius: Detection radius in cells (inclusive)

        Returns:
            Newly promoted cells (empty when nothing was in range)
        """
        detected = {c for c in self._unknown if chebyshev(c, reference) <= radius}
        if detected:
            self._unknown -= detected
            self._promoted |= detected
            logger.info("Detected {} obstacle(s) near {}: {}",
                        len(detected), tuple(reference), sorted(detected))
        return detected

    # ==================== Views ====================

    def known_snapshot(self) -> FrozenSet[Cell]:
        """Frozen copy of the known obstacle set for one planning call"""
        return frozenset(self._static | self._promoted)

    @property
    def unknown(self) -> FrozenSet[Cell]:
        return frozenset(self._unknown)

    @property
    def known(self) -> FrozenSet[Cell]:
        return self.known_snapshot()

    @property
    def static(self) -> FrozenSet[Cell]:
        """Known obstacles that were placed before the journey"""
        return frozenset(self._static)

    @property
    def promoted(self) -> FrozenSet[Cell]:
        """Known obstacles that were detected during the journey"""
        return frozenset(self._promoted)

    def is_known(self, cell: Tuple[int, int]) -> bool:
        cell = as_cell(cell)
        return cell in self._static or cell in self._promoted

    def is_unknown(self, cell: Tuple[int, int]) -> bool:
        return as_cell(cell) in self._unknown

    def counts(self) -> dict:
        return {
            'unknown': len(self._unknown),
            'static': len(self._static),
            'promoted': len(self._promoted),
        }

    def clear(self):
        """Drop all obstacles (session reset only)"""
        self._unknown.clear()
        self._static.clear()
        self._promoted.clear()
