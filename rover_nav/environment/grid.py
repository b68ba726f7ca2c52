"""
Grid Module
===========

Finite 2-D coordinate space with bounds checking and 8-connected adjacency.
Proximity and movement both use the Chebyshev metric.
"""

from typing import Iterable, Iterator, List, NamedTuple, Tuple

import numpy as np

from ..errors import InvalidGrid, OutOfBounds


class Cell(NamedTuple):
    """Grid cell coordinate. Compares and hashes like the plain (x, y) tuple."""
    x: int
    y: int


# Neighbor offsets, fixed order so searches are reproducible
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


def as_cell(pos) -> Cell:
    """Coerce an (x, y) pair to a Cell"""
    if isinstance(pos, Cell):
        return pos
    x, y = pos
    return Cell(int(x), int(y))


def chebyshev(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """max(|ax - bx|, |ay - by|)"""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


class Grid:
    """
    Rectangular grid of cells [0, width) x [0, height).

    Provides:
    - Bounds predicate and boundary validation
    - 8-connected neighbor enumeration (never out of bounds)
    - Chebyshev distance
    - Occupancy arrays for rendering and analysis
    """

    def __init__(self, width: int, height: int):
        """
        Initialize grid.

        Args:
            width: Number of columns (x extent)
            height: Number of rows (y extent)

        Raises:
            InvalidGrid: if either dimension is zero or negative
        """
        if int(width) <= 0 or int(height) <= 0:
            raise InvalidGrid(f"grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

    @classmethod
    def from_config(cls, grid_config) -> 'Grid':
        return cls(grid_config.width, grid_config.height)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    def __hash__(self) -> int:
        return hash((self.width, self.height))

    @property
    def size(self) -> int:
        """Total number of cells"""
        return self.width * self.height

    # ==================== Cell Queries ====================

    def in_bounds(self, cell: Tuple[int, int]) -> bool:
        """Check if cell is within grid bounds"""
        return 0 <= cell[0] < self.width and 0 <= cell[1] < self.height

    def require_in_bounds(self, cell: Tuple[int, int]) -> Cell:
        """Return cell as a Cell, raising OutOfBounds if it is off the grid"""
        cell = as_cell(cell)
        if not self.in_bounds(cell):
            raise OutOfBounds(cell, self.width, self.height)
        return cell

    def neighbors(self, cell: Tuple[int, int]) -> List[Cell]:
        """Get in-bounds 8-connected neighbors (at most 8)"""
        x, y = cell
        result = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(Cell(nx, ny))
        return result

    def distance_chebyshev(self, a: Tuple[int, int], b: Tuple[int, int]) -> int:
        return chebyshev(a, b)

    def cells(self) -> Iterator[Cell]:
        """Iterate over all cells, column by column"""
        for x in range(self.width):
            for y in range(self.height):
                yield Cell(x, y)

    # ==================== Arrays ====================

    def occupancy(self, obstacles: Iterable[Tuple[int, int]]) -> np.ndarray:
        """
        Boolean occupancy array indexed [x, y].

        Args:
            obstacles: Blocked cells (out-of-bounds entries are ignored)

        Returns:
            Array of shape (width, height), True where blocked
        """
        grid = np.zeros((self.width, self.height), dtype=bool)
        for cell in obstacles:
            if self.in_bounds(cell):
                grid[cell[0], cell[1]] = True
        return grid
