"""
Grid tests
"""

import numpy as np
import pytest

from rover_nav.environment import Cell, Grid, as_cell, chebyshev
from rover_nav.errors import InvalidGrid, OutOfBounds


def test_cell_behaves_like_tuple():
    cell = Cell(3, 4)
    assert cell == (3, 4)
    assert hash(cell) == hash((3, 4))
    assert (3, 4) in {cell}
    assert as_cell([3, 4]) == cell


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
def test_invalid_dimensions(width, height):
    with pytest.raises(InvalidGrid):
        Grid(width, height)


def test_bounds():
    grid = Grid(5, 3)
    assert grid.in_bounds((0, 0))
    assert grid.in_bounds((4, 2))
    assert not grid.in_bounds((5, 0))
    assert not grid.in_bounds((0, 3))
    assert not grid.in_bounds((-1, 1))

    with pytest.raises(OutOfBounds) as exc:
        grid.require_in_bounds((5, 1))
    assert exc.value.cell == (5, 1)


def test_neighbors_clipped_and_ordered():
    grid = Grid(5, 5)

    assert len(grid.neighbors((2, 2))) == 8
    corner = grid.neighbors((0, 0))
    assert corner == [(0, 1), (1, 0), (1, 1)]
    assert all(grid.in_bounds(n) for n in grid.neighbors((4, 4)))
    assert grid.neighbors((2, 2)) == grid.neighbors((2, 2))


def test_chebyshev_distance():
    grid = Grid(10, 10)
    assert chebyshev((0, 0), (9, 9)) == 9
    assert grid.distance_chebyshev((1, 5), (4, 3)) == 3
    assert grid.distance_chebyshev((2, 2), (2, 2)) == 0


def test_occupancy_array():
    grid = Grid(4, 3)
    occ = grid.occupancy([(1, 2), (3, 0), (9, 9)])

    assert occ.shape == (4, 3)
    assert occ.dtype == np.bool_
    assert occ[1, 2] and occ[3, 0]
    assert occ.sum() == 2
    assert len(list(grid.cells())) == grid.size == 12
