"""
Obstacle knowledge tests
"""

import pytest

from rover_nav.environment import Grid, ObstacleKnowledge
from rover_nav.errors import InvalidPlacement, OutOfBounds


def make_knowledge(size=10):
    return ObstacleKnowledge(Grid(size, size))


def test_promotion_boundary():
    """Distance 2 is detected, distance 3 is not"""
    knowledge = make_knowledge()
    knowledge.place_unknown((7, 5))
    knowledge.place_unknown((8, 5))

    promoted = knowledge.promote_near((5, 5))

    assert promoted == {(7, 5)}
    assert knowledge.is_known((7, 5))
    assert knowledge.is_unknown((8, 5))


def test_promotion_is_idempotent():
    knowledge = make_knowledge()
    knowledge.place_unknown((4, 4))

    assert knowledge.promote_near((3, 3)) == {(4, 4)}
    assert knowledge.promote_near((3, 3)) == set()
    assert knowledge.known == {(4, 4)}


def test_custom_radius():
    knowledge = make_knowledge()
    knowledge.place_unknown((8, 5))
    assert knowledge.promote_near((5, 5), radius=3) == {(8, 5)}


def test_sets_stay_disjoint():
    knowledge = make_knowledge()
    for cell in [(1, 1), (2, 2), (6, 6), (9, 0)]:
        knowledge.place_unknown(cell)
    knowledge.place_known((5, 5))
    knowledge.promote_near((1, 2))

    assert not (knowledge.unknown & knowledge.known)
    assert knowledge.static == {(5, 5)}
    assert knowledge.promoted == {(1, 1), (2, 2)}
    assert knowledge.counts() == {'unknown': 2, 'static': 1, 'promoted': 2}


def test_rejected_placements_leave_state_unchanged():
    knowledge = make_knowledge()
    knowledge.place_unknown((3, 3))
    knowledge.place_known((4, 4))
    before = (knowledge.unknown, knowledge.known)

    with pytest.raises(InvalidPlacement):
        knowledge.place_unknown((0, 0), protected=[(0, 0), (9, 9)])
    with pytest.raises(InvalidPlacement):
        knowledge.place_unknown((9, 9), protected=[(0, 0), (9, 9)])
    with pytest.raises(InvalidPlacement):
        knowledge.place_unknown((3, 3))
    with pytest.raises(InvalidPlacement):
        knowledge.place_unknown((4, 4))
    with pytest.raises(InvalidPlacement):
        knowledge.place_known((3, 3))
    with pytest.raises(OutOfBounds):
        knowledge.place_unknown((10, 2))

    assert (knowledge.unknown, knowledge.known) == before


def test_snapshot_is_frozen():
    knowledge = make_knowledge()
    knowledge.place_known((2, 2))
    snapshot = knowledge.known_snapshot()

    knowledge.place_unknown((3, 3))
    knowledge.promote_near((3, 3))

    assert isinstance(snapshot, frozenset)
    assert snapshot == {(2, 2)}
    assert knowledge.known_snapshot() == {(2, 2), (3, 3)}


def test_clear():
    knowledge = make_knowledge()
    knowledge.place_known((2, 2))
    knowledge.place_unknown((3, 3))
    knowledge.clear()
    assert not knowledge.known and not knowledge.unknown
