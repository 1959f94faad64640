import pytest
from mathutils import Vector

from .utils.area_points import PointSet


def make_set():
    return PointSet([(0, 0, 0), (1, 0, 0), (1, 1, 0)])


def test_add_returns_index():
    ps = PointSet()
    assert ps.add((1, 2, 3)) == 0
    assert ps.add((4, 5, 6)) == 1
    assert ps.count == 2
    assert ps[1] == Vector((4, 5, 6))


def test_add_then_remove_restores_points():
    ps = make_set()
    before = ps.to_list()
    ps.add((5, 5, 5))
    ps.remove_at(ps.count - 1)
    assert ps.to_list() == before


def test_remove_keeps_order():
    ps = PointSet([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)])
    ps.remove_at(1)
    assert ps.to_list() == [[0, 0, 0], [2, 0, 0], [3, 0, 0]]


def test_set_replaces_point():
    ps = make_set()
    ps.set(2, (7, 8, 9))
    assert ps[2] == Vector((7, 8, 9))
    assert ps.count == 3


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_out_of_range_leaves_set_unchanged(index):
    ps = make_set()
    before = ps.to_list()
    with pytest.raises(IndexError):
        ps.remove_at(index)
    with pytest.raises(IndexError):
        ps.set(index, (9, 9, 9))
    assert ps.to_list() == before


def test_empty_set_rejects_index_zero():
    ps = PointSet()
    with pytest.raises(IndexError):
        ps.remove_at(0)


def test_points_are_copies():
    ps = make_set()
    pts = ps.points
    pts[0].x = 42.0
    assert ps[0].x == 0.0
    for p in ps:
        p.y = 42.0
    assert ps[1].y == 0.0


def test_two_dimensional_input_is_extended():
    ps = PointSet()
    ps.add((1, 2))
    assert ps[0] == Vector((1, 2, 0))


def test_dirty_flag():
    ps = PointSet()
    assert not ps.dirty
    ps.add((0, 0, 0))
    assert ps.dirty
    ps.mark_clean()
    assert not ps.dirty
    ps.clear()
    assert ps.dirty
    assert ps.count == 0
