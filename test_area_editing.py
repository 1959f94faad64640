from types import SimpleNamespace

import bpy
import pytest
from mathutils import Matrix, Vector

from .utils.area_editing import (
    PointEditingController,
    PickEvent,
    DragEvent,
    MODIFIER_ADD,
    MODIFIER_DELETE,
    MODIFIER_NONE,
    PICK_LAST,
    PICK_NEAREST,
    find_point_in_radius,
)
from .utils.area_points import PointSet
from .utils.area_props import PROP_POINTS, ensure_area, load_point_set, store_point_set
from .utils.area_raycast import mouse_in_region
from .operators.area_edit_modal import modifier_from_event, refresh_from_owner


class RecordingSync:
    """Stands in for AreaMeshSync and records each regenerate call."""

    def __init__(self):
        self.calls = []

    def regenerate(self, point_set, style=None):
        self.calls.append(point_set.to_list())


def screen_project(world_point):
    # Orthographic top view, 100 px per unit
    return (world_point.x * 100.0, world_point.y * 100.0)


def make_controller(points=(), **kwargs):
    sync = RecordingSync()
    kwargs.setdefault("project", screen_project)
    controller = PointEditingController(PointSet(list(points)), sync, **kwargs)
    return controller, sync


def test_find_point_nearest_and_last():
    screen = [(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)]
    assert find_point_in_radius((9.0, 0.0), screen, 30.0, PICK_NEAREST) == 1
    assert find_point_in_radius((9.0, 0.0), screen, 30.0, PICK_LAST) == 2


def test_find_point_outside_radius():
    assert find_point_in_radius((100.0, 100.0), [(0.0, 0.0)], 30.0) == -1
    # Radius is exclusive
    assert find_point_in_radius((30.0, 0.0), [(0.0, 0.0)], 30.0) == -1


def test_find_point_skips_unprojected():
    assert find_point_in_radius((0.0, 0.0), [None, (5.0, 0.0)], 30.0) == 1


def test_add_converts_hit_to_local_space():
    matrix = Matrix.Translation((10.0, 0.0, 0.0))
    controller, sync = make_controller(
        matrix_world=matrix,
        ray_cast=lambda pos: Vector((12.0, 3.0, 0.0)),
    )
    assert controller.handle_pick(PickEvent((0, 0), MODIFIER_ADD))
    assert controller.point_set[0] == Vector((2.0, 3.0, 0.0))
    assert sync.calls == [[[2.0, 3.0, 0.0]]]


def test_add_miss_is_a_no_op():
    changes = []
    controller, sync = make_controller(
        [(0, 0, 0)],
        ray_cast=lambda pos: None,
        on_change=lambda: changes.append(True),
    )
    assert not controller.handle_pick(PickEvent((0, 0), MODIFIER_ADD))
    assert controller.point_set.count == 1
    assert sync.calls == []
    assert changes == []


def test_delete_point_under_mouse():
    controller, sync = make_controller([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    assert controller.handle_pick(PickEvent((101.0, 2.0), MODIFIER_DELETE))
    assert controller.point_set.to_list() == [[0, 0, 0], [1, 1, 0]]
    assert len(sync.calls) == 1


def test_delete_miss_is_a_no_op():
    controller, sync = make_controller([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    assert not controller.handle_pick(PickEvent((500.0, 500.0), MODIFIER_DELETE))
    assert controller.point_set.count == 3
    assert sync.calls == []


def test_delete_picks_nearest_by_default():
    # Both points lie within the radius of the click
    controller, _ = make_controller([(0, 0, 0), (0.2, 0, 0)])
    controller.handle_pick(PickEvent((1.0, 0.0), MODIFIER_DELETE))
    assert controller.point_set.to_list() == [pytest.approx([0.2, 0, 0])]


def test_delete_last_in_radius_policy():
    controller, _ = make_controller([(0, 0, 0), (0.2, 0, 0)], pick_policy=PICK_LAST)
    controller.handle_pick(PickEvent((1.0, 0.0), MODIFIER_DELETE))
    assert controller.point_set.to_list() == [[0, 0, 0]]


def test_plain_click_does_not_edit():
    controller, sync = make_controller([(0, 0, 0)], ray_cast=lambda pos: Vector((1, 1, 1)))
    assert not controller.handle_pick(PickEvent((0.0, 0.0), MODIFIER_NONE))
    assert sync.calls == []


def test_drag_sets_local_position():
    controller, sync = make_controller(
        [(0, 0, 0), (1, 0, 0), (1, 1, 0)],
        matrix_world=Matrix.Translation((0.0, 0.0, 2.0)),
    )
    controller.handle_drag(DragEvent(1, Vector((3.0, 0.0, 2.0))))
    assert controller.point_set[1] == Vector((3.0, 0.0, 0.0))
    assert len(sync.calls) == 1


def test_drag_bad_index_raises_without_change():
    controller, sync = make_controller([(0, 0, 0)])
    with pytest.raises(IndexError):
        controller.handle_drag(DragEvent(4, Vector((1, 1, 1))))
    assert controller.point_set.to_list() == [[0, 0, 0]]
    assert sync.calls == []


def test_on_change_runs_after_regenerate():
    order = []
    sync = RecordingSync()
    controller = PointEditingController(
        PointSet(),
        sync,
        ray_cast=lambda pos: Vector((0, 0, 0)),
        on_change=lambda: order.append(len(sync.calls)),
    )
    controller.add_at((0, 0))
    assert order == [1]


def test_world_points_apply_matrix():
    controller, _ = make_controller([(1, 0, 0)], matrix_world=Matrix.Translation((0, 5, 0)))
    assert controller.world_points() == [Vector((1, 5, 0))]


@pytest.fixture
def area_object():
    obj = bpy.data.objects.new("PersistArea", None)
    yield obj
    bpy.data.objects.remove(obj)


def test_store_and_load_points(area_object):
    ensure_area(area_object)
    ps = PointSet([(0, 0, 0), (1.5, 0, 0), (1, 1, 0.25)])
    store_point_set(area_object, ps)
    loaded = load_point_set(area_object)
    assert loaded.to_list() == ps.to_list()


def test_load_corrupt_points_gives_empty_set(area_object):
    area_object[PROP_POINTS] = "not json"
    assert load_point_set(area_object).count == 0


def test_edit_session_sees_points_cleared_elsewhere(area_object):
    ensure_area(area_object)
    store_point_set(area_object, PointSet([(0, 0, 0), (1, 0, 0), (1, 1, 0)]))
    controller = PointEditingController(
        load_point_set(area_object),
        RecordingSync(),
        ray_cast=lambda pos: Vector((0.0, 1.0, 0.0)),
        on_change=lambda: store_point_set(area_object, controller.point_set),
    )

    # Cleared from the sidebar while the session is running
    store_point_set(area_object, PointSet())
    refresh_from_owner(controller, area_object)
    controller.add_at((0, 0))

    assert load_point_set(area_object).to_list() == [[0.0, 1.0, 0.0]]


def test_edit_session_follows_moved_area(area_object):
    ensure_area(area_object)
    controller = PointEditingController(
        load_point_set(area_object),
        RecordingSync(),
        ray_cast=lambda pos: Vector((0.0, 1.0, 3.0)),
    )
    area_object.matrix_world = Matrix.Translation((0.0, 0.0, 3.0))
    refresh_from_owner(controller, area_object)
    controller.add_at((0, 0))
    assert controller.point_set[0] == Vector((0.0, 1.0, 0.0))


def test_drag_commits_on_release():
    controller, sync = make_controller([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    assert controller.begin_drag((100.0, 0.0))
    assert controller.drag_index == 1

    controller.update_drag(Vector((2.0, 0.0, 0.0)))
    # Preview only until release
    assert controller.display_world_points()[1] == Vector((2.0, 0.0, 0.0))
    assert controller.point_set[1] == Vector((1.0, 0.0, 0.0))
    assert sync.calls == []

    assert controller.end_drag()
    assert controller.point_set[1] == Vector((2.0, 0.0, 0.0))
    assert not controller.dragging
    assert len(sync.calls) == 1


def test_cancelled_drag_leaves_points():
    controller, sync = make_controller([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    controller.begin_drag((0.0, 0.0))
    controller.update_drag(Vector((5.0, 5.0, 0.0)))
    controller.cancel_drag()

    assert not controller.dragging
    assert not controller.end_drag()
    assert controller.point_set[0] == Vector((0.0, 0.0, 0.0))
    assert controller.display_world_points()[0] == Vector((0.0, 0.0, 0.0))
    assert sync.calls == []


def test_drag_without_motion_is_a_no_op():
    controller, sync = make_controller([(0, 0, 0)])
    assert controller.begin_drag((0.0, 0.0))
    assert not controller.end_drag()
    assert sync.calls == []


def test_drag_needs_a_point_under_mouse():
    controller, _ = make_controller([(0, 0, 0)])
    assert not controller.begin_drag((300.0, 300.0))
    assert not controller.dragging


def test_modifier_from_event():
    assert modifier_from_event(SimpleNamespace(shift=True, ctrl=False)) == MODIFIER_ADD
    assert modifier_from_event(SimpleNamespace(shift=False, ctrl=True)) == MODIFIER_DELETE
    assert modifier_from_event(SimpleNamespace(shift=True, ctrl=True)) == MODIFIER_ADD
    assert modifier_from_event(SimpleNamespace(shift=False, ctrl=False)) == MODIFIER_NONE


def test_mouse_in_region():
    region = SimpleNamespace(width=800, height=600)
    assert mouse_in_region(region, (0, 0))
    assert mouse_in_region(region, (799, 599))
    assert not mouse_in_region(region, (800, 10))
    assert not mouse_in_region(region, (-5, 10))
    assert not mouse_in_region(region, (10, 600))
    assert not mouse_in_region(None, (10, 10))
