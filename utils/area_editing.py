"""
Point editing for Area objects in Area Tools addon.
Turns viewport picks and drags into PointSet edits and keeps the surface in sync.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from mathutils import Matrix, Vector

from .area_mesh import SurfaceStyle

MouseXY = Tuple[float, float]

# Pick modifiers
MODIFIER_NONE = 'NONE'
MODIFIER_ADD = 'ADD'
MODIFIER_DELETE = 'DELETE'

# Hit-test policies for picking a point by screen position
PICK_NEAREST = 'NEAREST'
PICK_LAST = 'LAST'

DEFAULT_PICK_RADIUS = 30.0


@dataclass
class PickEvent:
    """A click in the viewport, in region pixel coordinates."""
    mouse_pos: MouseXY
    modifier: str = MODIFIER_NONE


@dataclass
class DragEvent:
    """End of a point drag: new world-space position for one point."""
    index: int
    world_position: Vector


def find_point_in_radius(mouse_pos, screen_points, radius=DEFAULT_PICK_RADIUS, policy=PICK_NEAREST):
    """
    Find the point whose screen position lies within radius pixels of the mouse.

    Args:
        mouse_pos: Mouse position (x, y) in region pixels
        screen_points: Projected points, None for points that could not be projected
        radius: Pick tolerance in pixels
        policy: PICK_NEAREST picks the closest point, PICK_LAST the last one scanned

    Returns:
        int: Point index, or -1 when nothing is within the radius
    """
    found = -1
    closest = radius
    for i, point_2d in enumerate(screen_points):
        if point_2d is None:
            continue
        d = math.hypot(mouse_pos[0] - point_2d[0], mouse_pos[1] - point_2d[1])
        if d >= radius:
            continue
        if policy == PICK_LAST:
            found = i
        elif d < closest:
            closest = d
            found = i
    return found


class PointEditingController:
    """
    Applies one gesture at a time to a PointSet.

    Every successful edit regenerates the surface right away, then calls
    on_change. View access is injected so the controller works without a viewport:
        ray_cast(mouse_pos) -> world-space hit Vector or None
        project(world_point) -> (x, y) region position or None
    """

    def __init__(
        self,
        point_set,
        sync,
        style: Optional[SurfaceStyle] = None,
        matrix_world: Optional[Matrix] = None,
        ray_cast: Optional[Callable] = None,
        project: Optional[Callable] = None,
        pick_radius: float = DEFAULT_PICK_RADIUS,
        pick_policy: str = PICK_NEAREST,
        on_change: Optional[Callable] = None,
    ):
        self.point_set = point_set
        self.sync = sync
        self.style = style or SurfaceStyle()
        self.matrix_world = matrix_world.copy() if matrix_world is not None else Matrix.Identity(4)
        self.ray_cast = ray_cast
        self.project = project
        self.pick_radius = pick_radius
        self.pick_policy = pick_policy
        self.on_change = on_change
        self.drag_index = -1
        self.drag_world = None

    def reload(self, point_set, matrix_world=None):
        """
        Adopt the point set and transform stored on the owner.

        Other edit paths (sidebar operators, moving the Area) can change both
        between gestures, so this runs before each gesture starts.
        """
        self.point_set = point_set
        if matrix_world is not None:
            self.matrix_world = matrix_world.copy()

    def to_local(self, world_point):
        return self.matrix_world.inverted_safe() @ Vector(world_point)

    def to_world(self, local_point):
        return self.matrix_world @ Vector(local_point)

    def world_points(self):
        return [self.to_world(p) for p in self.point_set]

    def regenerate(self):
        self.sync.regenerate(self.point_set, self.style)

    def handle_pick(self, event: PickEvent) -> bool:
        """Dispatch a pick by modifier. Returns True when the point set changed."""
        if event.modifier == MODIFIER_ADD:
            return self.add_at(event.mouse_pos)
        if event.modifier == MODIFIER_DELETE:
            return self.delete_at(event.mouse_pos)
        return False

    def add_at(self, mouse_pos) -> bool:
        hit = self.ray_cast(mouse_pos) if self.ray_cast is not None else None
        if hit is None:
            return False
        self.point_set.add(self.to_local(hit))
        self._changed()
        return True

    def delete_at(self, mouse_pos) -> bool:
        index = self.point_under_mouse(mouse_pos)
        if index < 0:
            return False
        self.point_set.remove_at(index)
        self._changed()
        return True

    def point_under_mouse(self, mouse_pos) -> int:
        if self.project is None:
            return -1
        screen_points = [self.project(p) for p in self.world_points()]
        return find_point_in_radius(mouse_pos, screen_points, self.pick_radius, self.pick_policy)

    def handle_drag(self, event: DragEvent) -> bool:
        # IndexError propagates before anything is modified
        self.point_set.set(event.index, self.to_local(event.world_position))
        self._changed()
        return True

    # Drag gesture: begin on press, update on mouse move, commit on release

    @property
    def dragging(self) -> bool:
        return self.drag_index >= 0

    def begin_drag(self, mouse_pos) -> bool:
        index = self.point_under_mouse(mouse_pos)
        if index < 0:
            return False
        self.drag_index = index
        self.drag_world = None
        return True

    def update_drag(self, world_position):
        if self.dragging and world_position is not None:
            self.drag_world = Vector(world_position)

    def end_drag(self) -> bool:
        """Commit the drag. Returns True when the point moved."""
        index, world = self.drag_index, self.drag_world
        self.cancel_drag()
        if index < 0 or world is None:
            return False
        return self.handle_drag(DragEvent(index, world))

    def cancel_drag(self):
        self.drag_index = -1
        self.drag_world = None

    def display_world_points(self):
        """World-space points with the in-progress drag position applied."""
        points = self.world_points()
        if 0 <= self.drag_index < len(points) and self.drag_world is not None:
            points[self.drag_index] = self.drag_world.copy()
        return points

    def _changed(self):
        self.regenerate()
        if self.on_change is not None:
            self.on_change()
