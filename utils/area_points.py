"""
Point storage for Area objects in Area Tools addon.
Points are kept in the owning object's local space. Insertion order defines the
polygon winding and point 0 is the fan origin.
"""
from mathutils import Vector


class PointSet:
    """
    Ordered, mutable list of polygon vertices.
    All edits go through add/remove_at/set/clear so every edit path
    (viewport operator, sidebar panel) ends up in the same state.
    """

    def __init__(self, points=None):
        self._points = [Vector(p).to_3d() for p in points] if points else []
        self.dirty = bool(self._points)

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return (p.copy() for p in self._points)

    def __getitem__(self, index):
        self._check_index(index)
        return self._points[index].copy()

    @property
    def count(self):
        return len(self._points)

    @property
    def points(self):
        """Copies of the current points, in order."""
        return [p.copy() for p in self._points]

    def add(self, point):
        """Append a point and return its index."""
        self._points.append(Vector(point).to_3d())
        self.dirty = True
        return len(self._points) - 1

    def remove_at(self, index):
        self._check_index(index)
        del self._points[index]
        self.dirty = True

    def set(self, index, point):
        self._check_index(index)
        self._points[index] = Vector(point).to_3d()
        self.dirty = True

    def clear(self):
        self._points.clear()
        self.dirty = True

    def mark_clean(self):
        self.dirty = False

    def to_list(self):
        """Plain [x, y, z] lists for storing in ID properties."""
        return [[p.x, p.y, p.z] for p in self._points]

    def _check_index(self, index):
        # Negative indices are rejected, not wrapped
        if index < 0 or index >= len(self._points):
            raise IndexError(f"Point index {index} out of range for {len(self._points)} point(s)")
