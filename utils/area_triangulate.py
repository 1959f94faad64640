"""
Triangulation helpers for Area surfaces.
"""
import numpy as np
from mathutils import Vector


def fan_triangulate(points):
    """
    Fan-triangulate an ordered polygon from its first vertex.

    Emits (0, i+1, i) for i in 1..n-2. The winding is fixed: it decides which
    side of the surface is the front face.

    Args:
        points: Ordered polygon vertices (only the count is used)

    Returns:
        list[int]: Flat triangle index list, 3 * (n - 2) entries, empty when n < 3
    """
    n = len(points)
    if n < 3:
        return []
    indices = []
    for i in range(1, n - 1):
        indices.extend((0, i + 1, i))
    return indices


def group_triangles(indices):
    """Convert a flat index list to (a, b, c) tuples for Mesh.from_pydata."""
    return [tuple(indices[i:i + 3]) for i in range(0, len(indices) - len(indices) % 3, 3)]


def compute_bounds(vertices):
    """Axis-aligned bounds of a vertex list as (min, max) Vectors."""
    if len(vertices) == 0:
        return Vector((0.0, 0.0, 0.0)), Vector((0.0, 0.0, 0.0))
    coords = np.asarray([tuple(v) for v in vertices], dtype=np.float64).reshape(-1, 3)
    return Vector(coords.min(axis=0).tolist()), Vector(coords.max(axis=0).tolist())
