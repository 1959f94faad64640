import bpy
import json
from bpy.app.handlers import persistent

from .area_points import PointSet
from .area_mesh import AreaMeshSync, SurfaceStyle, DEFAULT_COLOR

PROP_POINTS = "AreaPoints"
OBJECT_PROP_COLOR = "area_color"


def is_area_object(obj) -> bool:
    return obj is not None and PROP_POINTS in obj


def ensure_area(obj) -> None:
    if obj is not None and PROP_POINTS not in obj:
        obj[PROP_POINTS] = "[]"


def load_point_set(obj) -> PointSet:
    """Read the persisted points of an Area object (local space)."""
    if obj is None or PROP_POINTS not in obj:
        return PointSet()
    try:
        data = json.loads(obj[PROP_POINTS])
        return PointSet([tuple(pt) for pt in data])
    except (json.JSONDecodeError, TypeError, ValueError):
        print(f"Area Tools: Unreadable point data on '{obj.name}', starting empty")
        return PointSet()


def store_point_set(obj, point_set) -> None:
    obj[PROP_POINTS] = json.dumps(point_set.to_list())


def get_surface_style(obj) -> SurfaceStyle:
    color = getattr(obj, OBJECT_PROP_COLOR, DEFAULT_COLOR)
    return SurfaceStyle(color=tuple(color))


def regenerate_area(obj, point_set=None):
    """Regenerate an Area's surface from its stored (or the given) points."""
    if point_set is None:
        point_set = load_point_set(obj)
    return AreaMeshSync(obj).regenerate(point_set, get_surface_style(obj))


def update_color_callback(self, context):
    if is_area_object(self):
        regenerate_area(self)


@persistent
def regenerate_areas_on_load(_dummy):
    """Bring every Area surface in line with its stored points after a file loads."""
    for obj in bpy.data.objects:
        if is_area_object(obj):
            regenerate_area(obj)


def register_object_properties():
    from bpy.props import FloatVectorProperty
    if not hasattr(bpy.types.Object, OBJECT_PROP_COLOR):
        setattr(
            bpy.types.Object,
            OBJECT_PROP_COLOR,
            FloatVectorProperty(
                name="Area Color",
                description="Color of the area surface",
                subtype='COLOR',
                size=4,
                min=0.0,
                max=1.0,
                default=DEFAULT_COLOR,
                update=update_color_callback,
            ),
        )


def unregister_object_properties():
    if hasattr(bpy.types.Object, OBJECT_PROP_COLOR):
        delattr(bpy.types.Object, OBJECT_PROP_COLOR)


def register():
    register_object_properties()
    if regenerate_areas_on_load not in bpy.app.handlers.load_post:
        bpy.app.handlers.load_post.append(regenerate_areas_on_load)


def unregister():
    if regenerate_areas_on_load in bpy.app.handlers.load_post:
        bpy.app.handlers.load_post.remove(regenerate_areas_on_load)
    unregister_object_properties()
