"""
Area Drawing Module for Area Tools addon.
Draws the points, labels and outline of the Area being edited.
"""
from mathutils import Vector

from ..utils.area_raycast import location_to_region
from ..utils import viewport_drawing
from ..preferences import get_setting

POINT_COLOR = (1.0, 1.0, 0.0, 1.0)
HOVER_COLOR = (1.0, 0.5, 0.1, 1.0)
LINE_COLOR = (0.0, 1.0, 1.0, 0.9)
LABEL_UP = Vector((0.0, 0.0, 1.0))


def draw_callback_px(operator, context):
    """Draw callback (POST_PIXEL) for AREA_TOOLS_OT_edit_points."""
    try:
        points_world = operator.display_points_world()
    except ReferenceError:
        # Area object was deleted while editing
        return
    if not points_world:
        return

    screen_points = [location_to_region(context, p) for p in points_world]

    clip_rect = viewport_drawing.region_rect(context.region) if context.region else None
    viewport_drawing.draw_dotted_loop(screen_points, LINE_COLOR, clip_rect=clip_rect)

    point_size = get_setting("point_size")
    viewport_drawing.draw_points(screen_points, POINT_COLOR, size=point_size)

    active = operator.highlight_index()
    if 0 <= active < len(screen_points) and screen_points[active] is not None:
        viewport_drawing.draw_points([screen_points[active]], HOVER_COLOR, size=point_size * 1.5)

    if get_setting("show_labels"):
        offset = LABEL_UP * get_setting("label_offset")
        labels = [
            (f"P{i}", location_to_region(context, p + offset))
            for i, p in enumerate(points_world)
        ]
        viewport_drawing.draw_labels(labels)
