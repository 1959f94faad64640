import bpy
import gpu
import math
import blf
from gpu_extras.batch import batch_for_shader

# Upper bound on dashes per segment, whatever its projected length
MAX_DASHES = 4096

TEXT_COLOR = (1.0, 1.0, 1.0, 0.9)


def region_rect(region):
    """(xmin, ymin, xmax, ymax) of a region in its own pixel space."""
    return (0.0, 0.0, float(region.width), float(region.height))


def clip_segment(p1, p2, rect):
    """
    Clip the segment p1 -> p2 to an axis-aligned rectangle (Liang-Barsky).

    Points just in front of the view plane project to huge screen coordinates,
    so outline segments are clipped to the region before they are dashed.

    Returns:
        ((x, y), (x, y)) for the visible part, or None when nothing is inside
    """
    xmin, ymin, xmax, ymax = rect
    x1, y1 = p1
    dx = p2[0] - x1
    dy = p2[1] - y1
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x1 - xmin), (dx, xmax - x1), (-dy, y1 - ymin), (dy, ymax - y1)):
        if p == 0.0:
            if q < 0.0:
                return None
            continue
        t = q / p
        if p < 0.0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (x1 + t0 * dx, y1 + t0 * dy), (x1 + t1 * dx, y1 + t1 * dy)


def dash_segments(p1, p2, dash_length=4.0):
    """
    Split the screen-space segment p1 -> p2 into dashes.

    Returns:
        list of ((x, y), (x, y)) pairs, every other dash_length piece of the
        segment, at most MAX_DASHES of them
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    length = math.hypot(dx, dy)
    if length <= 1e-6 or dash_length <= 0.0:
        return []
    ux = dx / length
    uy = dy / length
    dashes = []
    t = 0.0
    while t < length and len(dashes) < MAX_DASHES:
        t_end = min(t + dash_length, length)
        dashes.append((
            (p1[0] + ux * t, p1[1] + uy * t),
            (p1[0] + ux * t_end, p1[1] + uy * t_end),
        ))
        t += 2.0 * dash_length
    return dashes


def dotted_loop_coords(screen_points, dash_length=4.0, clip_rect=None):
    """Line-list coordinates of a dashed closed loop through the screen points."""
    pts = [p for p in screen_points if p is not None]
    if len(pts) < 2:
        return []
    coords = []
    count = len(pts)
    # Two points would draw the same edge twice
    edge_count = count if count > 2 else 1
    for i in range(edge_count):
        segment = (pts[i], pts[(i + 1) % count])
        if clip_rect is not None:
            segment = clip_segment(segment[0], segment[1], clip_rect)
            if segment is None:
                continue
        for a, b in dash_segments(segment[0], segment[1], dash_length):
            coords.extend((a, b))
    return coords


def draw_dotted_loop(screen_points, color, dash_length=4.0, width=1.5, clip_rect=None):
    """Draw a dotted closed outline through consecutive screen points (POST_PIXEL)."""
    coords = dotted_loop_coords(screen_points, dash_length, clip_rect)
    if not coords:
        return

    shader = gpu.shader.from_builtin('POLYLINE_UNIFORM_COLOR')
    batch = batch_for_shader(shader, 'LINES', {"pos": coords})
    gpu.state.blend_set('ALPHA')
    viewport = gpu.state.viewport_get()
    shader.uniform_float("viewportSize", (viewport[2], viewport[3]))
    shader.uniform_float("lineWidth", width)
    shader.uniform_float("color", color)
    batch.draw(shader)
    gpu.state.blend_set('NONE')


def draw_points(screen_points, color, size=8.0):
    pts = [tuple(p) for p in screen_points if p is not None]
    if not pts:
        return
    shader = gpu.shader.from_builtin('UNIFORM_COLOR')
    batch = batch_for_shader(shader, 'POINTS', {"pos": pts})
    gpu.state.blend_set('ALPHA')
    gpu.state.point_size_set(size)
    shader.uniform_float("color", color)
    batch.draw(shader)
    gpu.state.point_size_set(1.0)
    gpu.state.blend_set('NONE')


def _text_size():
    ui_scale = getattr(bpy.context.preferences.view, 'ui_scale', 1.0)
    return max(10, int(12 * ui_scale)), ui_scale


def draw_labels(labels, color=TEXT_COLOR, font_id=0):
    """Draw (text, (x, y)) labels in region pixels; None positions are skipped."""
    size, _ = _text_size()
    blf.size(font_id, size)
    blf.color(font_id, *color)
    for text, pos in labels:
        if pos is None:
            continue
        blf.position(font_id, pos[0], pos[1], 0)
        blf.draw(font_id, text)


def _redraw_view3d():
    screen = bpy.context.screen
    if screen is None:
        return
    for area in screen.areas:
        if area.type == 'VIEW_3D':
            area.tag_redraw()


class HelpHUD:
    """Help text pinned to the top-left corner of the 3D viewports."""

    def __init__(self):
        self.handle = None
        self.lines = []

    def draw(self):
        size, ui_scale = _text_size()
        margin = int(12 * ui_scale)
        region = bpy.context.region
        y = (region.height if region else 200 + margin) - margin - size
        draw_labels(
            [(line, (margin, y - i * int(size * 1.4))) for i, line in enumerate(self.lines)]
        )


_hud = HelpHUD()


def start_hud_drawing(lines=None):
    _hud.lines = list(lines or [])
    if _hud.handle is None:
        _hud.handle = bpy.types.SpaceView3D.draw_handler_add(_hud.draw, (), 'WINDOW', 'POST_PIXEL')
    _redraw_view3d()


def update_hud_text(lines):
    _hud.lines = list(lines or [])
    _redraw_view3d()


def stop_hud_drawing():
    if _hud.handle is not None:
        bpy.types.SpaceView3D.draw_handler_remove(_hud.handle, 'WINDOW')
        _hud.handle = None
    _redraw_view3d()
