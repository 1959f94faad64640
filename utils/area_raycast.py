import bpy
from mathutils import Vector
from typing import Optional

from .area_mesh import is_area_surface


def is_view_nav_event(event) -> bool:
    # Middle mouse and mouse wheel zoom
    if event.type in {'MIDDLEMOUSE', 'WHEELUPMOUSE', 'WHEELDOWNMOUSE', 'WHEELINMOUSE', 'WHEELOUTMOUSE'}:
        return True
    # Trackpad navigation
    if event.type in {'TRACKPADPAN', 'TRACKPADZOOM'}:
        return True
    # 3D mouse (NDOF)
    if event.type in {
        'NDOF_MOTION',
        'NDOF_BUTTON_MENU', 'NDOF_BUTTON_FIT',
        'NDOF_BUTTON_TOP', 'NDOF_BUTTON_BOTTOM', 'NDOF_BUTTON_LEFT', 'NDOF_BUTTON_RIGHT',
        'NDOF_BUTTON_FRONT', 'NDOF_BUTTON_BACK',
        'NDOF_BUTTON_ISO1', 'NDOF_BUTTON_ISO2'
    }:
        return True
    # Industry Compatible: Alt + mouse
    if event.alt and event.type in {'LEFTMOUSE', 'MIDDLEMOUSE', 'RIGHTMOUSE'}:
        return True
    return False


def mouse_in_region(region, mouse_pos) -> bool:
    """True when region-relative mouse coordinates fall inside the region."""
    if region is None:
        return False
    x, y = mouse_pos
    return 0 <= x < region.width and 0 <= y < region.height


def raycast_scene_under_mouse(context, mouse_pos, ignore=()) -> Optional[Vector]:
    """
    Cast a ray from the mouse through the view and return the closest world-space hit
    on a visible mesh. Area surfaces are skipped so points land on scene geometry.
    """
    region = context.region
    rv3d = context.region_data
    if region is None or rv3d is None:
        return None

    from bpy_extras import view3d_utils
    view_vector = view3d_utils.region_2d_to_vector_3d(region, rv3d, mouse_pos)
    ray_origin = view3d_utils.region_2d_to_origin_3d(region, rv3d, mouse_pos)

    depsgraph = context.evaluated_depsgraph_get()
    hit_point = None
    hit_dist = float('inf')

    for obj in context.visible_objects:
        if obj.type != 'MESH' or obj in ignore or is_area_surface(obj):
            continue

        obj_eval = obj.evaluated_get(depsgraph)
        matrix = obj_eval.matrix_world
        matrix_inv = matrix.inverted_safe()

        # Transform to local space of target
        ray_origin_local = matrix_inv @ ray_origin
        ray_dir_local = (matrix_inv.to_3x3() @ view_vector).normalized()

        success, location, normal, face_index = obj_eval.ray_cast(ray_origin_local, ray_dir_local)
        if success:
            world_hit = matrix @ location
            dist = (world_hit - ray_origin).length
            if dist < hit_dist:
                hit_dist = dist
                hit_point = world_hit

    return hit_point


def location_to_region(context, world_point):
    """Project a world-space point to region pixels, None when behind the view."""
    region = context.region
    rv3d = context.region_data
    if region is None or rv3d is None:
        return None
    from bpy_extras import view3d_utils
    return view3d_utils.location_3d_to_region_2d(region, rv3d, world_point)


def region_to_location(context, mouse_pos, depth_location):
    """Mouse position to a world-space point at the depth of depth_location."""
    region = context.region
    rv3d = context.region_data
    if region is None or rv3d is None:
        return None
    from bpy_extras import view3d_utils
    return view3d_utils.region_2d_to_location_3d(region, rv3d, mouse_pos, depth_location)
