import bpy
from bpy.types import Operator

from ..utils.area_props import is_area_object, load_point_set, store_point_set, get_surface_style
from ..utils.area_mesh import AreaMeshSync
from ..utils.area_editing import (
    PointEditingController,
    PickEvent,
    MODIFIER_ADD,
    MODIFIER_DELETE,
    MODIFIER_NONE,
)
from ..utils.area_raycast import (
    is_view_nav_event,
    mouse_in_region,
    raycast_scene_under_mouse,
    location_to_region,
    region_to_location,
)
from ..utils.viewport_drawing import start_hud_drawing, update_hud_text, stop_hud_drawing
from ..preferences import get_setting
from . import area_drawing


def modifier_from_event(event):
    if event.shift:
        return MODIFIER_ADD
    if event.ctrl:
        return MODIFIER_DELETE
    return MODIFIER_NONE


def refresh_from_owner(controller, owner):
    """Pick up points and transform changed outside the edit session."""
    controller.reload(load_point_set(owner), owner.matrix_world)
    controller.style = get_surface_style(owner)


class AREA_TOOLS_OT_edit_points(Operator):
    """Add, delete and move area points in the viewport"""
    bl_idname = "area_tools.edit_points"
    bl_label = "Edit Area Points"
    bl_options = {'REGISTER', 'UNDO'}

    @classmethod
    def poll(cls, context):
        return (context.area is not None and context.area.type == 'VIEW_3D'
                and is_area_object(context.active_object))

    def invoke(self, context, event):
        obj = context.active_object
        if not is_area_object(obj):
            self.report({'ERROR'}, "Active object must be an Area")
            return {'CANCELLED'}

        self._owner = obj
        self._hover_index = -1

        self._controller = PointEditingController(
            load_point_set(obj),
            AreaMeshSync(obj),
            style=get_surface_style(obj),
            matrix_world=obj.matrix_world,
            pick_radius=get_setting("pick_radius"),
            pick_policy=get_setting("pick_policy"),
            on_change=self._store_points,
        )
        self._bind_view(context)
        # Surface must match the stored points before the first edit
        self._controller.regenerate()

        args = (self, context)
        self._draw_handle = bpy.types.SpaceView3D.draw_handler_add(
            area_drawing.draw_callback_px, args, 'WINDOW', 'POST_PIXEL'
        )
        start_hud_drawing(self._hud_lines())
        context.window_manager.modal_handler_add(self)
        context.area.tag_redraw()
        self.report({'INFO'}, "Shift+Click: add point, Ctrl+Click: delete point, drag to move. Esc to finish.")
        return {'RUNNING_MODAL'}

    def modal(self, context, event):
        if context.area:
            context.area.tag_redraw()

        try:
            self._owner.name
        except ReferenceError:
            self._cleanup(context)
            return {'CANCELLED'}

        if is_view_nav_event(event):
            return {'PASS_THROUGH'}

        controller = self._controller
        mouse_pos = (event.mouse_region_x, event.mouse_region_y)

        if event.type in {'ESC', 'RET', 'NUMPAD_ENTER'} and event.value == 'PRESS':
            if controller.dragging and event.type == 'ESC':
                controller.cancel_drag()
                return {'RUNNING_MODAL'}
            self._cleanup(context)
            return {'FINISHED'}

        # Sidebar, header and other regions keep working during the session
        if not controller.dragging and not mouse_in_region(context.region, mouse_pos):
            self._hover_index = -1
            return {'PASS_THROUGH'}

        self._bind_view(context)

        if event.type == 'MOUSEMOVE':
            if controller.dragging:
                origin = controller.to_world(controller.point_set[controller.drag_index])
                controller.update_drag(region_to_location(context, mouse_pos, origin))
                return {'RUNNING_MODAL'}
            refresh_from_owner(controller, self._owner)
            self._hover_index = controller.point_under_mouse(mouse_pos)
            return {'PASS_THROUGH'}

        if event.type == 'LEFTMOUSE':
            if event.value == 'PRESS':
                refresh_from_owner(controller, self._owner)
                modifier = modifier_from_event(event)
                if modifier != MODIFIER_NONE:
                    if controller.handle_pick(PickEvent(mouse_pos, modifier)):
                        update_hud_text(self._hud_lines())
                    elif modifier == MODIFIER_ADD:
                        self.report({'WARNING'}, "No surface under mouse")
                    self._hover_index = -1
                    return {'RUNNING_MODAL'}

                if controller.begin_drag(mouse_pos):
                    return {'RUNNING_MODAL'}
                # Plain click on empty space: leave it to selection
                return {'PASS_THROUGH'}

            if event.value == 'RELEASE' and controller.dragging:
                try:
                    controller.end_drag()
                except IndexError as e:
                    self.report({'WARNING'}, str(e))
                return {'RUNNING_MODAL'}

        if event.type == 'RIGHTMOUSE' and event.value == 'PRESS' and controller.dragging:
            controller.cancel_drag()
            return {'RUNNING_MODAL'}

        return {'PASS_THROUGH'}

    def cancel(self, context):
        self._cleanup(context)

    def display_points_world(self):
        """World-space points including the in-progress drag position."""
        return self._controller.display_world_points()

    def highlight_index(self):
        if self._controller.dragging:
            return self._controller.drag_index
        return self._hover_index

    def _bind_view(self, context):
        owner = self._owner
        self._controller.ray_cast = lambda pos: raycast_scene_under_mouse(context, pos, ignore=(owner,))
        self._controller.project = lambda p: location_to_region(context, p)

    def _store_points(self):
        store_point_set(self._owner, self._controller.point_set)

    def _hud_lines(self):
        count = self._controller.point_set.count
        lines = [
            f"Area: {self._owner.name} ({count} point{'s' if count != 1 else ''})",
            "Shift+LMB - Add point",
            "Ctrl+LMB - Delete point",
            "LMB drag - Move point (RMB / Esc cancels)",
            "Esc / Enter - Finish",
        ]
        if count < 3:
            lines.append("At least 3 points are needed for a surface")
        return lines

    def _cleanup(self, context):
        if getattr(self, "_draw_handle", None) is not None:
            try:
                bpy.types.SpaceView3D.draw_handler_remove(self._draw_handle, 'WINDOW')
            except ValueError:
                print("Area Tools: Failed to remove drawing handler")
            self._draw_handle = None
        stop_hud_drawing()
        if context.area:
            context.area.tag_redraw()


classes = (
    AREA_TOOLS_OT_edit_points,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
