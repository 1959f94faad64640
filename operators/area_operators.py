import bpy
from bpy.types import Operator
from bpy.props import IntProperty, FloatVectorProperty

from ..utils.area_props import (
    OBJECT_PROP_COLOR,
    ensure_area,
    is_area_object,
    load_point_set,
    store_point_set,
    regenerate_area,
)
from ..preferences import get_setting


class AREA_TOOLS_OT_add_area(Operator):
    """Add an empty Area at the 3D cursor"""
    bl_idname = "area_tools.add_area"
    bl_label = "Add Area"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        obj = bpy.data.objects.new("Area", None)
        obj.empty_display_type = 'PLAIN_AXES'
        obj.empty_display_size = 0.5
        obj.location = context.scene.cursor.location.copy()
        context.collection.objects.link(obj)

        ensure_area(obj)
        if hasattr(obj, OBJECT_PROP_COLOR):
            setattr(obj, OBJECT_PROP_COLOR, get_setting("default_color"))
        regenerate_area(obj)

        for other in context.selected_objects:
            other.select_set(False)
        obj.select_set(True)
        context.view_layer.objects.active = obj

        self.report({'INFO'}, f"Added {obj.name}. Use Edit Points to draw its outline.")
        return {'FINISHED'}


class _AreaPointEdit:
    """Load, edit, store and regenerate the active Area's points."""

    @classmethod
    def poll(cls, context):
        return is_area_object(context.active_object)

    def edit(self, point_set):
        raise NotImplementedError

    def execute(self, context):
        obj = context.active_object
        point_set = load_point_set(obj)
        try:
            self.edit(point_set)
        except IndexError as e:
            self.report({'ERROR'}, str(e))
            return {'CANCELLED'}
        store_point_set(obj, point_set)
        regenerate_area(obj, point_set)
        return {'FINISHED'}


class AREA_TOOLS_OT_remove_point(_AreaPointEdit, Operator):
    """Remove a point from the active Area"""
    bl_idname = "area_tools.remove_point"
    bl_label = "Remove Area Point"
    bl_options = {'REGISTER', 'UNDO'}

    index: IntProperty(name="Index", default=0)

    def edit(self, point_set):
        point_set.remove_at(self.index)


class AREA_TOOLS_OT_set_point(_AreaPointEdit, Operator):
    """Set the local-space position of an Area point"""
    bl_idname = "area_tools.set_point"
    bl_label = "Set Area Point"
    bl_options = {'REGISTER', 'UNDO'}

    index: IntProperty(name="Index", default=0)
    location: FloatVectorProperty(name="Location", size=3, subtype='TRANSLATION')

    def invoke(self, context, event):
        point_set = load_point_set(context.active_object)
        if 0 <= self.index < point_set.count:
            self.location = point_set[self.index]
        return context.window_manager.invoke_props_dialog(self)

    def edit(self, point_set):
        point_set.set(self.index, self.location)


class AREA_TOOLS_OT_clear_points(_AreaPointEdit, Operator):
    """Remove all points from the active Area"""
    bl_idname = "area_tools.clear_points"
    bl_label = "Clear Area Points"
    bl_options = {'REGISTER', 'UNDO'}

    def invoke(self, context, event):
        return context.window_manager.invoke_confirm(self, event)

    def edit(self, point_set):
        point_set.clear()


class AREA_TOOLS_OT_regenerate_mesh(Operator):
    """Rebuild the surface of the active Area from its points"""
    bl_idname = "area_tools.regenerate_mesh"
    bl_label = "Regenerate Area Mesh"
    bl_options = {'REGISTER', 'UNDO'}

    @classmethod
    def poll(cls, context):
        return is_area_object(context.active_object)

    def execute(self, context):
        regenerate_area(context.active_object)
        return {'FINISHED'}


classes = (
    AREA_TOOLS_OT_add_area,
    AREA_TOOLS_OT_remove_point,
    AREA_TOOLS_OT_set_point,
    AREA_TOOLS_OT_clear_points,
    AREA_TOOLS_OT_regenerate_mesh,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
