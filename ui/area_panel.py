import bpy
from bpy.types import Panel

from ..utils.area_props import OBJECT_PROP_COLOR, is_area_object, load_point_set


class AREA_TOOLS_PT_main_panel(Panel):
    bl_label = "Area Tools"
    bl_idname = "AREA_TOOLS_PT_main_panel"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'Area Tools'
    bl_order = 0

    def draw(self, context):
        layout = self.layout
        col = layout.column(align=True)
        col.operator("area_tools.add_area", text="Add Area", icon='MESH_PLANE')

        obj = context.active_object
        if not is_area_object(obj):
            col.separator()
            col.label(text="Select an Area to edit it")
            return

        col.separator()
        col.label(text=obj.name, icon='OBJECT_DATA')
        if hasattr(obj, OBJECT_PROP_COLOR):
            col.prop(obj, OBJECT_PROP_COLOR, text="Color")
        col.operator("area_tools.edit_points", text="Edit Points", icon='EDITMODE_HLT')
        row = col.row(align=True)
        row.operator("area_tools.regenerate_mesh", text="Regenerate", icon='FILE_REFRESH')
        row.operator("area_tools.clear_points", text="Clear", icon='TRASH')


class AREA_TOOLS_PT_points_panel(Panel):
    bl_label = "Points"
    bl_idname = "AREA_TOOLS_PT_points_panel"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'Area Tools'
    bl_parent_id = 'AREA_TOOLS_PT_main_panel'
    bl_order = 0

    @classmethod
    def poll(cls, context):
        return is_area_object(context.active_object)

    def draw(self, context):
        layout = self.layout
        point_set = load_point_set(context.active_object)
        if point_set.count == 0:
            layout.label(text="No points yet")
            return
        if point_set.count < 3:
            layout.label(text="At least 3 points are needed for a surface", icon='INFO')

        col = layout.column(align=True)
        for i, p in enumerate(point_set):
            row = col.row(align=True)
            row.label(text=f"P{i}  ({p.x:.2f}, {p.y:.2f}, {p.z:.2f})")
            op = row.operator("area_tools.set_point", text="", icon='GREASEPENCIL')
            op.index = i
            op = row.operator("area_tools.remove_point", text="", icon='X')
            op.index = i


class AREA_TOOLS_PT_help_panel(Panel):
    bl_label = "Help"
    bl_idname = "AREA_TOOLS_PT_help_panel"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'Area Tools'
    bl_parent_id = 'AREA_TOOLS_PT_main_panel'
    bl_options = {'DEFAULT_CLOSED'}
    bl_order = 1

    def draw(self, context):
        col = self.layout.column(align=True)
        col.label(text="While editing points:")
        col.label(text="Shift+LMB: Add point on a surface")
        col.label(text="Ctrl+LMB: Delete point")
        col.label(text="LMB drag: Move point")
        col.label(text="Esc / Enter: Finish")


classes = (
    AREA_TOOLS_PT_main_panel,
    AREA_TOOLS_PT_points_panel,
    AREA_TOOLS_PT_help_panel,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
