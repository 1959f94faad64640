import bpy


def draw_add_menu(self, context):
    """Add our operator to the Add menu"""
    self.layout.separator()
    self.layout.operator("area_tools.add_area", text="Area", icon='MESH_PLANE')


def register():
    # Add to the Shift+A add menu
    bpy.types.VIEW3D_MT_add.append(draw_add_menu)


def unregister():
    # Remove from add menu
    try:
        bpy.types.VIEW3D_MT_add.remove(draw_add_menu)
    except (AttributeError, ValueError):
        pass
