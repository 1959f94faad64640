import bpy

from .utils.area_mesh import DEFAULT_COLOR
from .utils.area_editing import DEFAULT_PICK_RADIUS, PICK_NEAREST, PICK_LAST

# Fallbacks used when the addon preferences are not available (background mode)
DEFAULTS = {
    "default_color": DEFAULT_COLOR,
    "pick_radius": DEFAULT_PICK_RADIUS,
    "pick_policy": PICK_NEAREST,
    "show_labels": True,
    "label_offset": 0.2,
    "point_size": 8.0,
    "debug": False,
}


def get_prefs():
    """Get addon preferences."""
    try:
        addon_prefs = bpy.context.preferences.addons.get(__package__)
        if addon_prefs:
            return addon_prefs.preferences
    except AttributeError:
        pass
    return None


def get_setting(name):
    prefs = get_prefs()
    default = DEFAULTS[name]
    if prefs is None:
        return default
    return getattr(prefs, name, default)


def debug_print(message):
    """Print a diagnostic only when debug output is enabled in preferences."""
    if get_setting("debug"):
        print(f"Area Tools: {message}")


class AreaToolsPreferences(bpy.types.AddonPreferences):
    bl_idname = __package__

    default_color: bpy.props.FloatVectorProperty(
        name="Default Area Color",
        description="Surface color given to newly added areas",
        subtype='COLOR',
        size=4,
        min=0.0,
        max=1.0,
        default=DEFAULT_COLOR,
    )
    pick_radius: bpy.props.FloatProperty(
        name="Pick Radius",
        description="Screen distance in pixels within which a click picks a point",
        default=DEFAULT_PICK_RADIUS,
        min=1.0,
        max=200.0,
        subtype='PIXEL',
    )
    pick_policy: bpy.props.EnumProperty(
        name="Pick Policy",
        description="Which point wins when several are within the pick radius",
        items=[
            (PICK_NEAREST, "Nearest", "The point closest to the mouse"),
            (PICK_LAST, "Last in Radius", "The highest-numbered point within the radius (legacy behavior)"),
        ],
        default=PICK_NEAREST,
    )
    show_labels: bpy.props.BoolProperty(
        name="Show Point Labels",
        description="Draw P0, P1, ... next to points while editing",
        default=True,
    )
    label_offset: bpy.props.FloatProperty(
        name="Label Offset",
        description="Height above each point at which its label is drawn",
        default=0.2,
        min=0.0,
        max=10.0,
        subtype='DISTANCE',
    )
    point_size: bpy.props.FloatProperty(
        name="Point Size",
        description="Size of the point markers in pixels",
        default=8.0,
        min=2.0,
        max=32.0,
    )
    debug: bpy.props.BoolProperty(
        name="Debug Output",
        description="Print diagnostics, such as a missing unlit shader, to the console",
        default=False,
    )

    def draw(self, context):
        layout = self.layout
        col = layout.column()
        col.prop(self, "default_color")
        col.separator()
        col.label(text="Picking:")
        col.prop(self, "pick_radius")
        col.prop(self, "pick_policy")
        col.separator()
        col.label(text="Display:")
        col.prop(self, "point_size")
        col.prop(self, "show_labels")
        row = col.row()
        row.enabled = self.show_labels
        row.prop(self, "label_offset")
        col.separator()
        col.prop(self, "debug")


classes = (
    AreaToolsPreferences,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
