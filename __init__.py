bl_info = {
    "name": "Area Tools",
    "author": "MattGPT",
    "version": (1, 0, 0),
    "blender": (4, 2, 0),
    "location": "View3D > Sidebar > Area Tools",
    "description": "Draw flat colored areas from points placed on scene surfaces",
    "warning": "",
    "doc_url": "",
    "category": "3D View",
}

import bpy
import importlib

# List of modules to import
modules = [
    # Core
    "preferences",
    "keymaps",

    # Properties must be registered before UI draws
    "utils.area_props",

    # Area operators
    "operators.area_operators",
    "operators.area_edit_modal",
    "ui.area_panel",
]

# Store imported modules for reload
imported_modules = {}


def register():
    # Import and register modules
    for module_name in modules:
        # Import module
        full_name = f"{__name__}.{module_name}"
        if full_name in imported_modules:
            importlib.reload(imported_modules[full_name])
            module = imported_modules[full_name]
        else:
            module = __import__(full_name, fromlist=["*"])
            imported_modules[full_name] = module

        # Register if module has register function
        if hasattr(module, "register"):
            module.register()


def unregister():
    # Unregister modules in reverse order
    for module_name in reversed(modules):
        full_name = f"{__name__}.{module_name}"
        if full_name in imported_modules:
            module = imported_modules[full_name]
            if hasattr(module, "unregister"):
                module.unregister()


if __name__ == "__main__":
    register()
