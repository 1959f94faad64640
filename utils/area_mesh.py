"""
Surface mesh synchronisation for Area objects in Area Tools addon.
Owns the surface object, its mesh datablock and its unlit material, and keeps
them consistent with the Area's point set.
"""
import bpy
import numpy as np
from dataclasses import dataclass

from .area_triangulate import fan_triangulate, group_triangles, compute_bounds

# Constants
MIN_POINTS = 3
UNLIT_SHADER = 'EMISSION'
PROP_SURFACE_OWNER = "AreaSurfaceOwner"
DEFAULT_COLOR = (0.0, 0.8, 1.0, 1.0)


@dataclass
class SurfaceStyle:
    """Presentation settings applied to the surface material."""
    color: tuple = DEFAULT_COLOR


@dataclass(frozen=True)
class MeshSnapshot:
    """Read-back of the surface buffer as a renderer would see it."""
    vertices: tuple = ()
    triangle_indices: tuple = ()
    normals: tuple = ()
    bounds: tuple = ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    visible: bool = False


def link_to_parent_collections(obj, parent):
    linked = False
    if parent is not None and getattr(parent, 'users_collection', None):
        for coll in parent.users_collection:
            try:
                coll.objects.link(obj)
                linked = True
            except RuntimeError:
                # Already linked to this collection
                pass
    if not linked:
        bpy.context.scene.collection.objects.link(obj)


def material_shader_identity(mat):
    """Return the node type feeding the material output's Surface socket, or None."""
    if mat is None or mat.node_tree is None:
        return None
    outputs = [n for n in mat.node_tree.nodes if n.type == 'OUTPUT_MATERIAL']
    if not outputs:
        return None
    out = next((n for n in outputs if n.is_active_output), outputs[0])
    links = out.inputs['Surface'].links
    if not links:
        return None
    return links[0].from_node.type


def create_unlit_material(name):
    """
    Create an emission-only material.

    Returns:
        bpy.types.Material or None if the node setup is not available
    """
    mat = bpy.data.materials.new(name)
    try:
        mat.use_nodes = True
        nt = mat.node_tree
        nt.nodes.clear()
        out = nt.nodes.new('ShaderNodeOutputMaterial')
        out.location = (300, 0)
        emis = nt.nodes.new('ShaderNodeEmission')
        emis.inputs['Strength'].default_value = 1.0
        nt.links.new(emis.outputs['Emission'], out.inputs['Surface'])
    except (AttributeError, KeyError, RuntimeError) as e:
        from ..preferences import debug_print
        debug_print(f"Unlit shader unavailable, skipping material: {e}")
        bpy.data.materials.remove(mat)
        return None
    if hasattr(mat, "use_backface_culling"):
        mat.use_backface_culling = False
    return mat


def set_material_color(mat, color):
    rgba = tuple(color)
    emis = next((n for n in mat.node_tree.nodes if n.type == 'EMISSION'), None)
    if emis is not None:
        emis.inputs['Color'].default_value = rgba
    mat.diffuse_color = rgba


def disable_shadows(surface, mat=None):
    """Flat overlay surface: no shadow casting (emission does not receive light)."""
    if hasattr(surface, "visible_shadow"):
        surface.visible_shadow = False
    display = getattr(surface, "display", None)
    if display is not None and hasattr(display, "show_shadows"):
        display.show_shadows = False
    # Legacy EEVEE material setting
    if mat is not None and hasattr(mat, "shadow_method"):
        mat.shadow_method = 'NONE'


def set_surface_visible(surface, visible):
    surface.hide_viewport = not visible
    surface.hide_render = not visible


def is_area_surface(obj):
    return obj is not None and PROP_SURFACE_OWNER in obj


class AreaMeshSync:
    """
    Regenerates an Area's surface from its point set.

    The surface object and its mesh are created on first use and reused after
    that: geometry is cleared and rewritten in place so anything holding the
    mesh keeps a valid reference.
    """

    def __init__(self, owner):
        self.owner = owner

    def get_surface(self):
        for child in self.owner.children:
            if child.type == 'MESH' and PROP_SURFACE_OWNER in child:
                return child
        return None

    def ensure_surface(self):
        surface = self.get_surface()
        if surface is not None:
            return surface

        mesh = bpy.data.meshes.new(f"{self.owner.name}_AreaMesh")
        surface = bpy.data.objects.new(f"{self.owner.name}_Surface", mesh)
        surface[PROP_SURFACE_OWNER] = self.owner.name
        link_to_parent_collections(surface, self.owner)

        # Identity parent inverse: mesh coordinates are in the owner's local space
        surface.parent = self.owner
        surface.matrix_parent_inverse.identity()
        surface.hide_select = True
        if hasattr(surface, "show_in_front"):
            surface.show_in_front = False
        return surface

    def regenerate(self, point_set, style=None):
        """Rewrite the surface mesh from the point set and reconcile its material."""
        style = style or SurfaceStyle()
        surface = self.ensure_surface()
        mesh = surface.data

        if point_set.count < MIN_POINTS:
            mesh.clear_geometry()
            mesh.update()
            set_surface_visible(surface, False)
            point_set.mark_clean()
            return surface

        set_surface_visible(surface, True)
        vertices = point_set.points
        faces = group_triangles(fan_triangulate(vertices))

        mesh.clear_geometry()
        mesh.from_pydata(vertices, [], faces)
        mesh.update()

        self._apply_style(surface, style)
        point_set.mark_clean()
        return surface

    def _apply_style(self, surface, style):
        mat = surface.active_material
        if mat is None or material_shader_identity(mat) != UNLIT_SHADER:
            mat = create_unlit_material(f"{self.owner.name}_AreaMaterial")
            if mat is not None:
                if surface.data.materials:
                    surface.data.materials[0] = mat
                else:
                    surface.data.materials.append(mat)

        if mat is not None:
            set_material_color(mat, style.color)
        disable_shadows(surface, mat)

    def snapshot(self):
        """Current vertices, triangles, normals, bounds and visibility of the surface."""
        surface = self.get_surface()
        if surface is None:
            return MeshSnapshot()

        mesh = surface.data
        count = len(mesh.vertices)
        coords = np.empty(count * 3, dtype=np.float32)
        normals = np.empty(count * 3, dtype=np.float32)
        mesh.vertices.foreach_get("co", coords)
        mesh.vertices.foreach_get("normal", normals)

        vertices = tuple(tuple(v) for v in coords.reshape(-1, 3).tolist())
        bb_min, bb_max = compute_bounds(vertices)
        return MeshSnapshot(
            vertices=vertices,
            triangle_indices=tuple(i for poly in mesh.polygons for i in poly.vertices),
            normals=tuple(tuple(n) for n in normals.reshape(-1, 3).tolist()),
            bounds=(tuple(bb_min), tuple(bb_max)),
            visible=not surface.hide_render,
        )
