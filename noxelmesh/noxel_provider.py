"""Mesh provider for thick polygonal panels spanning shared nodes."""

from __future__ import annotations

import math
import threading
from typing import Callable, Sequence

from .geometry import (
    intersection_with_adjacency,
    project_point_on_plane,
    project_vector_on_plane,
)
from .structs import (
    AdjacencyData,
    BakedIntersectionData,
    Bounds,
    CollisionConvex,
    CollisionMesh,
    CollisionSettings,
    Color,
    PanelData,
    RenderableMesh,
    Vector,
    Vector2,
    logger,
)

AddVertex = Callable[[Vector, Vector2], object]
AddTriangle = Callable[[int, int, int], object]

#: Screen size at which each level of detail is used.
LOD_SCREEN_SIZES = (1.0, 0.4, 0.1)
#: Level of detail used to build the complex collision mesh.
COLLISION_MESH_LOD = 2

_UV_EPSILON_UP = 0.1
_UV_EPSILON_DOWN = 0.1


def indices_per_side(lod_index: int) -> tuple[int, int]:
    """Number of (vertices, triangles) generated for each panel side at a level of detail."""
    return {0: (12, 6), 1: (10, 4), 2: (4, 2)}.get(lod_index, (0, 0))


def _side_adjacency(
    nodes: Sequence[Vector], panels: Sequence[PanelData], panel: PanelData, side: int
) -> list[AdjacencyData]:
    """Top and bottom cutting planes for one side of a panel."""
    count = len(panel.nodes)
    node = panel.nodes[side]
    next_node = panel.nodes[(side + 1) % count]
    node_pos = nodes[node]
    next_pos = nodes[next_node]
    side_direction = next_pos - node_pos
    side_normal = (node_pos - panel.center).cross(next_pos - panel.center).safe_normal()
    z_dir = side_direction.safe_normal()
    x_dir = (project_point_on_plane(panel.center, node_pos, z_dir) - node_pos).safe_normal()
    y_dir = z_dir.cross(x_dir)
    if y_dir.dot(panel.normal) < 0.0:
        y_dir = -y_dir

    candidates: list[tuple[float, int]] = []
    for other_index in panel.adjacent_panels:
        other = panels[other_index]
        if node not in other.nodes:
            continue
        other_count = len(other.nodes)
        position = other.nodes.index(node)
        same_order = other.nodes[(position + 1) % other_count] == next_node
        opposite_order = other.nodes[(position - 1) % other_count] == next_node
        if same_order or opposite_order:
            relative = other.center - node_pos
            angle = math.atan2(relative.dot(y_dir), -relative.dot(x_dir))
            candidates.append((angle, other_index))

    if not candidates:
        plane = AdjacencyData(x_dir, node_pos)
        return [plane, plane]

    candidates.sort(key=lambda pair: pair[0])
    # Top joins the largest angle, bottom the smallest.
    chosen = (candidates[-1][1], candidates[0][1])
    planes = []
    for other_index in chosen:
        other = panels[other_index]
        bisector = (
            project_vector_on_plane(panel.center - node_pos, z_dir).safe_normal()
            + project_vector_on_plane(other.center - node_pos, z_dir).safe_normal()
        )
        if bisector.is_nearly_zero():
            bisector = side_normal
        planes.append(AdjacencyData(bisector.cross(side_direction).safe_normal(), node_pos))
    return planes


def _panel_intersections(
    nodes: Sequence[Vector], panels: Sequence[PanelData], panel: PanelData
) -> BakedIntersectionData:
    count = len(panel.nodes)
    adjacency: list[AdjacencyData] = []
    for side in range(count):
        adjacency.extend(_side_adjacency(nodes, panels, panel, side))

    normal = panel.normal
    corners: list[Vector] = []
    for side in range(count):
        following = (side + 1) % count
        next_pos = nodes[panel.nodes[following]]
        top_point = next_pos + normal * panel.thickness_normal
        bottom_point = next_pos - normal * panel.thickness_anti_normal
        top = intersection_with_adjacency(
            normal, top_point, adjacency[2 * side], adjacency[2 * following]
        )
        bottom = intersection_with_adjacency(
            normal, bottom_point, adjacency[2 * side + 1], adjacency[2 * following + 1]
        )
        corners.append(top if top is not None else top_point)
        corners.append(bottom if bottom is not None else bottom_point)
    return BakedIntersectionData(corners)


def compute_intersections(
    nodes: Sequence[Vector], panels: Sequence[PanelData]
) -> list[BakedIntersectionData]:
    """Corner positions of every panel, mitred against the panels sharing each side.

    For a panel, entries 2*i and 2*i+1 are the top and bottom corners at node i+1.
    """
    return [_panel_intersections(nodes, panels, panel) for panel in panels]


def build_panel_mesh(
    lod_index: int,
    panel_nodes: Sequence[Vector],
    panel: PanelData,
    intersections: BakedIntersectionData | None,
    add_vertex: AddVertex,
    add_triangle: AddTriangle,
) -> None:
    """Emit the vertices and triangles of one panel through the given callbacks.

    panel_nodes[i] is the position of panel.nodes[i]; triangle indices are relative
    to the first vertex emitted for this panel.
    """
    if lod_index not in (0, 1, 2):
        raise ValueError(f"unsupported level of detail: {lod_index}")
    if lod_index <= 1 and intersections is None:
        raise ValueError("levels of detail 0 and 1 need intersection data")

    count = len(panel.nodes)
    center_top = panel.center + panel.normal * panel.thickness_normal
    center_bottom = panel.center - panel.normal * panel.thickness_anti_normal
    verts_per_side, _ = indices_per_side(lod_index)
    up, down = _UV_EPSILON_UP, _UV_EPSILON_DOWN

    for side in range(count):
        node_idx = (side + 1) % count
        next_idx = (node_idx + 1) % count
        node_pos = panel_nodes[node_idx]
        next_pos = panel_nodes[next_idx]
        base = verts_per_side * side

        def triangle(a: int, b: int, c: int) -> None:
            add_triangle(a + base, b + base, c + base)

        add_vertex(center_top, Vector2(0.0, 0.0))
        add_vertex(center_bottom, Vector2(1.0, 1.0))
        if lod_index in (0, 1):
            corners = intersections.intersections
            # Once for the faces, once for the edge.
            for _ in range(2):
                add_vertex(corners[2 * side], Vector2(1 - up, 0.0))
                add_vertex(corners[2 * node_idx], Vector2(0.0, 1 - up))
                add_vertex(corners[2 * side + 1], Vector2(1.0, down))
                add_vertex(corners[2 * node_idx + 1], Vector2(down, 1.0))
        if lod_index in (0, 2):
            add_vertex(node_pos, Vector2(1 - up / 2.0, down / 2.0))
            add_vertex(next_pos, Vector2(up / 2.0, 1 - down / 2.0))

        if lod_index == 0:
            triangle(0, 3, 2)
            triangle(1, 4, 5)
            triangle(6, 7, 11)
            triangle(6, 11, 10)
            triangle(10, 11, 9)
            triangle(10, 9, 8)
        elif lod_index == 1:
            triangle(0, 3, 2)
            triangle(1, 4, 5)
            triangle(6, 7, 9)
            triangle(6, 9, 8)
        else:
            triangle(0, 3, 2)
            triangle(1, 2, 3)


def _compute_normals_tangents(mesh: RenderableMesh) -> None:
    """Fill per-vertex normals and tangents from the triangles that use each vertex."""
    count = len(mesh.positions)
    normals = [Vector.ZERO] * count
    tangents = [Vector.ZERO] * count
    for start in range(0, len(mesh.triangles), 3):
        a, b, c = mesh.triangles[start:start + 3]
        p0, p1, p2 = mesh.positions[a], mesh.positions[b], mesh.positions[c]
        face_normal = (p2 - p0).cross(p1 - p0)
        edge1, edge2 = p1 - p0, p2 - p0
        uv0, uv1, uv2 = mesh.tex_coords[a], mesh.tex_coords[b], mesh.tex_coords[c]
        du1, dv1 = uv1.u - uv0.u, uv1.v - uv0.v
        du2, dv2 = uv2.u - uv0.u, uv2.v - uv0.v
        determinant = du1 * dv2 - du2 * dv1
        if abs(determinant) < 1e-12:
            face_tangent = edge1
        else:
            face_tangent = (edge1 * dv2 - edge2 * dv1) / determinant
        for index in (a, b, c):
            normals[index] = normals[index] + face_normal
            tangents[index] = tangents[index] + face_tangent
    for index in range(count):
        normal = normals[index].safe_normal()
        tangent = tangents[index]
        tangent = (tangent - normal * tangent.dot(normal)).safe_normal()
        mesh.normals[index] = normal
        mesh.tangents[index] = tangent


class NoxelMeshProvider:
    """Builds render and collision geometry for a set of panels over shared nodes."""

    def __init__(
        self,
        nodes: Sequence[Vector] | None = None,
        panels: Sequence[PanelData] | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._cache_lock = threading.RLock()
        self._nodes: list[Vector] = list(nodes or [])
        self._panels: list[PanelData] = list(panels or [])
        self._cache_dirty = True
        self._cached: list[BakedIntersectionData] = []
        self._collision_map: list[int] = []
        self._pending_collision_map: list[int] = []

    @property
    def nodes(self) -> list[Vector]:
        with self._lock:
            return list(self._nodes)

    @nodes.setter
    def nodes(self, value: Sequence[Vector]) -> None:
        self._mark_cache_dirty()
        with self._lock:
            self._nodes = list(value)

    @property
    def panels(self) -> list[PanelData]:
        with self._lock:
            return list(self._panels)

    @panels.setter
    def panels(self, value: Sequence[PanelData]) -> None:
        self._mark_cache_dirty()
        with self._lock:
            self._panels = list(value)

    def _snapshot(self) -> tuple[list[Vector], list[PanelData]]:
        with self._lock:
            return list(self._nodes), list(self._panels)

    def _mark_cache_dirty(self) -> None:
        with self._cache_lock:
            self._cache_dirty = True

    def intersection_cache(self) -> list[BakedIntersectionData]:
        """Panel corner data, rebuilt first if nodes or panels changed."""
        with self._cache_lock:
            if self._cache_dirty:
                nodes, panels = self._snapshot()
                self._cached = compute_intersections(nodes, panels)
                self._cache_dirty = False
            return list(self._cached)

    def panel_index_hit(self, triangle_index: int) -> int | None:
        """Panel index owning a collision triangle, or None when out of range."""
        if 0 <= triangle_index < len(self._collision_map):
            return self._collision_map[triangle_index]
        return None

    def bounds(self) -> Bounds:
        nodes, panels = self._snapshot()
        max_thickness = 0.0
        for panel in panels:
            max_thickness = max(max_thickness, panel.thickness_normal, panel.thickness_anti_normal)
        box = Bounds.from_points(nodes)
        return Bounds(
            box.origin,
            box.box_extent + Vector.ONE * max_thickness,
            box.sphere_radius + max_thickness,
        )

    def section_mesh(self, lod_index: int) -> RenderableMesh | None:
        """Render mesh at a level of detail (0 to 2), or None when there are no panels."""
        if lod_index not in (0, 1, 2):
            raise ValueError(f"unsupported level of detail: {lod_index}")
        nodes, panels = self._snapshot()
        if not panels:
            return None
        intersections: list[BakedIntersectionData] | None = None
        if lod_index <= 1:
            intersections = self.intersection_cache()
            if len(intersections) != len(panels):
                logger.info("Getting cached data failed")
                return None

        mesh = RenderableMesh()
        for panel_number, panel in enumerate(panels):
            base = len(mesh.positions)
            build_panel_mesh(
                lod_index,
                [nodes[index] for index in panel.nodes],
                panel,
                intersections[panel_number] if intersections is not None else None,
                lambda position, uv: mesh.add_vertex(position, uv, Color.WHITE),
                lambda a, b, c, base=base: mesh.add_triangle(a + base, b + base, c + base),
            )
        _compute_normals_tangents(mesh)
        return mesh

    def collision_settings(self) -> CollisionSettings:
        """One convex hull per panel, from its two face centres and its nodes."""
        nodes, panels = self._snapshot()
        settings = CollisionSettings(use_async_cooking=True, use_complex_as_simple=False)
        for panel in panels:
            points = [
                panel.center + panel.normal * panel.thickness_normal,
                panel.center - panel.normal * panel.thickness_anti_normal,
            ]
            points.extend(nodes[index] for index in panel.nodes)
            settings.convex_elements.append(CollisionConvex(points))
        return settings

    def has_collision_mesh(self) -> bool:
        with self._lock:
            return bool(self._panels)

    def collision_mesh(self) -> CollisionMesh | None:
        """Low-detail collision mesh; its triangle-to-panel map waits for collision_update_completed."""
        nodes, panels = self._snapshot()
        if not panels:
            return None
        _, triangles_per_side = indices_per_side(COLLISION_MESH_LOD)
        mesh = CollisionMesh()
        collision_map: list[int] = []
        for panel in panels:
            collision_map.extend([panel.panel_index] * (len(panel.nodes) * triangles_per_side))
            base = len(mesh.vertices)
            build_panel_mesh(
                COLLISION_MESH_LOD,
                [nodes[index] for index in panel.nodes],
                panel,
                None,
                mesh.add_vertex,
                lambda a, b, c, base=base: mesh.add_triangle(a + base, b + base, c + base),
            )
        self._pending_collision_map = collision_map
        return mesh

    def collision_update_completed(self) -> None:
        """Make the map of the last built collision mesh the active one."""
        self._collision_map = list(self._pending_collision_map)