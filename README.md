# noxelmesh

noxelmesh builds triangle meshes and collision shapes for two kinds of object:

- **Noxel panels**: thick polygonal plates laid over a set of shared nodes. Where two plates share a side, their edges are mitred against each other. Render meshes come in three levels of detail, 0 to 2.
- **Voxels**: cubes on an integer grid. A face shared by two neighbouring cubes is left out of the mesh.

It also provides plain geometry helpers, a set of editor colour records and two Unix timestamp helpers. The package is pure Python and has no dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `noxelmesh.structs` holds the basic types.
  - Values: `Vector` (with `dot`, `cross`, `size`, `size_squared`, `safe_normal`, `unsafe_normal`, `is_nearly_zero`), `Vector2`, `Color` (with `to_hex` and `from_hex`) and `Bounds` (with `from_points`, `from_box`, `box_min`, `box_max`).
  - Panel records: `NodeData`, `PanelData`, `AdjacencyData` and `BakedIntersectionData`.
  - Mesh containers: `RenderableMesh` and `CollisionMesh`, each with `add_vertex` and `add_triangle`.
  - Collision shapes: `CollisionBox`, `CollisionSphere`, `CollisionConvex` and `CollisionSettings`.
- `noxelmesh.geometry` holds the geometry helpers.
  - Plane intersection: `intersection_3_planes` and `intersection_with_adjacency`. Both return `None` when the planes do not meet in a single point.
  - Fitting: `plane_fit` returns `(centroid, normal)`, or `None` when there are too few points. `box_fit` fits a `CollisionBox` around a panel.
  - Ordering and areas: `reorder_nodes`, `triangle_area` and `triangle_fan_area`.
  - Projection and rotation: `project_point_on_plane`, `project_vector_on_plane` and `rotation_from_axes`. `rotation_from_axes` returns pitch, yaw and roll in degrees.
- `noxelmesh.noxel_provider` provides `NoxelMeshProvider` and the functions `indices_per_side`, `compute_intersections` and `build_panel_mesh`.
  - The provider's render meshes come from `section_mesh(lod)`. `intersection_cache()` gives the mitred corners.
  - `collision_settings()` gives one convex hull per panel. `collision_mesh()` gives a low-detail collision mesh.
  - `panel_index_hit(triangle)` maps a collision triangle back to its panel. The map takes effect once `collision_update_completed()` has been called.
- `noxelmesh.voxel` provides `VoxelMeshProvider`.
  - `section_mesh` returns the visible cube faces.
  - `bounds` returns the bounds of the cubes.
  - `collision_settings` returns one box per cube.
- `noxelmesh.library` provides the following.
  - `NoxelColor`, the editor colour roles.
  - `SavedColor` and `SavedColorArray`, named RRGGBBAA hex colours with dictionary conversion.
  - `utc_from_unix_timestamp` and `unix_timestamp`.

## Example

```python
from noxelmesh.structs import Vector, PanelData
from noxelmesh.noxel_provider import NoxelMeshProvider

nodes = [Vector(0, 0, 0), Vector(100, 0, 0), Vector(0, 100, 0)]
panel = PanelData(
    panel_index=0,
    nodes=[0, 1, 2],
    center=Vector(100 / 3, 100 / 3, 0),
    normal=Vector(0, 0, 1),
)
provider = NoxelMeshProvider(nodes, [panel])
mesh = provider.section_mesh(0)
print(len(mesh.positions), len(mesh.triangles) // 3)  # 36 vertices, 18 triangles
```

A voxel example:

```python
from noxelmesh.voxel import VoxelMeshProvider

provider = VoxelMeshProvider([(0, 0, 0), (1, 0, 0)], 10.0)
mesh = provider.section_mesh(0)
print(len(mesh.triangles) // 3)  # 20: the face shared by the two cubes is left out
```

## What it does not do

noxelmesh only builds geometry in memory. It does not draw anything, and it has no command-line tool.

It cannot save or load crafts or panel layouts. The only records that convert to and from dictionaries are the colour records in `noxelmesh.library`.

It does not build meshes that place a marker at each node.