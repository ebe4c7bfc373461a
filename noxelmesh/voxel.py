"""Mesh provider for cubes laid out on an integer grid."""

from __future__ import annotations

import threading
from typing import Iterable

from .structs import (
    Bounds,
    CollisionBox,
    CollisionMesh,
    CollisionSettings,
    Color,
    RenderableMesh,
    Vector,
    Vector2,
)

GridPoint = tuple[int, int, int]

#: Half the side length of a cube when none is given.
DEFAULT_CUBE_RADIUS = 10.0

# Corners of a unit cube, scaled by the radius when meshing.
_CORNERS = (
    (-1, 1, 1),
    (1, 1, 1),
    (1, -1, 1),
    (-1, -1, 1),
    (-1, 1, -1),
    (1, 1, -1),
    (1, -1, -1),
    (-1, -1, -1),
)

# For each face: neighbour offset, normal, tangent, and the four corners in order.
_FACES = (
    ((0, 0, 1), Vector(0.0, 0.0, 1.0), Vector(0.0, -1.0, 0.0), (0, 1, 2, 3)),
    ((-1, 0, 0), Vector(-1.0, 0.0, 0.0), Vector(0.0, -1.0, 0.0), (4, 0, 3, 7)),
    ((0, 1, 0), Vector(0.0, 1.0, 0.0), Vector(-1.0, 0.0, 0.0), (5, 1, 0, 4)),
    ((1, 0, 0), Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0), (6, 2, 1, 5)),
    ((0, -1, 0), Vector(0.0, -1.0, 0.0), Vector(1.0, 0.0, 0.0), (7, 3, 2, 6)),
    ((0, 0, -1), Vector(0.0, 0.0, -1.0), Vector(0.0, 1.0, 0.0), (7, 6, 5, 4)),
)

_FACE_UVS = (Vector2(0.0, 0.0), Vector2(0.0, 1.0), Vector2(1.0, 1.0), Vector2(1.0, 0.0))


def _grid_point(cube: Iterable[int]) -> GridPoint:
    x, y, z = (int(value) for value in cube)
    return x, y, z


class VoxelMeshProvider:
    """Builds a render mesh of the visible faces of grid cubes, and box collision."""

    def __init__(
        self,
        cubes: Iterable[Iterable[int]] | None = None,
        cube_radius: float = DEFAULT_CUBE_RADIUS,
    ) -> None:
        self._lock = threading.RLock()
        self._cubes: list[GridPoint] = [_grid_point(cube) for cube in cubes or []]
        self._cube_radius = float(cube_radius)

    @property
    def cubes(self) -> list[GridPoint]:
        with self._lock:
            return list(self._cubes)

    @cubes.setter
    def cubes(self, value: Iterable[Iterable[int]]) -> None:
        with self._lock:
            self._cubes = [_grid_point(cube) for cube in value]

    @property
    def cube_radius(self) -> float:
        with self._lock:
            return self._cube_radius

    @cube_radius.setter
    def cube_radius(self, value: float) -> None:
        with self._lock:
            self._cube_radius = float(value)

    def _snapshot(self) -> tuple[list[GridPoint], float]:
        with self._lock:
            return list(self._cubes), self._cube_radius

    def bounds(self) -> Bounds:
        """Box enclosing every cube; an empty grid gives one cube around the origin."""
        cubes, radius = self._snapshot()
        if cubes:
            low = Vector(*(float(min(c[i] for c in cubes)) for i in range(3)))
            high = Vector(*(float(max(c[i] for c in cubes)) for i in range(3)))
        else:
            low = high = Vector.ZERO
        return Bounds.from_box(
            low * (2 * radius) - Vector.ONE * radius,
            high * (2 * radius) + Vector.ONE * radius,
        )

    def section_mesh(self, lod_index: int = 0) -> RenderableMesh | None:
        """Faces not shared with a neighbouring cube, or None when there are no cubes."""
        if lod_index != 0:
            raise ValueError(f"unsupported level of detail: {lod_index}")
        cubes, radius = self._snapshot()
        if not cubes:
            return None
        occupied = set(cubes)
        corners = [Vector(x, y, z) * radius for x, y, z in _CORNERS]
        mesh = RenderableMesh()
        for cube in cubes:
            offset = Vector(*cube) * (radius * 2)
            for step, normal, tangent, corner_ids in _FACES:
                neighbour = (cube[0] + step[0], cube[1] + step[1], cube[2] + step[2])
                if neighbour in occupied:
                    continue
                for corner_id, uv in zip(corner_ids, _FACE_UVS):
                    mesh.add_vertex(corners[corner_id] + offset, uv, Color.WHITE, normal, tangent)
                end = len(mesh.positions)
                mesh.add_triangle(end - 4, end - 3, end - 1)
                mesh.add_triangle(end - 3, end - 2, end - 1)
        return mesh

    def collision_settings(self) -> CollisionSettings:
        """One axis-aligned box per cube."""
        cubes, radius = self._snapshot()
        settings = CollisionSettings(use_async_cooking=False, use_complex_as_simple=False)
        for cube in cubes:
            settings.boxes.append(
                CollisionBox(
                    center=Vector(*cube) * (2 * radius),
                    rotation=(0.0, 0.0, 0.0),
                    extents=Vector.ONE * (radius * 2),
                )
            )
        return settings

    def has_collision_mesh(self) -> bool:
        """Cubes collide through boxes only."""
        return False

    def collision_mesh(self) -> CollisionMesh | None:
        """Always None: no complex collision mesh is built for cubes."""
        return None