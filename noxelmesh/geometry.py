"""Plane, polygon and box helpers used to build panel meshes."""

from __future__ import annotations

import math
from typing import Sequence

from .structs import (
    KINDA_SMALL_NUMBER,
    AdjacencyData,
    CollisionBox,
    PanelData,
    Vector,
)


def intersection_3_planes(
    normal1: Vector,
    point1: Vector,
    normal2: Vector,
    point2: Vector,
    normal3: Vector,
    point3: Vector,
) -> Vector | None:
    """Point common to three planes, or None when they do not meet in a single point."""
    denominator = normal1.dot(normal2.cross(normal3))
    if abs(denominator) < KINDA_SMALL_NUMBER:
        return None
    d1 = normal1.dot(point1)
    d2 = normal2.dot(point2)
    d3 = normal3.dot(point3)
    numerator = (
        normal2.cross(normal3) * d1
        + normal3.cross(normal1) * d2
        + normal1.cross(normal2) * d3
    )
    return numerator / denominator


def intersection_with_adjacency(
    normal: Vector, point: Vector, plane2: AdjacencyData, plane3: AdjacencyData
) -> Vector | None:
    """Intersect a plane with two adjacency planes."""
    return intersection_3_planes(
        normal, point,
        plane2.plane_normal, plane2.plane_position,
        plane3.plane_normal, plane3.plane_position,
    )


def plane_fit(points: Sequence[Vector]) -> tuple[Vector, Vector] | None:
    """Best fitting plane as (centroid, unit normal); None for fewer than three or degenerate points."""
    count = len(points)
    if count < 3:
        return None
    centroid = Vector.ZERO
    for point in points:
        centroid = centroid + point
    centroid = centroid / count

    prescaler = sum((point - centroid).size() for point in points) / count
    if prescaler == 0.0:
        return None

    xx = xy = xz = yy = yz = zz = 0.0
    for point in points:
        r = (point - centroid) / prescaler
        xx += r.x * r.x
        xy += r.x * r.y
        xz += r.x * r.z
        yy += r.y * r.y
        yz += r.y * r.z
        zz += r.z * r.z
    xx /= count
    xy /= count
    xz /= count
    yy /= count
    yz /= count
    zz /= count

    det_x = yy * zz - yz * yz
    det_y = xx * zz - xz * xz
    det_z = xx * yy - xy * xy
    axes = (
        (Vector(det_x, xz * yz - xy * zz, xy * yz - xz * yy), det_x * det_x),
        (Vector(xz * yz - xy * zz, det_y, xy * xz - yz * xx), det_y * det_y),
        (Vector(xy * yz - xz * yy, xy * xz - yz * xx, det_z), det_z * det_z),
    )
    weighted_dir = Vector.ZERO
    for axis_dir, weight in axes:
        if weighted_dir.dot(axis_dir) < 0.0:
            weight = -weight
        weighted_dir = weighted_dir + axis_dir * weight

    if weighted_dir.size() == 0.0:
        return None
    return centroid, weighted_dir.unsafe_normal()


def project_point_on_plane(point: Vector, plane_base: Vector, plane_normal: Vector) -> Vector:
    """Project a point onto the plane through plane_base with unit normal plane_normal."""
    distance = (point - plane_base).dot(plane_normal)
    return point - plane_normal * distance


def project_vector_on_plane(vector: Vector, plane_normal: Vector) -> Vector:
    """Remove from vector its component along the unit normal."""
    return vector - plane_normal * vector.dot(plane_normal)


def rotation_from_axes(forward: Vector, right: Vector, up: Vector) -> tuple[float, float, float]:
    """Rotation (pitch, yaw, roll) in degrees of the frame with the given axes."""
    x_axis = forward.safe_normal()
    y_axis = right.safe_normal()
    z_axis = up.safe_normal()
    pitch = math.atan2(x_axis.z, math.sqrt(x_axis.x ** 2 + x_axis.y ** 2))
    yaw = math.atan2(x_axis.y, x_axis.x)
    rotated_y = Vector(-math.sin(yaw), math.cos(yaw), 0.0)
    roll = math.atan2(z_axis.dot(rotated_y), y_axis.dot(rotated_y))
    return math.degrees(pitch), math.degrees(yaw), math.degrees(roll)


def box_fit(panel: PanelData, nodes: Sequence[Vector]) -> CollisionBox:
    """Smallest-area box aligned with one panel side that encloses the panel's nodes."""
    positions = [nodes[index] for index in panel.nodes]
    count = len(positions)

    axis1 = panel.normal * (panel.thickness_normal + panel.thickness_anti_normal)
    axis1_normalized = panel.normal
    axis1_center = panel.center + panel.normal * (panel.thickness_normal - panel.thickness_anti_normal)

    axis2 = Vector.ZERO
    axis3 = axis1_normalized.cross(axis2)
    min2 = max2 = min3 = max3 = 0.0
    area = math.inf

    for j in range(count):
        side = positions[j] - positions[(j + 1) % count]
        local_axis2 = (side - axis1_normalized * side.dot(axis1_normalized)).safe_normal()
        local_axis3 = axis1_normalized.cross(local_axis2)
        along2 = [p.dot(local_axis2) for p in positions]
        along3 = [p.dot(local_axis3) for p in positions]
        local_area = (max(along2) - min(along2)) * (max(along3) - min(along3))
        if local_area < area:
            area = local_area
            axis2, axis3 = local_axis2, local_axis3
            min2, max2 = min(along2), max(along2)
            min3, max3 = min(along3), max(along3)

    rotation = rotation_from_axes(axis2, axis3, axis1_normalized)
    center = (
        axis1_normalized * axis1_center.dot(axis1_normalized)
        + axis2 * ((min2 + max2) / 2.0)
        + axis3 * ((min3 + max3) / 2.0)
    )
    extents = Vector(max2 - min2, max3 - min3, axis1.size())
    return CollisionBox(center, rotation, extents)


def reorder_nodes(points: Sequence[Vector], centroid: Vector, normal: Vector) -> list[int] | None:
    """Indices of points sorted by angle around centroid in the plane; None when empty.

    Position i of the result holds the index of the point that belongs at position i.
    """
    if not points:
        return None
    x_dir = (project_point_on_plane(points[0], centroid, normal) - centroid).safe_normal()
    y_dir = normal.cross(x_dir).safe_normal()

    def angle(index: int) -> float:
        relative = points[index] - centroid
        return math.atan2(relative.dot(y_dir), relative.dot(x_dir))

    return sorted(range(len(points)), key=angle)


def triangle_area(a: Vector, b: Vector, c: Vector) -> float:
    return (b - a).cross(c - a).size() / 2.0


def triangle_fan_area(center: Vector, nodes: Sequence[Vector]) -> float:
    """Area of the fan of triangles from center to each consecutive pair of nodes."""
    count = len(nodes)
    if count < 2:
        return 0.0
    return sum(triangle_area(center, nodes[i], nodes[(i + 1) % count]) for i in range(count))