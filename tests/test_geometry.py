import math

import pytest

from noxelmesh.geometry import (
    box_fit,
    intersection_3_planes,
    intersection_with_adjacency,
    plane_fit,
    project_point_on_plane,
    project_vector_on_plane,
    reorder_nodes,
    rotation_from_axes,
    triangle_area,
    triangle_fan_area,
)
from noxelmesh.structs import AdjacencyData, PanelData, Vector

X, Y, Z = Vector(1, 0, 0), Vector(0, 1, 0), Vector(0, 0, 1)


def test_three_axis_planes_meet_at_point():
    p = Vector(3, -7, 11)
    result = intersection_3_planes(X, p, Y, p, Z, p)
    assert tuple(result) == pytest.approx((3.0, -7.0, 11.0), abs=1e-5)


def test_parallel_planes_do_not_intersect():
    assert intersection_3_planes(Z, Vector(0, 0, 1), Z, Vector(0, 0, 2), X, Vector.ZERO) is None


def test_intersection_result_lies_on_all_planes():
    n1, n2, n3 = Vector(1, 1, 0).safe_normal(), Vector(0, 1, 1).safe_normal(), Vector(1, 0, 1).safe_normal()
    p1, p2, p3 = Vector(1, 2, 3), Vector(-1, 0, 4), Vector(2, 2, -2)
    result = intersection_3_planes(n1, p1, n2, p2, n3, p3)
    for n, p in ((n1, p1), (n2, p2), (n3, p3)):
        assert (result - p).dot(n) == pytest.approx(0.0, abs=1e-6)


def test_intersection_with_adjacency_matches_plain_form():
    p = Vector(1, 2, 3)
    result = intersection_with_adjacency(X, p, AdjacencyData(Y, p), AdjacencyData(Z, p))
    assert result == intersection_3_planes(X, p, Y, p, Z, p)


def test_plane_fit_needs_three_points():
    assert plane_fit([Vector.ZERO, X]) is None


def test_plane_fit_collinear_points_is_none():
    assert plane_fit([Vector.ZERO, X, X * 2, X * 3]) is None


def test_plane_fit_horizontal_square():
    points = [Vector(1, 2, 5), Vector(3, 2, 5), Vector(3, 4, 5), Vector(1, 4, 5)]
    location, normal = plane_fit(points)
    assert tuple(location) == pytest.approx((2.0, 3.0, 5.0), abs=1e-5)
    assert abs(normal.dot(Z)) == pytest.approx(1.0)


def test_reorder_empty_is_none():
    assert reorder_nodes([], Vector.ZERO, Z) is None


def test_reorder_gives_convex_permutation():
    square = [Vector(1, 1, 0), Vector(-1, -1, 0), Vector(1, -1, 0), Vector(-1, 1, 0)]
    order = reorder_nodes(square, Vector.ZERO, Z)
    assert sorted(order) == [0, 1, 2, 3]
    ordered = [square[i] for i in order]
    signs = {
        math.copysign(1.0, (ordered[(i + 1) % 4] - ordered[i]).cross(ordered[(i + 2) % 4] - ordered[(i + 1) % 4]).dot(Z))
        for i in range(4)
    }
    assert len(signs) == 1


def test_triangle_area_of_degenerate_is_zero():
    assert triangle_area(Vector.ZERO, X, X * 2) == 0.0


def test_triangle_area_is_translation_and_order_invariant():
    a, b, c = Vector(0, 0, 0), Vector(2, 0, 0), Vector(0, 3, 1)
    shift = Vector(5, -3, 2)
    assert triangle_area(a, b, c) == pytest.approx(triangle_area(c + shift, a + shift, b + shift))


def test_fan_area_with_fewer_than_two_nodes_is_zero():
    assert triangle_fan_area(Vector.ZERO, [X]) == 0.0


def test_fan_area_of_square_matches_split():
    corners = [Vector(0, 0, 0), Vector(4, 0, 0), Vector(4, 4, 0), Vector(0, 4, 0)]
    center = Vector(2, 2, 0)
    split = triangle_area(corners[0], corners[1], corners[2]) + triangle_area(corners[0], corners[2], corners[3])
    assert triangle_fan_area(center, corners) == pytest.approx(split)


def test_project_point_lies_on_plane_and_is_idempotent():
    base, normal = Vector(1, 1, 1), Vector(1, 2, 2).safe_normal()
    projected = project_point_on_plane(Vector(5, -3, 7), base, normal)
    assert (projected - base).dot(normal) == pytest.approx(0.0, abs=1e-9)
    again = project_point_on_plane(projected, base, normal)
    assert tuple(again) == pytest.approx(tuple(projected), abs=1e-9)


def test_project_vector_is_perpendicular_to_normal():
    normal = Vector(0, 3, 4).safe_normal()
    assert project_vector_on_plane(Vector(2, 5, -1), normal).dot(normal) == pytest.approx(0.0, abs=1e-9)


def test_rotation_from_identity_axes():
    assert tuple(rotation_from_axes(X, Y, Z)) == pytest.approx((0.0, 0.0, 0.0), abs=1e-5)


def test_rotation_from_axes_yaw_quarter_turn():
    assert tuple(rotation_from_axes(Y, -X, Z)) == pytest.approx((0.0, 90.0, 0.0), abs=1e-5)


def test_box_fit_around_square_panel():
    nodes = [Vector(0, 0, 0), Vector(10, 0, 0), Vector(10, 10, 0), Vector(0, 10, 0)]
    panel = PanelData(nodes=[0, 1, 2, 3], thickness_normal=1.0, thickness_anti_normal=1.0,
                      normal=Z, center=Vector(5, 5, 0))
    box = box_fit(panel, nodes)
    assert sorted((box.extents.x, box.extents.y)) == pytest.approx([10.0, 10.0])
    assert box.extents.z == pytest.approx(panel.thickness_normal + panel.thickness_anti_normal)
    assert tuple(box.center) == pytest.approx((5.0, 5.0, 0.0), abs=1e-5)