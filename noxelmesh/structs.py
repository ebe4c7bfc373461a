"""Core value types shared by the mesh providers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Iterator

logger = logging.getLogger("noxelmesh")

SMALL_NUMBER = 1e-8
KINDA_SMALL_NUMBER = 1e-4


@dataclass(frozen=True)
class Vector:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    ZERO: ClassVar["Vector"]
    ONE: ClassVar["Vector"]
    UP: ClassVar["Vector"]

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, other: "Vector | float") -> "Vector":
        if isinstance(other, Vector):
            return Vector(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vector(self.x * other, self.y * other, self.z * other)

    __rmul__ = __mul__

    def __truediv__(self, other: "Vector | float") -> "Vector":
        if isinstance(other, Vector):
            return Vector(self.x / other.x, self.y / other.y, self.z / other.z)
        return Vector(self.x / other, self.y / other, self.z / other)

    def dot(self, other: "Vector") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector") -> "Vector":
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def size_squared(self) -> float:
        return self.dot(self)

    def size(self) -> float:
        return math.sqrt(self.size_squared())

    def safe_normal(self) -> "Vector":
        """Unit vector in this direction, or zero when too short to normalise."""
        square_sum = self.size_squared()
        if square_sum == 1.0:
            return self
        if square_sum < SMALL_NUMBER:
            return Vector.ZERO
        return self * (1.0 / math.sqrt(square_sum))

    def unsafe_normal(self) -> "Vector":
        """Unit vector in this direction; raises ZeroDivisionError for a zero vector."""
        length = self.size()
        if length == 0.0:
            raise ZeroDivisionError("cannot normalise a zero-length vector")
        return self / length

    def is_nearly_zero(self, tolerance: float = KINDA_SMALL_NUMBER) -> bool:
        return abs(self.x) <= tolerance and abs(self.y) <= tolerance and abs(self.z) <= tolerance


Vector.ZERO = Vector(0.0, 0.0, 0.0)
Vector.ONE = Vector(1.0, 1.0, 1.0)
Vector.UP = Vector(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Vector2:
    """A texture coordinate."""

    u: float = 0.0
    v: float = 0.0


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    WHITE: ClassVar["Color"]
    BLACK: ClassVar["Color"]

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b, self.a):
            if not 0 <= channel <= 255:
                raise ValueError(f"colour channel out of range: {channel}")

    def to_hex(self) -> str:
        return f"{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse RRGGBB or RRGGBBAA, with or without a leading '#'."""
        text = text.lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError(f"invalid hex colour: {text!r}")
        channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        return cls(*channels)


Color.WHITE = Color(255, 255, 255, 255)
Color.BLACK = Color(0, 0, 0, 255)


@dataclass(frozen=True)
class Bounds:
    """An axis-aligned box together with a bounding sphere sharing its origin."""

    origin: Vector = Vector.ZERO
    box_extent: Vector = Vector.ZERO
    sphere_radius: float = 0.0

    @classmethod
    def from_points(cls, points: Iterable[Vector]) -> "Bounds":
        pts = list(points)
        if not pts:
            return cls()
        minimum = Vector(min(p.x for p in pts), min(p.y for p in pts), min(p.z for p in pts))
        maximum = Vector(max(p.x for p in pts), max(p.y for p in pts), max(p.z for p in pts))
        origin = (minimum + maximum) * 0.5
        extent = (maximum - minimum) * 0.5
        radius = max((p - origin).size() for p in pts)
        return cls(origin, extent, radius)

    @classmethod
    def from_box(cls, minimum: Vector, maximum: Vector) -> "Bounds":
        origin = (minimum + maximum) * 0.5
        extent = (maximum - minimum) * 0.5
        return cls(origin, extent, extent.size())

    def box_min(self) -> Vector:
        return self.origin - self.box_extent

    def box_max(self) -> Vector:
        return self.origin + self.box_extent


@dataclass
class NodeData:
    """A node to render, placed relative to its owner."""

    relative_location: Vector = Vector.ZERO
    color: Color = Color.BLACK


@dataclass(frozen=True)
class AdjacencyData:
    """A plane given by its normal and a point on it."""

    plane_normal: Vector = Vector.UP
    plane_position: Vector = Vector.ZERO


@dataclass
class BakedIntersectionData:
    """Precomputed corner positions of one panel, top then bottom for each node."""

    intersections: list[Vector] = field(default_factory=list)


@dataclass
class PanelData:
    """A thick polygonal panel spanning some nodes."""

    panel_index: int = 0
    nodes: list[int] = field(default_factory=list)
    thickness_normal: float = 1.0
    thickness_anti_normal: float = 1.0
    area: float = 1.0
    normal: Vector = Vector.UP
    center: Vector = Vector.ZERO
    adjacent_panels: list[int] = field(default_factory=list)


@dataclass
class RenderableMesh:
    """Vertex and index buffers of a renderable section."""

    positions: list[Vector] = field(default_factory=list)
    normals: list[Vector] = field(default_factory=list)
    tangents: list[Vector] = field(default_factory=list)
    colors: list[Color] = field(default_factory=list)
    tex_coords: list[Vector2] = field(default_factory=list)
    triangles: list[int] = field(default_factory=list)

    def add_vertex(
        self,
        position: Vector,
        tex_coord: Vector2 | None = None,
        color: Color | None = None,
        normal: Vector | None = None,
        tangent: Vector | None = None,
    ) -> int:
        """Append a vertex and return its index."""
        self.positions.append(position)
        self.tex_coords.append(tex_coord if tex_coord is not None else Vector2())
        self.colors.append(color if color is not None else Color.WHITE)
        self.normals.append(normal if normal is not None else Vector.ZERO)
        self.tangents.append(tangent if tangent is not None else Vector.ZERO)
        return len(self.positions) - 1

    def add_triangle(self, a: int, b: int, c: int) -> None:
        self.triangles.extend((a, b, c))


@dataclass
class CollisionMesh:
    """Vertices and triangles used for complex collision."""

    vertices: list[Vector] = field(default_factory=list)
    tex_coords: list[Vector2] = field(default_factory=list)
    triangles: list[tuple[int, int, int]] = field(default_factory=list)

    def add_vertex(self, position: Vector, tex_coord: Vector2 | None = None) -> int:
        """Append a vertex and return its index."""
        self.vertices.append(position)
        self.tex_coords.append(tex_coord if tex_coord is not None else Vector2())
        return len(self.vertices) - 1

    def add_triangle(self, a: int, b: int, c: int) -> None:
        self.triangles.append((a, b, c))


@dataclass(frozen=True)
class CollisionBox:
    """An oriented box; rotation is (pitch, yaw, roll) in degrees, extents are full sizes."""

    center: Vector = Vector.ZERO
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    extents: Vector = Vector.ZERO


@dataclass(frozen=True)
class CollisionSphere:
    center: Vector = Vector.ZERO
    radius: float = 0.0


@dataclass
class CollisionConvex:
    points: list[Vector] = field(default_factory=list)


@dataclass
class CollisionSettings:
    """Simple collision shapes and cooking flags."""

    use_async_cooking: bool = False
    use_complex_as_simple: bool = True
    boxes: list[CollisionBox] = field(default_factory=list)
    spheres: list[CollisionSphere] = field(default_factory=list)
    convex_elements: list[CollisionConvex] = field(default_factory=list)