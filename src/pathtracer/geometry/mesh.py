"""Triangle mesh primitive and a minimal OBJ reader.

A TriangleMesh stores a shared vertex list and a flat list of index triples.
Each triangle is intersected by:

1. Computing its plane normal from the fixed vertex order (b - a) x (c - a),
   so counter-clockwise winding faces the viewer.
2. Intersecting the ray with that plane.
3. Classifying the plane hit as inside with three same-side tests: the cross
   product of each edge with the vector to the point must agree in sign with
   the triangle normal.

The mesh reports the minimum-t hit across all of its triangles. Zero-area
triangles have a zero normal and never intersect.

Example:
    >>> from pathtracer.geometry.mesh import TriangleMesh
    >>> from pathtracer.materials.material import Material
    >>> quad = TriangleMesh(
    ...     vertices=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
    ...     indices=[0, 1, 2, 0, 2, 3],
    ...     material=Material(),
    ... )
    >>> quad.triangle_count
    2
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import numpy as np
import numpy.typing as npt

from pathtracer.core.ray import EPSILON, Ray, Vec3, cross, dot, normalize, ray_at
from pathtracer.geometry.sphere import Hit

if TYPE_CHECKING:
    from pathtracer.materials.material import Material

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Triangle:
    """Per-triangle data precomputed at mesh construction."""

    a: Vec3
    b: Vec3
    c: Vec3
    normal: Vec3


@dataclass(frozen=True, eq=False)
class TriangleMesh:
    """A mesh of triangles sharing one vertex list and one material.

    Attributes:
        vertices: Vertex positions, shape (N, 3).
        indices: Flat sequence of vertex indices; every three form a triangle.
        material: The surface material.

    Raises:
        ValueError: If the index count is not a multiple of three or an index
            is out of range.
    """

    vertices: npt.NDArray[np.float64]
    indices: tuple[int, ...]
    material: Material
    _triangles: tuple[_Triangle, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float64).reshape(-1, 3)
        indices = tuple(int(i) for i in self.indices)
        if len(indices) % 3 != 0:
            raise ValueError(
                f"Index count {len(indices)} is not a multiple of 3"
            )
        for i in indices:
            if not 0 <= i < len(vertices):
                raise ValueError(
                    f"Vertex index {i} out of range for {len(vertices)} vertices"
                )
        vertices.setflags(write=False)

        triangles = []
        for k in range(0, len(indices), 3):
            a, b, c = (vertices[i] for i in indices[k : k + 3])
            triangles.append(_Triangle(a, b, c, normalize(cross(b - a, c - a))))

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "_triangles", tuple(triangles))

    @property
    def triangle_count(self) -> int:
        """Number of triangles in the mesh."""
        return len(self.indices) // 3

    def triangle(self, which: int) -> tuple[Vec3, Vec3, Vec3]:
        """Get the three vertices of triangle number which."""
        tri = self._triangles[which]
        return tri.a, tri.b, tri.c

    def test(self, ray: Ray) -> Hit | None:
        """Return the nearest triangle intersection with ray, or None."""
        return hit_mesh(self, ray)


def _hit_triangle(tri: _Triangle, ray: Ray) -> tuple[float, Vec3] | None:
    """Intersect one triangle; return (t, point) or None."""
    denom = dot(ray.direction, tri.normal)
    if denom == 0.0:
        # parallel to the triangle plane, or a degenerate triangle
        return None

    t = dot(tri.a - ray.origin, tri.normal) / denom
    if t <= EPSILON:
        return None

    p = ray_at(ray, t)
    # Same-side tests: each edge cross (p - edge start) must point along the normal
    if dot(cross(tri.b - tri.a, p - tri.a), tri.normal) < 0.0:
        return None
    if dot(cross(tri.c - tri.b, p - tri.b), tri.normal) < 0.0:
        return None
    if dot(cross(tri.a - tri.c, p - tri.c), tri.normal) < 0.0:
        return None
    return t, p


def hit_mesh(mesh: TriangleMesh, ray: Ray) -> Hit | None:
    """Test a ray against every triangle of a mesh.

    Args:
        mesh: The mesh to test against.
        ray: The ray (unit-length direction).

    Returns:
        The hit with the smallest t across all triangles, carrying that
        triangle's winding normal, or None if no triangle is hit.
    """
    closest_t = math.inf
    closest: tuple[Vec3, Vec3] | None = None

    for tri in mesh._triangles:
        result = _hit_triangle(tri, ray)
        if result is not None and result[0] < closest_t:
            closest_t = result[0]
            closest = (result[1], tri.normal)

    if closest is None:
        return None
    return Hit(point=closest[0], normal=closest[1], geometry=mesh, t=closest_t)


# =============================================================================
# OBJ Loading
# =============================================================================


def _parse_face_index(token: str, vertex_count: int, line_no: int) -> int:
    """Convert one OBJ face token (v, v/vt, v//vn, v/vt/vn) to a 0-based index."""
    head = token.split("/", 1)[0]
    try:
        index = int(head)
    except ValueError:
        raise ValueError(f"Line {line_no}: invalid face index {token!r}") from None
    if index > 0:
        return index - 1
    if index < 0:
        # negative indices count back from the most recent vertex
        return vertex_count + index
    raise ValueError(f"Line {line_no}: face index 0 is not valid in OBJ")


def parse_obj(lines: Iterable[str]) -> tuple[list[tuple[float, float, float]], list[int]]:
    """Parse vertex ("v") and face ("f") records from OBJ text.

    Other record types (normals, texture coordinates, groups, ...) are
    ignored. Polygon faces are fan-triangulated around their first vertex.

    Args:
        lines: The lines of an OBJ file.

    Returns:
        A tuple (vertices, indices) suitable for TriangleMesh.

    Raises:
        ValueError: If a vertex or face record is malformed.
    """
    vertices: list[tuple[float, float, float]] = []
    indices: list[int] = []

    for line_no, raw in enumerate(lines, start=1):
        parts = raw.split("#", 1)[0].split()
        if not parts:
            continue

        if parts[0] == "v":
            if len(parts) < 4:
                raise ValueError(f"Line {line_no}: vertex needs 3 coordinates")
            try:
                x, y, z = (float(p) for p in parts[1:4])
            except ValueError:
                raise ValueError(f"Line {line_no}: invalid vertex {raw.strip()!r}") from None
            vertices.append((x, y, z))

        elif parts[0] == "f":
            if len(parts) < 4:
                raise ValueError(f"Line {line_no}: face needs at least 3 vertices")
            face = [_parse_face_index(tok, len(vertices), line_no) for tok in parts[1:]]
            for i in range(1, len(face) - 1):
                indices.extend((face[0], face[i], face[i + 1]))

    return vertices, indices


def load_obj(source: str | Path | TextIO | Sequence[str], material: Material) -> TriangleMesh:
    """Build a TriangleMesh from an OBJ file.

    Args:
        source: A file path, an open text stream, or a sequence of lines.
        material: The material for the whole mesh.

    Returns:
        The loaded mesh.

    Raises:
        ValueError: If the OBJ data is malformed or references missing vertices.
    """
    if isinstance(source, (str, Path)):
        with open(source, encoding="utf-8") as f:
            vertices, indices = parse_obj(f)
    else:
        vertices, indices = parse_obj(source)

    logger.debug("Loaded OBJ mesh: %d vertices, %d triangles", len(vertices), len(indices) // 3)
    return TriangleMesh(
        vertices=np.array(vertices, dtype=np.float64).reshape(-1, 3),
        indices=tuple(indices),
        material=material,
    )
