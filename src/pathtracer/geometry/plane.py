"""Infinite plane primitive.

A plane is defined by a point on it and its normal. Intersection solves

    t = dot(point - origin, normal) / dot(direction, normal)

and rejects rays parallel to the plane (zero denominator) explicitly rather
than relying on Inf/NaN propagation. The hit normal is the plane normal as
given; materials treat planes as two-sided.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.ray import EPSILON, Ray, Vec3, as_vec3, dot, length, ray_at
from pathtracer.geometry.sphere import Hit

if TYPE_CHECKING:
    from pathtracer.materials.material import Material


@dataclass(frozen=True, eq=False)
class Plane:
    """An infinite plane through a point with a given normal.

    Attributes:
        point: Any point on the plane.
        normal: The plane normal. Normalized at construction.
        material: The surface material.

    Raises:
        ValueError: If the normal is the zero vector.
    """

    point: Vec3
    normal: Vec3
    material: Material

    def __post_init__(self) -> None:
        point = as_vec3(self.point)
        normal = as_vec3(self.normal)
        n = length(normal)
        if n == 0.0:
            raise ValueError("Plane normal must be non-zero")
        normal = normal / n
        point.setflags(write=False)
        normal.setflags(write=False)
        object.__setattr__(self, "point", point)
        object.__setattr__(self, "normal", normal)

    def test(self, ray: Ray) -> Hit | None:
        """Return the intersection with ray in front of its origin, or None."""
        return hit_plane(self, ray)


def hit_plane(plane: Plane, ray: Ray) -> Hit | None:
    """Test for ray-plane intersection.

    Args:
        plane: The plane to test against.
        ray: The ray (unit-length direction).

    Returns:
        A Hit carrying the plane normal, or None if the ray is parallel to
        the plane or the plane lies behind the ray (t <= EPSILON).
    """
    denom = dot(ray.direction, plane.normal)
    if denom == 0.0:
        return None

    t = dot(plane.point - ray.origin, plane.normal) / denom
    if t <= EPSILON:
        return None

    return Hit(point=ray_at(ray, t), normal=plane.normal, geometry=plane, t=t)
