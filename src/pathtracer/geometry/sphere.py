"""Sphere primitive and the Hit record shared by all geometry types.

Ray-sphere intersection substitutes the ray parametrization into the
implicit sphere equation:

    |origin + t * direction - center|^2 = radius^2

With a unit-length direction this is the quadratic

    t^2 + 2*h*t + c = 0,  h = dot(direction, oc),  c = dot(oc, oc) - radius^2

where oc = origin - center. The nearest root above EPSILON is the hit.

Example:
    >>> from pathtracer.core.ray import make_ray, vec3
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials.material import Material
    >>> sphere = Sphere(vec3(0, 0, 0), 1.0, Material())
    >>> hit = sphere.test(make_ray(vec3(0, 0, 5), vec3(0, 0, -1)))
    >>> hit.t
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from pathtracer.core.ray import EPSILON, Ray, Vec3, as_vec3, dot, ray_at

if TYPE_CHECKING:
    from pathtracer.geometry.mesh import TriangleMesh
    from pathtracer.geometry.plane import Plane
    from pathtracer.materials.material import Material


@dataclass(frozen=True, eq=False)
class Hit:
    """Record of a ray-geometry intersection.

    Attributes:
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal at the point, oriented by the owning
            primitive's convention (outward for spheres, as given for planes,
            by winding for triangles).
        geometry: The primitive that was hit.
        t: The parameter value along the ray, always greater than EPSILON.
    """

    point: Vec3
    normal: Vec3
    geometry: Union[Sphere, Plane, TriangleMesh]
    t: float


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere. Non-positive radii never intersect.
        material: The surface material.
    """

    center: Vec3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        center = as_vec3(self.center)
        center.setflags(write=False)
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "radius", float(self.radius))

    def test(self, ray: Ray) -> Hit | None:
        """Return the nearest valid intersection with ray, or None."""
        return hit_sphere(self, ray)


def hit_sphere(sphere: Sphere, ray: Ray) -> Hit | None:
    """Test for ray-sphere intersection.

    Takes the smallest root greater than EPSILON, so a ray starting inside
    the sphere hits the far side.

    Args:
        sphere: The sphere to test against.
        ray: The ray (unit-length direction).

    Returns:
        A Hit with the outward normal (point - center) / radius, or None if
        the ray misses, the sphere is behind the ray, or the radius is not
        positive.
    """
    if sphere.radius <= 0.0:
        return None

    oc = ray.origin - sphere.center
    h = dot(ray.direction, oc)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - c

    if discriminant < 0.0:
        return None

    sqrt_d = math.sqrt(discriminant)
    t = -h - sqrt_d
    if t <= EPSILON:
        t = -h + sqrt_d
        if t <= EPSILON:
            return None

    point = ray_at(ray, t)
    normal = (point - sphere.center) / sphere.radius
    return Hit(point=point, normal=normal, geometry=sphere, t=t)
