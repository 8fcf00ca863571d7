"""Scene-level primitive intersection testing.

A scene is an ordered sequence of geometries. Each primitive type is
dispatched to its intersection routine through a type table, and the
globally nearest hit with t > EPSILON wins. When two hits have exactly the
same t, the first geometry in scene order is kept.

Example:
    >>> from pathtracer.core.ray import make_ray, vec3
    >>> from pathtracer.geometry import Plane, Sphere
    >>> from pathtracer.materials.material import Material
    >>> from pathtracer.scene.intersection import find_nearest_hit
    >>> scene = [
    ...     Sphere(vec3(0, 0, -3), 1.0, Material()),
    ...     Plane(vec3(0, 0, -10), vec3(0, 0, 1), Material()),
    ... ]
    >>> find_nearest_hit(make_ray(vec3(0, 0, 0), vec3(0, 0, -1)), scene).t
    2.0
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pathtracer.core.ray import EPSILON, Ray
from pathtracer.geometry import Geometry
from pathtracer.geometry.mesh import TriangleMesh, hit_mesh
from pathtracer.geometry.plane import Plane, hit_plane
from pathtracer.geometry.sphere import Hit, Sphere, hit_sphere

# Type alias for the read-only geometry list handed to the renderer
Scene = Sequence[Geometry]

# Dispatch table over the closed set of primitive types
_HIT_FUNCTIONS: dict[type, Callable[..., Hit | None]] = {
    Sphere: hit_sphere,
    Plane: hit_plane,
    TriangleMesh: hit_mesh,
}


def intersect_geometry(geometry: Geometry, ray: Ray) -> Hit | None:
    """Intersect a ray with any supported primitive.

    Args:
        geometry: A Sphere, Plane, or TriangleMesh.
        ray: The ray to test.

    Returns:
        The primitive's nearest valid hit, or None.

    Raises:
        TypeError: If geometry is not one of the supported primitive types.
    """
    hit_fn = _HIT_FUNCTIONS.get(type(geometry))
    if hit_fn is None:
        raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")
    return hit_fn(geometry, ray)


def find_nearest_hit(ray: Ray, geometries: Scene) -> Hit | None:
    """Test ray against every geometry in the scene.

    Args:
        ray: The ray to trace.
        geometries: The scene's primitives, in scene order.

    Returns:
        The hit with the smallest t greater than EPSILON, or None if the ray
        escapes the scene.
    """
    closest: Hit | None = None
    for geometry in geometries:
        hit = intersect_geometry(geometry, ray)
        if hit is not None and hit.t > EPSILON and (closest is None or hit.t < closest.t):
            closest = hit
    return closest

