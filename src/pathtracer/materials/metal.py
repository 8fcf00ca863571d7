"""Mirror and glossy reflection for non-dielectric specular bounces.

The reflection direction is blended toward a uniform hemisphere sample by the
material's glossy factor:

    direction = normalize(lerp(mirror, hemisphere_sample, glossy))

so glossy = 0 is a perfect mirror and glossy = 1 behaves like a diffuse
bounce. No random numbers are drawn for a perfect mirror.

Example:
    >>> from pathtracer.materials.material import Material
    >>> mirror = Material(reflectance=(0.99, 0.99, 0.99), diffuse=0.0)
    >>> brushed = Material(reflectance=(0.9, 0.8, 0.6), diffuse=0.0, glossy=0.2)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, dot, lerp, normalize, random_on_hemisphere, reflect

if TYPE_CHECKING:
    from pathtracer.geometry.sphere import Hit
    from pathtracer.materials.material import Material


def sample_metal(material: Material, ray: Ray, hit: Hit, rng: np.random.Generator) -> Ray:
    """Sample a mirror/glossy continuation ray.

    Args:
        material: The material of the hit surface (uses glossy).
        ray: The incoming ray.
        hit: The intersection record.
        rng: The random generator owned by the calling chunk.

    Returns:
        The reflected ray, starting at the hit point, in the incoming medium.
    """
    direction = reflect(ray.direction, hit.normal)

    if material.glossy > 0.0:
        # sample the hemisphere on the side the mirror direction leaves from
        normal = hit.normal if dot(direction, hit.normal) >= 0.0 else -hit.normal
        blended = lerp(direction, random_on_hemisphere(normal, rng), material.glossy)
        # zero only if the two directions cancel; keep the mirror direction then
        blended_dir = normalize(blended)
        if blended_dir.any():
            direction = blended_dir

    return Ray(origin=hit.point, direction=direction, medium=ray.medium)
