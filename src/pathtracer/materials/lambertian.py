"""Lambertian (ideal diffuse) bounce sampling.

A diffuse bounce leaves the surface in a direction drawn uniformly over the
hemisphere around the surface normal as the primitive reports it (outward
for spheres, as given for planes, by winding for triangles). The sampling
is cosine-free: the path integrator multiplies by reflectance only, so every
direction in the hemisphere is equally likely.

The hemisphere is not flipped toward the incoming ray. A ray arriving at the
back of a plane continues on the normal's side, which is how the skylight
preset lights a floor seen from below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, random_on_hemisphere

if TYPE_CHECKING:
    from pathtracer.geometry.sphere import Hit


def sample_lambertian(ray: Ray, hit: Hit, rng: np.random.Generator) -> Ray:
    """Sample a diffuse continuation ray.

    Args:
        ray: The incoming ray.
        hit: The intersection record of the diffuse surface.
        rng: The random generator owned by the calling chunk.

    Returns:
        A ray from the hit point into the hemisphere around hit.normal.
        The ray stays in the medium it arrived in.
    """
    direction = random_on_hemisphere(hit.normal, rng)
    return Ray(origin=hit.point, direction=direction, medium=ray.medium)
