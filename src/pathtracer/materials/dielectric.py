"""Dielectric (glass/water) reflection and refraction.

Transmissive surfaces split a specular bounce between mirror reflection and
Snell's-law refraction, choosing randomly with the Schlick approximation of
the Fresnel reflectance as the reflection probability.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection at or beyond the critical angle

Entering versus exiting is decided by the medium the ray carries: a ray whose
medium is the hit material is leaving it. A refracted ray carries the new
medium (the hit material when entering, the ambient medium when exiting);
a reflected ray keeps its current one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pathtracer.core.ray import Ray, reflect, refract, schlick_fresnel

if TYPE_CHECKING:
    from pathtracer.geometry.sphere import Hit
    from pathtracer.materials.material import Material


def refractive_indices(
    material: Material, ray: Ray, ambient: Material
) -> tuple[float, float, Material | None]:
    """Determine the refractive indices on either side of the surface.

    Args:
        material: The dielectric material that was hit.
        ray: The incoming ray.
        ambient: The medium outside every dielectric surface.

    Returns:
        A tuple (eta1, eta2, medium) where:
        - eta1: Index of the medium the ray is leaving.
        - eta2: Index of the medium the ray would enter.
        - medium: The medium a refracted ray travels in (None for ambient).
    """
    if ray.medium is material:
        return material.eta, ambient.eta, None
    current = ray.medium if ray.medium is not None else ambient
    return current.eta, material.eta, material


def sample_dielectric(
    material: Material,
    ray: Ray,
    hit: Hit,
    rng: np.random.Generator,
    ambient: Material,
) -> Ray:
    """Sample a reflected or refracted continuation ray.

    Args:
        material: The dielectric material of the hit surface.
        ray: The incoming ray.
        hit: The intersection record.
        rng: The random generator owned by the calling chunk.
        ambient: The medium outside every dielectric surface.

    Returns:
        The continuation ray starting at the hit point.
    """
    eta1, eta2, refracted_medium = refractive_indices(material, ray, ambient)
    reflectance = schlick_fresnel(ray.direction, hit.normal, eta1, eta2)

    if rng.random() >= reflectance:
        direction = refract(ray.direction, hit.normal, eta1, eta2)
        if direction is not None:
            return Ray(origin=hit.point, direction=direction, medium=refracted_medium)

    return Ray(
        origin=hit.point,
        direction=reflect(ray.direction, hit.normal),
        medium=ray.medium,
    )
