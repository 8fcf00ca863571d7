"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector/color utilities, and sampling helpers
    integrator: Recursive Monte Carlo path integrator
    scheduler: Chunk partitioning, worker pool, and the render() entry point
    progress: Single-consumer progress aggregation

Rendering runs on the CPU: the image is split into chunks rendered by a
fixed pool of worker threads, each chunk with its own deterministic random
generator.
"""

from .ray import (
    BLACK,
    EPSILON,
    Ray,
    Vec3,
    as_vec3,
    build_onb_from_normal,
    color_to_radiance,
    cross,
    dot,
    hadamard,
    length,
    length_squared,
    lerp,
    make_ray,
    normalize,
    radiance_to_color,
    random_on_hemisphere,
    ray_at,
    reflect,
    refract,
    schlick_fresnel,
    vec3,
)

# Note: integrator, scheduler, and progress are NOT imported here to avoid
# circular imports (materials and geometry import core.ray).
#
# For rendering, use:
#   from pathtracer.core.scheduler import ImageBuffer, RenderParams, render

__all__ = [
    "BLACK",
    "EPSILON",
    "Ray",
    "Vec3",
    "vec3",
    "as_vec3",
    "ray_at",
    "make_ray",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "hadamard",
    "lerp",
    "reflect",
    "refract",
    "schlick_fresnel",
    "build_onb_from_normal",
    "random_on_hemisphere",
    "radiance_to_color",
    "color_to_radiance",
]
