"""Path tracing integrator for Monte Carlo light transport.

This module implements a unidirectional random-walk estimator: rays are traced
from the camera, bounce off surfaces according to their material, and only
pick up light when they reach an emitter.

At each bounce:
    - A ray that escapes the scene returns black.
    - An emissive surface ends the path and returns its emittance directly
      (emitters do not also reflect).
    - Otherwise a continuation ray is sampled from the material and the
      returned radiance is reflectance * incoming, per channel.

There is no Russian roulette and no direct light sampling. The hard
max-bounce cutoff is the only termination rule, which biases the estimate
dark (paths longer than the budget contribute nothing) in exchange for a
bounded cost per sample.

Example:
    >>> import numpy as np
    >>> from pathtracer.core.integrator import trace_path
    >>> from pathtracer.scene.presets import create_skylight_scene
    >>> scene, camera = create_skylight_scene(32, 32)
    >>> rng = np.random.default_rng(7)
    >>> radiance = trace_path(camera.get_ray(16.0, 16.0), scene, 0, 2, rng)
"""

from __future__ import annotations

import numpy as np

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.ray import BLACK, Ray, Vec3, hadamard
from pathtracer.materials.material import AIR, Material, scatter
from pathtracer.scene.intersection import Scene, find_nearest_hit

# Default maximum path depth (number of surface interactions)
DEFAULT_MAX_BOUNCES = 4


def trace_path(
    ray: Ray,
    scene: Scene,
    depth: int,
    max_depth: int,
    rng: np.random.Generator,
    ambient: Material = AIR,
) -> Vec3:
    """Estimate the radiance arriving along a ray.

    Recursion depth is bounded by max_depth, so the Python stack stays
    shallow for any sensible bounce budget.

    Args:
        ray: The ray to trace (unit-length direction).
        scene: The scene's geometries.
        depth: Number of bounces already taken along this path.
        max_depth: Path length budget; at this depth the path returns black.
        rng: The random generator owned by the calling chunk.
        ambient: The medium outside every dielectric surface.

    Returns:
        The estimated RGB radiance.
    """
    if depth >= max_depth:
        return BLACK

    hit = find_nearest_hit(ray, scene)
    if hit is None:
        return BLACK

    material = hit.geometry.material
    if material.is_emissive:
        return material.emittance

    next_ray = scatter(material, ray, hit, rng, ambient)
    incoming = trace_path(next_ray, scene, depth + 1, max_depth, rng, ambient)
    return hadamard(material.reflectance, incoming)


def sample_pixel(
    camera: PinholeCamera,
    scene: Scene,
    col: int,
    row: int,
    samples_per_pixel: int,
    max_bounces: int,
    rng: np.random.Generator,
    ambient: Material = AIR,
) -> Vec3:
    """Average jittered radiance estimates over one pixel.

    Each sample offsets the pixel coordinate by independent uniform [0, 1)
    amounts on both axes (box-filter anti-aliasing) before generating the
    camera ray.

    Args:
        camera: The camera generating primary rays.
        scene: The scene's geometries.
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).
        samples_per_pixel: Number of independent samples (> 0).
        max_bounces: Path length budget passed to trace_path.
        rng: The random generator owned by the calling chunk.
        ambient: The medium the camera sits in.

    Returns:
        The mean radiance over all samples.
    """
    total = np.zeros(3, dtype=np.float64)
    for _ in range(samples_per_pixel):
        jitter_col = rng.random()
        jitter_row = rng.random()
        ray = camera.get_ray(col + jitter_col, row + jitter_row)
        total += trace_path(ray, scene, 0, max_bounces, rng, ambient)
    return total / samples_per_pixel
