"""Ray data structure and vector utilities for CPU path tracing.

This module provides the fundamental Ray dataclass and the vector helpers used
throughout the renderer. Vectors are plain NumPy arrays of shape (3,) holding
float64 components; every helper returns a new array and never mutates its
inputs, so vectors can be shared freely between worker threads.

The same representation is used for points, directions, and linear-RGB
radiance/reflectance.

Example:
    >>> from pathtracer.core.ray import make_ray, ray_at, vec3
    >>> ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    >>> ray_at(ray, 5.0)  # Point 5 units along the (normalized) ray
    array([ 0.,  0., -5.])
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from pathtracer.materials.material import Material

# Type alias for 3D vectors (points, directions, and RGB radiance)
Vec3 = npt.NDArray[np.float64]

# Rays and hits closer than this are treated as self-intersections
EPSILON = 1e-4


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3-component vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(values: Sequence[float] | Vec3) -> Vec3:
    """Convert any 3-element sequence to a vector.

    Raises:
        ValueError: If the input does not have exactly three components.
    """
    arr = np.array(values, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


BLACK = vec3(0.0, 0.0, 0.0)
BLACK.setflags(write=False)


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point, a direction, and the medium it travels in.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit-length direction of the ray. Use make_ray() to
            build rays from arbitrary directions.
        medium: The material whose refractive index surrounds the ray origin,
            or None for the render's ambient medium.
    """

    origin: Vec3
    direction: Vec3
    medium: Material | None = None


def make_ray(origin: Vec3, direction: Vec3, medium: Material | None = None) -> Ray:
    """Create a ray, normalizing its direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector (any non-zero length).
        medium: The medium the ray travels through (None for ambient).

    Returns:
        A new Ray instance with a unit-length direction.
    """
    return Ray(origin=origin, direction=normalize(direction), medium=medium)


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product a x b."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the Euclidean length (magnitude) of a vector."""
    return math.sqrt(length_squared(v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
        If v is zero-length, returns a zero vector.
    """
    n = length(v)
    if n == 0.0:
        return np.zeros(3, dtype=np.float64)
    return v / n


def hadamard(a: Vec3, b: Vec3) -> Vec3:
    """Per-channel (element-wise) product of two colors."""
    return a * b


def lerp(v0: Vec3, v1: Vec3, t: float) -> Vec3:
    """Linearly interpolate from v0 (t=0) to v1 (t=1)."""
    return v0 * (1.0 - t) + v1 * t


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    The result does not depend on which side the normal faces.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def refract(incident: Vec3, normal: Vec3, eta1: float, eta2: float) -> Vec3 | None:
    """Refract an incident vector through a surface using Snell's law.

    The normal may face either side of the surface; it is flipped internally
    so that it opposes the incident direction.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal (normalized).
        eta1: Refractive index of the medium the ray is leaving.
        eta2: Refractive index of the medium the ray is entering.

    Returns:
        The normalized refracted direction, or None if total internal
        reflection occurs.
    """
    n = normal
    if dot(incident, normal) > 0.0:
        n = -normal
    ratio = eta1 / eta2
    cos_i = -dot(incident, n)
    k = 1.0 - ratio * ratio * (1.0 - cos_i * cos_i)
    if k < 0.0:
        return None
    return normalize(ratio * incident + (ratio * cos_i - math.sqrt(k)) * n)


def schlick_fresnel(incident: Vec3, normal: Vec3, eta1: float, eta2: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Returns full reflectance at or beyond the critical angle when the ray
    travels from a denser into a less dense medium.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal (normalized, either side).
        eta1: Refractive index of the medium the ray is leaving.
        eta2: Refractive index of the medium the ray is entering.

    Returns:
        The approximate Fresnel reflectance coefficient in [0, 1].
    """
    cos_theta = min(abs(dot(incident, normal)), 1.0)
    if eta1 > eta2:
        sin2_t = (eta1 / eta2) ** 2 * (1.0 - cos_theta * cos_theta)
        if sin2_t >= 1.0:
            # at or beyond the critical angle
            return 1.0
    r0 = ((eta1 - eta2) / (eta1 + eta2)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cos_theta) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis.

    Args:
        normal: The surface normal (should be normalized).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a vector not parallel to normal
    a = vec3(1.0, 0.0, 0.0)
    if abs(normal[0]) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = normalize(cross(a, normal))
    bitangent = cross(normal, tangent)
    return tangent, bitangent, normal


def random_on_hemisphere(normal: Vec3, rng: np.random.Generator) -> Vec3:
    """Sample a direction uniformly over the hemisphere around a normal.

    Uniform (not cosine-weighted) sampling: z = cos(theta) is drawn uniformly
    from [0, 1) and phi uniformly from [0, 2*pi).

    Args:
        normal: The surface normal defining the hemisphere (normalized).
        rng: The random generator owned by the calling chunk.

    Returns:
        A unit vector whose dot product with normal is non-negative.
    """
    z = rng.random()
    r = math.sqrt(1.0 - z * z)
    phi = 2.0 * math.pi * rng.random()
    tangent, bitangent, n = build_onb_from_normal(normal)
    return tangent * (r * math.cos(phi)) + bitangent * (r * math.sin(phi)) + n * z


# =============================================================================
# Color Conversion
# =============================================================================


def radiance_to_color(radiance: Vec3) -> tuple[int, int, int]:
    """Tone-map linear radiance to an 8-bit RGB triple.

    Each channel is clamped to [0, 1] and scaled to [0, 255] (truncating).
    """
    scaled = np.clip(radiance, 0.0, 1.0) * 255.0
    return int(scaled[0]), int(scaled[1]), int(scaled[2])


def color_to_radiance(color: Sequence[int]) -> Vec3:
    """Convert an 8-bit RGB triple back to linear radiance in [0, 1]."""
    return vec3(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
