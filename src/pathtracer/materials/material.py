"""Flat material record and per-bounce scattering dispatch.

A Material is an immutable value record rather than a class hierarchy.
Every surface carries the same fields; which of them matter is decided at
each bounce:

1. Emissive surfaces (any non-zero emittance channel) end the path.
2. With probability ``diffuse`` the bounce is Lambertian
   (uniform hemisphere sampling, see lambertian.py).
3. Otherwise the bounce is specular. Dielectric surfaces choose between
   reflection and refraction by Fresnel reflectance (dielectric.py);
   all others reflect about the normal, blended toward a hemisphere
   sample by ``glossy`` (metal.py).

Example:
    >>> from pathtracer.materials.material import Material
    >>> glass = Material(reflectance=(1.0, 1.0, 1.0), eta=1.5, diffuse=0.0,
    ...                  dielectric=True)
    >>> lamp = Material(emittance=(4.0, 4.0, 4.0))
    >>> lamp.is_emissive
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from pathtracer.core.ray import Ray, Vec3, as_vec3, vec3
from pathtracer.materials.dielectric import sample_dielectric
from pathtracer.materials.lambertian import sample_lambertian
from pathtracer.materials.metal import sample_metal

if TYPE_CHECKING:
    from pathtracer.geometry.sphere import Hit


@dataclass(frozen=True, eq=False)
class Material:
    """Surface properties shared by every geometry type.

    Attributes:
        emittance: Emitted radiance per channel (non-negative).
        reflectance: Per-channel albedo, conceptually in [0, 1].
        eta: Index of refraction (> 0). Only used by dielectric surfaces and
            by the ambient medium. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
        diffuse: Probability in [0, 1] of a Lambertian bounce.
        glossy: Blend in [0, 1] from the mirror direction (0) toward a
            hemisphere sample (1) for non-dielectric specular bounces.
        dielectric: Whether specular bounces may refract into the surface.
    """

    emittance: Vec3 = field(default_factory=lambda: vec3(0.0, 0.0, 0.0))
    reflectance: Vec3 = field(default_factory=lambda: vec3(0.0, 0.0, 0.0))
    eta: float = 1.0
    diffuse: float = 1.0
    glossy: float = 0.0
    dielectric: bool = False

    def __post_init__(self) -> None:
        emittance = as_vec3(self.emittance)
        reflectance = as_vec3(self.reflectance)
        if np.any(emittance < 0.0):
            raise ValueError(f"Emittance must be non-negative, got {emittance.tolist()}")
        if self.eta <= 0.0:
            raise ValueError(f"Index of refraction must be positive, got {self.eta}")
        if not 0.0 <= self.diffuse <= 1.0:
            raise ValueError(f"Diffuse probability must be in [0, 1], got {self.diffuse}")
        if not 0.0 <= self.glossy <= 1.0:
            raise ValueError(f"Glossy blend must be in [0, 1], got {self.glossy}")
        emittance.setflags(write=False)
        reflectance.setflags(write=False)
        # Frozen dataclass: normalized fields are set through object.__setattr__
        object.__setattr__(self, "emittance", emittance)
        object.__setattr__(self, "reflectance", reflectance)
        object.__setattr__(self, "eta", float(self.eta))
        object.__setattr__(self, "diffuse", float(self.diffuse))
        object.__setattr__(self, "glossy", float(self.glossy))

    @property
    def is_emissive(self) -> bool:
        """True if any emittance channel is non-zero."""
        return bool(np.any(self.emittance > 0.0))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the material to a JSON-compatible dictionary."""
        return {
            "emittance": self.emittance.tolist(),
            "reflectance": self.reflectance.tolist(),
            "eta": self.eta,
            "diffuse": self.diffuse,
            "glossy": self.glossy,
            "dielectric": self.dielectric,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Material:
        """Create a material from a dictionary produced by to_dict().

        Missing keys take the dataclass defaults.
        """
        known = {"emittance", "reflectance", "eta", "diffuse", "glossy", "dielectric"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown material keys: {sorted(unknown)}")
        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"Material(emittance={self.emittance.tolist()}, "
            f"reflectance={self.reflectance.tolist()}, eta={self.eta}, "
            f"diffuse={self.diffuse}, glossy={self.glossy}, "
            f"dielectric={self.dielectric})"
        )


# Default ambient medium surrounding the scene
AIR = Material(eta=1.0)


def scatter(
    material: Material,
    ray: Ray,
    hit: Hit,
    rng: np.random.Generator,
    ambient: Material = AIR,
) -> Ray:
    """Sample the continuation ray for a bounce off a non-emissive surface.

    Draws one uniform number to choose the Lambertian or specular branch,
    then delegates to the branch's sampling function.

    Args:
        material: The material of the hit surface.
        ray: The incoming ray.
        hit: The intersection record.
        rng: The random generator owned by the calling chunk.
        ambient: The medium outside every dielectric surface.

    Returns:
        The new ray, starting at the hit point with a unit direction.
    """
    if rng.random() < material.diffuse:
        return sample_lambertian(ray, hit, rng)
    if material.dielectric:
        return sample_dielectric(material, ray, hit, rng, ambient)
    return sample_metal(material, ray, hit, rng)
