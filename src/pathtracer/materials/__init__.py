"""Materials module for surface reflectance and bounce sampling.

Components:
    material: Flat Material record, the AIR ambient medium, and scatter()
    lambertian: Uniform hemisphere (diffuse) bounces
    metal: Mirror reflection with glossy blending
    dielectric: Fresnel-weighted reflection/refraction with medium tracking

A material is a value record, not a class hierarchy: scatter() picks the
bounce type per sample from the record's diffuse probability and dielectric
flag.
"""

from .dielectric import refractive_indices, sample_dielectric
from .lambertian import sample_lambertian
from .material import AIR, Material, scatter
from .metal import sample_metal

__all__ = [
    "AIR",
    "Material",
    "scatter",
    "sample_lambertian",
    "sample_metal",
    "sample_dielectric",
    "refractive_indices",
]
