"""Geometry module for shape primitives and intersection.

This module provides the closed set of geometric primitives:

Components:
    sphere: Sphere primitive and the Hit record
    plane: Infinite plane primitive
    mesh: Triangle mesh primitive and OBJ loading

Every primitive is a frozen dataclass with a material attribute and exactly
one capability, test(ray), returning the nearest Hit with t > EPSILON or
None. Scene-level nearest-hit queries live in pathtracer.scene.intersection.
"""

from typing import Union

from .mesh import TriangleMesh, hit_mesh, load_obj, parse_obj
from .plane import Plane, hit_plane
from .sphere import Hit, Sphere, hit_sphere

# The closed set of primitive types
Geometry = Union[Sphere, Plane, TriangleMesh]

__all__ = [
    "Geometry",
    "Hit",
    "Sphere",
    "hit_sphere",
    "Plane",
    "hit_plane",
    "TriangleMesh",
    "hit_mesh",
    "load_obj",
    "parse_obj",
]
