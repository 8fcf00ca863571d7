"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules: a seeded random
generator, common materials, and small scenes and cameras that render
quickly.
"""

import math

import numpy as np
import pytest

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.geometry import Plane, Sphere
from pathtracer.materials.material import Material


@pytest.fixture
def rng():
    """A deterministic random generator for one test."""
    return np.random.default_rng(1234)


@pytest.fixture
def white_diffuse():
    """A fully diffuse white material."""
    return Material(reflectance=(1.0, 1.0, 1.0), diffuse=1.0)


@pytest.fixture
def mirror():
    """A perfect mirror."""
    return Material(reflectance=(0.9, 0.9, 0.9), diffuse=0.0)


@pytest.fixture
def glass():
    """A clear glass dielectric."""
    return Material(reflectance=(1.0, 1.0, 1.0), eta=1.5, diffuse=0.0, dielectric=True)


@pytest.fixture
def light():
    """A white emitter."""
    return Material(emittance=(1.0, 1.0, 1.0))


@pytest.fixture
def small_camera():
    """A 16x12 camera at the origin looking down -z."""
    return PinholeCamera(
        position=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        fov=math.radians(90.0),
        width=16,
        height=12,
    )


@pytest.fixture
def lit_scene(white_diffuse, light):
    """A diffuse sphere in front of the camera under an emissive ceiling."""
    return [
        Sphere(center=(0.0, 0.0, -5.0), radius=2.0, material=white_diffuse),
        Plane(point=(0.0, 10.0, 0.0), normal=(0.0, -1.0, 0.0), material=light),
    ]
