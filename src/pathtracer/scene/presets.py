"""Built-in scene configurations.

Each factory returns a (geometries, camera) pair for a requested image size.

Scenes:
    showcase: A room of six colored walls around a glass ball, a diffuse
        ball, a mirror ball, and a large glowing ball overhead.
    pyramid: A triangle-mesh pyramid on a white floor under an emissive
        ceiling.
    skylight: A white diffuse floor at z=0 under an emissive plane at z=500,
        viewed from below. At one bounce the floor renders black; from two
        bounces the light reaches it.

Example:
    >>> from pathtracer.scene.presets import create_scene
    >>> scene, camera = create_scene("showcase", 300, 200)
"""

from __future__ import annotations

import math
from collections.abc import Callable

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.geometry import Geometry, Plane, Sphere, TriangleMesh
from pathtracer.materials.material import Material

# =============================================================================
# Default Camera
# =============================================================================

DEFAULT_CAMERA_POSITION = (-100.0, 0.0, 0.0)
DEFAULT_CAMERA_LOOK_AT = (0.0, 0.0, 0.0)
DEFAULT_CAMERA_UP = (0.0, 0.0, 1.0)
DEFAULT_FOV_DEGREES = 115.0


def default_camera(width: int, height: int, fov_degrees: float = DEFAULT_FOV_DEGREES) -> PinholeCamera:
    """Camera at (-100, 0, 0) looking along +x with z up."""
    return PinholeCamera(
        position=DEFAULT_CAMERA_POSITION,
        look_at=DEFAULT_CAMERA_LOOK_AT,
        up=DEFAULT_CAMERA_UP,
        fov=math.radians(fov_degrees),
        width=width,
        height=height,
    )


# =============================================================================
# Scene Factories
# =============================================================================


def create_showcase_scene(width: int, height: int) -> tuple[list[Geometry], PinholeCamera]:
    """Create the colored-room scene with glass, diffuse, mirror, and glowing balls."""
    geometries: list[Geometry] = [
        # high left ball (glass)
        Sphere(
            center=(150.0, 100.0, -100.0),
            radius=100.0,
            material=Material(
                reflectance=(0.99, 0.99, 0.99), eta=1.5, diffuse=0.0, dielectric=True
            ),
        ),
        # low right ball
        Sphere(
            center=(200.0, -100.0, -100.0),
            radius=100.0,
            material=Material(reflectance=(0.99, 0.99, 0.99), diffuse=1.0),
        ),
        # mirror ball
        Sphere(
            center=(200.0, 150.0, 0.0),
            radius=50.0,
            material=Material(reflectance=(0.99, 0.99, 0.99), diffuse=0.0),
        ),
        # glowing ball
        Sphere(
            center=(500.0, 0.0, 550.0),
            radius=200.0,
            material=Material(emittance=(15.0, 15.0, 15.0)),
        ),
        # rear of scene
        Plane(
            point=(800.0, 0.0, 0.0),
            normal=(-1.0, 0.0, 0.0),
            material=Material(reflectance=(0.2, 0.2, 0.99), diffuse=0.95, glossy=0.05),
        ),
        # behind camera
        Plane(
            point=(-800.0, 0.0, 0.0),
            normal=(1.0, 0.0, 0.0),
            material=Material(reflectance=(0.99, 0.2, 0.99), diffuse=0.95, glossy=0.05),
        ),
        # ceiling
        Plane(
            point=(0.0, 0.0, 400.0),
            normal=(0.0, 0.0, -1.0),
            material=Material(reflectance=(0.95, 0.95, 0.95), diffuse=1.0),
        ),
        # floor
        Plane(
            point=(0.0, 0.0, -200.0),
            normal=(0.0, 0.0, 1.0),
            material=Material(reflectance=(0.95, 0.95, 0.95), diffuse=1.0),
        ),
        # left wall
        Plane(
            point=(0.0, 400.0, 0.0),
            normal=(0.0, -1.0, 0.0),
            material=Material(reflectance=(0.2, 0.99, 0.2), diffuse=0.75, glossy=0.25),
        ),
        # right wall
        Plane(
            point=(0.0, -400.0, 0.0),
            normal=(0.0, 1.0, 0.0),
            material=Material(reflectance=(1.0, 0.2, 0.2), diffuse=1.0),
        ),
    ]
    return geometries, default_camera(width, height)


# Pyramid apex over a square base; winding gives outward normals
PYRAMID_VERTICES = (
    (0.0, 0.0, 70.0),
    (50.0, 50.0, 10.0),
    (-50.0, 50.0, 10.0),
    (-50.0, -50.0, 10.0),
    (50.0, -50.0, 10.0),
)
PYRAMID_INDICES = (0, 1, 2, 0, 2, 3, 0, 3, 4, 0, 4, 1)


def create_pyramid_scene(width: int, height: int) -> tuple[list[Geometry], PinholeCamera]:
    """Create a mesh pyramid on a floor lit by an emissive ceiling."""
    geometries: list[Geometry] = [
        TriangleMesh(
            vertices=PYRAMID_VERTICES,
            indices=PYRAMID_INDICES,
            material=Material(reflectance=(1.0, 0.5, 0.5), diffuse=0.9),
        ),
        Plane(
            point=(0.0, 0.0, 0.0),
            normal=(0.0, 0.0, 1.0),
            material=Material(reflectance=(1.0, 1.0, 1.0), diffuse=1.0),
        ),
        Plane(
            point=(0.0, 0.0, 500.0),
            normal=(0.0, 0.0, -1.0),
            material=Material(emittance=(1.5, 1.5, 1.5)),
        ),
    ]
    camera = PinholeCamera(
        position=(-150.0, -60.0, 90.0),
        look_at=(0.0, 0.0, 30.0),
        up=DEFAULT_CAMERA_UP,
        fov=math.radians(70.0),
        width=width,
        height=height,
    )
    return geometries, camera


# Skylight scene constants
SKYLIGHT_FLOOR_REFLECTANCE = (1.0, 1.0, 1.0)
SKYLIGHT_EMITTANCE = (2.0, 2.0, 2.0)
SKYLIGHT_HEIGHT = 500.0


def create_skylight_scene(width: int, height: int) -> tuple[list[Geometry], PinholeCamera]:
    """Create a diffuse floor under an emissive plane, seen from below.

    The camera sits beneath the floor looking straight up, so every primary
    ray hits the floor first. Lambertian bounces leave along the floor normal
    (+z) and reach the emitter on the second bounce.
    """
    geometries: list[Geometry] = [
        Plane(
            point=(0.0, 0.0, 0.0),
            normal=(0.0, 0.0, 1.0),
            material=Material(reflectance=SKYLIGHT_FLOOR_REFLECTANCE, diffuse=1.0),
        ),
        Plane(
            point=(0.0, 0.0, SKYLIGHT_HEIGHT),
            normal=(0.0, 0.0, -1.0),
            material=Material(emittance=SKYLIGHT_EMITTANCE),
        ),
    ]
    camera = PinholeCamera(
        position=(0.0, 0.0, -100.0),
        look_at=(0.0, 0.0, 0.0),
        up=(1.0, 0.0, 0.0),
        fov=math.radians(60.0),
        width=width,
        height=height,
    )
    return geometries, camera


SceneFactory = Callable[[int, int], tuple[list[Geometry], PinholeCamera]]

PRESETS: dict[str, SceneFactory] = {
    "showcase": create_showcase_scene,
    "pyramid": create_pyramid_scene,
    "skylight": create_skylight_scene,
}


def create_scene(name: str, width: int, height: int) -> tuple[list[Geometry], PinholeCamera]:
    """Create a built-in scene by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene preset {name!r}; choose from {sorted(PRESETS)}"
        ) from None
    return factory(width, height)
