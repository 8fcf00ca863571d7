"""Scene module for nearest-hit queries and scene construction.

Components:
    intersection: Type-dispatched primitive tests and find_nearest_hit()
    loader: Scene descriptions as dictionaries and JSON files
    presets: Built-in scenes (showcase, pyramid, skylight)

A scene is an ordered, read-only sequence of geometries. Order only matters
when two hits have exactly the same t: the first geometry wins.
"""

from .intersection import Scene, find_nearest_hit, intersect_geometry
from .loader import (
    SceneConfig,
    geometry_from_dict,
    geometry_to_dict,
    load_scene,
    save_scene,
    scene_from_dict,
    scene_to_dict,
)
from .presets import (
    PRESETS,
    create_pyramid_scene,
    create_scene,
    create_showcase_scene,
    create_skylight_scene,
    default_camera,
)

__all__ = [
    # Intersection module
    "Scene",
    "find_nearest_hit",
    "intersect_geometry",
    # Loader module
    "SceneConfig",
    "geometry_from_dict",
    "geometry_to_dict",
    "scene_from_dict",
    "scene_to_dict",
    "load_scene",
    "save_scene",
    # Presets module
    "PRESETS",
    "create_scene",
    "create_showcase_scene",
    "create_pyramid_scene",
    "create_skylight_scene",
    "default_camera",
]
