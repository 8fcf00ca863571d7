"""Scene descriptions as dictionaries and JSON files.

A scene description has the shape:

    {
        "camera": {"position": [...], "look_at": [...], "up": [...],
                   "fov": 115.0, "width": 300, "height": 200},
        "ambient_eta": 1.0,
        "geometries": [
            {"type": "sphere", "center": [...], "radius": 1.0,
             "material": {...}},
            {"type": "plane", "point": [...], "normal": [...],
             "material": {...}},
            {"type": "mesh", "vertices": [[...], ...], "indices": [...],
             "material": {...}},
            {"type": "mesh", "obj": "model.obj", "material": {...}}
        ]
    }

Camera fov is in degrees. Material dictionaries use the keys of
Material.to_dict() and may omit any of them. OBJ paths are resolved relative
to the description file. The camera entry is optional.

Example:
    >>> from pathtracer.scene.loader import load_scene
    >>> config = load_scene("scenes/room.json")
    >>> config.camera.width, len(config.geometries)
    (300, 10)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.geometry import Geometry, Plane, Sphere, TriangleMesh, load_obj
from pathtracer.materials.material import AIR, Material

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """A loaded scene: geometries, optional camera, and ambient medium.

    Attributes:
        geometries: The primitives in scene order.
        camera: The camera, if the description contained one.
        ambient: The medium surrounding the scene.
    """

    geometries: list[Geometry] = field(default_factory=list)
    camera: PinholeCamera | None = None
    ambient: Material = AIR


# =============================================================================
# Deserialization
# =============================================================================


def _material_from(entry: dict[str, Any]) -> Material:
    return Material.from_dict(entry.get("material", {}))


def geometry_from_dict(entry: dict[str, Any], base_dir: Path | None = None) -> Geometry:
    """Build one primitive from its description.

    Args:
        entry: A geometry dictionary with a "type" key.
        base_dir: Directory against which relative OBJ paths are resolved.

    Returns:
        The Sphere, Plane, or TriangleMesh.

    Raises:
        ValueError: If the type is unknown or a required key is missing.
    """
    kind = entry.get("type")
    try:
        if kind == "sphere":
            return Sphere(
                center=entry["center"],
                radius=float(entry["radius"]),
                material=_material_from(entry),
            )
        if kind == "plane":
            return Plane(
                point=entry["point"],
                normal=entry["normal"],
                material=_material_from(entry),
            )
        if kind == "mesh":
            if "obj" in entry:
                obj_path = Path(entry["obj"])
                if base_dir is not None and not obj_path.is_absolute():
                    obj_path = base_dir / obj_path
                return load_obj(obj_path, _material_from(entry))
            return TriangleMesh(
                vertices=entry["vertices"],
                indices=tuple(entry["indices"]),
                material=_material_from(entry),
            )
    except KeyError as exc:
        raise ValueError(f"{kind} geometry is missing required key {exc.args[0]!r}") from None
    raise ValueError(f"Unknown geometry type: {kind!r}")


def scene_from_dict(data: dict[str, Any], base_dir: Path | None = None) -> SceneConfig:
    """Build a SceneConfig from a scene description dictionary.

    Raises:
        ValueError: If any geometry, material, or camera entry is invalid.
    """
    geometries = []
    for index, entry in enumerate(data.get("geometries", [])):
        geometry = geometry_from_dict(entry, base_dir)
        logger.debug("Scene geometry %d: %s", index, type(geometry).__name__)
        geometries.append(geometry)

    camera = None
    if "camera" in data:
        try:
            camera = PinholeCamera.from_dict(data["camera"])
        except KeyError as exc:
            raise ValueError(f"Camera is missing required key {exc.args[0]!r}") from None

    ambient = AIR
    if "ambient_eta" in data:
        ambient = Material(eta=float(data["ambient_eta"]))

    return SceneConfig(geometries=geometries, camera=camera, ambient=ambient)


def load_scene(path: str | Path) -> SceneConfig:
    """Load a scene description from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the JSON or the scene description is invalid.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    config = scene_from_dict(data, base_dir=path.parent)
    logger.info("Loaded scene %s: %d geometries", path, len(config.geometries))
    return config


# =============================================================================
# Serialization
# =============================================================================


def geometry_to_dict(geometry: Geometry) -> dict[str, Any]:
    """Describe one primitive as a dictionary.

    Raises:
        TypeError: If geometry is not a supported primitive.
    """
    if isinstance(geometry, Sphere):
        entry: dict[str, Any] = {
            "type": "sphere",
            "center": geometry.center.tolist(),
            "radius": geometry.radius,
        }
    elif isinstance(geometry, Plane):
        entry = {
            "type": "plane",
            "point": geometry.point.tolist(),
            "normal": geometry.normal.tolist(),
        }
    elif isinstance(geometry, TriangleMesh):
        entry = {
            "type": "mesh",
            "vertices": geometry.vertices.tolist(),
            "indices": list(geometry.indices),
        }
    else:
        raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")
    entry["material"] = geometry.material.to_dict()
    return entry


def scene_to_dict(config: SceneConfig) -> dict[str, Any]:
    """Describe a whole scene as a JSON-compatible dictionary."""
    data: dict[str, Any] = {
        "ambient_eta": config.ambient.eta,
        "geometries": [geometry_to_dict(g) for g in config.geometries],
    }
    if config.camera is not None:
        data["camera"] = config.camera.to_dict()
    return data


def save_scene(config: SceneConfig, path: str | Path) -> None:
    """Write a scene description to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(config), f, indent=2)
