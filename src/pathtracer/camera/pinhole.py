"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that maps continuous pixel
coordinates to world-space primary rays. The camera supports:
- Look-at positioning (position, look_at, up)
- Field of view specification (radians)
- Arbitrary sensor sizes in pixels
- Sub-pixel coordinates for jittered anti-aliasing

The camera builds a right-handed orthonormal basis once at construction:
- forward: normalize(look_at - position)
- right: normalize(forward x up)
- true_up: right x forward

Camera space looks down -z with +x right and +y up. The image plane has its
longer side fixed at 2 units and sits at distance
(half the shorter side) / tan(fov / 2), so the field of view spans the
shorter image axis.

Caller contract: up must not be parallel to the view direction; the basis is
undefined otherwise and this is not checked.

Example:
    >>> import math
    >>> from pathtracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(
    ...     position=(0.0, 0.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     fov=math.radians(60.0),
    ...     width=320,
    ...     height=240,
    ... )
    >>> ray = camera.get_ray(160.0, 120.0)  # Ray through the image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt

from pathtracer.core.ray import Ray, Vec3, as_vec3, cross, make_ray, normalize

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True, eq=False)
class PinholeCamera:
    """A pinhole (perspective) camera.

    Immutable after construction; safe to share between render workers.

    Attributes:
        position: Camera position in world space.
        look_at: Point the camera is looking at in world space.
        up: Up direction for camera orientation (not parallel to the view).
        fov: Field of view in radians across the shorter image axis.
        width: Sensor (image) width in pixels.
        height: Sensor (image) height in pixels.

    Raises:
        ValueError: If the sensor size is not positive, the field of view is
            outside (0, pi), or position equals look_at.
    """

    position: Vec3
    look_at: Vec3
    up: Vec3
    fov: float
    width: int
    height: int

    # Derived once in __post_init__
    forward: Vec3 = field(init=False, repr=False)
    right: Vec3 = field(init=False, repr=False)
    true_up: Vec3 = field(init=False, repr=False)
    cam_to_world: npt.NDArray[np.float64] = field(init=False, repr=False)
    plane_width: float = field(init=False, repr=False)
    plane_height: float = field(init=False, repr=False)
    plane_distance: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Sensor dimensions must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view must be in (0, pi) radians, got {self.fov}")

        position = as_vec3(self.position)
        look_at = as_vec3(self.look_at)
        up = as_vec3(self.up)
        if np.array_equal(position, look_at):
            raise ValueError("Camera position and look_at must differ")

        forward = normalize(look_at - position)
        right = normalize(cross(forward, up))
        true_up = cross(right, forward)

        # Columns: camera +x, +y, +z axes and the origin, in world space
        cam_to_world = np.identity(4, dtype=np.float64)
        cam_to_world[:3, 0] = right
        cam_to_world[:3, 1] = true_up
        cam_to_world[:3, 2] = -forward
        cam_to_world[:3, 3] = position

        # Longer side of the image plane is 2 units; fov spans the shorter side
        if self.width >= self.height:
            plane_width = 2.0
            plane_height = 2.0 * self.height / self.width
            plane_distance = 0.5 * plane_height / math.tan(self.fov / 2.0)
        else:
            plane_height = 2.0
            plane_width = 2.0 * self.width / self.height
            plane_distance = 0.5 * plane_width / math.tan(self.fov / 2.0)

        for arr in (position, look_at, up, forward, right, true_up, cam_to_world):
            arr.setflags(write=False)

        object.__setattr__(self, "position", position)
        object.__setattr__(self, "look_at", look_at)
        object.__setattr__(self, "up", up)
        object.__setattr__(self, "fov", float(self.fov))
        object.__setattr__(self, "forward", forward)
        object.__setattr__(self, "right", right)
        object.__setattr__(self, "true_up", true_up)
        object.__setattr__(self, "cam_to_world", cam_to_world)
        object.__setattr__(self, "plane_width", plane_width)
        object.__setattr__(self, "plane_height", plane_height)
        object.__setattr__(self, "plane_distance", plane_distance)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height of the sensor."""
        return self.width / self.height

    # =========================================================================
    # Ray Generation
    # =========================================================================

    def pixel_to_camera(self, col: float, row: float) -> Vec3:
        """Map a continuous pixel coordinate to a point on the camera-space image plane.

        Column 0 is the left edge and row 0 the top edge of the image.
        """
        units_per_col = self.plane_width / self.width
        units_per_row = self.plane_height / self.height
        return np.array(
            (
                units_per_col * col - self.plane_width / 2.0,
                self.plane_height / 2.0 - units_per_row * row,
                -self.plane_distance,
            ),
            dtype=np.float64,
        )

    def pixel_to_world(self, col: float, row: float) -> Vec3:
        """Map a continuous pixel coordinate to a world-space image-plane point.

        Args:
            col: Horizontal pixel coordinate, including any sub-pixel jitter.
            row: Vertical pixel coordinate (0 = top), including jitter.

        Returns:
            The point on the image plane in world space.
        """
        cam_pt = self.pixel_to_camera(col, row)
        return self.cam_to_world[:3, :3] @ cam_pt + self.cam_to_world[:3, 3]

    def get_ray(self, col: float, row: float) -> Ray:
        """Generate a primary ray through a continuous pixel coordinate.

        Args:
            col: Horizontal pixel coordinate, including any sub-pixel jitter.
            row: Vertical pixel coordinate (0 = top), including jitter.

        Returns:
            A ray from the camera position through the image-plane point,
            direction normalized, travelling in the ambient medium.
        """
        return make_ray(self.position, self.pixel_to_world(col, row) - self.position)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Serialize the camera configuration (fov in degrees)."""
        return {
            "position": self.position.tolist(),
            "look_at": self.look_at.tolist(),
            "up": self.up.tolist(),
            "fov": math.degrees(self.fov),
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PinholeCamera:
        """Create a camera from a dictionary (fov in degrees)."""
        return cls(
            position=data["position"],
            look_at=data["look_at"],
            up=data["up"],
            fov=math.radians(data["fov"]),
            width=int(data["width"]),
            height=int(data["height"]),
        )

    def __repr__(self) -> str:
        return (
            f"PinholeCamera(position={self.position.tolist()}, "
            f"look_at={self.look_at.tolist()}, up={self.up.tolist()}, "
            f"fov={math.degrees(self.fov):.1f}deg, size={self.width}x{self.height})"
        )
