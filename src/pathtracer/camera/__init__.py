"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera model

Camera responsibilities:
    - Build an orthonormal basis from position, look-at target, and up vector
    - Size the image plane from the field of view and sensor aspect ratio
    - Map continuous pixel coordinates (with jitter) to world-space rays
"""

from .pinhole import PinholeCamera

__all__ = [
    "PinholeCamera",
]
