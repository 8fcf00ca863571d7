"""Preview module for rendered output.

Components:
    export: PNG export via Pillow and image comparison helpers

Example:
    >>> from pathtracer.preview import save_png
    >>> save_png(buffer, "output.png")
"""

from pathtracer.preview.export import (
    ImageSource,
    compute_rmse,
    image_to_array,
    load_png,
    radiance_to_uint8,
    save_png,
)

__all__ = [
    "ImageSource",
    "compute_rmse",
    "image_to_array",
    "load_png",
    "radiance_to_uint8",
    "save_png",
]
