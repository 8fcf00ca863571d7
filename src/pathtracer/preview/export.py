"""Image export utilities for rendered images.

This module provides functions for converting rendered buffers to arrays
and saving them to disk.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pathtracer.core.scheduler import ImageBuffer, render
    >>> from pathtracer.preview.export import save_png
    >>>
    >>> buffer = ImageBuffer(300, 200)
    >>> render(scene, camera, buffer)
    >>> save_png(buffer, "output.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pathtracer.core.scheduler import ImageBuffer

ImageSource = Union[ImageBuffer, npt.NDArray[np.uint8]]


def image_to_array(image: ImageSource) -> npt.NDArray[np.uint8]:
    """Get the (H, W, 3) uint8 array behind an image.

    Args:
        image: An ImageBuffer or an array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).

    Raises:
        ValueError: If an array does not have shape (H, W, 3).
    """
    if isinstance(image, ImageBuffer):
        return image.to_numpy()

    array = np.asarray(image)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Image array must have shape (H, W, 3), got {array.shape}")
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    return array


def radiance_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear radiance image to 8-bit RGB.

    Each channel is clamped to [0, 1] and scaled to [0, 255], truncating,
    the same mapping radiance_to_color applies per pixel.

    Args:
        image: Linear radiance array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    return (np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)


def save_png(image: ImageSource, filepath: str | Path) -> None:
    """Save an image as a PNG file.

    Args:
        image: An ImageBuffer or a uint8 array of shape (H, W, 3).
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If an array does not have shape (H, W, 3).
        OSError: If the file cannot be written.
    """
    pil_image = PILImage.fromarray(image_to_array(image))
    pil_image.save(filepath, format="PNG")


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG file back as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8).copy()


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
