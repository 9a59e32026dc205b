"""Image export utilities for rendered images.

This module turns the renderer's 8-bit grid into files and provides the
pixel-sink contract used by ``RasterRenderer.write_to``.

Supported formats (via Pillow, chosen by file suffix):
    - BMP (the original renderer's output format)
    - PNG, and anything else Pillow can write in RGB mode

Example:
    >>> from src.raycast.preview.export import save_image, unique_output_path
    >>> path = unique_output_path("image.bmp")  # image.bmp, image_1.bmp, ...
    >>> save_image(renderer.get_image_numpy(), path)
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


class PixelSink(Protocol):
    """Anything that accepts 8-bit pixels one at a time."""

    def write(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Store the color of pixel (x, y)."""
        ...


class PillowSink:
    """PixelSink backed by an RGB Pillow image.

    Attributes:
        image: The Pillow image being written.

    Example:
        >>> sink = PillowSink(320, 240)
        >>> renderer.write_to(sink)
        >>> sink.save("image.png")
    """

    def __init__(self, width: int, height: int) -> None:
        self.image = PILImage.new("RGB", (width, height))

    def write(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Set pixel (x, y); channels outside [0, 255] are clamped."""
        self.image.putpixel((x, y), (_clamp_channel(r), _clamp_channel(g), _clamp_channel(b)))

    def save(self, filepath: str | Path) -> None:
        """Save the image; the format follows the file suffix."""
        self.image.save(filepath)


def _clamp_channel(value: int) -> int:
    return max(0, min(255, int(value)))


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image on the 0-255 scale to uint8.

    Channels are clamped to [0, 255] before narrowing; NaN becomes 0.

    Args:
        image: Image array of shape (H, W, 3), nominally 0-255.

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    cleaned = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    return np.clip(cleaned, 0.0, 255.0).astype(np.uint8)


def save_image(image: npt.NDArray[np.generic], filepath: str | Path) -> None:
    """Save an (H, W, 3) image; the format follows the file suffix.

    Float arrays are clamped and narrowed with image_to_uint8 first.

    Args:
        image: The image to save.
        filepath: Output file path (e.g., "image.bmp" or "image.png").

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    if image.dtype != np.uint8:
        image = image_to_uint8(image)

    pil_image = PILImage.fromarray(image, mode="RGB")
    pil_image.save(filepath)


def unique_output_path(filepath: str | Path) -> Path:
    """Return filepath, or the first free variant with a numeric suffix.

    "image.bmp" becomes "image_1.bmp", "image_2.bmp", ... when earlier names
    are taken, so repeated renders never overwrite each other.

    Args:
        filepath: The preferred output path.

    Returns:
        A path that does not exist yet.
    """
    path = Path(filepath)
    if not path.exists():
        return path

    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value in channel units (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
