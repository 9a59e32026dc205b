"""Preview module for output and visualization.

Components:
    export: Pixel sinks and Pillow-based image export (BMP, PNG, ...)
    display: Matplotlib-based preview and comparison

Example:
    >>> from src.raycast.preview import save_image, unique_output_path
    >>> from src.raycast.core.raster import RasterRenderer
    >>>
    >>> renderer = RasterRenderer(config)
    >>> renderer.render()
    >>> save_image(renderer.get_image_numpy(), unique_output_path("image.bmp"))
"""

from src.raycast.preview.display import difference_image, show_comparison, show_preview
from src.raycast.preview.export import (
    PillowSink,
    PixelSink,
    compute_rmse,
    image_to_uint8,
    save_image,
    unique_output_path,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    "difference_image",
    # Export functions
    "PixelSink",
    "PillowSink",
    "save_image",
    "image_to_uint8",
    "unique_output_path",
    "compute_rmse",
]
