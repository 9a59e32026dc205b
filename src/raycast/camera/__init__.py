"""Camera module for primary ray generation.

Components:
    viewport: Fixed pinhole camera looking down +z through a flat viewport

Pixel (0, 0) maps to the viewport's top-left corner; rows grow with world y.
"""

from .viewport import (
    Viewport,
    get_camera_info,
    get_ray,
    get_viewport_point,
    setup_camera,
)

__all__ = [
    "Viewport",
    "setup_camera",
    "get_ray",
    "get_viewport_point",
    "get_camera_info",
]
