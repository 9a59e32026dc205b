"""Fixed pinhole camera with a flat viewport for primary ray generation.

The camera looks down +z. A viewport of world-space width VW and height VH
(derived as (H / W) * VW unless given explicitly) sits one focal length in
front of the camera, centered on its forward axis. Each pixel maps to one
viewport point:

    x = top_left.x + px * pixel_width
    y = top_left.y + py * pixel_height
    z = camera.z + focal_length

Rays go from the camera through that point, normalized. Pixel rows grow with
world y, so +y points down the image.

Pixels must be square: the horizontal and vertical world-space step sizes
have to agree within PIXEL_ASPECT_TOLERANCE. ``Viewport.from_config`` checks
this before any field is written.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.config import RenderConfig
    >>> from src.raycast.camera.viewport import Viewport, setup_camera, get_ray
    >>> viewport = Viewport.from_config(RenderConfig(width=200, height=100))
    >>> setup_camera(viewport)
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(100, 50)  # Ray through the viewport center
"""

from dataclasses import dataclass

import taichi as ti

from src.raycast.config import RenderConfig
from src.raycast.core.ray import Ray, ray_through_points
from src.raycast.core.vector import vec3

# =============================================================================
# Viewport Geometry
# =============================================================================


@dataclass(frozen=True)
class Viewport:
    """Precomputed viewport geometry for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        camera_position: Camera location (x, y, z).
        focal_length: Distance from camera to the viewport plane.
        viewport_width: World-space viewport width.
        viewport_height: World-space viewport height.
        top_left: World (x, y) of pixel (0, 0).
        pixel_width: World-space width of one pixel.
        pixel_height: World-space height of one pixel.
    """

    width: int
    height: int
    camera_position: tuple[float, float, float]
    focal_length: float
    viewport_width: float
    viewport_height: float
    top_left: tuple[float, float]
    pixel_width: float
    pixel_height: float

    @classmethod
    def from_config(cls, config: RenderConfig) -> "Viewport":
        """Compute the viewport for a configuration.

        Args:
            config: The render configuration.

        Returns:
            The validated Viewport.

        Raises:
            ValueError: If the configuration is invalid, in particular if
                the pixel steps are not square.
        """
        config.validate()

        cam = config.camera_position
        vw = config.viewport_width
        vh = config.effective_viewport_height

        return cls(
            width=config.width,
            height=config.height,
            camera_position=cam,
            focal_length=config.focal_length,
            viewport_width=vw,
            viewport_height=vh,
            top_left=(cam[0] - vw / 2.0, cam[1] - vh / 2.0),
            pixel_width=vw / config.width,
            pixel_height=vh / config.height,
        )

    @property
    def plane_z(self) -> float:
        """World z of the viewport plane."""
        return self.camera_position[2] + self.focal_length

    def pixel_to_world(self, px: float, py: float) -> tuple[float, float, float]:
        """World-space viewport point for a pixel (Python-side, for checks)."""
        return (
            self.top_left[0] + px * self.pixel_width,
            self.top_left[1] + py * self.pixel_height,
            self.plane_z,
        )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_top_left = ti.Vector.field(3, dtype=ti.f64, shape=())
_pixel_size = ti.Vector.field(2, dtype=ti.f64, shape=())


def setup_camera(viewport: Viewport) -> None:
    """Copy viewport geometry into the camera fields.

    Must be called before rendering, from Python (not from a kernel).

    Args:
        viewport: The validated viewport.
    """
    _camera_position[None] = list(viewport.camera_position)
    _viewport_top_left[None] = [viewport.top_left[0], viewport.top_left[1], viewport.plane_z]
    _pixel_size[None] = [viewport.pixel_width, viewport.pixel_height]


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_viewport_point(pixel_x: ti.i32, pixel_y: ti.i32) -> vec3:
    """World-space viewport point for pixel (pixel_x, pixel_y)."""
    top_left = _viewport_top_left[None]
    step = _pixel_size[None]
    return vec3(
        top_left.x + step.x * ti.cast(pixel_x, ti.f64),
        top_left.y + step.y * ti.cast(pixel_y, ti.f64),
        top_left.z,
    )


@ti.func
def get_ray(pixel_x: ti.i32, pixel_y: ti.i32) -> Ray:
    """Generate the primary ray for a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top of the image).

    Returns:
        A Ray from the camera through the pixel's viewport point, with a
        normalized direction.
    """
    return ray_through_points(_camera_position[None], get_viewport_point(pixel_x, pixel_y))


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, top_left (x, y, z) and pixel_size (w, h).
    """
    origin = _camera_position[None]
    top_left = _viewport_top_left[None]
    pixel = _pixel_size[None]
    return {
        "origin": (float(origin[0]), float(origin[1]), float(origin[2])),
        "top_left": (float(top_left[0]), float(top_left[1]), float(top_left[2])),
        "pixel_size": (float(pixel[0]), float(pixel[1])),
    }
