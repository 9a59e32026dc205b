"""Per-pixel render kernels and the 8-bit render target.

For every pixel the renderer:
1. Builds the primary ray through the pixel's viewport point.
2. Finds the closest hit among all spheres and triangles.
3. Shades the hit, or returns the background color when nothing was hit.
4. Clamps the color to [0, 255], narrows it to 8-bit channels and writes it
   to the render target.

Pixels are independent and the scene is read-only during a render, so the
pixel loop runs in parallel without coordination.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.config import RenderConfig
    >>> from src.raycast.core.renderer import configure, render_rows, get_image_numpy
    >>> config = RenderConfig(width=256, height=256)
    >>> configure(config)
    >>> render_rows(0, 256)
    >>> image = get_image_numpy()  # (256, 256, 3) uint8
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.raycast.camera.viewport import Viewport, get_ray, setup_camera
from src.raycast.config import RenderConfig
from src.raycast.core.color import color3, to_byte
from src.raycast.core.ray import Ray, make_ray
from src.raycast.core.shading import get_shading_params, setup_shading, shade
from src.raycast.core.vector import vec3
from src.raycast.scene.intersection import intersect_scene

# =============================================================================
# Render State
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2560
MAX_IMAGE_HEIGHT = 2560

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# 8-bit RGB output, indexed [x, y] with y = 0 at the top of the image
_pixels = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_background_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_legacy_sphere_roots = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the render target.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Reset every pixel of the render target to zero."""
    _pixels.fill(0)


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call configure() first.")


def configure(config: RenderConfig) -> Viewport:
    """Validate a configuration and load it into every Taichi field.

    This is the single startup step before rendering: it checks the
    configuration (including square pixels), sets up the camera, the
    shading parameters and the render target.

    Args:
        config: The render configuration.

    Returns:
        The validated Viewport.

    Raises:
        ValueError: If the configuration is invalid.
    """
    viewport = Viewport.from_config(config)
    # Size check before touching any field
    if config.width > MAX_IMAGE_WIDTH or config.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({config.width}x{config.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    setup_camera(viewport)
    setup_shading(config)
    _background_color[None] = list(config.background_color)
    _legacy_sphere_roots[None] = int(config.legacy_sphere_roots)
    setup_render_target(config.width, config.height)
    return viewport


# =============================================================================
# Ray Dispatch
# =============================================================================


@ti.func
def send_ray(ray: Ray) -> color3:
    """Trace a single ray through the scene and return its color.

    Args:
        ray: The ray to trace, with normalized direction.

    Returns:
        The shaded color of the closest hit, or the background color if the
        ray hits nothing. Not clamped.
    """
    color = _background_color[None]
    hit = intersect_scene(ray.origin, ray.direction, _legacy_sphere_roots[None])
    if hit.hit == 1:
        color = shade(hit, get_shading_params())
    return color


@ti.func
def render_pixel_impl(pixel_x: ti.i32, pixel_y: ti.i32) -> color3:
    """Compute the unclamped color of one pixel."""
    return send_ray(get_ray(pixel_x, pixel_y))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32):
    """Render pixel rows [row_start, row_end) into the render target."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _pixels[i, j] = to_byte(render_pixel_impl(i, j))


@ti.kernel
def _render_single_pixel(pixel_x: ti.i32, pixel_y: ti.i32) -> vec3:
    """Render one pixel without clamping, for testing and debugging."""
    return render_pixel_impl(pixel_x, pixel_y)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace an arbitrary ray without clamping."""
    return send_ray(make_ray(origin, direction))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of pixel rows.

    Args:
        row_start: First row to render (inclusive).
        row_end: Last row to render (exclusive), clipped to the image height.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    row_start = max(0, row_start)
    row_end = min(height, row_end)
    if row_start < row_end:
        _render_rows(row_start, row_end, width)


def render_image() -> None:
    """Render every pixel of the image.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _, height = get_image_dimensions()
    render_rows(0, height)


def render_pixel(pixel_x: int, pixel_y: int) -> tuple[float, float, float]:
    """Render a single pixel and return its unclamped color.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values on the 0-255 scale.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(pixel_x, pixel_y)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace one ray through the configured scene and shading state.

    Args:
        origin: The ray origin.
        direction: The ray direction; it should be normalized.

    Returns:
        Tuple of (R, G, B) color values on the 0-255 scale, unclamped.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()

    color = _trace_single_ray(vec3(*origin), vec3(*direction))
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.uint8]:
    """Get the rendered image as a NumPy array.

    Returns:
        Array of shape (height, width, 3) with dtype uint8, row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _pixels.to_numpy()
    image = full_image[:width, :height, :]

    # (width, height, 3) -> (height, width, 3)
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2))).astype(np.uint8)
