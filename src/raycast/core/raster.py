"""Raster driver that renders an image in bands of rows.

This module wraps the render kernels in a small class that:
- Validates and loads the configuration once, at construction
- Renders the image in row bands so progress can be reported
- Exposes the result as a NumPy array or writes it to a pixel sink

Rendering is a pure function of the scene and configuration. Calling
render() twice produces the same image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.config import RenderConfig
    >>> from src.raycast.core.raster import RasterRenderer
    >>> from src.raycast.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene()
    >>> renderer = RasterRenderer(RenderConfig(width=500, height=500))
    >>> renderer.render(rows_per_batch=50)
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.raycast.config import RenderConfig
from src.raycast.core.renderer import (
    clear_render_target,
    configure,
    get_image_numpy,
    render_pixel,
    render_rows,
)

if TYPE_CHECKING:
    from src.raycast.camera.viewport import Viewport
    from src.raycast.preview.export import PixelSink

# Type alias for progress callback
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]


class RasterRenderer:
    """Renders the current scene with a fixed configuration.

    Constructing the renderer validates the configuration (failing fast on
    non-square pixels) and loads it into the Taichi fields. The scene is
    read from the scene storage at render time and must not change while
    rendering.

    Attributes:
        config: The render configuration.
        viewport: The validated viewport geometry.
    """

    def __init__(self, config: RenderConfig) -> None:
        """Initialize the renderer.

        Args:
            config: The render configuration.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config
        self.viewport: Viewport = configure(config)
        self._rows_rendered = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.config.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.config.height

    @property
    def rows_rendered(self) -> int:
        """Number of rows completed by the last (or current) render."""
        return self._rows_rendered

    @property
    def is_complete(self) -> bool:
        """True once every row has been rendered."""
        return self._rows_rendered >= self.height

    def reset(self) -> None:
        """Clear the render target so the next render starts from black."""
        clear_render_target()
        self._rows_rendered = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the whole image.

        Args:
            rows_per_batch: Rows rendered per kernel launch. None renders the
                whole image in one launch.
            callback: Optional function called after each batch with
                (rows_completed, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"scanline: {done}/{total}")
            >>> renderer.render(rows_per_batch=100, callback=progress)
        """
        for done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        Args:
            rows_per_batch: Rows rendered per kernel launch. None renders the
                whole image in one launch.

        Yields:
            Tuple of (rows_completed, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is None:
            rows_per_batch = self.height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._rows_rendered = 0
        while self._rows_rendered < self.height:
            end = min(self._rows_rendered + rows_per_batch, self.height)
            render_rows(self._rows_rendered, end)
            self._rows_rendered = end
            yield (self._rows_rendered, self.height)

    def render_pixel(self, pixel_x: int, pixel_y: int) -> tuple[float, float, float]:
        """Compute one pixel's unclamped color without touching the target."""
        return render_pixel(pixel_x, pixel_y)

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an (height, width, 3) uint8 array."""
        return get_image_numpy()

    def write_to(self, sink: PixelSink) -> None:
        """Send every pixel to a sink through its write(x, y, r, g, b) method.

        Args:
            sink: Any object implementing the PixelSink protocol.
        """
        image = self.get_image_numpy()
        for y in range(self.height):
            for x in range(self.width):
                r, g, b = image[y, x]
                sink.write(x, y, int(r), int(g), int(b))

    def save_image(self, filepath: str) -> None:
        """Save the rendered image; the format follows the file suffix.

        Args:
            filepath: Path to save the image (e.g., "image.bmp").
        """
        from src.raycast.preview.export import save_image

        save_image(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"RasterRenderer(width={self.width}, height={self.height}, "
            f"mode={self.config.color_mode.name}, rows={self.rows_rendered})"
        )
