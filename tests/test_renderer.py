"""Unit tests for the render kernels and render target.

Tests cover:
- Configuration and render target setup errors
- Background on miss
- Image orientation (row 0 at the top, +y downward)
- 8-bit clamping at the render-target write
- Partial row bands
"""

import numpy as np
import pytest


class TestRenderTarget:
    """Tests for render target management."""

    def test_render_before_setup_raises(self):
        """Test that rendering without configure() raises RuntimeError."""
        from src.raycast.core.renderer import get_image_numpy, render_image, render_pixel

        with pytest.raises(RuntimeError, match="not set up"):
            render_image()
        with pytest.raises(RuntimeError, match="not set up"):
            render_pixel(0, 0)
        with pytest.raises(RuntimeError, match="not set up"):
            get_image_numpy()

    def test_oversized_image_rejected(self):
        """Test that images beyond the preallocated target raise ValueError."""
        from src.raycast.config import RenderConfig
        from src.raycast.core.renderer import configure

        with pytest.raises(ValueError, match="exceed maximum"):
            configure(RenderConfig(width=3000, height=3000))

    def test_setup_render_target_validates(self):
        """Test direct render target setup validation."""
        from src.raycast.core.renderer import get_image_dimensions, setup_render_target

        with pytest.raises(ValueError, match="must be positive"):
            setup_render_target(0, 10)

        setup_render_target(64, 32)
        assert get_image_dimensions() == (64, 32)

    def test_configure_returns_viewport(self, small_config):
        """Test that configure() returns the validated viewport."""
        from src.raycast.core.renderer import configure

        viewport = configure(small_config)
        assert (viewport.width, viewport.height) == (40, 40)
        assert viewport.pixel_width == pytest.approx(0.1)

    def test_invalid_config_leaves_target_unset(self):
        """Test that validation happens before any field is written."""
        from src.raycast.config import RenderConfig
        from src.raycast.core.renderer import configure, render_image

        with pytest.raises(ValueError, match="not square"):
            configure(RenderConfig(width=40, height=20, viewport_height=4.0))
        with pytest.raises(RuntimeError):
            render_image()


class TestRenderImage:
    """Tests for whole-image rendering."""

    def test_empty_scene_is_black(self, small_config):
        """Test that every pixel of an empty scene is the black background."""
        from src.raycast.core.renderer import configure, get_image_numpy, render_image

        configure(small_config)
        render_image()
        image = get_image_numpy()

        assert image.shape == (40, 40, 3)
        assert image.dtype == np.uint8
        assert not image.any()

    def test_center_pixel_normals(self, small_config):
        """Test the unclamped and stored value of the center pixel."""
        from src.raycast.core.renderer import (
            configure,
            get_image_numpy,
            render_image,
            render_pixel,
        )
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 50.0), 5.0, "red")
        configure(small_config)

        assert render_pixel(20, 20) == pytest.approx((127.5, 127.5, 0.0))

        render_image()
        image = get_image_numpy()
        assert image[20, 20].tolist() == [127, 127, 0]

    def test_positive_y_is_down(self):
        """Test that a sphere at +y appears in the lower half of the image."""
        from src.raycast.config import ColorMode, RenderConfig
        from src.raycast.core.renderer import configure, get_image_numpy, render_image
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        # Projects to viewport y = 1.0, i.e. row 30 of 40
        scene.add_sphere((0.0, 9.0, 80.0), 4.0, "red")
        configure(
            RenderConfig(width=40, height=40, color_mode=ColorMode.STATIC_COLOR, static_color="red")
        )
        render_image()
        image = get_image_numpy()

        assert image[30, 20].tolist() == [255, 0, 0]
        assert image[10, 20].tolist() == [0, 0, 0]

    def test_out_of_range_colors_are_clamped(self, small_config):
        """Test that channels outside [0, 255] are clamped when stored."""
        from src.raycast.config import ColorMode
        from src.raycast.core.renderer import (
            configure,
            get_image_numpy,
            render_image,
            render_pixel,
        )
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 50.0), 5.0, "red")
        small_config.color_mode = ColorMode.STATIC_COLOR
        small_config.static_color = (300.0, -20.0, 128.7)
        configure(small_config)

        assert render_pixel(20, 20) == pytest.approx((300.0, -20.0, 128.7))

        render_image()
        assert get_image_numpy()[20, 20].tolist() == [255, 0, 128]

    def test_render_rows_band(self, small_config):
        """Test that render_rows only writes the requested rows."""
        from src.raycast.config import ColorMode
        from src.raycast.core.renderer import configure, get_image_numpy, render_rows
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        # Large enough to cover the whole viewport
        scene.add_sphere((0.0, 0.0, 30.0), 20.0, "white")
        small_config.color_mode = ColorMode.STATIC_COLOR
        small_config.static_color = (255.0, 255.0, 255.0)
        configure(small_config)

        render_rows(10, 20)
        image = get_image_numpy()

        assert image[10:20].all()
        assert not image[:10].any()
        assert not image[20:].any()

    def test_render_rows_clips_to_height(self, small_config):
        """Test that bands past the image are clipped rather than failing."""
        from src.raycast.core.renderer import configure, render_rows

        configure(small_config)
        render_rows(30, 1000)
        render_rows(50, 60)
