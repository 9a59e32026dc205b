"""Unit tests for the shading engine.

Tests cover:
- Normal-to-color mapping
- Distance fade boundaries
- Color mode dispatch
- Phong lighting terms, back lighting and per-primitive materials
"""

import pytest
import taichi as ti

# Hit geometry used by the lighting tests: a sphere straight ahead of the
# camera, hit at (0, 0, 45) with normal (0, 0, -1) and distance 55.
SPHERE_CENTER = (0.0, 0.0, 50.0)
SPHERE_RADIUS = 5.0
SURFACE = (100.0, 100.0, 100.0)
CAMERA = (0.0, 0.0, -10.0)
FORWARD = (0.0, 0.0, 1.0)


def _light_config(**overrides):
    from src.raycast.config import ColorMode, RenderConfig

    params = {"width": 20, "height": 20, "color_mode": ColorMode.LIGHT}
    params.update(overrides)
    return RenderConfig(**params)


class TestColorHelpers:
    """Tests for the per-hit color functions."""

    def test_normal_to_color(self):
        """Test that (0, 0, -1) maps to (127.5, 127.5, 0)."""
        from src.raycast.core.shading import normal_to_color
        from src.raycast.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            result[0] = normal_to_color(vec3(0.0, 0.0, -1.0))
            result[1] = normal_to_color(vec3(1.0, 0.0, 0.0))
            result[2] = normal_to_color(vec3(0.0, -1.0, 0.0))

        test_kernel()
        assert result[0].to_numpy().tolist() == [127.5, 127.5, 0.0]
        assert result[1].to_numpy().tolist() == [255.0, 127.5, 127.5]
        assert result[2].to_numpy().tolist() == [127.5, 0.0, 127.5]

    @pytest.mark.parametrize(
        "distance, expected",
        [
            (10.0, [200.0, 100.0, 50.0]),
            (100.0, [200.0, 100.0, 50.0]),
            (250.0, [100.0, 50.0, 25.0]),
            (400.0, [0.0, 0.0, 0.0]),
            (1000.0, [0.0, 0.0, 0.0]),
        ],
    )
    def test_apply_fade(self, distance, expected):
        """Test fade: unchanged up to fade_start, black from fade_end."""
        from src.raycast.core.shading import apply_fade
        from src.raycast.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(d: ti.f64):
            result[None] = apply_fade(vec3(200.0, 100.0, 50.0), d, 100.0, 400.0)

        test_kernel(distance)
        assert result[None].to_numpy().tolist() == pytest.approx(expected)

    def test_setup_shading_color_mode(self):
        """Test that setup_shading stores the color mode."""
        from src.raycast.config import ColorMode, RenderConfig
        from src.raycast.core.shading import get_color_mode, setup_shading

        setup_shading(RenderConfig(color_mode="static-color"))
        assert get_color_mode() is ColorMode.STATIC_COLOR


class TestColorModes:
    """Tests for color mode dispatch through trace_ray."""

    def test_static_color(self):
        """Test that STATIC_COLOR ignores the hit surface."""
        from src.raycast.config import ColorMode
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        configure(_light_config(color_mode=ColorMode.STATIC_COLOR, static_color="yellow"))

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((255.0, 255.0, 0.0))

    def test_normals(self):
        """Test that NORMALS maps the facing normal to (127.5, 127.5, 0)."""
        from src.raycast.config import ColorMode
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        configure(_light_config(color_mode=ColorMode.NORMALS))

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((127.5, 127.5, 0.0))

    def test_miss_returns_background(self):
        """Test that a miss returns the background color unshaded."""
        from src.raycast.core.renderer import configure, trace_ray

        configure(_light_config(background_color=(10.0, 20.0, 30.0)))

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((10.0, 20.0, 30.0))

    def test_fade_applies_to_every_mode(self):
        """Test that a distant hit is faded to black."""
        from src.raycast.config import ColorMode
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere((0.0, 0.0, 500.0), 5.0, SURFACE)
        configure(_light_config(color_mode=ColorMode.STATIC_COLOR))

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((0.0, 0.0, 0.0))


class TestPhongLighting:
    """Tests for the LIGHT color mode."""

    def test_ambient_only_without_lights(self):
        """Test that with no lights only the ambient term remains."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        configure(_light_config())

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((30.0, 30.0, 30.0))

    def test_head_on_light(self):
        """Test diffuse, specular and ambient for a light at the camera."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        scene.add_light(CAMERA, "white", "white")
        configure(_light_config())

        # kd * surface + 255 * (ks * 1) ** shininess + ka * surface
        expected = 100.0 * 0.5 + 255.0 * (0.2**0.1) + 100.0 * 0.3
        assert trace_ray(CAMERA, FORWARD) == pytest.approx((expected,) * 3)

    def test_lights_accumulate(self):
        """Test that two identical lights double the light-dependent terms."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        scene.add_light(CAMERA, "white", "white")
        scene.add_light(CAMERA, "white", "white")
        configure(_light_config())

        expected = 2.0 * (100.0 * 0.5 + 255.0 * (0.2**0.1)) + 100.0 * 0.3
        assert trace_ray(CAMERA, FORWARD) == pytest.approx((expected,) * 3)

    def test_light_color_modulates_diffuse(self):
        """Test relative multiplication of surface and light colors."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, (255.0, 0.0, 255.0))
        scene.add_light(CAMERA, (100.0, 100.0, 0.0), "black")
        configure(_light_config(specular=0.0, ambient=0.0))

        # (surface / 255) * light * kd per channel
        assert trace_ray(CAMERA, FORWARD) == pytest.approx((50.0, 0.0, 0.0))

    def test_back_lighting_clamped_by_default(self):
        """Test that a light behind the surface adds nothing."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        scene.add_light((0.0, 0.0, 100.0), "white", "white")
        configure(_light_config())

        assert trace_ray(CAMERA, FORWARD) == pytest.approx((30.0, 30.0, 30.0))

    def test_back_lighting_subtracts_when_unclamped(self):
        """Test that without clamping a light behind the surface darkens it."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE)
        scene.add_light((0.0, 0.0, 100.0), "white", "white")
        configure(_light_config(clamp_back_lighting=False))

        # -kd * surface + ka * surface; the reflection points away from the viewer
        assert trace_ray(CAMERA, FORWARD) == pytest.approx((-20.0, -20.0, -20.0))

    def test_material_overrides_global_coefficients(self):
        """Test that a primitive's material replaces the global constants."""
        from src.raycast.core.renderer import configure, trace_ray
        from src.raycast.scene.manager import SceneManager

        scene = SceneManager()
        matte = scene.add_material(ambient=1.0, diffuse=0.25, specular=0.0, shininess=1.0)
        scene.add_sphere(SPHERE_CENTER, SPHERE_RADIUS, SURFACE, material_id=matte)
        scene.add_light(CAMERA, "white", "white")
        configure(_light_config())

        expected = 100.0 * 0.25 + 100.0 * 1.0
        assert trace_ray(CAMERA, FORWARD) == pytest.approx((expected,) * 3)
