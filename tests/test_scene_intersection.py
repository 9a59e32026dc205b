"""Unit tests for scene-level intersection.

Tests cover:
- Primitive and light storage, counts and capacity
- Closest hit across spheres and triangles, independent of insertion order
- Lights are never intersected
- Color and material_id of the hit primitive
"""

import pytest
import taichi as ti


def _cast(origin=(0.0, 0.0, 0.0), direction=(0.0, 0.0, 1.0), legacy=False):
    """Run intersect_scene in a kernel and return the hit as a dict."""
    from src.raycast.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f64, shape=())
    color = ti.Vector.field(3, dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())
    inputs = ti.Vector.field(3, dtype=ti.f64, shape=2)

    @ti.kernel
    def test_kernel(legacy_roots: ti.i32):
        rec = intersect_scene(inputs[0], inputs[1], legacy_roots)
        hit[None] = rec.hit
        material_id[None] = rec.material_id
        distance[None] = rec.distance
        color[None] = rec.color
        normal[None] = rec.normal

    inputs[0] = list(origin)
    inputs[1] = list(direction)
    test_kernel(1 if legacy else 0)
    return {
        "hit": hit[None],
        "material_id": material_id[None],
        "distance": distance[None],
        "color": color[None].to_numpy().tolist(),
        "normal": normal[None].to_numpy().tolist(),
    }


class TestSceneStorage:
    """Tests for scene primitive storage and management."""

    def test_add_and_count(self):
        """Test that counts follow additions and clear_scene resets them."""
        from src.raycast.scene.intersection import (
            add_light,
            add_sphere,
            add_triangle,
            clear_scene,
            get_light_count,
            get_sphere_count,
            get_triangle_count,
        )

        assert add_sphere((0.0, 0.0, 10.0), 1.0, (255.0, 0.0, 0.0)) == 0
        assert add_sphere((0.0, 0.0, 20.0), 1.0, (0.0, 255.0, 0.0)) == 1
        assert add_triangle((0, 0, 5), (1, 0, 5), (0, 1, 5), (139.0, 69.0, 19.0)) == 0
        assert add_light((30.0, 30.0, 0.0), (255.0,) * 3, (255.0,) * 3) == 0

        assert get_sphere_count() == 2
        assert get_triangle_count() == 1
        assert get_light_count() == 1

        clear_scene()
        assert get_sphere_count() == 0
        assert get_triangle_count() == 0
        assert get_light_count() == 0

    def test_light_capacity(self):
        """Test that exceeding MAX_LIGHTS raises RuntimeError."""
        from src.raycast.scene.intersection import MAX_LIGHTS, add_light

        for i in range(MAX_LIGHTS):
            add_light((float(i), 0.0, 0.0), (255.0,) * 3, (255.0,) * 3)

        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light((0.0, 0.0, 0.0), (255.0,) * 3, (255.0,) * 3)

    def test_get_light(self):
        """Test reading a light back inside a kernel."""
        from src.raycast.scene.intersection import add_light, get_light

        position = ti.Vector.field(3, dtype=ti.f64, shape=())
        diffuse = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            light = get_light(1)
            position[None] = light.position
            diffuse[None] = light.diffuse

        add_light((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (1.0, 1.0, 1.0))
        add_light((30.0, 30.0, 0.0), (10.0, 20.0, 30.0), (255.0, 255.0, 255.0))
        test_kernel()

        assert position[None].to_numpy().tolist() == [30.0, 30.0, 0.0]
        assert diffuse[None].to_numpy().tolist() == [10.0, 20.0, 30.0]


class TestClosestHit:
    """Tests for closest-hit selection."""

    def test_empty_scene_misses(self):
        """Test that a scene without primitives reports no hit."""
        result = _cast()
        assert result["hit"] == 0
        assert result["material_id"] == -1

    @pytest.mark.parametrize("reverse", [False, True])
    def test_closest_sphere_wins_regardless_of_order(self, reverse):
        """Test that the nearer sphere is returned whatever the order."""
        from src.raycast.scene.intersection import add_sphere

        spheres = [
            ((0.0, 0.0, 50.0), 5.0, (255.0, 0.0, 0.0)),
            ((0.0, 0.0, 100.0), 5.0, (0.0, 255.0, 0.0)),
        ]
        if reverse:
            spheres.reverse()
        for center, radius, color in spheres:
            add_sphere(center, radius, color)

        result = _cast()
        assert result["hit"] == 1
        assert result["distance"] == pytest.approx(45.0)
        assert result["color"] == [255.0, 0.0, 0.0]

    def test_triangle_in_front_of_sphere(self):
        """Test that a nearer triangle occludes a sphere."""
        from src.raycast.scene.intersection import add_sphere, add_triangle

        add_sphere((0.0, 0.0, 50.0), 5.0, (255.0, 0.0, 0.0))
        add_triangle(
            (-10.0, -10.0, 20.0), (10.0, -10.0, 20.0), (0.0, 10.0, 20.0), (139.0, 69.0, 19.0)
        )

        result = _cast()
        assert result["hit"] == 1
        assert result["distance"] == pytest.approx(20.0)
        assert result["color"] == [139.0, 69.0, 19.0]
        assert result["normal"] == pytest.approx([0.0, 0.0, 1.0])

    def test_sphere_in_front_of_triangle(self):
        """Test that a nearer sphere occludes a triangle."""
        from src.raycast.scene.intersection import add_sphere, add_triangle

        add_triangle(
            (-10.0, -10.0, 80.0), (10.0, -10.0, 80.0), (0.0, 10.0, 80.0), (139.0, 69.0, 19.0)
        )
        add_sphere((0.0, 0.0, 50.0), 5.0, (255.0, 0.0, 0.0))

        result = _cast()
        assert result["distance"] == pytest.approx(45.0)
        assert result["color"] == [255.0, 0.0, 0.0]

    def test_lights_are_not_intersected(self):
        """Test that a light on the ray path is never hit."""
        from src.raycast.scene.intersection import add_light

        add_light((0.0, 0.0, 10.0), (255.0,) * 3, (255.0,) * 3)

        result = _cast()
        assert result["hit"] == 0

    def test_material_id_propagates(self):
        """Test that the hit carries the primitive's material id."""
        from src.raycast.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 50.0), 5.0, (255.0, 0.0, 0.0), material_id=3)

        result = _cast()
        assert result["material_id"] == 3

    def test_legacy_roots_report_sphere_behind(self):
        """Test that legacy root selection reports spheres behind the origin."""
        from src.raycast.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -50.0), 5.0, (255.0, 0.0, 0.0))

        assert _cast(legacy=False)["hit"] == 0
        legacy = _cast(legacy=True)
        assert legacy["hit"] == 1
        assert legacy["distance"] == pytest.approx(55.0)
