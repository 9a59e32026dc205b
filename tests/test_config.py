"""Unit tests for RenderConfig and ColorMode."""

import pytest


class TestColorMode:
    """Tests for parsing color modes."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("normals", "NORMALS"),
            ("LIGHT", "LIGHT"),
            ("static-color", "STATIC_COLOR"),
            ("Static_Color", "STATIC_COLOR"),
            (2, "LIGHT"),
        ],
    )
    def test_parse(self, value, expected):
        """Test names, hyphenated names and integer values."""
        from src.raycast.config import ColorMode

        assert ColorMode.parse(value) is ColorMode[expected]

    def test_parse_unknown(self):
        """Test that unknown names raise ValueError."""
        from src.raycast.config import ColorMode

        with pytest.raises(ValueError, match="Unknown color mode"):
            ColorMode.parse("phong")


class TestRenderConfigDefaults:
    """Tests for the default configuration."""

    def test_defaults(self):
        """Test the defaults of the original demo render."""
        from src.raycast.config import ColorMode, RenderConfig

        config = RenderConfig()

        assert (config.width, config.height) == (2500, 2500)
        assert config.focal_length == 10.0
        assert config.camera_position == (0.0, 0.0, -10.0)
        assert config.viewport_width == 4.0
        assert config.effective_viewport_height == 4.0
        assert (config.fade_start, config.fade_end) == (100.0, 400.0)
        assert (config.ambient, config.diffuse, config.specular) == (0.3, 0.5, 0.2)
        assert config.shininess == 0.1
        assert config.color_mode is ColorMode.NORMALS
        assert config.background_color == (0.0, 0.0, 0.0)
        assert config.legacy_sphere_roots is False
        assert config.clamp_back_lighting is True
        config.validate()

    def test_named_colors_are_parsed(self):
        """Test that color names become float triples."""
        from src.raycast.config import RenderConfig

        config = RenderConfig(static_color="purple", background_color=[1, 2, 3])
        assert config.static_color == (255.0, 0.0, 255.0)
        assert config.background_color == (1.0, 2.0, 3.0)

    def test_derived_viewport_height(self):
        """Test that viewport height follows the aspect ratio."""
        from src.raycast.config import RenderConfig

        config = RenderConfig(width=400, height=200, viewport_width=4.0)
        assert config.effective_viewport_height == 2.0


class TestRenderConfigValidation:
    """Tests for configuration validation."""

    def test_non_square_pixels_rejected(self):
        """Test that an explicit viewport height must keep pixels square."""
        from src.raycast.config import RenderConfig

        config = RenderConfig(width=400, height=200, viewport_width=4.0, viewport_height=4.0)
        with pytest.raises(ValueError, match="not square"):
            config.validate()

    def test_nearly_square_pixels_accepted(self):
        """Test that differences within the tolerance are accepted."""
        from src.raycast.config import RenderConfig

        RenderConfig(width=400, height=200, viewport_width=4.0, viewport_height=2.001).validate()

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"width": 0}, "dimensions must be positive"),
            ({"height": -5}, "dimensions must be positive"),
            ({"focal_length": 0.0}, "Focal length"),
            ({"viewport_width": -1.0}, "Viewport width"),
            ({"viewport_height": 0.0}, "Viewport height"),
            ({"fade_start": 400.0, "fade_end": 100.0}, "fade_end"),
            ({"fade_start": 100.0, "fade_end": 100.0}, "fade_end"),
            ({"diffuse": -0.5}, "diffuse must be non-negative"),
        ],
    )
    def test_invalid_values(self, overrides, message):
        """Test each validation rule."""
        from src.raycast.config import RenderConfig

        with pytest.raises(ValueError, match=message):
            RenderConfig(**overrides).validate()


class TestRenderConfigSerialization:
    """Tests for dictionary conversion."""

    def test_to_dict(self):
        """Test that the mode is exported by name."""
        from src.raycast.config import ColorMode, RenderConfig

        data = RenderConfig(color_mode=ColorMode.LIGHT).to_dict()
        assert data["color_mode"] == "light"
        assert data["camera_position"] == [0.0, 0.0, -10.0]

    def test_round_trip(self):
        """Test that from_dict(to_dict()) reproduces the configuration."""
        from src.raycast.config import RenderConfig

        config = RenderConfig(width=320, height=240, color_mode="static-color", fade_end=500.0)
        assert RenderConfig.from_dict(config.to_dict()) == config

    def test_from_dict_rejects_unknown_keys(self):
        """Test that typos are reported instead of ignored."""
        from src.raycast.config import RenderConfig

        with pytest.raises(ValueError, match="Unknown configuration keys: widht"):
            RenderConfig.from_dict({"widht": 100})
