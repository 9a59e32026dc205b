"""Render configuration.

Every tunable of the renderer lives in ``RenderConfig``: image size, camera
and viewport geometry, fog distances, the global Phong coefficients, the
active color mode and two compatibility switches. A configuration is fixed
before rendering starts; the renderer copies it into Taichi fields once.

Example:
    >>> from src.raycast.config import ColorMode, RenderConfig
    >>> config = RenderConfig(width=320, height=240, color_mode=ColorMode.LIGHT)
    >>> config.validate()
"""

from dataclasses import asdict, dataclass, fields
from enum import IntEnum
from typing import Any

from src.raycast.core.color import BLACK, RED, parse_color


class ColorMode(IntEnum):
    """How a hit is turned into a color.

    STATIC_COLOR ignores the hit and returns a fixed color, NORMALS maps the
    surface normal to RGB, and LIGHT evaluates the Phong lighting model.
    """

    STATIC_COLOR = 0
    NORMALS = 1
    LIGHT = 2

    @classmethod
    def parse(cls, value: "ColorMode | int | str") -> "ColorMode":
        """Accept an enum member, its integer value, or a case-insensitive name.

        Hyphens are treated as underscores, so "static-color" works.

        Raises:
            ValueError: If the value names no color mode.
        """
        if isinstance(value, ColorMode):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            if key not in cls.__members__:
                raise ValueError(f"Unknown color mode: {value}")
            return cls[key]
        return cls(int(value))


# Maximum relative difference between horizontal and vertical pixel sizes
PIXEL_ASPECT_TOLERANCE = 1e-3


@dataclass
class RenderConfig:
    """Configuration for a single render.

    Defaults reproduce the original demo: a 2500x2500 image, the camera one
    focal length behind the world origin, and NORMALS shading.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        focal_length: Distance from the camera to the viewport plane.
        camera_position: Camera location in world space (x, y, z).
        viewport_width: World-space width of the viewport.
        viewport_height: World-space height of the viewport. None derives it
            as (height / width) * viewport_width, which keeps pixels square.
        fade_start: Hit distance at which fading toward black begins.
        fade_end: Hit distance at which the color is fully black.
        ambient: Ambient reflection constant (ka).
        diffuse: Diffuse reflection constant (kd).
        specular: Specular reflection constant (ks).
        shininess: Exponent applied to the specular term.
        color_mode: Active ColorMode.
        static_color: Color returned in STATIC_COLOR mode (0-255 scale).
        background_color: Color of pixels whose ray hits nothing.
        legacy_sphere_roots: Pick sphere roots with min(t1, t2, MAX) like
            the original renderer, accepting hits behind the camera. False
            selects the nearest non-negative root.
        clamp_back_lighting: Clamp l.n to zero so lights behind a surface
            add nothing, instead of subtracting light.
    """

    width: int = 2500
    height: int = 2500
    focal_length: float = 10.0
    camera_position: tuple[float, float, float] = (0.0, 0.0, -10.0)
    viewport_width: float = 4.0
    viewport_height: float | None = None
    fade_start: float = 100.0
    fade_end: float = 400.0
    ambient: float = 0.3
    diffuse: float = 0.5
    specular: float = 0.2
    shininess: float = 0.1
    color_mode: ColorMode = ColorMode.NORMALS
    static_color: tuple[float, float, float] = RED
    background_color: tuple[float, float, float] = BLACK
    legacy_sphere_roots: bool = False
    clamp_back_lighting: bool = True

    def __post_init__(self) -> None:
        self.color_mode = ColorMode.parse(self.color_mode)
        self.camera_position = tuple(float(c) for c in self.camera_position)
        self.static_color = parse_color(self.static_color)
        self.background_color = parse_color(self.background_color)

    @property
    def effective_viewport_height(self) -> float:
        """Viewport height in world units, derived when not set explicitly."""
        if self.viewport_height is not None:
            return self.viewport_height
        return (self.height / self.width) * self.viewport_width

    def validate(self) -> None:
        """Check the configuration before any rendering work begins.

        Raises:
            ValueError: If a size or distance is out of range, the fade range
                is empty, or the viewport produces non-square pixels.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.focal_length <= 0.0:
            raise ValueError(f"Focal length must be positive, got {self.focal_length}")
        if self.viewport_width <= 0.0:
            raise ValueError(f"Viewport width must be positive, got {self.viewport_width}")
        if self.viewport_height is not None and self.viewport_height <= 0.0:
            raise ValueError(f"Viewport height must be positive, got {self.viewport_height}")
        if self.fade_end <= self.fade_start:
            raise ValueError(
                f"fade_end ({self.fade_end}) must be greater than fade_start "
                f"({self.fade_start})"
            )
        for name in ("ambient", "diffuse", "specular", "shininess"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

        pixel_width = self.viewport_width / self.width
        pixel_height = self.effective_viewport_height / self.height
        if abs(pixel_width - pixel_height) > PIXEL_ASPECT_TOLERANCE * max(
            pixel_width, pixel_height
        ):
            raise ValueError(
                "Viewport scaling is not square: pixel size is "
                f"{pixel_width:.6g} x {pixel_height:.6g} world units for a "
                f"{self.width}x{self.height} image with viewport "
                f"{self.viewport_width} x {self.effective_viewport_height}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the configuration to a JSON-friendly dictionary."""
        data = asdict(self)
        data["color_mode"] = self.color_mode.name.lower()
        data["camera_position"] = list(self.camera_position)
        data["static_color"] = list(self.static_color)
        data["background_color"] = list(self.background_color)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderConfig":
        """Build a configuration from a dictionary.

        Unknown keys are rejected so typos do not silently fall back to
        defaults.

        Raises:
            ValueError: If the dictionary contains unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)
