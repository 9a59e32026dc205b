"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    vector: Double-precision vec3 arithmetic
    color: RGB color helpers on the 0-255 scale
    ray: Ray data structure and construction helpers
    shading: Color modes, Phong lighting and distance fade
    renderer: Per-pixel kernels and the 8-bit render target
    raster: Row-banded render driver with progress reporting

Only the field-free modules are imported here. Import shading, renderer and
raster directly (after ``ti.init``) when needed:

    from src.raycast.core.raster import RasterRenderer
"""

from .color import (
    BLACK,
    BLUE,
    BROWN,
    GRAY,
    GREEN,
    NAMED_COLORS,
    PURPLE,
    RED,
    WHITE,
    YELLOW,
    color3,
    lerp_color,
    parse_color,
    relative_multiply,
    to_byte,
)
from .ray import Ray, make_ray, ray_at, ray_through_points
from .vector import (
    FLOAT_MAX,
    add,
    clamp,
    cross,
    dot,
    length,
    lerp,
    max3,
    min3,
    normalize,
    scale,
    subtract,
    vec3,
)

__all__ = [
    # Vectors
    "vec3",
    "FLOAT_MAX",
    "add",
    "subtract",
    "scale",
    "dot",
    "cross",
    "length",
    "normalize",
    "lerp",
    "min3",
    "max3",
    "clamp",
    # Colors
    "color3",
    "relative_multiply",
    "lerp_color",
    "to_byte",
    "parse_color",
    "NAMED_COLORS",
    "BLACK",
    "RED",
    "GREEN",
    "BLUE",
    "PURPLE",
    "YELLOW",
    "GRAY",
    "BROWN",
    "WHITE",
    # Rays
    "Ray",
    "make_ray",
    "ray_through_points",
    "ray_at",
]
