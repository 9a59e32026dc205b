"""RGB color arithmetic on the nominal 0-255 scale.

Colors are ``color3`` vectors of 64-bit floats. Nothing in this module clamps
intermediate values: light accumulation may push channels below 0 or above
255. Narrowing to 8 bits happens once, at the render-target write, through
``to_byte``.
"""

import taichi as ti
import taichi.math as tm

from src.raycast.core.vector import lerp, vec3

# Colors share the vector representation
color3 = vec3

# Maximum value of an 8-bit channel
CHANNEL_MAX = 255.0

# Named colors, as Python triples on the 0-255 scale
BLACK = (0.0, 0.0, 0.0)
RED = (255.0, 0.0, 0.0)
GREEN = (0.0, 255.0, 0.0)
BLUE = (0.0, 0.0, 255.0)
PURPLE = (255.0, 0.0, 255.0)
YELLOW = (255.0, 255.0, 0.0)
GRAY = (120.0, 120.0, 120.0)
BROWN = (139.0, 69.0, 19.0)
WHITE = (255.0, 255.0, 255.0)

NAMED_COLORS = {
    "black": BLACK,
    "red": RED,
    "green": GREEN,
    "blue": BLUE,
    "purple": PURPLE,
    "yellow": YELLOW,
    "gray": GRAY,
    "brown": BROWN,
    "white": WHITE,
}


@ti.func
def relative_multiply(surface: color3, light: color3) -> color3:
    """Modulate a light color by a surface color.

    The surface color is treated as a reflectance factor normalized from the
    0-255 range: ``(surface / 255) * light`` per channel.

    Args:
        surface: The surface (material) color, 0-255 scale.
        light: The incoming light color.

    Returns:
        The modulated color.
    """
    return (surface / CHANNEL_MAX) * light


@ti.func
def lerp_color(a: color3, b: color3, ratio: ti.f64) -> color3:
    """Blend from color a toward color b; ratio 1 gives b exactly."""
    return lerp(a, b, ratio)


@ti.func
def to_byte(c: color3):
    """Clamp each channel to [0, 255] and narrow it to an unsigned byte.

    NaN channels become 0.

    Args:
        c: A color on the 0-255 scale, possibly out of range.

    Returns:
        A 3-vector of ``ti.u8`` channels.
    """
    result = ti.Vector([0, 0, 0], dt=ti.u8)
    for k in ti.static(range(3)):
        channel = c[k]
        if tm.isnan(channel):
            channel = 0.0
        result[k] = ti.cast(tm.clamp(channel, 0.0, CHANNEL_MAX), ti.u8)
    return result


def parse_color(value) -> tuple[float, float, float]:
    """Convert a color name or a 3-sequence into a float triple.

    Args:
        value: A name from NAMED_COLORS (case-insensitive) or an (r, g, b)
            sequence.

    Returns:
        The color as a tuple of three floats.

    Raises:
        ValueError: If the name is unknown or the sequence is not length 3.
    """
    if isinstance(value, str):
        key = value.lower()
        if key not in NAMED_COLORS:
            raise ValueError(f"Unknown color name: {value}")
        return NAMED_COLORS[key]
    if len(value) != 3:
        raise ValueError(f"Color must have 3 channels, got {len(value)}")
    return (float(value[0]), float(value[1]), float(value[2]))
