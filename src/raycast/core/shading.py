"""Shading engine: turns the closest hit into a final color.

Three color modes are supported (see ``ColorMode``):

- STATIC_COLOR: a fixed color regardless of the hit.
- NORMALS: the surface normal mapped from [-1, 1] to [0, 255] per channel.
- LIGHT: a local Phong model summed over all point lights, plus one ambient
  term. There are no shadow rays and no recursion.

Every mode then passes through a distance fade: past ``fade_start`` the color
is blended toward black, reaching pure black at ``fade_end``.

The shading parameters are packed into a ``ShadingParams`` record that is
passed explicitly to ``shade``. ``setup_shading`` stores a RenderConfig in
Taichi fields once per render; ``get_shading_params`` rebuilds the record
inside kernels.

LIGHT mode, per light:
    L = normalize(light.position - p)
    l_dot_n = L . n
    total += relative_multiply(surface, light.diffuse * (kd * l_dot_n))
    R = normalize(n * (2 * l_dot_n) - L)
    V = normalize(camera - p)
    if R . V > 0:
        total += light.specular * (ks * R . V) ** shininess
then total += surface * ka.
"""

import taichi as ti

from src.raycast.config import ColorMode, RenderConfig
from src.raycast.core.color import color3, lerp_color, relative_multiply
from src.raycast.core.vector import clamp, dot, normalize, vec3
from src.raycast.materials.phong import PhongMaterial, resolve_material
from src.raycast.scene.intersection import SceneHit, get_light, num_lights


@ti.dataclass
class ShadingParams:
    """Parameters consumed by ``shade``.

    Attributes:
        color_mode: Integer value of the active ColorMode.
        static_color: Color returned in STATIC_COLOR mode.
        camera_position: Viewer position for the specular term.
        fade_start: Distance at which fading begins.
        fade_end: Distance at which the color is fully black.
        material: Global Phong coefficients, used by hits without a material.
        clamp_back_lighting: 1 to ignore lights behind the surface.
    """

    color_mode: ti.i32
    static_color: color3
    camera_position: vec3
    fade_start: ti.f64
    fade_end: ti.f64
    material: PhongMaterial
    clamp_back_lighting: ti.i32


# =============================================================================
# Shading State (written once per render)
# =============================================================================

_color_mode = ti.field(dtype=ti.i32, shape=())
_static_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_shading_camera = ti.Vector.field(3, dtype=ti.f64, shape=())
_fade_range = ti.Vector.field(2, dtype=ti.f64, shape=())
_global_coefficients = ti.Vector.field(4, dtype=ti.f64, shape=())
_clamp_back_lighting = ti.field(dtype=ti.i32, shape=())


def setup_shading(config: RenderConfig) -> None:
    """Store the shading-related parts of a configuration in Taichi fields.

    Args:
        config: The render configuration. It is not validated here.
    """
    _color_mode[None] = int(config.color_mode)
    _static_color[None] = list(config.static_color)
    _shading_camera[None] = list(config.camera_position)
    _fade_range[None] = [config.fade_start, config.fade_end]
    _global_coefficients[None] = [
        config.ambient,
        config.diffuse,
        config.specular,
        config.shininess,
    ]
    _clamp_back_lighting[None] = int(config.clamp_back_lighting)


def get_color_mode() -> ColorMode:
    """Get the color mode currently stored in the shading fields."""
    return ColorMode(int(_color_mode[None]))


@ti.func
def get_shading_params() -> ShadingParams:
    """Rebuild the ShadingParams record from the shading fields."""
    coefficients = _global_coefficients[None]
    fade = _fade_range[None]
    return ShadingParams(
        color_mode=_color_mode[None],
        static_color=_static_color[None],
        camera_position=_shading_camera[None],
        fade_start=fade.x,
        fade_end=fade.y,
        material=PhongMaterial(
            ambient=coefficients[0],
            diffuse=coefficients[1],
            specular=coefficients[2],
            shininess=coefficients[3],
        ),
        clamp_back_lighting=_clamp_back_lighting[None],
    )


# =============================================================================
# Color Modes
# =============================================================================


@ti.func
def normal_to_color(normal: vec3) -> color3:
    """Map each normal component from [-1, 1] to [0, 255]."""
    return (normal + 1.0) * 127.5


@ti.func
def phong_lighting(hit: SceneHit, params: ShadingParams) -> color3:
    """Evaluate the local lighting model for a hit.

    Contributions from all lights are accumulated additively, then a single
    ambient term is added. Without clamp_back_lighting, a light behind the
    surface makes l.n negative and subtracts light.

    Args:
        hit: The closest hit (hit.hit must be 1).
        params: The shading parameters.

    Returns:
        The lit color, unclamped.
    """
    material = resolve_material(hit.material_id, params.material)
    total = vec3(0.0, 0.0, 0.0)

    for i in range(num_lights[None]):
        light = get_light(i)

        to_light = normalize(light.position - hit.point)
        l_dot_n = dot(to_light, hit.normal)
        diffuse_factor = l_dot_n
        lit = 1
        if params.clamp_back_lighting == 1:
            diffuse_factor = ti.max(l_dot_n, 0.0)
            if l_dot_n <= 0.0:
                lit = 0

        diffuse = light.diffuse * (material.diffuse * diffuse_factor)
        total += relative_multiply(hit.color, diffuse)

        if lit == 1:
            reflection = normalize(hit.normal * (2.0 * l_dot_n) - to_light)
            view = normalize(params.camera_position - hit.point)
            r_dot_v = dot(reflection, view)
            if r_dot_v > 0.0:
                total += light.specular * (material.specular * r_dot_v) ** material.shininess

    total += hit.color * material.ambient
    return total


@ti.func
def apply_fade(color: color3, distance: ti.f64, fade_start: ti.f64, fade_end: ti.f64) -> color3:
    """Blend a color toward black with distance.

    Colors at or before fade_start are returned unchanged. Beyond it the
    blend ratio is clamp((distance - fade_start) / (fade_end - fade_start),
    0, 1), so fade_end and anything further is pure black.

    Args:
        color: The unfaded color.
        distance: Distance from the ray origin to the hit.
        fade_start: Distance at which fading begins.
        fade_end: Distance at which the color is fully black.

    Returns:
        The faded color.
    """
    result = color
    if distance > fade_start:
        ratio = clamp((distance - fade_start) / (fade_end - fade_start), 0.0, 1.0)
        result = lerp_color(color, vec3(0.0, 0.0, 0.0), ratio)
    return result


@ti.func
def shade(hit: SceneHit, params: ShadingParams) -> color3:
    """Compute the final color for a hit.

    Args:
        hit: The closest hit (hit.hit must be 1).
        params: The shading parameters.

    Returns:
        The color after the color mode and the distance fade, unclamped.
    """
    computed = vec3(0.0, 0.0, 0.0)

    if params.color_mode == int(ColorMode.STATIC_COLOR):
        computed = params.static_color
    elif params.color_mode == int(ColorMode.NORMALS):
        computed = normal_to_color(hit.normal)
    else:
        computed = phong_lighting(hit, params)

    return apply_fade(computed, hit.distance, params.fade_start, params.fade_end)
