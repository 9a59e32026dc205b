"""Ray data structure for the ray caster.

A ray is a half-line with an origin and a direction. Distance-based effects
(fog) assume the direction is unit length, so producers normalize before
constructing one; ``ray_through_points`` does this for you.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.core.ray import ray_through_points, ray_at, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     ray = ray_through_points(vec3(0.0, 0.0, -10.0), vec3(0.0, 0.0, 0.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti

from src.raycast.core.vector import normalize, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3), expected to be normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction as given."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_through_points(start: vec3, end: vec3) -> Ray:
    """Create a ray from start aimed through end.

    Args:
        start: The ray origin.
        end: Any point the ray should pass through (must differ from start).

    Returns:
        A Ray with normalized direction.
    """
    return Ray(origin=start, direction=normalize(end - start))


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point origin + t * direction."""
    return ray.origin + t * ray.direction
