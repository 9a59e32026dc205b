"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the HitRecord shared by all
primitives, and ``hit_sphere``.

Intersection solves the quadratic

    a*t^2 + b*t + c = 0

with a = d.d, b = 2*(o - center).d and c = |o - center|^2 - r^2. Two root
selection rules are supported:

- nearest (default): the smallest root with t >= 0; no hit if both roots lie
  behind the ray origin.
- legacy: t = min(t1, t2, FLOAT_MAX), which reproduces the original
  renderer. It keeps negative roots, so spheres behind the camera can be
  reported as hits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.geometry.sphere import Sphere, hit_sphere, vec3
    >>> sphere = Sphere(center=vec3(0.0, 0.0, 100.0), radius=5.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from src.raycast.core.vector import FLOAT_MAX, dot, length, min3, normalize, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 otherwise.
        t: The ray parameter at the intersection. Only valid if hit == 1.
        distance: Euclidean distance from the ray origin to the hit point.
            Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: The unit surface normal at the intersection point. Only valid
            if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    distance: ti.f64
    point: vec3
    normal: vec3


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        distance=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def solve_sphere_quadratic(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Solve the ray-sphere quadratic.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        sphere: The sphere to intersect.

    Returns:
        A tuple (has_roots, t1, t2). has_roots is 0 when the discriminant is
        negative, in which case t1 and t2 are meaningless. Otherwise
        t1 = (-b + sqrt(D)) / 2a and t2 = (-b - sqrt(D)) / 2a.
    """
    origin_to_center = ray_origin - sphere.center

    a = dot(ray_direction, ray_direction)
    b = 2.0 * dot(origin_to_center, ray_direction)
    c = dot(origin_to_center, origin_to_center) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    has_roots = 0
    t1 = 0.0
    t2 = 0.0
    if discriminant >= 0.0:
        has_roots = 1
        sqrt_d = ti.sqrt(discriminant)
        t1 = (-b + sqrt_d) / (2.0 * a)
        t2 = (-b - sqrt_d) / (2.0 * a)
    return has_roots, t1, t2


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    legacy_roots: ti.i32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (normalized, so that
            distance and t agree).
        sphere: The sphere to test intersection against.
        legacy_roots: 1 to select the root with min(t1, t2, FLOAT_MAX),
            0 to select the nearest non-negative root.

    Returns:
        A HitRecord. Check the hit field to determine if intersection
        occurred. The normal always points away from the sphere center.
    """
    result = make_miss()

    has_roots, t1, t2 = solve_sphere_quadratic(ray_origin, ray_direction, sphere)

    if has_roots == 1:
        found = 0
        t = 0.0

        if legacy_roots == 1:
            t = min3(t1, t2, FLOAT_MAX)
            found = 1
        else:
            # t2 <= t1 whenever a > 0
            near = ti.min(t1, t2)
            far = ti.max(t1, t2)
            if near >= 0.0:
                t = near
                found = 1
            elif far >= 0.0:
                t = far
                found = 1

        if found == 1:
            point = ray_origin + ray_direction * t
            result = HitRecord(
                hit=1,
                t=t,
                distance=length(point - ray_origin),
                point=point,
                normal=normalize(point - sphere.center),
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
