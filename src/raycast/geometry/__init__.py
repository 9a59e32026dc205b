"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, the shared HitRecord, and ray-sphere hits
    triangle: Triangle primitive with plane and same-side tests

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord:
    rec = hit_shape(ray_origin, ray_direction, shape)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere
from .triangle import (
    Triangle,
    hit_triangle,
    make_triangle,
    points_on_same_side,
    triangle_normal,
)

__all__ = [
    "HitRecord",
    "make_miss",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "Triangle",
    "hit_triangle",
    "make_triangle",
    "points_on_same_side",
    "triangle_normal",
]
