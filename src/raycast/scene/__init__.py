"""Scene module for primitive storage and scene construction.

Components:
    intersection: Taichi storage for spheres, triangles and lights, and the
        closest-hit query
    manager: Python-side scene builder with JSON import/export
    demo: The demo scene of spheres, triangles and one light
"""

from .demo import create_demo_scene, create_single_sphere_scene, demo_scene_objects
from .intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    MAX_TRIANGLES,
    Light,
    SceneHit,
    add_light,
    add_sphere,
    add_triangle,
    clear_scene,
    get_light_count,
    get_sphere_count,
    get_triangle_count,
    intersect_scene,
)
from .manager import (
    LightInfo,
    MaterialInfo,
    SceneManager,
    SceneObject,
    SphereInfo,
    TriangleInfo,
    is_intersectable,
)

__all__ = [
    # Intersection module
    "SceneHit",
    "Light",
    "add_sphere",
    "add_triangle",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_triangle_count",
    "get_light_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_TRIANGLES",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SceneObject",
    "MaterialInfo",
    "SphereInfo",
    "TriangleInfo",
    "LightInfo",
    "is_intersectable",
    # Demo scene
    "create_demo_scene",
    "create_single_sphere_scene",
    "demo_scene_objects",
]
