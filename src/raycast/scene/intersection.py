"""Scene-level primitive storage and closest-hit intersection.

Spheres, triangles and point lights are stored in Taichi fields
(Structure-of-Arrays). Intersectable primitives and light sources live in
separate collections, so the per-ray loop never has to skip lights.

``intersect_scene`` tests the ray against every sphere and every triangle
and keeps the hit with the smallest distance. There is no acceleration
structure: cost is linear in the primitive count.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.scene.intersection import (
    ...     SceneHit, add_sphere, add_light, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 100.0), 5.0, color=(255.0, 0.0, 0.0))
    >>> add_light((30.0, 30.0, 0.0), diffuse=(255.0, 255.0, 255.0), specular=(255.0, 255.0, 255.0))
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from src.raycast.core.color import color3
from src.raycast.core.vector import vec3
from src.raycast.geometry.sphere import HitRecord, Sphere, hit_sphere
from src.raycast.geometry.triangle import Triangle, hit_triangle
from src.raycast.materials.phong import NO_MATERIAL


@ti.dataclass
class SceneHit:
    """Record of a ray-scene intersection with surface information.

    Attributes:
        hit: 1 if the ray intersected any primitive, 0 otherwise.
        point: The intersection point. Only valid if hit == 1.
        color: The material color of the hit primitive (0-255 scale).
        distance: Distance from the ray origin to the hit point.
        normal: The unit surface normal at the hit point.
        material_id: Phong material index of the hit primitive, or -1 when
            the primitive uses the global coefficients.
    """

    hit: ti.i32
    point: vec3
    color: color3
    distance: ti.f64
    normal: vec3
    material_id: ti.i32


@ti.dataclass
class Light:
    """A point light.

    Attributes:
        position: Light location in world space.
        diffuse: Color of the diffuse component (0-255 scale).
        specular: Color of the specular component (0-255 scale).
    """

    position: vec3
    diffuse: color3
    specular: color3


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_TRIANGLES = 4096
MAX_LIGHTS = 64

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Triangle storage
triangle_p1 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
triangle_p2 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
triangle_p3 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
triangle_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
triangle_material_ids = ti.field(dtype=ti.i32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())

# Light storage
light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_diffuse = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_specular = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives and lights from the scene.

    Resets the counts to zero. The actual field data is not cleared but will
    be overwritten when new objects are added.
    """
    num_spheres[None] = 0
    num_triangles[None] = 0
    num_lights[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float],
    material_id: int = NO_MATERIAL,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (should be positive).
        color: The material color (0-255 scale).
        material_id: Phong material index, or NO_MATERIAL.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_colors[idx] = list(color)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_triangle(
    p1: tuple[float, float, float],
    p2: tuple[float, float, float],
    p3: tuple[float, float, float],
    color: tuple[float, float, float],
    material_id: int = NO_MATERIAL,
) -> int:
    """Add a triangle to the scene.

    The vertex order determines the normal orientation (right-hand rule).

    Args:
        p1: First vertex.
        p2: Second vertex.
        p3: Third vertex.
        color: The material color (0-255 scale).
        material_id: Phong material index, or NO_MATERIAL.

    Returns:
        The index of the added triangle.

    Raises:
        RuntimeError: If the maximum number of triangles is exceeded.
    """
    idx = num_triangles[None]
    if idx >= MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")
    triangle_p1[idx] = list(p1)
    triangle_p2[idx] = list(p2)
    triangle_p3[idx] = list(p3)
    triangle_colors[idx] = list(color)
    triangle_material_ids[idx] = material_id
    num_triangles[None] = idx + 1
    return idx


def add_light(
    position: tuple[float, float, float],
    diffuse: tuple[float, float, float],
    specular: tuple[float, float, float],
) -> int:
    """Add a point light to the scene.

    Args:
        position: The light location.
        diffuse: Diffuse component color (0-255 scale).
        specular: Specular component color (0-255 scale).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(position)
    light_diffuse[idx] = list(diffuse)
    light_specular[idx] = list(specular)
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_triangle_count() -> int:
    """Get the number of triangles in the scene."""
    return int(num_triangles[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light(idx: ti.i32) -> Light:
    """Fetch a light by index."""
    return Light(
        position=light_positions[idx],
        diffuse=light_diffuse[idx],
        specular=light_specular[idx],
    )


@ti.func
def _to_scene_hit(rec: HitRecord, color: color3, material_id: ti.i32) -> SceneHit:
    """Attach surface information to a primitive hit record."""
    return SceneHit(
        hit=rec.hit,
        point=rec.point,
        color=color,
        distance=rec.distance,
        normal=rec.normal,
        material_id=material_id,
    )


@ti.func
def make_scene_miss() -> SceneHit:
    """Create a SceneHit indicating no intersection."""
    return SceneHit(
        hit=0,
        point=vec3(0.0, 0.0, 0.0),
        color=vec3(0.0, 0.0, 0.0),
        distance=0.0,
        normal=vec3(0.0, 0.0, 0.0),
        material_id=NO_MATERIAL,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3, legacy_roots: ti.i32) -> SceneHit:
    """Test a ray against every primitive in the scene.

    Iterates through all spheres and triangles, keeping the hit with the
    smallest distance. Lights are never tested.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        legacy_roots: Sphere root selection rule (see hit_sphere).

    Returns:
        The closest SceneHit, or a miss record if nothing was hit.
    """
    result = make_scene_miss()
    closest_distance = 0.0

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, legacy_roots)
        if rec.hit == 1:
            if result.hit == 0 or rec.distance < closest_distance:
                closest_distance = rec.distance
                result = _to_scene_hit(rec, sphere_colors[i], sphere_material_ids[i])

    n_triangles = num_triangles[None]
    for i in range(n_triangles):
        tri = Triangle(p1=triangle_p1[i], p2=triangle_p2[i], p3=triangle_p3[i])
        rec = hit_triangle(ray_origin, ray_direction, tri)
        if rec.hit == 1:
            if result.hit == 0 or rec.distance < closest_distance:
                closest_distance = rec.distance
                result = _to_scene_hit(rec, triangle_colors[i], triangle_material_ids[i])

    return result
