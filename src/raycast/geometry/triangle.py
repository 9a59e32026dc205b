"""Triangle primitive with ray-triangle intersection.

A triangle is defined by three vertices p1, p2, p3. Its plane normal is
cross(p2 - p1, p3 - p1), so the orientation follows the winding order
(right-hand rule). Reversing the winding flips the normal; a cyclic
relabeling of the vertices does not.

Ray-triangle intersection:
1. Intersect the ray with the triangle's plane (no hit when the ray is
   parallel to the plane or the plane lies behind the ray origin).
2. Reject points outside the triangle's axis-aligned bounding box.
3. For every edge, require the hit point and the opposite vertex to lie on
   the same side of the edge's supporting line.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.geometry.triangle import Triangle, hit_triangle, vec3
    >>> tri = Triangle(
    ...     p1=vec3(-1.0, -1.0, 5.0),
    ...     p2=vec3(1.0, -1.0, 5.0),
    ...     p3=vec3(0.0, 1.0, 5.0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti

from src.raycast.core.vector import cross, dot, length, max3, min3, normalize, vec3

from .sphere import HitRecord, make_miss

# Below this |n.d| / |n| the ray is considered parallel to the plane
PARALLEL_EPSILON = 1e-12

# Slack on the bounding box so axis-aligned triangles survive rounding
BOUNDS_EPSILON = 1e-9


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        p1: First vertex (vec3).
        p2: Second vertex (vec3).
        p3: Third vertex (vec3).
    """

    p1: vec3
    p2: vec3
    p3: vec3


@ti.func
def triangle_plane_normal(tri: Triangle) -> vec3:
    """Unnormalized plane normal cross(p2 - p1, p3 - p1)."""
    return cross(tri.p2 - tri.p1, tri.p3 - tri.p1)


@ti.func
def points_on_same_side(
    point_a: vec3,
    point_b: vec3,
    line_start: vec3,
    line_end: vec3,
) -> ti.i32:
    """Check whether two points lie on the same side of a line.

    Both points and the line are assumed coplanar. The test compares the
    directions of (start - end) x (point - end) for each point.

    Args:
        point_a: First point to test.
        point_b: Second point to test.
        line_start: One end of the line segment.
        line_end: The other end of the line segment.

    Returns:
        1 if the points are strictly on the same side, 0 otherwise.
    """
    boundary = line_start - line_end
    side_a = cross(boundary, point_a - line_end)
    side_b = cross(boundary, point_b - line_end)
    return dot(side_a, side_b) > 0.0


@ti.func
def _inside_bounds(point: vec3, tri: Triangle) -> ti.i32:
    inside = 1
    for k in ti.static(range(3)):
        lo = min3(tri.p1[k], tri.p2[k], tri.p3[k]) - BOUNDS_EPSILON
        hi = max3(tri.p1[k], tri.p2[k], tri.p3[k]) + BOUNDS_EPSILON
        if point[k] < lo or point[k] > hi:
            inside = 0
    return inside


@ti.func
def hit_triangle(ray_origin: vec3, ray_direction: vec3, tri: Triangle) -> HitRecord:
    """Test for ray-triangle intersection.

    The plane is written as n.P + k = 0 with k = -n.p1, giving the ray
    parameter t = -(n.o + k) / (n.d).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        tri: The triangle to test intersection against.

    Returns:
        A HitRecord. The normal is the normalized plane normal and is not
        flipped toward the ray.
    """
    result = make_miss()

    normal = triangle_plane_normal(tri)
    plane_k = -dot(normal, tri.p1)
    denom = dot(normal, ray_direction)

    # Parallel rays and degenerate (zero-normal) triangles never hit
    if ti.abs(denom) > PARALLEL_EPSILON * length(normal):
        t = -(dot(normal, ray_origin) + plane_k) / denom

        if t >= 0.0:
            point = ray_origin + ray_direction * t

            if _inside_bounds(point, tri) == 1:
                if (
                    points_on_same_side(point, tri.p1, tri.p2, tri.p3) == 1
                    and points_on_same_side(point, tri.p2, tri.p3, tri.p1) == 1
                    and points_on_same_side(point, tri.p3, tri.p1, tri.p2) == 1
                ):
                    result = HitRecord(
                        hit=1,
                        t=t,
                        distance=length(point - ray_origin),
                        point=point,
                        normal=normalize(normal),
                    )

    return result


@ti.func
def make_triangle(p1: vec3, p2: vec3, p3: vec3) -> Triangle:
    """Create a triangle from three vertices inside a kernel."""
    return Triangle(p1=p1, p2=p2, p3=p3)


@ti.func
def triangle_normal(tri: Triangle) -> vec3:
    """Unit normal of a triangle, oriented by its winding order."""
    return normalize(triangle_plane_normal(tri))
