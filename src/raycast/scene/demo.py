"""Demo scene configuration.

This module provides factory functions for the renderer's demo scene: a row
of alternating green and red spheres receding from the camera, three brown
triangles at different orientations, and one white point light.

With the default camera at (0, 0, -10) the spheres sit at distances 160-280,
so the distance fade darkens them progressively.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.scene.demo import create_demo_scene
    >>> scene = create_demo_scene()
    >>> scene.get_primitive_count()
    8
"""

from src.raycast.core.color import BROWN, GREEN, RED, WHITE
from src.raycast.scene.manager import (
    LightInfo,
    SceneManager,
    SceneObject,
    SphereInfo,
    TriangleInfo,
)

# =============================================================================
# Demo Scene Constants
# =============================================================================

SPHERE_RADIUS = 5.0
SPHERE_OFFSET = (15.0, 15.0)
SPHERE_DEPTHS = (150.0, 180.0, 210.0, 240.0, 270.0)

LIGHT_POSITION = (30.0, 30.0, 0.0)


def demo_scene_objects() -> list[SceneObject]:
    """Build the demo scene as a list of scene objects.

    Returns:
        Spheres, triangles and the light, in scene order.
    """
    objects: list[SceneObject] = []

    for i, depth in enumerate(SPHERE_DEPTHS):
        objects.append(
            SphereInfo(
                center=(SPHERE_OFFSET[0], SPHERE_OFFSET[1], depth),
                radius=SPHERE_RADIUS,
                color=GREEN if i % 2 == 0 else RED,
            )
        )

    # Nearly camera-facing, tilted slightly in z
    objects.append(
        TriangleInfo(
            p1=(-10.0, -15.0, 151.0),
            p2=(-15.0, -15.0, 150.0),
            p3=(-15.0, -10.0, 150.0),
            color=BROWN,
        )
    )
    # Long sliver receding from z=150 to z=250
    objects.append(
        TriangleInfo(
            p1=(-10.0, 0.0, 150.0),
            p2=(-15.0, 0.0, 250.0),
            p3=(-15.0, 5.0, 250.0),
            color=BROWN,
        )
    )
    # Same shape as the first, with the tilt on the second vertex
    objects.append(
        TriangleInfo(
            p1=(-10.0, 10.0, 150.0),
            p2=(-15.0, 10.0, 151.0),
            p3=(-15.0, 15.0, 150.0),
            color=BROWN,
        )
    )

    objects.append(LightInfo(position=LIGHT_POSITION, diffuse=WHITE, specular=WHITE))
    return objects


def create_demo_scene(scene: SceneManager | None = None) -> SceneManager:
    """Create the demo scene.

    Args:
        scene: Optional SceneManager to fill. It is cleared first. If None,
            a new manager is created.

    Returns:
        The SceneManager holding the demo scene.
    """
    if scene is None:
        scene = SceneManager()
    else:
        scene.clear()

    scene.add_objects(demo_scene_objects())
    return scene


def create_single_sphere_scene(
    center: tuple[float, float, float] = (0.0, 0.0, 100.0),
    radius: float = 5.0,
    color: tuple[float, float, float] = RED,
) -> SceneManager:
    """Create a scene with one sphere and no lights.

    Useful as a minimal smoke-test scene. With the default camera at
    z = -10 the sphere is hit at distance 105, just past the default fade
    start, so a static red renders as (250, 0, 0). Put the camera at the
    origin for the unfaded color.
    """
    scene = SceneManager()
    scene.add_sphere(center, radius, color)
    return scene
