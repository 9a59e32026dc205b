"""Scene manager for building and serializing scenes.

This module provides the Python-side scene API. A scene is an ordered
collection of objects: spheres, triangles and point lights (the tagged union
``SceneObject``). The manager validates each object, writes it to the Taichi
storage in ``scene.intersection`` and keeps a Python-side record so the scene
can be iterated and exported.

Objects are split at construction time: spheres and triangles go to the
intersectable collections, lights to the light collection.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> shiny = scene.add_material(ambient=0.2, diffuse=0.6, specular=0.9, shininess=1.5)
    >>> scene.add_sphere((0, 0, 100), 5.0, color=(255, 0, 0), material_id=shiny)
    >>> scene.add_light((30, 30, 0), diffuse=(255, 255, 255), specular=(255, 255, 255))
"""

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from src.raycast.core.color import WHITE, parse_color
from src.raycast.core.vector import cross_py, length_py
from src.raycast.materials.phong import (
    MAX_PHONG_MATERIALS,
    NO_MATERIAL,
    add_phong_material,
    clear_phong_materials,
)
from src.raycast.scene.intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    MAX_TRIANGLES,
    add_light,
    add_sphere,
    add_triangle,
    clear_scene,
    get_light_count,
    get_sphere_count,
    get_triangle_count,
)

# Sine of the angle between two edges at or below this marks a triangle as degenerate
DEGENERATE_EPSILON = 1e-12


@dataclass
class MaterialInfo:
    """Information about a registered Phong material.

    Attributes:
        material_id: The material index.
        ambient: Ambient reflection constant (ka).
        diffuse: Diffuse reflection constant (kd).
        specular: Specular reflection constant (ks).
        shininess: Specular exponent.
    """

    material_id: int
    ambient: float
    diffuse: float
    specular: float
    shininess: float


@dataclass
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: The material color (0-255 scale).
        material_id: Phong material index, or -1 for the global constants.
    """

    center: tuple[float, float, float]
    radius: float
    color: tuple[float, float, float]
    material_id: int = NO_MATERIAL


@dataclass
class TriangleInfo:
    """A triangle in the scene.

    Attributes:
        p1: First vertex.
        p2: Second vertex.
        p3: Third vertex.
        color: The material color (0-255 scale).
        material_id: Phong material index, or -1 for the global constants.
    """

    p1: tuple[float, float, float]
    p2: tuple[float, float, float]
    p3: tuple[float, float, float]
    color: tuple[float, float, float]
    material_id: int = NO_MATERIAL


@dataclass
class LightInfo:
    """A point light in the scene. Lights illuminate but are never hit.

    Attributes:
        position: The light location.
        diffuse: Diffuse component color (0-255 scale).
        specular: Specular component color (0-255 scale).
    """

    position: tuple[float, float, float]
    diffuse: tuple[float, float, float] = WHITE
    specular: tuple[float, float, float] = WHITE


SceneObject = Union[SphereInfo, TriangleInfo, LightInfo]


def _triple(value: Iterable[float], name: str) -> tuple[float, float, float]:
    """Convert a 3-sequence into a float triple."""
    items = [float(v) for v in value]
    if len(items) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(items)}")
    return (items[0], items[1], items[2])


def is_intersectable(obj: SceneObject) -> bool:
    """True for objects a ray can hit (spheres and triangles)."""
    return isinstance(obj, (SphereInfo, TriangleInfo))


class SceneManager:
    """Scene builder coordinating primitives, lights and materials.

    The manager preserves insertion order across all object kinds for
    iteration and export, while the GPU storage keeps spheres, triangles and
    lights in separate arrays.

    Attributes:
        materials: MaterialInfo for all registered materials.
        spheres: SphereInfo for all spheres in the scene.
        triangles: TriangleInfo for all triangles in the scene.
        light_sources: LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_objects([
        ...     SphereInfo(center=(0, 0, 100), radius=5.0, color=(255, 0, 0)),
        ...     LightInfo(position=(30, 30, 0)),
        ... ])
        >>> scene.get_primitive_count()
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.triangles: list[TriangleInfo] = []
        self.light_sources: list[LightInfo] = []
        self._objects: list[SceneObject] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_phong_materials()
        self.materials.clear()
        self.spheres.clear()
        self.triangles.clear()
        self.light_sources.clear()
        self._objects.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, lights and materials)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        ambient: float,
        diffuse: float,
        specular: float,
        shininess: float,
    ) -> int:
        """Register a Phong material.

        Args:
            ambient: Ambient reflection constant (ka).
            diffuse: Diffuse reflection constant (kd).
            specular: Specular reflection constant (ks).
            shininess: Specular exponent.

        Returns:
            The material index to pass to add_sphere/add_triangle.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any coefficient is negative.
        """
        material_id = add_phong_material(ambient, diffuse, specular, shininess)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                ambient=ambient,
                diffuse=diffuse,
                specular=specular,
                shininess=shininess,
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return len(self.materials)

    def _check_material_id(self, material_id: int) -> None:
        if material_id != NO_MATERIAL and not 0 <= material_id < len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive and Light Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float] | str,
        material_id: int = NO_MATERIAL,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point as (x, y, z).
            radius: The radius, must be positive.
            color: The material color as (R, G, B) on the 0-255 scale, or a
                color name.
            material_id: Phong material index, or -1 for the global constants.

        Returns:
            The index of the sphere in the sphere storage.

        Raises:
            ValueError: If the radius is not positive or material_id is
                unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self._check_material_id(material_id)

        info = SphereInfo(
            center=_triple(center, "center"),
            radius=float(radius),
            color=parse_color(color),
            material_id=material_id,
        )
        index = add_sphere(info.center, info.radius, info.color, info.material_id)
        self.spheres.append(info)
        self._objects.append(info)
        return index

    def add_triangle(
        self,
        p1: tuple[float, float, float],
        p2: tuple[float, float, float],
        p3: tuple[float, float, float],
        color: tuple[float, float, float] | str,
        material_id: int = NO_MATERIAL,
    ) -> int:
        """Add a triangle to the scene.

        Args:
            p1: First vertex.
            p2: Second vertex.
            p3: Third vertex. The winding p1 -> p2 -> p3 sets the normal.
            color: The material color as (R, G, B) on the 0-255 scale, or a
                color name.
            material_id: Phong material index, or -1 for the global constants.

        Returns:
            The index of the triangle in the triangle storage.

        Raises:
            ValueError: If the vertices are collinear (degenerate triangle)
                or material_id is unknown.
            RuntimeError: If the maximum number of triangles is exceeded.
        """
        v1 = _triple(p1, "p1")
        v2 = _triple(p2, "p2")
        v3 = _triple(p3, "p3")
        edge1 = (v2[0] - v1[0], v2[1] - v1[1], v2[2] - v1[2])
        edge2 = (v3[0] - v1[0], v3[1] - v1[1], v3[2] - v1[2])
        area = length_py(cross_py(edge1, edge2))
        if area <= DEGENERATE_EPSILON * length_py(edge1) * length_py(edge2):
            raise ValueError(f"degenerate triangle: vertices {v1}, {v2}, {v3} are collinear")
        self._check_material_id(material_id)

        info = TriangleInfo(p1=v1, p2=v2, p3=v3, color=parse_color(color), material_id=material_id)
        index = add_triangle(info.p1, info.p2, info.p3, info.color, info.material_id)
        self.triangles.append(info)
        self._objects.append(info)
        return index

    def add_light(
        self,
        position: tuple[float, float, float],
        diffuse: tuple[float, float, float] | str = WHITE,
        specular: tuple[float, float, float] | str = WHITE,
    ) -> int:
        """Add a point light to the scene.

        Args:
            position: The light location.
            diffuse: Diffuse component color (0-255 scale) or color name.
            specular: Specular component color (0-255 scale) or color name.

        Returns:
            The index of the light in the light storage.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        info = LightInfo(
            position=_triple(position, "position"),
            diffuse=parse_color(diffuse),
            specular=parse_color(specular),
        )
        index = add_light(info.position, info.diffuse, info.specular)
        self.light_sources.append(info)
        self._objects.append(info)
        return index

    def add_object(self, obj: SceneObject) -> int:
        """Add any scene object, dispatching on its type.

        Args:
            obj: A SphereInfo, TriangleInfo or LightInfo.

        Returns:
            The index of the object in its type-specific storage.

        Raises:
            TypeError: If obj is not a known scene object type.
        """
        if isinstance(obj, SphereInfo):
            return self.add_sphere(obj.center, obj.radius, obj.color, obj.material_id)
        if isinstance(obj, TriangleInfo):
            return self.add_triangle(obj.p1, obj.p2, obj.p3, obj.color, obj.material_id)
        if isinstance(obj, LightInfo):
            return self.add_light(obj.position, obj.diffuse, obj.specular)
        raise TypeError(f"Unsupported scene object: {type(obj).__name__}")

    def add_objects(self, objects: Iterable[SceneObject]) -> None:
        """Add several scene objects in order."""
        for obj in objects:
            self.add_object(obj)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def objects(self) -> Iterator[SceneObject]:
        """Iterate over all objects in insertion order."""
        return iter(list(self._objects))

    def lights(self) -> Iterator[LightInfo]:
        """Iterate over all lights in insertion order."""
        return iter(list(self.light_sources))

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_triangle_count(self) -> int:
        """Get the number of triangles in the scene."""
        return get_triangle_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def get_primitive_count(self) -> int:
        """Get the total number of intersectable primitives in the scene."""
        return self.get_sphere_count() + self.get_triangle_count()

    def __len__(self) -> int:
        return len(self._objects)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary with 'materials', 'spheres', 'triangles' and
            'lights' lists.
        """
        return {
            "materials": [
                {
                    "ambient": m.ambient,
                    "diffuse": m.diffuse,
                    "specular": m.specular,
                    "shininess": m.shininess,
                }
                for m in self.materials
            ],
            "spheres": [
                {
                    "center": list(s.center),
                    "radius": s.radius,
                    "color": list(s.color),
                    "material_id": s.material_id,
                }
                for s in self.spheres
            ],
            "triangles": [
                {
                    "p1": list(t.p1),
                    "p2": list(t.p2),
                    "p3": list(t.p3),
                    "color": list(t.color),
                    "material_id": t.material_id,
                }
                for t in self.triangles
            ],
            "lights": [
                {
                    "position": list(light.position),
                    "diffuse": list(light.diffuse),
                    "specular": list(light.specular),
                }
                for light in self.light_sources
            ],
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Clears the current scene first. Materials are loaded before
        primitives so material ids resolve. If any entry fails, the scene
        is left empty rather than partly loaded.

        Args:
            data: Dictionary with optional 'materials', 'spheres',
                'triangles' and 'lights' keys.

        Raises:
            ValueError: If an entry is missing a required key or is invalid.
        """
        self.clear()

        try:
            for mat in data.get("materials", []):
                self.add_material(
                    ambient=mat["ambient"],
                    diffuse=mat["diffuse"],
                    specular=mat["specular"],
                    shininess=mat["shininess"],
                )
            for sphere in data.get("spheres", []):
                self.add_sphere(
                    sphere["center"],
                    sphere["radius"],
                    sphere.get("color", WHITE),
                    sphere.get("material_id", NO_MATERIAL),
                )
            for tri in data.get("triangles", []):
                self.add_triangle(
                    tri["p1"],
                    tri["p2"],
                    tri["p3"],
                    tri.get("color", WHITE),
                    tri.get("material_id", NO_MATERIAL),
                )
            for light in data.get("lights", []):
                self.add_light(
                    light["position"],
                    light.get("diffuse", WHITE),
                    light.get("specular", WHITE),
                )
        except KeyError as e:
            self.clear()
            raise ValueError(f"Scene entry is missing required key {e}") from e
        except (ValueError, TypeError, RuntimeError):
            self.clear()
            raise

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2))

    def load_json(self, filepath: str | Path) -> None:
        """Replace the scene with the contents of a JSON file.

        Raises:
            ValueError: If the file does not hold a valid scene document.
        """
        data = json.loads(Path(filepath).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Scene file {filepath} must contain a JSON object")
        self.from_dict(data)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_triangles() -> int:
        """Get the maximum number of triangles supported."""
        return MAX_TRIANGLES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_PHONG_MATERIALS
