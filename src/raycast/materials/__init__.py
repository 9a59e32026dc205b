"""Materials module.

Components:
    phong: Registry of per-primitive Phong coefficients (ka, kd, ks,
        shininess)

Primitives without a material use the render configuration's global
coefficients.
"""

from .phong import (
    MAX_PHONG_MATERIALS,
    NO_MATERIAL,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    get_phong_material,
    get_phong_material_count,
    resolve_material,
)

__all__ = [
    "PhongMaterial",
    "NO_MATERIAL",
    "MAX_PHONG_MATERIALS",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material",
    "get_phong_material_count",
    "resolve_material",
]
