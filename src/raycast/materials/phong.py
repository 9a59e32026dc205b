"""Phong material registry.

A Phong material bundles the four lighting coefficients used by the LIGHT
color mode: ambient (ka), diffuse (kd), specular (ks) and shininess.
Primitives reference a material by index; ``NO_MATERIAL`` (-1) means the
primitive uses the render configuration's global coefficients instead.

Materials are stored in Taichi fields so the shading kernel can look them up
per hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.materials.phong import add_phong_material
    >>> shiny = add_phong_material(ambient=0.1, diffuse=0.6, specular=0.8, shininess=2.0)
"""

import taichi as ti


@ti.dataclass
class PhongMaterial:
    """Lighting coefficients for one material.

    Attributes:
        ambient: Ambient reflection constant (ka).
        diffuse: Diffuse reflection constant (kd).
        specular: Specular reflection constant (ks).
        shininess: Exponent applied to the specular term.
    """

    ambient: ti.f64
    diffuse: ti.f64
    specular: ti.f64
    shininess: ti.f64


# Material index meaning "use the global coefficients"
NO_MATERIAL = -1

# Maximum number of Phong materials in the scene
MAX_PHONG_MATERIALS = 256

# Storage for material coefficients (ka, kd, ks, shininess)
phong_ambient = ti.field(dtype=ti.f64, shape=MAX_PHONG_MATERIALS)
phong_diffuse = ti.field(dtype=ti.f64, shape=MAX_PHONG_MATERIALS)
phong_specular = ti.field(dtype=ti.f64, shape=MAX_PHONG_MATERIALS)
phong_shininess = ti.field(dtype=ti.f64, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all Phong materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def add_phong_material(
    ambient: float,
    diffuse: float,
    specular: float,
    shininess: float,
) -> int:
    """Add a Phong material to the material registry.

    Args:
        ambient: Ambient reflection constant (ka), non-negative.
        diffuse: Diffuse reflection constant (kd), non-negative.
        specular: Specular reflection constant (ks), non-negative.
        shininess: Specular exponent, non-negative.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any coefficient is negative.
    """
    coefficients = {
        "ambient": ambient,
        "diffuse": diffuse,
        "specular": specular,
        "shininess": shininess,
    }
    for name, value in coefficients.items():
        if value < 0.0:
            raise ValueError(f"Phong {name} coefficient = {value} is negative.")

    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(f"Maximum number of Phong materials ({MAX_PHONG_MATERIALS}) exceeded")

    phong_ambient[idx] = ambient
    phong_diffuse[idx] = diffuse
    phong_specular[idx] = specular
    phong_shininess[idx] = shininess
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of Phong materials in the registry."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_idx: ti.i32) -> PhongMaterial:
    """Look up a material's coefficients by index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The PhongMaterial stored at that index.
    """
    return PhongMaterial(
        ambient=phong_ambient[material_idx],
        diffuse=phong_diffuse[material_idx],
        specular=phong_specular[material_idx],
        shininess=phong_shininess[material_idx],
    )


@ti.func
def resolve_material(material_idx: ti.i32, fallback: PhongMaterial) -> PhongMaterial:
    """Return the registered material, or fallback for NO_MATERIAL.

    Out-of-range indices also resolve to the fallback.
    """
    result = fallback
    if 0 <= material_idx < num_phong_materials[None]:
        result = get_phong_material(material_idx)
    return result
