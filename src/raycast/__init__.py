"""Taichi-based ray caster with local Phong shading.

This package casts one ray per pixel through a fixed pinhole viewport, finds
the closest sphere or triangle, and shades it with a non-recursive lighting
model plus distance fog. All per-pixel work runs in Taichi kernels.

Subpackages:
    core: Vector and color math, rays, shading, and the raster render loop
    geometry: Sphere and triangle intersection routines
    materials: Per-primitive Phong lighting coefficients
    scene: Primitive/light storage, scene manager, and the demo scene
    camera: Viewport geometry and primary ray generation
    preview: Image export and Matplotlib preview

Taichi must be initialized with ``default_fp=ti.f64`` before any submodule
that declares fields is imported.
"""

__version__ = "0.1.0"
