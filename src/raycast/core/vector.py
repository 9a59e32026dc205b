"""Double-precision 3D vector utilities for use inside Taichi kernels.

Points and directions share a single representation (``vec3``); the
difference is only in how callers use them. Every helper is pure and returns
a new value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.raycast.core.vector import vec3, normalize, lerp
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     v = normalize(vec3(3.0, 0.0, 4.0))
    ...     return lerp(v, vec3(0.0, 0.0, 0.0), 0.5).z
"""

import math

import numpy as np
import taichi as ti
import taichi.math as tm

# 3D vector of 64-bit floats
vec3 = ti.types.vector(3, ti.f64)

# Largest finite double, used as the sentinel in three-way minimums
FLOAT_MAX = 1.7976931348623157e308


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum."""
    return a + b


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return a - b


@ti.func
def scale(v: vec3, amount: ti.f64) -> vec3:
    """Multiply every component by a scalar."""
    return v * amount


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Unlike ``tm.normalize`` nothing guards the zero vector: a zero-length
    input yields NaN components. Callers must only pass non-zero vectors.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
    """
    return v / length(v)


@ti.func
def lerp(a: vec3, b: vec3, ratio: ti.f64) -> vec3:
    """Linearly interpolate from a toward b.

    Computes ``a + (b - a) * ratio``. Ratios outside [0, 1] extrapolate.

    Args:
        a: Start value (returned for ratio 0).
        b: End value (returned for ratio 1).
        ratio: Interpolation parameter.

    Returns:
        The interpolated vector.
    """
    return (b - a) * ratio + a


# =============================================================================
# Scalar Helpers
# =============================================================================


@ti.func
def min3(a: ti.f64, b: ti.f64, c: ti.f64) -> ti.f64:
    """Smallest of three values, preferring the later argument on ties."""
    result = c
    if a < b and a < c:
        result = a
    elif b < c:
        result = b
    return result


@ti.func
def max3(a: ti.f64, b: ti.f64, c: ti.f64) -> ti.f64:
    """Largest of three values, preferring the later argument on ties."""
    result = c
    if a > b and a > c:
        result = a
    elif b > c:
        result = b
    return result


@ti.func
def clamp(value: ti.f64, lo: ti.f64, hi: ti.f64) -> ti.f64:
    """Clamp a scalar into [lo, hi]."""
    return tm.clamp(value, lo, hi)


# =============================================================================
# Python-side Helpers (scene construction and validation)
# =============================================================================


def cross_py(
    a: tuple[float, float, float], b: tuple[float, float, float]
) -> tuple[float, float, float]:
    """Cross product of two Python triples, computed with NumPy."""
    result = np.cross(np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64))
    return (float(result[0]), float(result[1]), float(result[2]))


def length_py(v: tuple[float, float, float]) -> float:
    """Euclidean length of a Python triple."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
