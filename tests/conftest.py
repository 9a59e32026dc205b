"""Pytest configuration for ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Every module that
    declares fields expects 64-bit floats, hence default_fp.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before each test.

    This ensures tests are isolated from each other.
    """
    # Import here to avoid circular imports and ensure Taichi is initialized
    from src.raycast.core.renderer import reset_render_target
    from src.raycast.materials.phong import clear_phong_materials
    from src.raycast.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_phong_materials()
        reset_render_target()

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()


@pytest.fixture
def small_config():
    """A small, square-pixel configuration that renders quickly."""
    from src.raycast.config import RenderConfig

    return RenderConfig(width=40, height=40)
