"""Pytest configuration for voxel ray caster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and render target state before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized
    from voxelcast.core.integrator import reset_render_target
    from voxelcast.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def two_voxel_scene():
    """The compiled-in two-voxel scene, loaded into the scene fields."""
    from voxelcast.scene.presets import VOXEL_SCENE, create_voxel_scene

    bbox = create_voxel_scene(VOXEL_SCENE)
    return VOXEL_SCENE, bbox
