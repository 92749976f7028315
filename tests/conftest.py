"""Pytest configuration for tinypath tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from tinypath.runtime import init_runtime

    init_runtime("cpu")
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear uploaded scene, material and camera data around each test."""
    # Import here so the fields are declared after Taichi is initialized
    from tinypath.camera.pinhole import clear_camera
    from tinypath.scene.intersection import clear_scene
    from tinypath.scene.manager import clear_material_table

    def _clear_all():
        clear_scene()
        clear_material_table()
        clear_camera()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def emissive_box():
    """A closed diffuse box (inward-facing wall spheres) with one light sphere.

    Returns a (scene, camera) pair; the camera sits in the middle of the box.
    """
    from tinypath.camera.pinhole import Camera
    from tinypath.materials import Diffuse, Emissive
    from tinypath.scene.manager import Scene

    scene = Scene()
    wall = Diffuse((0.7, 0.7, 0.7))
    d, r = 520.0, 500.0
    for center in [(0, -d, 0), (0, d, 0), (-d, 0, 0), (d, 0, 0), (0, 0, -d), (0, 0, d)]:
        scene.add_sphere(center, r, wall)
    scene.add_sphere((0.0, -12.0, 10.0), 4.0, Emissive((4.0, 4.0, 4.0)))

    camera = Camera(eye=(0.0, 0.0, -10.0), focal_point=(0.0, 0.0, 0.0), view_distance=20.0)
    return scene, camera
