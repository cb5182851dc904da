"""Camera module for view and ray generation.

Components:
    view: Orbit camera, view-matrix composition and primary ray generation

Camera responsibilities:
    - Compose roll, azimuth and declination rotations
    - Fit the view to the scene bounding box (zoom and pan)
    - Correct for image aspect
    - Map pixel indices to rays in the Taichi kernel
"""

from .view import (
    CameraBasis,
    VoxelCamera,
    build_rotation,
    build_view_inverse,
    compute_camera_basis,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "VoxelCamera",
    "CameraBasis",
    "build_rotation",
    "build_view_inverse",
    "compute_camera_basis",
    "setup_camera",
    "get_camera_info",
    "get_ray",
]
