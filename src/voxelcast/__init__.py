"""Taichi-based voxel ray caster.

This package renders a small static scene of axis-aligned boxes ("voxels") by
casting one ray per pixel and shading the closest hit, with support for:
- Slab-method ray/box intersection with face identification
- Orbit camera derived from the scene bounding box
- Normal (RGB) and distance (grayscale) shading
- Tiled, order-independent pixel evaluation
- Binary image container and PNG conversion

Subpackages:
    core: Vector/matrix algebra, rays, the pixel kernel and the tiled renderer
    geometry: Box primitive and slab intersection
    scene: Voxel storage, bounds and the compiled-in presets
    camera: View transform and primary ray generation
    output: Binary image container and PNG export
"""

__version__ = "0.1.0"
