"""Per-pixel ray casting kernel and render target.

This module evaluates one primary ray per pixel: build the ray from the camera
basis, find the closest voxel hit and turn it into a pixel value using one of
two shading policies.

Shading policies:
    NORMAL: RGB from the hit face's axis, ``(normal * 0.5 + 0.5) * 255``;
        black on a miss.
    DISTANCE: grayscale ``clamp(dist / DEPTH_RANGE, 0, 1) * 255``; zero on a
        miss.

Every pixel is a pure function of its flat index, the image size, the camera
basis and the scene. The kernel's outer loop runs in parallel and any split
of the index range produces byte-identical output.

The image is stored row-major as a flat buffer of ``width * height`` pixels,
with the first row at index 0 and no vertical flip.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.core.integrator import (
    ...     ShadingMode, get_image_numpy, render_image, setup_render_target
    ... )
    >>> setup_render_target(256, 256, ShadingMode.NORMAL)
    >>> render_image()
    >>> pixels = get_image_numpy()  # (256, 256, 3) uint8
"""

from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from voxelcast.camera.view import get_ray
from voxelcast.core.ray import Ray
from voxelcast.geometry.box import Hit, hit_normal, is_hit
from voxelcast.scene.intersection import intersect_scene

# Type aliases for 3D vectors
vec3 = tm.vec3
ivec3 = tm.ivec3


class ShadingMode(IntEnum):
    """Enumeration of pixel shading policies.

    Used for shading dispatch in the pixel kernel.
    """

    NORMAL = 0
    DISTANCE = 1


# Bytes per pixel record for each shading policy
RECORD_SIZES = {
    ShadingMode.NORMAL: 3,
    ShadingMode.DISTANCE: 1,
}


def record_size(mode: ShadingMode) -> int:
    """Get the number of bytes a pixel occupies for a shading policy."""
    return RECORD_SIZES[ShadingMode(mode)]


# =============================================================================
# Rendering Constants
# =============================================================================

# Hit distance mapped to full white by distance shading
DEPTH_RANGE = 4.0

# Plain int for comparison inside kernels
_NORMAL_MODE = int(ShadingMode.NORMAL)

# =============================================================================
# Shading
# =============================================================================


@ti.func
def _to_byte(value: ti.f32) -> ti.i32:
    """Scale a [0, 1] value to [0, 255], truncating toward zero."""
    return ti.cast(value * 255.0, ti.i32)


@ti.func
def shade_normal(hit: Hit) -> ivec3:
    """Color a hit by the axis of the face it entered through.

    Args:
        hit: The closest hit for the pixel.

    Returns:
        The RGB bytes, or black on a miss.
    """
    color = ivec3(0, 0, 0)
    if is_hit(hit) == 1:
        shaded = hit_normal(hit) * 0.5 + 0.5
        color = ivec3(_to_byte(shaded.x), _to_byte(shaded.y), _to_byte(shaded.z))
    return color


@ti.func
def shade_distance(hit: Hit) -> ivec3:
    """Color a hit by its distance along the ray.

    Args:
        hit: The closest hit for the pixel.

    Returns:
        The gray byte replicated in all three channels, or zero on a miss.
    """
    gray = 0
    if is_hit(hit) == 1:
        gray = _to_byte(tm.clamp(hit.dist / DEPTH_RANGE, 0.0, 1.0))
    return ivec3(gray, gray, gray)


@ti.func
def shade_ray(ray: Ray, mode: ti.i32) -> ivec3:
    """Trace a ray through the scene and shade the closest hit.

    Args:
        ray: The ray to trace.
        mode: The shading policy (see ShadingMode).

    Returns:
        The pixel value as three bytes in an ivec3.
    """
    hit = intersect_scene(ray)
    color = ivec3(0, 0, 0)
    if mode == _NORMAL_MODE:
        color = shade_normal(hit)
    else:
        color = shade_distance(hit)
    return color


@ti.func
def shoot_ray(global_idx: ti.i32, width: ti.i32, height: ti.i32, mode: ti.i32) -> ivec3:
    """Evaluate the pixel at a flat row-major index.

    Args:
        global_idx: Pixel index, ``idy * width + idx``.
        width: Image width in pixels.
        height: Image height in pixels.
        mode: The shading policy (see ShadingMode).

    Returns:
        The pixel value as three bytes in an ivec3.
    """
    idy = global_idx // width
    idx = global_idx % width
    ray = get_ray(idx, idy, width, height)
    return shade_ray(ray, mode)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions and shading policy (actual active settings)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_shading_mode = ti.field(dtype=ti.i32, shape=())

# Flat row-major pixel buffer (preallocated to max size)
_pixel_buffer = ti.Vector.field(3, dtype=ti.u8, shape=MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT)

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(
    width: int,
    height: int,
    mode: ShadingMode = ShadingMode.NORMAL,
) -> None:
    """Initialize the render target.

    Sets the active image dimensions and shading policy and clears the
    pixel buffer. The buffer is preallocated to MAX_IMAGE_WIDTH x
    MAX_IMAGE_HEIGHT to avoid Taichi kernel recompilation.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).
        mode: The shading policy to render with.

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _shading_mode[None] = int(ShadingMode(mode))
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the pixel buffer to zero."""
    _pixel_buffer.fill(0)


def reset_render_target() -> None:
    """Mark the render target as not set up."""
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def get_shading_mode() -> ShadingMode:
    """Get the shading policy of the current render target."""
    return ShadingMode(int(_shading_mode[None]))


def get_pixel_count() -> int:
    """Get the number of pixels in the active image."""
    width, height = get_image_dimensions()
    return width * height


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_span(start: ti.i32, stop: ti.i32, width: ti.i32, height: ti.i32, mode: ti.i32):
    """Shade pixels with flat indices in [start, stop).

    Args:
        start: First pixel index.
        stop: One past the last pixel index.
        width: Image width in pixels.
        height: Image height in pixels.
        mode: The shading policy (see ShadingMode).
    """
    for global_idx in range(start, stop):
        color = shoot_ray(global_idx, width, height, mode)
        _pixel_buffer[global_idx] = ti.cast(color, ti.u8)


@ti.kernel
def _render_single_pixel(
    global_idx: ti.i32, width: ti.i32, height: ti.i32, mode: ti.i32
) -> ivec3:
    """Shade a single pixel without touching the buffer.

    Used for testing and debugging individual pixels.
    """
    return shoot_ray(global_idx, width, height, mode)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_span(start: int, stop: int) -> None:
    """Render the pixels with flat indices in [start, stop).

    Spans may be rendered in any order and any size; each pixel depends only
    on its own index.

    Args:
        start: First pixel index.
        stop: One past the last pixel index.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the span lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= start <= stop <= width * height:
        raise ValueError(f"Pixel span [{start}, {stop}) outside image of {width * height} pixels")

    if start < stop:
        _render_span(start, stop, width, height, int(get_shading_mode()))


def render_image() -> None:
    """Render every pixel of the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    render_span(0, get_pixel_count())


def render_pixel(idx: int, idy: int) -> tuple[int, ...]:
    """Evaluate a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        idx: Pixel column (0 = first column).
        idy: Pixel row (0 = first row).

    Returns:
        (R, G, B) for normal shading or a 1-tuple (gray,) for distance shading.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the pixel lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= idx < width and 0 <= idy < height):
        raise ValueError(f"Pixel ({idx}, {idy}) outside image of {width}x{height}")

    mode = get_shading_mode()
    color = _render_single_pixel(idy * width + idx, width, height, int(mode))

    if mode == ShadingMode.DISTANCE:
        return (int(color[0]),)
    return (int(color[0]), int(color[1]), int(color[2]))


def get_image_numpy() -> npt.NDArray[np.uint8]:
    """Get the rendered image as a NumPy array.

    Rows are in the order the kernel produced them (row 0 first); no flip is
    applied.

    Returns:
        uint8 array of shape (height, width, 3) for normal shading or
        (height, width) for distance shading.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region of the flat buffer
    pixels = _pixel_buffer.to_numpy()[: width * height]
    image = pixels.reshape(height, width, 3).astype(np.uint8)

    if get_shading_mode() == ShadingMode.DISTANCE:
        image = image[:, :, 0]

    return np.ascontiguousarray(image)
