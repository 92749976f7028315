"""Path tracing integrator.

Estimates the radiance arriving along a ray with unidirectional path tracing:

    L(x, wo) = Le(x) + f(wi, wo, n) * L(x', wi) * (wi . n) / pdf(wi)

with one importance sampled direction per bounce and hard truncation at
``max_depth``: a path gathers emission at depths 0..max_depth and scatters
only at depths below max_depth. There is no environment light, so escaping
rays contribute nothing, and no Russian roulette.

The recursion is evaluated as a loop with a throughput factor, the product of
f * cos / pdf along the path so far. A bounce whose pdf does not exceed
PDF_EPSILON ends the path, which is the same as a zero contribution.

Key features:
    - Material dispatch over the closed MaterialType union
    - Per-sample random streams seeded from (seed, pixel, sample)
    - Row-batched rendering into a NumPy image buffer
    - Non-finite and negative samples replaced by zero

Example:
    >>> from tinypath.runtime import init_runtime
    >>> init_runtime("cpu")
    >>> from tinypath.core.integrator import render_rows, trace_ray
    >>> from tinypath.camera.pinhole import setup_camera
    >>> from tinypath.scene.manager import upload_scene
    >>> from tinypath.scene.sphere_box import create_sphere_box_scene
    >>>
    >>> scene, camera = create_sphere_box_scene()
    >>> upload_scene(scene)
    >>> setup_camera(camera)
    >>> import numpy as np
    >>> image = np.zeros((64, 64, 3))
    >>> render_rows(image, 0, 64, spp=4)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from tinypath.camera.pinhole import spawn_ray
from tinypath.core.ray import REAL, make_ray, mult_color, normalize, vec3
from tinypath.core.sampling import next_uniform, seed_stream
from tinypath.materials.diffuse import eval_diffuse, sample_diffuse
from tinypath.materials.material import MaterialType, orient_normal
from tinypath.materials.specular import eval_specular, sample_specular
from tinypath.scene.intersection import intersect_scene
from tinypath.scene.manager import (
    get_material_albedo,
    get_material_emission,
    get_material_type,
)

# =============================================================================
# Rendering Constants
# =============================================================================

# Default maximum path depth (number of scattering events)
MAX_DEPTH = 2

# Bounces with a pdf at or below this value contribute nothing
PDF_EPSILON = 1e-12


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _sample_material(material_type: ti.i32, normal: vec3, wo: vec3, state: ti.u32):
    """Sample an incoming direction for the hit material.

    Emissive surfaces scatter like diffuse ones.

    Args:
        material_type: MaterialType tag of the hit material.
        normal: Unit normal, oriented toward wo.
        wo: Unit direction pointing back along the incoming ray.
        state: Random stream state.

    Returns:
        A tuple (wi, pdf, next_state).
    """
    wi = vec3(0.0, 0.0, 0.0)
    pdf = ti.cast(0.0, REAL)
    next_state = state

    if material_type == int(MaterialType.SPECULAR):
        wi, pdf = sample_specular(normal, wo)
    else:
        wi, pdf, next_state = sample_diffuse(normal, state)

    return wi, pdf, next_state


@ti.func
def _eval_material(material_type: ti.i32, albedo: vec3) -> vec3:
    """Evaluate the BRDF of the hit material."""
    brdf = vec3(0.0, 0.0, 0.0)
    if material_type == int(MaterialType.SPECULAR):
        brdf = eval_specular(albedo)
    else:
        brdf = eval_diffuse(albedo)
    return brdf


@ti.func
def _sanitize(color: vec3) -> vec3:
    """Replace NaN, infinite and negative components with zero."""
    result = color
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]) or result[c] < 0.0:
            result[c] = 0.0
    return result


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_radiance(
    origin: vec3,
    direction: vec3,
    start_depth: ti.i32,
    max_depth: ti.i32,
    state: ti.u32,
):
    """Estimate the radiance arriving at origin from direction.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized here).
        start_depth: Depth of the first bounce; a value above max_depth
            yields black.
        max_depth: Last depth that gathers emission.
        state: Random stream state.

    Returns:
        A tuple (radiance, next_state).
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = normalize(direction)
    s = state

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for depth in range(start_depth, max_depth + 1):
        if active == 1:
            rec = intersect_scene(make_ray(ray_origin, ray_direction))

            if rec.hit == 0:
                active = 0
            else:
                material_id = rec.material_id
                radiance += mult_color(throughput, get_material_emission(material_id))

                if depth == max_depth:
                    active = 0
                else:
                    material_type = get_material_type(material_id)
                    wo = -ray_direction
                    normal = orient_normal(rec.normal, wo)

                    wi, pdf, s = _sample_material(material_type, normal, wo, s)

                    if pdf > PDF_EPSILON:
                        brdf = _eval_material(material_type, get_material_albedo(material_id))
                        throughput = mult_color(throughput, brdf) * tm.dot(wi, normal) / pdf
                        ray_origin = rec.point
                        ray_direction = wi
                    else:
                        active = 0

    return radiance, s


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    image: ti.types.ndarray(dtype=ti.f64, ndim=3),
    row_start: ti.i32,
    row_end: ti.i32,
    spp: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
):
    """Render rows [row_start, row_end) of the image.

    Every pixel of the batch is processed in parallel and written once.
    """
    height = image.shape[0]
    width = image.shape[1]
    inv_spp = 1.0 / ti.cast(spp, REAL)
    half_width = 0.5 * ti.cast(width, REAL)
    half_height = 0.5 * ti.cast(height, REAL)

    for row, col in ti.ndrange((row_start, row_end), (0, width)):
        pixel = vec3(0.0, 0.0, 0.0)
        pixel_index = ti.cast(row * width + col, ti.u32)

        for sample in range(spp):
            s0 = seed_stream(seed, pixel_index, ti.cast(sample, ti.u32))
            s1, jitter_x = next_uniform(s0)
            s2, jitter_y = next_uniform(s1)

            sx = ti.cast(col, REAL) + jitter_x - half_width
            sy = ti.cast(row, REAL) + jitter_y - half_height
            ray = spawn_ray(sx, sy)

            radiance, _next_state = trace_radiance(ray.origin, ray.direction, 0, max_depth, s2)
            pixel += _sanitize(radiance) * inv_spp

        for c in ti.static(range(3)):
            image[row, col, c] = pixel[c]


@ti.kernel
def _trace_single(
    origin: vec3,
    direction: vec3,
    start_depth: ti.i32,
    max_depth: ti.i32,
    seed: ti.u32,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Trace one path and write its radiance into out."""
    # Single-iteration outer loop keeps the bounce loop serial
    for _pass in range(1):
        state = seed_stream(seed, ti.cast(0, ti.u32), ti.cast(0, ti.u32))
        radiance, _next_state = trace_radiance(origin, direction, start_depth, max_depth, state)
        color = _sanitize(radiance)
        for c in ti.static(range(3)):
            out[c] = color[c]


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(
    image: npt.NDArray[np.float64],
    row_start: int,
    row_end: int,
    spp: int,
    max_depth: int = MAX_DEPTH,
    seed: int = 0,
) -> None:
    """Render a batch of rows into an image buffer.

    The scene and camera must already be uploaded.

    Args:
        image: C-contiguous float64 array of shape (height, width, 3).
        row_start: First row of the batch.
        row_end: One past the last row of the batch.
        spp: Samples per pixel.
        max_depth: Maximum path depth.
        seed: Render seed; the same seed reproduces the same image.
    """
    _render_rows(image, row_start, row_end, spp, max_depth, seed)


def trace_ray(
    origin,
    direction,
    max_depth: int = MAX_DEPTH,
    seed: int = 0,
    depth: int = 0,
) -> tuple[float, float, float]:
    """Estimate the radiance along a single ray.

    Intended for debugging and tests. The scene must already be uploaded.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (normalized before tracing).
        max_depth: Maximum path depth.
        seed: Seed of the random stream.
        depth: Depth the ray starts at; above max_depth the result is black.

    Returns:
        The radiance estimate (R, G, B).
    """
    out = np.zeros(3, dtype=np.float64)
    origin = tuple(float(c) for c in origin)
    direction = tuple(float(c) for c in direction)
    _trace_single(origin, direction, depth, max_depth, seed, out)
    return (float(out[0]), float(out[1]), float(out[2]))
