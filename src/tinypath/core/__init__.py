"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    sampling: Explicit random streams and hemisphere sampling
    integrator: Radiance estimator and rendering kernels
    renderer: Render settings, row-batched rendering loop and progress hooks

The core module estimates the rendering equation with unidirectional path
tracing: camera rays bounce off surfaces up to a fixed depth, each bounce is
importance sampled by the hit material, and emission is gathered along the
path.

Note: integrator and renderer declare Taichi fields through the scene and
camera modules and are NOT imported here. Import them directly after
``tinypath.runtime.init_runtime`` has run:
    from tinypath.core.renderer import Renderer, RenderSettings
"""

from .ray import (
    REAL,
    Ray,
    cross,
    dot,
    length,
    make_ray,
    mult_color,
    normalize,
    ray_at,
    reflect,
    vec3,
)
from .sampling import (
    hash_u32,
    next_uniform,
    oriented_hemisphere_direction,
    sample_hemisphere,
    seed_stream,
)

__all__ = [
    "REAL",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "normalize",
    "dot",
    "cross",
    "mult_color",
    "reflect",
    "hash_u32",
    "seed_stream",
    "next_uniform",
    "sample_hemisphere",
    "oriented_hemisphere_direction",
]
