"""Explicit random streams and hemisphere sampling.

There is no global random generator. Every (pixel, sample) pair gets its own
stream whose 32-bit state is derived from the render seed, the pixel index and
the sample index, and every sampling function takes the state and returns the
advanced state with its result. Results are therefore reproducible for a given
seed and independent of the order in which threads execute.

Streams are seeded with the Wang integer hash and advanced with Marsaglia's
xorshift32, which never reaches the zero state once it starts from a non-zero
one.

Example:
    >>> # Inside a Taichi kernel:
    >>> # state = seed_stream(seed, pixel_index, sample_index)
    >>> # state, u1 = next_uniform(state)
    >>> # state, u2 = next_uniform(state)
    >>> # wi = oriented_hemisphere_direction(u1, u2, normal, 0.0)
"""

import taichi as ti
import taichi.math as tm

from tinypath.core.ray import REAL, cross, normalize, vec3

TWO_PI = 2.0 * tm.pi

# 2^-24: converts the top 24 bits of a 32-bit state into [0, 1)
_UNIFORM_SCALE = 1.0 / 16777216.0

# Replacement for a zero xorshift state
_NONZERO_STATE = 0x6C078965


@ti.func
def hash_u32(x: ti.u32) -> ti.u32:
    """Wang hash of a 32-bit integer."""
    h = (x ^ ti.cast(61, ti.u32)) ^ (x >> ti.cast(16, ti.u32))
    h = h * ti.cast(9, ti.u32)
    h = h ^ (h >> ti.cast(4, ti.u32))
    h = h * ti.cast(0x27D4EB2D, ti.u32)
    h = h ^ (h >> ti.cast(15, ti.u32))
    return h


@ti.func
def seed_stream(seed: ti.u32, pixel_index: ti.u32, sample_index: ti.u32) -> ti.u32:
    """Derive the initial state of the random stream for one sample.

    Args:
        seed: The render seed.
        pixel_index: Row-major index of the pixel.
        sample_index: Index of the sample within the pixel.

    Returns:
        A non-zero 32-bit stream state.
    """
    state = hash_u32(seed ^ hash_u32(pixel_index ^ hash_u32(sample_index)))
    if state == ti.cast(0, ti.u32):
        state = ti.cast(_NONZERO_STATE, ti.u32)
    return state


@ti.func
def next_uniform(state: ti.u32):
    """Advance a stream and draw a uniform number in [0, 1).

    Args:
        state: The current (non-zero) stream state.

    Returns:
        A tuple (next_state, u) with u uniform in [0, 1).
    """
    s = state
    s = s ^ (s << ti.cast(13, ti.u32))
    s = s ^ (s >> ti.cast(17, ti.u32))
    s = s ^ (s << ti.cast(5, ti.u32))
    u = ti.cast(s >> ti.cast(8, ti.u32), REAL) * _UNIFORM_SCALE
    return s, u


@ti.func
def sample_hemisphere(u1: REAL, u2: REAL, exponent: REAL) -> vec3:
    """Map two uniform numbers to a direction on the z-up hemisphere.

    The height is z = (1 - u1)^(1/(exponent+1)): exponent 0 spreads z uniformly
    over [0, 1] and exponent 1 gives cosine-weighted directions.

    Args:
        u1: Uniform number in [0, 1) for the polar angle.
        u2: Uniform number in [0, 1) for the azimuth.
        exponent: Height exponent.

    Returns:
        A unit direction with z >= 0 in the local frame.
    """
    z = (1.0 - u1) ** (1.0 / (exponent + 1.0))
    phi = TWO_PI * u2
    r = ti.sqrt(ti.max(0.0, 1.0 - z * z))
    return vec3(r * ti.cos(phi), r * ti.sin(phi), z)


@ti.func
def oriented_hemisphere_direction(u1: REAL, u2: REAL, normal: vec3, exponent: REAL) -> vec3:
    """Sample a hemisphere direction around a world-space normal.

    Builds an orthonormal frame with the normal as its z axis from a jittered
    helper up vector, then projects the local sample into it.

    Args:
        u1: Uniform number in [0, 1).
        u2: Uniform number in [0, 1).
        normal: Unit normal defining the hemisphere.
        exponent: Height exponent of sample_hemisphere.

    Returns:
        A unit direction with dot(direction, normal) >= 0.
    """
    p = sample_hemisphere(u1, u2, exponent)
    w = normal
    # Slightly off-axis so it is never parallel to an axis-aligned normal
    helper = vec3(0.00319, 1.0, 0.0078)
    side = cross(helper, w)
    if tm.length(side) < 1e-9:
        side = cross(vec3(1.0, 0.0, 0.0), w)
    v = normalize(side)
    u = normalize(cross(v, w))
    return normalize(u * p.x + v * p.y + w * p.z)
