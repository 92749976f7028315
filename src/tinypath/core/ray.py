"""Ray data structure and vector utilities.

Vectors are 3-component f64 values used for positions, directions and RGB
colors alike. All helpers are Taichi functions and return new vectors.

Example:
    >>> from tinypath.runtime import init_runtime
    >>> init_runtime("cpu")
    >>> from tinypath.core.ray import Ray, ray_at, vec3
    >>> # Inside a Taichi kernel:
    >>> # ray = Ray(origin=vec3(0.0, 0.0, -5.0), direction=vec3(0.0, 0.0, 1.0))
    >>> # point = ray_at(ray, 4.0)  # (0, 0, -1)
"""

import taichi as ti
import taichi.math as tm

# Floating point type used for all geometry and color math
REAL = ti.f64

# 3D vector type for positions, directions and colors
vec3 = ti.types.vector(3, REAL)


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Must be normalized before the
            ray is used for intersection.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: REAL) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> REAL:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The result is undefined for a zero vector; callers must pass
    non-degenerate vectors.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> REAL:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def mult_color(a: vec3, b: vec3) -> vec3:
    """Multiply two colors component by component."""
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def reflect(wo: vec3, normal: vec3) -> vec3:
    """Mirror an outgoing direction about a normal.

    Unlike the usual incident-direction form, wo points away from the surface
    (toward the viewer), and so does the result:

        wi = -wo + 2 (n . wo) n

    Args:
        wo: Direction pointing away from the surface.
        normal: Unit surface normal on the same side as wo.

    Returns:
        The normalized mirror direction.
    """
    return normalize(-wo + 2.0 * tm.dot(normal, wo) * normal)
