"""Sphere primitive with geometric ray-sphere intersection.

With op = center - origin and a unit ray direction d, the hit distances are
the roots of t^2 - 2 (op . d) t + (op . op - r^2) = 0:

    b = op . d
    disc = b^2 - op . op + r^2
    t = b -/+ sqrt(disc)

The nearer root is taken when it lies beyond EPSILON, otherwise the farther
one. The epsilon keeps secondary rays, which start exactly on a surface, from
hitting that surface again at t ~ 0.

Example:
    >>> from tinypath.geometry.sphere import Sphere
    >>> from tinypath.materials import Diffuse
    >>> ball = Sphere((0.0, 0.0, 0.0), 1.0, Diffuse())
    >>> hit = ball.intersect((0.0, 0.0, -5.0), (0.0, 0.0, 1.0))
    >>> round(hit.t, 6)
    4.0
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from tinypath.core.ray import REAL, Ray, make_ray, normalize, ray_at, vec3
from tinypath.errors import SceneError
from tinypath.materials.material import Material

# Minimum hit distance, avoids self-intersection of secondary rays
EPSILON = 1e-4

# Distance reported for a miss
T_MISS = tm.inf

Point = tuple[float, float, float]


@ti.dataclass
class SphereShape:
    """Kernel-side sphere geometry.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: REAL


@ti.dataclass
class SphereHit:
    """Result of a ray-sphere test.

    Attributes:
        hit: 1 if the ray hit the sphere beyond EPSILON, 0 otherwise.
        t: Distance along the ray; T_MISS on a miss.
        normal: Unit outward normal at the hit point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: REAL
    normal: vec3


@ti.func
def hit_sphere(ray: Ray, sphere: SphereShape) -> SphereHit:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray, with a normalized direction.
        sphere: The sphere to test.

    Returns:
        A SphereHit for the nearest root beyond EPSILON, or a miss.
    """
    op = sphere.center - ray.origin
    b = tm.dot(op, ray.direction)
    disc = b * b - tm.dot(op, op) + sphere.radius * sphere.radius

    did_hit = 0
    hit_t = T_MISS
    hit_normal = vec3(0.0, 0.0, 0.0)

    if disc >= 0.0:
        root = ti.sqrt(disc)
        t = b - root
        if t <= EPSILON:
            t = b + root
        if t > EPSILON:
            did_hit = 1
            hit_t = t
            hit_normal = normalize((ray_at(ray, t) - sphere.center) / sphere.radius)

    return SphereHit(hit=did_hit, t=hit_t, normal=hit_normal)


@ti.kernel
def _query_sphere(
    center: vec3,
    radius: REAL,
    origin: vec3,
    direction: vec3,
    out: ti.types.ndarray(dtype=ti.f64, ndim=1),
):
    """Run hit_sphere once and write (hit, t, nx, ny, nz) into out."""
    ray = make_ray(origin, normalize(direction))
    rec = hit_sphere(ray, SphereShape(center=center, radius=radius))
    out[0] = rec.hit
    out[1] = rec.t
    out[2] = rec.normal.x
    out[3] = rec.normal.y
    out[4] = rec.normal.z


@dataclass(frozen=True)
class SphereIntersection:
    """Python-side result of Sphere.intersect.

    Attributes:
        t: Distance along the normalized ray.
        point: The hit point.
        normal: Unit outward normal at the hit point.
    """

    t: float
    point: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]


@dataclass(frozen=True)
class Sphere:
    """A sphere in the scene.

    Attributes:
        center: Center point (x, y, z).
        radius: Radius, must be positive.
        material: Surface material. Materials are immutable and may be shared.
    """

    center: Point
    radius: float
    material: Material

    def __post_init__(self) -> None:
        try:
            center = tuple(float(c) for c in self.center)
            radius = float(self.radius)
        except (TypeError, ValueError) as e:
            raise SceneError(
                f"Invalid sphere geometry: center={self.center!r}, radius={self.radius!r}"
            ) from e
        if len(center) != 3 or not all(math.isfinite(c) for c in center):
            raise SceneError(f"Sphere center must be three finite numbers, got {self.center!r}")
        if not math.isfinite(radius) or radius <= 0.0:
            raise SceneError(f"Sphere radius must be positive, got {self.radius}")
        if not isinstance(self.material, Material):
            raise SceneError(f"Sphere material must be a Material, got {self.material!r}")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "radius", radius)

    def intersect(self, origin: Point, direction: Point) -> SphereIntersection | None:
        """Intersect a ray with this sphere.

        Requires an initialized Taichi runtime.

        Args:
            origin: Ray origin.
            direction: Ray direction (normalized before the test).

        Returns:
            The intersection, or None on a miss.
        """
        out = np.zeros(5, dtype=np.float64)
        _query_sphere(
            self.center,
            self.radius,
            tuple(float(c) for c in origin),
            tuple(float(c) for c in direction),
            out,
        )
        if out[0] == 0:
            return None

        d = np.asarray(direction, dtype=np.float64)
        d = d / np.linalg.norm(d)
        point = np.asarray(origin, dtype=np.float64) + out[1] * d
        return SphereIntersection(t=float(out[1]), point=point, normal=out[2:5].copy())

    def to_dict(self, material_index: int) -> dict[str, Any]:
        """Export the sphere, referencing its material by index."""
        return {"center": list(self.center), "radius": self.radius, "material": material_index}
