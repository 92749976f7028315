"""Scene-level nearest-hit intersection.

Spheres are stored in Taichi fields (structure of arrays) and scanned
linearly; there is no acceleration structure. The closest hit wins, and on an
exact tie the sphere that comes first in scene order is kept.

Example:
    >>> from tinypath.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 0.0), 1.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import numpy as np
import taichi as ti

from tinypath.core.ray import REAL, Ray, make_ray, normalize, ray_at, vec3
from tinypath.errors import SceneError
from tinypath.geometry.sphere import T_MISS, SphereShape, hit_sphere


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if any sphere was hit, 0 otherwise.
        t: Distance to the nearest hit; T_MISS on a miss.
        point: The hit point. Only valid if hit == 1.
        normal: Unit outward normal of the hit sphere. Only valid if hit == 1.
        sphere_index: Index of the hit sphere, -1 on a miss.
        material_id: Material ID of the hit sphere, -1 on a miss.
    """

    hit: ti.i32
    t: REAL
    point: vec3
    normal: vec3
    sphere_index: ti.i32
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

sphere_centers = ti.Vector.field(3, dtype=REAL, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=REAL, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene fields."""
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Append a sphere to the scene fields.

    Args:
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: Index into the material table.

    Returns:
        The index of the added sphere.

    Raises:
        SceneError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise SceneError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene fields."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=T_MISS,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        sphere_index=-1,
        material_id=-1,
    )


@ti.func
def intersect_scene(ray: Ray) -> SceneHitRecord:
    """Find the nearest sphere hit by a ray.

    Args:
        ray: The ray, with a normalized direction.

    Returns:
        The nearest hit, or a miss record.
    """
    closest_t = T_MISS
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, SphereShape(center=sphere_centers[i], radius=sphere_radii[i]))
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=ray_at(ray, rec.t),
                normal=rec.normal,
                sphere_index=i,
                material_id=sphere_material_ids[i],
            )

    return result


@ti.kernel
def _query_nearest(origin: vec3, direction: vec3, out: ti.types.ndarray(dtype=ti.f64, ndim=1)):
    """Run intersect_scene once and write (hit, t, index, nx, ny, nz) into out."""
    # Single-iteration outer loop keeps the sphere scan serial
    for _pass in range(1):
        rec = intersect_scene(make_ray(origin, normalize(direction)))
        out[0] = rec.hit
        out[1] = rec.t
        out[2] = rec.sphere_index
        out[3] = rec.normal.x
        out[4] = rec.normal.y
        out[5] = rec.normal.z


def query_nearest(origin, direction) -> tuple[float, int, np.ndarray] | None:
    """Intersect one ray with the uploaded scene from Python.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (normalized before the test).

    Returns:
        (t, sphere_index, normal) for the nearest hit, or None on a miss.
    """
    out = np.zeros(6, dtype=np.float64)
    _query_nearest(tuple(float(c) for c in origin), tuple(float(c) for c in direction), out)
    if out[0] == 0 or not np.isfinite(out[1]):
        return None
    return float(out[1]), int(out[2]), out[3:6].copy()

