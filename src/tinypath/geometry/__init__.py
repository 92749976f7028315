"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection

Spheres are the only primitive. The kernel-side test is a Taichi function:
    rec = hit_sphere(ray, SphereShape(center=c, radius=r))
and the Python-side ``Sphere`` carries a material and offers
``Sphere.intersect`` for inspection.
"""

from .sphere import (
    EPSILON,
    T_MISS,
    Sphere,
    SphereHit,
    SphereIntersection,
    SphereShape,
    hit_sphere,
)

__all__ = [
    "EPSILON",
    "T_MISS",
    "Sphere",
    "SphereHit",
    "SphereIntersection",
    "SphereShape",
    "hit_sphere",
]
