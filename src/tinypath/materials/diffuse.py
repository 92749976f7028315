"""Diffuse (Lambertian) material.

The Lambertian BRDF is constant:
    f(wi, wo) = albedo / pi

Directions are drawn around the oriented normal with the hemisphere sampler
at exponent 0, which spreads the height n . wi uniformly over [0, 1], and the
estimator divides by the Lambertian pdf:
    pdf(wi) = max(0, n . wi) / pi

Example:
    >>> from tinypath.materials.diffuse import Diffuse
    >>> white = Diffuse((1.0, 1.0, 1.0))
    >>> # Inside a Taichi kernel:
    >>> # wi, pdf, state = sample_diffuse(normal, state)
    >>> # brdf = eval_diffuse(albedo)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from tinypath.core.ray import REAL, vec3
from tinypath.core.sampling import next_uniform, oriented_hemisphere_direction
from tinypath.materials.material import WHITE, Color, Material, MaterialType, check_albedo, to_color

INV_PI = 1.0 / tm.pi

# Exponent passed to the hemisphere sampler
DIFFUSE_EXPONENT = 0.0


@dataclass(frozen=True)
class Diffuse(Material):
    """Lambertian material.

    Attributes:
        albedo: Diffuse reflectance (RGB, each component in [0, 1]).
    """

    albedo: Color = WHITE

    material_type: ClassVar[MaterialType] = MaterialType.DIFFUSE

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", to_color(self.albedo, "albedo"))
        check_albedo(self.albedo)


@ti.func
def eval_diffuse(albedo: vec3) -> vec3:
    """Evaluate the Lambertian BRDF (albedo / pi), independent of direction."""
    return albedo * INV_PI


@ti.func
def pdf_diffuse(normal: vec3, wi: vec3) -> REAL:
    """Lambertian pdf max(0, n . wi) / pi, zero below the surface."""
    return ti.max(0.0, tm.dot(normal, wi)) * INV_PI


@ti.func
def sample_diffuse(normal: vec3, state: ti.u32):
    """Sample an incoming direction for a diffuse surface.

    Args:
        normal: Unit normal, already oriented toward wo.
        state: Random stream state.

    Returns:
        A tuple (wi, pdf, next_state).
    """
    s1, u1 = next_uniform(state)
    s2, u2 = next_uniform(s1)
    wi = oriented_hemisphere_direction(u1, u2, normal, DIFFUSE_EXPONENT)
    return wi, pdf_diffuse(normal, wi), s2
