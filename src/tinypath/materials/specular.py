"""Specular (mirror) material.

The mirror direction is sampled deterministically:
    wi = -wo + 2 (n . wo) n

The BRDF is the albedo and the pdf is n . wi. A true mirror has a delta
distribution; the cosine pdf makes the estimator weight albedo * cos / cos,
i.e. the albedo, for every mirror bounce.

Example:
    >>> from tinypath.materials.specular import Specular
    >>> mirror = Specular((1.0, 1.0, 1.0))
    >>> # Inside a Taichi kernel:
    >>> # wi, pdf = sample_specular(normal, wo)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from tinypath.core.ray import reflect, vec3
from tinypath.materials.material import WHITE, Color, Material, MaterialType, check_albedo, to_color


@dataclass(frozen=True)
class Specular(Material):
    """Perfect mirror.

    Attributes:
        albedo: Reflected color tint (RGB, each component in [0, 1]).
    """

    albedo: Color = WHITE

    material_type: ClassVar[MaterialType] = MaterialType.SPECULAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", to_color(self.albedo, "albedo"))
        check_albedo(self.albedo)


@ti.func
def eval_specular(albedo: vec3) -> vec3:
    """Evaluate the mirror BRDF, which is the albedo itself."""
    return albedo


@ti.func
def sample_specular(normal: vec3, wo: vec3):
    """Sample the mirror direction.

    Args:
        normal: Unit normal, already oriented toward wo.
        wo: Unit direction pointing away from the surface.

    Returns:
        A tuple (wi, pdf) with pdf = n . wi.
    """
    wi = reflect(wo, normal)
    return wi, tm.dot(normal, wi)
