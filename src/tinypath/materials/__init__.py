"""Materials module for BRDF models.

Components:
    material: Material base class, MaterialType tag and normal orientation
    diffuse: Lambertian reflection with hemisphere sampling
    specular: Perfect mirror reflection
    emissive: Diffuse surface with constant emission

Each material provides, as Taichi functions:
    - eval_*(): the BRDF value f(wi, wo, n)
    - sample_*(): an importance sampled incoming direction and its pdf

The Python classes are frozen dataclasses and can be shared between spheres.
"""

from .diffuse import Diffuse, eval_diffuse, pdf_diffuse, sample_diffuse
from .emissive import Emissive
from .material import (
    BLACK,
    BLUE,
    GREEN,
    RED,
    WHITE,
    Color,
    Material,
    MaterialType,
    orient_normal,
    to_color,
)
from .specular import Specular, eval_specular, sample_specular

__all__ = [
    "Material",
    "MaterialType",
    "Color",
    "to_color",
    "orient_normal",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    # Diffuse
    "Diffuse",
    "eval_diffuse",
    "pdf_diffuse",
    "sample_diffuse",
    # Specular
    "Specular",
    "eval_specular",
    "sample_specular",
    # Emissive
    "Emissive",
]
