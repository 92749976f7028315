"""Emissive material: a diffuse surface that also emits light.

Scattering is identical to ``Diffuse``; the integrator adds the emission at
every hit of the surface. When no albedo is given the emission color is used
as the scattering albedo (clamped to [0, 1]), so a warm light also reflects
warm light.

Example:
    >>> from tinypath.materials.emissive import Emissive
    >>> lamp = Emissive((0.8, 0.72, 0.56))
    >>> lamp.albedo
    (0.8, 0.72, 0.56)
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from tinypath.materials.material import WHITE, Color, Material, MaterialType, check_albedo, to_color


@dataclass(frozen=True)
class Emissive(Material):
    """Diffuse emitter.

    Attributes:
        emission: Emitted radiance (RGB, non-negative, may exceed 1).
        albedo: Diffuse reflectance. Defaults to the emission clamped to [0, 1].
    """

    emission: Color = WHITE
    albedo: Color | None = None

    material_type: ClassVar[MaterialType] = MaterialType.EMISSIVE

    def __post_init__(self) -> None:
        emission = to_color(self.emission, "emission")
        object.__setattr__(self, "emission", emission)

        if self.albedo is None:
            albedo = (min(emission[0], 1.0), min(emission[1], 1.0), min(emission[2], 1.0))
        else:
            albedo = to_color(self.albedo, "albedo")
        check_albedo(albedo)
        object.__setattr__(self, "albedo", albedo)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["emission"] = list(self.emission)
        return data
