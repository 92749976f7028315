"""Material interface shared by all material models.

Materials are immutable Python values describing a surface; they are uploaded
to the scene's material table as a closed tagged union (``MaterialType`` plus
an albedo and an emission color) and evaluated on the kernel side by the
integrator's material dispatch.

Every material exposes:
    - albedo: the color used by the BRDF
    - emission: light emitted by the surface (black for non-emitters)
    - material_type: the tag used for dispatch
"""

import math
from enum import IntEnum
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

from tinypath.core.ray import vec3
from tinypath.errors import SceneError

Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)
RED: Color = (1.0, 0.0, 0.0)
GREEN: Color = (0.0, 1.0, 0.0)
BLUE: Color = (0.0, 0.0, 1.0)


class MaterialType(IntEnum):
    """Tag used for material dispatch in the integrator."""

    DIFFUSE = 0
    SPECULAR = 1
    EMISSIVE = 2


def to_color(value: Any, name: str = "color") -> Color:
    """Convert a 3-sequence to a color tuple of floats.

    Raises:
        SceneError: If the value does not have three finite, non-negative
            components.
    """
    try:
        r, g, b = (float(c) for c in value)
    except (TypeError, ValueError) as e:
        raise SceneError(f"{name} must be a sequence of three numbers, got {value!r}") from e

    for i, component in enumerate((r, g, b)):
        if not math.isfinite(component) or component < 0.0:
            raise SceneError(f"{name} component {i} = {component} must be finite and >= 0")
    return (r, g, b)


def check_albedo(albedo: Color) -> None:
    """Reject albedo components above 1, which would create energy."""
    for i, component in enumerate(albedo):
        if component > 1.0:
            raise SceneError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


class Material:
    """Base class for materials.

    Subclasses are frozen dataclasses declaring an ``albedo`` field and a
    ``material_type`` class variable.
    """

    material_type: ClassVar[MaterialType]
    albedo: Color

    @property
    def emission(self) -> Color:
        """Emitted radiance; black unless the material is an emitter."""
        return BLACK

    @property
    def is_emitter(self) -> bool:
        return any(c > 0.0 for c in self.emission)

    def to_dict(self) -> dict[str, Any]:
        """Export the material for JSON serialization."""
        return {"type": self.material_type.name.lower(), "albedo": list(self.albedo)}


@ti.func
def orient_normal(normal: vec3, wo: vec3) -> vec3:
    """Flip the normal onto the same side as the outgoing direction.

    Args:
        normal: Unit surface normal (outward for spheres).
        wo: Direction pointing away from the surface toward the viewer.

    Returns:
        The normal, negated if dot(normal, wo) < 0.
    """
    result = normal
    if tm.dot(normal, wo) < 0.0:
        result = -normal
    return result
