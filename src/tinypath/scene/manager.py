"""Scene description and upload to the kernel-side tables.

A ``Scene`` is an ordered list of spheres, built once and read-only while
rendering. ``upload_scene`` flattens it into Taichi fields:

- the sphere fields of ``tinypath.scene.intersection``
- a material table indexed by material ID, holding the MaterialType tag, the
  albedo and the emission of every distinct material

Materials are deduplicated by value, so spheres sharing a material share one
table entry.

Scenes round-trip through plain dictionaries (and JSON files) with the layout:

    {
        "materials": [{"type": "diffuse", "albedo": [1, 1, 1]}, ...],
        "spheres": [{"center": [0, 0, 0], "radius": 1.0, "material": 0}, ...],
        "camera": {"eye": [...], "focal_point": [...], "view_distance": 400, "up": [...]}
    }

Example:
    >>> from tinypath.scene.manager import Scene, upload_scene
    >>> from tinypath.materials import Diffuse, Emissive
    >>> scene = Scene()
    >>> scene.add_sphere((0, 0, 0), 1.0, Diffuse((0.8, 0.3, 0.3)))
    >>> scene.add_sphere((0, 3, 0), 0.5, Emissive((4.0, 4.0, 4.0)))
    >>> upload_scene(scene)
"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from tinypath.camera.pinhole import Camera
from tinypath.core.ray import REAL, vec3
from tinypath.errors import SceneError
from tinypath.geometry.sphere import Sphere
from tinypath.materials import Diffuse, Emissive, Material, Specular
from tinypath.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    query_nearest,
)

logger = logging.getLogger(__name__)

# Maximum number of distinct materials
MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=REAL, shape=MAX_MATERIALS)
material_emissions = ti.Vector.field(3, dtype=REAL, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

_MATERIAL_CLASSES: dict[str, type[Material]] = {
    "diffuse": Diffuse,
    "specular": Specular,
    "emissive": Emissive,
}


def clear_material_table() -> None:
    """Reset the material table."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the MaterialType tag for a material ID (-1 if invalid)."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_albedo(material_id: ti.i32) -> vec3:
    """Get the albedo of a material."""
    return material_albedos[material_id]


@ti.func
def get_material_emission(material_id: ti.i32) -> vec3:
    """Get the emission of a material (black for non-emitters)."""
    return material_emissions[material_id]


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from its dictionary form.

    Raises:
        SceneError: If the type is unknown or a parameter is invalid.
    """
    mat_type = str(data.get("type", "")).lower()
    cls = _MATERIAL_CLASSES.get(mat_type)
    if cls is None:
        raise SceneError(f"Unknown material type: {mat_type!r}")

    if cls is Emissive:
        return Emissive(data.get("emission", (1.0, 1.0, 1.0)), data.get("albedo"))
    return cls(data.get("albedo", (1.0, 1.0, 1.0)))


@dataclass(frozen=True)
class SceneHit:
    """Python-side result of Scene.intersect.

    Attributes:
        t: Distance along the normalized ray.
        sphere_index: Index of the hit sphere in scene order.
        sphere: The hit sphere.
        point: The hit point.
        normal: Unit outward normal at the hit point.
    """

    t: float
    sphere_index: int
    sphere: Sphere
    point: npt.NDArray[np.float64]
    normal: npt.NDArray[np.float64]


class Scene:
    """Ordered collection of spheres.

    Attributes:
        spheres: The spheres in insertion order.

    Example:
        >>> scene = Scene()
        >>> white = Diffuse((1.0, 1.0, 1.0))
        >>> scene.add_sphere((0, -520, 0), 500, Emissive((0.8, 0.72, 0.56)))
        >>> scene.add_sphere((0, 520, 0), 500, white)
        >>> scene.add_sphere((0, 0, 520), 500, white)
        >>> len(scene.materials)
        2
    """

    def __init__(self, spheres: list[Sphere] | None = None) -> None:
        self.spheres: list[Sphere] = []
        for sphere in spheres or []:
            self.add(sphere)

    def __len__(self) -> int:
        return len(self.spheres)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self.spheres)

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self.spheres)}, materials={len(self.materials)})"

    def add(self, sphere: Sphere) -> int:
        """Append a sphere.

        Returns:
            The index of the sphere.

        Raises:
            SceneError: If the scene already holds MAX_SPHERES spheres.
        """
        if len(self.spheres) >= MAX_SPHERES:
            raise SceneError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        self.spheres.append(sphere)
        return len(self.spheres) - 1

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Create and append a sphere.

        Returns:
            The index of the sphere.
        """
        return self.add(Sphere(center, radius, material))

    @property
    def materials(self) -> list[Material]:
        """Distinct materials in order of first use."""
        seen: dict[Material, None] = {}
        for sphere in self.spheres:
            seen.setdefault(sphere.material, None)
        return list(seen)

    @property
    def emitters(self) -> list[Sphere]:
        """Spheres whose material emits light."""
        return [s for s in self.spheres if s.material.is_emitter]

    def intersect(self, origin, direction) -> SceneHit | None:
        """Find the nearest sphere hit by a ray.

        Uploads this scene, then runs the kernel-side nearest-hit scan. The
        upload replaces whatever scene the kernel fields held before, so a
        later render or ``trace_ray`` sees this scene.

        Args:
            origin: Ray origin (x, y, z).
            direction: Ray direction (normalized before the test).

        Returns:
            The nearest hit, or None if the ray misses every sphere.
        """
        upload_scene(self)
        result = query_nearest(origin, direction)
        if result is None:
            return None

        t, index, normal = result
        d = np.asarray(direction, dtype=np.float64)
        d = d / np.linalg.norm(d)
        point = np.asarray(origin, dtype=np.float64) + t * d
        return SceneHit(t=t, sphere_index=index, sphere=self.spheres[index], point=point, normal=normal)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        materials = self.materials
        index = {mat: i for i, mat in enumerate(materials)}
        return {
            "materials": [mat.to_dict() for mat in materials],
            "spheres": [s.to_dict(index[s.material]) for s in self.spheres],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary.

        Raises:
            SceneError: If the dictionary describes an invalid scene.
        """
        materials = [material_from_dict(m) for m in data.get("materials", [])]

        scene = cls()
        for i, sphere_data in enumerate(data.get("spheres", [])):
            try:
                material_index = int(sphere_data["material"])
                center = sphere_data["center"]
                radius = sphere_data["radius"]
            except (KeyError, TypeError, ValueError) as e:
                raise SceneError(f"Sphere {i} is missing center, radius or material") from e
            if not 0 <= material_index < len(materials):
                raise SceneError(f"Sphere {i} references unknown material {material_index}")
            scene.add_sphere(center, radius, materials[material_index])
        return scene


def upload_scene(scene: Scene) -> None:
    """Write a scene into the kernel-side sphere and material fields.

    Replaces whatever scene was uploaded before.

    Raises:
        SceneError: If the scene exceeds the field capacities.
    """
    materials = scene.materials
    if len(materials) > MAX_MATERIALS:
        raise SceneError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    clear_scene()
    clear_material_table()

    index: dict[Material, int] = {}
    for material_id, material in enumerate(materials):
        material_types[material_id] = int(material.material_type)
        material_albedos[material_id] = material.albedo
        material_emissions[material_id] = material.emission
        index[material] = material_id
    num_materials[None] = len(materials)

    for sphere in scene.spheres:
        add_sphere(sphere.center, sphere.radius, index[sphere.material])

    logger.debug(
        "Uploaded scene: %d spheres, %d materials", get_sphere_count(), len(materials)
    )


def load_scene_file(path: str | Path) -> tuple[Scene, Camera]:
    """Load a scene and its camera from a JSON file.

    Raises:
        SceneError: If the file cannot be read or describes an invalid scene.
    """
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise SceneError(f"Cannot read scene file {path}: {e}") from e

    if not isinstance(data, dict) or "camera" not in data:
        raise SceneError(f"Scene file {path} must be an object with a 'camera' entry")

    scene = Scene.from_dict(data)
    camera = Camera.from_dict(data["camera"])
    logger.info("Loaded scene %s (%d spheres)", path, len(scene))
    return scene, camera


def save_scene_file(path: str | Path, scene: Scene, camera: Camera) -> None:
    """Write a scene and its camera to a JSON file."""
    data = scene.to_dict()
    data["camera"] = camera.to_dict()
    Path(path).write_text(json.dumps(data, indent=2))
