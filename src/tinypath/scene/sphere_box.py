"""Default scene: a closed box built from six huge spheres.

The walls are spheres of radius 500 whose centers sit 520 units from the
origin along each axis, so the visible part of every wall is an almost flat
cap 20 units away. The top wall glows with a warm light. Two small spheres, a
blue diffuse one and a white mirror, stand in the middle of the box.

The camera looks along +z from (0, 0, -20). Image row 0 looks toward world -y,
so the top wall appears at the top of the image.

Example:
    >>> from tinypath.scene.sphere_box import create_sphere_box_scene
    >>> scene, camera = create_sphere_box_scene()
    >>> len(scene)
    8
"""

from dataclasses import dataclass

from tinypath.camera.pinhole import Camera
from tinypath.materials import BLUE, GREEN, RED, WHITE, Diffuse, Emissive, Specular
from tinypath.scene.manager import Scene

# Distance of the wall sphere centers from the origin
WALL_DISPLACEMENT = 520.0

# Radius of the wall spheres
WALL_RADIUS = 500.0


@dataclass
class SphereBoxParams:
    """Parameters for the sphere box scene.

    Attributes:
        light_color: Emission of the top wall.
        left_wall_color: Albedo of the left wall.
        right_wall_color: Albedo of the right wall.
        wall_color: Albedo of the top, front, back and bottom walls.
        diffuse_sphere_color: Albedo of the center-left sphere.
        mirror_color: Albedo of the center-right mirror sphere.
    """

    light_color: tuple[float, float, float] = (0.8, 0.72, 0.56)
    left_wall_color: tuple[float, float, float] = GREEN
    right_wall_color: tuple[float, float, float] = RED
    wall_color: tuple[float, float, float] = WHITE
    diffuse_sphere_color: tuple[float, float, float] = BLUE
    mirror_color: tuple[float, float, float] = WHITE


def create_sphere_box_camera() -> Camera:
    """Camera looking into the box along +z."""
    return Camera(
        eye=(0.0, 0.0, -20.0),
        focal_point=(0.0, 0.0, 0.0),
        view_distance=400.0,
        up=(0.0, 1.0, 0.0),
    )


def create_sphere_box_scene(params: SphereBoxParams | None = None) -> tuple[Scene, Camera]:
    """Create the default scene and its camera.

    Args:
        params: Optional colors; defaults to SphereBoxParams().

    Returns:
        A tuple (scene, camera).
    """
    if params is None:
        params = SphereBoxParams()

    d = WALL_DISPLACEMENT
    r = WALL_RADIUS
    wall = Diffuse(params.wall_color)

    scene = Scene()
    scene.add_sphere((0.0, -d, 0.0), r, Emissive(params.light_color))  # Top
    scene.add_sphere((0.0, 0.0, d), r, wall)  # Front
    scene.add_sphere((0.0, 0.0, -d), r, wall)  # Back
    scene.add_sphere((0.0, d, 0.0), r, wall)  # Bottom
    scene.add_sphere((-d, 0.0, 0.0), r, Diffuse(params.left_wall_color))  # Left
    scene.add_sphere((d, 0.0, 0.0), r, Diffuse(params.right_wall_color))  # Right
    scene.add_sphere((-6.0, 0.0, 20.0), 6.0, Diffuse(params.diffuse_sphere_color))
    scene.add_sphere((8.0, 0.0, 20.0), 8.0, Specular(params.mirror_color))

    return scene, create_sphere_box_camera()
