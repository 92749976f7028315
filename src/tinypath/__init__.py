"""tinypath: a Monte Carlo path tracer for scenes of spheres.

Subpackages:
    core: Ray math, random streams, integrator and renderer
    geometry: Sphere primitive and intersection
    materials: Diffuse, specular and emissive materials
    scene: Scene description, upload and the default scene
    camera: Pinhole camera and primary ray generation
    preview: PNG export and Matplotlib preview

Taichi must be initialized before modules that declare fields are imported:

    >>> from tinypath.runtime import init_runtime
    >>> init_runtime("cpu")
    >>> from tinypath.core.renderer import Renderer, RenderSettings
"""

__version__ = "0.1.0"
