"""Scene module for scene description and ray-scene queries.

Components:
    intersection: Sphere fields and the nearest-hit scan
    manager: Scene container, material table and JSON scene files
    sphere_box: The default six-wall sphere box scene

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere geometry
    - A material table indexed by material ID

Note: all submodules declare or use Taichi fields; import them after
``tinypath.runtime.init_runtime`` has run:
    from tinypath.scene.manager import Scene, upload_scene
"""
