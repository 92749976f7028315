"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera with an explicit view distance

Note: pinhole declares Taichi fields; import it after
``tinypath.runtime.init_runtime`` has run:
    from tinypath.camera.pinhole import Camera, setup_camera
"""
