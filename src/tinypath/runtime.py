"""Taichi runtime initialization.

All geometry is computed in double precision: the wall spheres of the default
scene have a radius of 500 units and the self-intersection epsilon is 1e-4,
which single precision cannot resolve. Only backends with f64 support are
offered.

Modules that declare Taichi fields (scene, camera, integrator) must be
imported after ``init_runtime`` has run.
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

ARCHES = {
    "cpu": ti.cpu,
    "cuda": ti.cuda,
}


def init_runtime(arch: str = "cpu", debug: bool = False) -> None:
    """Initialize Taichi with the package defaults.

    Args:
        arch: Backend name, one of ``ARCHES``. Taichi falls back to the CPU
            when CUDA is not available.
        debug: Enable Taichi's bounds checking.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if arch not in ARCHES:
        raise ValueError(f"Unknown arch {arch!r}; expected one of {sorted(ARCHES)}")

    ti.init(arch=ARCHES[arch], default_fp=ti.f64, debug=debug)
    logger.debug("Taichi initialized (arch=%s, debug=%s)", arch, debug)
