"""Pinhole camera with an explicit view distance.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from the focal point toward the eye (opposite view direction)
- u: up x w, the horizontal image axis
- v: w x u, the vertical image axis

A primary ray for the pixel-plane offset (sx, sy), measured in pixels from the
image center, leaves the eye with direction

    normalize(u * sx + v * sy - w * view_distance)

so the view distance controls the field of view: a 512 pixel image seen from a
distance of 400 covers about 65 degrees.

The basis exists on both sides: ``Camera.spawn_ray`` computes rays with NumPy,
and ``setup_camera`` uploads the basis to Taichi fields for the kernel-side
``spawn_ray``.

Example:
    >>> from tinypath.camera.pinhole import Camera, setup_camera
    >>> camera = Camera(eye=(0.0, 0.0, -20.0), focal_point=(0.0, 0.0, 0.0), view_distance=400.0)
    >>> setup_camera(camera)
    >>> # Inside a Taichi kernel:
    >>> # ray = spawn_ray(sx, sy)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi as ti

from tinypath.core.ray import REAL, Ray, make_ray, normalize
from tinypath.errors import CameraError

logger = logging.getLogger(__name__)

Vector = tuple[float, float, float]

# Below this length the up vector counts as parallel to the view direction
_PARALLEL_TOLERANCE = 1e-9

_VIEW_PARAMETERS = ("eye", "focal_point", "view_distance", "up")


@dataclass(frozen=True)
class CameraBasis:
    """Orthonormal camera frame.

    Attributes:
        u: Horizontal image axis.
        v: Vertical image axis.
        w: Backward axis, from the focal point toward the eye.
    """

    u: npt.NDArray[np.float64]
    v: npt.NDArray[np.float64]
    w: npt.NDArray[np.float64]


@dataclass
class Camera:
    """Pinhole camera configuration.

    Changing any view parameter drops the cached basis; call ``calc_basis``
    again before generating rays.

    Attributes:
        eye: Camera position in world space.
        focal_point: Point the camera looks at.
        view_distance: Distance of the image plane in pixel units.
        up: Approximate up direction.
    """

    eye: Vector
    focal_point: Vector
    view_distance: float
    up: Vector = (0.0, 1.0, 0.0)
    _basis: CameraBasis | None = field(default=None, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in _VIEW_PARAMETERS:
            super().__setattr__("_basis", None)

    @property
    def basis(self) -> CameraBasis | None:
        """The cached basis, or None if it has not been computed."""
        return self._basis

    def calc_basis(self) -> CameraBasis:
        """Compute and cache the orthonormal basis.

        Raises:
            CameraError: If the eye equals the focal point, the up vector is
                parallel to the view direction, or the view distance is not
                positive.
        """
        if not self.view_distance > 0.0:
            raise CameraError(f"View distance must be positive, got {self.view_distance}")

        eye = np.asarray(self.eye, dtype=np.float64)
        focal = np.asarray(self.focal_point, dtype=np.float64)
        up = np.asarray(self.up, dtype=np.float64)

        w = eye - focal
        w_len = np.linalg.norm(w)
        if w_len == 0.0:
            raise CameraError(f"Camera eye and focal point coincide at {tuple(self.eye)}")
        w = w / w_len

        u = np.cross(up, w)
        u_len = np.linalg.norm(u)
        if u_len < _PARALLEL_TOLERANCE:
            raise CameraError(f"Up vector {tuple(self.up)} is parallel to the view direction")
        u = u / u_len

        v = np.cross(w, u)

        basis = CameraBasis(u=u, v=v, w=w)
        super().__setattr__("_basis", basis)
        return basis

    def spawn_ray(self, sx: float, sy: float) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Generate the primary ray through a pixel-plane offset.

        Args:
            sx: Horizontal offset from the image center, in pixels.
            sy: Vertical offset from the image center, in pixels.

        Returns:
            A tuple (origin, direction) with a unit direction.

        Raises:
            CameraError: If ``calc_basis`` has not been called.
        """
        if self._basis is None:
            raise CameraError("Camera basis not computed. Call calc_basis() first.")

        b = self._basis
        direction = b.u * sx + b.v * sy - b.w * self.view_distance
        direction = direction / np.linalg.norm(direction)
        return np.asarray(self.eye, dtype=np.float64), direction

    def to_dict(self) -> dict[str, Any]:
        """Export the view parameters for JSON serialization."""
        return {
            "eye": list(self.eye),
            "focal_point": list(self.focal_point),
            "view_distance": self.view_distance,
            "up": list(self.up),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Camera":
        """Build a camera from its dictionary form.

        Raises:
            CameraError: If a parameter is missing or malformed.
        """
        try:
            return cls(
                eye=_to_vector(data["eye"]),
                focal_point=_to_vector(data["focal_point"]),
                view_distance=float(data["view_distance"]),
                up=_to_vector(data.get("up", (0.0, 1.0, 0.0))),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CameraError(f"Invalid camera description {data!r}: {e}") from e


def _to_vector(value: Any) -> Vector:
    x, y, z = (float(c) for c in value)
    return (x, y, z)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=REAL, shape=())
_camera_u = ti.Vector.field(3, dtype=REAL, shape=())
_camera_v = ti.Vector.field(3, dtype=REAL, shape=())
_camera_w = ti.Vector.field(3, dtype=REAL, shape=())
_view_distance = ti.field(dtype=REAL, shape=())


def setup_camera(camera: Camera) -> None:
    """Recompute the camera basis and upload it for kernel-side ray generation.

    Raises:
        CameraError: If the camera is degenerate.
    """
    basis = camera.calc_basis()

    _camera_eye[None] = tuple(float(c) for c in camera.eye)
    _camera_u[None] = basis.u.tolist()
    _camera_v[None] = basis.v.tolist()
    _camera_w[None] = basis.w.tolist()
    _view_distance[None] = float(camera.view_distance)

    logger.debug("Camera set up: eye=%s, w=%s", camera.eye, basis.w.tolist())


def clear_camera() -> None:
    """Reset the uploaded camera state."""
    for f in (_camera_eye, _camera_u, _camera_v, _camera_w):
        f[None] = (0.0, 0.0, 0.0)
    _view_distance[None] = 0.0


@ti.func
def spawn_ray(sx: REAL, sy: REAL) -> Ray:
    """Generate a primary ray from the uploaded camera.

    Args:
        sx: Horizontal pixel-plane offset from the image center.
        sy: Vertical pixel-plane offset from the image center.

    Returns:
        A ray from the eye with a normalized direction.
    """
    direction = (
        _camera_u[None] * sx + _camera_v[None] * sy - _camera_w[None] * _view_distance[None]
    )
    return make_ray(_camera_eye[None], normalize(direction))


def get_camera_info() -> dict[str, Any]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with eye, u, v, w and view_distance.
    """

    def as_tuple(f) -> Vector:
        vec = f[None]
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "eye": as_tuple(_camera_eye),
        "u": as_tuple(_camera_u),
        "v": as_tuple(_camera_v),
        "w": as_tuple(_camera_w),
        "view_distance": float(_view_distance[None]),
    }
