"""Row-batched renderer with progress hooks.

The renderer owns the image buffer of one render. It uploads the scene and
camera, then renders the image in batches of rows. Between batches it reports
progress and, when configured, saves the partial image so a long render can be
watched from an image viewer.

Progress hooks:
    - on_pixel(completed, total): once per finished pixel, in row-major order
    - on_rows(row_start, row_end, image): once per finished row batch

Both run on the calling thread after a batch has finished, so they only ever
see final pixel values.

Example:
    >>> from tinypath.runtime import init_runtime
    >>> init_runtime("cpu")
    >>> from tinypath.core.renderer import Renderer, RenderSettings
    >>> from tinypath.scene.sphere_box import create_sphere_box_scene
    >>>
    >>> scene, camera = create_sphere_box_scene()
    >>> renderer = Renderer(RenderSettings(width=128, height=128, samples_per_pixel=16))
    >>> image = renderer.render(scene, camera)
    >>> renderer.save_image("output.png")
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from tinypath.camera.pinhole import Camera, setup_camera
from tinypath.core.integrator import MAX_DEPTH, render_rows
from tinypath.errors import ConfigurationError
from tinypath.preview.export import save_png
from tinypath.scene.manager import Scene, upload_scene

logger = logging.getLogger(__name__)

# Callback receives (completed_pixels, total_pixels)
PixelCallback = Callable[[int, int], None]

# Callback receives (row_start, row_end, image)
RowsCallback = Callable[[int, int, npt.NDArray[np.float64]], None]

# Largest seed accepted by the random streams
MAX_SEED = 2**32 - 1


def _is_integer(value) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class RenderSettings:
    """Parameters of a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of path samples averaged per pixel.
        max_depth: Maximum path depth.
        seed: Seed of the per-sample random streams.
        rows_per_batch: Number of rows rendered per kernel launch.
        progressive_path: Where to save the partial image while rendering,
            or None to disable progressive saving.
        progressive_interval: Save after every batch containing a row index
            that is a multiple of this value.
    """

    width: int
    height: int
    samples_per_pixel: int = 8
    max_depth: int = MAX_DEPTH
    seed: int = 0
    rows_per_batch: int = 16
    progressive_path: str | Path | None = None
    progressive_interval: int = 40

    def validate(self) -> None:
        """Check the settings before any kernel runs.

        Raises:
            ConfigurationError: If a parameter is out of range.
        """
        positive = {
            "width": self.width,
            "height": self.height,
            "samples_per_pixel": self.samples_per_pixel,
            "rows_per_batch": self.rows_per_batch,
            "progressive_interval": self.progressive_interval,
        }
        for name, value in positive.items():
            if not _is_integer(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if not _is_integer(self.max_depth) or self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0, got {self.max_depth!r}")

        if not _is_integer(self.seed) or not 0 <= self.seed <= MAX_SEED:
            raise ConfigurationError(f"seed must be in [0, {MAX_SEED}], got {self.seed!r}")


class Renderer:
    """Renders a scene into a linear float image.

    Attributes:
        settings: The render settings.
    """

    def __init__(self, settings: RenderSettings) -> None:
        settings.validate()
        self.settings = settings
        self._image: npt.NDArray[np.float64] | None = None

    @property
    def image(self) -> npt.NDArray[np.float64] | None:
        """The image of the last render, or None before the first render."""
        return self._image

    def render(
        self,
        scene: Scene,
        camera: Camera,
        on_pixel: PixelCallback | None = None,
        on_rows: RowsCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render the scene.

        Args:
            scene: The scene to render.
            camera: The camera; its basis is recomputed here.
            on_pixel: Optional per-pixel progress callback.
            on_rows: Optional per-batch callback.

        Returns:
            Linear, unclamped image of shape (height, width, 3).

        Raises:
            CameraError: If the camera is degenerate.
            SceneError: If the scene exceeds the field capacities.
        """
        s = self.settings
        s.validate()

        upload_scene(scene)
        setup_camera(camera)

        image = np.zeros((s.height, s.width, 3), dtype=np.float64)
        self._image = image
        total = s.width * s.height
        completed = 0

        logger.info(
            "Rendering %dx%d, %d spp, max depth %d, seed %d",
            s.width,
            s.height,
            s.samples_per_pixel,
            s.max_depth,
            s.seed,
        )
        start_time = time.perf_counter()

        for row_start in range(0, s.height, s.rows_per_batch):
            row_end = min(row_start + s.rows_per_batch, s.height)
            render_rows(image, row_start, row_end, s.samples_per_pixel, s.max_depth, s.seed)
            logger.debug("Rows %d-%d done", row_start, row_end - 1)

            batch_pixels = (row_end - row_start) * s.width
            if on_pixel is not None:
                for _ in range(batch_pixels):
                    completed += 1
                    on_pixel(completed, total)
            else:
                completed += batch_pixels

            if on_rows is not None:
                on_rows(row_start, row_end, image)

            if self._should_save_progressive(row_start, row_end):
                save_png(image, s.progressive_path)
                logger.debug("Saved partial image to %s", s.progressive_path)

        logger.info("Render finished in %.2f s", time.perf_counter() - start_time)
        return image

    def _should_save_progressive(self, row_start: int, row_end: int) -> bool:
        """True if progressive saving is on and the batch holds a save row."""
        s = self.settings
        if s.progressive_path is None:
            return False
        first_save_row = -(-row_start // s.progressive_interval) * s.progressive_interval
        return first_save_row < row_end

    def save_image(self, filepath: str | Path) -> None:
        """Save the last rendered image as a gamma-encoded RGBA PNG.

        Raises:
            RuntimeError: If nothing has been rendered yet.
        """
        if self._image is None:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        save_png(self._image, filepath)

    def __repr__(self) -> str:
        s = self.settings
        return f"Renderer(width={s.width}, height={s.height}, spp={s.samples_per_pixel})"
