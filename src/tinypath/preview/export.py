"""Image export for rendered images.

Rendered images are linear and unclamped. For export every channel is clamped
to [0, 1], gamma encoded and rounded to 8 bits:

    floor(clamp(v) ** (1 / 2.2) * 255 + 0.5)

and written as an RGBA PNG with alpha 255 via Pillow.

Example:
    >>> from tinypath.preview.export import save_png
    >>> save_png(renderer.image, "output.png")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Display gamma used for export
GAMMA = 2.2


def gamma_encode(
    image: npt.NDArray[np.floating],
    gamma: float = GAMMA,
) -> npt.NDArray[np.uint8]:
    """Clamp, gamma encode and round a linear image to 8 bits.

    NaN values map to 0 and infinite values to the ends of the range.

    Args:
        image: Linear image of any shape.
        gamma: Gamma value.

    Returns:
        Array of the same shape with dtype uint8.
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    linear = np.clip(linear, 0.0, 1.0)
    encoded = np.floor(np.power(linear, 1.0 / gamma) * 255.0 + 0.5)
    return encoded.astype(np.uint8)


def image_to_rgba(
    image: npt.NDArray[np.floating],
    gamma: float = GAMMA,
) -> npt.NDArray[np.uint8]:
    """Convert a linear (H, W, 3) image to an opaque 8-bit RGBA image.

    Raises:
        ValueError: If the image is not of shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")

    height, width, _ = image.shape
    rgba = np.full((height, width, 4), 255, dtype=np.uint8)
    rgba[:, :, :3] = gamma_encode(image, gamma)
    return rgba


def save_png(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    gamma: float = GAMMA,
) -> None:
    """Save a linear image as an RGBA PNG file.

    Args:
        image: Linear image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path.
        gamma: Gamma correction value (default 2.2).
    """
    rgba = image_to_rgba(image, gamma)
    PILImage.fromarray(rgba).save(filepath, format="PNG")


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG file back as an (H, W, 4) uint8 RGBA array."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGBA"))


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
