"""Matplotlib-based preview of rendered images.

Example:
    >>> from tinypath.preview.display import show_preview
    >>> show_preview(renderer.image, title="Sphere box")
"""

import numpy as np
import numpy.typing as npt

from tinypath.preview.export import GAMMA


def apply_gamma(
    image: npt.NDArray[np.floating],
    gamma: float = GAMMA,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array in [0, 1] range.
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma corrected image.
    """
    # Clamp before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    if gamma == 1.0:
        return image.astype(np.float32)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.floating],
    gamma: float = GAMMA,
) -> npt.NDArray[np.float32]:
    """Clamp and gamma correct a linear image for display.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value.

    Returns:
        Image ready for display, in [0, 1] range.
    """
    result = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    return apply_gamma(result, gamma)


def show_preview(
    image: npt.NDArray[np.floating],
    *,
    gamma: float = GAMMA,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Linear image of shape (H, W, 3).
        gamma: Gamma correction value.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
