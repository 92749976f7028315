"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: Gamma-encoded RGBA PNG export

Example:
    >>> from tinypath.preview import save_png, show_preview
    >>> save_png(image, "output.png")
    >>> show_preview(image)
"""

from tinypath.preview.display import (
    apply_gamma,
    process_image_for_display,
    show_preview,
)
from tinypath.preview.export import (
    GAMMA,
    compute_rmse,
    gamma_encode,
    image_to_rgba,
    load_png,
    save_png,
)

__all__ = [
    # Display functions
    "show_preview",
    "apply_gamma",
    "process_image_for_display",
    # Export functions
    "GAMMA",
    "gamma_encode",
    "image_to_rgba",
    "save_png",
    "load_png",
    "compute_rmse",
]
