"""Exception types raised by tinypath.

Configuration problems (bad render settings, degenerate cameras, invalid
scene descriptions) are detected before any kernel is launched and raised as
subclasses of ConfigurationError, which is also a ValueError.
"""


class TinyPathError(Exception):
    """Base class for all tinypath errors."""


class ConfigurationError(TinyPathError, ValueError):
    """Invalid render parameters or scene input."""


class CameraError(ConfigurationError):
    """Degenerate camera setup (eye at focal point, up parallel to view, ...)."""


class SceneError(ConfigurationError):
    """Invalid scene description."""
