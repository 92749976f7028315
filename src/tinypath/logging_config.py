"""Logging setup for the tinypath command line tool.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are attached here, once, by the entry point.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the ``tinypath`` logger.

    Calling this more than once only updates the level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("tinypath")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_tinypath", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        handler._tinypath = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
