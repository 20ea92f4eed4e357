"""Logging helpers shared across uptimepy modules."""

import logging
import sys

_ROOT_LOGGER = "uptimepy"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``uptimepy``.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger whose records propagate to the ``uptimepy`` logger.
    """
    if name == _ROOT_LOGGER or name.startswith(f"{_ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


def log_exception(message: str, logger: logging.Logger | None = None) -> None:
    """Log the exception currently being handled, with traceback.

    Must be called from inside an ``except`` block.
    """
    (logger or logging.getLogger(_ROOT_LOGGER)).exception(message)


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the ``uptimepy`` logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_uptimepy_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    handler._uptimepy_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper())
