"""Module loggers for the SelfCare Planner package"""

import logging
from typing import Optional

from .logging_config import PACKAGE_LOGGER


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the ``selfcare`` tree

    Module loggers carry no handlers of their own; records propagate to the
    package logger set up by ``setup_logging``. Names from outside the
    package (scripts, ``__main__``) are nested under it.

    Args:
        name: Logger name (usually __name__)
    """
    if not name or name == "__main__":
        return logging.getLogger(PACKAGE_LOGGER)
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
