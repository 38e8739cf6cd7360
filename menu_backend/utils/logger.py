"""
Logging configuration
"""
import logging
import sys
from typing import Optional

from menu_backend.config import get_settings

settings = get_settings()

PACKAGE_LOGGER = "menu_backend"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the menu_backend tree.

    The first call attaches a stdout handler to the package logger; module
    loggers created with logging.getLogger(__name__) propagate to it.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if not name or name == PACKAGE_LOGGER:
        return package_logger
    if not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
