"""
Central logging configuration for edscal.

stdout carries the JSON result, so every log record goes to stderr. The CLI
defaults to WARNING so a normal run prints nothing but the JSON array.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

DEBUG_ENV = "EDSCAL_DEBUG"
LOG_LEVEL_ENV = "EDSCAL_LOG_LEVEL"

# HH:MM:SS  LEVEL   logger.name: message (only the level is colorized)
LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip().lower() in ("1", "true", "yes", "on")


def install_stderr_handler() -> logging.Handler:
    """Attach a colorized stderr handler to the root logger if it has none.

    Returns:
        The handler now serving the root logger
    """
    root = logging.getLogger()
    if root.handlers:
        return root.handlers[0]

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        ColoredFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT, log_colors=LOG_COLORS)
    )
    root.addHandler(handler)
    return handler


def configure_logging(
    level_name: Optional[str] = None,
    debug_mode: bool = False,
) -> int:
    """
    Configure edscal logging.

    Args:
        level_name: Requested root level name (default WARNING)
        debug_mode: Whether to enable debug logging (e.g. ``--verbose``)

    Returns:
        The root level that was applied

    Environment Variables:
        EDSCAL_DEBUG: Set to '1', 'true', 'yes', 'on' to force debug logging
        EDSCAL_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    final_debug = debug_mode or _env_debug_enabled()

    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()

    if final_debug:
        root_level = logging.DEBUG
    elif env_level in _VALID_LEVELS:
        root_level = getattr(logging, env_level)
    elif level_name and level_name.upper() in _VALID_LEVELS:
        root_level = getattr(logging, level_name.upper())
    else:
        root_level = logging.WARNING

    install_stderr_handler()
    logging.getLogger().setLevel(root_level)
    logging.getLogger("edscal").setLevel(root_level)

    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(root_level)
    )
    return root_level


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    return {
        "root": logging.getLevelName(logging.getLogger().level),
        "edscal": logging.getLevelName(logging.getLogger("edscal").level),
    }
