"""
Configuration loader for Loki.

Resolves runtime configuration using a priority chain:
1. Environment variables (CI/CD and portable installs)
2. Built-in defaults under the user's home directory
"""

import logging
import os
from pathlib import Path
from typing import Optional

from core.constants import (
    DATA_DIR_ENV_VAR,
    DEFAULT_DATA_DIR_NAME,
    LOG_LEVEL_ENV_VAR,
    SETTINGS_FILE_NAME,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Value of LOKI_DATA_DIR when set, otherwise ~/.loki
    """
    override = os.environ.get(DATA_DIR_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_DATA_DIR_NAME


def get_settings_path(data_dir: Optional[Path] = None) -> Path:
    """Get the path of the settings persistence file."""
    return (data_dir or get_data_dir()) / SETTINGS_FILE_NAME


def get_log_level() -> int:
    """
    Get the configured log level.

    Unknown level names fall back to INFO.
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: Optional[int] = None) -> None:
    """Install a basic stream handler on the root logger."""
    logging.basicConfig(
        level=level if level is not None else get_log_level(),
        format=LOG_FORMAT,
    )


def apply_debug_mode(debug_mode: bool) -> None:
    """Raise the root logger to DEBUG while debug mode is enabled."""
    root = logging.getLogger()
    if debug_mode:
        root.setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")
    else:
        root.setLevel(get_log_level())
