"""Configuration management for edscal.

Configuration is resolved once, before the pipeline is built, from (in
order of precedence) the process environment, an optional ``.env`` file and
command line arguments. The result is an immutable ExtractorConfig that is
handed to the pipeline explicitly.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from edscal.calendar.models import DEFAULT_CALENDAR_COLOR, DEFAULT_CALENDAR_NAME, DateRange

logger = logging.getLogger(__name__)

# Environment variables
START_DATE_ENV = "START_DATE"
END_DATE_ENV = "END_DATE"
CALENDAR_NAME_ENV = "EDSCAL_CALENDAR_NAME"
CALENDAR_COLOR_ENV = "EDSCAL_CALENDAR_COLOR"
LOG_LEVEL_ENV = "EDSCAL_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
        - Handles KEY=VALUE format with optional whitespace
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Failed to read .env file (continuing): %s", str(path), exc_info=True)
        return {}

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")

        if key:
            result[key] = val

    return result


class ExtractorConfig(BaseModel):
    """Resolved settings for one extraction run."""

    date_range: DateRange = Field(default_factory=DateRange)
    calendar_name: str = Field(default=DEFAULT_CALENDAR_NAME, description="Calendar name on every event")
    calendar_color: str = Field(default=DEFAULT_CALENDAR_COLOR, description="Calendar color on every event")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Root logging level name")

    model_config = ConfigDict(frozen=True)


class ConfigManager:
    """Resolves ExtractorConfig from environment variables, .env files and arguments."""

    def __init__(
        self,
        env_file_path: Path | None = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
            environ: Environment mapping to read and update (defaults to os.environ)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"
        self.environ = os.environ if environ is None else environ

    def load_env_file(self) -> list[str]:
        """Load .env file into the environment mapping.

        Only sets variables that are not already present.

        Returns:
            List of keys that were loaded from the .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        parsed = parse_env_file(self.env_file_path)

        set_keys = []
        for key, val in parsed.items():
            if key not in self.environ:
                self.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def resolve_date_range(
        self,
        arg_start: Optional[str] = None,
        arg_end: Optional[str] = None,
    ) -> DateRange:
        """Resolve the range bounds.

        A non-empty START_DATE / END_DATE environment variable wins over the
        corresponding argument. Missing bounds become "" and are later
        treated as "include everything".
        """
        start = self.environ.get(START_DATE_ENV, "") or (arg_start or "")
        end = self.environ.get(END_DATE_ENV, "") or (arg_end or "")
        return DateRange(start=start, end=end)

    def build_config(
        self,
        arg_start: Optional[str] = None,
        arg_end: Optional[str] = None,
    ) -> ExtractorConfig:
        """Build an ExtractorConfig from the environment and arguments."""
        date_range = self.resolve_date_range(arg_start, arg_end)

        log_level = self.environ.get(LOG_LEVEL_ENV, "").strip().upper() or DEFAULT_LOG_LEVEL
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logger.warning("Invalid %s=%r; using %s", LOG_LEVEL_ENV, log_level, DEFAULT_LOG_LEVEL)
            log_level = DEFAULT_LOG_LEVEL

        return ExtractorConfig(
            date_range=date_range,
            calendar_name=self.environ.get(CALENDAR_NAME_ENV) or DEFAULT_CALENDAR_NAME,
            calendar_color=self.environ.get(CALENDAR_COLOR_ENV) or DEFAULT_CALENDAR_COLOR,
            log_level=log_level,
        )

    def load_full_config(
        self,
        arg_start: Optional[str] = None,
        arg_end: Optional[str] = None,
    ) -> ExtractorConfig:
        """Load the .env file, then build configuration.

        This is the main entry point for loading configuration.
        """
        self.load_env_file()
        config = self.build_config(arg_start, arg_end)
        logger.debug("Resolved configuration: %s", config)
        return config
