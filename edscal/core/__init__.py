"""Configuration for edscal."""

from .config_manager import ConfigManager, ExtractorConfig, parse_env_file

__all__ = ["ConfigManager", "ExtractorConfig", "parse_env_file"]
