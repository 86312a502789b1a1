"""
Warden - Core Package
=====================

Configuration and logging shared by every Warden module.

DESIGN:
    - get_config() returns the same Config instance
    - logger is a global TreeLogger instance
"""

from .config import Config, ConfigValidationError, EmbedColors, NY_TZ, get_config, load_config
from .logger import TreeLogger, TreeLogSink, logger


__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "load_config",
    # Logger
    "logger",
    "TreeLogger",
    "TreeLogSink",
]
