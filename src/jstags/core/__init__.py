"""Core utilities shared across :mod:`jstags` modules.

The core namespace provides the configuration and logging seams so the tagger
itself stays free of I/O concerns.

Example:
    >>> from jstags.core import get_logger
    >>> logger = get_logger(__name__)
    >>> isinstance(logger, object)
    True
"""

from __future__ import annotations

from .config import AppConfig, ConfigError, TaggerSettings, load_config
from .logging import Logger, configure_logging, get_logger

__all__ = [
    "AppConfig",
    "ConfigError",
    "Logger",
    "TaggerSettings",
    "configure_logging",
    "get_logger",
    "load_config",
]
