"""
ShopDesk - Core Package
=======================

Core components shared by the whole bot: configuration, logging and the
SQLite database manager.

DESIGN:
    Core modules are singletons or global instances so every service sees
    the same state:
    - get_config() returns the same Config instance
    - get_db() returns the same DatabaseManager instance
    - logger is a global TreeLogger instance

Author: حَـــــنَّـــــا
"""

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    NY_TZ,
    get_config,
    is_support_member,
)

from .database import DatabaseManager, get_db

from .logger import logger, TreeLogger


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "is_support_member",
    "DatabaseManager",
    "get_db",
    "logger",
    "TreeLogger",
]
