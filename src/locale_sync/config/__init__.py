"""Configuration loading and validation for Locale Sync."""

from .manager import ConfigManager
from .schema import LocaleSyncConfig

__all__ = ["ConfigManager", "LocaleSyncConfig"]
