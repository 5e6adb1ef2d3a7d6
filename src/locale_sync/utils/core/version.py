"""
Version utilities for Locale Sync.

The version is read from the installed package metadata, falling back to
pyproject.toml for source checkouts that were never installed.
"""

import logging
import tomllib
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "locale-sync"
UNKNOWN_VERSION = "0.0.0+unknown"


@lru_cache(maxsize=1)
def get_version() -> str:
    """
    Get the project version.

    Returns:
        Version string (e.g., "1.0.0")
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        logger.debug("Package metadata not found, falling back to pyproject.toml")

    pyproject_path = Path(__file__).parents[4] / "pyproject.toml"
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug(f"Cannot read {pyproject_path}: {e}")
        return UNKNOWN_VERSION

    project_version = data.get("project", {}).get("version")
    return project_version if isinstance(project_version, str) else UNKNOWN_VERSION
