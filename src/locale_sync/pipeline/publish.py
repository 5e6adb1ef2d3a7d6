"""Copy locale files into the public directory served with the site."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..locale.storage import is_backup_file

logger = logging.getLogger(__name__)


def publish_locales(source_dir: Path, target_dir: Path) -> int:
    """
    Recursively copy every JSON file from the locale tree.

    Backup artifacts left by schema upgrades are not published.

    Args:
        source_dir: Locale source directory
        target_dir: Public output directory, created if needed

    Returns:
        Number of files copied

    Raises:
        OSError: If a file cannot be copied
    """
    copied = 0
    for source in sorted(source_dir.rglob("*.json")):
        if not source.is_file() or is_backup_file(source):
            continue

        destination = target_dir / source.relative_to(source_dir)
        destination.parent.mkdir(parents=True, exist_ok=True)
        _ = shutil.copyfile(source, destination)
        copied += 1

    logger.info(f"✅ {copied} translation files copied from {source_dir} to {target_dir}")
    return copied
