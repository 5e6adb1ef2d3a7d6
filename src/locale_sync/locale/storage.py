"""
Locale file storage.

This module discovers language directories, loads and saves locale trees
as human-formatted JSON, and takes backups of translation files before
destructive migrations. All writes go through a temporary file in the
target directory followed by an atomic rename, so an interrupted run never
leaves a truncated translation file behind.
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path

from .tree import Branch, dump_tree, parse_tree
from ..utils.core.exceptions import PerLanguageError

logger = logging.getLogger(__name__)

BACKUP_MARKER = ".backup"


class BackupPolicy(Enum):
    """How pre-migration backups are named and retained."""

    OVERWRITE = "overwrite"
    VERSIONED = "versioned"
    NONE = "none"


def discover_languages(locales_dir: Path, ignore: Iterable[str] = ()) -> list[str]:
    """
    List the language codes available in the locales directory.

    Every non-hidden sub-directory is one language. The result is sorted
    so log output is stable across platforms.

    Args:
        locales_dir: Directory holding one sub-directory per language
        ignore: Directory names to leave out

    Returns:
        Sorted list of language codes

    Raises:
        OSError: If the locales directory cannot be listed
    """
    ignored = set(ignore)
    return sorted(
        entry.name
        for entry in locales_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".") and entry.name not in ignored
    )


def translation_path(locales_dir: Path, language: str, filename: str) -> Path:
    """Path of a language's translation file."""
    return locales_dir / language / filename


def load_tree(path: Path, language: str) -> Branch:
    """
    Load a locale tree from a JSON file.

    Args:
        path: Translation file path
        language: Language code, used for error reporting

    Returns:
        Root branch of the parsed tree

    Raises:
        PerLanguageError: If the file is missing, unreadable, not valid JSON,
            or does not contain a JSON object
    """
    if not path.exists():
        raise PerLanguageError(f"Translation file not found: {path}", language, path)

    try:
        raw: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise PerLanguageError(f"Cannot read {path}: {e}", language, path) from e
    except json.JSONDecodeError as e:
        raise PerLanguageError(f"Invalid JSON in {path}: {e}", language, path) from e

    if not isinstance(raw, dict):
        raise PerLanguageError(
            f"Translation file must contain a JSON object, got {type(raw).__name__}",
            language,
            path,
        )

    return parse_tree(raw)  # pyright: ignore[reportUnknownArgumentType]


def write_text_atomic(path: Path, content: str) -> None:
    """
    Replace a file's content through a temporary sibling file.

    Raises:
        OSError: If writing or renaming fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_file = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            _ = temp_file.write(content)
            temp_file.flush()
            temp_path = Path(temp_file.name)

        _ = temp_path.replace(path)

    except Exception as e:
        if temp_file and Path(temp_file.name).exists():
            Path(temp_file.name).unlink(missing_ok=True)
        raise OSError(f"Failed to write {path}: {e}") from e


def dumps_json(data: object, indent: int = 2) -> str:
    """Serialize data as human-formatted UTF-8 JSON with a trailing newline."""
    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


def save_tree(path: Path, tree: Branch, indent: int = 2) -> None:
    """Write a locale tree to disk atomically."""
    write_text_atomic(path, dumps_json(dump_tree(tree), indent))


def backup_path_for(
    path: Path,
    policy: BackupPolicy,
    directory: Path | None = None,
    timestamp: datetime | None = None,
) -> Path | None:
    """
    Compute where a backup of ``path`` goes under the given policy.

    ``translation.json`` becomes ``translation.backup.json`` for the
    overwrite policy and ``translation.backup.20250101_120000.json`` for the
    versioned policy. With a staging directory the backup is written to
    ``<directory>/<language>/`` instead of beside the original.

    Returns:
        Backup path, or None when the policy disables backups
    """
    match policy:
        case BackupPolicy.NONE:
            return None
        case BackupPolicy.OVERWRITE:
            name = f"{path.stem}{BACKUP_MARKER}{path.suffix}"
        case BackupPolicy.VERSIONED:
            stamp = (timestamp or datetime.now()).strftime("%Y%m%d_%H%M%S")
            name = f"{path.stem}{BACKUP_MARKER}.{stamp}{path.suffix}"

    if directory is not None:
        return directory / path.parent.name / name
    return path.with_name(name)


def create_backup(
    path: Path,
    policy: BackupPolicy = BackupPolicy.OVERWRITE,
    directory: Path | None = None,
    timestamp: datetime | None = None,
) -> Path | None:
    """
    Copy a file byte-for-byte to its backup location.

    Under the overwrite policy any previous backup is replaced, so only the
    most recent snapshot survives repeated runs.

    Returns:
        Path of the written backup, or None when backups are disabled

    Raises:
        OSError: If the copy fails
    """
    target = backup_path_for(path, policy, directory, timestamp)
    if target is None:
        return None

    target.parent.mkdir(parents=True, exist_ok=True)
    _ = shutil.copyfile(path, target)
    logger.info(f"Created backup: {target.name}")
    return target


def is_backup_file(path: Path) -> bool:
    """Check whether a file name marks it as a backup artifact."""
    return BACKUP_MARKER + "." in path.name
