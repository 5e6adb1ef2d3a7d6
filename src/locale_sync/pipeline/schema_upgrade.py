"""
Schema upgrade engine.

Migrates every plain-string leaf of a locale tree to the annotated
``{"text", "humanVerified"}`` form. Whether a leaf is human verified is
decided by the master CSV: data rows whose key starts with one of the
verified prefixes mark that key as confirmed by a translator.

Annotated leaves pass through unchanged, so the migration can be re-run
safely. A file that is already fully annotated is neither backed up nor
rewritten, which keeps the last real pre-upgrade backup intact.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import override

from ..locale.csv_codec import CsvTable, read_table
from ..locale.storage import (
    BackupPolicy,
    create_backup,
    discover_languages,
    load_tree,
    save_tree,
    translation_path,
)
from ..locale.tree import AnnotatedText, Branch, KeyPath, Node, PlainText, iter_leaves, join_path
from ..utils.core.exceptions import PerLanguageError

logger = logging.getLogger(__name__)

DEFAULT_VERIFIED_PREFIXES: tuple[str, ...] = ("menu_", "option_")
CSV_HEADER_ROWS = 2


def extract_verified_keys(
    table: CsvTable, prefixes: Sequence[str] = DEFAULT_VERIFIED_PREFIXES
) -> set[str]:
    """
    Collect human-verified translation keys from the master CSV.

    The two header rows are skipped, as are blank lines and any other row
    without a value column. Each data row is fully parsed, so a quoted
    field containing commas never corrupts the key column.

    Args:
        table: Parsed master CSV
        prefixes: Key prefixes that mark a row as human verified

    Returns:
        Set of verified keys
    """
    verified: set[str] = set()
    for row in table[CSV_HEADER_ROWS:]:
        if len(row) < 2:
            continue
        key = row[0].strip()
        if key and key.startswith(tuple(prefixes)):
            verified.add(key)
    return verified


def load_verified_keys(
    csv_path: Path, prefixes: Sequence[str] = DEFAULT_VERIFIED_PREFIXES
) -> set[str]:
    """
    Read the master CSV and extract its verified keys.

    A missing or unreadable CSV yields an empty set: every leaf is then
    upgraded as unverified.
    """
    try:
        table = read_table(csv_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️  Cannot read {csv_path}, no keys will be marked human verified: {e}")
        return set()

    keys = extract_verified_keys(table, prefixes)
    logger.info(f"Found {len(keys)} human-verified keys from {csv_path.name}")
    return keys


def _upgrade_node(node: Node, key: str, path: KeyPath, verified_keys: set[str]) -> Node:
    match node:
        case PlainText(text=text):
            return AnnotatedText(text, key in verified_keys or path in verified_keys)
        case Branch():
            return upgrade(node, verified_keys, path)
        case _:
            return node


def upgrade(tree: Branch, verified_keys: set[str], prefix: KeyPath = "") -> Branch:
    """
    Convert every plain-string leaf into an annotated leaf.

    Verification is looked up by both the bare key and the full dotted key
    path, because the CSV is keyed by bare name while the tree is keyed by
    path. Annotated leaves and opaque values are kept as they are.

    Args:
        tree: Locale tree to upgrade
        verified_keys: Keys or key paths confirmed by a human translator
        prefix: Key path of ``tree`` within the full tree

    Returns:
        New upgraded tree with the same structure and key order
    """
    return Branch(
        {
            key: _upgrade_node(child, key, join_path(prefix, key), verified_keys)
            for key, child in tree.children.items()
        }
    )


def needs_upgrade(tree: Branch) -> bool:
    """True when the tree still contains at least one plain-string leaf."""
    return any(isinstance(leaf, PlainText) for _path, _key, leaf in iter_leaves(tree))


def pending_upgrades(
    locales_dir: Path, filename: str = "translation.json", ignore: Iterable[str] = ()
) -> list[str]:
    """Languages whose translation file still holds plain-string leaves."""
    pending: list[str] = []
    for language in discover_languages(locales_dir, ignore):
        try:
            tree = load_tree(translation_path(locales_dir, language, filename), language)
        except PerLanguageError as e:
            logger.warning(f"⚠️  {language}: {e}")
            continue
        if needs_upgrade(tree):
            pending.append(language)
    return pending


@dataclass
class BackupSettings:
    """Where and how backups are written before a file is migrated."""

    policy: BackupPolicy = BackupPolicy.OVERWRITE
    directory: Path | None = None


class UpgradeResult:
    """Result of an upgrade run over all languages."""

    def __init__(self) -> None:
        self.upgraded: list[str] = []
        self.already_current: list[str] = []
        self.backups: dict[str, Path] = {}
        self.failed: list[PerLanguageError] = []

    @property
    def success_count(self) -> int:
        return len(self.upgraded) + len(self.already_current)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed

    @override
    def __str__(self) -> str:
        return (
            f"Upgrade Results: "
            f"{len(self.upgraded)} upgraded, "
            f"{len(self.already_current)} already current, "
            f"{self.failure_count} failed"
        )


def upgrade_language(
    path: Path,
    language: str,
    verified_keys: set[str],
    backup: BackupSettings,
    indent: int = 2,
    timestamp: datetime | None = None,
) -> Path | None:
    """
    Back up and migrate one translation file.

    Returns:
        Path of the backup written, or None if no backup was taken

    Raises:
        PerLanguageError: If the file cannot be loaded, backed up or written
    """
    tree = load_tree(path, language)

    try:
        backup_path = create_backup(path, backup.policy, backup.directory, timestamp)
        save_tree(path, upgrade(tree, verified_keys), indent)
    except OSError as e:
        raise PerLanguageError(f"Error upgrading {path}: {e}", language, path) from e

    return backup_path


def upgrade_all(
    locales_dir: Path,
    verified_keys: set[str],
    filename: str = "translation.json",
    backup: BackupSettings | None = None,
    indent: int = 2,
    ignore: Iterable[str] = (),
) -> UpgradeResult:
    """
    Upgrade the translation file of every discovered language.

    Per-language failures are logged and counted; the remaining languages
    are still processed. All versioned backups of one run share a timestamp.
    """
    backup = backup or BackupSettings()
    timestamp = datetime.now()
    result = UpgradeResult()

    logger.info("🔄 Upgrading translation structure...")

    for language in discover_languages(locales_dir, ignore):
        path = translation_path(locales_dir, language, filename)

        try:
            if not needs_upgrade(load_tree(path, language)):
                logger.info(f"✅ {language}: Already using the annotated structure")
                result.already_current.append(language)
                continue

            backup_path = upgrade_language(path, language, verified_keys, backup, indent, timestamp)
        except PerLanguageError as e:
            logger.error(f"❌ {language}: Error upgrading - {e}")
            result.failed.append(e)
            continue

        if backup_path is not None:
            result.backups[language] = backup_path
        result.upgraded.append(language)
        logger.info(f"✅ {language}: Upgraded translation structure")

    logger.info(str(result))
    return result
