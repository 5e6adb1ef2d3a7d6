"""
CSV content import.

Copies game-content rows from the master CSV into a fixed branch of every
language's tree, for example every ``biome_*`` row into
``gameContent.biomes``. Each language reads its own CSV column; languages
without a column, and empty cells, fall back to a configured column so the
imported keys exist in every language and the completeness check still
passes.

Unlike the baseline sync, the import overwrites existing values: the master
CSV is the source of truth for these keys.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import override

from ..locale.csv_codec import CsvTable, read_table
from ..locale.storage import discover_languages, load_tree, save_tree, translation_path
from ..locale.tree import (
    PATH_SEPARATOR,
    AnnotatedText,
    Branch,
    KeyPath,
    Node,
    PlainText,
    join_path,
)
from ..utils.core.exceptions import FatalBaselineError, PerLanguageError, TypeConflictError

logger = logging.getLogger(__name__)

type ImportRows = dict[str, dict[str, str]]


@dataclass
class ImportTable:
    """Prefixed rows of the master CSV, keyed by translation key then column."""

    columns: list[str] = field(default_factory=list)
    rows: ImportRows = field(default_factory=dict)


def extract_prefixed_rows(table: CsvTable, key_prefix: str) -> ImportTable:
    """
    Collect the rows whose key starts with ``key_prefix``.

    Row 0 names the columns. Every later row whose key matches is kept
    with its non-empty cells only.

    Args:
        table: Parsed master CSV
        key_prefix: Key prefix of the rows to import

    Returns:
        ImportTable with the column keys and the matching rows
    """
    if not table:
        return ImportTable()

    columns = [name.strip() for name in table[0]]
    rows: ImportRows = {}
    for row in table[1:]:
        key = row[0].strip()
        if not key.startswith(key_prefix):
            continue
        rows[key] = {column: value for column, value in zip(columns, row) if value}
    return ImportTable(columns, rows)


def load_import_rows(csv_path: Path, key_prefix: str) -> ImportTable:
    """
    Read the master CSV and extract the rows to import.

    Raises:
        FatalBaselineError: If the master CSV cannot be read
    """
    try:
        table = read_table(csv_path)
    except (OSError, UnicodeDecodeError) as e:
        raise FatalBaselineError(
            f"Cannot read master CSV {csv_path}: {e}",
            path=csv_path,
            user_message=f"Master CSV {csv_path} is missing or unreadable",
        ) from e

    imported = extract_prefixed_rows(table, key_prefix)
    logger.info(f"Found {len(imported.rows)} {key_prefix}* rows in {csv_path.name}")
    return imported


def resolve_column(
    language: str,
    columns: Iterable[str],
    column_map: Mapping[str, str],
    fallback_column: str,
) -> str | None:
    """
    Pick the CSV column a language reads from.

    The mapped column is used when the CSV has it, then a column named
    after the language code itself, then the fallback column.

    Returns:
        Column key, or None when not even the fallback column exists
    """
    available = set(columns)
    for candidate in (column_map.get(language), language, fallback_column):
        if candidate is not None and candidate in available:
            return candidate
    return None


def select_translations(rows: ImportRows, column: str, fallback_column: str) -> dict[str, str]:
    """Text per key for one column, using the fallback column for empty cells."""
    selected: dict[str, str] = {}
    for key, cells in rows.items():
        text = cells.get(column) or cells.get(fallback_column)
        if text:
            selected[key] = text
    return selected


def _imported_leaf(existing: Node | None, text: str, path: KeyPath) -> Node:
    match existing:
        case Branch():
            raise TypeConflictError(path)
        case AnnotatedText(text=current) if current == text:
            return existing
        case AnnotatedText():
            return AnnotatedText(text, False)
        case _:
            return PlainText(text)


def _apply(
    branch: Branch, keys: list[str], translations: Mapping[str, str], prefix: KeyPath
) -> tuple[Branch, int]:
    result = branch.copy()

    if not keys:
        changed = 0
        for key, text in translations.items():
            existing = result.get(key)
            leaf = _imported_leaf(existing, text, join_path(prefix, key))
            if leaf != existing:
                result.children[key] = leaf
                changed += 1
        return result, changed

    head, rest = keys[0], keys[1:]
    path = join_path(prefix, head)
    child = result.get(head)
    if child is None:
        child = Branch()
    elif not isinstance(child, Branch):
        raise TypeConflictError(path)

    result.children[head], changed = _apply(child, rest, translations, path)
    return result, changed


def apply_translations(
    tree: Branch, target_path: KeyPath, translations: Mapping[str, str]
) -> tuple[Branch, int]:
    """
    Write imported text under ``target_path``, creating branches as needed.

    An annotated leaf whose text is unchanged keeps its verification flag;
    new text resets the flag. The input tree is not mutated.

    Args:
        tree: Language tree
        target_path: Dotted path of the receiving branch
        translations: Text per key

    Returns:
        Tuple of the new tree and the number of leaves added or changed

    Raises:
        TypeConflictError: If a segment of ``target_path`` or an imported
            key is a branch/leaf mismatch in the tree
    """
    return _apply(tree, target_path.split(PATH_SEPARATOR), translations, "")


class ImportResult:
    """Result of an import run over all languages."""

    def __init__(self) -> None:
        self.changed: dict[str, int] = {}
        self.unchanged: list[str] = []
        self.skipped: list[str] = []
        self.failed: list[PerLanguageError] = []

    @property
    def total_changed(self) -> int:
        return sum(self.changed.values())

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def succeeded(self) -> bool:
        return not self.failed

    @override
    def __str__(self) -> str:
        return (
            f"Import Results: "
            f"{len(self.changed)} updated, "
            f"{len(self.unchanged)} up to date, "
            f"{len(self.skipped)} without a column, "
            f"{self.failure_count} failed"
        )


def import_language(
    path: Path,
    language: str,
    target_path: KeyPath,
    translations: Mapping[str, str],
    indent: int = 2,
    dry_run: bool = False,
) -> int:
    """
    Import translations into one language file.

    The file is only rewritten when a leaf was added or changed.

    Returns:
        Number of leaves added or changed

    Raises:
        PerLanguageError: If the file cannot be loaded or written, or the
            target branch collides with a leaf
    """
    tree = load_tree(path, language)

    try:
        updated, changed = apply_translations(tree, target_path, translations)
    except TypeConflictError as e:
        e.language = language
        e.path = path
        raise

    if changed and not dry_run:
        try:
            save_tree(path, updated, indent)
        except OSError as e:
            raise PerLanguageError(f"Error writing {path}: {e}", language, path) from e

    return changed


def import_all(
    locales_dir: Path,
    master_csv: Path,
    filename: str = "translation.json",
    key_prefix: str = "biome_",
    target_path: KeyPath = "gameContent.biomes",
    column_map: Mapping[str, str] | None = None,
    fallback_column: str = "en",
    indent: int = 2,
    ignore: tuple[str, ...] = (),
    dry_run: bool = False,
) -> ImportResult:
    """
    Import prefixed master CSV rows into every discovered language.

    Args:
        locales_dir: Directory holding one sub-directory per language
        master_csv: Master multi-language CSV
        filename: Translation file name inside each language directory
        key_prefix: Key prefix of the rows to import
        target_path: Dotted path of the branch receiving the rows
        column_map: Language code to CSV column key, for codes that differ
        fallback_column: Column used for unmapped languages and empty cells
        indent: JSON indentation for rewritten files
        ignore: Language directories to leave out
        dry_run: Report what would change without writing files

    Returns:
        ImportResult with per-language counts

    Raises:
        FatalBaselineError: If the master CSV cannot be read
    """
    imported = load_import_rows(master_csv, key_prefix)
    column_map = column_map or {}
    result = ImportResult()

    for language in discover_languages(locales_dir, ignore):
        column = resolve_column(language, imported.columns, column_map, fallback_column)
        if column is None:
            logger.warning(f"⚠️  {language}: No '{fallback_column}' column to import from")
            result.skipped.append(language)
            continue

        translations = select_translations(imported.rows, column, fallback_column)
        try:
            changed = import_language(
                translation_path(locales_dir, language, filename),
                language,
                target_path,
                translations,
                indent,
                dry_run,
            )
        except PerLanguageError as e:
            logger.error(f"❌ {language}: Error importing - {e}")
            result.failed.append(e)
            continue

        if changed:
            result.changed[language] = changed
            verb = "Would update" if dry_run else "Updated"
            logger.info(f"✅ {language}: {verb} {changed} {key_prefix}* entries from '{column}'")
        else:
            result.unchanged.append(language)
            logger.info(f"✅ {language}: {key_prefix}* entries are up to date")

    logger.info(str(result))
    return result
