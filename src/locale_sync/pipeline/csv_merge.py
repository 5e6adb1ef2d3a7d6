"""
CSV merge importer.

Splices a single-language CSV export into the master multi-language table
as a new column at a fixed position. The merge is positional: the master
table's layout must match the configured insert index, and no lookup by
column name is done.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..locale.csv_codec import CsvTable, is_blank_row, read_table, serialize_table
from ..locale.storage import write_text_atomic
from ..utils.core.exceptions import FatalBaselineError, PerLanguageError

logger = logging.getLogger(__name__)

HEADER_ROW = 0
DISPLAY_NAME_ROW = 1


def build_translation_map(
    incoming: CsvTable, key_column: int = 0, value_column: int = 1
) -> dict[str, str]:
    """
    Map translation keys to text from a single-language CSV export.

    The export's header row is skipped, as are blank rows, rows too short to
    hold both columns, and rows with an empty key or value. Any other
    columns the export carries are ignored.
    """
    translations: dict[str, str] = {}
    for row in incoming[1:]:
        if is_blank_row(row) or len(row) <= max(key_column, value_column):
            continue
        key = row[key_column].strip()
        value = row[value_column]
        if key and value:
            translations[key] = value
    return translations


def merge_language_column(
    master: CsvTable,
    incoming: CsvTable,
    insert_index: int,
    column_key: str,
    display_name: str,
    key_column: int = 0,
    value_column: int = 1,
) -> CsvTable:
    """
    Insert a language column into the master table.

    The header row receives ``column_key`` and the display-name row receives
    ``display_name`` at ``insert_index``; every data row receives the
    incoming translation for its key, or an empty string when the export
    has none. Blank rows are passed through untouched. Rows shorter than
    ``insert_index`` get the new field appended at their end.

    Returns:
        New table; the input tables are not modified
    """
    translations = build_translation_map(incoming, key_column, value_column)
    merged: CsvTable = []

    for index, row in enumerate(master):
        if is_blank_row(row):
            merged.append(list(row))
            continue

        match index:
            case 0:
                value = column_key
            case 1:
                value = display_name
            case _:
                value = translations.get(row[0], "")

        new_row = list(row)
        new_row.insert(insert_index, value)
        merged.append(new_row)

    return merged


@dataclass
class MergeSummary:
    """Counts reported after a merge."""

    incoming_translations: int
    matched_rows: int
    data_rows: int
    output_path: Path


def merge_csv_files(
    master_path: Path,
    incoming_path: Path,
    insert_index: int,
    column_key: str,
    display_name: str,
    output_path: Path | None = None,
    key_column: int = 0,
    value_column: int = 1,
) -> MergeSummary:
    """
    Merge a language export file into the master CSV file.

    By default the master file is rewritten in place.

    Raises:
        FatalBaselineError: If the master CSV cannot be read
        PerLanguageError: If the incoming export cannot be read
        OSError: If the output cannot be written
    """
    try:
        master = read_table(master_path)
    except (OSError, UnicodeDecodeError) as e:
        raise FatalBaselineError(
            f"Cannot read master CSV {master_path}: {e}", path=master_path
        ) from e

    try:
        incoming = read_table(incoming_path)
    except (OSError, UnicodeDecodeError) as e:
        raise PerLanguageError(
            f"Cannot read incoming CSV {incoming_path}: {e}", column_key, incoming_path
        ) from e

    translations = build_translation_map(incoming, key_column, value_column)
    logger.info(f"Loaded {len(translations)} {column_key} translations")

    if len(master) > DISPLAY_NAME_ROW and column_key in master[HEADER_ROW]:
        logger.warning(f"⚠️  Master CSV already has a '{column_key}' column")

    merged = merge_language_column(
        master, incoming, insert_index, column_key, display_name, key_column, value_column
    )

    data_rows = [row for row in master[DISPLAY_NAME_ROW + 1 :] if not is_blank_row(row)]
    matched = sum(1 for row in data_rows if row[0] in translations)

    target = output_path or master_path
    write_text_atomic(target, serialize_table(merged))
    logger.info(f"✅ Merged {column_key} translations into {target}")

    return MergeSummary(len(translations), matched, len(data_rows), target)
