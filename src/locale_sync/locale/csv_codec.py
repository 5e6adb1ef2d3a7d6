"""
CSV dialect codec for the master translation table.

The dialect is a small RFC 4180 subset: fields are separated by commas, a
field may be wrapped in double quotes, and a literal quote inside a quoted
field is written as two quotes. Rows are split on newline before parsing,
so a quoted field that spans several lines is split into separate rows.
Unbalanced quotes are not reported; the scanner flushes whatever it has
accumulated when the line ends.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

type CsvRow = list[str]
type CsvTable = list[CsvRow]

_QUOTE = '"'
_DELIMITER = ","
_NEEDS_QUOTING = (_DELIMITER, _QUOTE, "\n")


class _ScanState(Enum):
    NORMAL = "normal"
    QUOTED = "quoted"


def parse_row(line: str) -> CsvRow:
    """
    Parse a single CSV line into its fields.

    Args:
        line: One line of CSV text without its line terminator

    Returns:
        List of field values with quoting removed
    """
    fields: CsvRow = []
    current: list[str] = []
    state = _ScanState.NORMAL
    i = 0

    while i < len(line):
        char = line[i]

        if char == _QUOTE:
            if state is _ScanState.QUOTED and line[i + 1 : i + 2] == _QUOTE:
                current.append(_QUOTE)
                i += 1
            elif state is _ScanState.QUOTED:
                state = _ScanState.NORMAL
            else:
                state = _ScanState.QUOTED
        elif char == _DELIMITER and state is _ScanState.NORMAL:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

        i += 1

    fields.append("".join(current))
    return fields


def escape_field(field: str) -> str:
    """
    Quote a field if it contains a delimiter, a quote or a newline.

    Args:
        field: Raw field value

    Returns:
        The field, wrapped in quotes with internal quotes doubled when needed
    """
    if any(token in field for token in _NEEDS_QUOTING):
        return _QUOTE + field.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return field


def serialize_row(row: Sequence[str]) -> str:
    """Join escaped fields into one CSV line."""
    return _DELIMITER.join(escape_field(field) for field in row)


def split_lines(text: str) -> list[str]:
    """
    Split CSV text into raw lines.

    A trailing carriage return is stripped from every line so files saved
    with CRLF endings parse the same as LF files.
    """
    return [line.removesuffix("\r") for line in text.split("\n")]


def parse_table(text: str) -> CsvTable:
    """
    Parse CSV text into a table.

    A blank or whitespace-only line parses to a single field holding the
    line's text, so :func:`serialize_table` writes it back unchanged.
    """
    return [parse_row(line) for line in split_lines(text)]


def serialize_table(rows: Iterable[Sequence[str]]) -> str:
    """Serialize a table back to CSV text, one row per line."""
    return "\n".join(serialize_row(row) for row in rows)


def is_blank_row(row: Sequence[str]) -> bool:
    """
    Check whether a parsed row came from a blank line.

    Only single-field rows qualify. A line of separators such as ``,,``
    has several empty fields and is an ordinary row.
    """
    return len(row) == 1 and not row[0].strip()


def read_table(path: Path) -> CsvTable:
    """
    Read and parse a CSV file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    return parse_table(path.read_text(encoding="utf-8"))
