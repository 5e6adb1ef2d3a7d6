"""
Test utilities package for Locale Sync tests.

### test_helpers.py
- `write_locale_tree()`: Write one language's translation.json
- `read_locale_tree()`: Read a translation.json back as a dictionary
- `build_locales()`: Create a locales directory from a mapping of trees
- `write_csv_lines()`: Write raw CSV lines to a file
- `create_temp_config_file()`: Context manager for temporary YAML config files
"""

from __future__ import annotations

from .test_helpers import (
    build_locales,
    create_temp_config_file,
    read_locale_tree,
    write_csv_lines,
    write_locale_tree,
)

__all__ = [
    "build_locales",
    "create_temp_config_file",
    "read_locale_tree",
    "write_csv_lines",
    "write_locale_tree",
]
