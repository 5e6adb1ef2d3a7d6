"""
Global test configuration fixtures for Locale Sync tests.

This module provides reusable pytest fixtures for locale directories,
master CSV tables and configuration objects.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from locale_sync.config.schema import LocaleSyncConfig, PathsConfig
from tests.utils.test_helpers import build_locales, write_csv_lines


@pytest.fixture
def baseline_data() -> dict[str, object]:
    """
    English baseline tree used across pipeline tests.

    Returns:
        dict[str, object]: Nested translation data
    """
    return {
        "ui": {
            "menu_start": "Start",
            "menu_quit": "Quit",
            "option_sound": "Sound",
        },
        "a": {"b": "hello", "c": "world"},
        "title": "Map",
        "tags": ["one", "two"],
    }


@pytest.fixture
def locales_dir(tmp_path: Path, baseline_data: dict[str, object]) -> Path:
    """
    Locales directory with a complete baseline and partial languages.

    - ``de`` is missing ``a.c`` and ``ui.option_sound``
    - ``fr`` is complete and carries an extra key of its own
    - ``uk`` has a corrupt translation file
    """
    locales = build_locales(
        tmp_path,
        {
            "en": baseline_data,
            "de": {
                "ui": {"menu_start": "Starten", "menu_quit": "Beenden"},
                "a": {"b": "hallo"},
                "title": "Karte",
                "tags": ["eins"],
            },
            "fr": {
                "ui": {
                    "menu_start": "Démarrer",
                    "menu_quit": "Quitter",
                    "option_sound": "Son",
                },
                "a": {"b": "bonjour", "c": "monde"},
                "title": "Carte",
                "tags": ["un", "deux"],
                "extra": "seulement en français",
            },
        },
    )
    corrupt = locales / "uk" / "translation.json"
    corrupt.parent.mkdir()
    _ = corrupt.write_text("{ not json", encoding="utf-8")
    return locales


@pytest.fixture
def master_csv(tmp_path: Path) -> Path:
    """
    Master CSV with the two header rows and a handful of data rows.

    Returns:
        Path: Path to common.csv
    """
    return write_csv_lines(
        tmp_path / "common.csv",
        [
            "key,en,de",
            "Key,English,Deutsch",
            "menu_start,Start,Starten",
            'menu_quit,"Quit, now","Beenden, jetzt"',
            "option_sound,Sound,Ton",
            "spell_bolt,Spark bolt,Funkenblitz",
            "",
            'hint_text,"Say ""hi""",Hallo',
        ],
    )


@pytest.fixture
def config(locales_dir: Path, master_csv: Path, tmp_path: Path) -> LocaleSyncConfig:
    """
    Configuration pointing at the temporary locales directory.

    Returns:
        LocaleSyncConfig: Validated configuration object
    """
    return LocaleSyncConfig(
        paths=PathsConfig(
            locales_dir=locales_dir,
            master_csv=master_csv,
            public_dir=tmp_path / "public" / "locales",
            stats_file=tmp_path / "data" / "translation-stats.json",
        )
    )
