"""
Tests for importing master CSV content rows into language trees.

This module tests row extraction, column selection with fallbacks, the pure
tree update and the import over a whole locales directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from locale_sync.config.schema import DEFAULT_IMPORT_COLUMNS
from locale_sync.locale.csv_codec import parse_table
from locale_sync.locale.tree import dump_tree, parse_tree
from locale_sync.pipeline.csv_import import (
    apply_translations,
    extract_prefixed_rows,
    import_all,
    resolve_column,
    select_translations,
)
from locale_sync.utils.core.exceptions import FatalBaselineError, TypeConflictError
from tests.utils.test_helpers import read_locale_tree, write_csv_lines, write_locale_tree

BIOME_CSV = [
    "key,en,de,pt-br",
    "Key,English,Deutsch,Português",
    "menu_start,Start,Starten,Iniciar",
    "biome_forest,Forest,Wald,Floresta",
    'biome_cave,"Cave, deep",,Caverna',
    "",
    "biome_empty,,,",
]


class TestExtractRows:
    """Test collecting prefixed rows from a parsed table."""

    def test_only_prefixed_rows(self) -> None:
        imported = extract_prefixed_rows(parse_table("\n".join(BIOME_CSV)), "biome_")

        assert imported.columns == ["key", "en", "de", "pt-br"]
        assert list(imported.rows) == ["biome_forest", "biome_cave", "biome_empty"]

    def test_empty_cells_are_dropped(self) -> None:
        imported = extract_prefixed_rows(parse_table("\n".join(BIOME_CSV)), "biome_")

        assert imported.rows["biome_cave"] == {
            "key": "biome_cave",
            "en": "Cave, deep",
            "pt-br": "Caverna",
        }

    def test_empty_table(self) -> None:
        imported = extract_prefixed_rows([], "biome_")

        assert imported.columns == []
        assert imported.rows == {}


class TestColumnSelection:
    """Test mapping languages to CSV columns."""

    @pytest.mark.parametrize(
        ("language", "expected"),
        [
            ("br", "pt-br"),
            ("de", "de"),
            ("nl", "en"),
        ],
    )
    def test_resolve_column(self, language: str, expected: str) -> None:
        columns = ["key", "en", "de", "pt-br"]

        assert resolve_column(language, columns, DEFAULT_IMPORT_COLUMNS, "en") == expected

    def test_mapped_column_missing_from_csv(self) -> None:
        """Test that a mapped column absent from the header uses the fallback."""
        assert resolve_column("zh", ["key", "en"], {"zh": "zh-cn"}, "en") == "en"

    def test_no_column_at_all(self) -> None:
        assert resolve_column("de", ["key", "fr"], {}, "en") is None

    def test_empty_cells_fall_back(self) -> None:
        rows = extract_prefixed_rows(parse_table("\n".join(BIOME_CSV)), "biome_").rows

        selected = select_translations(rows, "de", "en")

        assert selected == {"biome_forest": "Wald", "biome_cave": "Cave, deep"}


class TestApplyTranslations:
    """Test the pure tree update."""

    def test_creates_target_branches(self) -> None:
        tree = parse_tree({"title": "Karte"})

        result, changed = apply_translations(
            tree, "gameContent.biomes", {"biome_forest": "Wald"}
        )

        assert changed == 1
        assert dump_tree(result) == {
            "title": "Karte",
            "gameContent": {"biomes": {"biome_forest": "Wald"}},
        }

    def test_overwrites_existing_text(self) -> None:
        """Test that the CSV value replaces a stale value in the tree."""
        tree = parse_tree({"gameContent": {"biomes": {"biome_forest": "Forst", "other": "x"}}})

        result, changed = apply_translations(
            tree, "gameContent.biomes", {"biome_forest": "Wald"}
        )

        assert changed == 1
        assert dump_tree(result) == {
            "gameContent": {"biomes": {"biome_forest": "Wald", "other": "x"}}
        }

    def test_annotated_leaf_keeps_flag_when_text_unchanged(self) -> None:
        tree = parse_tree({"b": {"k": {"text": "Wald", "humanVerified": True}}})

        result, changed = apply_translations(tree, "b", {"k": "Wald"})

        assert changed == 0
        assert result.children["b"] == tree.children["b"]

    def test_annotated_leaf_with_new_text_is_unverified(self) -> None:
        tree = parse_tree({"b": {"k": {"text": "Forst", "humanVerified": True}}})

        result, _ = apply_translations(tree, "b", {"k": "Wald"})

        assert dump_tree(result) == {"b": {"k": {"text": "Wald", "humanVerified": False}}}

    def test_unchanged_tree_reports_no_changes(self) -> None:
        tree = parse_tree({"b": {"k": "Wald"}})

        result, changed = apply_translations(tree, "b", {"k": "Wald"})

        assert changed == 0
        assert result == tree

    def test_target_path_through_leaf_conflicts(self) -> None:
        tree = parse_tree({"gameContent": "flat"})

        with pytest.raises(TypeConflictError) as exc_info:
            _ = apply_translations(tree, "gameContent.biomes", {"k": "v"})

        assert exc_info.value.key_path == "gameContent"

    def test_key_on_branch_conflicts(self) -> None:
        tree = parse_tree({"b": {"k": {"nested": "x"}}})

        with pytest.raises(TypeConflictError) as exc_info:
            _ = apply_translations(tree, "b", {"k": "v"})

        assert exc_info.value.key_path == "b.k"

    def test_does_not_mutate_input(self) -> None:
        tree = parse_tree({"b": {"k": "old"}})

        _ = apply_translations(tree, "b", {"k": "new", "j": "added"})

        assert dump_tree(tree) == {"b": {"k": "old"}}

    def test_opaque_value_is_replaced_with_text(self) -> None:
        tree = parse_tree({"b": {"k": 5}})

        result, changed = apply_translations(tree, "b", {"k": "new"})

        assert changed == 1
        assert dump_tree(result) == {"b": {"k": "new"}}


class TestImportAll:
    """Test importing into a whole locales directory."""

    def _locales(self, tmp_path: Path) -> Path:
        locales = tmp_path / "locales"
        _ = write_locale_tree(locales, "en", {"title": "Map"})
        _ = write_locale_tree(locales, "de", {"title": "Karte"})
        _ = write_locale_tree(locales, "br", {"title": "Mapa"})
        _ = write_locale_tree(locales, "nl", {"title": "Kaart"})
        return locales

    def test_imports_every_language(self, tmp_path: Path) -> None:
        """Test that each language reads its own column or the fallback."""
        locales = self._locales(tmp_path)
        csv_path = write_csv_lines(tmp_path / "common.csv", BIOME_CSV)

        result = import_all(locales, csv_path, column_map=DEFAULT_IMPORT_COLUMNS)

        assert result.succeeded
        assert read_locale_tree(locales, "br")["gameContent"] == {
            "biomes": {"biome_forest": "Floresta", "biome_cave": "Caverna"}
        }
        assert read_locale_tree(locales, "de")["gameContent"] == {
            "biomes": {"biome_forest": "Wald", "biome_cave": "Cave, deep"}
        }
        assert read_locale_tree(locales, "nl")["gameContent"] == {
            "biomes": {"biome_forest": "Forest", "biome_cave": "Cave, deep"}
        }
        assert sorted(result.changed) == ["br", "de", "en", "nl"]
        assert result.total_changed == 8

    def test_second_run_leaves_files_untouched(self, tmp_path: Path) -> None:
        locales = self._locales(tmp_path)
        csv_path = write_csv_lines(tmp_path / "common.csv", BIOME_CSV)
        _ = import_all(locales, csv_path)
        before = {p: p.read_bytes() for p in locales.rglob("*.json")}

        result = import_all(locales, csv_path)

        assert result.changed == {}
        assert len(result.unchanged) == 4
        assert {p: p.read_bytes() for p in locales.rglob("*.json")} == before

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        locales = self._locales(tmp_path)
        csv_path = write_csv_lines(tmp_path / "common.csv", BIOME_CSV)
        before = {p: p.read_bytes() for p in locales.rglob("*.json")}

        result = import_all(locales, csv_path, dry_run=True)

        assert result.total_changed == 8
        assert {p: p.read_bytes() for p in locales.rglob("*.json")} == before

    def test_custom_prefix_and_target(self, tmp_path: Path) -> None:
        locales = self._locales(tmp_path)
        csv_path = write_csv_lines(tmp_path / "common.csv", BIOME_CSV)

        _ = import_all(locales, csv_path, key_prefix="menu_", target_path="ui")

        assert read_locale_tree(locales, "de")["ui"] == {"menu_start": "Starten"}

    def test_language_without_column_is_skipped(self, tmp_path: Path) -> None:
        locales = self._locales(tmp_path)
        csv_path = write_csv_lines(tmp_path / "common.csv", ["key,fr", "biome_forest,Forêt"])

        result = import_all(locales, csv_path)

        assert sorted(result.skipped) == ["br", "de", "en", "nl"]
        assert "4 without a column" in str(result)

    def test_corrupt_and_conflicting_languages_fail(self, tmp_path: Path) -> None:
        """Test that a bad language is reported while the others are imported."""
        locales = self._locales(tmp_path)
        _ = write_locale_tree(locales, "de", {"gameContent": "flat"})
        corrupt = locales / "uk" / "translation.json"
        corrupt.parent.mkdir()
        _ = corrupt.write_text("{ not json", encoding="utf-8")
        csv_path = write_csv_lines(tmp_path / "common.csv", BIOME_CSV)

        result = import_all(locales, csv_path)

        assert sorted(error.language for error in result.failed) == ["de", "uk"]
        assert read_locale_tree(locales, "de") == {"gameContent": "flat"}
        assert corrupt.read_text(encoding="utf-8") == "{ not json"
        assert read_locale_tree(locales, "nl")["gameContent"] == {
            "biomes": {"biome_forest": "Forest", "biome_cave": "Cave, deep"}
        }

    def test_missing_csv_is_fatal(self, tmp_path: Path) -> None:
        locales = self._locales(tmp_path)

        with pytest.raises(FatalBaselineError):
            _ = import_all(locales, tmp_path / "missing.csv")
