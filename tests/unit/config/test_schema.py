"""Tests for configuration schema validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from locale_sync.config.schema import (
    DEFAULT_IMPORT_COLUMNS,
    BackupConfig,
    CsvImportConfig,
    LanguagesConfig,
    LocaleSyncConfig,
    MergeConfig,
    PathsConfig,
    SyncConfig,
    UpgradeConfig,
)


class TestLocaleSyncConfig:
    """Test cases for the LocaleSyncConfig schema."""

    def test_default_values(self) -> None:
        """Test that defaults describe the conventional repository layout."""
        config = LocaleSyncConfig()

        assert config.paths.locales_dir == Path("src/locales")
        assert config.paths.translation_filename == "translation.json"
        assert config.paths.master_csv == Path("src/game-translations/common.csv")
        assert config.paths.public_dir == Path("public/locales")
        assert config.paths.stats_file == Path("src/data/translation-stats.json")
        assert config.languages.baseline == "en"
        assert config.languages.ignore == []
        assert config.sync.conflict_policy == "keep_target"
        assert config.sync.indent == 2
        assert config.upgrade.verified_prefixes == ["menu_", "option_"]
        assert config.upgrade.backup.policy == "overwrite"
        assert config.upgrade.backup.directory is None
        assert config.merge.insert_index == 11
        assert config.merge.column_key == "uk"
        assert config.merge.display_name == "Українська"
        assert config.merge.key_column == 0
        assert config.merge.value_column == 1
        assert config.csv_import.enabled
        assert config.csv_import.key_prefix == "biome_"
        assert config.csv_import.target_path == "gameContent.biomes"
        assert config.csv_import.columns == DEFAULT_IMPORT_COLUMNS
        assert config.csv_import.fallback_column == "en"

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            _ = LocaleSyncConfig(unknown={})  # pyright: ignore[reportCallIssue]

    def test_assignment_is_validated(self) -> None:
        """Test that overrides applied after loading are still validated."""
        config = LocaleSyncConfig()

        with pytest.raises(ValidationError):
            config.languages.baseline = "not a language"


class TestSectionValidation:
    """Test validation rules of individual sections."""

    def test_baseline_is_lowercased(self) -> None:
        assert LanguagesConfig(baseline="PT-BR").baseline == "pt-br"

    @pytest.mark.parametrize("baseline", ["", "e", "english", "en_US"])
    def test_invalid_baseline(self, baseline: str) -> None:
        with pytest.raises(ValidationError):
            _ = LanguagesConfig(baseline=baseline)

    def test_translation_filename_must_be_json(self) -> None:
        with pytest.raises(ValidationError):
            _ = PathsConfig(translation_filename="translation.yml")
        with pytest.raises(ValidationError):
            _ = PathsConfig(translation_filename="nested/translation.json")

    def test_conflict_policy_choices(self) -> None:
        assert SyncConfig(conflict_policy="error").conflict_policy == "error"
        with pytest.raises(ValidationError):
            _ = SyncConfig(conflict_policy="overwrite")  # pyright: ignore[reportArgumentType]

    def test_indent_range(self) -> None:
        with pytest.raises(ValidationError):
            _ = SyncConfig(indent=-1)
        with pytest.raises(ValidationError):
            _ = SyncConfig(indent=9)

    def test_backup_policy_choices(self) -> None:
        with pytest.raises(ValidationError):
            _ = BackupConfig(policy="daily")  # pyright: ignore[reportArgumentType]

    def test_empty_verified_prefix_rejected(self) -> None:
        """Test that an empty prefix, which would match every key, is rejected."""
        with pytest.raises(ValidationError, match="must not be empty"):
            _ = UpgradeConfig(verified_prefixes=["menu_", ""])

    def test_merge_columns(self) -> None:
        with pytest.raises(ValidationError):
            _ = MergeConfig(insert_index=0)
        with pytest.raises(ValidationError):
            _ = MergeConfig(column_key="")
        assert MergeConfig(key_column=2, value_column=5).value_column == 5

    @pytest.mark.parametrize("target_path", ["", ".biomes", "gameContent.", "a..b"])
    def test_import_target_path_segments(self, target_path: str) -> None:
        with pytest.raises(ValidationError):
            _ = CsvImportConfig(target_path=target_path)

    def test_import_columns_are_copied(self) -> None:
        """Test that each config gets its own column map."""
        config = CsvImportConfig()
        config.columns["nl"] = "nl"

        assert "nl" not in DEFAULT_IMPORT_COLUMNS
        assert CsvImportConfig(key_prefix="item_").columns == DEFAULT_IMPORT_COLUMNS
