"""Configuration schema for Locale Sync using nested Pydantic models."""

from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PathsConfig(BaseModel):
    """File system locations used by the pipeline."""

    locales_dir: Path = Field(
        default=Path("src/locales"),
        description="Directory holding one sub-directory per language",
    )
    translation_filename: str = Field(
        default="translation.json",
        description="Name of the translation file inside each language directory",
        pattern=r"^[^/\\]+\.json$",
    )
    master_csv: Path = Field(
        default=Path("src/game-translations/common.csv"),
        description="Master multi-language CSV table",
    )
    public_dir: Path = Field(
        default=Path("public/locales"),
        description="Directory that published locale files are copied to",
    )
    stats_file: Path = Field(
        default=Path("src/data/translation-stats.json"),
        description="Output file for per-language translation statistics",
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(validate_assignment=True)


class LanguagesConfig(BaseModel):
    """Language discovery settings."""

    baseline: str = Field(
        default="en",
        description="Language code of the baseline tree",
        pattern=r"^[A-Za-z]{2,3}(-[A-Za-z0-9]+)?$",
    )
    ignore: list[str] = Field(
        default_factory=list,
        description="Language directories excluded from discovery",
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(validate_assignment=True)

    @field_validator("baseline")
    @classmethod
    def validate_baseline(cls, v: str) -> str:
        """Normalize the baseline language code."""
        return v.lower()


class SyncConfig(BaseModel):
    """Baseline sync settings."""

    conflict_policy: Literal["keep_target", "error"] = Field(
        default="keep_target",
        description="What to do when a key is a branch on one side and a leaf on the other",
    )
    indent: Annotated[int, Field(ge=0, le=8)] = Field(
        default=2,
        description="JSON indentation used when writing translation files",
    )


class BackupConfig(BaseModel):
    """Backup settings for the schema upgrade."""

    policy: Literal["overwrite", "versioned", "none"] = Field(
        default="overwrite",
        description="overwrite keeps only the latest backup, versioned keeps one per run",
    )
    directory: Path | None = Field(
        default=None,
        description="Optional staging directory for backups (default: beside the original)",
    )


class UpgradeConfig(BaseModel):
    """Schema upgrade settings."""

    verified_prefixes: list[str] = Field(
        default_factory=lambda: ["menu_", "option_"],
        description="CSV key prefixes whose translations count as human verified",
    )
    backup: BackupConfig = Field(default_factory=BackupConfig)

    @field_validator("verified_prefixes")
    @classmethod
    def validate_prefixes(cls, v: list[str]) -> list[str]:
        """Reject empty prefixes, which would mark every key as verified."""
        if any(not prefix for prefix in v):
            raise ValueError("Verified key prefixes must not be empty")
        return v


class MergeConfig(BaseModel):
    """CSV column merge settings."""

    insert_index: Annotated[int, Field(ge=1)] = Field(
        default=11,
        description="Column position the new language column is inserted at",
    )
    column_key: str = Field(
        default="uk",
        description="Header key of the inserted language column",
        min_length=1,
    )
    display_name: str = Field(
        default="Українська",
        description="Human-readable language name written to the display-name row",
        min_length=1,
    )
    key_column: Annotated[int, Field(ge=0)] = Field(
        default=0,
        description="Column of the incoming CSV holding the translation key",
    )
    value_column: Annotated[int, Field(ge=0)] = Field(
        default=1,
        description="Column of the incoming CSV holding the translated text",
    )


DEFAULT_IMPORT_COLUMNS: dict[str, str] = {
    "en": "en",
    "ru": "ru",
    "br": "pt-br",
    "es": "es-es",
    "de": "de",
    "fr": "fr-fr",
    "it": "it",
    "pl": "pl",
    "zh": "zh-cn",
    "ja": "jp",
    "uk": "uk",
    "id": "id",
}


class CsvImportConfig(BaseModel):
    """Settings for importing game-content rows from the master CSV."""

    enabled: bool = Field(
        default=True,
        description="Run the import as part of the build",
    )
    key_prefix: str = Field(
        default="biome_",
        description="Master CSV keys starting with this prefix are imported",
        min_length=1,
    )
    target_path: str = Field(
        default="gameContent.biomes",
        description="Dotted key path of the branch that receives the imported keys",
        pattern=r"^[^.]+(\.[^.]+)*$",
    )
    columns: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_IMPORT_COLUMNS),
        description="Language code to master CSV column key, for codes that differ",
    )
    fallback_column: str = Field(
        default="en",
        description="Column used when a language has no column or an empty cell",
        min_length=1,
    )


class LocaleSyncConfig(BaseModel):
    """
    Configuration model for Locale Sync with nested structure.

    Every section has defaults, so an empty YAML file (or no file at all)
    yields a working configuration for the conventional repository layout.
    """

    paths: PathsConfig = Field(default_factory=PathsConfig)
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    upgrade: UpgradeConfig = Field(default_factory=UpgradeConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    csv_import: CsvImportConfig = Field(default_factory=CsvImportConfig)

    model_config: ClassVar[ConfigDict] = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
        frozen=False,
    )
