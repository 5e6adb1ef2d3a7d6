"""Configuration manager for Locale Sync.

This module provides functionality for loading, validating, and saving
YAML configuration files with Pydantic model validation.
"""

import logging
from pathlib import Path

import yaml

from ..config.schema import LocaleSyncConfig
from ..locale.storage import write_text_atomic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("locale-sync.yml")


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.
    """

    @staticmethod
    def load_config(config_path: Path) -> LocaleSyncConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            LocaleSyncConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a YAML mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        return LocaleSyncConfig(**config_data)  # pyright: ignore[reportArgumentType]

    @staticmethod
    def load_or_default(config_path: Path | None) -> LocaleSyncConfig:
        """
        Load an explicit config file, or fall back to defaults.

        An explicitly given path must exist. Without one, the default
        ``locale-sync.yml`` in the working directory is used when present.

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
        """
        if config_path is not None:
            return ConfigManager.load_config(config_path)

        if DEFAULT_CONFIG_FILE.exists():
            logger.debug(f"Using configuration from {DEFAULT_CONFIG_FILE}")
            return ConfigManager.load_config(DEFAULT_CONFIG_FILE)

        logger.debug("No configuration file found, using defaults")
        return LocaleSyncConfig()

    @staticmethod
    def save_config(config: LocaleSyncConfig, config_path: Path) -> None:
        """
        Save configuration to a YAML file with atomic operation.

        Raises:
            OSError: If file operations fail
        """
        config_dict = config.model_dump(mode="json")

        content_to_write = yaml.dump(
            config_dict,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

        write_text_atomic(config_path, content_to_write)
