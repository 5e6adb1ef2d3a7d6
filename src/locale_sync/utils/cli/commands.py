"""
Command handlers for the Locale Sync command-line interface.

Each ``cmd_*`` handler takes the parsed arguments and the resolved
configuration and returns a process exit code. Fatal errors are turned into
exit code 1 by :func:`main`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

import yaml
from pydantic import ValidationError

from ...config.manager import ConfigManager
from ...config.schema import LocaleSyncConfig
from ...locale.storage import BackupPolicy
from ...pipeline.baseline_sync import sync_all
from ...pipeline.completeness import check_all
from ...pipeline.csv_import import import_all
from ...pipeline.csv_merge import merge_csv_files
from ...pipeline.publish import publish_locales
from ...pipeline.schema_upgrade import (
    BackupSettings,
    load_verified_keys,
    pending_upgrades,
    upgrade_all,
)
from ...pipeline.stats import generate_stats, write_stats
from ..core.exceptions import ConfigurationError, FatalBaselineError, PerLanguageError
from .args import create_argument_parser

logger = logging.getLogger(__name__)

type CommandHandler = Callable[[argparse.Namespace, LocaleSyncConfig], int]


def setup_logging(verbose: bool = False, ci_mode: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
        ci_mode: Enable CI-friendly logging format
    """
    level = logging.DEBUG if verbose else logging.INFO

    if ci_mode:
        log_format = "::%(levelname)s::%(message)s" if verbose else "%(message)s"
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def resolve_config(args: argparse.Namespace) -> LocaleSyncConfig:
    """
    Load the configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration file is missing or invalid
    """
    try:
        config = ConfigManager.load_or_default(args.config_file)
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    try:
        if args.locales_dir is not None:
            config.paths.locales_dir = args.locales_dir
        if args.baseline is not None:
            config.languages.baseline = args.baseline
    except ValidationError as e:
        raise ConfigurationError(f"Invalid command-line override: {e}") from e

    return config


def cmd_sync(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Fill missing keys in every language from the baseline."""
    result = sync_all(
        config.paths.locales_dir,
        config.paths.translation_filename,
        config.languages.baseline,
        args.conflict_policy or config.sync.conflict_policy,
        config.sync.indent,
        tuple(config.languages.ignore),
        dry_run=args.dry_run,
    )
    logger.info("✅ Translation sync complete!")

    for error in result.failed:
        print(f"⚠️  {error.language}: {error}")
    return 0


def cmd_check(args: argparse.Namespace, config: LocaleSyncConfig) -> int:  # pyright: ignore[reportUnusedParameter]
    """Report missing keys per language; non-zero exit when anything is missing."""
    report = check_all(
        config.paths.locales_dir,
        config.paths.translation_filename,
        config.languages.baseline,
        tuple(config.languages.ignore),
    )

    for line in report.format_lines():
        print(line)

    if report.passed:
        logger.info(f"All {len(report.languages)} language(s) are complete")
        return 0

    logger.error(f"{len(report.failures)} of {len(report.languages)} language(s) are incomplete")
    return 1


def cmd_upgrade(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Migrate every language to annotated leaves, backing files up first."""
    if args.dry_run:
        pending = pending_upgrades(
            config.paths.locales_dir,
            config.paths.translation_filename,
            config.languages.ignore,
        )
        print(f"Languages needing upgrade: {', '.join(pending) if pending else 'none'}")
        return 0

    verified_keys = load_verified_keys(
        args.csv or config.paths.master_csv, config.upgrade.verified_prefixes
    )
    backup = BackupSettings(
        policy=BackupPolicy(args.backup_policy or config.upgrade.backup.policy),
        directory=args.backup_dir or config.upgrade.backup.directory,
    )

    result = upgrade_all(
        config.paths.locales_dir,
        verified_keys,
        config.paths.translation_filename,
        backup,
        config.sync.indent,
        config.languages.ignore,
    )

    print(f"Upgraded: {result.success_count}, failed: {result.failure_count}")
    return 0 if result.succeeded else 1


def cmd_import_csv(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Copy prefixed master CSV rows into every language tree."""
    settings = config.csv_import
    result = import_all(
        config.paths.locales_dir,
        args.csv or config.paths.master_csv,
        config.paths.translation_filename,
        settings.key_prefix,
        settings.target_path,
        settings.columns,
        settings.fallback_column,
        config.sync.indent,
        tuple(config.languages.ignore),
        dry_run=args.dry_run,
    )

    for error in result.failed:
        print(f"⚠️  {error.language}: {error}")
    print(f"📊 Imported {result.total_changed} entries into {len(result.changed)} language(s)")
    return 0 if result.succeeded else 1


def cmd_merge_csv(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Insert a language column from a single-language export."""
    merge = config.merge
    summary = merge_csv_files(
        args.master or config.paths.master_csv,
        args.incoming,
        args.insert_index if args.insert_index is not None else merge.insert_index,
        args.column_key or merge.column_key,
        args.display_name or merge.display_name,
        output_path=args.output,
        key_column=merge.key_column,
        value_column=merge.value_column,
    )
    print(
        f"📊 Added {summary.incoming_translations} translations "
        f"({summary.matched_rows}/{summary.data_rows} rows matched) -> {summary.output_path}"
    )
    return 0


def cmd_stats(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Compute and write per-language statistics."""
    verified_keys = load_verified_keys(config.paths.master_csv, config.upgrade.verified_prefixes)
    stats = generate_stats(
        config.paths.locales_dir,
        config.paths.translation_filename,
        config.languages.baseline,
        verified_keys,
        tuple(config.languages.ignore),
    )
    write_stats(stats, args.output or config.paths.stats_file)
    return 0


def cmd_publish(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Copy locale files to the public directory."""
    _ = publish_locales(config.paths.locales_dir, args.target or config.paths.public_dir)
    return 0


def cmd_build(args: argparse.Namespace, config: LocaleSyncConfig) -> int:
    """Run the steady-state pipeline: sync and import, gate on check, then publish and stats."""
    args.dry_run = False
    args.conflict_policy = None
    args.csv = None
    args.target = None
    args.output = None

    _ = cmd_sync(args, config)
    if config.csv_import.enabled:
        _ = cmd_import_csv(args, config)
    if cmd_check(args, config) != 0:
        logger.error("❌ Completeness check failed, stopping build")
        return 1
    _ = cmd_publish(args, config)
    return cmd_stats(args, config)


COMMANDS: dict[str, CommandHandler] = {
    "sync": cmd_sync,
    "check": cmd_check,
    "upgrade": cmd_upgrade,
    "import-csv": cmd_import_csv,
    "merge-csv": cmd_merge_csv,
    "stats": cmd_stats,
    "publish": cmd_publish,
    "build": cmd_build,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the command-line interface.

    Returns:
        Exit code
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    command: str | None = args.command
    if not command:
        parser.print_help(sys.stderr)
        return 1

    setup_logging(args.verbose, args.ci_mode)

    try:
        config = resolve_config(args)
        return COMMANDS[command](args, config)
    except FatalBaselineError as e:
        logger.error(f"❌ {e.user_message}. Aborting.")
        logger.debug(f"{e}")
        return 1
    except PerLanguageError as e:
        logger.error(f"❌ {e}")
        return 1
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except OSError as e:
        logger.error(f"Error during {command}: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
