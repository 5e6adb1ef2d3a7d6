"""
Command-line argument parsing for Locale Sync.

Usage Examples:
    Fill missing keys in every language from the English baseline:
        locale-sync sync

    Fail the build when a language is missing keys:
        locale-sync check --ci-mode

    Migrate leaves to the annotated structure, keeping versioned backups:
        locale-sync upgrade --backup-policy versioned

    Import biome names from the master CSV into every language:
        locale-sync import-csv

    Merge a Ukrainian export into the master CSV:
        locale-sync merge-csv --incoming uk-translation.csv --column-key uk
"""

import argparse
from pathlib import Path

from ..core.version import get_version


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    _ = parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the YAML configuration file (default: locale-sync.yml if present)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--locales-dir",
        type=Path,
        default=None,
        help="Override the locales directory from the configuration",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--baseline",
        type=str,
        default=None,
        help="Override the baseline language code (default: en)",
    )
    _ = parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        help="Enable CI-friendly logging",
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for Locale Sync.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="locale-sync",
        description="Keep per-language translation trees consistent with the baseline language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sync                     # Fill missing keys from the baseline
  %(prog)s check                    # Exit 1 if any language is incomplete
  %(prog)s build                    # sync, import, check, publish and stats
  %(prog)s upgrade --dry-run        # List files that still need the upgrade
        """,
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sync_parser = subparsers.add_parser(
        "sync", help="Fill keys missing from each language with baseline values"
    )
    _add_common_arguments(sync_parser)
    _ = sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report missing keys without writing any file",
    )
    _ = sync_parser.add_argument(
        "--conflict-policy",
        choices=["keep_target", "error"],
        default=None,
        help="How to treat a key that is a branch on one side and a leaf on the other",
    )

    check_parser = subparsers.add_parser(
        "check", help="Check every language for keys missing from the baseline"
    )
    _add_common_arguments(check_parser)

    upgrade_parser = subparsers.add_parser(
        "upgrade", help="Migrate plain-string leaves to annotated {text, humanVerified} leaves"
    )
    _add_common_arguments(upgrade_parser)
    _ = upgrade_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Master CSV used to find human-verified keys (default: from configuration)",
        metavar="PATH",
    )
    _ = upgrade_parser.add_argument(
        "--backup-policy",
        choices=["overwrite", "versioned", "none"],
        default=None,
        help="Backup naming and retention policy",
    )
    _ = upgrade_parser.add_argument(
        "--backup-dir",
        type=Path,
        default=None,
        help="Write backups to this staging directory instead of beside the originals",
        metavar="PATH",
    )
    _ = upgrade_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the languages that still need upgrading without changing anything",
    )

    import_parser = subparsers.add_parser(
        "import-csv", help="Copy prefixed master CSV rows (e.g. biome names) into every language"
    )
    _add_common_arguments(import_parser)
    _ = import_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Master CSV to import from (default: from configuration)",
        metavar="PATH",
    )
    _ = import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing any file",
    )

    merge_parser = subparsers.add_parser(
        "merge-csv", help="Insert a language column from a single-language CSV export"
    )
    _add_common_arguments(merge_parser)
    _ = merge_parser.add_argument(
        "--incoming",
        type=Path,
        required=True,
        help="Single-language CSV export to merge",
        metavar="PATH",
    )
    _ = merge_parser.add_argument(
        "--master",
        type=Path,
        default=None,
        help="Master CSV (default: from configuration)",
        metavar="PATH",
    )
    _ = merge_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the merged table here instead of rewriting the master CSV",
        metavar="PATH",
    )
    _ = merge_parser.add_argument(
        "--insert-index", type=int, default=None, help="Column position of the new language"
    )
    _ = merge_parser.add_argument(
        "--column-key", type=str, default=None, help="Header key of the new column (e.g., uk)"
    )
    _ = merge_parser.add_argument(
        "--display-name", type=str, default=None, help="Language name for the display-name row"
    )

    stats_parser = subparsers.add_parser(
        "stats", help="Write per-language completeness statistics"
    )
    _add_common_arguments(stats_parser)
    _ = stats_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Statistics file (default: from configuration)",
        metavar="PATH",
    )

    publish_parser = subparsers.add_parser(
        "publish", help="Copy locale files to the public directory"
    )
    _add_common_arguments(publish_parser)
    _ = publish_parser.add_argument(
        "--target",
        type=Path,
        default=None,
        help="Public locales directory (default: from configuration)",
        metavar="PATH",
    )

    build_parser = subparsers.add_parser(
        "build", help="Run sync and import, gate on check, then publish and write statistics"
    )
    _add_common_arguments(build_parser)

    return parser


def parse_arguments(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    return create_argument_parser().parse_args(args)
