"""
Locale Sync - keeps per-language translation trees consistent with a baseline.
"""

import sys

from .utils.cli.commands import main as cli_main


def main() -> None:
    """Console entry point that exits with the command's status code."""
    sys.exit(cli_main())


__all__ = ["main"]
