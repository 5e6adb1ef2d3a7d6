"""
Locale maintenance pipeline stages.

The steady-state build runs :mod:`baseline_sync` and then gates on
:mod:`completeness`, importing master CSV content rows with
:mod:`csv_import` in between. :mod:`schema_upgrade` and :mod:`csv_merge` are
maintenance tools run by hand.
"""

from .baseline_sync import SyncResult, sync, sync_all
from .completeness import CompletenessReport, LanguageStatus, check, check_all
from .csv_import import ImportResult, apply_translations, import_all
from .csv_merge import merge_csv_files, merge_language_column
from .publish import publish_locales
from .schema_upgrade import extract_verified_keys, load_verified_keys, upgrade, upgrade_all
from .stats import compute_language_stats, generate_stats, write_stats

__all__ = [
    "CompletenessReport",
    "ImportResult",
    "LanguageStatus",
    "SyncResult",
    "apply_translations",
    "check",
    "check_all",
    "compute_language_stats",
    "extract_verified_keys",
    "generate_stats",
    "import_all",
    "load_verified_keys",
    "merge_csv_files",
    "merge_language_column",
    "publish_locales",
    "sync",
    "sync_all",
    "upgrade",
    "upgrade_all",
    "write_stats",
]
