"""
Translation statistics.

Computes per-language completeness and human-verification counts against
the baseline, for display next to the language picker. Languages whose
file is missing or corrupt are reported as zero rather than failing the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..locale.storage import (
    discover_languages,
    dumps_json,
    load_tree,
    translation_path,
    write_text_atomic,
)
from ..locale.tree import (
    AnnotatedText,
    Branch,
    KeyPath,
    Leaf,
    PlainText,
    flatten,
    flatten_text,
    iter_leaves,
    leaf_text,
)
from ..utils.core.exceptions import PerLanguageError
from .baseline_sync import load_baseline

logger = logging.getLogger(__name__)


@dataclass
class LanguageStats:
    """Statistics for one language, serialized with camelCase keys."""

    total_keys: int
    present_keys: int = 0
    translated_keys: int = 0
    human_verified_keys: int = 0
    completeness: int = 0

    def to_json(self) -> dict[str, int]:
        return {
            "completeness": self.completeness,
            "translatedKeys": self.translated_keys,
            "humanVerifiedKeys": self.human_verified_keys,
            "presentKeys": self.present_keys,
            "totalKeys": self.total_keys,
        }


def _percentage(part: int, total: int) -> int:
    if total == 0:
        return 100
    return min(round(part / total * 100), 100)


def _is_verified(path: KeyPath, key: str, leaf: Leaf, verified_keys: set[str]) -> bool:
    match leaf:
        case AnnotatedText(human_verified=verified):
            return verified
        case PlainText():
            return key in verified_keys or path in verified_keys
        case _:
            return False


def compute_language_stats(
    baseline: Branch, tree: Branch, verified_keys: set[str] | None = None
) -> LanguageStats:
    """
    Measure how much of the baseline a language tree actually translates.

    A key counts as translated when its text is non-blank and differs from
    the baseline text at the same path, so untranslated copies filled in by
    the sync do not inflate the figure.

    Args:
        baseline: Baseline tree
        tree: Language tree
        verified_keys: Keys or key paths confirmed by a human, used for
            plain leaves that carry no verification flag of their own

    Returns:
        LanguageStats for the tree
    """
    verified_keys = verified_keys or set()
    baseline_text = flatten_text(baseline)
    baseline_keys = flatten(baseline)
    stats = LanguageStats(total_keys=len(baseline_keys))

    for path, key, leaf in iter_leaves(tree):
        if path not in baseline_keys:
            continue
        stats.present_keys += 1

        text = leaf_text(leaf)
        if text is None:
            continue

        if text.strip() and text != baseline_text.get(path):
            stats.translated_keys += 1
        if _is_verified(path, key, leaf, verified_keys):
            stats.human_verified_keys += 1

    stats.completeness = _percentage(stats.translated_keys, stats.total_keys)
    return stats


def baseline_stats(baseline: Branch, verified_keys: set[str] | None = None) -> LanguageStats:
    """
    The baseline is its own reference and always 100% complete.

    Human verification is counted the same way as for other languages.
    """
    verified_keys = verified_keys or set()
    total = len(flatten(baseline))
    verified = sum(
        1
        for path, key, leaf in iter_leaves(baseline)
        if _is_verified(path, key, leaf, verified_keys)
    )
    return LanguageStats(total, total, total, verified, 100)


def generate_stats(
    locales_dir: Path,
    filename: str = "translation.json",
    baseline_language: str = "en",
    verified_keys: set[str] | None = None,
    ignore: tuple[str, ...] = (),
) -> dict[str, LanguageStats]:
    """
    Compute statistics for every discovered language.

    Raises:
        FatalBaselineError: If the baseline cannot be loaded
    """
    baseline_path = translation_path(locales_dir, baseline_language, filename)
    baseline = load_baseline(baseline_path, baseline_language)
    stats: dict[str, LanguageStats] = {}

    for language in discover_languages(locales_dir, ignore):
        if language == baseline_language:
            stats[language] = baseline_stats(baseline, verified_keys)
            logger.info(f"{language}: 100% - REFERENCE")
            continue

        try:
            tree = load_tree(translation_path(locales_dir, language, filename), language)
        except PerLanguageError as e:
            logger.warning(f"⚠️  {language}: {e}")
            stats[language] = LanguageStats(total_keys=len(flatten(baseline)))
            continue

        stats[language] = compute_language_stats(baseline, tree, verified_keys)
        entry = stats[language]
        logger.info(
            f"{language}: {entry.completeness}% ({entry.translated_keys}/{entry.total_keys})"
        )

    return stats


def write_stats(stats: dict[str, LanguageStats], output_path: Path) -> None:
    """Write statistics as JSON, keyed by language code."""
    write_text_atomic(
        output_path,
        dumps_json({language: entry.to_json() for language, entry in stats.items()}),
    )
    logger.info(f"✅ Translation stats saved to {output_path}")
