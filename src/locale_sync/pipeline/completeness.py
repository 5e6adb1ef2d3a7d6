"""
Completeness checker.

Compares each language's key paths with the baseline and reports the key
paths the language is missing. The check is directional: keys a language
has beyond the baseline are never reported. Every language is evaluated
before the overall verdict is decided, so one report lists every problem.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..locale.storage import discover_languages, load_tree, translation_path
from ..locale.tree import Branch, KeyPath, flatten
from ..utils.core.exceptions import PerLanguageError
from .baseline_sync import load_baseline

logger = logging.getLogger(__name__)


class LanguageStatus(Enum):
    """Completeness verdict for one language."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    MISSING = "missing"


@dataclass
class LanguageReport:
    """
    Completeness report for one language.

    ``missing_keys`` is None when the translation file itself is missing or
    unparsable, which is distinct from an empty set of missing keys.
    """

    language: str
    missing_keys: set[KeyPath] | None
    error: str | None = None

    @property
    def status(self) -> LanguageStatus:
        if self.missing_keys is None:
            return LanguageStatus.MISSING
        if self.missing_keys:
            return LanguageStatus.INCOMPLETE
        return LanguageStatus.COMPLETE

    @property
    def passed(self) -> bool:
        return self.status is LanguageStatus.COMPLETE


@dataclass
class CompletenessReport:
    """Completeness reports for every checked language."""

    baseline_language: str
    baseline_key_count: int
    languages: dict[str, LanguageReport] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        """True when every language has its file and all baseline keys."""
        return all(report.passed for report in self.languages.values())

    @property
    def failures(self) -> list[LanguageReport]:
        return [report for report in self.languages.values() if not report.passed]

    def missing_by_language(self) -> dict[str, set[KeyPath] | None]:
        """Missing key paths per language, None for entirely missing files."""
        return {language: report.missing_keys for language, report in self.languages.items()}

    def format_lines(self) -> list[str]:
        """Human-readable report, one block per language."""
        lines: list[str] = []
        for language, report in self.languages.items():
            match report.status:
                case LanguageStatus.MISSING:
                    lines.append(f"❌ {language}: Translation file missing")
                case LanguageStatus.INCOMPLETE:
                    missing = sorted(report.missing_keys or ())
                    lines.append(f"❌ {language}: Missing {len(missing)} keys:")
                    lines.extend(f"   - {key}" for key in missing)
                case LanguageStatus.COMPLETE:
                    lines.append(f"✅ {language}: All keys present")
        return lines


def missing_keys(baseline: Branch, tree: Branch) -> set[KeyPath]:
    """Key paths present in the baseline but absent from the tree."""
    return flatten(baseline) - flatten(tree)


def check(
    baseline: Branch,
    languages: Iterable[str],
    locales_dir: Path,
    filename: str = "translation.json",
    baseline_language: str = "en",
) -> CompletenessReport:
    """
    Check each language's translation file against the baseline tree.

    Args:
        baseline: Baseline tree
        languages: Language codes to check; the baseline language is skipped
        locales_dir: Directory holding one sub-directory per language
        filename: Translation file name inside each language directory
        baseline_language: Language code of the baseline

    Returns:
        CompletenessReport covering every requested language
    """
    baseline_keys = flatten(baseline)
    report = CompletenessReport(baseline_language, len(baseline_keys))

    for language in languages:
        if language == baseline_language:
            continue

        try:
            tree = load_tree(translation_path(locales_dir, language, filename), language)
        except PerLanguageError as e:
            logger.debug(f"{language}: {e}")
            report.languages[language] = LanguageReport(language, None, str(e))
            continue

        report.languages[language] = LanguageReport(language, baseline_keys - flatten(tree))

    return report


def check_all(
    locales_dir: Path,
    filename: str = "translation.json",
    baseline_language: str = "en",
    ignore: tuple[str, ...] = (),
) -> CompletenessReport:
    """
    Discover languages and check all of them against the baseline.

    Raises:
        FatalBaselineError: If the baseline cannot be loaded
    """
    languages = discover_languages(locales_dir, ignore)
    baseline_path = translation_path(locales_dir, baseline_language, filename)
    baseline = load_baseline(baseline_path, baseline_language)
    return check(baseline, languages, locales_dir, filename, baseline_language)
