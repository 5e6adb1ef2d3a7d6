"""
Baseline sync engine.

Deep-merges each language's tree with the baseline tree, filling only the
key paths the language is missing. Existing values are never overwritten,
and keys a language has beyond the baseline are kept as they are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, override

from ..locale.storage import discover_languages, load_tree, save_tree, translation_path
from ..locale.tree import Branch, KeyPath, count_leaves, join_path
from ..utils.core.exceptions import FatalBaselineError, PerLanguageError, TypeConflictError

logger = logging.getLogger(__name__)

type ConflictPolicy = Literal["keep_target", "error"]


def sync(
    target: Branch,
    baseline: Branch,
    conflict_policy: ConflictPolicy = "keep_target",
    conflicts: list[KeyPath] | None = None,
    prefix: KeyPath = "",
) -> Branch:
    """
    Merge the baseline structure into a target tree.

    Baseline branches are merged recursively, creating empty branches in the
    target where they are absent. Baseline leaves are copied only to key
    paths the target does not have. The target is not mutated.

    Args:
        target: Existing language tree
        baseline: Baseline tree whose key paths must exist in the result
        conflict_policy: ``keep_target`` keeps whatever the target holds when
            a key is a branch on one side and a leaf on the other;
            ``error`` raises instead
        conflicts: Optional list that receives the key path of every
            branch/leaf conflict that was resolved in the target's favour
        prefix: Key path of ``target`` within the full tree

    Returns:
        New merged tree

    Raises:
        TypeConflictError: On a branch/leaf conflict with ``conflict_policy="error"``
    """
    result = target.copy()

    for key, base_node in baseline.children.items():
        path = join_path(prefix, key)
        existing = result.get(key)

        if isinstance(base_node, Branch):
            if existing is None:
                result.children[key] = sync(Branch(), base_node, conflict_policy, conflicts, path)
            elif isinstance(existing, Branch):
                result.children[key] = sync(existing, base_node, conflict_policy, conflicts, path)
            else:
                _record_conflict(path, conflict_policy, conflicts)
        elif existing is None:
            result.children[key] = base_node
        elif isinstance(existing, Branch):
            _record_conflict(path, conflict_policy, conflicts)

    return result


def _record_conflict(
    path: KeyPath, conflict_policy: ConflictPolicy, conflicts: list[KeyPath] | None
) -> None:
    if conflict_policy == "error":
        raise TypeConflictError(path)
    logger.debug(f"Keeping existing value at '{path}' despite branch/leaf mismatch")
    if conflicts is not None:
        conflicts.append(path)


@dataclass
class LanguageSyncOutcome:
    """Outcome of syncing one language."""

    language: str
    added_keys: int = 0
    written: bool = False
    conflicts: list[KeyPath] = field(default_factory=list)


class SyncResult:
    """Result of a sync run over all languages."""

    def __init__(self) -> None:
        self.languages: list[str] = []
        self.outcomes: list[LanguageSyncOutcome] = []
        self.failed: list[PerLanguageError] = []

    @property
    def updated(self) -> list[LanguageSyncOutcome]:
        """Languages whose file was rewritten."""
        return [outcome for outcome in self.outcomes if outcome.written]

    @property
    def total_added(self) -> int:
        """Number of keys added across all languages."""
        return sum(outcome.added_keys for outcome in self.outcomes)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @override
    def __str__(self) -> str:
        return (
            f"Sync Results: "
            f"{len(self.updated)} updated, "
            f"{len(self.outcomes) - len(self.updated)} up to date, "
            f"{self.failure_count} skipped "
            f"({self.total_added} keys added)"
        )


def load_baseline(path: Path, language: str) -> Branch:
    """
    Load the baseline tree.

    Raises:
        FatalBaselineError: If the baseline file is missing or unparsable
    """
    try:
        return load_tree(path, language)
    except PerLanguageError as e:
        raise FatalBaselineError(
            f"Cannot load baseline translations ({language}): {e}",
            path=path,
            user_message=f"Baseline translation file {path} is missing or invalid",
        ) from e


def sync_language(
    path: Path,
    language: str,
    baseline: Branch,
    conflict_policy: ConflictPolicy = "keep_target",
    indent: int = 2,
    dry_run: bool = False,
) -> LanguageSyncOutcome:
    """
    Sync a single language file against the baseline.

    The file is only rewritten when at least one key was added.

    Raises:
        PerLanguageError: If the language file cannot be loaded, or on a
            type conflict under the ``error`` policy
    """
    existing = load_tree(path, language)
    outcome = LanguageSyncOutcome(language)

    try:
        merged = sync(existing, baseline, conflict_policy, outcome.conflicts)
    except TypeConflictError as e:
        e.language = language
        e.path = path
        raise

    outcome.added_keys = count_leaves(merged) - count_leaves(existing)

    if outcome.added_keys > 0 and not dry_run:
        save_tree(path, merged, indent)
        outcome.written = True

    return outcome


def sync_all(
    locales_dir: Path,
    filename: str = "translation.json",
    baseline_language: str = "en",
    conflict_policy: ConflictPolicy = "keep_target",
    indent: int = 2,
    ignore: tuple[str, ...] = (),
    dry_run: bool = False,
) -> SyncResult:
    """
    Sync every discovered language against the baseline.

    Args:
        locales_dir: Directory holding one sub-directory per language
        filename: Translation file name inside each language directory
        baseline_language: Language code of the baseline tree
        conflict_policy: Branch/leaf conflict handling, see :func:`sync`
        indent: JSON indentation for rewritten files
        ignore: Language directories to leave out
        dry_run: Report what would change without writing files

    Returns:
        SyncResult with per-language outcomes and skipped languages

    Raises:
        FatalBaselineError: If the baseline cannot be loaded
    """
    result = SyncResult()
    result.languages = discover_languages(locales_dir, ignore)
    logger.info(f"Found languages: {', '.join(result.languages)}")

    baseline_path = translation_path(locales_dir, baseline_language, filename)
    baseline = load_baseline(baseline_path, baseline_language)
    logger.info(f"✅ Loaded {baseline_language} translations as base")

    for language in result.languages:
        if language == baseline_language:
            continue

        logger.debug(f"Processing {language}...")
        try:
            outcome = sync_language(
                translation_path(locales_dir, language, filename),
                language,
                baseline,
                conflict_policy,
                indent,
                dry_run,
            )
        except PerLanguageError as e:
            logger.warning(f"⚠️  Skipping {language} - {e}")
            result.failed.append(e)
            continue

        result.outcomes.append(outcome)
        if outcome.conflicts:
            logger.warning(
                f"⚠️  {language}: kept {len(outcome.conflicts)} value(s) whose shape differs from the baseline"
            )
        if outcome.added_keys > 0:
            verb = "Would add" if dry_run else "Updated - added"
            logger.info(f"✅ {language}: {verb} {outcome.added_keys} missing keys")
        else:
            logger.info(f"✅ {language} is up to date")

    logger.info(str(result))
    return result
