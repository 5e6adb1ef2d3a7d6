"""Tests for the Locale Sync exception taxonomy."""

from pathlib import Path

from locale_sync.utils.core.exceptions import (
    ConfigurationError,
    ErrorCategory,
    ErrorSeverity,
    FatalBaselineError,
    LocaleSyncError,
    PerLanguageError,
    TypeConflictError,
)


class TestExceptionTaxonomy:
    """Test classification attributes of each error type."""

    def test_fatal_baseline_error(self) -> None:
        path = Path("locales/en/translation.json")
        error = FatalBaselineError("cannot parse", path=path, user_message="Baseline is broken")

        assert isinstance(error, LocaleSyncError)
        assert error.category is ErrorCategory.BASELINE
        assert error.severity is ErrorSeverity.CRITICAL
        assert not error.recoverable
        assert error.path == path
        assert error.user_message == "Baseline is broken"
        assert str(error) == "cannot parse"

    def test_per_language_error(self) -> None:
        error = PerLanguageError("bad json", "de", Path("de/translation.json"))

        assert error.category is ErrorCategory.LANGUAGE
        assert error.recoverable
        assert error.language == "de"
        assert error.user_message == "bad json"

    def test_type_conflict_is_per_language(self) -> None:
        """Test that a conflict is isolated to its language like other file errors."""
        error = TypeConflictError("ui.menu", "fr")

        assert isinstance(error, PerLanguageError)
        assert error.category is ErrorCategory.CONFLICT
        assert error.key_path == "ui.menu"
        assert error.language == "fr"
        assert "ui.menu" in str(error)

    def test_configuration_error(self) -> None:
        error = ConfigurationError("invalid")

        assert error.category is ErrorCategory.CONFIGURATION
        assert error.severity is ErrorSeverity.HIGH
        assert not error.recoverable
