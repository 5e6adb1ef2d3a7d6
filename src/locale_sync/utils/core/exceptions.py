"""
Basic exception classes for Locale Sync.

This module contains the exception taxonomy shared by every pipeline stage
without creating import cycles. Errors are split into fatal baseline errors,
which abort a whole run, and per-language errors, which are isolated and
summarized at the end of a run.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    BASELINE = "baseline"
    LANGUAGE = "language"
    CONFLICT = "conflict"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class LocaleSyncError(Exception):
    """Base exception class for Locale Sync specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class FatalBaselineError(LocaleSyncError):
    """The baseline translation file or master CSV is missing or unparsable."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.BASELINE,
            severity=ErrorSeverity.CRITICAL,
            user_message=user_message,
            context=path,
            recoverable=False,
        )
        self.path: Path | None = path


class PerLanguageError(LocaleSyncError):
    """A single language's file is missing, unreadable or malformed."""

    def __init__(
        self,
        message: str,
        language: str,
        path: Path | None = None,
        category: ErrorCategory = ErrorCategory.LANGUAGE,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=category,
            severity=ErrorSeverity.MEDIUM,
            user_message=user_message,
            context=path,
            recoverable=True,
        )
        self.language: str = language
        self.path: Path | None = path


class TypeConflictError(PerLanguageError):
    """A key is a branch on one side of a sync and a leaf on the other."""

    def __init__(self, key_path: str, language: str = "") -> None:
        super().__init__(
            f"Branch/leaf type conflict at '{key_path}'",
            language=language,
            category=ErrorCategory.CONFLICT,
        )
        self.key_path: str = key_path


class ConfigurationError(LocaleSyncError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )
