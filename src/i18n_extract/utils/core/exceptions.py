"""
Basic exception classes for the i18n key extractor.

This module contains fundamental exception classes that are used throughout
the codebase without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors raised during an extraction run."""

    CONFIGURATION = "configuration"
    DISCOVERY = "discovery"
    PARSE = "parse"
    WRITE = "write"
    UNKNOWN = "unknown"


class ExtractError(Exception):
    """Base exception class for extraction errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context


class ConfigurationError(ExtractError):
    """Invalid options: unknown language, unsupported format, bad config file."""

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
            user_message=user_message,
            context=context,
        )


class DiscoveryError(ExtractError):
    """A source root or directory could not be read."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DISCOVERY,
            severity=ErrorSeverity.HIGH,
            user_message=user_message,
            context=context,
        )


class AssetParseError(ExtractError):
    """An existing translation asset could not be decoded."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.HIGH,
            user_message=user_message,
            context=context,
        )


class AssetWriteError(ExtractError):
    """A translation asset could not be written."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.WRITE,
            severity=ErrorSeverity.CRITICAL,
            user_message=user_message,
            context=context,
        )


class ScanError(ExtractError):
    """A call site could not be parsed. Handled inside the scanner."""

    def __init__(
        self,
        message: str,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.LOW,
            context=context,
        )
