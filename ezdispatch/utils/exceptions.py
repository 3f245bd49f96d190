"""
Exception hierarchy for ezdispatch.

Provides:
- Custom exception classes with error codes
- Error categorization (validation vs fatal)
- A classifier used by the CLI to pick an exit status and message style

Only transformation-time errors live here. Generated code never raises its own
errors at call time: methods' ``Err`` values are forwarded verbatim.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FATAL = "fatal"


class EzdispatchError(Exception):
    """Base exception for all ezdispatch errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ParseError(EzdispatchError):
    """Malformed or ambiguous interface declaration."""

    def __init__(
        self,
        message: str,
        *,
        interface: str | None = None,
        method: str | None = None,
        line: int | None = None,
    ):
        details: dict[str, Any] = {}
        if interface:
            details["interface"] = interface
        if method:
            details["method"] = method
        if line is not None:
            details["line"] = line
        super().__init__(message, code="PARSE_ERROR", category=ErrorCategory.VALIDATION, details=details)
        self.interface = interface
        self.method = method
        self.line = line

    def location(self) -> str:
        """Human readable ``Interface.method:line`` prefix (empty when unknown)."""
        target = ".".join(part for part in (self.interface, self.method) if part)
        if self.line is not None:
            return f"{target}:{self.line}" if target else f"line {self.line}"
        return target


class SynthesisError(EzdispatchError):
    """An internal invariant of the synthesizers was broken."""

    def __init__(self, message: str, interface: str | None = None):
        details = {"interface": interface} if interface else {}
        super().__init__(message, code="SYNTHESIS_ERROR", category=ErrorCategory.FATAL, details=details)


class ConfigError(EzdispatchError):
    """Invalid generator configuration."""

    def __init__(self, message: str, path: str | None = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="CONFIG_ERROR", category=ErrorCategory.VALIDATION, details=details)


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory]:
    """
    Classify an exception and return (error_code, category).

    Returns:
        Tuple of (error_code, category)
    """
    if isinstance(exc, EzdispatchError):
        return exc.code, exc.category

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.NOT_FOUND

    if isinstance(exc, SyntaxError):
        return "PARSE_ERROR", ErrorCategory.VALIDATION

    if isinstance(exc, (ValueError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION

    return "INTERNAL_ERROR", ErrorCategory.FATAL


def format_error(exc: Exception, include_code: bool = False) -> str:
    """Format an exception for terminal output."""
    code, _ = classify_exception(exc)

    if isinstance(exc, ParseError):
        location = exc.location()
        message = f"{location}: {exc.message}" if location else exc.message
    elif isinstance(exc, EzdispatchError):
        message = exc.message
    else:
        message = str(exc)

    if include_code:
        return f"Error [{code}]: {message}"
    return f"Error: {message}"
