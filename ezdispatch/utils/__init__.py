"""Utility functions for ezdispatch."""

from ezdispatch.utils.helpers import camel_to_snake, snake_to_camel, to_camel_case
from ezdispatch.utils.exceptions import (
    EzdispatchError,
    ParseError,
    SynthesisError,
    ConfigError,
    ErrorCategory,
    classify_exception,
    format_error,
)

__all__ = [
    "camel_to_snake",
    "snake_to_camel",
    "to_camel_case",
    "EzdispatchError",
    "ParseError",
    "SynthesisError",
    "ConfigError",
    "ErrorCategory",
    "classify_exception",
    "format_error",
]
