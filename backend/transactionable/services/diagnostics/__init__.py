from __future__ import annotations

"""
Diagnostics and error classification utilities.

This package currently provides:
- error_classifier: map exceptions raised inside a transaction onto one
  of the configured handling categories.
- log_format: render the one-line diagnostics emitted for rescued,
  retried and re-raised errors, plus a no-op logger.

The goal is to keep error handling logic centralized and deterministic.
"""

from .error_classifier import (  # noqa: F401
    DEFAULT_RESCUED_ERRORS,
    ErrorCategory,
    classify_error,
    normalize_error_set,
)
from .log_format import DiagnosticLogger, NullLogger, format_failure, ordinalize  # noqa: F401
