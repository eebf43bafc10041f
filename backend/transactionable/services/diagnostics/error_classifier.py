from __future__ import annotations

"""backend/transactionable/services/diagnostics/error_classifier.py

Centralized error classification for wrapped operations.

This module looks at an exception raised inside an atomic scope and
assigns exactly one handling category, based on three configured
error-category sets.

The classification is:
- deterministic (fixed precedence, no state)
- type-based (``isinstance``, so subclasses match their parents)
- total (every exception gets a category)

Category values:
- reraisable
- retriable
- rescued
- unclassified
"""

import enum
import inspect
from typing import Iterable, Tuple, Type, Union

from sqlalchemy.exc import SQLAlchemyError

ErrorTypes = Tuple[Type[BaseException], ...]
ErrorCategorySet = Union[None, Type[BaseException], Iterable[Type[BaseException]]]

# Sentinel "known error" rescued when nothing else is configured
DEFAULT_RESCUED_ERRORS: ErrorTypes = (SQLAlchemyError,)


class ErrorCategory(str, enum.Enum):
    RERAISABLE = "reraisable"
    RETRIABLE = "retriable"
    RESCUED = "rescued"
    UNCLASSIFIED = "unclassified"


def _is_error_type(value: object) -> bool:
    return inspect.isclass(value) and issubclass(value, BaseException)


def normalize_error_set(value: ErrorCategorySet) -> ErrorTypes:
    """Normalize an error-category set into a tuple of exception classes.

    Accepts None (empty), a single exception class, or any iterable of
    exception classes.

    Raises:
        TypeError: if a member is not an exception class.
    """
    if value is None:
        return ()
    if _is_error_type(value):
        return (value,)  # type: ignore[return-value]
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"Expected an exception class or a collection of them, got {value!r}")

    types = tuple(value)
    for member in types:
        if not _is_error_type(member):
            raise TypeError(f"{member!r} is not an exception class")
    return types


def classify_error(
    error: BaseException,
    rescued: ErrorTypes,
    retriable: ErrorTypes,
    reraisable: ErrorTypes,
) -> ErrorCategory:
    """Classify a raised error into a single handling category.

    Sets must already be normalized (see normalize_error_set).
    Precedence is most severe first, so an error listed in more than one
    set is re-raised before it is retried, and retried before it is
    swallowed.
    """
    # 1) Errors the caller must see
    if reraisable and isinstance(error, reraisable):
        return ErrorCategory.RERAISABLE

    # 2) Transient errors worth another attempt
    if retriable and isinstance(error, retriable):
        return ErrorCategory.RETRIABLE

    # 3) Known errors recorded and swallowed
    if rescued and isinstance(error, rescued):
        return ErrorCategory.RESCUED

    # 4) Anything else is not ours to handle
    return ErrorCategory.UNCLASSIFIED
