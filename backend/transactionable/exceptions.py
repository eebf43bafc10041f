# backend/transactionable/exceptions.py
from __future__ import annotations

"""
Exceptions shared between the transaction scope and host code.

- Rollback: raised by an operation to discard its transaction on purpose.
  The atomic scope swallows it.
- RecordInvalid: raised by host validation code when a record fails
  validation. Carries the invalid record so its messages can be copied
  onto the object the wrapper reports to.
"""

from typing import Any


class Rollback(Exception):
    """Intentional rollback of the enclosing atomic scope.

    Never propagates past the scope that catches it.
    """

    pass


class RecordInvalid(Exception):
    """Raised when a record fails validation.

    The record is expected to expose an ``errors`` collection
    (see transactionable.models.ErrorCollection).
    """

    def __init__(self, record: Any) -> None:
        self.record = record
        errors = getattr(record, "errors", None)
        messages = list(errors.full_messages) if errors is not None else []
        if messages:
            message = "Validation failed: " + ", ".join(messages)
        else:
            message = "Validation failed"
        super().__init__(message)
