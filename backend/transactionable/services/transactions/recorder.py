from __future__ import annotations

"""backend/transactionable/services/transactions/recorder.py

Write swallowed failures onto the target object's error collection.
"""

from typing import Any


def record_failure(target: Any, error: BaseException) -> bool:
    """Add the error's type name as a base message on ``target``.

    Returns False when there is no target to record onto.
    """
    if target is None:
        return False
    target.errors.add_base(type(error).__name__)
    return True


def merge_invalid_record(target: Any, record: Any) -> bool:
    """Copy the invalid record's messages onto ``target``.

    Nothing to do when the target is missing, or when it is the invalid
    record itself (its messages are already there).
    """
    if target is None or record is None or target is record:
        return False
    target.errors.merge(record.errors)
    return True
