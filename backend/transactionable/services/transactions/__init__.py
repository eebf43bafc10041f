# backend/transactionable/services/transactions/__init__.py
from __future__ import annotations

"""
Transaction wrapper service package.

This package provides:
- SessionScope / resolve_session: atomic scopes on SQLAlchemy sessions (scope.py)
- AttemptState / RetryController: bounded retries (retry.py)
- record_failure / merge_invalid_record: error recording (recorder.py)
- TransactionWrapper and its call surfaces (wrapper.py)
"""

from .recorder import merge_invalid_record, record_failure  # noqa: F401
from .retry import AttemptState, RetryController  # noqa: F401
from .scope import SessionScope, lock_target, resolve_session  # noqa: F401
from .wrapper import (  # noqa: F401
    Outcome,
    TransactionResult,
    TransactionWrapper,
    WrapperContext,
    transaction_wrapper,
    transaction_wrapper_for,
    transactional,
)
