# backend/transactionable/__init__.py
from __future__ import annotations

"""
Run units of work inside SQLAlchemy transactions with one shared
error-handling policy.

Typical use:

    from transactionable import transaction_wrapper

    ok = transaction_wrapper(order, order.place, session=db, rescued=IntegrityError)
"""

from transactionable.exceptions import RecordInvalid, Rollback  # noqa: F401
from transactionable.models import ErrorCollection, ErrorsMixin  # noqa: F401
from transactionable.services.diagnostics import (  # noqa: F401
    DEFAULT_RESCUED_ERRORS,
    ErrorCategory,
    NullLogger,
    classify_error,
)
from transactionable.services.transactions import (  # noqa: F401
    Outcome,
    TransactionResult,
    TransactionWrapper,
    WrapperContext,
    transaction_wrapper,
    transaction_wrapper_for,
    transactional,
)

__version__ = "0.1.0"
