from __future__ import annotations

"""backend/transactionable/services/transactions/wrapper.py

Run an operation inside an atomic scope under one error-handling policy.

Responsibilities:
- open a SessionScope and run the operation in it
- treat Rollback as a clean abort and RecordInvalid as a recorded failure
- classify every other error and dispatch it:
    reraisable   -> log, re-raise
    retriable    -> log each attempt, retry, record once exhausted
    rescued      -> log, record, swallow
    unclassified -> propagate untouched
- expose the instance-style and configurable-style call surfaces, plus a
  method decorator, all of which build a WrapperContext and delegate to
  TransactionWrapper.run

Swallowed failures are reported through the return value, the target's
``errors`` collection and the injected logger; never as an exception.
"""

import enum
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from transactionable.config import get_settings
from transactionable.exceptions import RecordInvalid
from transactionable.services.diagnostics.error_classifier import (
    DEFAULT_RESCUED_ERRORS,
    ErrorCategory,
    ErrorCategorySet,
    classify_error,
    normalize_error_set,
)
from transactionable.services.diagnostics.log_format import DiagnosticLogger, ErrorSink
from transactionable.services.transactions.recorder import merge_invalid_record, record_failure
from transactionable.services.transactions.retry import AttemptState, RetryController
from transactionable.services.transactions.scope import SessionScope, lock_target, resolve_session

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    SUCCESS = "success"
    ABORTED_CLEAN = "aborted_clean"
    RECORDED_AND_SWALLOWED = "recorded_and_swallowed"
    RECORDED_AND_RERAISED = "recorded_and_reraised"
    PROPAGATED_UNCLASSIFIED = "propagated_unclassified"


@dataclass(frozen=True)
class WrapperContext:
    """Immutable per-call configuration.

    Attributes
    ----------
    caller: str
        Class name used to prefix log lines.
    target: Any
        Object whose ``errors`` collection receives swallowed failures;
        TypeError if it has none.
    rescued / retriable / reraisable:
        Error-category sets; normalized to tuples of exception classes.
    max_attempts: Optional[int]
        Total attempts for retriable errors; defaults to settings.
    lock: bool
        Reload the target with SELECT ... FOR UPDATE before running.
    requires_new: bool
        Use a SAVEPOINT when a transaction is already open.
    isolation_level: Optional[str]
        Isolation level for a newly opened transaction.
    """

    caller: str
    target: Any = None
    rescued: ErrorCategorySet = DEFAULT_RESCUED_ERRORS
    retriable: ErrorCategorySet = None
    reraisable: ErrorCategorySet = None
    max_attempts: Optional[int] = None
    lock: bool = False
    requires_new: bool = False
    isolation_level: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rescued", normalize_error_set(self.rescued))
        object.__setattr__(self, "retriable", normalize_error_set(self.retriable))
        object.__setattr__(self, "reraisable", normalize_error_set(self.reraisable))

        if self.target is not None and not hasattr(self.target, "errors"):
            raise TypeError(
                f"{type(self.target).__name__} has no 'errors' collection; "
                "use ErrorsMixin or pass target=None"
            )

        if self.max_attempts is None:
            object.__setattr__(self, "max_attempts", get_settings().max_attempts)
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")


@dataclass(frozen=True)
class TransactionResult:
    """What a wrapped call produced.

    ``value`` is the operation's return value on success, True after a
    clean abort, and False for every swallowed failure.
    """

    value: Any
    success: bool
    outcome: Outcome
    attempts: int = 1

    def __bool__(self) -> bool:
        return self.success


class TransactionWrapper:
    """Orchestrates scope, classification, retries and recording."""

    def __init__(
        self,
        session: Optional[Session] = None,
        logger: Optional[ErrorSink] = None,
    ) -> None:
        self.session = session
        self.logger = logger

    def run(self, operation: Callable[[], Any], context: WrapperContext) -> TransactionResult:
        with resolve_session(context.target, self.session) as session:
            return self._run(session, operation, context)

    def _run(
        self,
        session: Session,
        operation: Callable[[], Any],
        context: WrapperContext,
    ) -> TransactionResult:
        diagnostics = DiagnosticLogger(self.logger, context.caller)
        retries = RetryController(diagnostics)
        state = AttemptState(maximum=context.max_attempts)
        target = context.target

        while True:
            scope = SessionScope(
                session,
                requires_new=context.requires_new,
                isolation_level=context.isolation_level,
            )
            try:
                with scope:
                    if context.lock and target is not None:
                        lock_target(session, target)
                    value = operation()
            except RecordInvalid as error:
                merge_invalid_record(target, error.record)
                return _finish(context, Outcome.RECORDED_AND_SWALLOWED, False, False, state)
            except Exception as error:
                category = classify_error(
                    error, context.rescued, context.retriable, context.reraisable
                )

                if category is ErrorCategory.RERAISABLE:
                    diagnostics.reraising(error, target)
                    _trace(context, Outcome.RECORDED_AND_RERAISED, state)
                    raise

                if category is ErrorCategory.RETRIABLE:
                    if retries.should_retry(error, target, state):
                        continue
                    record_failure(target, error)
                    return _finish(context, Outcome.RECORDED_AND_SWALLOWED, False, False, state)

                if category is ErrorCategory.RESCUED:
                    diagnostics.rescued(error, target)
                    record_failure(target, error)
                    return _finish(context, Outcome.RECORDED_AND_SWALLOWED, False, False, state)

                _trace(context, Outcome.PROPAGATED_UNCLASSIFIED, state)
                raise

            if scope.aborted:
                return _finish(context, Outcome.ABORTED_CLEAN, True, True, state)
            return _finish(context, Outcome.SUCCESS, value, True, state)


def _trace(context: WrapperContext, outcome: Outcome, state: AttemptState) -> None:
    logger.debug(
        "%s.transaction_wrapper finished: %s after %d attempt(s)",
        context.caller,
        outcome.value,
        state.current,
    )


def _finish(
    context: WrapperContext,
    outcome: Outcome,
    value: Any,
    success: bool,
    state: AttemptState,
) -> TransactionResult:
    _trace(context, outcome, state)
    return TransactionResult(
        value=value,
        success=success,
        outcome=outcome,
        attempts=state.current,
    )


def caller_name(caller: Any) -> str:
    if isinstance(caller, str):
        return caller
    if inspect.isclass(caller):
        return caller.__name__
    return type(caller).__name__


def _execute(
    context: WrapperContext,
    operation: Callable[[], Any],
    session: Optional[Session],
    logger: Optional[ErrorSink],
) -> Any:
    return TransactionWrapper(session=session, logger=logger).run(operation, context).value


def transaction_wrapper(
    instance: Any,
    operation: Callable[[], Any],
    *,
    retriable: ErrorCategorySet = None,
    rescued: ErrorCategorySet = DEFAULT_RESCUED_ERRORS,
    reraisable: ErrorCategorySet = None,
    session: Optional[Session] = None,
    logger: Optional[ErrorSink] = None,
    max_attempts: Optional[int] = None,
    lock: bool = False,
    requires_new: bool = False,
    isolation_level: Optional[str] = None,
) -> Any:
    """Run ``operation`` on behalf of ``instance``.

    ``instance`` is both the log prefix (its class name) and the target
    whose ``errors`` collect swallowed failures.

    Returns the operation's result, True after a Rollback, or False when
    a failure was swallowed.
    """
    context = WrapperContext(
        caller=caller_name(instance),
        target=instance,
        rescued=rescued,
        retriable=retriable,
        reraisable=reraisable,
        max_attempts=max_attempts,
        lock=lock,
        requires_new=requires_new,
        isolation_level=isolation_level,
    )
    return _execute(context, operation, session, logger)


def transaction_wrapper_for(
    caller: Any,
    operation: Callable[[], Any],
    *,
    target: Any = None,
    retriable: ErrorCategorySet = None,
    rescued: ErrorCategorySet = DEFAULT_RESCUED_ERRORS,
    reraisable: ErrorCategorySet = None,
    session: Optional[Session] = None,
    logger: Optional[ErrorSink] = None,
    max_attempts: Optional[int] = None,
    lock: bool = False,
    requires_new: bool = False,
    isolation_level: Optional[str] = None,
) -> Any:
    """Configurable-style call: ``caller`` only names the log prefix.

    ``caller`` may be a class, an instance or a plain name. Failures are
    recorded on ``target`` when one is given.
    """
    context = WrapperContext(
        caller=caller_name(caller),
        target=target,
        rescued=rescued,
        retriable=retriable,
        reraisable=reraisable,
        max_attempts=max_attempts,
        lock=lock,
        requires_new=requires_new,
        isolation_level=isolation_level,
    )
    return _execute(context, operation, session, logger)


def transactional(**options: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Method decorator running the method through transaction_wrapper.

    Example:
        class Order(Base, ErrorsMixin):
            @transactional(rescued=IntegrityError)
            def place(self): ...
    """

    def decorator(method: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(method)
        def wrapped(self, *args: Any, **kwargs: Any) -> Any:
            return transaction_wrapper(self, lambda: method(self, *args, **kwargs), **options)

        return wrapped

    return decorator
