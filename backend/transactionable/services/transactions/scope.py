from __future__ import annotations

"""backend/transactionable/services/transactions/scope.py

Atomic scope on top of a SQLAlchemy Session.

Responsibilities:
- open the right kind of transaction (new, SAVEPOINT, or joined)
- commit on clean exit, roll back on error
- swallow the Rollback abort signal, the way a transaction block
  treats an intentional rollback
- resolve which session a wrapped call should use

The wrapper only talks to SessionScope; nothing else in the package
touches Session transaction state directly.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session, object_session
from sqlalchemy.orm.exc import UnmappedInstanceError

from transactionable.exceptions import Rollback

logger = logging.getLogger(__name__)


class SessionScope:
    """Context manager wrapping one atomic unit of work.

    - No transaction in progress: ``session.begin()``.
    - Transaction in progress and ``requires_new``: ``session.begin_nested()``.
    - Transaction in progress otherwise: join it. Commit and rollback are
      left to whoever owns the outer transaction, so a Rollback raised in a
      joined scope discards nothing.

    ``isolation_level`` only applies to a newly opened transaction; savepoints
    and joined scopes run at the level of the enclosing transaction. A failed
    commit rolls the owned transaction back before the error propagates.
    """

    def __init__(
        self,
        session: Session,
        *,
        requires_new: bool = False,
        isolation_level: str | None = None,
    ) -> None:
        self.session = session
        self.requires_new = requires_new
        self.isolation_level = isolation_level
        self.aborted = False
        self.mode: str | None = None
        self._transaction = None

    def __enter__(self) -> SessionScope:
        self.aborted = False
        if not self.session.in_transaction():
            self._transaction = self.session.begin()
            self.mode = "transaction"
            if self.isolation_level:
                self.session.connection(
                    execution_options={"isolation_level": self.isolation_level}
                )
            logger.debug("Opened transaction")
        elif self.requires_new:
            self._transaction = self.session.begin_nested()
            self.mode = "savepoint"
            logger.debug("Opened savepoint")
        else:
            self._transaction = None
            self.mode = "joined"
            logger.debug("Joined enclosing transaction")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        transaction, self._transaction = self._transaction, None

        if exc_type is None:
            if transaction is not None:
                try:
                    transaction.commit()
                except Exception as error:
                    # Flush errors surface here and leave the transaction deactivated.
                    self._discard(transaction)
                    logger.debug("Rolled back after failed commit: %s", type(error).__name__)
                    raise
            return False

        if transaction is not None:
            self._discard(transaction)
            logger.debug("Rolled back after %s", exc_type.__name__)

        if issubclass(exc_type, Rollback):
            self.aborted = True
            return True
        return False

    def _discard(self, transaction) -> None:
        """Roll back ``transaction`` if the session still holds it open."""
        if transaction.nested:
            if self.session.get_nested_transaction() is transaction:
                transaction.rollback()
        elif self.session.in_transaction():
            self.session.rollback()


def lock_target(session: Session, target: Any) -> bool:
    """Reload ``target`` with SELECT ... FOR UPDATE if it lives in ``session``.

    Returns True when a lock was taken. Objects that are not mapped, or
    that belong to another session, are left alone.
    """
    try:
        owner = object_session(target)
    except UnmappedInstanceError:
        return False
    if owner is not session or not inspect(target).persistent:
        return False
    session.refresh(target, with_for_update=True)
    return True


@contextmanager
def resolve_session(target: Any = None, session: Optional[Session] = None) -> Iterator[Session]:
    """Yield the session a wrapped call should run in.

    Order of preference:
    - the explicitly supplied session
    - the session ``target`` is attached to (ORM instances)
    - a new session from get_db(), closed on exit
    """
    if session is not None:
        yield session
        return

    if target is not None:
        try:
            owner = object_session(target)
        except UnmappedInstanceError:
            owner = None
        if owner is not None:
            yield owner
            return

    # Import here so that merely importing the wrapper does not build an engine.
    from transactionable.db.session import get_db

    yield from get_db()
