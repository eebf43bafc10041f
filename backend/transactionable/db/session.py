# backend/transactionable/db/session.py
from __future__ import annotations

"""
Engine, fallback session factory and declarative Base.

The wrapper normally runs in a session the caller hands it, or in the one
its target is attached to. Only when neither exists does it open a session
here, through get_db(), and close it again when the call finishes.

This module depends on:
- transactionable.config.settings for the database URL and echo flag
It is imported by:
- transactionable.services.transactions.scope (fallback sessions, lazily)
- host applications declaring models on Base
"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from transactionable.config import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    return create_engine(settings.database_url, echo=settings.database_echo, future=True)


def build_session_factory(bind: Engine) -> sessionmaker:
    """Factory for wrapper-owned sessions.

    autoflush is off so pending rows reach the database when the atomic
    scope commits, inside the wrapper's error handling.
    """
    return sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True)


engine = build_engine(get_settings())
SessionLocal = build_session_factory(engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """
    Yield a wrapper-owned session and close it afterwards.

    resolve_session() delegates here when a call has neither an explicit
    session nor an attached target; hosts can use it the same way:
        for db in get_db():
            transaction_wrapper_for(Order, work, session=db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
