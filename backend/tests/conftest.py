"""
Test configuration and fixtures.

This module sets up the test environment and provides shared fixtures for all tests.
"""

import os

# Point settings at in-memory SQLite before transactionable.config is imported
os.environ["TRANSACTIONABLE_DATABASE_URL"] = "sqlite://"
os.environ.pop("TRANSACTIONABLE_MAX_ATTEMPTS", None)

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from transactionable.config import get_settings  # noqa: E402
from transactionable.db.session import Base  # noqa: E402

from tests import models  # noqa: E402,F401  (registers tables on Base)


@pytest.fixture(scope="function")
def engine():
    """
    Fresh in-memory SQLite engine per test.

    pysqlite's own transaction handling breaks SAVEPOINT; these listeners
    hand BEGIN back to SQLAlchemy so nested transactions behave.
    """
    engine = create_engine("sqlite://", future=True)

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session(engine):
    """Session that keeps attributes loaded after commit."""
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def logger():
    """Stand-in for the injected diagnostic logger."""
    return MagicMock(name="logger")


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Settings are cached; make every test start from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
