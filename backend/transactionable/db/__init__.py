# backend/transactionable/db/__init__.py
from __future__ import annotations

"""
Database plumbing: engine, session factory and declarative Base.
"""
