# backend/transactionable/models/__init__.py
from __future__ import annotations

"""
In-memory models shared by the wrapper and host objects.

Models:
- ErrorCollection: ordered per-object failure messages
- ErrorEntry: one message bound to an attribute (or to the object)
- ErrorsMixin: adds a lazily created ``errors`` attribute to any class
"""

from .errors import BASE, ErrorCollection, ErrorEntry, ErrorsMixin, humanize  # noqa: F401
