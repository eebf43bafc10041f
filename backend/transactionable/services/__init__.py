# backend/transactionable/services/__init__.py
from __future__ import annotations

"""
Services: error diagnostics and the transaction wrapper.
"""
