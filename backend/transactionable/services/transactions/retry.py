from __future__ import annotations

"""backend/transactionable/services/transactions/retry.py

Bounded retry bookkeeping for retriable errors.

Attempts are numbered from 1. Every failed retriable attempt is logged
with its ordinal; the controller then decides whether another attempt
is allowed. Retries are immediate and sequential, on the calling thread.
"""

from dataclasses import dataclass
from typing import Any

from transactionable.services.diagnostics.log_format import DiagnosticLogger


@dataclass
class AttemptState:
    """Mutable attempt counter for one wrapper invocation."""

    maximum: int
    current: int = 1

    def __post_init__(self) -> None:
        if self.maximum < 1:
            raise ValueError(f"maximum attempts must be at least 1, got {self.maximum}")

    @property
    def exhausted(self) -> bool:
        return self.current >= self.maximum

    def advance(self) -> int:
        if self.exhausted:
            raise RuntimeError(
                f"Cannot advance past attempt {self.current} of {self.maximum}"
            )
        self.current += 1
        return self.current


class RetryController:
    """Decides whether a failed retriable attempt gets another try."""

    def __init__(self, diagnostics: DiagnosticLogger) -> None:
        self._diagnostics = diagnostics

    def should_retry(self, error: BaseException, target: Any, state: AttemptState) -> bool:
        """Log the failed attempt and advance ``state`` if attempts remain.

        Returns False once the error is exhausted.
        """
        self._diagnostics.attempt(error, target, state.current)
        if state.exhausted:
            return False
        state.advance()
        return True
