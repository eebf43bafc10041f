from __future__ import annotations

"""backend/transactionable/services/diagnostics/log_format.py

One-line diagnostics for errors handled by the transaction wrapper.

Line shapes:
- ``[<Caller>.transaction_wrapper] On <ObjectClass> <ErrorType>: <message>``
- ``[<Caller>.transaction_wrapper] <ErrorType>: <message>``

with `` [<ordinal> attempt]`` appended for retriable errors and
`` [re-raising!]`` for reraisable ones.

The sink is anything with an ``error(message)`` method; a stdlib
``logging.Logger`` qualifies. NullLogger is the default.
"""

from typing import Any, Optional, Protocol


class ErrorSink(Protocol):
    """Minimal interface the wrapper logs through."""

    def error(self, message: str) -> None:
        ...


class NullLogger:
    """Logger that discards everything."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass


def ordinalize(number: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= number % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def error_message(error: BaseException) -> str:
    # Bare ``raise SomeError`` has no message; fall back to the type name
    return str(error) or type(error).__name__


def format_failure(
    caller: str,
    error: BaseException,
    target: Any = None,
    suffix: Optional[str] = None,
) -> str:
    prefix = f"[{caller}.transaction_wrapper]"
    described = f"{type(error).__name__}: {error_message(error)}"
    if target is not None:
        line = f"{prefix} On {type(target).__name__} {described}"
    else:
        line = f"{prefix} {described}"
    if suffix:
        line = f"{line} [{suffix}]"
    return line


class DiagnosticLogger:
    """Formats and emits wrapper diagnostics for a single caller."""

    def __init__(self, sink: Optional[ErrorSink], caller: str) -> None:
        self._sink = sink if sink is not None else NullLogger()
        self._caller = caller

    def rescued(self, error: BaseException, target: Any = None) -> str:
        return self._emit(format_failure(self._caller, error, target))

    def attempt(self, error: BaseException, target: Any, attempt: int) -> str:
        suffix = f"{ordinalize(attempt)} attempt"
        return self._emit(format_failure(self._caller, error, target, suffix))

    def reraising(self, error: BaseException, target: Any = None) -> str:
        return self._emit(format_failure(self._caller, error, target, "re-raising!"))

    def _emit(self, line: str) -> str:
        self._sink.error(line)
        return line
