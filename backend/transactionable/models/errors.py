# backend/transactionable/models/errors.py
from __future__ import annotations

"""
Per-object error collection.

The wrapper reports swallowed failures by writing into the ``errors``
collection of the target object:
- rescued / exhausted retriable errors add a base message
- validation failures merge the invalid record's field messages

Messages keep insertion order so ``full_messages`` is stable.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List

BASE = "base"


@dataclass(frozen=True)
class ErrorEntry:
    """A single message, attached to an attribute or to the object itself."""

    attribute: str
    message: str

    @property
    def full_message(self) -> str:
        if self.attribute == BASE:
            return self.message
        return f"{humanize(self.attribute)} {self.message}"


def humanize(attribute: str) -> str:
    """Turn ``first_name`` / ``owner_id`` into ``First name`` / ``Owner``."""
    text = attribute
    if text.endswith("_id"):
        text = text[:-3]
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class ErrorCollection:
    """Ordered collection of validation and failure messages."""

    def __init__(self) -> None:
        self._entries: List[ErrorEntry] = []

    def add(self, attribute: str, message: str) -> ErrorEntry:
        entry = ErrorEntry(attribute=attribute, message=message)
        self._entries.append(entry)
        return entry

    def add_base(self, message: str) -> ErrorEntry:
        return self.add(BASE, message)

    def merge(self, other: "ErrorCollection") -> None:
        """Copy every entry of ``other`` into this collection."""
        if other is self:
            return
        for entry in list(other):
            self._entries.append(entry)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def full_messages(self) -> List[str]:
        return [entry.full_message for entry in self._entries]

    def to_dict(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for entry in self._entries:
            grouped.setdefault(entry.attribute, []).append(entry.message)
        return grouped

    def __getitem__(self, attribute: str) -> List[str]:
        return [e.message for e in self._entries if e.attribute == attribute]

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ErrorCollection({self.full_messages!r})"


class ErrorsMixin:
    """Give a host class a lazily created ``errors`` collection.

    Works for ORM models too: instances loaded from the database skip
    ``__init__``, so the collection is created on first access.
    """

    @property
    def errors(self) -> ErrorCollection:
        try:
            return self._errors
        except AttributeError:
            self._errors = ErrorCollection()
            return self._errors
