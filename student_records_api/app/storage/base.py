"""
Storage adapter contract.

Every backend (in-memory list, SQLite file, SQLAlchemy-managed
database) implements ``StorageAdapter`` so the record service never
needs to know where records live.  Adapters raise the typed errors from
``core.exceptions``; they never return ``None`` for a missing record.
"""

from __future__ import annotations

import abc
from datetime import datetime, timezone
from typing import List, Optional

from ..schemas.student import StudentFields, StudentRead


def utcnow() -> datetime:
    """Creation timestamp used by adapters that stamp ``created_at`` themselves."""
    return datetime.now(timezone.utc)


def fold_case(value: Optional[str]) -> Optional[str]:
    """``casefold`` SQL function for SQLite, whose ``lower()`` only folds ASCII."""
    return value.casefold() if value is not None else None


# SQL stores keep ids in a signed 64-bit INTEGER column.
MAX_RECORD_ID = 2**63 - 1


def is_storable_id(record_id: int) -> bool:
    """Whether ``record_id`` can belong to a stored record at all."""
    return 0 < record_id <= MAX_RECORD_ID


def parse_id_query(query: str) -> Optional[int]:
    """Return ``query`` as an integer id, or ``None`` if it is not one.

    Only plain ASCII digits count; ``int()`` would also accept
    underscores (``"1_0"``) and non-ASCII digits.
    """
    text = query.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    value = int(text)
    return value if is_storable_id(value) else None


def normalize_query(query: Optional[str]) -> Optional[str]:
    """Treat a missing or blank search query as "no filter"."""
    if query is None or not query.strip():
        return None
    return query.strip()


def sort_recent_first(records: List[StudentRead]) -> List[StudentRead]:
    """Order by ``created_at`` descending, newest id first on ties."""
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


class StorageAdapter(abc.ABC):
    """Uniform CRUD + search contract shared by all backends.

    Attributes
    ----------
    name : str
        Short backend identifier reported by the health endpoint.
    persistent : bool
        Whether records survive a process restart.  Non-persistent
        backends run the service in "demo" mode.
    """

    name: str = "abstract"
    persistent: bool = True

    @abc.abstractmethod
    def list(self, query: Optional[str] = None) -> List[StudentRead]:
        """Return matching records, most recently created first.

        With a non-blank ``query`` a record matches when its name
        contains the query (case-insensitive) or when its id equals the
        query parsed as an integer.  Without a query all records are
        returned.
        """

    @abc.abstractmethod
    def get(self, record_id: int) -> StudentRead:
        """Return one record or raise ``RecordNotFoundError``."""

    @abc.abstractmethod
    def create(self, fields: StudentFields) -> StudentRead:
        """Assign an id, stamp ``created_at``, persist and return the record."""

    @abc.abstractmethod
    def update(self, record_id: int, fields: StudentFields) -> StudentRead:
        """Replace the five business fields, keeping ``id`` and ``created_at``."""

    @abc.abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove a record or raise ``RecordNotFoundError``."""

    def is_available(self) -> bool:
        """Connectivity probe.  Local backends are always reachable."""
        return True

    def describe(self) -> str:
        """Human readable backend name for the health endpoint."""
        return self.name

    def close(self) -> None:
        """Release any held resources."""
