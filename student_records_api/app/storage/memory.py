"""
In-memory storage backend.

Records live in a plain list owned by a ``MemoryStorage`` instance.
This is the "demo" backend: nothing survives a restart.  Ids come from
a counter that only moves forward, so a deleted id is never handed out
again while the instance lives.  Each operation holds a lock for its
whole read-modify-write, which is the store's only atomicity guarantee.
"""

import logging
import threading
from typing import List, Optional

from ..core.exceptions import RecordNotFoundError
from ..schemas.student import StudentFields, StudentRead
from .base import StorageAdapter, normalize_query, parse_id_query, sort_recent_first, utcnow

logger = logging.getLogger(__name__)

DEMO_STUDENTS = [
    StudentFields(name="John Doe", age=20, gender="M", midterm=85.5, final=88.0),
]


class MemoryStorage(StorageAdapter):
    """List-backed store for demos and tests."""

    name = "memory"
    persistent = False

    def __init__(self, seed: bool = False) -> None:
        self._records: List[StudentRead] = []
        self._lock = threading.Lock()
        self._next_id = 1
        if seed:
            for fields in DEMO_STUDENTS:
                self.create(fields)
            logger.info("Seeded in-memory store with %s demo student(s)", len(DEMO_STUDENTS))

    def _index_of(self, record_id: int) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        raise RecordNotFoundError(record_id)

    def list(self, query: Optional[str] = None) -> List[StudentRead]:
        query = normalize_query(query)
        with self._lock:
            records = list(self._records)
        if query is not None:
            needle = query.casefold()
            wanted_id = parse_id_query(query)
            records = [
                r for r in records
                if needle in r.name.casefold() or (wanted_id is not None and r.id == wanted_id)
            ]
        return sort_recent_first(records)

    def get(self, record_id: int) -> StudentRead:
        with self._lock:
            return self._records[self._index_of(record_id)].model_copy()

    def create(self, fields: StudentFields) -> StudentRead:
        with self._lock:
            # Seed the counter from the current size (count + 1) but never move it back.
            record_id = max(self._next_id, len(self._records) + 1)
            self._next_id = record_id + 1
            record = StudentRead(id=record_id, created_at=utcnow(), **fields.model_dump())
            self._records.append(record)
            return record.model_copy()

    def update(self, record_id: int, fields: StudentFields) -> StudentRead:
        with self._lock:
            index = self._index_of(record_id)
            current = self._records[index]
            updated = StudentRead(id=current.id, created_at=current.created_at, **fields.model_dump())
            self._records[index] = updated
            return updated.model_copy()

    def delete(self, record_id: int) -> None:
        with self._lock:
            del self._records[self._index_of(record_id)]
