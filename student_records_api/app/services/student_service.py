"""
Business logic for student records.

``StudentService`` composes the record validator with whichever
storage adapter the application was started with.  It holds no copies
of records, does not retry and does not cache: every call goes straight
to the adapter and every typed error from the validator or adapter is
passed through unchanged for the API layer to translate.
"""

import logging
from typing import Any, List, Optional

from ..core.exceptions import ServiceUnavailableError
from ..schemas.student import HealthRead, StudentRead
from ..storage.base import StorageAdapter
from .validator import validate

logger = logging.getLogger(__name__)


class StudentService:
    """CRUD and search over student records."""

    def __init__(self, storage: StorageAdapter) -> None:
        self.storage = storage

    @property
    def mode(self) -> str:
        return "production" if self.storage.persistent else "demo"

    def _require_storage(self) -> StorageAdapter:
        if not self.storage.is_available():
            raise ServiceUnavailableError(f"Database {self.storage.describe()} is unavailable")
        return self.storage

    def list_records(self, query: Optional[str] = None) -> List[StudentRead]:
        return self._require_storage().list(query)

    def get_record(self, record_id: int) -> StudentRead:
        return self._require_storage().get(record_id)

    def create_record(self, raw: Any) -> StudentRead:
        """Validate ``raw`` and persist it as a new record."""
        fields = validate(raw)
        record = self._require_storage().create(fields)
        logger.info("Created student %s (%s)", record.id, record.name)
        return record

    def update_record(self, record_id: int, raw: Any) -> StudentRead:
        """Validate ``raw`` and replace the business fields of ``record_id``.

        Validation runs first, so an incomplete body is rejected with a
        validation error even when the id does not exist.
        """
        fields = validate(raw)
        record = self._require_storage().update(record_id, fields)
        logger.info("Updated student %s", record_id)
        return record

    def delete_record(self, record_id: int) -> None:
        self._require_storage().delete(record_id)
        logger.info("Deleted student %s", record_id)

    def health(self) -> HealthRead:
        """Report backend reachability without raising."""
        database = self.storage.describe()
        if not self.storage.is_available():
            return HealthRead(
                ok=False,
                mode=self.mode,
                database=database,
                message=f"Database {database} is unreachable",
            )
        if self.mode == "demo":
            message = "Running in demo mode - no database required"
        else:
            message = f"Connected to {database}"
        return HealthRead(ok=True, mode=self.mode, database=database, message=message)
