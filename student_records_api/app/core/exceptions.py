"""
Typed errors raised by the validator, storage adapters and service.

None of these classes know about HTTP.  The API layer
(``api/errors.py``) is the only place that turns an error kind into a
status code and JSON body.
"""

from typing import Optional


class StudentRecordsError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordValidationError(StudentRecordsError):
    """A submitted record is incomplete or malformed."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class MissingFieldError(RecordValidationError):
    """A required field is absent, null or blank."""

    def __init__(self, field: str) -> None:
        super().__init__(f"{field.capitalize()} is required", field=field)


class InvalidFieldError(RecordValidationError):
    """A field is present but cannot be coerced to its type."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field.capitalize()} is invalid: {reason}", field=field)


class RecordNotFoundError(StudentRecordsError):
    """No record with the requested id exists in the active store."""

    def __init__(self, record_id: int) -> None:
        super().__init__("Student not found")
        self.record_id = record_id


class ServiceUnavailableError(StudentRecordsError):
    """The backing store cannot be reached."""

    def __init__(self, message: str = "Database is unavailable") -> None:
        super().__init__(message)


class StorageError(StudentRecordsError):
    """Unexpected failure inside a storage adapter."""


class ConfigurationError(StudentRecordsError):
    """Invalid startup configuration (unknown backend, missing URL)."""
