"""
Service layer.

``StudentService`` holds the business rules; it delegates persistence
to a storage adapter so handlers stay the same whichever backend is
configured.
"""

from .student_service import StudentService
from .validator import REQUIRED_FIELDS, validate

__all__ = ["StudentService", "REQUIRED_FIELDS", "validate"]
