"""
Student endpoints.

CRUD and search over student records.  Request bodies are taken as raw
JSON and handed to the service, which validates them; handlers only
pick the success status.  Failures are raised as typed errors and
translated to status codes by ``api/errors.py``.

Handlers are plain functions so FastAPI runs them in its threadpool;
the storage adapters perform blocking I/O.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ...schemas.student import DeleteResult, StudentRead
from ...services.student_service import StudentService
from ..deps import get_student_service

router = APIRouter()


@router.get("", response_model=List[StudentRead])
def list_students(
    q: Optional[str] = Query(None, description="Name substring or exact id"),
    service: StudentService = Depends(get_student_service),
) -> List[StudentRead]:
    """Return students, most recently created first.

    When ``q`` is given, only students whose name contains it
    (case-insensitive) or whose id equals it are returned.
    """
    return service.list_records(q)


@router.get("/{student_id}", response_model=StudentRead)
def get_student(
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> StudentRead:
    """Retrieve a single student.  Returns 404 if the id is unknown."""
    return service.get_record(student_id)


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: Any = Body(None),
    service: StudentService = Depends(get_student_service),
) -> StudentRead:
    """Create a student from ``{name, age, gender, midterm, final}``."""
    return service.create_record(payload)


@router.put("/{student_id}", response_model=StudentRead)
def update_student(
    student_id: int,
    payload: Any = Body(None),
    service: StudentService = Depends(get_student_service),
) -> StudentRead:
    """Replace all five business fields; ``id`` and ``created_at`` are kept."""
    return service.update_record(student_id, payload)


@router.delete("/{student_id}", response_model=DeleteResult)
def delete_student(
    student_id: int,
    service: StudentService = Depends(get_student_service),
) -> DeleteResult:
    """Delete a student.  A second delete of the same id returns 404."""
    service.delete_record(student_id)
    return DeleteResult(success=True)
