"""Health endpoint reporting mode and backend reachability."""

from fastapi import APIRouter, Depends

from ...schemas.student import HealthRead
from ...services.student_service import StudentService
from ..deps import get_student_service

router = APIRouter()


@router.get("", response_model=HealthRead)
def health(service: StudentService = Depends(get_student_service)) -> HealthRead:
    """Always answers 200; ``ok`` is false when the database cannot be reached."""
    return service.health()
