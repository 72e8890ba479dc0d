from fastapi import Request

from ..services.student_service import StudentService


def get_student_service(request: Request) -> StudentService:
    """Return the service built by ``create_app`` for this application."""
    return request.app.state.student_service
