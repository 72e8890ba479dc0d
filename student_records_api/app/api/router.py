"""
Top-level API router.

Aggregates domain routers under a single router that ``main.py``
mounts at ``/api``.
"""

from fastapi import APIRouter

from .endpoints import health, students

router = APIRouter()

router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(students.router, prefix="/students", tags=["students"])
