"""
Pytest configuration for the Student Records API.

Provides fixtures for:
- One storage adapter per backend (memory, SQLite file, SQLAlchemy on SQLite)
- A service and an application wired to a fresh in-memory store
- A ``TestClient`` for HTTP-level tests
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from student_records_api.app.core.config import Settings
from student_records_api.app.main import create_app
from student_records_api.app.services.student_service import StudentService
from student_records_api.app.storage import MemoryStorage, RelationalStorage, SQLiteStorage
from student_records_api.app.storage.base import StorageAdapter

BACKENDS = ["memory", "sqlite", "relational"]


def build_storage(backend: str, tmp_path) -> StorageAdapter:
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(str(tmp_path / "students.db"))
    if backend == "relational":
        return RelationalStorage(f"sqlite:///{tmp_path / 'relational.db'}")
    raise ValueError(backend)


@pytest.fixture(params=BACKENDS)
def storage(request, tmp_path) -> Iterator[StorageAdapter]:
    """Every storage backend, each backed by a fresh store."""
    adapter = build_storage(request.param, tmp_path)
    yield adapter
    adapter.close()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="memory",
        sqlite_path=str(tmp_path / "students.db"),
        database_url="",
        seed_demo_data=False,
        log_level="DEBUG",
    )


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def service(memory_storage: MemoryStorage) -> StudentService:
    return StudentService(memory_storage)


@pytest.fixture
def app(test_settings: Settings, memory_storage: MemoryStorage):
    return create_app(settings=test_settings, storage=memory_storage)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def amy() -> dict:
    return {"name": "Amy", "age": 21, "gender": "F", "midterm": 70, "final": 80}
