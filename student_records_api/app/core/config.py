"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Values are looked up each time ``Settings()`` is
instantiated, so tests can set variables (or pass keyword arguments)
before building an application.  A ``.env`` file in the working
directory is loaded once at import time via ``python-dotenv``; real
environment variables always take precedence over the file.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


#: Backends understood by :func:`student_records_api.app.storage.create_storage`.
STORAGE_BACKENDS = ("memory", "sqlite", "relational")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Student Records API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: _env("LOG_FILE", ""))

    # Which storage adapter to build at startup.  Exactly one backend is
    # active for the lifetime of the process; see ``storage.factory``.
    storage_backend: str = field(default_factory=lambda: _env("STORAGE_BACKEND", "memory").lower())

    # Path to the SQLite file used by the ``sqlite`` backend.  Relative
    # paths are resolved against the current working directory.
    sqlite_path: str = field(default_factory=lambda: _env("SQLITE_PATH", "students.db"))

    # SQLAlchemy URL for the ``relational`` backend, for example
    # ``postgresql+psycopg2://user:secret@db:5432/students``.
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", ""))

    # Populate the in-memory backend with a single demo student on start.
    seed_demo_data: bool = field(default_factory=lambda: _env_bool("SEED_DEMO_DATA"))

    # Comma-separated list of origins allowed by the CORS middleware.
    cors_origins: str = field(default_factory=lambda: _env("CORS_ORIGINS", "*"))

    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("PORT", "3000")))

    @property
    def cors_origin_list(self) -> List[str]:
        """Split ``cors_origins`` into a list, dropping blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  ``create_app`` accepts an
# explicit ``Settings`` instance when a different configuration is needed.
settings = Settings()
