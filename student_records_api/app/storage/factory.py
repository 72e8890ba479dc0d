"""
Storage factory.

``create_storage`` is the only place where configuration decides which
backend the process uses.  It is called once by ``create_app``; the
chosen adapter stays in place until shutdown.
"""

import logging

from ..core.config import STORAGE_BACKENDS, Settings
from ..core.exceptions import ConfigurationError
from .base import StorageAdapter
from .memory import MemoryStorage
from .relational import RelationalStorage
from .sqlite import SQLiteStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> StorageAdapter:
    """Build the storage adapter named by ``settings.storage_backend``.

    Raises
    ------
    ConfigurationError
        If the backend name is unknown or the relational backend is
        selected without a ``DATABASE_URL``.
    """
    backend = settings.storage_backend
    if backend == "memory":
        storage: StorageAdapter = MemoryStorage(seed=settings.seed_demo_data)
    elif backend == "sqlite":
        storage = SQLiteStorage(settings.sqlite_path)
    elif backend == "relational":
        if not settings.database_url:
            raise ConfigurationError("STORAGE_BACKEND=relational requires DATABASE_URL to be set")
        storage = RelationalStorage(settings.database_url)
    else:
        raise ConfigurationError(
            f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
        )
    logger.info("Using %s storage backend: %s", backend, storage.describe())
    return storage
