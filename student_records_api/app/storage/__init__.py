"""
Storage adapters.

Each backend implements ``StorageAdapter``.  Use ``create_storage`` to
pick one from configuration instead of instantiating backends in
request handlers.
"""

from .base import StorageAdapter
from .factory import create_storage
from .memory import MemoryStorage
from .relational import RelationalStorage
from .sqlite import SQLiteStorage

__all__ = [
    "StorageAdapter",
    "create_storage",
    "MemoryStorage",
    "RelationalStorage",
    "SQLiteStorage",
]
