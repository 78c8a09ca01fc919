"""
Storage Services Package

Provides the abstract persistence interface and its implementations.
JSON files on local disk are the default backend; the in-memory backend
serves tests and throwaway sessions.
"""

from moneypath.services.storage.interface import (
    StateStorageInterface,
    StorageError,
    StorageQuotaExceededError,
    StorageReadError,
    StorageWriteError,
)
from moneypath.services.storage.json_file import JsonFileStorage
from moneypath.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "StateStorageInterface",
    # Exceptions
    "StorageError",
    "StorageQuotaExceededError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
