"""Services package."""

from moneypath.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StateStorageInterface,
    StorageError,
    StorageQuotaExceededError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "StateStorageInterface",
    "StorageError",
    "StorageQuotaExceededError",
    "StorageReadError",
    "StorageWriteError",
]
