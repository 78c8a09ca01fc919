"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persistence.
This allows us to:
1. Keep the ledger on local disk by default
2. Use in-memory storage for testing
3. Swap in another key-value backend without touching the store

The interface is intentionally tiny: the whole state is one document
stored under one key, read once at startup and rewritten after every
change.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StateStorageInterface(ABC):
    """
    Abstract key-value slot for serialized state documents.

    Any storage implementation must implement these methods.
    """

    def __init__(self, max_payload_bytes: Optional[int] = None):
        """
        Args:
            max_payload_bytes: Largest document accepted by ``write``.
                              None means unlimited.
        """
        self.max_payload_bytes = max_payload_bytes

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the document stored under ``key``.

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """
        Replace the document stored under ``key``.

        Raises:
            StorageQuotaExceededError: If the payload is over the limit
            StorageWriteError: If the write fails
        """
        pass

    def check_quota(self, key: str, payload: str) -> int:
        """
        Enforce ``max_payload_bytes``.

        Returns the payload size in bytes.
        """
        size = len(payload.encode("utf-8"))
        if self.max_payload_bytes is not None and size > self.max_payload_bytes:
            raise StorageQuotaExceededError(
                f"Document for '{key}' is {size} bytes, "
                f"over the {self.max_payload_bytes} byte limit"
            )
        return size


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored document could not be read."""
    pass


class StorageWriteError(StorageError):
    """Document could not be written."""
    pass


class StorageQuotaExceededError(StorageWriteError):
    """Document is larger than the backend accepts."""
    pass
