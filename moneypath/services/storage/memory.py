"""
In-Memory Storage Implementation

Keeps documents in a dict. Used by tests and by sessions configured with
``MONEYPATH_STORAGE_BACKEND=memory``, where nothing should outlive the
process.
"""

from typing import Optional

from moneypath.services.storage.interface import StateStorageInterface


class InMemoryStorage(StateStorageInterface):
    """Dict-backed key-value slot."""

    def __init__(
        self,
        documents: Optional[dict[str, str]] = None,
        max_payload_bytes: Optional[int] = None,
    ):
        super().__init__(max_payload_bytes)
        self.documents: dict[str, str] = dict(documents or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self.documents.get(key)

    def write(self, key: str, payload: str) -> None:
        self.check_quota(key, payload)
        self.documents[key] = payload
        self.write_count += 1
