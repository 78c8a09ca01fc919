"""
JSON File Storage Implementation

DESIGN DECISION: The ledger lives in one JSON file per key on local disk.
1. Users can open and back up their data with any editor
2. No database setup required
3. Personal-scale data is tiny, so rewriting the file on each change is fine

Writes go to a temporary file that is then renamed over the target, so a
crash mid-write never leaves a half-written document behind. Transient
OS errors are retried before a write is reported as failed.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moneypath.services.storage.interface import (
    StateStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStorage(StateStorageInterface):
    """
    Stores each key as ``<data_dir>/<key>.json``.
    """

    def __init__(
        self,
        data_dir: Path,
        max_payload_bytes: Optional[int] = None,
        write_retry_attempts: int = 3,
    ):
        super().__init__(max_payload_bytes)
        self._data_dir = Path(data_dir)
        self._write_retry_attempts = write_retry_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File that holds the document for ``key``."""
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}")

    def write(self, key: str, payload: str) -> None:
        self.check_quota(key, payload)

        writer = retry(
            stop=stop_after_attempt(self._write_retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
            retry=retry_if_exception_type(OSError),
        )(self._write_atomic)

        try:
            writer(self.path_for(key), payload)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise StorageWriteError(
                f"Could not write {self.path_for(key)} after "
                f"{self._write_retry_attempts} attempts: {cause}"
            )

    def _write_atomic(self, path: Path, payload: str) -> None:
        """Write to a sibling temp file, then rename it over ``path``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
