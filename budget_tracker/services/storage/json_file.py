"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON file is the storage backend because:
1. Users can read (and back up) their data with any text editor
2. No database setup required
3. The data set is small enough to rewrite on every change

TRADEOFFS:
- Every change rewrites the whole file (fine at personal scale)
- No concurrent writers (single process, single operator)

Writes go to a temp file in the same directory and are moved into place
with os.replace, so a crash mid-write leaves the previous file intact.
"""

import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_tracker.services.storage.interface import StorageBackend


class JsonFileBackend(StorageBackend):
    """Persists the document as a UTF-8 JSON file."""
    
    def __init__(self, path: Path):
        self._path = Path(path)
    
    @property
    def path(self) -> Path:
        return self._path
    
    @property
    def location(self) -> str:
        return str(self._path)
    
    def read(self) -> Optional[str]:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")
    
    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def write(self, payload: str) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except BaseException:
            with suppress(OSError):
                os.unlink(tmp_path)
            raise


class InMemoryBackend(StorageBackend):
    """
    Keeps the last written payload in memory.
    
    Used by the tests and for dry runs; `writes` counts persists.
    """
    
    def __init__(self, payload: Optional[str] = None):
        self.payload = payload
        self.writes = 0
    
    @property
    def location(self) -> str:
        return "<memory>"
    
    def read(self) -> Optional[str]:
        return self.payload
    
    def write(self, payload: str) -> None:
        self.payload = payload
        self.writes += 1
