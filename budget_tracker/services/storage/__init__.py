"""
Storage Services Package

Provides the document store, the abstract backend interface and
concrete backends. The JSON file is the production backend; the
in-memory backend is swappable in for tests.
"""

from budget_tracker.services.storage.interface import (
    DocumentLoadError,
    DuplicateError,
    PersistError,
    StorageBackend,
    StorageError,
)
from budget_tracker.services.storage.json_file import (
    InMemoryBackend,
    JsonFileBackend,
)
from budget_tracker.services.storage.document_store import (
    DocumentStore,
    EntityKind,
)

__all__ = [
    # Interfaces
    "StorageBackend",
    # Exceptions
    "DocumentLoadError",
    "DuplicateError",
    "PersistError",
    "StorageError",
    # Backends
    "InMemoryBackend",
    "JsonFileBackend",
    # Store
    "DocumentStore",
    "EntityKind",
]
