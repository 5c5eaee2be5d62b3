"""
Abstract Storage Interface

DESIGN DECISION: The document store talks to a byte-level backend through
this interface. This allows us to:
1. Keep the JSON file as the production backend
2. Use in-memory storage for testing
3. Add locking or a database later without touching the services

The interface is intentionally tiny: the whole document is read once and
written wholesale after every change.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageBackend(ABC):
    """
    Abstract interface for persisting the serialized document.
    
    Any backend (JSON file, in-memory, ...) must implement these methods.
    """
    
    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the document (for messages and logs)."""
        pass
    
    @abstractmethod
    def read(self) -> Optional[str]:
        """
        Read the serialized document.
        
        Returns:
            The payload, or None if no document has been persisted yet
            
        Raises:
            OSError: If the document exists but cannot be read
        """
        pass
    
    @abstractmethod
    def write(self, payload: str) -> None:
        """
        Replace the persisted document with `payload`.
        
        Raises:
            OSError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DocumentLoadError(StorageError):
    """The persisted document exists but could not be read or parsed."""
    pass


class PersistError(StorageError):
    """The in-memory document could not be written to the backend."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert an entity whose id is already taken."""
    pass
