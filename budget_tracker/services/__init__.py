"""Services package."""

from budget_tracker.services.storage import (
    DocumentLoadError,
    DocumentStore,
    DuplicateError,
    InMemoryBackend,
    JsonFileBackend,
    PersistError,
    StorageBackend,
    StorageError,
)
from budget_tracker.services.budgets import BudgetService
from budget_tracker.services.categories import CategoryService
from budget_tracker.services.expenses import ExpenseService
from budget_tracker.services.users import UserService

__all__ = [
    # Domain services
    "BudgetService",
    "CategoryService",
    "ExpenseService",
    "UserService",
    # Storage
    "DocumentStore",
    "InMemoryBackend",
    "JsonFileBackend",
    "StorageBackend",
    # Storage errors
    "DocumentLoadError",
    "DuplicateError",
    "PersistError",
    "StorageError",
]
