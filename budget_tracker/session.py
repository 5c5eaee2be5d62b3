"""
Selection Session

Holds what the operator is currently working with: the active user and
the selected budget and category.

DESIGN DECISION: Selections are weak references (id + cached snapshot).
The snapshot is for display only; anything that needs correctness
re-resolves the id against the store first. "Nothing selected" is None,
never a placeholder record with id 0.

The controller owns one Session per run and passes it to the services,
which are the only code that changes it.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

from budget_tracker.models.entities import Budget, Category, User

T = TypeVar("T")


class SelectionRef(BaseModel, Generic[T]):
    """A selected record: its id plus a copy taken at selection time."""
    
    id: int
    snapshot: T


class Session:
    """Process-local selection state."""
    
    def __init__(self):
        self._active_user: Optional[SelectionRef[User]] = None
        self._selected_budget: Optional[SelectionRef[Budget]] = None
        self._selected_category: Optional[SelectionRef[Category]] = None
    
    # Active user
    
    @property
    def active_user(self) -> Optional[SelectionRef[User]]:
        return self._active_user
    
    @property
    def active_user_id(self) -> Optional[int]:
        return self._active_user.id if self._active_user else None
    
    @property
    def active_user_name(self) -> Optional[str]:
        return self._active_user.snapshot.name if self._active_user else None
    
    @property
    def has_active_user(self) -> bool:
        return self._active_user is not None
    
    def set_active_user(self, user: User) -> None:
        """Switching users drops the budget selection, which belonged to the old user."""
        if self._active_user is None or self._active_user.id != user.id:
            self._selected_budget = None
        self._active_user = SelectionRef[User](id=user.id, snapshot=user.model_copy())
    
    def clear_active_user(self) -> None:
        self._active_user = None
        self._selected_budget = None
    
    # Selected budget
    
    @property
    def selected_budget(self) -> Optional[SelectionRef[Budget]]:
        return self._selected_budget
    
    @property
    def selected_budget_id(self) -> Optional[int]:
        return self._selected_budget.id if self._selected_budget else None
    
    def select_budget(self, budget: Budget) -> None:
        self._selected_budget = SelectionRef[Budget](id=budget.id, snapshot=budget.model_copy())
    
    def clear_budget(self) -> None:
        self._selected_budget = None
    
    # Selected category
    
    @property
    def selected_category(self) -> Optional[SelectionRef[Category]]:
        return self._selected_category
    
    @property
    def selected_category_id(self) -> Optional[int]:
        return self._selected_category.id if self._selected_category else None
    
    def select_category(self, category: Category) -> None:
        self._selected_category = SelectionRef[Category](
            id=category.id, snapshot=category.model_copy()
        )
    
    def clear_category(self) -> None:
        self._selected_category = None
    
    def clear(self) -> None:
        self._active_user = None
        self._selected_budget = None
        self._selected_category = None
