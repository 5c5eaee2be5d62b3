"""
Persisted Document Models

The whole application state is one document with four collections.
It is read once at startup and rewritten wholesale after every change.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from budget_tracker.models.entities import Budget, Category, Expense, User


class EntityKind(str, Enum):
    """The four collections of the document."""
    USER = "user"
    BUDGET = "budget"
    CATEGORY = "category"
    EXPENSE = "expense"


class ApplicationData(BaseModel):
    """
    Root of the persisted document.
    
    On disk: {"Users": [...], "Budgets": [...], "Categories": [...], "Expenses": [...]}
    """
    
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
    )
    
    users: list[User] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    
    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class IntegrityIssue(BaseModel):
    """A dangling reference found while loading the document."""
    
    entity_type: str
    entity_id: int
    field: str
    missing_id: int
    message: str


class LoadReport(BaseModel):
    """What `DocumentStore.load()` found."""
    
    found: bool = Field(
        ...,
        description="False when no persisted document existed (fresh start)"
    )
    user_count: int = 0
    budget_count: int = 0
    category_count: int = 0
    expense_count: int = 0
    integrity_issues: list[IntegrityIssue] = Field(default_factory=list)
    
    @property
    def is_clean(self) -> bool:
        return not self.integrity_issues
