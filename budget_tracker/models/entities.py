"""
Core Data Models for Budget Tracker

These models define the schemas of everything kept in the persisted document.
They are designed to:
1. Enforce the per-record invariants (non-negative amounts, ordered budget dates)
2. Serialize with the exact field names of the existing ApplicationData.json
3. Render the fixed-width rows used by the selection lists

DESIGN DECISION: Field names are snake_case in Python and PascalCase on disk.
The alias generator keeps both worlds happy without hand-written mappings.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    PrivateAttr,
    model_validator,
)
from pydantic.alias_generators import to_pascal


def _coerce_document_date(value: Any) -> Any:
    """Accept both `2024-06-01` and the `2024-06-01T00:00:00` timestamps on disk."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


DocumentDate = Annotated[
    date,
    BeforeValidator(_coerce_document_date),
    PlainSerializer(
        lambda d: f"{d.isoformat()}T00:00:00",
        return_type=str,
        when_used="json",
    ),
]

Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]

UNKNOWN_CATEGORY = "Unknown"

ENTITY_CONFIG = ConfigDict(
    alias_generator=to_pascal,
    populate_by_name=True,
    validate_assignment=True,
)


def format_money(amount: Decimal, currency_symbol: str = "$") -> str:
    """Format an amount the way the tables show it (e.g. `$1,234.50`, `-$20.00`)."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"


# =============================================================================
# ENTITIES
# =============================================================================

class User(BaseModel):
    """A person whose budgets are tracked. Usernames are unique (case-insensitive)."""
    
    model_config = ENTITY_CONFIG
    
    id: int = Field(gt=0)
    username: str = Field(min_length=1)
    name: str = Field(min_length=1)
    
    def table_row(self) -> str:
        return f"{self.id:<5} | {self.username:<15} | {self.name:<20}"


class Category(BaseModel):
    """A global tag applied to expenses. Names are unique (case-insensitive)."""
    
    model_config = ENTITY_CONFIG
    
    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    
    def table_row(self) -> str:
        return f"{self.id:<5} | {self.name:<30}"


class Budget(BaseModel):
    """
    A named, date-bounded spending allowance owned by a user.
    
    The date range is inclusive on both ends; expenses charged against
    the budget must fall inside it.
    """
    
    model_config = ENTITY_CONFIG
    
    id: int = Field(gt=0)
    user_id: int = Field(gt=0)
    name: str = Field(min_length=1)
    start_date: DocumentDate
    end_date: DocumentDate
    amount: Money
    
    @model_validator(mode='after')
    def validate_dates(self) -> 'Budget':
        """Validate date relationships."""
        if self.start_date > self.end_date:
            raise ValueError("End date cannot be earlier than start date.")
        return self
    
    def covers(self, day: date) -> bool:
        """True if `day` lies within [start_date, end_date]."""
        return self.start_date <= day <= self.end_date
    
    def table_row(self, currency_symbol: str = "$") -> str:
        return (
            f"{self.id:<5} | {self.name:<30} | "
            f"{self.start_date:%Y-%m-%d}   | {self.end_date:%Y-%m-%d}   | "
            f"{format_money(self.amount, currency_symbol):<10}"
        )


class Expense(BaseModel):
    """
    A dated, categorized charge against a budget.
    
    The resolved Category is a display-only reference rebuilt on load;
    only `category_id` is persisted.
    """
    
    model_config = ENTITY_CONFIG
    
    id: int = Field(gt=0)
    budget_id: int = Field(gt=0)
    category_id: int = Field(gt=0)
    amount: Money
    date: DocumentDate
    description: str = Field(min_length=1)
    
    _category: Optional[Category] = PrivateAttr(default=None)
    
    @property
    def category(self) -> Optional[Category]:
        return self._category
    
    def attach_category(self, category: Optional[Category]) -> None:
        """Link (or unlink, with None) the resolved category."""
        self._category = category
    
    @property
    def category_name(self) -> str:
        return self._category.name if self._category else UNKNOWN_CATEGORY
    
    def table_row(self, currency_symbol: str = "$") -> str:
        return (
            f"{self.id:<5} | {self.description:<30} | {self.category_name:<20} | "
            f"{self.date:%d-%m-%Y}   | {format_money(self.amount, currency_symbol):<10}"
        )
