"""
Expense Query Pipeline

DESIGN DECISION: Sorting and filtering are PURE.
They take a sequence of expenses and return a new list; the store is
never touched. Sort runs first, then filter, and both keep the relative
order of ties, because the displayed order is what the operator selects
from by position.
"""

from datetime import date
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from budget_tracker.models.entities import Expense


class SortKey(str, Enum):
    """How to order expenses before display."""
    DATE = "date"           # Oldest first
    AMOUNT = "amount"       # Largest first
    CATEGORY = "category"   # Category name A-Z
    NONE = "none"           # Stored order


class FilterMode(str, Enum):
    NONE = "none"
    DATE_RANGE = "date_range"
    CATEGORY = "category"


class ExpenseFilter(BaseModel):
    """
    Which expenses to keep.
    
    DATE_RANGE needs both dates (inclusive); CATEGORY needs a category id.
    """
    
    mode: FilterMode = FilterMode.NONE
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    
    @model_validator(mode="after")
    def validate_mode_fields(self) -> "ExpenseFilter":
        if self.mode == FilterMode.DATE_RANGE and (
            self.start_date is None or self.end_date is None
        ):
            raise ValueError("A date range filter needs a start and an end date")
        if self.mode == FilterMode.CATEGORY and self.category_id is None:
            raise ValueError("A category filter needs a category id")
        return self
    
    @classmethod
    def date_range(cls, start_date: date, end_date: date) -> "ExpenseFilter":
        return cls(mode=FilterMode.DATE_RANGE, start_date=start_date, end_date=end_date)
    
    @classmethod
    def category(cls, category_id: int) -> "ExpenseFilter":
        return cls(mode=FilterMode.CATEGORY, category_id=category_id)
    
    def matches(self, expense: Expense) -> bool:
        if self.mode == FilterMode.DATE_RANGE:
            return self.start_date <= expense.date <= self.end_date
        if self.mode == FilterMode.CATEGORY:
            return expense.category_id == self.category_id
        return True


class ExpenseQuery(BaseModel):
    """A sort-then-filter request over one budget's expenses."""
    
    budget_id: int = Field(gt=0)
    sort_key: SortKey = SortKey.NONE
    filter: ExpenseFilter = Field(default_factory=ExpenseFilter)


def sort_expenses(expenses: Iterable[Expense], key: SortKey) -> list[Expense]:
    """Stable sort; equal keys keep their input order."""
    expenses = list(expenses)
    
    if key == SortKey.DATE:
        return sorted(expenses, key=lambda e: e.date)
    if key == SortKey.AMOUNT:
        # reverse=True keeps ties in input order
        return sorted(expenses, key=lambda e: e.amount, reverse=True)
    if key == SortKey.CATEGORY:
        return sorted(expenses, key=lambda e: e.category_name.casefold())
    return expenses


def filter_expenses(expenses: Iterable[Expense], expense_filter: ExpenseFilter) -> list[Expense]:
    return [e for e in expenses if expense_filter.matches(e)]


def run_pipeline(
    expenses: Iterable[Expense],
    key: SortKey = SortKey.NONE,
    expense_filter: Optional[ExpenseFilter] = None,
) -> list[Expense]:
    """Sort, then filter."""
    ordered = sort_expenses(expenses, key)
    if expense_filter is None:
        return ordered
    return filter_expenses(ordered, expense_filter)
