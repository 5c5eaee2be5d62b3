"""
Outcome Models

Domain services report expected failures (blank names, broken invariants,
missing records, blocked deletes) as values instead of exceptions.
The caller shows `message` and returns to the previous menu.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class OutcomeStatus(str, Enum):
    """Why an operation succeeded or failed."""
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"   # Blank field, broken invariant, name collision
    NOT_FOUND = "not_found"                   # Stale or absent id
    DEPENDENCY_BLOCKED = "dependency_blocked" # Record still referenced elsewhere


class Outcome(BaseModel, Generic[T]):
    """Result of a domain service operation."""
    
    success: bool
    status: OutcomeStatus
    message: str
    data: Optional[T] = None
    
    @classmethod
    def ok(cls, message: str, data: Optional[T] = None) -> "Outcome[T]":
        return cls(
            success=True,
            status=OutcomeStatus.SUCCESS,
            message=message,
            data=data,
        )
    
    @classmethod
    def fail(
        cls,
        message: str,
        status: OutcomeStatus = OutcomeStatus.VALIDATION_FAILED,
    ) -> "Outcome[T]":
        return cls(success=False, status=status, message=message)
    
    @classmethod
    def not_found(cls, message: str) -> "Outcome[T]":
        return cls.fail(message, OutcomeStatus.NOT_FOUND)


class ValidationIssue(BaseModel):
    """The first rule an input broke."""
    
    field: str = Field(
        ...,
        description="Field that has the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (blank, duplicate, out_of_range, negative, ...)"
    )
    message: str = Field(
        ...,
        description="Human-readable message shown to the operator"
    )


class CategoryTotal(BaseModel):
    """Total spent in one category within a budget."""
    
    category_id: int
    category_name: str
    total: Decimal


class BudgetSummary(BaseModel):
    """Derived view of a budget and what has been spent against it."""
    
    budget_id: int
    name: str
    start_date: date
    end_date: date
    amount: Decimal
    total_spent: Decimal
    remaining: Decimal
    percent_used: Decimal
    category_totals: list[CategoryTotal] = Field(default_factory=list)
    
    @property
    def percent_remaining(self) -> Decimal:
        return Decimal("100") - self.percent_used
    
    @property
    def is_overspent(self) -> bool:
        return self.remaining < 0
