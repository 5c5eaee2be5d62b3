"""
Ordered Rule Validation

DESIGN DECISION: Each create/update runs its rules in a fixed order and
stops at the first failure. The operator sees one clear message, and the
order is part of the contract:

- User:     username non-blank -> name non-blank -> username free
- Budget:   name non-blank -> start <= end -> amount >= 0
- Category: name non-blank -> name free
- Expense:  description non-blank -> date within budget -> amount >= 0

Uniqueness checks need the store; everything else is pure.

IMPORTANT: Validation NEVER silently fixes input. It reports the issue
and the service turns it into a failed Outcome.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import Budget
from budget_tracker.models.outcome import ValidationIssue
from budget_tracker.validation.parsing import is_blank

if TYPE_CHECKING:
    from budget_tracker.services.storage import DocumentStore


def same_name(left: str, right: str) -> bool:
    """Case-insensitive comparison used for every uniqueness rule."""
    return left.strip().casefold() == right.strip().casefold()


class EntityValidator:
    """
    Validates create/update input against the business rules.
    
    Each check returns the first ValidationIssue found, or None.
    """
    
    def __init__(self, store: "DocumentStore"):
        self._store = store
    
    # =========================================================================
    # SINGLE RULES
    # =========================================================================
    
    @staticmethod
    def _require_text(field: str, value: Optional[str], label: str) -> Optional[ValidationIssue]:
        if is_blank(value):
            return ValidationIssue(
                field=field,
                issue_type="blank",
                message=f"{label} cannot be empty or whitespace.",
            )
        return None
    
    @staticmethod
    def _require_non_negative(amount: Decimal) -> Optional[ValidationIssue]:
        if amount < 0:
            return ValidationIssue(
                field="amount",
                issue_type="negative",
                message="Amount cannot be negative.",
            )
        return None
    
    @staticmethod
    def _require_within_budget(budget: Budget, day: date) -> Optional[ValidationIssue]:
        if not budget.covers(day):
            return ValidationIssue(
                field="date",
                issue_type="out_of_range",
                message="Date must be within budget start and end date.",
            )
        return None
    
    def username_taken(self, username: str) -> bool:
        return self._store.exists(
            EntityKind.USER, lambda u: same_name(u.username, username)
        )
    
    def category_name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        return self._store.exists(
            EntityKind.CATEGORY,
            lambda c: c.id != exclude_id and same_name(c.name, name),
        )
    
    # =========================================================================
    # RULE CHAINS
    # =========================================================================
    
    def check_new_user(
        self,
        username: Optional[str],
        name: Optional[str],
    ) -> Optional[ValidationIssue]:
        issue = (
            self._require_text("username", username, "Username")
            or self._require_text("name", name, "Name")
        )
        if issue:
            return issue
        
        if self.username_taken(username):
            return ValidationIssue(
                field="username",
                issue_type="duplicate",
                message=f"A user with the username '{username.strip()}' already exists.",
            )
        return None
    
    def check_user_name(self, name: Optional[str]) -> Optional[ValidationIssue]:
        return self._require_text("name", name, "Name")
    
    def check_new_budget(
        self,
        name: Optional[str],
        start_date: date,
        end_date: date,
        amount: Decimal,
    ) -> Optional[ValidationIssue]:
        issue = self._require_text("name", name, "Name")
        if issue:
            return issue
        
        if start_date > end_date:
            return ValidationIssue(
                field="end_date",
                issue_type="out_of_range",
                message="End date cannot be earlier than start date.",
            )
        
        return self._require_non_negative(amount)
    
    def check_budget_amount(self, amount: Decimal) -> Optional[ValidationIssue]:
        return self._require_non_negative(amount)
    
    def check_new_category(self, name: Optional[str]) -> Optional[ValidationIssue]:
        issue = self._require_text("name", name, "Name")
        if issue:
            return issue
        
        if self.category_name_taken(name):
            return ValidationIssue(
                field="name",
                issue_type="duplicate",
                message=f"A category with the name '{name.strip()}' already exists.",
            )
        return None
    
    def check_category_rename(
        self,
        category_id: int,
        name: Optional[str],
    ) -> Optional[ValidationIssue]:
        """
        Renaming to the category's own name (in any case) is allowed;
        colliding with a different category is not.
        """
        issue = self._require_text("name", name, "Name")
        if issue:
            return issue
        
        if self.category_name_taken(name, exclude_id=category_id):
            return ValidationIssue(
                field="name",
                issue_type="duplicate",
                message=f"A category with the name '{name.strip()}' already exists.",
            )
        return None
    
    def check_description(self, description: Optional[str]) -> Optional[ValidationIssue]:
        return self._require_text("description", description, "Description")
    
    def check_new_expense(
        self,
        budget: Budget,
        description: Optional[str],
        day: date,
        amount: Decimal,
    ) -> Optional[ValidationIssue]:
        return (
            self.check_description(description)
            or self._require_within_budget(budget, day)
            or self._require_non_negative(amount)
        )
    
    def check_expense_update(
        self,
        budget: Budget,
        day: date,
        amount: Decimal,
    ) -> Optional[ValidationIssue]:
        """Only the invariants are re-checked, against the effective values."""
        return (
            self._require_within_budget(budget, day)
            or self._require_non_negative(amount)
        )
