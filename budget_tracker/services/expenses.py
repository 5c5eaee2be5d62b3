"""
Expense Service

An expense is a dated, categorized charge against one budget. Its date
must fall inside the budget's range (inclusive) and its amount must not
be negative, both on creation and after every update.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import Expense
from budget_tracker.models.outcome import Outcome
from budget_tracker.services.base import DomainService
from budget_tracker.validation import (
    InputFormatError,
    is_blank,
    parse_optional_amount,
    parse_optional_date,
)


class ExpenseService(DomainService):
    
    entity_type = EntityKind.EXPENSE.value
    
    def add_expense(
        self,
        budget_id: int,
        category_id: int,
        description: Optional[str],
        day: date,
        amount: Decimal,
    ) -> Outcome[Expense]:
        """
        The owning budget must exist. Then, first failure wins:
        description non-blank, date within the budget, amount >= 0.
        The category must exist.
        """
        budget = self._store.get_by_id(EntityKind.BUDGET, budget_id)
        if budget is None:
            return Outcome.not_found("Budget not found.")
        
        issue = self._validator.check_new_expense(budget, description, day, amount)
        if issue:
            return self._reject(issue)
        
        if self._store.get_by_id(EntityKind.CATEGORY, category_id) is None:
            return Outcome.not_found("Category not found.")
        
        expense = Expense(
            id=self._store.next_id(EntityKind.EXPENSE),
            budget_id=budget_id,
            category_id=category_id,
            description=description.strip(),
            date=day,
            amount=amount,
        )
        self._store.add(expense)
        self._audit.log_created(self.entity_type, expense.id, expense.description)
        
        return Outcome.ok(f"Expense '{expense.description}' has been successfully added.", expense)
    
    def check_description(self, description: Optional[str]) -> Optional[Outcome[Expense]]:
        """
        The first add_expense rule on its own, for entry flows that ask for
        the description before anything else. None when it passes.
        """
        issue = self._validator.check_description(description)
        return self._reject(issue) if issue else None
    
    def update_expense(
        self,
        expense_id: int,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
        date_text: Optional[str] = None,
        amount_text: Optional[str] = None,
    ) -> Outcome[Expense]:
        """
        Update any subset of an expense's fields.
        
        None or blank input keeps the current value. The date-range and
        non-negative rules are checked against the values the expense
        would end up with.
        """
        expense = self.get_expense(expense_id)
        if expense is None:
            return Outcome.not_found("Expense not found.")
        
        budget = self._store.get_by_id(EntityKind.BUDGET, expense.budget_id)
        if budget is None:
            return Outcome.not_found("Budget not found.")
        
        try:
            new_date = parse_optional_date(date_text)
            new_amount = parse_optional_amount(amount_text)
        except InputFormatError as e:
            return Outcome.fail(e.message)
        
        effective_date = new_date if new_date is not None else expense.date
        effective_amount = new_amount if new_amount is not None else expense.amount
        effective_description = (
            expense.description if is_blank(description) else description.strip()
        )
        effective_category = expense.category_id if category_id is None else category_id
        
        issue = self._validator.check_expense_update(budget, effective_date, effective_amount)
        if issue:
            return self._reject(issue)
        
        if self._store.get_by_id(EntityKind.CATEGORY, effective_category) is None:
            return Outcome.not_found("Category not found.")
        
        changes = {
            field: [str(old), str(new)]
            for field, old, new in (
                ("category_id", expense.category_id, effective_category),
                ("description", expense.description, effective_description),
                ("date", expense.date, effective_date),
                ("amount", expense.amount, effective_amount),
            )
            if old != new
        }
        
        def apply(record: Expense) -> None:
            record.category_id = effective_category
            record.description = effective_description
            record.date = effective_date
            record.amount = effective_amount
        
        updated = self._store.update_field(EntityKind.EXPENSE, expense_id, apply)
        self._audit.log_updated(self.entity_type, expense_id, changes)
        
        return Outcome.ok(f"Expense '{updated.description}' has been successfully updated.", updated)
    
    def delete_expense(self, expense_id: int) -> Outcome[None]:
        if not self._store.remove(EntityKind.EXPENSE, expense_id):
            return Outcome.not_found("Expense not found.")
        self._audit.log_deleted(self.entity_type, expense_id)
        return Outcome.ok("Expense removed successfully.")
    
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        return self._store.get_by_id(EntityKind.EXPENSE, expense_id)
    
    def list_expenses_by_budget(self, budget_id: int) -> list[Expense]:
        return self._store.get_by_foreign_key(EntityKind.EXPENSE, budget_id)
