"""
Budget Service

Budgets are date-bounded spending envelopes owned by a user. Besides
create/update/delete this service answers the derived questions the
menus ask: how much has been spent, what is left, and where it went.

Derived values are computed from the live store on every call and never
stored.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import UNKNOWN_CATEGORY, Budget
from budget_tracker.models.outcome import BudgetSummary, CategoryTotal, Outcome
from budget_tracker.services.base import DomainService
from budget_tracker.services.cascade import remove_budget_cascade, remove_user_budgets
from budget_tracker.session import Session
from budget_tracker.validation import InputFormatError, parse_optional_amount


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Percentage rounded to two places; 0 when `whole` is 0."""
    if whole <= 0:
        return Decimal("0")
    return round(part / whole * 100, 2)


class BudgetService(DomainService):
    
    entity_type = EntityKind.BUDGET.value
    
    # =========================================================================
    # CREATE / UPDATE / DELETE
    # =========================================================================
    
    def create_budget(
        self,
        user_id: int,
        name: Optional[str],
        start_date: date,
        end_date: date,
        amount: Decimal,
    ) -> Outcome[Budget]:
        """
        Rules, first failure wins: name non-blank, start <= end, amount >= 0.
        The owning user must exist.
        """
        issue = self._validator.check_new_budget(name, start_date, end_date, amount)
        if issue:
            return self._reject(issue)
        
        if self._store.get_by_id(EntityKind.USER, user_id) is None:
            return Outcome.not_found("User not found.")
        
        budget = Budget(
            id=self._store.next_id(EntityKind.BUDGET),
            user_id=user_id,
            name=name.strip(),
            start_date=start_date,
            end_date=end_date,
            amount=amount,
        )
        self._store.add(budget)
        self._audit.log_created(self.entity_type, budget.id, budget.name)
        
        return Outcome.ok(f"Budget '{budget.name}' has been successfully created.", budget)
    
    def update_budget_amount(self, budget_id: int, amount_text: Optional[str]) -> Outcome[Budget]:
        """
        Set a new amount from operator text.
        
        Blank text keeps the current amount and still succeeds.
        """
        budget = self._store.get_by_id(EntityKind.BUDGET, budget_id)
        if budget is None:
            return Outcome.not_found("Budget not found.")
        
        try:
            amount = parse_optional_amount(amount_text)
        except InputFormatError as e:
            return Outcome.fail(e.message)
        
        if amount is None:
            return Outcome.ok(f"Budget amount for '{budget.name}' has been successfully updated.", budget)
        
        issue = self._validator.check_budget_amount(amount)
        if issue:
            return self._reject(issue)
        
        old_amount = budget.amount
        
        def set_amount(record: Budget) -> None:
            record.amount = amount
        
        updated = self._store.update_field(EntityKind.BUDGET, budget_id, set_amount)
        self._audit.log_updated(
            self.entity_type, budget_id, {"amount": [str(old_amount), str(amount)]},
        )
        
        return Outcome.ok(f"Budget amount for '{updated.name}' has been successfully updated.", updated)
    
    def delete_budget(self, session: Session, budget_id: int) -> Outcome[None]:
        """Delete a budget and its expenses; drops the selection if it pointed here."""
        budget = self._store.get_by_id(EntityKind.BUDGET, budget_id)
        if budget is None:
            if session.selected_budget_id == budget_id:
                session.clear_budget()
            return Outcome.not_found("Budget not found.")
        
        removed = remove_budget_cascade(self._store, budget_id)
        if session.selected_budget_id == budget_id:
            session.clear_budget()
        self._audit.log_deleted(self.entity_type, budget_id, {"expenses": removed})
        
        return Outcome.ok(f"Budget '{budget.name}' removed successfully.")
    
    def delete_budgets_by_user(self, user_id: int) -> Outcome[dict]:
        counts = remove_user_budgets(self._store, user_id)
        return Outcome.ok(f"{counts['budgets']} budget(s) removed.", counts)
    
    # =========================================================================
    # QUERIES
    # =========================================================================
    
    def list_budgets_for_user(self, user_id: int) -> list[Budget]:
        return self._store.get_by_foreign_key(EntityKind.BUDGET, user_id)
    
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self._store.get_by_id(EntityKind.BUDGET, budget_id)
    
    def select_budget(self, session: Session, budget_id: int) -> Outcome[Budget]:
        budget = self.get_budget(budget_id)
        if budget is None:
            return Outcome.not_found("Budget not found.")
        session.select_budget(budget)
        return Outcome.ok(f"Selected budget '{budget.name}'.", budget)
    
    def get_selected_budget(self, session: Session) -> Optional[Budget]:
        """
        The selected budget as currently stored.
        
        A selection whose budget has since disappeared is cleared.
        """
        if session.selected_budget_id is None:
            return None
        budget = self.get_budget(session.selected_budget_id)
        if budget is None:
            session.clear_budget()
        return budget
    
    def total_spent(self, budget_id: int) -> Decimal:
        expenses = self._store.get_by_foreign_key(EntityKind.EXPENSE, budget_id)
        return sum((e.amount for e in expenses), Decimal("0"))
    
    def get_selected_budget_total_spent(self, session: Session) -> Decimal:
        budget = self.get_selected_budget(session)
        if budget is None:
            return Decimal("0")
        return self.total_spent(budget.id)
    
    def get_selected_budget_remaining_balance(self, session: Session) -> Decimal:
        budget = self.get_selected_budget(session)
        if budget is None:
            return Decimal("0")
        return budget.amount - self.total_spent(budget.id)
    
    def get_budget_summary(self, budget_id: int) -> Outcome[BudgetSummary]:
        """Totals, percentage used and a per-category breakdown (largest first)."""
        budget = self.get_budget(budget_id)
        if budget is None:
            return Outcome.not_found("Budget not found.")
        
        expenses = self._store.get_by_foreign_key(EntityKind.EXPENSE, budget_id)
        spent = sum((e.amount for e in expenses), Decimal("0"))
        
        totals: dict[int, CategoryTotal] = {}
        for expense in expenses:
            entry = totals.get(expense.category_id)
            if entry is None:
                category = expense.category
                entry = CategoryTotal(
                    category_id=expense.category_id,
                    category_name=category.name if category else UNKNOWN_CATEGORY,
                    total=Decimal("0"),
                )
                totals[expense.category_id] = entry
            entry.total += expense.amount
        
        summary = BudgetSummary(
            budget_id=budget.id,
            name=budget.name,
            start_date=budget.start_date,
            end_date=budget.end_date,
            amount=budget.amount,
            total_spent=spent,
            remaining=budget.amount - spent,
            percent_used=percent_of(spent, budget.amount),
            category_totals=sorted(totals.values(), key=lambda t: t.total, reverse=True),
        )
        return Outcome.ok(f"Summary for '{budget.name}'.", summary)
