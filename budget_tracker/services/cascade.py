"""
Cascading deletes.

The store only ever removes one record at a time. Removing a parent
together with its children is issued from here as an explicit sequence,
children first, so an interrupted cascade never leaves a child pointing
at a parent that is already gone.
"""

from budget_tracker.models.document import EntityKind
from budget_tracker.services.storage import DocumentStore


def remove_budget_cascade(store: DocumentStore, budget_id: int) -> int:
    """
    Remove every expense of the budget, then the budget.
    
    Returns the number of expenses removed.
    """
    removed = 0
    for expense in store.get_by_foreign_key(EntityKind.EXPENSE, budget_id):
        if store.remove(EntityKind.EXPENSE, expense.id):
            removed += 1
    store.remove(EntityKind.BUDGET, budget_id)
    return removed


def remove_user_budgets(store: DocumentStore, user_id: int) -> dict[str, int]:
    """
    Remove every budget owned by the user, each with its expenses.
    
    Returns counts of removed budgets and expenses.
    """
    counts = {"budgets": 0, "expenses": 0}
    for budget in store.get_by_foreign_key(EntityKind.BUDGET, user_id):
        counts["expenses"] += remove_budget_cascade(store, budget.id)
        counts["budgets"] += 1
    return counts
