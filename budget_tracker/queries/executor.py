"""
Query Execution

Runs an ExpenseQuery against the live store. The store hands back the
budget's expenses; everything after that is the pure pipeline.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from budget_tracker.models.document import EntityKind
from budget_tracker.models.entities import Expense
from budget_tracker.queries.pipeline import (
    ExpenseQuery,
    FilterMode,
    SortKey,
    run_pipeline,
)
from budget_tracker.services.storage import DocumentStore


class QueryResult(BaseModel):
    """Expenses that matched a query, in display order."""
    
    query: ExpenseQuery
    expenses: list[Expense] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
    
    @property
    def result_count(self) -> int:
        return len(self.expenses)


class ExpenseQueryExecutor:
    """
    Executes expense queries against the document store.
    
    GUARANTEES:
    - Only returns expenses that exist in the store
    - An absent budget yields an empty result, not an error
    """
    
    def __init__(self, store: DocumentStore):
        self._store = store
    
    def execute(self, query: ExpenseQuery) -> QueryResult:
        expenses = self._store.get_by_foreign_key(EntityKind.EXPENSE, query.budget_id)
        results = run_pipeline(expenses, query.sort_key, query.filter)
        
        return QueryResult(
            query=query,
            expenses=results,
            total=sum((e.amount for e in results), Decimal("0")),
            query_description=self._describe(query),
        )
    
    def _describe(self, query: ExpenseQuery) -> str:
        desc_parts = ["Listing expenses"]
        if query.sort_key != SortKey.NONE:
            desc_parts.append(f"sorted by {query.sort_key.value}")
        if query.filter.mode == FilterMode.DATE_RANGE:
            desc_parts.append(self._date_range_str(query.filter.start_date, query.filter.end_date))
        elif query.filter.mode == FilterMode.CATEGORY:
            category = self._store.get_by_id(EntityKind.CATEGORY, query.filter.category_id)
            name = category.name if category else f"#{query.filter.category_id}"
            desc_parts.append(f"category: {name}")
        return " | ".join(desc_parts)
    
    @staticmethod
    def _date_range_str(date_from: Optional[date], date_to: Optional[date]) -> str:
        if date_from == date_to:
            return f"on {date_from.strftime('%d %b %Y')}"
        if date_from.month == date_to.month and date_from.year == date_to.year:
            return f"from {date_from.day} to {date_to.strftime('%d %b %Y')}"
        return f"from {date_from.strftime('%d %b %Y')} to {date_to.strftime('%d %b %Y')}"
