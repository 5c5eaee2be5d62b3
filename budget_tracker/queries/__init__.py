"""Expense sorting, filtering and query execution package."""

from budget_tracker.queries.executor import ExpenseQueryExecutor, QueryResult
from budget_tracker.queries.pipeline import (
    ExpenseFilter,
    ExpenseQuery,
    FilterMode,
    SortKey,
    filter_expenses,
    run_pipeline,
    sort_expenses,
)

__all__ = [
    "ExpenseFilter",
    "ExpenseQuery",
    "ExpenseQueryExecutor",
    "FilterMode",
    "QueryResult",
    "SortKey",
    "filter_expenses",
    "run_pipeline",
    "sort_expenses",
]
