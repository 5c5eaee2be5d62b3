"""
Data Models Package

This package contains all Pydantic models used in Budget Tracker.
Everything read from or written to the document conforms to these schemas.
"""

from budget_tracker.models.entities import (
    UNKNOWN_CATEGORY,
    Budget,
    Category,
    Expense,
    User,
    format_money,
)
from budget_tracker.models.document import (
    ApplicationData,
    EntityKind,
    IntegrityIssue,
    LoadReport,
)
from budget_tracker.models.outcome import (
    BudgetSummary,
    CategoryTotal,
    Outcome,
    OutcomeStatus,
    ValidationIssue,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entities
    "UNKNOWN_CATEGORY",
    "Budget",
    "Category",
    "Expense",
    "User",
    "format_money",
    # Document
    "ApplicationData",
    "EntityKind",
    "IntegrityIssue",
    "LoadReport",
    # Outcomes
    "BudgetSummary",
    "CategoryTotal",
    "Outcome",
    "OutcomeStatus",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
