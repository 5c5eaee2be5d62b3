"""
Shared plumbing for the domain services.
"""

from typing import Optional

from budget_tracker.audit import AuditLogger
from budget_tracker.models.outcome import Outcome, ValidationIssue
from budget_tracker.services.storage import DocumentStore
from budget_tracker.validation import EntityValidator


class DomainService:
    """
    Base for the user, budget, category and expense services.
    
    Services validate input, enforce invariants and translate store results
    into Outcomes. Expected failures are returned, never raised; storage
    failures (StorageError) propagate to the caller.
    """
    
    entity_type: str = ""
    
    def __init__(
        self,
        store: DocumentStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._validator = EntityValidator(store)
    
    @property
    def store(self) -> DocumentStore:
        return self._store
    
    def _reject(self, issue: ValidationIssue) -> Outcome:
        self._audit.log_validation_failed(
            self.entity_type, issue.field, issue.issue_type, issue.message,
        )
        return Outcome.fail(issue.message)
