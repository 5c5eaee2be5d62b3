"""
Audit Models for Budget Tracker

Every change to the document is logged for audit purposes.
This provides:
1. Traceability of who changed what
2. Debugging information when a persist fails
3. A record of integrity problems found on load

DESIGN DECISION: Audit events are append-only log lines. They are never
written into the document itself.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, BeforeValidator, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Users
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    USER_SELECTED = "user_selected"
    
    # Budgets
    BUDGET_CREATED = "budget_created"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    
    # Categories
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    DELETE_BLOCKED = "delete_blocked"
    
    # Expenses
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    
    # Validation
    VALIDATION_FAILED = "validation_failed"
    
    # Persistence
    DOCUMENT_LOADED = "document_loaded"
    DOCUMENT_MISSING = "document_missing"
    DOCUMENT_PERSISTED = "document_persisted"
    PERSIST_FAILED = "persist_failed"
    INTEGRITY_VIOLATION = "integrity_violation"
    
    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


DESCRIPTION_LIMIT = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clip_description(value: Any) -> Any:
    """Labels are operator text of any length; the description keeps the first part."""
    if isinstance(value, str) and len(value) > DESCRIPTION_LIMIT:
        return value[: DESCRIPTION_LIMIT - 3] + "..."
    return value


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    Every significant action creates one of these.
    """
    
    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    
    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    
    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'budget', 'expense')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the record this event relates to"
    )
    
    description: Annotated[str, BeforeValidator(_clip_description)] = Field(
        ...,
        max_length=DESCRIPTION_LIMIT,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.created("budget", budget.id, budget.name)
        event = AuditEventBuilder.delete_blocked("category", category.id, 3)
    """
    
    _CREATED = {
        "user": AuditEventType.USER_CREATED,
        "budget": AuditEventType.BUDGET_CREATED,
        "category": AuditEventType.CATEGORY_CREATED,
        "expense": AuditEventType.EXPENSE_CREATED,
    }
    _UPDATED = {
        "user": AuditEventType.USER_UPDATED,
        "budget": AuditEventType.BUDGET_UPDATED,
        "category": AuditEventType.CATEGORY_UPDATED,
        "expense": AuditEventType.EXPENSE_UPDATED,
    }
    _DELETED = {
        "user": AuditEventType.USER_DELETED,
        "budget": AuditEventType.BUDGET_DELETED,
        "category": AuditEventType.CATEGORY_DELETED,
        "expense": AuditEventType.EXPENSE_DELETED,
    }
    
    @staticmethod
    def created(entity_type: str, entity_id: int, label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._CREATED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} created: {label}",
            details={"label": label},
        )
    
    @staticmethod
    def updated(
        entity_type: str,
        entity_id: int,
        changes: dict[str, Any],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._UPDATED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {entity_id} updated",
            details={"changes": changes},
        )
    
    @staticmethod
    def deleted(
        entity_type: str,
        entity_id: int,
        cascaded: Optional[dict[str, int]] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._DELETED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} {entity_id} deleted",
            details={"cascaded": cascaded or {}},
        )
    
    @staticmethod
    def user_selected(user_id: int, username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SELECTED,
            entity_type="user",
            entity_id=user_id,
            description=f"Active user set to {username}",
        )
    
    @staticmethod
    def delete_blocked(
        entity_type: str,
        entity_id: int,
        dependent_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=(
                f"Refused to delete {entity_type} {entity_id}: "
                f"{dependent_count} dependent record(s)"
            ),
            details={"dependent_count": dependent_count},
        )
    
    @staticmethod
    def validation_failed(
        entity_type: str,
        field: str,
        issue_type: str,
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.DEBUG,
            entity_type=entity_type,
            description=message,
            details={"field": field, "issue_type": issue_type},
        )
    
    @staticmethod
    def document_loaded(path: str, counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_LOADED,
            description=f"Document loaded from {path}",
            details={"path": path, "counts": counts},
        )
    
    @staticmethod
    def document_missing(path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_MISSING,
            severity=AuditSeverity.WARNING,
            description=f"Data file not found at {path}; starting with an empty document",
            details={"path": path},
        )
    
    @staticmethod
    def document_persisted(path: str, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_PERSISTED,
            severity=AuditSeverity.DEBUG,
            description=f"Document written to {path}",
            details={"path": path, "size_bytes": size_bytes},
        )
    
    @staticmethod
    def persist_failed(path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not write document to {path}",
            error_message=error_message,
            details={"path": path},
        )
    
    @staticmethod
    def integrity_violation(
        entity_type: str,
        entity_id: int,
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTEGRITY_VIOLATION,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            description=message,
        )
    
    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
