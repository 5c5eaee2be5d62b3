"""
Audit Logger

DESIGN DECISION: Every change to the document is logged.
This provides:
1. Traceability of all mutations
2. Debugging capability when a write fails
3. A record of integrity problems found on load

The audit logger:
- Writes to a dated log file, never to the interactive screen
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError
import structlog

from budget_tracker.config import LoggingSettings
from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


# Configure structlog for local logging
structlog.configure(
    processors=SHARED_PROCESSORS + [structlog.processors.JSONRenderer()],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def log_file_path(directory: Path, today: Optional[date] = None) -> Path:
    """`<directory>/BudgetTracker_YYYY-MM-DD.log`"""
    today = today or date.today()
    return directory / f"BudgetTracker_{today:%Y-%m-%d}.log"


def configure_logging(settings: LoggingSettings) -> Path:
    """
    Route all log output to the dated log file.
    
    The terminal belongs to the menus, so nothing is logged to stdout.
    Returns the path of the log file in use.
    """
    settings.directory.mkdir(parents=True, exist_ok=True)
    path = log_file_path(settings.directory)
    
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.level)
    
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_format
        else structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])
    )
    structlog.configure(
        processors=SHARED_PROCESSORS + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    return path


class AuditLogger:
    """
    Central audit logging service.
    
    Emits AuditEvents through structlog at a level matching their severity.
    """
    
    def __init__(self, logger_name: str = "budget_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)
    
    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.
        
        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never take the app down with it
            return False
        return True
    
    def _record(self, build: Callable[..., AuditEvent], *args) -> bool:
        try:
            event = build(*args)
        except ValidationError:
            return False
        return self.log(event)
    
    def log_created(self, entity_type: str, entity_id: int, label: str) -> None:
        self._record(AuditEventBuilder.created, entity_type, entity_id, label)
    
    def log_updated(self, entity_type: str, entity_id: int, changes: dict) -> None:
        self._record(AuditEventBuilder.updated, entity_type, entity_id, changes)
    
    def log_deleted(
        self,
        entity_type: str,
        entity_id: int,
        cascaded: Optional[dict[str, int]] = None,
    ) -> None:
        self._record(AuditEventBuilder.deleted, entity_type, entity_id, cascaded)
    
    def log_delete_blocked(
        self,
        entity_type: str,
        entity_id: int,
        dependent_count: int,
    ) -> None:
        self._record(AuditEventBuilder.delete_blocked, entity_type, entity_id, dependent_count)
    
    def log_validation_failed(
        self,
        entity_type: str,
        field: str,
        issue_type: str,
        message: str,
    ) -> None:
        self._record(AuditEventBuilder.validation_failed, entity_type, field, issue_type, message)
    
    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self._record(AuditEventBuilder.system_error, error_type, error_message, details)
