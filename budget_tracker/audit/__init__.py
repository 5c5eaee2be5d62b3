"""Audit logging package."""

from budget_tracker.audit.logger import AuditLogger, configure_logging, log_file_path

__all__ = ["AuditLogger", "configure_logging", "log_file_path"]
