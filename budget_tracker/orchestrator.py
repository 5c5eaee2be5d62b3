"""
Main Orchestrator for Budget Tracker

Wires settings, logging, the document store, the domain services and
the navigation controller together, and defines the startup flow:

1. Validate settings and route logging to the dated log file
2. Load the persisted document (a missing file is a fresh start)
3. Report integrity problems found on load
4. Hand the terminal to the navigation controller

DESIGN DECISION: Startup is the only place a failure ends the process.
A document that exists but cannot be read or parsed is never replaced
with an empty one; the process reports it and exits with code 1 so the
file can be inspected.
"""

import sys
from typing import NamedTuple, Optional

from pydantic import ValidationError

from budget_tracker.audit import AuditLogger, configure_logging
from budget_tracker.config import Settings, get_settings
from budget_tracker.models.document import LoadReport
from budget_tracker.navigation import ConsoleView, NavigationController
from budget_tracker.queries import ExpenseQueryExecutor
from budget_tracker.services import (
    BudgetService,
    CategoryService,
    DocumentLoadError,
    DocumentStore,
    ExpenseService,
    JsonFileBackend,
    StorageBackend,
    UserService,
)
from budget_tracker.session import Session


EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


class AppComponents(NamedTuple):
    store: DocumentStore
    controller: NavigationController
    audit_logger: AuditLogger


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
    view: Optional[ConsoleView] = None,
) -> AppComponents:
    """
    Factory function to create all application components.
    
    Args:
        settings: Settings to use; defaults to get_settings()
        backend: Storage backend; defaults to the JSON file from settings.
                 Pass an InMemoryBackend for testing without a file.
        view: Console view; defaults to the real terminal
    """
    settings = settings or get_settings()
    app_settings = settings.app
    
    audit_logger = AuditLogger()
    backend = backend or JsonFileBackend(settings.storage.data_file)
    store = DocumentStore(backend, audit_logger)
    
    view = view or ConsoleView(
        currency_symbol=app_settings.currency_symbol,
        progress_bar_width=app_settings.progress_bar_width,
    )
    
    controller = NavigationController(
        view=view,
        users=UserService(store, audit_logger),
        budgets=BudgetService(store, audit_logger),
        categories=CategoryService(store, audit_logger),
        expenses=ExpenseService(store, audit_logger),
        queries=ExpenseQueryExecutor(store),
        session=Session(),
        audit_logger=audit_logger,
    )
    
    return AppComponents(store, controller, audit_logger)


def report_integrity(view: ConsoleView, report: LoadReport) -> None:
    """Tell the operator about dangling references before the menus start."""
    if report.is_clean:
        return
    view.error(f"Found {len(report.integrity_issues)} integrity problem(s) in the data file:")
    for issue in report.integrity_issues:
        view.error(f"  - {issue.message}")
    view.pause()


def start(components: AppComponents) -> int:
    """Load the document and run the menus. Returns the process exit code."""
    try:
        report = components.store.load()
    except DocumentLoadError as e:
        components.audit_logger.log_error("DocumentLoadError", str(e))
        print(f"Budget Tracker could not start: {e}", file=sys.stderr)
        return EXIT_STARTUP_FAILURE
    
    controller = components.controller
    report_integrity(controller.view, report)
    
    try:
        return controller.run()
    except KeyboardInterrupt:
        controller.view.goodbye()
        return EXIT_OK


def main() -> int:
    try:
        settings = get_settings()
        configure_logging(settings.logging)
        components = create_app_components(settings)
    except (ValidationError, OSError) as e:
        print(f"Budget Tracker could not start: {e}", file=sys.stderr)
        return EXIT_STARTUP_FAILURE
    
    return start(components)


if __name__ == "__main__":
    sys.exit(main())
