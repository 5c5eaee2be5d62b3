"""
Shared fixtures.

Everything runs against an InMemoryBackend; nothing touches the real
data file or the real terminal.
"""

import io
from datetime import date
from decimal import Decimal
from typing import Iterable

import pytest
from rich.console import Console

from budget_tracker.audit import AuditLogger
from budget_tracker.navigation import ConsoleView, Key, NavigationController
from budget_tracker.queries import ExpenseQueryExecutor
from budget_tracker.services import (
    BudgetService,
    CategoryService,
    DocumentStore,
    ExpenseService,
    InMemoryBackend,
    UserService,
)
from budget_tracker.session import Session


class ScriptExhausted(AssertionError):
    """The flow asked for more input than the test scripted."""


class ScriptedInput:
    """Feeds pre-recorded keys and lines to a ConsoleView."""
    
    def __init__(self, keys: Iterable[Key] = (), lines: Iterable[str] = ()):
        self.keys = list(keys)
        self.lines = list(lines)
        self.prompts: list[str] = []
    
    def read_key(self) -> Key:
        if not self.keys:
            raise ScriptExhausted("no scripted key left")
        return self.keys.pop(0)
    
    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise ScriptExhausted(f"no scripted line left for prompt {prompt!r}")
        return self.lines.pop(0)


def make_view(script: ScriptedInput) -> tuple[ConsoleView, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, force_terminal=False, color_system=None)
    view = ConsoleView(
        console=console,
        key_reader=script.read_key,
        line_reader=script.read_line,
    )
    return view, buffer


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def store(backend, audit_logger) -> DocumentStore:
    store = DocumentStore(backend, audit_logger)
    store.load()
    return store


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def users(store, audit_logger) -> UserService:
    return UserService(store, audit_logger)


@pytest.fixture
def budgets(store, audit_logger) -> BudgetService:
    return BudgetService(store, audit_logger)


@pytest.fixture
def categories(store, audit_logger) -> CategoryService:
    return CategoryService(store, audit_logger)


@pytest.fixture
def expenses(store, audit_logger) -> ExpenseService:
    return ExpenseService(store, audit_logger)


@pytest.fixture
def june(users, budgets, categories, expenses):
    """alice with a June 2024 budget of 500, a Food category and one 20.00 lunch."""
    alice = users.create_user("alice", "Alice A").data
    budget = budgets.create_budget(
        alice.id, "June", date(2024, 6, 1), date(2024, 6, 30), Decimal("500"),
    ).data
    food = categories.create_category("Food").data
    lunch = expenses.add_expense(
        budget.id, food.id, "Lunch", date(2024, 6, 15), Decimal("20"),
    ).data
    return alice, budget, food, lunch


@pytest.fixture
def make_controller(store, audit_logger):
    """Build a controller whose view is driven by a ScriptedInput."""
    
    def factory(script: ScriptedInput, session: Session = None):
        view, buffer = make_view(script)
        controller = NavigationController(
            view=view,
            users=UserService(store, audit_logger),
            budgets=BudgetService(store, audit_logger),
            categories=CategoryService(store, audit_logger),
            expenses=ExpenseService(store, audit_logger),
            queries=ExpenseQueryExecutor(store),
            session=session or Session(),
            audit_logger=audit_logger,
            today=lambda: date(2024, 6, 15),
        )
        return controller, buffer
    
    return factory
