"""
Navigation Controller

Owns the session and the frame stack and drives the interactive loop.

GUARANTEES:
- Back pops exactly one frame; the stack depth is the menu depth
- A storage failure is shown to the operator and the loop continues
- Exit prints a farewell and returns exit code 0
"""

from datetime import date
from typing import Callable, Optional

from budget_tracker.audit import AuditLogger
from budget_tracker.navigation.console import ConsoleView
from budget_tracker.navigation.frames import (
    Frame,
    MainMenuFrame,
    Transition,
    TransitionKind,
    UserSetupFrame,
)
from budget_tracker.queries import ExpenseQueryExecutor
from budget_tracker.services import (
    BudgetService,
    CategoryService,
    ExpenseService,
    StorageError,
    UserService,
)
from budget_tracker.session import Session


class NavigationController:
    """
    Runs frames until one asks to exit.
    
    Frames reach the services, the session and the view through the
    controller; none of them keeps state of its own beyond ids.
    """
    
    def __init__(
        self,
        view: ConsoleView,
        users: UserService,
        budgets: BudgetService,
        categories: CategoryService,
        expenses: ExpenseService,
        queries: ExpenseQueryExecutor,
        session: Optional[Session] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.view = view
        self.users = users
        self.budgets = budgets
        self.categories = categories
        self.expenses = expenses
        self.queries = queries
        self.session = session or Session()
        self._audit = audit_logger or AuditLogger()
        self._today = today or date.today
        self._stack: list[Frame] = []
    
    @property
    def depth(self) -> int:
        return len(self._stack)
    
    def refresh(self) -> None:
        """Redraw the banner for the current active user."""
        self.view.fresh_screen(self.session.active_user_name, self._today())
    
    def run(self, initial: Optional[Frame] = None) -> int:
        if initial is None:
            initial = MainMenuFrame() if self.session.has_active_user else UserSetupFrame()
        self._stack = [initial]
        
        while self._stack:
            frame = self._stack[-1]
            transition = self._step(frame)
            
            if transition.kind == TransitionKind.EXIT:
                break
            if transition.kind == TransitionKind.PUSH:
                self._stack.append(transition.frame)
            elif transition.kind == TransitionKind.POP:
                self._stack.pop()
            elif transition.kind == TransitionKind.REPLACE:
                self._stack[-1] = transition.frame
        
        self.view.goodbye()
        return 0
    
    def _step(self, frame: Frame) -> Transition:
        try:
            return frame.run(self)
        except StorageError as e:
            self._audit.log_error(type(e).__name__, str(e), {"frame": type(frame).__name__})
            self.view.error(str(e))
            self.view.pause()
            return Transition.stay()
