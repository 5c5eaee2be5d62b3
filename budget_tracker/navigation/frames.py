"""
Navigation Frames

DESIGN DECISION: Navigation is an explicit stack of frames, not recursion.

Each frame draws one menu, handles the choice and returns a Transition
telling the controller what to do with the stack:

- stay:     run the same frame again (after an action finished)
- push:     descend one level
- pop:      go back exactly one level; the action that led here is NOT re-run
- replace:  swap the current frame (e.g. user setup -> main menu)
- exit:     leave the application

Actions that take free text (create, edit) run inside the frame that
offers them and end with `stay`.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from budget_tracker.models.entities import Budget, Category, Expense
from budget_tracker.navigation.menu import MenuItem, MenuList, confirm, prompt_choice, select
from budget_tracker.queries import ExpenseFilter, ExpenseQuery, SortKey
from budget_tracker.validation import (
    InputFormatError,
    parse_amount,
    parse_date,
    parse_row_id,
)

if TYPE_CHECKING:
    from budget_tracker.navigation.controller import NavigationController


# Menu labels
ADD_USER = "Add User"
SELECT_USER = "Select Existing User"
BUDGETS = "Budgets"
MANAGE_CATEGORIES = "Manage Categories"
SWITCH_USER = "Switch User"
EDIT_USER = "Edit User"
DELETE_USER = "Delete User"
EXIT_APPLICATION = "Exit Application"
VIEW_BUDGETS = "View Budgets"
CREATE_BUDGET = "Create Budget"
ADD_EXPENSE = "Add Expense"
VIEW_EXPENSES = "View Expenses"
SET_BUDGET_AMOUNT = "Set Budget Amount"
VIEW_BUDGET_SUMMARY = "View Budget Summary"
DELETE_BUDGET = "Delete Budget"
EDIT_EXPENSE = "Edit Expense"
DELETE_EXPENSE = "Delete Expense"
VIEW_CATEGORIES = "View Categories"
CREATE_CATEGORY = "Create Category"
EDIT_CATEGORY = "Edit Category"
DELETE_CATEGORY = "Delete Category"

USER_SETUP_ITEMS = [ADD_USER, SELECT_USER, EXIT_APPLICATION]
MAIN_MENU_ITEMS = [BUDGETS, MANAGE_CATEGORIES, SWITCH_USER, EDIT_USER, DELETE_USER, EXIT_APPLICATION]
BUDGETS_MENU_ITEMS = [VIEW_BUDGETS, CREATE_BUDGET]
SELECTED_BUDGET_ITEMS = [ADD_EXPENSE, VIEW_EXPENSES, SET_BUDGET_AMOUNT, VIEW_BUDGET_SUMMARY, DELETE_BUDGET]
SELECTED_EXPENSE_ITEMS = [EDIT_EXPENSE, DELETE_EXPENSE]
CATEGORIES_MENU_ITEMS = [VIEW_CATEGORIES, CREATE_CATEGORY]
SELECTED_CATEGORY_ITEMS = [EDIT_CATEGORY, DELETE_CATEGORY]

# Table headers shown above selection lists
USERS_HEADER = f"    {'ID':<5} | {'Username':<15} | {'Name':<20}"
BUDGETS_HEADER = (
    f"    {'ID':<5} | {'Name':<30} | {'Start Date':<12} | {'End Date':<12} | {'Amount':<10}"
)
CATEGORIES_HEADER = f"    {'ID':<5} | {'Name':<30}"
EXPENSES_HEADER = (
    f"    {'ID':<5} | {'Description':<30} | {'Category':<20} | {'Date':<12} | {'Amount':<10}"
)

# Prompts
USERNAME_PROMPT = "Enter username:"
NAME_PROMPT = "Enter name:"
NEW_NAME_PROMPT = "Enter new name:"
DESCRIPTION_PROMPT = "Enter description:"
DATE_PROMPT = "Enter date(dd-mm-yyyy):"
START_DATE_PROMPT = "Enter start date(dd-mm-yyyy):"
END_DATE_PROMPT = "Enter end date(dd-mm-yyyy):"
AMOUNT_PROMPT = "Enter amount:"
CATEGORY_PROMPT = "Select Category:"
SKIP_UPDATE = "Leave fields empty to skip update"

DELETE_USER_PROMPT = "Are you sure you want to delete the current user? (Y/N): "
DELETE_BUDGET_PROMPT = "Are you sure you want to delete this budget? (Y/N): "
DELETE_EXPENSE_PROMPT = "Are you sure you want to delete this expense? (Y/N): "
DELETE_CATEGORY_PROMPT = "Are you sure you want to delete this category? (Y/N): "
DELETION_CANCELED = "Deletion canceled."

SORT_OPTIONS = [
    "\nSelect sorting option:",
    "1. Sort by Date",
    "2. Sort by Amount",
    "3. Sort by Category",
    "4. No sorting",
    "5. ← Go Back",
]
SORT_CHOICES = {"1": SortKey.DATE, "2": SortKey.AMOUNT, "3": SortKey.CATEGORY, "4": SortKey.NONE, "5": None}

FILTER_QUESTION = "\nDo you want to filter expenses?"
FILTER_OPTIONS = [
    "Select filter criteria:",
    "1. Filter by Date Range",
    "2. Filter by Category",
    "3. No filtering",
    "4. ← Go Back",
]
INVALID_FILTER_DATES = "Invalid date format. Returning all expenses."


class TransitionKind(str, Enum):
    STAY = "stay"
    PUSH = "push"
    POP = "pop"
    REPLACE = "replace"
    EXIT = "exit"


class Transition:
    """What the controller should do with the frame stack next."""
    
    __slots__ = ("kind", "frame")
    
    def __init__(self, kind: TransitionKind, frame: Optional["Frame"] = None):
        self.kind = kind
        self.frame = frame
    
    def __repr__(self) -> str:
        target = f", {type(self.frame).__name__}" if self.frame else ""
        return f"Transition({self.kind.value}{target})"
    
    @classmethod
    def stay(cls) -> "Transition":
        return cls(TransitionKind.STAY)
    
    @classmethod
    def push(cls, frame: "Frame") -> "Transition":
        return cls(TransitionKind.PUSH, frame)
    
    @classmethod
    def pop(cls) -> "Transition":
        return cls(TransitionKind.POP)
    
    @classmethod
    def replace(cls, frame: "Frame") -> "Transition":
        return cls(TransitionKind.REPLACE, frame)
    
    @classmethod
    def exit(cls) -> "Transition":
        return cls(TransitionKind.EXIT)


class Frame:
    """One level of navigation."""
    
    def run(self, ctl: "NavigationController") -> Transition:
        raise NotImplementedError
    
    def _choose(self, ctl: "NavigationController", labels: list[str], **kwargs) -> Optional[str]:
        ctl.refresh()
        item = select(ctl.view, MenuList.of(labels, **kwargs))
        return item.value if item else None


# =============================================================================
# SHARED ENTRY STEPS
# =============================================================================

def choose_row_id(
    ctl: "NavigationController",
    rows: list[str],
    header: str,
    title: Optional[str] = None,
) -> Optional[int]:
    """Pick a table row and read its id back; None if backed out or empty."""
    ctl.refresh()
    menu = MenuList(
        items=[MenuItem(label=row) for row in rows],
        title=title,
        header=header,
    )
    item = select(ctl.view, menu)
    return parse_row_id(item.label) if item else None


def choose_category(ctl: "NavigationController") -> Optional[int]:
    rows = [c.table_row() for c in ctl.categories.list_categories()]
    return choose_row_id(ctl, rows, CATEGORIES_HEADER, title=CATEGORY_PROMPT)


def create_user(ctl: "NavigationController") -> bool:
    """Ask for a new user and make them active. True on success."""
    username = ctl.view.ask(USERNAME_PROMPT)
    name = ctl.view.ask(NAME_PROMPT)
    result = ctl.users.create_user(username, name)
    if result.success:
        ctl.users.set_active_user(ctl.session, result.data.id)
    ctl.view.outcome(result)
    return result.success


def select_user(ctl: "NavigationController") -> bool:
    """Make an existing user active. True if one was chosen."""
    rows = [u.table_row() for u in ctl.users.list_users()]
    user_id = choose_row_id(ctl, rows, USERS_HEADER)
    if user_id is None:
        return False
    result = ctl.users.set_active_user(ctl.session, user_id)
    if not result.success:
        ctl.view.outcome(result)
    return result.success


# =============================================================================
# USERS AND MAIN MENU
# =============================================================================

class UserSetupFrame(Frame):
    """Shown until there is an active user."""
    
    def run(self, ctl: "NavigationController") -> Transition:
        choice = self._choose(ctl, USER_SETUP_ITEMS, allow_back=False)
        
        if choice == ADD_USER and create_user(ctl):
            return Transition.replace(MainMenuFrame())
        if choice == SELECT_USER and select_user(ctl):
            return Transition.replace(MainMenuFrame())
        if choice == EXIT_APPLICATION:
            return Transition.exit()
        return Transition.stay()


class MainMenuFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        if not ctl.session.has_active_user:
            return Transition.replace(UserSetupFrame())
        
        choice = self._choose(ctl, MAIN_MENU_ITEMS, allow_back=False)
        
        if choice == BUDGETS:
            return Transition.push(BudgetsMenuFrame())
        if choice == MANAGE_CATEGORIES:
            return Transition.push(CategoriesMenuFrame())
        if choice == SWITCH_USER:
            select_user(ctl)
        elif choice == EDIT_USER:
            ctl.view.outcome(ctl.users.update_user(ctl.session, ctl.view.ask(NEW_NAME_PROMPT)))
        elif choice == DELETE_USER:
            return self._delete_user(ctl)
        elif choice == EXIT_APPLICATION:
            return Transition.exit()
        return Transition.stay()
    
    def _delete_user(self, ctl: "NavigationController") -> Transition:
        if not confirm(ctl.view, DELETE_USER_PROMPT):
            ctl.view.message_and_wait(DELETION_CANCELED)
            return Transition.stay()
        
        result = ctl.users.delete_user(ctl.session)
        ctl.view.outcome(result)
        if not ctl.session.has_active_user:
            return Transition.replace(UserSetupFrame())
        return Transition.stay()


# =============================================================================
# BUDGETS
# =============================================================================

class BudgetsMenuFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        choice = self._choose(ctl, BUDGETS_MENU_ITEMS)
        
        if choice is None:
            return Transition.pop()
        if choice == VIEW_BUDGETS:
            return Transition.push(BudgetSelectionFrame())
        if choice == CREATE_BUDGET:
            self._create_budget(ctl)
        return Transition.stay()
    
    @staticmethod
    def _create_budget(ctl: "NavigationController") -> None:
        view = ctl.view
        name = view.ask(NAME_PROMPT)
        start_text = view.ask(START_DATE_PROMPT)
        end_text = view.ask(END_DATE_PROMPT)
        amount_text = view.ask(AMOUNT_PROMPT)
        
        try:
            start_date = parse_date(start_text, "start date")
            end_date = parse_date(end_text, "end date")
            amount = parse_amount(amount_text)
        except InputFormatError as e:
            view.error(e.message)
            view.pause()
            return
        
        view.outcome(ctl.budgets.create_budget(
            ctl.session.active_user_id, name, start_date, end_date, amount,
        ))


class BudgetSelectionFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        budgets = ctl.budgets.list_budgets_for_user(ctl.session.active_user_id)
        rows = [b.table_row(ctl.view.currency_symbol) for b in budgets]
        budget_id = choose_row_id(ctl, rows, BUDGETS_HEADER)
        if budget_id is None:
            return Transition.pop()
        
        result = ctl.budgets.select_budget(ctl.session, budget_id)
        if not result.success:
            ctl.view.outcome(result)
            return Transition.stay()
        return Transition.push(SelectedBudgetFrame())


class SelectedBudgetFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        budget = ctl.budgets.get_selected_budget(ctl.session)
        if budget is None:
            ctl.view.message_and_wait("Budget not found.")
            return Transition.pop()
        
        choice = self._choose(ctl, SELECTED_BUDGET_ITEMS, title=budget.name)
        
        if choice is None:
            return Transition.pop()
        if choice == ADD_EXPENSE:
            self._add_expense(ctl, budget)
        elif choice == VIEW_EXPENSES:
            return Transition.push(ExpenseListFrame(budget.id))
        elif choice == SET_BUDGET_AMOUNT:
            ctl.view.info(SKIP_UPDATE)
            ctl.view.outcome(ctl.budgets.update_budget_amount(budget.id, ctl.view.ask(AMOUNT_PROMPT)))
        elif choice == VIEW_BUDGET_SUMMARY:
            self._show_summary(ctl, budget)
        elif choice == DELETE_BUDGET:
            return self._delete_budget(ctl, budget)
        return Transition.stay()
    
    @staticmethod
    def _add_expense(ctl: "NavigationController", budget: Budget) -> None:
        view = ctl.view
        description = view.ask(DESCRIPTION_PROMPT)
        rejected = ctl.expenses.check_description(description)
        if rejected:
            view.outcome(rejected)
            return
        
        try:
            day = parse_date(view.ask(DATE_PROMPT))
        except InputFormatError as e:
            view.message_and_wait(e.message)
            return
        
        category_id = choose_category(ctl)
        if category_id is None:
            return
        
        try:
            amount = parse_amount(view.ask(AMOUNT_PROMPT))
        except InputFormatError as e:
            view.message_and_wait(e.message)
            return
        
        view.outcome(ctl.expenses.add_expense(budget.id, category_id, description, day, amount))
    
    @staticmethod
    def _show_summary(ctl: "NavigationController", budget: Budget) -> None:
        result = ctl.budgets.get_budget_summary(budget.id)
        if not result.success:
            ctl.view.outcome(result)
            return
        ctl.refresh()
        ctl.view.budget_summary(result.data)
        ctl.view.pause()
    
    @staticmethod
    def _delete_budget(ctl: "NavigationController", budget: Budget) -> Transition:
        if not confirm(ctl.view, DELETE_BUDGET_PROMPT):
            ctl.view.message_and_wait(DELETION_CANCELED)
            return Transition.stay()
        
        result = ctl.budgets.delete_budget(ctl.session, budget.id)
        ctl.view.outcome(result)
        return Transition.pop() if result.success else Transition.stay()


# =============================================================================
# EXPENSES
# =============================================================================

def ask_sort_key(ctl: "NavigationController") -> Optional[SortKey]:
    """None means go back."""
    for line in SORT_OPTIONS:
        ctl.view.info(line)
    choice = prompt_choice(ctl.view, "Enter your choice (1-5): ", list(SORT_CHOICES))
    return SORT_CHOICES[choice]


def ask_filter(ctl: "NavigationController") -> Optional[ExpenseFilter]:
    """None means go back."""
    view = ctl.view
    view.info(FILTER_QUESTION)
    answer = prompt_choice(view, "Enter your choice (Y/N/B): ", ["Y", "N", "B"])
    if answer == "B":
        return None
    if answer == "N":
        return ExpenseFilter()
    
    for line in FILTER_OPTIONS:
        view.info(line)
    choice = prompt_choice(view, "Enter your choice (1-4): ", ["1", "2", "3", "4"])
    
    if choice == "1":
        start_text = view.ask(START_DATE_PROMPT)
        end_text = view.ask(END_DATE_PROMPT)
        try:
            start_date = parse_date(start_text, "start date")
            end_date = parse_date(end_text, "end date")
        except InputFormatError:
            view.message_and_wait(INVALID_FILTER_DATES)
            return ExpenseFilter()
        return ExpenseFilter.date_range(start_date, end_date)
    if choice == "2":
        category_id = choose_category(ctl)
        return ExpenseFilter.category(category_id) if category_id is not None else None
    if choice == "3":
        return ExpenseFilter()
    return None


class ExpenseListFrame(Frame):
    """
    Sorted and filtered expenses of one budget.
    
    Sort and filter are asked once, on entry. Coming back from an expense
    re-runs the same query so edits and deletes show up.
    """
    
    def __init__(self, budget_id: int):
        self.budget_id = budget_id
        self.query: Optional[ExpenseQuery] = None
    
    def run(self, ctl: "NavigationController") -> Transition:
        budget = ctl.budgets.get_budget(self.budget_id)
        if budget is None:
            ctl.view.message_and_wait("Budget not found.")
            return Transition.pop()
        
        if self.query is None:
            ctl.refresh()
            sort_key = ask_sort_key(ctl)
            if sort_key is None:
                return Transition.pop()
            expense_filter = ask_filter(ctl)
            if expense_filter is None:
                return Transition.pop()
            self.query = ExpenseQuery(budget_id=budget.id, sort_key=sort_key, filter=expense_filter)
        
        result = ctl.queries.execute(self.query)
        
        ctl.refresh()
        spent = ctl.budgets.total_spent(budget.id)
        ctl.view.budget_totals(budget, spent, budget.amount - spent)
        ctl.view.info(
            f"Showing {result.result_count} expense(s) totalling {ctl.view.money(result.total)}"
        )
        rows = [e.table_row(ctl.view.currency_symbol) for e in result.expenses]
        menu = MenuList(
            items=[MenuItem(label=row) for row in rows],
            title=result.query_description,
            header=EXPENSES_HEADER,
        )
        item = select(ctl.view, menu)
        if item is None:
            return Transition.pop()
        
        expense_id = parse_row_id(item.label)
        return Transition.push(SelectedExpenseFrame(expense_id))


class SelectedExpenseFrame(Frame):
    
    def __init__(self, expense_id: int):
        self.expense_id = expense_id
    
    def run(self, ctl: "NavigationController") -> Transition:
        expense = ctl.expenses.get_expense(self.expense_id)
        if expense is None:
            ctl.view.message_and_wait("Expense not found.")
            return Transition.pop()
        
        choice = self._choose(ctl, SELECTED_EXPENSE_ITEMS, title=expense.description)
        
        if choice is None:
            return Transition.pop()
        if choice == EDIT_EXPENSE:
            self._edit_expense(ctl, expense)
        elif choice == DELETE_EXPENSE:
            if not confirm(ctl.view, DELETE_EXPENSE_PROMPT):
                ctl.view.message_and_wait(DELETION_CANCELED)
                return Transition.stay()
            result = ctl.expenses.delete_expense(expense.id)
            ctl.view.outcome(result)
            if result.success:
                return Transition.pop()
        return Transition.stay()
    
    @staticmethod
    def _edit_expense(ctl: "NavigationController", expense: Expense) -> None:
        view = ctl.view
        view.info(SKIP_UPDATE)
        description = view.ask(DESCRIPTION_PROMPT)
        date_text = view.ask(DATE_PROMPT)
        # Backing out of the category list keeps the current category
        category_id = choose_category(ctl)
        amount_text = view.ask(AMOUNT_PROMPT)
        
        view.outcome(ctl.expenses.update_expense(
            expense.id, category_id, description, date_text, amount_text,
        ))


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoriesMenuFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        choice = self._choose(ctl, CATEGORIES_MENU_ITEMS)
        
        if choice is None:
            return Transition.pop()
        if choice == VIEW_CATEGORIES:
            return Transition.push(CategorySelectionFrame())
        if choice == CREATE_CATEGORY:
            ctl.view.outcome(ctl.categories.create_category(ctl.view.ask(NAME_PROMPT)))
        return Transition.stay()


class CategorySelectionFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        rows = [c.table_row() for c in ctl.categories.list_categories()]
        category_id = choose_row_id(ctl, rows, CATEGORIES_HEADER)
        if category_id is None:
            return Transition.pop()
        
        result = ctl.categories.select_category(ctl.session, category_id)
        if not result.success:
            ctl.view.outcome(result)
            return Transition.stay()
        return Transition.push(SelectedCategoryFrame())


class SelectedCategoryFrame(Frame):
    
    def run(self, ctl: "NavigationController") -> Transition:
        selected = ctl.session.selected_category
        category: Optional[Category] = (
            ctl.categories.get_category(selected.id) if selected else None
        )
        if category is None:
            ctl.session.clear_category()
            ctl.view.message_and_wait("Category not found.")
            return Transition.pop()
        
        choice = self._choose(ctl, SELECTED_CATEGORY_ITEMS, title=category.name)
        
        if choice is None:
            return Transition.pop()
        if choice == EDIT_CATEGORY:
            result = ctl.categories.update_category(category.id, ctl.view.ask(NEW_NAME_PROMPT))
            if result.success:
                ctl.categories.select_category(ctl.session, category.id)
            ctl.view.outcome(result)
        elif choice == DELETE_CATEGORY:
            if not confirm(ctl.view, DELETE_CATEGORY_PROMPT):
                ctl.view.message_and_wait(DELETION_CANCELED)
                return Transition.stay()
            result = ctl.categories.delete_category(ctl.session)
            ctl.view.outcome(result)
            if result.success:
                return Transition.pop()
        return Transition.stay()
