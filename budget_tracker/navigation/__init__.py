"""Interactive terminal navigation package."""

from budget_tracker.navigation.console import ConsoleView
from budget_tracker.navigation.controller import NavigationController
from budget_tracker.navigation.frames import Frame, Transition, TransitionKind
from budget_tracker.navigation.keys import Key, TerminalKeyReader
from budget_tracker.navigation.menu import (
    MenuItem,
    MenuList,
    confirm,
    prompt_choice,
    select,
)

__all__ = [
    "ConsoleView",
    "Frame",
    "Key",
    "MenuItem",
    "MenuList",
    "NavigationController",
    "TerminalKeyReader",
    "Transition",
    "TransitionKind",
    "confirm",
    "prompt_choice",
    "select",
]
