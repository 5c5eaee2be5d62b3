"""
Menu primitives.

- select(): circular single-key list selection
- prompt_choice(): line input re-prompted until it is one of a fixed set of tokens
- confirm(): Y/N confirmation; anything but Y is a no
"""

from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from budget_tracker.navigation.console import ConsoleView
from budget_tracker.navigation.keys import Key

BACK_LABEL = "← Back"
NO_MENU_ITEMS = "No menu items available."


class MenuItem(BaseModel):
    """One selectable row. `value` carries whatever the row stands for (an action, an id)."""
    
    label: str
    value: Any = None


class MenuList(BaseModel):
    """
    A list the operator picks one row from.
    
    With `allow_back`, a "← Back" row is appended and the cancel key
    also backs out.
    """
    
    items: list[MenuItem] = Field(default_factory=list)
    title: Optional[str] = None
    header: Optional[str] = None
    allow_back: bool = True
    
    @classmethod
    def of(cls, labels: Sequence[str], **kwargs) -> "MenuList":
        """Menu whose item values are the labels themselves."""
        return cls(items=[MenuItem(label=label, value=label) for label in labels], **kwargs)
    
    def rows(self) -> list[MenuItem]:
        if self.allow_back:
            return [*self.items, MenuItem(label=BACK_LABEL, value=None)]
        return list(self.items)


def select(view: ConsoleView, menu: MenuList) -> Optional[MenuItem]:
    """
    Let the operator pick a row.
    
    Up/Down move the highlight and wrap around at either end. Returns the
    chosen item, or None if the operator backed out. An empty menu shows
    a notice and returns None without waiting for keys.
    """
    if not menu.items:
        view.message_and_wait(NO_MENU_ITEMS)
        return None
    
    rows = menu.rows()
    index = 0
    
    while True:
        view.render_menu([row.label for row in rows], index, menu.title, menu.header)
        key = view.read_key()
        
        if key == Key.DOWN:
            index = (index + 1) % len(rows)
        elif key == Key.UP:
            index = (index - 1) % len(rows)
        elif key == Key.ENTER:
            if menu.allow_back and index == len(menu.items):
                return None
            chosen = rows[index]
            view.success(f"You selected {chosen.label}")
            return chosen
        elif key == Key.BACK and menu.allow_back:
            return None


def prompt_choice(
    view: ConsoleView,
    prompt: str,
    choices: Sequence[str],
    error_message: Optional[str] = None,
) -> str:
    """
    Ask until the answer is one of `choices` (case-insensitive).
    
    Returns the matching choice as given in `choices`.
    """
    by_token = {choice.upper(): choice for choice in choices}
    error_message = error_message or (
        f"Invalid choice. Please enter one of: {', '.join(choices)}."
    )
    
    while True:
        answer = view.ask(prompt).strip().upper()
        if answer in by_token:
            return by_token[answer]
        view.error(error_message)


def confirm(view: ConsoleView, prompt: str) -> bool:
    return view.ask(prompt).strip().upper() == "Y"
