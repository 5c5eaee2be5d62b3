"""
Console View

Everything the operator sees goes through ConsoleView, rendered with rich.
Key and line input are injectable so flows can be driven by a script.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from budget_tracker.models.entities import Budget, format_money
from budget_tracker.models.outcome import BudgetSummary, Outcome
from budget_tracker.navigation.keys import Key, TerminalKeyReader
from budget_tracker.validation import format_date


BORDER = "*" * 50
WELCOME_LINES = (
    "*          Welcome to Budget Tracker!            *",
    "*        Take control of your finances!          *",
)
NO_ACTIVE_USER = "No active user found. Select or create a user."
NAVIGATION_HINT = "Use ⬆ and ⬇ to navigate and key [green]Enter/Return[/green] to select."
SELECTED_MARKER = "✅  "
UNSELECTED_MARKER = "    "
RETURN_TO_MENU = "\nPress any key to return to the menu..."

KeyReader = Callable[[], Key]
LineReader = Callable[[str], str]


class ConsoleView:
    """
    Renders banners, menus, tables and messages.
    
    Args:
        console: rich Console to draw on (a recording or file-backed one in tests)
        key_reader: returns the next Key; defaults to the raw terminal
        line_reader: returns one line of text for a prompt; defaults to console.input
    """
    
    def __init__(
        self,
        console: Optional[Console] = None,
        key_reader: Optional[KeyReader] = None,
        line_reader: Optional[LineReader] = None,
        currency_symbol: str = "$",
        progress_bar_width: int = 50,
    ):
        self.console = console or Console(highlight=False)
        self._read_key = key_reader or TerminalKeyReader()
        self._read_line = line_reader or self._console_line
        self.currency_symbol = currency_symbol
        self.progress_bar_width = progress_bar_width
    
    def _console_line(self, prompt: str) -> str:
        self.console.print(prompt, markup=False)
        return self.console.input()
    
    # =========================================================================
    # INPUT
    # =========================================================================
    
    def read_key(self) -> Key:
        return self._read_key()
    
    def ask(self, prompt: str) -> str:
        """One line of free text; never None."""
        return self._read_line(prompt) or ""
    
    def pause(self) -> None:
        self.console.print(RETURN_TO_MENU, markup=False)
        self.read_key()
    
    # =========================================================================
    # SCREEN
    # =========================================================================
    
    def fresh_screen(self, active_user_name: Optional[str], today: Optional[date] = None) -> None:
        """Clear, then draw the welcome banner and the navigation hint."""
        self.console.clear()
        self.banner(active_user_name, today)
        self.console.print(f"\n{NAVIGATION_HINT}")
    
    def banner(self, active_user_name: Optional[str], today: Optional[date] = None) -> None:
        today = today or date.today()
        lines = [BORDER, *WELCOME_LINES, BORDER, "", f"Today is: {today:%A, %d %B %Y}"]
        if active_user_name:
            lines.append(f"Active User: {active_user_name}")
        else:
            lines.append(NO_ACTIVE_USER)
        lines.append(BORDER)
        self.console.print(Text("\n".join(lines), style="blue"))
    
    def render_menu(
        self,
        labels: Sequence[str],
        index: int,
        title: Optional[str] = None,
        header: Optional[str] = None,
    ) -> None:
        if title:
            self.console.print(f"\n[bold]{escape(title)}[/bold]")
        if header:
            self.console.print("=" * 90)
            self.console.print(header, markup=False)
            self.console.print("-" * 90)
        for i, label in enumerate(labels):
            if i == index:
                self.console.print(Text(SELECTED_MARKER) + Text(label, style="green"))
            else:
                self.console.print(Text(UNSELECTED_MARKER + label))
    
    # =========================================================================
    # MESSAGES
    # =========================================================================
    
    def success(self, message: str) -> None:
        self.console.print(Text(message, style="green"))
    
    def error(self, message: str) -> None:
        self.console.print(Text(message, style="red"))
    
    def info(self, message: str) -> None:
        self.console.print(message, markup=False)
    
    def outcome(self, result: Outcome) -> None:
        """Show an operation's message and wait for a key."""
        if result.success:
            self.success(result.message)
        else:
            self.error(result.message)
        self.pause()
    
    def message_and_wait(self, message: str) -> None:
        self.info(message)
        self.pause()
    
    # =========================================================================
    # BUDGET DISPLAYS
    # =========================================================================
    
    def money(self, amount: Decimal) -> str:
        return format_money(amount, self.currency_symbol)
    
    def budget_totals(self, budget: Budget, spent: Decimal, remaining: Decimal) -> None:
        self.console.print(Text("=" * 90, style="cyan"))
        self.console.print(Text(f" Budget Details - {budget.name} ", style="cyan"))
        self.console.print(Text("=" * 90, style="cyan"))
        self.info(f"Total Amount: {self.money(budget.amount)}")
        self.info(f"Amount Used:  {self.money(spent)}")
        self.info(f"Remaining Balance: {self.money(remaining)}\n")
    
    def progress_bar(self, percent: Decimal) -> Text:
        width = self.progress_bar_width
        filled = max(0, min(width, int(percent / 100 * width)))
        bar = Text("Progress: [")
        bar.append("#" * filled, style="green")
        bar.append(" " * (width - filled))
        bar.append(f"] {percent}%")
        return bar
    
    def budget_summary(self, summary: BudgetSummary) -> None:
        self.console.print(Text("=" * 85, style="cyan"))
        self.console.print(Text(f" Budget Summary - {summary.name} ", style="cyan"))
        self.console.print(Text("=" * 85, style="cyan"))
        
        self.info(f"\nStart Date: {format_date(summary.start_date)}")
        self.info(f"End Date:   {format_date(summary.end_date)}")
        self.info(f"Total Amount: {self.money(summary.amount)}")
        self.info(f"Amount Used:  {self.money(summary.total_spent)} ({summary.percent_used}% of total)")
        remaining = Text(
            f"Remaining Balance: {self.money(summary.remaining)} "
            f"({summary.percent_remaining}% of total)\n",
            style="red" if summary.is_overspent else "",
        )
        self.console.print(remaining)
        self.info("-" * 85)
        
        self.console.print(self.progress_bar(summary.percent_used))
        
        self.info("\nExpenses Breakdown by Category:")
        self.info("-" * 85)
        self.info(f"{'Category':<30} | {'Total Expense':<15}")
        self.info("-" * 85)
        for entry in summary.category_totals:
            self.info(f"{entry.category_name:<30} | {self.money(entry.total)}")
        self.info("-" * 85)
    
    def goodbye(self) -> None:
        self.success("Good Bye!")
