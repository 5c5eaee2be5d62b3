"""
Operator Input Parsing

Everything typed at a prompt arrives as text. These helpers turn it into
dates, amounts and ids, or raise InputFormatError with a message that can
be shown as-is.

Dates are always dd-mm-yyyy. Amounts use '.' as the decimal separator.
"""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional


DATE_FORMAT = "%d-%m-%Y"
DATE_HINT = "dd-mm-yyyy"

# Amounts are kept to the cent, and with at most 15 significant digits
# they survive the JSON number on disk unchanged.
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999999.99")

_DATE_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_ROW_ID_PATTERN = re.compile(r"^\s*(\d+)")


class InputFormatError(ValueError):
    """Operator input could not be parsed."""
    
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def is_blank(text: Optional[str]) -> bool:
    return text is None or not text.strip()


def parse_date(text: Optional[str], field: str = "date") -> date:
    """
    Parse a dd-mm-yyyy date.
    
    Raises:
        InputFormatError: If the text is not a real date in that exact format
    """
    value = (text or "").strip()
    if not _DATE_PATTERN.match(value):
        raise InputFormatError(field, f"Invalid {field} format. Please use {DATE_HINT} format.")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InputFormatError(field, f"Invalid {field}: {value} is not a calendar date.")


def parse_amount(text: Optional[str], field: str = "amount") -> Decimal:
    """
    Parse a decimal amount, rounded half-up to the cent.
    
    Raises:
        InputFormatError: If the text is not a finite number or is
                          larger than MAX_AMOUNT
    """
    value = (text or "").strip()
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise InputFormatError(field, f"Invalid {field} format. Please enter a valid number.")
    if not amount.is_finite():
        raise InputFormatError(field, f"Invalid {field} format. Please enter a valid number.")
    if abs(amount) > MAX_AMOUNT:
        raise InputFormatError(field, f"Invalid {field}. Amounts cannot exceed {MAX_AMOUNT:,}.")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_optional_date(text: Optional[str], field: str = "date") -> Optional[date]:
    """Blank means "keep the current value" and returns None."""
    return None if is_blank(text) else parse_date(text, field)


def parse_optional_amount(text: Optional[str], field: str = "amount") -> Optional[Decimal]:
    """Blank means "keep the current value" and returns None."""
    return None if is_blank(text) else parse_amount(text, field)


def parse_row_id(label: Optional[str]) -> Optional[int]:
    """
    Read back the id a selection row starts with.
    
    "12    | Groceries" -> 12; rows without a leading number -> None.
    """
    if not label:
        return None
    match = _ROW_ID_PATTERN.match(label)
    return int(match.group(1)) if match else None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)
