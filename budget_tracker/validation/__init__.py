"""Validation and operator-input parsing package."""

from budget_tracker.validation.parsing import (
    DATE_FORMAT,
    DATE_HINT,
    InputFormatError,
    format_date,
    is_blank,
    parse_amount,
    parse_date,
    parse_optional_amount,
    parse_optional_date,
    parse_row_id,
)
from budget_tracker.validation.validator import EntityValidator, same_name

__all__ = [
    "DATE_FORMAT",
    "DATE_HINT",
    "EntityValidator",
    "InputFormatError",
    "format_date",
    "is_blank",
    "parse_amount",
    "parse_date",
    "parse_optional_amount",
    "parse_optional_date",
    "parse_row_id",
    "same_name",
]
