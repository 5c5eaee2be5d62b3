"""
Tests for operator-input parsing and the ordered validation rules.
"""

from datetime import date
from decimal import Decimal

import pytest

from budget_tracker.models import Budget
from budget_tracker.validation import (
    EntityValidator,
    InputFormatError,
    format_date,
    parse_amount,
    parse_date,
    parse_optional_amount,
    parse_optional_date,
    parse_row_id,
    same_name,
)


class TestParseDate:
    """Tests for the strict dd-mm-yyyy parser."""
    
    def test_valid(self):
        assert parse_date("15-06-2024") == date(2024, 6, 15)
    
    def test_surrounding_whitespace_ignored(self):
        assert parse_date(" 01-06-2024 ") == date(2024, 6, 1)
    
    @pytest.mark.parametrize("text", ["2024-06-15", "15/06/2024", "1-6-2024", "", None, "15-06-24"])
    def test_wrong_format(self, text):
        with pytest.raises(InputFormatError, match="Please use dd-mm-yyyy format"):
            parse_date(text)
    
    def test_not_a_calendar_date(self):
        with pytest.raises(InputFormatError):
            parse_date("31-02-2024")
    
    def test_field_name_in_message(self):
        with pytest.raises(InputFormatError) as exc_info:
            parse_date("soon", "start date")
        assert exc_info.value.field == "start date"
        assert exc_info.value.message.startswith("Invalid start date format")
    
    def test_format_date(self):
        assert format_date(date(2024, 6, 1)) == "01-06-2024"


class TestParseAmount:
    """Tests for decimal amount parsing."""
    
    @pytest.mark.parametrize("text,expected", [
        ("20", Decimal("20")),
        ("20.50", Decimal("20.50")),
        (" -3 ", Decimal("-3")),
        ("12.345", Decimal("12.35")),
        ("0.004", Decimal("0.00")),
    ])
    def test_valid(self, text, expected):
        assert parse_amount(text) == expected
    
    @pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity", "1,5"])
    def test_invalid(self, text):
        with pytest.raises(InputFormatError, match="Please enter a valid number"):
            parse_amount(text)
    
    @pytest.mark.parametrize("text", ["10000000000000", "12345678901234567.89", "-1e20"])
    def test_too_large(self, text):
        with pytest.raises(InputFormatError, match="cannot exceed"):
            parse_amount(text)
    
    def test_rounds_to_cents(self):
        assert parse_amount("20").as_tuple().exponent == -2
    
    def test_optional_blank_is_none(self):
        assert parse_optional_amount("  ") is None
        assert parse_optional_date("") is None
        assert parse_optional_amount("4") == Decimal("4")


class TestParseRowId:
    """Tests for reading ids back from selection rows."""
    
    def test_leading_id(self):
        assert parse_row_id("12    | Groceries") == 12
    
    def test_no_id(self):
        assert parse_row_id("← Back") is None
        assert parse_row_id("") is None


class TestEntityValidator:
    """Tests for the rule chains that need the store."""
    
    def test_same_name(self):
        assert same_name(" Food ", "fOOD")
        assert not same_name("Food", "Foods")
    
    def test_category_rename_excludes_self(self, categories, store):
        food = categories.create_category("Food").data
        validator = EntityValidator(store)
        assert validator.check_category_rename(food.id, "food") is None
        assert validator.check_new_category("FOOD").issue_type == "duplicate"
    
    def test_expense_update_checks_range_then_amount(self, store):
        budget = Budget(
            id=1,
            user_id=1,
            name="June",
            start_date=date(2024, 6, 1),
            end_date=date(2024, 6, 30),
            amount=Decimal("10"),
        )
        validator = EntityValidator(store)
        
        issue = validator.check_expense_update(budget, date(2024, 5, 31), Decimal("-1"))
        assert issue.field == "date"
        issue = validator.check_expense_update(budget, date(2024, 6, 30), Decimal("-1"))
        assert issue.field == "amount"
        assert validator.check_expense_update(budget, date(2024, 6, 30), Decimal("0")) is None
