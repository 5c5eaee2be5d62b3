"""
Tests for Budget Tracker models

Test strategy:
1. Unit tests for the pydantic models (invariants, serialization)
2. Store, services, queries and navigation are covered in their own modules
3. Nothing touches the real data file or terminal
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from budget_tracker.models import (
    ApplicationData,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    BudgetSummary,
    Category,
    Expense,
    Outcome,
    OutcomeStatus,
    User,
    format_money,
)


class TestEntityModels:
    """Tests for the four entity models."""
    
    def test_user_creation(self):
        """Test User model creation."""
        user = User(id=1, username="alice", name="Alice A")
        assert user.username == "alice"
        assert user.name == "Alice A"
    
    def test_user_rejects_non_positive_id(self):
        """Id 0 is never a real record."""
        with pytest.raises(ValueError):
            User(id=0, username="alice", name="Alice A")
    
    def test_budget_date_validation(self):
        """Test that end date cannot precede start date."""
        with pytest.raises(ValueError, match="End date cannot be earlier than start date"):
            Budget(
                id=1,
                user_id=1,
                name="June",
                start_date=date(2024, 6, 30),
                end_date=date(2024, 6, 1),
                amount=Decimal("500"),
            )
    
    def test_budget_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Budget(
                id=1,
                user_id=1,
                name="June",
                start_date=date(2024, 6, 1),
                end_date=date(2024, 6, 30),
                amount=Decimal("-1"),
            )
    
    def test_budget_covers_is_inclusive(self):
        """Both ends of the range count as inside."""
        budget = Budget(
            id=1,
            user_id=1,
            name="June",
            start_date=date(2024, 6, 1),
            end_date=date(2024, 6, 30),
            amount=Decimal("500"),
        )
        assert budget.covers(date(2024, 6, 1))
        assert budget.covers(date(2024, 6, 30))
        assert not budget.covers(date(2024, 5, 31))
        assert not budget.covers(date(2024, 7, 1))
    
    def test_expense_category_link(self):
        """The resolved category is display-only and defaults to Unknown."""
        expense = Expense(
            id=1,
            budget_id=1,
            category_id=3,
            amount=Decimal("20"),
            date=date(2024, 6, 15),
            description="Lunch",
        )
        assert expense.category is None
        assert expense.category_name == "Unknown"
        
        expense.attach_category(Category(id=3, name="Food"))
        assert expense.category_name == "Food"
    
    def test_table_rows_start_with_id(self):
        """Selection rows are read back by their leading id."""
        assert User(id=12, username="bob", name="Bob").table_row().startswith("12 ")
        assert Category(id=7, name="Food").table_row().startswith("7 ")
    
    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"
        assert format_money(Decimal("-20"), "€") == "-€20.00"


class TestDocumentSerialization:
    """Tests for the on-disk shape of the document."""
    
    def test_pascal_case_field_names(self):
        """Field names on disk match the existing ApplicationData.json."""
        document = ApplicationData(
            users=[User(id=1, username="alice", name="Alice A")],
            budgets=[Budget(
                id=1,
                user_id=1,
                name="June",
                start_date=date(2024, 6, 1),
                end_date=date(2024, 6, 30),
                amount=Decimal("500"),
            )],
        )
        raw = json.loads(document.to_json())
        
        assert set(raw) == {"Users", "Budgets", "Categories", "Expenses"}
        assert raw["Users"][0] == {"Id": 1, "Username": "alice", "Name": "Alice A"}
        assert raw["Budgets"][0]["UserId"] == 1
        assert raw["Budgets"][0]["StartDate"] == "2024-06-01T00:00:00"
        assert raw["Budgets"][0]["Amount"] == 500.0
    
    def test_resolved_category_is_not_persisted(self):
        expense = Expense(
            id=1,
            budget_id=1,
            category_id=3,
            amount=Decimal("20"),
            date=date(2024, 6, 15),
            description="Lunch",
        )
        expense.attach_category(Category(id=3, name="Food"))
        raw = json.loads(ApplicationData(expenses=[expense]).to_json())
        
        assert "Category" not in raw["Expenses"][0]
        assert raw["Expenses"][0]["CategoryId"] == 3
    
    def test_reads_existing_document(self):
        """Timestamps and float amounts written by earlier versions load cleanly."""
        payload = json.dumps({
            "Users": [{"Id": 1, "Username": "alice", "Name": "Alice A"}],
            "Budgets": [{
                "Id": 1, "UserId": 1, "Name": "June",
                "StartDate": "2024-06-01T00:00:00", "EndDate": "2024-06-30T00:00:00",
                "Amount": 500.0,
            }],
            "Categories": [{"Id": 1, "Name": "Food"}],
            "Expenses": [{
                "Id": 1, "BudgetId": 1, "CategoryId": 1, "Amount": 20.5,
                "Date": "2024-06-15T00:00:00", "Description": "Lunch",
            }],
        })
        document = ApplicationData.model_validate_json(payload)
        
        assert document.budgets[0].start_date == date(2024, 6, 1)
        assert document.expenses[0].amount == Decimal("20.5")
        assert document.expenses[0].date == date(2024, 6, 15)


class TestOutcomeModels:
    """Tests for service outcomes and derived summaries."""
    
    def test_ok_outcome(self):
        outcome = Outcome.ok("done", 5)
        assert outcome.success is True
        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.data == 5
    
    def test_failure_statuses(self):
        assert Outcome.fail("bad").status == OutcomeStatus.VALIDATION_FAILED
        assert Outcome.not_found("gone").status == OutcomeStatus.NOT_FOUND
        blocked = Outcome.fail("in use", OutcomeStatus.DEPENDENCY_BLOCKED)
        assert blocked.success is False
        assert blocked.data is None
    
    def test_budget_summary_properties(self):
        summary = BudgetSummary(
            budget_id=1,
            name="June",
            start_date=date(2024, 6, 1),
            end_date=date(2024, 6, 30),
            amount=Decimal("100"),
            total_spent=Decimal("120"),
            remaining=Decimal("-20"),
            percent_used=Decimal("120.00"),
        )
        assert summary.is_overspent is True
        assert summary.percent_remaining == Decimal("-20.00")


class TestAuditModels:
    """Tests for audit models."""
    
    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.USER_CREATED,
            description="User created: alice",
        )
        assert event.event_type == AuditEventType.USER_CREATED
        assert event.severity == AuditSeverity.INFO
    
    def test_audit_event_to_log_dict(self):
        """Test conversion to log dict."""
        event = AuditEventBuilder.created("budget", 3, "June")
        log_dict = event.to_log_dict()
        
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_created"
        assert log_dict["entity_id"] == 3
        assert log_dict["details"]["label"] == "June"
    
    def test_long_label_is_clipped_in_description(self):
        """The label in details stays whole; the description is capped."""
        event = AuditEventBuilder.created("user", 1, "u" * 600)
        assert len(event.description) == 500
        assert event.description.endswith("...")
        assert event.details["label"] == "u" * 600
    
    def test_audit_event_builder_delete_blocked(self):
        event = AuditEventBuilder.delete_blocked("category", 1, 2)
        assert event.event_type == AuditEventType.DELETE_BLOCKED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["dependent_count"] == 2
    
    def test_audit_event_builder_deleted_with_cascade(self):
        event = AuditEventBuilder.deleted("user", 1, {"budgets": 2, "expenses": 5})
        assert event.event_type == AuditEventType.USER_DELETED
        assert event.details["cascaded"] == {"budgets": 2, "expenses": 5}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
