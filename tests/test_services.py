"""
Tests for the domain services.

Covers the ordered validation rules, cascades, dependency guards and the
end-to-end scenarios from the product requirements.
"""

from datetime import date
from decimal import Decimal

import pytest

from budget_tracker.models import EntityKind, OutcomeStatus
from budget_tracker.services import DocumentStore, InMemoryBackend


JUNE_1 = date(2024, 6, 1)
JUNE_30 = date(2024, 6, 30)


class TestUserService:
    """Tests for user creation, rename, selection and deletion."""
    
    def test_create_user(self, users):
        outcome = users.create_user("alice", "Alice A")
        assert outcome.success
        assert outcome.data.id == 1
        assert outcome.message == "User 'alice' has been successfully created."
    
    @pytest.mark.parametrize("username,name,message", [
        ("", "Alice", "Username cannot be empty or whitespace."),
        ("   ", "", "Username cannot be empty or whitespace."),
        ("alice", "  ", "Name cannot be empty or whitespace."),
    ])
    def test_rule_order(self, users, username, name, message):
        """The first broken rule is the one reported."""
        outcome = users.create_user(username, name)
        assert not outcome.success
        assert outcome.status == OutcomeStatus.VALIDATION_FAILED
        assert outcome.message == message
    
    def test_username_unique_case_insensitive(self, users, store):
        users.create_user("alice", "Alice A")
        outcome = users.create_user(" ALICE ", "Other")
        assert not outcome.success
        assert "already exists" in outcome.message
        assert store.count(EntityKind.USER) == 1
    
    def test_values_are_trimmed(self, users):
        user = users.create_user("  bob ", " Bob B ").data
        assert (user.username, user.name) == ("bob", "Bob B")
    
    def test_long_username(self, users, store):
        """Very long names are stored in full; the audit trail clips its own copy."""
        outcome = users.create_user("u" * 600, "Long Name")
        assert outcome.success
        assert store.get_by_id(EntityKind.USER, outcome.data.id).username == "u" * 600
        assert not users.create_user("U" * 600, "Other").success
    
    def test_set_active_user(self, users, session):
        user = users.create_user("alice", "Alice A").data
        outcome = users.set_active_user(session, user.id)
        assert outcome.success
        assert session.active_user_id == user.id
        assert session.active_user_name == "Alice A"
    
    def test_set_active_user_unknown(self, users, session):
        outcome = users.set_active_user(session, 42)
        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert session.active_user is None
    
    def test_update_user_renames_active(self, users, session):
        user = users.create_user("alice", "Alice A").data
        users.set_active_user(session, user.id)
        
        outcome = users.update_user(session, "Alice B")
        assert outcome.success
        assert users.get_user(user.id).name == "Alice B"
        assert session.active_user_name == "Alice B"
    
    def test_update_user_blank_rejected(self, users, session):
        user = users.create_user("alice", "Alice A").data
        users.set_active_user(session, user.id)
        assert not users.update_user(session, " ").success
        assert users.get_user(user.id).name == "Alice A"
    
    def test_update_user_without_active(self, users, session):
        assert users.update_user(session, "X").status == OutcomeStatus.NOT_FOUND
    
    def test_delete_user_cascades(self, users, budgets, categories, expenses, store, session):
        """Every budget of the user and every expense in them goes."""
        alice = users.create_user("alice", "Alice A").data
        bob = users.create_user("bob", "Bob B").data
        food = categories.create_category("Food").data
        
        for name in ("June", "July", "Aug"):
            budget = budgets.create_budget(alice.id, name, JUNE_1, JUNE_30, Decimal("100")).data
            for day in (2, 3):
                expenses.add_expense(budget.id, food.id, "x", date(2024, 6, day), Decimal("1"))
        kept = budgets.create_budget(bob.id, "Bob's", JUNE_1, JUNE_30, Decimal("100")).data
        expenses.add_expense(kept.id, food.id, "y", JUNE_1, Decimal("1"))
        
        users.set_active_user(session, alice.id)
        outcome = users.delete_user(session)
        
        assert outcome.success
        assert outcome.message == "User removed successfully."
        assert session.active_user is None
        assert users.get_user(alice.id) is None
        assert budgets.list_budgets_for_user(alice.id) == []
        assert [e.budget_id for e in store.get_all(EntityKind.EXPENSE)] == [kept.id]
        assert store.get_by_id(EntityKind.CATEGORY, food.id) is not None
    
    def test_delete_user_without_active(self, users, session):
        assert users.delete_user(session).status == OutcomeStatus.NOT_FOUND


class TestBudgetService:
    """Tests for budget rules, amount updates and derived totals."""
    
    def test_create_budget(self, users, budgets):
        user = users.create_user("alice", "Alice A").data
        outcome = budgets.create_budget(user.id, "June", JUNE_1, JUNE_30, Decimal("500"))
        assert outcome.success
        assert outcome.data.id == 1
        assert outcome.message == "Budget 'June' has been successfully created."
    
    @pytest.mark.parametrize("name,start,end,amount,message", [
        ("", JUNE_30, JUNE_1, Decimal("-1"), "Name cannot be empty or whitespace."),
        ("June", JUNE_30, JUNE_1, Decimal("-1"), "End date cannot be earlier than start date."),
        ("June", JUNE_1, JUNE_30, Decimal("-1"), "Amount cannot be negative."),
    ])
    def test_rule_order(self, users, budgets, name, start, end, amount, message):
        user = users.create_user("alice", "Alice A").data
        outcome = budgets.create_budget(user.id, name, start, end, amount)
        assert outcome.message == message
    
    def test_single_day_budget_allowed(self, users, budgets):
        user = users.create_user("alice", "Alice A").data
        assert budgets.create_budget(user.id, "Day", JUNE_1, JUNE_1, Decimal("0")).success
    
    def test_unknown_owner(self, budgets):
        outcome = budgets.create_budget(7, "June", JUNE_1, JUNE_30, Decimal("1"))
        assert outcome.status == OutcomeStatus.NOT_FOUND
    
    def test_update_amount(self, june, budgets):
        _, budget, _, _ = june
        outcome = budgets.update_budget_amount(budget.id, "750.50")
        assert outcome.success
        assert budgets.get_budget(budget.id).amount == Decimal("750.50")
    
    def test_update_amount_rejects_garbage_and_negative(self, june, budgets):
        _, budget, _, _ = june
        assert not budgets.update_budget_amount(budget.id, "lots").success
        assert budgets.update_budget_amount(budget.id, "-5").message == "Amount cannot be negative."
        assert budgets.get_budget(budget.id).amount == Decimal("500")
    
    def test_amount_survives_reload(self, june, budgets, backend, audit_logger):
        _, budget, _, _ = june
        assert budgets.update_budget_amount(budget.id, "1234567890123.45").success
        
        reloaded = DocumentStore(InMemoryBackend(backend.payload), audit_logger)
        reloaded.load()
        assert reloaded.get_by_id(EntityKind.BUDGET, budget.id).amount == Decimal("1234567890123.45")
    
    def test_amount_beyond_storable_precision_rejected(self, june, budgets):
        _, budget, _, _ = june
        outcome = budgets.update_budget_amount(budget.id, "12345678901234567.89")
        assert not outcome.success
        assert "cannot exceed" in outcome.message
        assert budgets.get_budget(budget.id).amount == Decimal("500")
    
    def test_scenario_d_blank_amount_keeps_value(self, june, budgets, backend):
        """Scenario D: a blank amount is a successful no-op."""
        _, budget, _, _ = june
        writes = backend.writes
        outcome = budgets.update_budget_amount(budget.id, "")
        
        assert outcome.success
        assert budgets.get_budget(budget.id).amount == Decimal("500")
        assert backend.writes == writes
    
    def test_totals(self, june, budgets, expenses, session):
        _, budget, food, _ = june
        expenses.add_expense(budget.id, food.id, "Dinner", JUNE_30, Decimal("30.5"))
        budgets.select_budget(session, budget.id)
        
        assert budgets.get_selected_budget_total_spent(session) == Decimal("50.5")
        assert budgets.get_selected_budget_remaining_balance(session) == Decimal("449.5")
    
    def test_totals_without_selection(self, budgets, session):
        assert budgets.get_selected_budget_total_spent(session) == Decimal("0")
    
    def test_summary(self, june, budgets, categories, expenses):
        _, budget, food, _ = june
        rent = categories.create_category("Rent").data
        expenses.add_expense(budget.id, rent.id, "June rent", JUNE_1, Decimal("300"))
        
        summary = budgets.get_budget_summary(budget.id).data
        
        assert summary.total_spent == Decimal("320")
        assert summary.remaining == Decimal("180")
        assert summary.percent_used == Decimal("64.00")
        assert [t.category_name for t in summary.category_totals] == ["Rent", "Food"]
    
    def test_summary_zero_amount(self, users, budgets):
        user = users.create_user("alice", "Alice A").data
        budget = budgets.create_budget(user.id, "Empty", JUNE_1, JUNE_30, Decimal("0")).data
        assert budgets.get_budget_summary(budget.id).data.percent_used == 0
    
    def test_delete_budget_cascades_and_clears_selection(self, june, budgets, store, session):
        _, budget, _, _ = june
        budgets.select_budget(session, budget.id)
        
        outcome = budgets.delete_budget(session, budget.id)
        
        assert outcome.success
        assert session.selected_budget is None
        assert store.count(EntityKind.EXPENSE) == 0
        assert store.count(EntityKind.BUDGET) == 0
    
    def test_stale_selection_is_dropped(self, june, budgets, store, session):
        _, budget, _, _ = june
        budgets.select_budget(session, budget.id)
        store.remove(EntityKind.BUDGET, budget.id)
        
        assert budgets.get_selected_budget(session) is None
        assert session.selected_budget is None
    
    def test_delete_budgets_by_user(self, june, budgets, store):
        alice, _, _, _ = june
        outcome = budgets.delete_budgets_by_user(alice.id)
        assert outcome.data == {"budgets": 1, "expenses": 1}
        assert store.count(EntityKind.EXPENSE) == 0


class TestCategoryService:
    """Tests for category uniqueness, renames and the dependency guard."""
    
    def test_create_category(self, categories):
        outcome = categories.create_category("Food")
        assert outcome.message == "'Food' Category has been successfully created."
    
    def test_name_unique_case_insensitive(self, categories, store):
        categories.create_category("Food")
        assert not categories.create_category("food").success
        assert store.count(EntityKind.CATEGORY) == 1
    
    def test_long_duplicate_name(self, categories, store):
        assert categories.create_category("C" * 600).success
        outcome = categories.create_category("c" * 600)
        assert not outcome.success
        assert "already exists" in outcome.message
        assert store.count(EntityKind.CATEGORY) == 1
    
    def test_idempotent_rename(self, categories, store):
        """Re-submitting the current name (any case) succeeds and changes nothing else."""
        food = categories.create_category("Food").data
        rent = categories.create_category("Rent").data
        
        outcome = categories.update_category(food.id, "FOOD")
        
        assert outcome.success
        assert store.count(EntityKind.CATEGORY) == 2
        assert categories.get_category(rent.id).name == "Rent"
    
    def test_rename_collision(self, categories):
        food = categories.create_category("Food").data
        categories.create_category("Rent")
        outcome = categories.update_category(food.id, "rent")
        assert not outcome.success
        assert categories.get_category(food.id).name == "Food"
    
    def test_rename_shows_on_expenses(self, june, categories, expenses):
        _, _, food, lunch = june
        categories.update_category(food.id, "Meals")
        assert expenses.get_expense(lunch.id).category_name == "Meals"
    
    def test_update_unknown(self, categories):
        outcome = categories.update_category(9, "X")
        assert outcome.status == OutcomeStatus.NOT_FOUND
        assert outcome.message == "Category not found."
    
    def test_scenario_c_dependency_guard(self, june, categories, expenses, store, session):
        """Scenario C: blocked while referenced, allowed once the expense is gone."""
        _, _, food, lunch = june
        categories.select_category(session, food.id)
        
        blocked = categories.delete_category(session)
        assert blocked.status == OutcomeStatus.DEPENDENCY_BLOCKED
        assert store.count(EntityKind.CATEGORY) == 1
        assert session.selected_category_id == food.id
        
        assert expenses.delete_expense(lunch.id).success
        deleted = categories.delete_category(session)
        assert deleted.success
        assert deleted.message == "Category removed successfully."
        assert session.selected_category is None
        assert store.count(EntityKind.CATEGORY) == 0
    
    def test_delete_without_selection(self, categories, session):
        assert categories.delete_category(session).status == OutcomeStatus.NOT_FOUND


class TestExpenseService:
    """Tests for expense rules and partial updates."""
    
    def test_scenario_a(self, users, budgets, categories, expenses, session):
        """Scenario A: user, budget, expense, then total spent."""
        food = categories.create_category("Food").data
        alice = users.create_user("alice", "Alice A")
        assert alice.success and alice.data.id == 1
        
        budget = budgets.create_budget(1, "June", JUNE_1, JUNE_30, Decimal("500"))
        assert budget.success and budget.data.id == 1
        
        added = expenses.add_expense(1, food.id, "Lunch", date(2024, 6, 15), Decimal("20"))
        assert added.success
        assert added.data.category_name == "Food"
        
        budgets.select_budget(session, 1)
        assert budgets.get_selected_budget_total_spent(session) == Decimal("20")
    
    def test_scenario_b_date_outside_budget(self, june, expenses, store):
        """Scenario B: a July expense against the June budget is refused."""
        _, budget, food, _ = june
        before = store.count(EntityKind.EXPENSE)
        
        outcome = expenses.add_expense(budget.id, food.id, "Late", date(2024, 7, 1), Decimal("5"))
        
        assert not outcome.success
        assert outcome.message == "Date must be within budget start and end date."
        assert store.count(EntityKind.EXPENSE) == before
    
    @pytest.mark.parametrize("day", [JUNE_1, JUNE_30])
    def test_date_range_inclusive(self, june, expenses, day):
        _, budget, food, _ = june
        assert expenses.add_expense(budget.id, food.id, "Edge", day, Decimal("1")).success
    
    def test_rule_order(self, june, expenses):
        _, budget, food, _ = june
        outcome = expenses.add_expense(budget.id, food.id, " ", date(2024, 7, 1), Decimal("-1"))
        assert outcome.message == "Description cannot be empty or whitespace."
        outcome = expenses.add_expense(budget.id, food.id, "x", JUNE_1, Decimal("-1"))
        assert outcome.message == "Amount cannot be negative."
    
    def test_check_description(self, expenses):
        assert expenses.check_description("Lunch") is None
        outcome = expenses.check_description("  ")
        assert outcome.status == OutcomeStatus.VALIDATION_FAILED
        assert outcome.message == "Description cannot be empty or whitespace."
    
    def test_unknown_budget_and_category(self, june, expenses):
        _, budget, _, _ = june
        assert expenses.add_expense(99, 1, "x", JUNE_1, Decimal("1")).status == OutcomeStatus.NOT_FOUND
        assert expenses.add_expense(budget.id, 99, "x", JUNE_1, Decimal("1")).message == "Category not found."
    
    def test_update_keeps_blank_fields(self, june, expenses):
        _, _, food, lunch = june
        outcome = expenses.update_expense(lunch.id, None, "", "", "")
        
        assert outcome.success
        updated = expenses.get_expense(lunch.id)
        assert updated.description == "Lunch"
        assert updated.date == date(2024, 6, 15)
        assert updated.amount == Decimal("20")
        assert updated.category_id == food.id
    
    def test_update_changes_fields(self, june, categories, expenses):
        _, _, _, lunch = june
        drinks = categories.create_category("Drinks").data
        
        outcome = expenses.update_expense(lunch.id, drinks.id, "Coffee", "16-06-2024", "3.5")
        
        assert outcome.message == "Expense 'Coffee' has been successfully updated."
        updated = expenses.get_expense(lunch.id)
        assert updated.date == date(2024, 6, 16)
        assert updated.amount == Decimal("3.5")
        assert updated.category_name == "Drinks"
    
    def test_update_date_outside_budget(self, june, expenses):
        """The effective date is re-checked against the budget."""
        _, _, _, lunch = june
        outcome = expenses.update_expense(lunch.id, date_text="01-07-2024")
        assert outcome.message == "Date must be within budget start and end date."
        assert expenses.get_expense(lunch.id).date == date(2024, 6, 15)
    
    def test_update_unparseable_input(self, june, expenses):
        _, _, _, lunch = june
        assert not expenses.update_expense(lunch.id, date_text="2024-06-16").success
        assert not expenses.update_expense(lunch.id, amount_text="ten").success
    
    def test_delete_unknown(self, expenses):
        assert expenses.delete_expense(3).status == OutcomeStatus.NOT_FOUND
    
    def test_list_by_budget(self, june, expenses):
        _, budget, _, lunch = june
        assert [e.id for e in expenses.list_expenses_by_budget(budget.id)] == [lunch.id]
