"""Tests for FilterState and DashboardView."""

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.models import FILTER_ALL, TransactionCategory, TransactionType
from finance_tracker.queries import UNKNOWN_ACCOUNT, DashboardView, FilterState
from finance_tracker.stores import ValidationFailedError


@pytest.fixture
def dashboard(accounts, transactions, budgets):
    view = DashboardView(transactions.items, accounts.items, budgets.items)
    yield view
    view.close()


class TestFilterState:
    """Tests for the filter selectors."""

    def test_defaults(self):
        state = FilterState()
        assert state.type() == FILTER_ALL
        assert state.category() == FILTER_ALL
        assert state.date_from() is None
        assert not state.has_active_filters()

    def test_setters_parse_raw_values(self):
        state = FilterState()
        state.set_type("EXPENSE")
        state.set_category("Food")
        state.set_date_from("2025-10-06")

        assert state.type() == TransactionType.EXPENSE
        assert state.category() == TransactionCategory.FOOD
        assert state.date_from() == date(2025, 10, 6)
        assert state.has_active_filters()

    def test_empty_string_unsets_date(self):
        state = FilterState()
        state.set_date_to("2025-10-06")
        state.set_date_to("")
        assert state.date_to() is None
        assert not state.has_active_filters()

    def test_invalid_value_rejected_and_state_kept(self):
        state = FilterState()
        state.set_type("INCOME")

        with pytest.raises(ValidationFailedError):
            state.set_type("SIDEWAYS")
        with pytest.raises(ValidationFailedError):
            state.set_date_from("not-a-date")

        assert state.type() == TransactionType.INCOME
        assert state.date_from() is None

    def test_update_unknown_field_rejected(self):
        with pytest.raises(ValidationFailedError):
            FilterState().update(amount="5")

    def test_clear_resets_everything(self):
        state = FilterState()
        state.update(type="INCOME", category="Salary", date_from="2025-10-01", date_to="2025-10-31")
        state.clear()
        assert state.value().model_dump() == {
            "type": FILTER_ALL,
            "category": FILTER_ALL,
            "date_from": None,
            "date_to": None,
        }

    def test_setting_equal_date_does_not_notify(self):
        state = FilterState()
        state.set_date_from("2025-10-06")
        seen = []
        state.value.subscribe(seen.append)

        state.set_date_from(date(2025, 10, 6))

        assert seen == []


class TestDashboardView:
    """Tests for the computed dashboard values."""

    def test_unfiltered_summary(self, dashboard):
        assert dashboard.filtered_income() == Decimal("6200")
        assert dashboard.filtered_expenses() == Decimal("450")
        assert dashboard.filtered_balance() == Decimal("5750")

    def test_filter_change_recomputes(self, dashboard):
        dashboard.filters.set_type("EXPENSE")
        assert dashboard.filtered_income() == Decimal("0")
        assert dashboard.filtered_expenses() == Decimal("450")
        assert len(dashboard.filtered_transactions()) == 3

    @pytest.mark.asyncio
    async def test_store_change_recomputes(self, dashboard, transactions):
        """Test that derived values are never stale after a store commit."""
        dashboard.filters.set_category("Food")
        assert dashboard.filtered_expenses() == Decimal("250")

        await transactions.create({
            "account_id": "1",
            "type": "EXPENSE",
            "category": "Food",
            "amount": "40",
            "description": "Bakery",
            "date": "2025-10-11",
        })

        assert dashboard.filtered_expenses() == Decimal("290")
        assert dashboard.filtered_transactions()[0].description == "Bakery"

    def test_subscriber_pushed_on_filter_change(self, dashboard):
        counts = []
        dashboard.filtered_transactions.subscribe(lambda txns: counts.append(len(txns)))

        dashboard.filters.set_type("INCOME")
        dashboard.filters.clear()

        assert counts == [2, 5]

    def test_account_name(self, dashboard):
        assert dashboard.account_name("1") == "Main Checking"
        assert dashboard.account_name("404") == UNKNOWN_ACCOUNT

    def test_spending_by_category_uses_filtered_view(self, dashboard):
        dashboard.filters.set_date_from("2025-10-06")
        categories = [row.category for row in dashboard.spending_by_category()]
        assert categories == [TransactionCategory.TRANSPORT, TransactionCategory.ENTERTAINMENT]

    @pytest.mark.asyncio
    async def test_budget_progress(self, dashboard, budgets):
        food = dashboard.budgets_with_progress()[0]
        assert food.progress == pytest.approx(41.6666, rel=1e-3)

        await budgets.adjust_spent("Food", "400")

        assert dashboard.budgets_with_progress()[0].is_over_budget
