"""Tests for the pure aggregate functions."""

import math
from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.models import (
    BudgetStatus,
    TransactionCategory,
    TransactionFilter,
    TransactionType,
)
from finance_tracker.queries import (
    budget_progress,
    filter_transactions,
    spending_by_category,
    summarize,
    total_account_balance,
    total_expenses,
    total_income,
    transaction_balance,
)
from finance_tracker.stores import fixtures

from conftest import make_budget, make_transaction

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


@pytest.fixture
def seeded():
    return tuple(fixtures.seed_transactions())


class TestTotals:
    """Tests for balance and income/expense totals."""

    def test_account_total(self):
        assert total_account_balance(fixtures.seed_accounts()) == Decimal("39170")

    def test_empty_collections_sum_to_zero(self):
        assert total_account_balance([]) == Decimal("0")
        assert transaction_balance([]) == Decimal("0")
        assert summarize([]).count == 0

    @pytest.mark.parametrize("rows", [
        [],
        [("a", INCOME, "100")],
        [("a", EXPENSE, "100")],
        [("a", INCOME, "0.10"), ("b", EXPENSE, "0.20"), ("c", INCOME, "999.99")],
        [("a", EXPENSE, "5"), ("b", EXPENSE, "7.25")],
    ])
    def test_balance_equals_income_minus_expenses(self, rows):
        """Test aggregate consistency over several collections."""
        txns = [make_transaction(txn_id, txn_type, amount=amount) for txn_id, txn_type, amount in rows]
        assert transaction_balance(txns) == total_income(txns) - total_expenses(txns)

    def test_seeded_totals(self, seeded):
        assert total_income(seeded) == Decimal("6200")
        assert total_expenses(seeded) == Decimal("450")
        assert transaction_balance(seeded) == Decimal("5750")

    def test_summarize_matches_totals(self, seeded):
        summary = summarize(seeded)
        assert summary.income == total_income(seeded)
        assert summary.expenses == total_expenses(seeded)
        assert summary.balance == transaction_balance(seeded)
        assert summary.count == 5


class TestBudgetProgress:
    """Tests for budget progress derivation."""

    def test_partial_progress(self):
        progress = budget_progress(make_budget("1", "600", "150"))
        assert progress.progress == 25.0
        assert progress.remaining == Decimal("450")
        assert not progress.is_over_budget

    def test_zero_amount_zero_spent_is_defined(self):
        """Test that a zero budget with nothing spent reports 0."""
        progress = budget_progress(make_budget("1", "0", "0"))
        assert progress.progress == 0.0
        assert progress.remaining == Decimal("0")
        assert not progress.is_over_budget

    def test_zero_amount_with_spending_is_infinite(self):
        progress = budget_progress(make_budget("1", "0", "10"))
        assert math.isinf(progress.progress)
        assert progress.is_over_budget

    def test_over_budget(self):
        progress = budget_progress(make_budget("1", "200", "250"))
        assert progress.is_over_budget
        assert progress.remaining == Decimal("-50")
        assert progress.progress == 125.0

    def test_exactly_on_budget_is_not_over(self):
        assert not budget_progress(make_budget("1", "300", "300")).is_over_budget

    def test_status_follows_progress(self):
        """Test the good, warning and over-budget bands."""
        assert budget_progress(make_budget("1", "600", "250")).status == BudgetStatus.GOOD
        assert budget_progress(make_budget("1", "100", "80")).status == BudgetStatus.WARNING
        assert budget_progress(make_budget("1", "300", "300")).status == BudgetStatus.WARNING
        assert budget_progress(make_budget("1", "200", "250")).status == BudgetStatus.OVER_BUDGET

    def test_zero_amount_status(self):
        assert budget_progress(make_budget("1", "0", "0")).status == BudgetStatus.GOOD
        assert budget_progress(make_budget("1", "0", "10")).status == BudgetStatus.OVER_BUDGET

    def test_progress_keeps_budget_fields(self):
        budget = make_budget("7", "100", "10", category=TransactionCategory.SHOPPING)
        progress = budget_progress(budget)
        assert progress.id == "7"
        assert progress.category == TransactionCategory.SHOPPING


class TestFilterTransactions:
    """Tests for the filtered transaction view."""

    def test_no_filter_sorts_newest_first(self, seeded):
        result = filter_transactions(seeded, TransactionFilter())
        assert [txn.id for txn in result] == ["5", "4", "3", "2", "1"]

    def test_type_filter(self, seeded):
        result = filter_transactions(seeded, TransactionFilter(type="INCOME"))
        assert {txn.id for txn in result} == {"1", "4"}

    def test_category_filter(self, seeded):
        result = filter_transactions(seeded, TransactionFilter(category="Food"))
        assert [txn.id for txn in result] == ["2"]

    def test_date_from_is_inclusive_boundary(self, seeded):
        """Test that date_from 2025-10-06 drops 10-05 and earlier, keeps 10-07 and later."""
        result = filter_transactions(seeded, TransactionFilter(date_from="2025-10-06"))
        dates = {txn.date for txn in result}
        assert date(2025, 10, 5) not in dates
        assert date(2025, 10, 1) not in dates
        assert {date(2025, 10, 7), date(2025, 10, 8), date(2025, 10, 10)} <= dates

    def test_bounds_include_exact_dates(self, seeded):
        result = filter_transactions(
            seeded,
            TransactionFilter(date_from="2025-10-05", date_to="2025-10-07"),
        )
        assert [txn.id for txn in result] == ["3", "2"]

    def test_empty_date_means_unset(self, seeded):
        result = filter_transactions(seeded, TransactionFilter(date_from="", date_to=""))
        assert len(result) == 5

    def test_same_date_keeps_collection_order(self):
        same_day = date(2025, 10, 3)
        txns = [
            make_transaction("a", day=same_day),
            make_transaction("b", day=date(2025, 10, 9)),
            make_transaction("c", day=same_day),
        ]
        result = filter_transactions(txns, TransactionFilter())
        assert [txn.id for txn in result] == ["b", "a", "c"]

    def test_adding_constraints_never_grows_result(self, seeded):
        """Test filter monotonicity."""
        steps = [
            TransactionFilter(),
            TransactionFilter(type="EXPENSE"),
            TransactionFilter(type="EXPENSE", category="Transport"),
            TransactionFilter(type="EXPENSE", category="Transport", date_from="2025-10-06"),
            TransactionFilter(
                type="EXPENSE", category="Transport",
                date_from="2025-10-06", date_to="2025-10-06",
            ),
        ]
        sizes = [len(filter_transactions(seeded, step)) for step in steps]
        assert sizes == sorted(sizes, reverse=True)
        assert sizes[-1] == 0

    def test_does_not_modify_input(self, seeded):
        original = list(seeded)
        filter_transactions(seeded, TransactionFilter(type="EXPENSE"))
        assert list(seeded) == original


class TestSpendingByCategory:
    """Tests for per-category expense totals."""

    def test_largest_first_and_income_ignored(self, seeded):
        rows = spending_by_category(seeded)
        assert [row.category for row in rows] == [
            TransactionCategory.FOOD,
            TransactionCategory.TRANSPORT,
            TransactionCategory.ENTERTAINMENT,
        ]
        assert rows[0].total == Decimal("250")
        assert all(row.transaction_count == 1 for row in rows)
