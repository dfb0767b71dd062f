"""Derived values: pure aggregates and the filtered dashboard view."""

from finance_tracker.queries.aggregates import (
    WARNING_THRESHOLD,
    budget_progress,
    budget_status,
    budgets_with_progress,
    filter_transactions,
    progress_percent,
    spending_by_category,
    summarize,
    total_account_balance,
    total_expenses,
    total_income,
    transaction_balance,
)
from finance_tracker.queries.dashboard import UNKNOWN_ACCOUNT, DashboardView, FilterState

__all__ = [
    # Aggregates
    "WARNING_THRESHOLD",
    "budget_progress",
    "budget_status",
    "budgets_with_progress",
    "filter_transactions",
    "progress_percent",
    "spending_by_category",
    "summarize",
    "total_account_balance",
    "total_expenses",
    "total_income",
    "transaction_balance",
    # Dashboard
    "UNKNOWN_ACCOUNT",
    "DashboardView",
    "FilterState",
]
