"""
Filter State and Dashboard View

FilterState holds the four selectors of the transaction view as
signals. DashboardView combines them with the store collections into
computed values that are never stale relative to either side.

Setters accept the raw values a form would produce ("ALL", enum
values, ISO date strings, "" for an unset date) and reject anything
else with ValidationFailedError, leaving the current selection as is.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError

from finance_tracker.models.account import Account
from finance_tracker.models.budget import Budget, BudgetProgress
from finance_tracker.models.filters import (
    FILTER_ALL,
    CategorySpending,
    TransactionFilter,
    TransactionSummary,
)
from finance_tracker.models.transaction import Transaction
from finance_tracker.models.validation import issues_from_pydantic
from finance_tracker.queries.aggregates import (
    budgets_with_progress,
    filter_transactions,
    spending_by_category,
    summarize,
)
from finance_tracker.reactive import Computed, ReadonlySignal, Signal, effect
from finance_tracker.stores.interface import ValidationFailedError

logger = structlog.get_logger(__name__)

UNKNOWN_ACCOUNT = "Unknown Account"

_FIELDS = ("type", "category", "date_from", "date_to")


class FilterState:
    """The type / category / date range selection of the transaction view."""

    def __init__(self):
        self._signals: dict[str, Signal] = {
            "type": Signal(FILTER_ALL, name="filter.type"),
            "category": Signal(FILTER_ALL, name="filter.category"),
            "date_from": Signal(None, name="filter.date_from"),
            "date_to": Signal(None, name="filter.date_to"),
        }
        self.type: ReadonlySignal = self._signals["type"].as_readonly()
        self.category: ReadonlySignal = self._signals["category"].as_readonly()
        self.date_from: ReadonlySignal[Optional[date]] = self._signals["date_from"].as_readonly()
        self.date_to: ReadonlySignal[Optional[date]] = self._signals["date_to"].as_readonly()

        self.value: Computed[TransactionFilter] = Computed(
            lambda: TransactionFilter(
                **{field: signal() for field, signal in self._signals.items()}
            ),
            *self._signals.values(),
            name="filter.value",
        )

    def set_type(self, value: Any) -> None:
        self.update(type=value)

    def set_category(self, value: Any) -> None:
        self.update(category=value)

    def set_date_from(self, value: Union[date, str, None]) -> None:
        self.update(date_from=value)

    def set_date_to(self, value: Union[date, str, None]) -> None:
        self.update(date_to=value)

    def update(self, **changes: Any) -> None:
        """
        Change several selectors at once.

        All values are validated before any signal changes.
        """
        unknown = set(changes) - set(_FIELDS)
        if unknown:
            raise ValidationFailedError(f"Unknown filter field(s): {sorted(unknown)}")

        current = {field: signal() for field, signal in self._signals.items()}
        try:
            parsed = TransactionFilter(**{**current, **changes})
        except ValidationError as e:
            raise ValidationFailedError(
                "Invalid filter value",
                issues_from_pydantic(e),
            ) from e

        for field in changes:
            self._apply(field, getattr(parsed, field))

    def clear(self) -> None:
        """Reset every selector to "ALL" / unset."""
        defaults = TransactionFilter()
        for field in _FIELDS:
            self._apply(field, getattr(defaults, field))

    def has_active_filters(self) -> bool:
        return self.value().is_active

    def _apply(self, field: str, value: Any) -> None:
        signal = self._signals[field]
        # Equal dates are distinct objects; only real changes bump the version
        if signal() != value:
            signal.set(value)


class DashboardView:
    """
    Read model behind the dashboard.

    Takes the read channels of the stores (``store.items``) so it can
    never mutate them.
    """

    def __init__(
        self,
        transactions: ReadonlySignal[tuple[Transaction, ...]],
        accounts: ReadonlySignal[tuple[Account, ...]],
        budgets: ReadonlySignal[tuple[Budget, ...]],
        filter_state: Optional[FilterState] = None,
    ):
        self._transactions = transactions
        self._accounts = accounts
        self.filters = filter_state or FilterState()

        self.filtered_transactions: Computed[tuple[Transaction, ...]] = Computed(
            lambda: filter_transactions(self._transactions(), self.filters.value()),
            self._transactions,
            self.filters.value,
            name="dashboard.filtered_transactions",
        )
        self.filtered_summary: Computed[TransactionSummary] = Computed(
            lambda: summarize(self.filtered_transactions()),
            self.filtered_transactions,
            name="dashboard.filtered_summary",
        )
        self.filtered_income: Computed[Decimal] = Computed(
            lambda: self.filtered_summary().income,
            self.filtered_summary,
            name="dashboard.filtered_income",
        )
        self.filtered_expenses: Computed[Decimal] = Computed(
            lambda: self.filtered_summary().expenses,
            self.filtered_summary,
            name="dashboard.filtered_expenses",
        )
        self.filtered_balance: Computed[Decimal] = Computed(
            lambda: self.filtered_summary().balance,
            self.filtered_summary,
            name="dashboard.filtered_balance",
        )
        self.spending_by_category: Computed[list[CategorySpending]] = Computed(
            lambda: spending_by_category(self.filtered_transactions()),
            self.filtered_transactions,
            name="dashboard.spending_by_category",
        )
        self.budgets_with_progress: Computed[tuple[BudgetProgress, ...]] = Computed(
            lambda: budgets_with_progress(budgets()),
            budgets,
            name="dashboard.budgets_with_progress",
        )

        self._stop_logging = effect(self._log_filters, self.filtered_transactions)

    def account_name(self, account_id: str) -> str:
        for account in self._accounts():
            if account.id == account_id:
                return account.name
        return UNKNOWN_ACCOUNT

    def close(self) -> None:
        """Stop the filter-change log."""
        self._stop_logging()

    def _log_filters(self) -> None:
        criteria = self.filters.value()
        logger.debug(
            "filters_changed",
            type=str(getattr(criteria.type, "value", criteria.type)),
            category=str(getattr(criteria.category, "value", criteria.category)),
            date_from=criteria.date_from.isoformat() if criteria.date_from else None,
            date_to=criteria.date_to.isoformat() if criteria.date_to else None,
            result_count=len(self.filtered_transactions()),
        )
