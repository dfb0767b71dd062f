"""
Budget Store

A new budget starts with spent = 0 and an end_date one period after
its start_date. Neither is caller-editable; spent only moves through
adjust_spent, and end_date is never recomputed.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from dateutil.relativedelta import relativedelta

from finance_tracker.models.budget import (
    Budget,
    BudgetPeriod,
    BudgetProgress,
    CreateBudgetRequest,
    UpdateBudgetRequest,
)
from finance_tracker.models.transaction import TransactionCategory
from finance_tracker.queries.aggregates import budgets_with_progress
from finance_tracker.reactive import Computed
from finance_tracker.stores.base import InMemoryEntityStore

# Month and year steps clamp to the last valid day (Jan 31 + 1 month = Feb 28/29)
PERIOD_LENGTHS = {
    BudgetPeriod.WEEKLY: relativedelta(weeks=1),
    BudgetPeriod.MONTHLY: relativedelta(months=1),
    BudgetPeriod.YEARLY: relativedelta(years=1),
}


def period_end(start_date: date, period: BudgetPeriod) -> date:
    """End date of a budget window starting at ``start_date``."""
    return start_date + PERIOD_LENGTHS[BudgetPeriod(period)]


class BudgetStore(InMemoryEntityStore[Budget]):
    """Store of per-category budgets."""

    entity_type = "budget"
    model = Budget
    create_model = CreateBudgetRequest
    update_model = UpdateBudgetRequest

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.budgets_with_progress: Computed[tuple[BudgetProgress, ...]] = Computed(
            lambda: budgets_with_progress(self._items()),
            self._items,
            name="budgets.with_progress",
        )

    def _creation_fields(self, request: CreateBudgetRequest) -> dict[str, Any]:
        fields = request.model_dump()
        fields["spent"] = Decimal("0")
        fields["end_date"] = period_end(request.start_date, request.period)
        return fields

    async def list_by_category(self, category: TransactionCategory) -> tuple[Budget, ...]:
        category = TransactionCategory(category)
        return tuple(budget for budget in self._items() if budget.category == category)

    async def adjust_spent(
        self,
        category: Union[TransactionCategory, str],
        delta: Union[Decimal, int, str],
        *,
        correlation_id: Optional[UUID] = None,
    ) -> list[Budget]:
        """
        Add ``delta`` to spent on every budget of ``category``.

        A negative delta reverts spending. No matching budget is a
        silent no-op (logged and audited) and returns an empty list.
        """
        category = TransactionCategory(category)
        amount = Decimal(str(delta))

        changed = await self._adjust(
            lambda budget: budget.category == category,
            lambda budget: {"spent": budget.spent + amount},
            "adjust_spent",
            correlation_id,
        )

        if not changed:
            self._logger.warning("spent_adjust_skipped", category=category.value)
            if self._audit_logger is not None:
                await self._audit_logger.log_adjustment_skipped(
                    entity_type=self.entity_type,
                    key=category.value,
                    reason="no budget for category",
                    correlation_id=correlation_id,
                )
            return changed

        budget_ids = [budget.id for budget in changed]
        self._logger.info(
            "spent_adjusted",
            category=category.value,
            delta=str(amount),
            budget_ids=budget_ids,
        )
        if self._audit_logger is not None:
            await self._audit_logger.log_spent_adjusted(
                category=category.value,
                delta=str(amount),
                budget_ids=budget_ids,
                correlation_id=correlation_id,
            )
        return changed
