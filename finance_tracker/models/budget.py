"""
Budget Models

A budget caps the spending of one transaction category over a period.

CRITICAL: ``end_date`` is derived from ``start_date`` + ``period`` when
the budget is created and is never recomputed afterwards, even if the
period is later updated.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from finance_tracker.models.transaction import TransactionCategory


class BudgetPeriod(str, Enum):
    """Length of a budget window."""
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class BudgetStatus(str, Enum):
    """Where a budget stands against its ceiling."""
    GOOD = "good"
    WARNING = "warning"
    OVER_BUDGET = "over-budget"


class Budget(BaseModel):
    """A stored budget. Immutable: updates produce a new instance."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(default="1", description="Implicit single owner")
    category: TransactionCategory
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Budget ceiling"
    )
    spent: Decimal = Field(
        default=Decimal("0"),
        decimal_places=2,
        description="Running total of spending against this budget"
    )
    period: BudgetPeriod
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime

    @model_validator(mode='after')
    def validate_window(self) -> 'Budget':
        if self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


class BudgetProgress(Budget):
    """
    A budget together with its derived progress figures.

    Never stored; produced by the derivation layer on every read.
    """

    progress: float = Field(
        ...,
        description="spent / amount * 100 (0 or +inf when amount is zero)"
    )
    remaining: Decimal = Field(..., description="amount - spent")
    is_over_budget: bool
    status: BudgetStatus


class CreateBudgetRequest(BaseModel):
    """Caller-supplied fields for a new budget."""

    model_config = ConfigDict(extra="forbid")

    category: TransactionCategory
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: date


class UpdateBudgetRequest(BaseModel):
    """
    Partial update of a budget.

    spent, start_date and end_date are not caller-editable.
    """

    model_config = ConfigDict(extra="forbid")

    category: Optional[TransactionCategory] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    period: Optional[BudgetPeriod] = None
