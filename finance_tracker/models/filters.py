"""
Transaction View Models

Value objects for the filtered transaction view: the filter
parameters a caller selects, and the summaries computed from
the filtered sequence.
"""

from datetime import date
from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker.models.transaction import TransactionCategory, TransactionType


# Selector value meaning "do not filter on this field"
FILTER_ALL = "ALL"


class TransactionFilter(BaseModel):
    """
    Parameters narrowing the transaction view.

    Pure value holder. An empty string for either date means unset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Union[Literal["ALL"], TransactionType] = FILTER_ALL
    category: Union[Literal["ALL"], TransactionCategory] = FILTER_ALL
    date_from: Optional[date] = Field(
        default=None,
        description="Inclusive lower bound on Transaction.date"
    )
    date_to: Optional[date] = Field(
        default=None,
        description="Inclusive upper bound on Transaction.date"
    )

    @field_validator('date_from', 'date_to', mode='before')
    @classmethod
    def empty_string_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_active(self) -> bool:
        """True if any selector narrows the view."""
        return (
            self.type != FILTER_ALL
            or self.category != FILTER_ALL
            or self.date_from is not None
            or self.date_to is not None
        )


class TransactionSummary(BaseModel):
    """Income / expense / net totals over a sequence of transactions."""

    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    count: int = Field(default=0, ge=0)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


class CategorySpending(BaseModel):
    """Expense total for one category."""

    model_config = ConfigDict(frozen=True)

    category: TransactionCategory
    total: Decimal
    transaction_count: int = Field(ge=0)
