"""
Transaction Models

A transaction records one movement of money against an account.
The stored amount is always positive; the direction is carried
by ``type`` (INCOME adds, EXPENSE subtracts).

DESIGN DECISION: ``date`` is the economic date of the movement and is
kept separate from the audit timestamps ``created_at`` / ``updated_at``.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class TransactionCategory(str, Enum):
    """
    Closed set of transaction categories.

    Budgets share this enumeration; a budget tracks the expenses
    of one category.
    """
    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENT = "Investment"
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTHCARE = "Healthcare"
    SHOPPING = "Shopping"
    OTHER = "Other"


INCOME_CATEGORIES = frozenset({
    TransactionCategory.SALARY,
    TransactionCategory.FREELANCE,
    TransactionCategory.INVESTMENT,
})

# Categories a budget is normally created for
EXPENSE_CATEGORIES = frozenset(
    category for category in TransactionCategory
    if category not in INCOME_CATEGORIES
)


# =============================================================================
# ENTITY
# =============================================================================

class Transaction(BaseModel):
    """A stored transaction. Immutable: updates produce a new instance."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    account_id: str = Field(
        ...,
        min_length=1,
        description="Account this transaction belongs to"
    )
    type: TransactionType
    category: TransactionCategory
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Positive amount; direction comes from type"
    )
    description: str = Field(..., min_length=1, max_length=500)
    date: dt.date = Field(..., description="Economic date of the transaction")
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the transaction type."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount


# =============================================================================
# REQUESTS
# =============================================================================

class CreateTransactionRequest(BaseModel):
    """Caller-supplied fields for a new transaction."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    account_id: str = Field(..., min_length=1)
    type: TransactionType
    category: TransactionCategory
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=500)
    date: dt.date


class UpdateTransactionRequest(BaseModel):
    """
    Partial update of a transaction.

    The owning account cannot be changed after creation.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    date: Optional[dt.date] = None
