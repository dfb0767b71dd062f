"""
Account Models

An account holds a balance in one currency. Balances are signed:
credit cards and overdrawn accounts are negative, and nothing in
the core forbids that.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccountType(str, Enum):
    """Supported account kinds."""
    CHECKING = "Checking"
    SAVINGS = "Savings"
    CREDIT_CARD = "Credit Card"
    INVESTMENT = "Investment"
    CASH = "Cash"


# ISO 4217 alphabetic code shape, e.g. USD, EUR, INR
CURRENCY_PATTERN = r"^[A-Z]{3}$"


def _upper_currency(v):
    return v.strip().upper() if isinstance(v, str) else v


class Account(BaseModel):
    """A stored account. Immutable: updates produce a new instance."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(
        default="1",
        description="Implicit single owner"
    )
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    balance: Decimal = Field(
        ...,
        decimal_places=2,
        description="Signed balance; may be negative"
    )
    currency: str = Field(..., pattern=CURRENCY_PATTERN)
    created_at: datetime
    updated_at: datetime

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, v):
        return _upper_currency(v)


class CreateAccountRequest(BaseModel):
    """Caller-supplied fields for a new account."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    balance: Decimal = Field(default=Decimal("0"), decimal_places=2)
    currency: Optional[str] = Field(
        default=None,
        pattern=CURRENCY_PATTERN,
        description="Defaults to the configured store currency"
    )

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, v):
        return _upper_currency(v)


class UpdateAccountRequest(BaseModel):
    """
    Partial update of an account.

    The balance is not editable here; it only moves through
    AccountStore.adjust_balance.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)

    @field_validator('currency', mode='before')
    @classmethod
    def normalize_currency(cls, v):
        return _upper_currency(v)
