"""Entity stores package."""

from finance_tracker.stores.accounts import AccountStore
from finance_tracker.stores.base import InMemoryEntityStore
from finance_tracker.stores.budgets import BudgetStore, period_end
from finance_tracker.stores.interface import (
    DuplicateError,
    EntityStoreInterface,
    NotFoundError,
    StoreError,
    UnexpectedStoreError,
    ValidationFailedError,
)
from finance_tracker.stores.transactions import TransactionStore

__all__ = [
    # Stores
    "AccountStore",
    "BudgetStore",
    "EntityStoreInterface",
    "InMemoryEntityStore",
    "TransactionStore",
    "period_end",
    # Errors
    "DuplicateError",
    "NotFoundError",
    "StoreError",
    "UnexpectedStoreError",
    "ValidationFailedError",
]
