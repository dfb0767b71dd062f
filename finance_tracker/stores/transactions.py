"""
Transaction Store

CRITICAL: Creating, updating or deleting a transaction here never
touches account balances or budget totals. Those side effects are
applied only through FinanceCoordinator.
"""

from decimal import Decimal

from finance_tracker.models.transaction import (
    CreateTransactionRequest,
    Transaction,
    UpdateTransactionRequest,
)
from finance_tracker.queries.aggregates import (
    total_expenses,
    total_income,
    transaction_balance,
)
from finance_tracker.reactive import Computed
from finance_tracker.stores.base import InMemoryEntityStore


class TransactionStore(InMemoryEntityStore[Transaction]):
    """Store of all transactions across accounts."""

    entity_type = "transaction"
    model = Transaction
    create_model = CreateTransactionRequest
    update_model = UpdateTransactionRequest

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.total_balance: Computed[Decimal] = Computed(
            lambda: transaction_balance(self._items()),
            self._items,
            name="transactions.total_balance",
        )
        self.total_income: Computed[Decimal] = Computed(
            lambda: total_income(self._items()),
            self._items,
            name="transactions.total_income",
        )
        self.total_expenses: Computed[Decimal] = Computed(
            lambda: total_expenses(self._items()),
            self._items,
            name="transactions.total_expenses",
        )

    async def list_by_account(self, account_id: str) -> tuple[Transaction, ...]:
        """Transactions of one account, in insertion order."""
        return tuple(txn for txn in self._items() if txn.account_id == account_id)
