"""
Account Store

Balances move in two ways only: an explicit value at creation, and
adjust_balance afterwards. UpdateAccountRequest has no balance field.
"""

from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from finance_tracker.models.account import (
    Account,
    CreateAccountRequest,
    UpdateAccountRequest,
)
from finance_tracker.queries.aggregates import total_account_balance
from finance_tracker.reactive import Computed
from finance_tracker.stores.base import InMemoryEntityStore


class AccountStore(InMemoryEntityStore[Account]):
    """Store of the user's accounts."""

    entity_type = "account"
    model = Account
    create_model = CreateAccountRequest
    update_model = UpdateAccountRequest

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.total_balance: Computed[Decimal] = Computed(
            lambda: total_account_balance(self._items()),
            self._items,
            name="accounts.total_balance",
        )

    def _creation_fields(self, request: CreateAccountRequest) -> dict[str, Any]:
        fields = request.model_dump()
        if fields["currency"] is None:
            fields["currency"] = self._settings.default_currency
        return fields

    async def adjust_balance(
        self,
        account_id: str,
        delta: Union[Decimal, int, str],
        is_credit: bool,
        *,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[Account]:
        """
        Credit or debit an account.

        balance += delta when is_credit, else balance -= delta.

        An unknown account_id is not an error: nothing changes and
        None is returned. This differs from update/delete on purpose;
        the skip is logged and audited so it is still visible.
        """
        amount = Decimal(str(delta))
        signed = amount if is_credit else -amount

        changed = await self._adjust(
            lambda account: account.id == account_id,
            lambda account: {"balance": account.balance + signed},
            "adjust_balance",
            correlation_id,
        )

        if not changed:
            self._logger.warning("balance_adjust_skipped", account_id=account_id)
            if self._audit_logger is not None:
                await self._audit_logger.log_adjustment_skipped(
                    entity_type=self.entity_type,
                    key=account_id,
                    reason="account not found",
                    correlation_id=correlation_id,
                )
            return None

        account = changed[0]
        self._logger.info(
            "balance_adjusted",
            account_id=account_id,
            delta=str(signed),
            balance=str(account.balance),
        )
        if self._audit_logger is not None:
            await self._audit_logger.log_balance_adjusted(
                account_id=account_id,
                delta=str(amount),
                is_credit=is_credit,
                new_balance=str(account.balance),
                correlation_id=correlation_id,
            )
        return account
