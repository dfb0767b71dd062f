"""
Cross-Store Coordinator

This module ties the three entity stores together and defines the
flows that span more than one of them:
1. Record a transaction (validate → create → optionally apply effects)
2. Remove or edit a transaction (optionally reverting its effects)
3. Create a budget (validate → create)

CRITICAL: Effects on balances and budgets are opt-in. Creating a
transaction never moves a balance or a budget total unless the caller
asks for it (apply_effects=True) or calls apply_transaction_effects.
TransactionStore on its own never touches the other stores.

Every flow gets a correlation id, so the transaction and each of its
effects can be traced together in the audit trail.

CRITICAL: Transaction flows hold the coordinator lock from the first
read to the last effect. Two edits of the same transaction issued
concurrently therefore revert and reapply in issue order.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from finance_tracker.audit import (
    AuditLogger,
    AuditStorageInterface,
    InMemoryAuditStorage,
    configure_logging,
    create_correlation_id,
)
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.account import Account
from finance_tracker.models.budget import Budget
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.models.validation import ValidationResult
from finance_tracker.queries.dashboard import DashboardView, FilterState
from finance_tracker.session import (
    AuthService,
    InMemorySessionStorage,
    JsonFileSessionStorage,
    MockSessionStore,
    SessionStorageBackend,
)
from finance_tracker.stores import (
    AccountStore,
    BudgetStore,
    TransactionStore,
    ValidationFailedError,
)
from finance_tracker.stores import fixtures
from finance_tracker.stores.interface import Fields
from finance_tracker.validation import FinanceValidator

logger = structlog.get_logger(__name__)


@dataclass
class TransactionEffects:
    """What applying (or reverting) a transaction changed."""

    account: Optional[Account] = None
    budgets: list[Budget] = field(default_factory=list)


class FinanceCoordinator:
    """
    Runs the flows that touch several stores.

    Each store call is atomic on its own. Transaction flows are
    serialized against each other but not against direct store calls.
    If the transaction is created but the account is gone, the balance
    effect is skipped and recorded in the audit trail.
    """

    def __init__(
        self,
        accounts: AccountStore,
        transactions: TransactionStore,
        budgets: BudgetStore,
        validator: Optional[FinanceValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._accounts = accounts
        self._transactions = transactions
        self._budgets = budgets
        self._validator = validator or FinanceValidator(accounts, budgets)
        self._audit_logger = audit_logger
        self._lock = asyncio.Lock()

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    async def record_transaction(
        self,
        fields: Fields,
        apply_effects: bool = False,
    ) -> Transaction:
        """
        Validate and create a transaction.

        Args:
            fields: CreateTransactionRequest fields
            apply_effects: Also credit/debit the account and, for an
                          expense, add to the matching budgets

        Raises:
            ValidationFailedError: If validation found errors (nothing is created)
        """
        correlation_id = create_correlation_id()

        result = await self._validator.validate_transaction(fields)
        await self._ensure_valid(result, "record_transaction", correlation_id)

        async with self._lock:
            txn = await self._transactions.create(fields, correlation_id=correlation_id)
            logger.info(
                "transaction_recorded",
                transaction_id=txn.id,
                apply_effects=apply_effects,
                correlation_id=str(correlation_id),
            )

            if apply_effects:
                await self.apply_transaction_effects(txn, correlation_id=correlation_id)
        return txn

    async def update_transaction(
        self,
        transaction_id: str,
        fields: Fields,
        reapply_effects: bool = False,
    ) -> Transaction:
        """
        Update a transaction.

        With reapply_effects=True the effects of the old version are
        reverted and those of the new version applied.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        correlation_id = create_correlation_id()
        async with self._lock:
            before = await self._transactions.get_by_id(transaction_id)
            after = await self._transactions.update(
                transaction_id, fields, correlation_id=correlation_id
            )

            if reapply_effects and before is not None:
                await self.revert_transaction_effects(before, correlation_id=correlation_id)
                await self.apply_transaction_effects(after, correlation_id=correlation_id)
        return after

    async def remove_transaction(
        self,
        transaction_id: str,
        revert_effects: bool = False,
    ) -> Transaction:
        """
        Delete a transaction and return the removed record.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        correlation_id = create_correlation_id()
        async with self._lock:
            txn = await self._transactions.get_by_id(transaction_id)
            await self._transactions.delete(transaction_id, correlation_id=correlation_id)

            if revert_effects:
                await self.revert_transaction_effects(txn, correlation_id=correlation_id)
        return txn

    async def apply_transaction_effects(
        self,
        txn: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionEffects:
        """
        Income credits the account; an expense debits it and adds to
        every budget of its category.
        """
        return await self._move(txn, reverse=False, correlation_id=correlation_id)

    async def revert_transaction_effects(
        self,
        txn: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionEffects:
        """Undo apply_transaction_effects for ``txn``."""
        return await self._move(txn, reverse=True, correlation_id=correlation_id)

    async def _move(
        self,
        txn: Transaction,
        reverse: bool,
        correlation_id: Optional[UUID],
    ) -> TransactionEffects:
        correlation_id = correlation_id or create_correlation_id()
        is_income = txn.type == TransactionType.INCOME

        account = await self._accounts.adjust_balance(
            txn.account_id,
            txn.amount,
            is_credit=is_income != reverse,
            correlation_id=correlation_id,
        )

        budgets: list[Budget] = []
        if not is_income:
            budgets = await self._budgets.adjust_spent(
                txn.category,
                -txn.amount if reverse else txn.amount,
                correlation_id=correlation_id,
            )

        return TransactionEffects(account=account, budgets=budgets)

    # =========================================================================
    # BUDGETS
    # =========================================================================

    async def create_budget(self, fields: Fields) -> Budget:
        """
        Validate and create a budget.

        Raises:
            ValidationFailedError: If validation found errors (nothing is created)
        """
        correlation_id = create_correlation_id()
        result = await self._validator.validate_budget(fields)
        await self._ensure_valid(result, "create_budget", correlation_id)
        return await self._budgets.create(fields, correlation_id=correlation_id)

    async def _ensure_valid(
        self,
        result: ValidationResult,
        operation: str,
        correlation_id: UUID,
    ) -> None:
        if result.warnings:
            logger.warning(
                "validation_warnings",
                operation=operation,
                warnings=result.warnings,
            )
        if result.is_valid:
            return

        issues = [issue.model_dump() for issue in result.issues]
        if self._audit_logger is not None:
            await self._audit_logger.log_validation_failed(
                subject=result.subject,
                operation=operation,
                issues=issues,
                correlation_id=correlation_id,
            )
        raise ValidationFailedError(
            self._validator.get_user_friendly_summary(result),
            result.issues,
        )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

@dataclass
class AppComponents:
    """Everything a UI needs, wired together. Owned by the caller."""

    settings: Settings
    audit_logger: AuditLogger
    accounts: AccountStore
    transactions: TransactionStore
    budgets: BudgetStore
    validator: FinanceValidator
    coordinator: FinanceCoordinator
    filters: FilterState
    dashboard: DashboardView
    auth: AuthService


def create_app_components(
    settings: Optional[Settings] = None,
    seed: Optional[bool] = None,
    today: Optional[date] = None,
    store_latency: Optional[float] = None,
    auth_latency: Optional[float] = None,
    session_storage: Optional[SessionStorageBackend] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    setup_logging: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to get_settings()
        seed: Load fixture records. Defaults to StoreSettings.seed_fixtures
        today: Month the seeded budgets belong to (default: current month)
        store_latency: Seconds per store mutation, overriding settings
        auth_latency: Seconds per login/register, overriding settings
        session_storage: Defaults to a JSON file when
                        FINANCE_SESSION_STORAGE_PATH is set, else memory
        audit_storage: Defaults to an in-memory audit trail capped at
                      AppSettings.audit_max_events
        setup_logging: Configure structlog from AppSettings

    Returns:
        AppComponents holding every store and service
    """
    settings = settings or get_settings()
    store_settings = settings.store
    session_settings = settings.session

    if setup_logging:
        app_settings = settings.app
        configure_logging(app_settings.log_level, app_settings.log_json)

    if seed is None:
        seed = store_settings.seed_fixtures

    if audit_storage is None:
        audit_storage = InMemoryAuditStorage(max_events=settings.app.audit_max_events)
    audit_logger = AuditLogger(audit_storage)

    store_kwargs = {
        "settings": store_settings,
        "audit_logger": audit_logger,
        "latency": store_latency,
    }

    accounts = AccountStore(fixtures.seed_accounts() if seed else (), **store_kwargs)
    transactions = TransactionStore(fixtures.seed_transactions() if seed else (), **store_kwargs)
    budgets = BudgetStore(fixtures.seed_budgets(today) if seed else (), **store_kwargs)

    validator = FinanceValidator(accounts, budgets)
    coordinator = FinanceCoordinator(
        accounts,
        transactions,
        budgets,
        validator=validator,
        audit_logger=audit_logger,
    )

    filters = FilterState()
    dashboard = DashboardView(transactions.items, accounts.items, budgets.items, filters)

    if session_storage is None:
        if session_settings.storage_path:
            session_storage = JsonFileSessionStorage(
                session_settings.storage_path,
                retry_attempts=session_settings.write_retry_attempts,
            )
        else:
            session_storage = InMemorySessionStorage()
    auth = AuthService(
        MockSessionStore(session_storage, settings=session_settings),
        settings=session_settings,
        audit_logger=audit_logger,
        latency=auth_latency,
    )

    logger.info("app_components_created", seeded=seed, accounts=len(accounts))

    return AppComponents(
        settings=settings,
        audit_logger=audit_logger,
        accounts=accounts,
        transactions=transactions,
        budgets=budgets,
        validator=validator,
        coordinator=coordinator,
        filters=filters,
        dashboard=dashboard,
        auth=auth,
    )
