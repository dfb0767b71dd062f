"""
Shared fixtures.

Stores are built with zero latency and seeded from the fixture
records; seeded budgets belong to October 2025 so dates are stable.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from finance_tracker.audit import AuditLogger, InMemoryAuditStorage
from finance_tracker.config import AppSettings, SessionSettings, StoreSettings
from finance_tracker.models import (
    Budget,
    BudgetPeriod,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from finance_tracker.stores import AccountStore, BudgetStore, TransactionStore
from finance_tracker.stores import fixtures

SEED_DAY = date(2025, 10, 15)
STAMP = datetime(2025, 10, 1, tzinfo=timezone.utc)


def make_transaction(
    txn_id: str,
    txn_type: TransactionType = TransactionType.EXPENSE,
    category: TransactionCategory = TransactionCategory.FOOD,
    amount: str = "10",
    day: date = date(2025, 10, 1),
    account_id: str = "1",
) -> Transaction:
    return Transaction(
        id=txn_id,
        account_id=account_id,
        type=txn_type,
        category=category,
        amount=Decimal(amount),
        description=f"Transaction {txn_id}",
        date=day,
        created_at=STAMP,
        updated_at=STAMP,
    )


def make_budget(
    budget_id: str,
    amount: str,
    spent: str = "0",
    category: TransactionCategory = TransactionCategory.FOOD,
) -> Budget:
    return Budget(
        id=budget_id,
        category=category,
        amount=Decimal(amount),
        spent=Decimal(spent),
        period=BudgetPeriod.MONTHLY,
        start_date=date(2025, 10, 1),
        end_date=date(2025, 11, 1),
        created_at=STAMP,
        updated_at=STAMP,
    )


@pytest.fixture
def store_settings() -> StoreSettings:
    return StoreSettings(mutation_latency_ms=0, default_currency="USD")


@pytest.fixture
def session_settings() -> SessionSettings:
    return SessionSettings(auth_latency_ms=0)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(future_date_tolerance_days=7)


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def accounts(store_settings, audit_logger) -> AccountStore:
    return AccountStore(
        fixtures.seed_accounts(),
        settings=store_settings,
        audit_logger=audit_logger,
    )


@pytest.fixture
def transactions(store_settings, audit_logger) -> TransactionStore:
    return TransactionStore(
        fixtures.seed_transactions(),
        settings=store_settings,
        audit_logger=audit_logger,
    )


@pytest.fixture
def budgets(store_settings, audit_logger) -> BudgetStore:
    return BudgetStore(
        fixtures.seed_budgets(SEED_DAY),
        settings=store_settings,
        audit_logger=audit_logger,
    )


@pytest.fixture
def empty_budgets(store_settings, audit_logger) -> BudgetStore:
    return BudgetStore(settings=store_settings, audit_logger=audit_logger)
