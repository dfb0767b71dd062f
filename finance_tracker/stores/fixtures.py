"""
Seed Fixtures

The records every store starts with when StoreSettings.seed_fixtures
is enabled. Fixture ids are short integers so they can never collide
with generated ids.

Budgets are anchored to the current month: they start on its first
day and end on its last, with spent matching the seeded expenses.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional

from finance_tracker.models.account import Account, AccountType
from finance_tracker.models.budget import Budget, BudgetPeriod
from finance_tracker.models.transaction import (
    Transaction,
    TransactionCategory,
    TransactionType,
)
from finance_tracker.utils import end_of_month, start_of_month, utc_now


def _at_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def seed_accounts() -> list[Account]:
    updated = _at_midnight(date(2025, 10, 12))
    return [
        Account(
            id="1",
            name="Main Checking",
            type=AccountType.CHECKING,
            balance=Decimal("15420"),
            currency="USD",
            created_at=_at_midnight(date(2025, 1, 1)),
            updated_at=updated,
        ),
        Account(
            id="2",
            name="Savings Account",
            type=AccountType.SAVINGS,
            balance=Decimal("25000"),
            currency="USD",
            created_at=_at_midnight(date(2025, 1, 1)),
            updated_at=updated,
        ),
        Account(
            id="3",
            name="Credit Card",
            type=AccountType.CREDIT_CARD,
            balance=Decimal("-1250"),
            currency="USD",
            created_at=_at_midnight(date(2025, 3, 15)),
            updated_at=updated,
        ),
    ]


# (id, account, type, category, amount, description, date)
_TRANSACTIONS = [
    ("1", "1", TransactionType.INCOME, TransactionCategory.SALARY,
     "5000", "Monthly Salary", date(2025, 10, 1)),
    ("2", "1", TransactionType.EXPENSE, TransactionCategory.FOOD,
     "250", "Grocery Shopping", date(2025, 10, 5)),
    ("3", "1", TransactionType.EXPENSE, TransactionCategory.TRANSPORT,
     "120", "Gas and Parking", date(2025, 10, 7)),
    ("4", "2", TransactionType.INCOME, TransactionCategory.FREELANCE,
     "1200", "Web Development Project", date(2025, 10, 8)),
    ("5", "1", TransactionType.EXPENSE, TransactionCategory.ENTERTAINMENT,
     "80", "Movie and Dinner", date(2025, 10, 10)),
]


def seed_transactions() -> list[Transaction]:
    return [
        Transaction(
            id=txn_id,
            account_id=account_id,
            type=txn_type,
            category=category,
            amount=Decimal(amount),
            description=description,
            date=day,
            created_at=_at_midnight(day),
            updated_at=_at_midnight(day),
        )
        for txn_id, account_id, txn_type, category, amount, description, day in _TRANSACTIONS
    ]


def seed_budgets(today: Optional[date] = None) -> list[Budget]:
    """Monthly budgets for the month containing ``today``."""
    start = start_of_month(today)
    end = end_of_month(today)
    now = utc_now()

    def budget(budget_id: str, category: TransactionCategory, amount: str, spent: str) -> Budget:
        return Budget(
            id=budget_id,
            category=category,
            amount=Decimal(amount),
            spent=Decimal(spent),
            period=BudgetPeriod.MONTHLY,
            start_date=start,
            end_date=end,
            created_at=_at_midnight(start),
            updated_at=now,
        )

    return [
        budget("1", TransactionCategory.FOOD, "600", "250"),
        budget("2", TransactionCategory.ENTERTAINMENT, "300", "80"),
        budget("3", TransactionCategory.TRANSPORT, "200", "120"),
    ]
