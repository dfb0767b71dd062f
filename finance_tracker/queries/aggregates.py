"""
Aggregate Derivations

Pure functions over entity collections. Nothing here is cached or
stored: the reactive layer decides when to call them, and every call
reflects exactly the collection it was given.

DESIGN DECISION: Money stays Decimal end to end. Only budget progress
(a percentage for display) is a float, so that a zero-amount budget
can report +inf without a Decimal special value.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Sequence

from finance_tracker.models.account import Account
from finance_tracker.models.budget import Budget, BudgetProgress, BudgetStatus
from finance_tracker.models.filters import (
    FILTER_ALL,
    CategorySpending,
    TransactionFilter,
    TransactionSummary,
)
from finance_tracker.models.transaction import Transaction, TransactionType

ZERO = Decimal("0")

# Progress at or above this percentage flags a budget as nearly spent
WARNING_THRESHOLD = 80.0


# =============================================================================
# TOTALS
# =============================================================================

def total_account_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of all account balances."""
    return sum((account.balance for account in accounts), ZERO)


def transaction_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Net of all transactions: income adds, expenses subtract."""
    return sum((txn.signed_amount for txn in transactions), ZERO)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (txn.amount for txn in transactions if txn.type == TransactionType.INCOME),
        ZERO,
    )


def total_expenses(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (txn.amount for txn in transactions if txn.type == TransactionType.EXPENSE),
        ZERO,
    )


def summarize(transactions: Iterable[Transaction]) -> TransactionSummary:
    """Income, expenses and count in one pass."""
    income = ZERO
    expenses = ZERO
    count = 0
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
        count += 1
    return TransactionSummary(income=income, expenses=expenses, count=count)


# =============================================================================
# BUDGETS
# =============================================================================

def progress_percent(spent: Decimal, amount: Decimal) -> float:
    """
    spent / amount * 100.

    A zero amount has no ratio: it reports 0.0 while nothing is spent
    and +inf once anything is.
    """
    if amount == 0:
        return float("inf") if spent > 0 else 0.0
    return float(spent / amount * 100)


def budget_status(progress: float, is_over_budget: bool) -> BudgetStatus:
    if is_over_budget:
        return BudgetStatus.OVER_BUDGET
    if progress >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.GOOD


def budget_progress(budget: Budget) -> BudgetProgress:
    progress = progress_percent(budget.spent, budget.amount)
    is_over_budget = budget.spent > budget.amount
    return BudgetProgress(
        **budget.model_dump(),
        progress=progress,
        remaining=budget.amount - budget.spent,
        is_over_budget=is_over_budget,
        status=budget_status(progress, is_over_budget),
    )


def budgets_with_progress(budgets: Iterable[Budget]) -> tuple[BudgetProgress, ...]:
    return tuple(budget_progress(budget) for budget in budgets)


# =============================================================================
# TRANSACTION VIEW
# =============================================================================

def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: TransactionFilter,
) -> tuple[Transaction, ...]:
    """
    Apply the type, category, date_from and date_to selectors.

    Both date bounds are inclusive. The result is ordered by date,
    newest first; transactions on the same date keep their
    collection order (sorted() is stable).
    """
    result: Iterable[Transaction] = transactions

    if criteria.type != FILTER_ALL:
        result = [txn for txn in result if txn.type == criteria.type]

    if criteria.category != FILTER_ALL:
        result = [txn for txn in result if txn.category == criteria.category]

    if criteria.date_from is not None:
        result = [txn for txn in result if txn.date >= criteria.date_from]

    if criteria.date_to is not None:
        result = [txn for txn in result if txn.date <= criteria.date_to]

    return tuple(sorted(result, key=lambda txn: txn.date, reverse=True))


def spending_by_category(transactions: Iterable[Transaction]) -> list[CategorySpending]:
    """Expense totals per category, largest first."""
    totals: dict = defaultdict(lambda: ZERO)
    counts: dict = defaultdict(int)
    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        totals[txn.category] += txn.amount
        counts[txn.category] += 1

    return sorted(
        (
            CategorySpending(category=category, total=total, transaction_count=counts[category])
            for category, total in totals.items()
        ),
        key=lambda row: row.total,
        reverse=True,
    )
