"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker core.
Stored entities are frozen: every change produces a new instance.
"""

from finance_tracker.models.account import (
    Account,
    AccountType,
    CreateAccountRequest,
    UpdateAccountRequest,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finance_tracker.models.budget import (
    Budget,
    BudgetPeriod,
    BudgetProgress,
    BudgetStatus,
    CreateBudgetRequest,
    UpdateBudgetRequest,
)
from finance_tracker.models.filters import (
    FILTER_ALL,
    CategorySpending,
    TransactionFilter,
    TransactionSummary,
)
from finance_tracker.models.transaction import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    CreateTransactionRequest,
    Transaction,
    TransactionCategory,
    TransactionType,
    UpdateTransactionRequest,
)
from finance_tracker.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    User,
)
from finance_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
    issues_from_pydantic,
)

__all__ = [
    # Account models
    "Account",
    "AccountType",
    "CreateAccountRequest",
    "UpdateAccountRequest",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Budget models
    "Budget",
    "BudgetPeriod",
    "BudgetProgress",
    "BudgetStatus",
    "CreateBudgetRequest",
    "UpdateBudgetRequest",
    # Transaction view models
    "FILTER_ALL",
    "CategorySpending",
    "TransactionFilter",
    "TransactionSummary",
    # Transaction models
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "CreateTransactionRequest",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "UpdateTransactionRequest",
    # Session models
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "User",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    "issues_from_pydantic",
]
