"""
Two-Stage Validation Pipeline

DESIGN DECISION: Commands that touch more than one store are validated
in two distinct stages before anything is mutated:

STAGE 1 - SCHEMA VALIDATION:
- Type checking, required fields, formats
- Done by parsing the request model; pydantic errors become issues

STAGE 2 - SEMANTIC VALIDATION:
- Transaction references an existing account (error)
- Category agrees with the transaction type (warning)
- Date not too far in the future (warning)
- Budget is for an expense-like category (warning)
- No other budget for the same category and period (warning)

Stage 2 only runs if stage 1 passes. Only errors block a command;
warnings are returned so the caller can show them.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the caller to act on.
"""

from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, ValidationError

from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.budget import CreateBudgetRequest
from finance_tracker.models.transaction import (
    INCOME_CATEGORIES,
    CreateTransactionRequest,
    TransactionCategory,
    TransactionType,
)
from finance_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
    issues_from_pydantic,
)
from finance_tracker.stores.interface import EntityStoreInterface, Fields


class FinanceValidator:
    """
    Validates transaction and budget commands through a two-stage pipeline.

    Stage 1: Schema validation (runs without stores)
    Stage 2: Semantic validation (uses stores for reference checks)
    """

    def __init__(
        self,
        account_store: Optional[EntityStoreInterface] = None,
        budget_store: Optional[EntityStoreInterface] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            account_store: Used to check that transactions reference a real account.
                          If None, the reference check is skipped.
            budget_store: Used to detect budgets that duplicate an existing one.
                         If None, the duplicate check is skipped.
        """
        self._accounts = account_store
        self._budgets = budget_store
        self._settings = settings or get_settings().app

    # =========================================================================
    # STAGE 1
    # =========================================================================

    @staticmethod
    def _validate_schema(
        request_model: type[BaseModel],
        fields: Fields,
    ) -> tuple[Optional[BaseModel], list[ValidationIssue]]:
        """
        Stage 1: parse the fields into the request model.

        Returns: (parsed request or None, list_of_issues)
        """
        if isinstance(fields, request_model):
            return fields, []
        if isinstance(fields, BaseModel):
            fields = fields.model_dump(exclude_unset=True)
        try:
            return request_model.model_validate(fields), []
        except ValidationError as e:
            return None, issues_from_pydantic(e)

    # =========================================================================
    # STAGE 2
    # =========================================================================

    async def _validate_transaction_semantic(
        self,
        request: CreateTransactionRequest,
    ) -> list[ValidationIssue]:
        issues = []

        # Referenced account must exist
        if self._accounts is not None:
            account = await self._accounts.get_by_id(request.account_id)
            if account is None:
                issues.append(ValidationIssue(
                    field="account_id",
                    issue_type="unknown_reference",
                    message=f"Account {request.account_id} does not exist",
                    severity="error",
                    suggested_fix="Choose one of the existing accounts",
                ))

        # Category / type consistency
        if (
            request.type == TransactionType.EXPENSE
            and request.category in INCOME_CATEGORIES
        ):
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=f"{request.category.value} is an income category but the transaction is an expense",
                severity="warning",
                suggested_fix="Check the transaction type or pick an expense category",
            ))
        elif (
            request.type == TransactionType.INCOME
            and request.category not in INCOME_CATEGORIES
            and request.category != TransactionCategory.OTHER
        ):
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=f"{request.category.value} is an expense category but the transaction is income",
                severity="warning",
                suggested_fix="Check the transaction type or pick an income category",
            ))

        # Future date check (with tolerance)
        max_future_date = date.today() + timedelta(days=self._settings.future_date_tolerance_days)
        if request.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Transaction date ({request.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return issues

    async def _validate_budget_semantic(
        self,
        request: CreateBudgetRequest,
    ) -> list[ValidationIssue]:
        issues = []

        if request.category in INCOME_CATEGORIES:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unusual_category",
                message=f"Budgets track spending; {request.category.value} is an income category",
                severity="warning",
                suggested_fix="Pick an expense category",
            ))

        if self._budgets is not None:
            for budget in await self._budgets.list_all():
                if budget.category == request.category and budget.period == request.period:
                    issues.append(ValidationIssue(
                        field="category",
                        issue_type="potential_duplicate",
                        message=(
                            f"A {request.period.value.lower()} budget for "
                            f"{request.category.value} already exists"
                        ),
                        severity="warning",
                        suggested_fix="Update the existing budget instead",
                    ))
                    break

        return issues

    # =========================================================================
    # PIPELINES
    # =========================================================================

    async def validate_transaction(self, fields: Fields) -> ValidationResult:
        """
        Run full two-stage validation for a new transaction.

        Returns:
            ValidationResult with all issues found
        """
        request, issues = self._validate_schema(CreateTransactionRequest, fields)
        if request is None:
            return self._result("transaction", issues, schema_valid=False)
        issues.extend(await self._validate_transaction_semantic(request))
        return self._result("transaction", issues, schema_valid=True)

    async def validate_budget(self, fields: Fields) -> ValidationResult:
        """Run full two-stage validation for a new budget."""
        request, issues = self._validate_schema(CreateBudgetRequest, fields)
        if request is None:
            return self._result("budget", issues, schema_valid=False)
        issues.extend(await self._validate_budget_semantic(request))
        return self._result("budget", issues, schema_valid=True)

    @staticmethod
    def _result(
        subject: str,
        issues: list[ValidationIssue],
        schema_valid: bool,
    ) -> ValidationResult:
        # Stage 2 never ran if stage 1 failed
        semantic_valid = schema_valid and not any(
            issue.severity == "error" for issue in issues
        )
        return ValidationResult(
            subject=subject,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=issues,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what we show to non-technical users.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append(f"The {result.subject} could not be saved:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
