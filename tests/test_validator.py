"""Tests for the two-stage FinanceValidator."""

from datetime import date, timedelta

import pytest

from finance_tracker.validation import FinanceValidator


@pytest.fixture
def validator(accounts, budgets, app_settings):
    return FinanceValidator(accounts, budgets, settings=app_settings)


def txn_fields(**overrides) -> dict:
    fields = {
        "account_id": "1",
        "type": "EXPENSE",
        "category": "Transport",
        "amount": "12.50",
        "description": "Bus pass",
        "date": "2025-10-03",
    }
    fields.update(overrides)
    return fields


class TestTransactionValidation:
    """Tests for transaction validation."""

    @pytest.mark.asyncio
    async def test_valid_transaction(self, validator):
        result = await validator.validate_transaction(txn_fields())
        assert result.is_valid
        assert result.issues == []
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    @pytest.mark.asyncio
    async def test_schema_failure_skips_semantic_stage(self, validator):
        """Test that stage 2 doesn't run when stage 1 fails."""
        result = await validator.validate_transaction(txn_fields(account_id="ghost", amount="abc"))

        assert not result.schema_valid
        assert not result.semantic_valid
        assert all(issue.field != "account_id" for issue in result.issues)

    @pytest.mark.asyncio
    async def test_unknown_account_is_error(self, validator):
        result = await validator.validate_transaction(txn_fields(account_id="ghost"))

        assert result.schema_valid
        assert not result.is_valid
        assert result.error_count == 1
        assert "could not be saved" in validator.get_user_friendly_summary(result)

    @pytest.mark.asyncio
    async def test_category_type_mismatch_is_warning(self, validator):
        result = await validator.validate_transaction(txn_fields(category="Salary"))

        assert result.is_valid
        assert len(result.warnings) == 1
        assert result.issues[0].issue_type == "inconsistent"

    @pytest.mark.asyncio
    async def test_income_in_other_category_is_fine(self, validator):
        result = await validator.validate_transaction(txn_fields(type="INCOME", category="Other"))
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_far_future_date_is_warning(self, validator):
        future = date.today() + timedelta(days=30)
        result = await validator.validate_transaction(txn_fields(date=future.isoformat()))

        assert result.is_valid
        assert [issue.issue_type for issue in result.issues] == ["future_date"]

    @pytest.mark.asyncio
    async def test_near_future_date_within_tolerance(self, validator):
        soon = date.today() + timedelta(days=3)
        result = await validator.validate_transaction(txn_fields(date=soon.isoformat()))
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_without_stores_reference_check_skipped(self, app_settings):
        validator = FinanceValidator(settings=app_settings)
        result = await validator.validate_transaction(txn_fields(account_id="ghost"))
        assert result.is_valid


class TestBudgetValidation:
    """Tests for budget validation."""

    @pytest.mark.asyncio
    async def test_duplicate_budget_is_warning(self, validator):
        result = await validator.validate_budget({
            "category": "Food",
            "amount": "600",
            "period": "Monthly",
            "start_date": "2025-11-01",
        })
        assert result.is_valid
        assert result.issues[0].issue_type == "potential_duplicate"

    @pytest.mark.asyncio
    async def test_income_category_budget_is_warning(self, validator):
        result = await validator.validate_budget({
            "category": "Salary",
            "amount": "600",
            "period": "Weekly",
            "start_date": "2025-11-01",
        })
        assert result.is_valid
        assert [issue.issue_type for issue in result.issues] == ["unusual_category"]

    @pytest.mark.asyncio
    async def test_zero_amount_rejected(self, validator):
        result = await validator.validate_budget({
            "category": "Food",
            "amount": "0",
            "start_date": "2025-11-01",
        })
        assert not result.is_valid
        assert result.issues[0].field == "amount"
