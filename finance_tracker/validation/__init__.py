"""Validation package."""

from finance_tracker.validation.validator import FinanceValidator

__all__ = ["FinanceValidator"]
