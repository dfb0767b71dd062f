"""
Validation Result Models

Shared by the validator and by ValidationFailedError, so a caller
that catches the error can show every issue that was found.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from finance_tracker.utils.time import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields)
    Stage 2: Semantic validation (references and consistency checks)
    """

    subject: str = Field(
        ...,
        description="What was validated (e.g., 'transaction', 'budget')"
    )
    validated_at: datetime = Field(
        default_factory=utc_now
    )

    # Stage results
    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )

    # Overall result
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )

    # Issues found
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Messages of the non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]


def issues_from_pydantic(exc: PydanticValidationError) -> list[ValidationIssue]:
    """Map pydantic's error list to ValidationIssues (all error severity)."""
    issues = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "fields"
        issue_type = error.get("type", "invalid_value")
        if issue_type == "extra_forbidden":
            suggested_fix = "Remove this field; it cannot be set here"
        elif issue_type == "missing":
            suggested_fix = "Provide a value for this field"
        else:
            suggested_fix = None
        issues.append(ValidationIssue(
            field=location,
            issue_type=issue_type,
            message=error.get("msg", "Invalid value"),
            severity="error",
            suggested_fix=suggested_fix,
        ))
    return issues
