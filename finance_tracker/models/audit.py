"""
Audit Models for Finance Tracker

Every store mutation, rejected command and session change is
recorded as an audit event. This provides:
1. Traceability of every change to the collections
2. Debugging information when an operation is rejected
3. A way to reconstruct how a balance or budget got its value

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.utils.time import utc_now


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each store operation has its own event type.
    """
    # Accounts
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    BALANCE_ADJUSTED = "balance_adjusted"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_CREATED = "budget_created"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"
    SPENT_ADJUSTED = "spent_adjusted"

    # Side-effect mutators that matched nothing
    ADJUSTMENT_SKIPPED = "adjustment_skipped"

    # Rejected commands
    ENTITY_NOT_FOUND = "entity_not_found"
    VALIDATION_FAILED = "validation_failed"

    # Session
    USER_LOGGED_IN = "user_logged_in"
    USER_REGISTERED = "user_registered"
    USER_LOGGED_OUT = "user_logged_out"
    LOGIN_FAILED = "login_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LIFECYCLE_EVENTS = {
    ("account", "created"): AuditEventType.ACCOUNT_CREATED,
    ("account", "updated"): AuditEventType.ACCOUNT_UPDATED,
    ("account", "deleted"): AuditEventType.ACCOUNT_DELETED,
    ("transaction", "created"): AuditEventType.TRANSACTION_CREATED,
    ("transaction", "updated"): AuditEventType.TRANSACTION_UPDATED,
    ("transaction", "deleted"): AuditEventType.TRANSACTION_DELETED,
    ("budget", "created"): AuditEventType.BUDGET_CREATED,
    ("budget", "updated"): AuditEventType.BUDGET_UPDATED,
    ("budget", "deleted"): AuditEventType.BUDGET_DELETED,
}


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction', 'budget', 'session')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a transaction and its side effects)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user command?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_lifecycle("account", "created", account.id)
        event = AuditEventBuilder.balance_adjusted(account.id, "250", False, "15170")
    """

    @staticmethod
    def entity_lifecycle(
        entity_type: str,
        action: str,
        entity_id: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_LIFECYCLE_EVENTS[(entity_type, action)],
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} {action}: {entity_id}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def balance_adjusted(
        account_id: str,
        delta: str,
        is_credit: bool,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        direction = "credited" if is_credit else "debited"
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account {account_id} {direction} by {delta}",
            details={
                "delta": delta,
                "is_credit": is_credit,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def spent_adjusted(
        category: str,
        delta: str,
        budget_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPENT_ADJUSTED,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Spent for {category} adjusted by {delta} on {len(budget_ids)} budget(s)",
            details={
                "category": category,
                "delta": delta,
                "budget_ids": budget_ids,
            },
        )

    @staticmethod
    def adjustment_skipped(
        entity_type: str,
        key: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADJUSTMENT_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Adjustment skipped for {entity_type} {key}: {reason}",
            details={
                "key": key,
                "reason": reason,
            },
        )

    @staticmethod
    def not_found(
        entity_type: str,
        entity_id: str,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{operation} rejected: {entity_type} {entity_id} not found",
            details={
                "operation": operation,
            },
            error_code="not_found",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        subject: str,
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=subject,
            correlation_id=correlation_id,
            description=f"{operation} rejected with {len(issues)} validation issue(s)",
            details={
                "operation": operation,
                "issues": issues,
            },
            error_code="validation_failed",
            is_user_action=True,
        )

    @staticmethod
    def user_logged_in(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_IN,
            entity_type="session",
            entity_id=user_id,
            description=f"User signed in: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def user_registered(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="session",
            entity_id=user_id,
            description=f"User registered: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def user_logged_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_OUT,
            entity_type="session",
            entity_id=user_id,
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description=f"Authentication rejected for {email or '<empty>'}",
            error_message=reason,
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
