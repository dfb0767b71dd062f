"""
Audit Logger

DESIGN DECISION: Every store mutation and every rejected command is logged.
This provides:
1. Complete traceability of balances and budget totals
2. Debugging capability for rejected operations
3. A history the UI can show

The audit logger:
- Is async so stores can await it inside their own operations
- Never raises: a failing audit backend does not fail the store operation
- Supports correlation IDs to trace a transaction and its side effects
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.audit.storage import AuditStorageInterface, InMemoryAuditStorage
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder


def _processors(json_logs: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors(json_logs=True),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Route structlog through the standard library at the given level.

    Called once by the application factory with values from AppSettings.
    """
    log_level = getattr(logging, level.upper())
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",  # structlog does the formatting
    )
    logging.getLogger().setLevel(log_level)
    structlog.configure(processors=_processors(json_logs))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (for later queries)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    Defaults to a process-local in-memory trail.
        """
        self._storage = storage if storage is not None else InMemoryAuditStorage()
        self._logger = structlog.get_logger("finance_tracker.audit")

    @property
    def storage(self) -> AuditStorageInterface:
        return self._storage

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally, then appends to storage.

        Returns True if the storage write succeeded.
        """
        # Always log locally
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        try:
            return await self._storage.append_event(event)
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    async def log_lifecycle(
        self,
        entity_type: str,
        action: str,
        entity_id: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a create / update / delete of a stored entity."""
        event = AuditEventBuilder.entity_lifecycle(
            entity_type=entity_type,
            action=action,
            entity_id=entity_id,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_adjusted(
        self,
        account_id: str,
        delta: str,
        is_credit: bool,
        new_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.balance_adjusted(
            account_id=account_id,
            delta=delta,
            is_credit=is_credit,
            new_balance=new_balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_spent_adjusted(
        self,
        category: str,
        delta: str,
        budget_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.spent_adjusted(
            category=category,
            delta=delta,
            budget_ids=budget_ids,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_adjustment_skipped(
        self,
        entity_type: str,
        key: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.adjustment_skipped(
            entity_type=entity_type,
            key=key,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_not_found(
        self,
        entity_type: str,
        entity_id: str,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.not_found(
            entity_type=entity_type,
            entity_id=entity_id,
            operation=operation,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        subject: str,
        operation: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.validation_failed(
            subject=subject,
            operation=operation,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_user_logged_in(self, user_id: str, email: str) -> None:
        await self.log(AuditEventBuilder.user_logged_in(user_id=user_id, email=email))

    async def log_user_registered(self, user_id: str, email: str) -> None:
        await self.log(AuditEventBuilder.user_registered(user_id=user_id, email=email))

    async def log_user_logged_out(self, user_id: Optional[str]) -> None:
        await self.log(AuditEventBuilder.user_logged_out(user_id=user_id))

    async def log_login_failed(self, email: str, reason: str) -> None:
        await self.log(AuditEventBuilder.login_failed(email=email, reason=reason))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user command that touches several
    stores (e.g., a transaction plus its balance and budget effects).
    """
    return uuid4()
