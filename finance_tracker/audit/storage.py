"""
Audit Storage

The audit trail sits behind an abstract interface so a durable
backend can replace the in-memory one without touching the stores.
Events are append-only: nothing edits or removes a single event. The
in-memory backend keeps at most max_events and drops the oldest first.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from finance_tracker.models.audit import AuditEvent, AuditEventType


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Any backend must implement these methods.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one transaction and its side effects).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'account', 'budget')
            entity_id: The entity's ID

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return
            event_type: Only return events of this type

        Returns:
            List of recent events (newest first)
        """
        pass


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Process-local audit trail.

    Insertion order is chronological. With max_events set, only the
    newest max_events events are kept.
    """

    def __init__(self, max_events: Optional[int] = 10_000):
        self._events: list[AuditEvent] = []
        self._max_events = max_events

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        if self._max_events is not None and len(self._events) > self._max_events:
            # Oldest entries fall off first
            del self._events[: len(self._events) - self._max_events]
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        events = [
            e for e in reversed(self._events)
            if event_type is None or e.event_type == event_type
        ]
        return events[:limit]

    def __len__(self) -> int:
        return len(self._events)
