"""
Abstract Entity Store Interface

DESIGN DECISION: We define an abstract interface for entity stores.
This allows us to:
1. Swap the in-memory collections for a real database later
2. Keep the calling contract async even though memory needs no I/O
3. Keep derived values decoupled from how entities are kept

The interface is intentionally simple - we're not building a full ORM.
Just the operations the finance core needs.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

from finance_tracker.models.validation import ValidationIssue
from finance_tracker.reactive import ReadonlySignal

E = TypeVar("E", bound=BaseModel)

# Caller-supplied fields: a plain mapping or an already-built request model
Fields = Union[Mapping[str, Any], BaseModel]


class EntityStoreInterface(ABC, Generic[E]):
    """
    Abstract interface for one collection of one entity kind.

    Reads through ``items`` are synchronous; every other operation
    is awaited so that callers can observe completion and failure.
    """

    @property
    @abstractmethod
    def items(self) -> ReadonlySignal[tuple[E, ...]]:
        """Reactive read channel holding the current collection."""
        pass

    @abstractmethod
    def snapshot(self) -> tuple[E, ...]:
        """The current collection, synchronously."""
        pass

    @abstractmethod
    async def list_all(self) -> tuple[E, ...]:
        """
        Return the full collection.

        Returns:
            Entities in insertion order
        """
        pass

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[E]:
        """
        Retrieve an entity by its ID.

        Args:
            entity_id: The entity's unique identifier

        Returns:
            The entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, fields: Fields) -> E:
        """
        Create and append a new entity.

        Args:
            fields: Caller-supplied fields

        Returns:
            The stored entity with its assigned id and timestamps

        Raises:
            ValidationFailedError: If the fields fail validation
        """
        pass

    @abstractmethod
    async def update(self, entity_id: str, fields: Fields) -> E:
        """
        Merge the given fields over an existing entity.

        Args:
            entity_id: The entity's unique identifier
            fields: Fields to change; omitted fields are kept

        Returns:
            The replacement entity

        Raises:
            NotFoundError: If the entity doesn't exist
            ValidationFailedError: If the fields fail validation
        """
        pass

    @abstractmethod
    async def delete(self, entity_id: str) -> None:
        """
        Remove an entity by ID.

        Raises:
            NotFoundError: If the entity doesn't exist
        """
        pass


# =============================================================================
# EXCEPTIONS
# =============================================================================

class StoreError(Exception):
    """Base exception for store operations."""
    pass


class NotFoundError(StoreError):
    """Entity not found in the store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.capitalize()} not found: {entity_id}")


class ValidationFailedError(StoreError):
    """Caller-supplied fields were rejected before any mutation."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.issues = list(issues or [])
        super().__init__(message)

    def issue_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


class DuplicateError(StoreError):
    """Attempted to insert a duplicate entity."""
    pass


class UnexpectedStoreError(StoreError):
    """An internal fault aborted a mutation; the collection is unchanged."""
    pass
