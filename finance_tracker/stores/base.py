"""
In-Memory Entity Store

CRITICAL: The collection is a tuple that is replaced wholesale on every
mutation (copy-on-write). A reader holding an earlier snapshot never
sees a half-applied change, and a failed operation leaves the previous
tuple in place.

Mutations are serialized by one asyncio.Lock per store, so operations
issued concurrently take effect in the order they were issued.

Subclasses declare the entity model, its request models and two hooks:
- _creation_fields: derive the stored fields from a create request
- _update_fields: derive the changed fields from an update request
"""

import asyncio
from typing import Any, Callable, ClassVar, Iterable, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import StoreSettings, get_settings
from finance_tracker.models.validation import issues_from_pydantic
from finance_tracker.reactive import ReadonlySignal, Signal
from finance_tracker.stores.interface import (
    DuplicateError,
    E,
    EntityStoreInterface,
    Fields,
    NotFoundError,
    StoreError,
    UnexpectedStoreError,
    ValidationFailedError,
)
from finance_tracker.utils import generate_id, utc_now


class InMemoryEntityStore(EntityStoreInterface[E]):
    """
    Process-local store for one entity kind.

    Usage:
        store = AccountStore(seed=fixtures.seed_accounts(), latency=0)
        account = await store.create({"name": "Wallet", "type": "Cash"})
        store.items.subscribe(lambda accounts: ...)
    """

    entity_type: ClassVar[str] = "entity"
    model: ClassVar[type[BaseModel]]
    create_model: ClassVar[type[BaseModel]]
    update_model: ClassVar[type[BaseModel]]

    def __init__(
        self,
        seed: Iterable[E] = (),
        *,
        settings: Optional[StoreSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        latency: Optional[float] = None,
    ):
        """
        Initialize the store.

        Args:
            seed: Initial entities, kept in the given order
            settings: Store settings (defaults to the environment)
            audit_logger: Receives an audit event per mutation or rejection
            latency: Seconds slept by create/update/delete.
                    Overrides settings.mutation_latency_ms when given.
        """
        self._settings = settings or get_settings().store
        self._latency = (
            self._settings.mutation_latency_seconds if latency is None else latency
        )
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__).bind(entity_type=self.entity_type)

        entities = tuple(seed)
        seen: set[str] = set()
        for entity in entities:
            if entity.id in seen:
                raise DuplicateError(f"Duplicate {self.entity_type} id in seed: {entity.id}")
            seen.add(entity.id)

        self._items: Signal[tuple[E, ...]] = Signal(entities, name=f"{self.entity_type}s")
        self._readonly = self._items.as_readonly()
        self._lock = asyncio.Lock()

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def items(self) -> ReadonlySignal[tuple[E, ...]]:
        return self._readonly

    def snapshot(self) -> tuple[E, ...]:
        return self._items()

    async def list_all(self) -> tuple[E, ...]:
        return self._items()

    async def get_by_id(self, entity_id: str) -> Optional[E]:
        for entity in self._items():
            if entity.id == entity_id:
                return entity
        return None

    def __len__(self) -> int:
        return len(self._items())

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create(self, fields: Fields, *, correlation_id: Optional[UUID] = None) -> E:
        try:
            request = self._parse(self.create_model, fields)
            async with self._lock:
                await self._simulate_latency()
                items = self._items()
                now = utc_now()
                entity = self._materialize(
                    "create",
                    lambda: {
                        **self._creation_fields(request),
                        "id": self._unused_id(items),
                        "created_at": now,
                        "updated_at": now,
                    },
                )
                self._commit(items + (entity,))
        except ValidationFailedError as e:
            await self._reject_invalid("create", e, correlation_id)
            raise
        except UnexpectedStoreError as e:
            await self._report_fault("create", e, correlation_id)
            raise

        self._logger.info("entity_created", entity_id=entity.id)
        await self._audit_lifecycle(
            "created",
            entity.id,
            entity.model_dump(mode="json", exclude={"id", "created_at", "updated_at"}),
            correlation_id,
        )
        return entity

    async def update(
        self,
        entity_id: str,
        fields: Fields,
        *,
        correlation_id: Optional[UUID] = None,
    ) -> E:
        try:
            request = self._parse(self.update_model, fields)
            changes = request.model_dump(exclude_unset=True)
            async with self._lock:
                await self._simulate_latency()
                items = self._items()
                index = self._index_of(items, entity_id)
                if index < 0:
                    raise NotFoundError(self.entity_type, entity_id)
                current = items[index]
                entity = self._materialize(
                    "update",
                    lambda: {
                        **current.model_dump(),
                        **self._update_fields(current, changes),
                        "updated_at": utc_now(),
                    },
                )
                self._commit(items[:index] + (entity,) + items[index + 1:])
        except NotFoundError:
            await self._reject_missing("update", entity_id, correlation_id)
            raise
        except ValidationFailedError as e:
            await self._reject_invalid("update", e, correlation_id)
            raise
        except UnexpectedStoreError as e:
            await self._report_fault("update", e, correlation_id)
            raise

        self._logger.info("entity_updated", entity_id=entity_id, fields=sorted(changes))
        await self._audit_lifecycle(
            "updated",
            entity_id,
            request.model_dump(mode="json", exclude_unset=True),
            correlation_id,
        )
        return entity

    async def delete(self, entity_id: str, *, correlation_id: Optional[UUID] = None) -> None:
        try:
            async with self._lock:
                await self._simulate_latency()
                items = self._items()
                index = self._index_of(items, entity_id)
                if index < 0:
                    raise NotFoundError(self.entity_type, entity_id)
                self._commit(items[:index] + items[index + 1:])
        except NotFoundError:
            await self._reject_missing("delete", entity_id, correlation_id)
            raise

        self._logger.info("entity_deleted", entity_id=entity_id)
        await self._audit_lifecycle("deleted", entity_id, None, correlation_id)

    # =========================================================================
    # HOOKS
    # =========================================================================

    def _creation_fields(self, request: Any) -> dict[str, Any]:
        """Stored fields for a new entity, minus id and timestamps."""
        return request.model_dump()

    def _update_fields(self, current: E, changes: dict[str, Any]) -> dict[str, Any]:
        """Fields to merge over ``current``; ``changes`` holds only fields the caller set."""
        return changes

    # =========================================================================
    # INTERNALS
    # =========================================================================

    async def _adjust(
        self,
        matches: Callable[[E], bool],
        transform: Callable[[E], dict[str, Any]],
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> list[E]:
        """
        Replace every matching entity in a single commit.

        Used by the side-effect mutators. No artificial latency; an empty
        match leaves the collection (and its version) untouched.
        """
        try:
            return await self._adjust_locked(matches, transform)
        except ValidationFailedError as e:
            await self._reject_invalid(operation, e, correlation_id)
            raise
        except UnexpectedStoreError as e:
            await self._report_fault(operation, e, correlation_id)
            raise

    async def _adjust_locked(
        self,
        matches: Callable[[E], bool],
        transform: Callable[[E], dict[str, Any]],
    ) -> list[E]:
        async with self._lock:
            now = utc_now()
            changed: list[E] = []
            replaced: list[E] = []
            for entity in self._items():
                if matches(entity):
                    entity = self._materialize(
                        "adjust",
                        lambda current=entity: {
                            **current.model_dump(),
                            **transform(current),
                            "updated_at": now,
                        },
                    )
                    changed.append(entity)
                replaced.append(entity)
            if changed:
                self._commit(tuple(replaced))
        return changed

    def _parse(self, request_model: type[BaseModel], fields: Fields) -> BaseModel:
        if isinstance(fields, request_model):
            return fields
        if isinstance(fields, BaseModel):
            fields = fields.model_dump(exclude_unset=True)
        try:
            return request_model.model_validate(fields)
        except ValidationError as e:
            raise ValidationFailedError(
                f"Invalid {self.entity_type} fields",
                issues_from_pydantic(e),
            ) from e

    def _materialize(self, operation: str, build: Callable[[], dict[str, Any]]) -> E:
        """Build the replacement entity; nothing is committed if this raises."""
        try:
            return self.model.model_validate(build())
        except ValidationError as e:
            raise ValidationFailedError(
                f"{self.entity_type.capitalize()} {operation} produced an invalid {self.entity_type}",
                issues_from_pydantic(e),
            ) from e
        except StoreError:
            raise
        except Exception as e:
            self._logger.exception("mutation_aborted", operation=operation)
            raise UnexpectedStoreError(
                f"{self.entity_type.capitalize()} {operation} failed: {e}"
            ) from e

    def _commit(self, items: tuple[E, ...]) -> None:
        self._items.set(items)

    async def _simulate_latency(self) -> None:
        await asyncio.sleep(self._latency)

    @staticmethod
    def _index_of(items: tuple[E, ...], entity_id: str) -> int:
        for index, entity in enumerate(items):
            if entity.id == entity_id:
                return index
        return -1

    @staticmethod
    def _unused_id(items: tuple[E, ...]) -> str:
        taken = {entity.id for entity in items}
        entity_id = generate_id()
        while entity_id in taken:
            entity_id = generate_id()
        return entity_id

    async def _audit_lifecycle(
        self,
        action: str,
        entity_id: str,
        details: Optional[dict],
        correlation_id: Optional[UUID],
    ) -> None:
        if self._audit_logger is None:
            return
        await self._audit_logger.log_lifecycle(
            entity_type=self.entity_type,
            action=action,
            entity_id=entity_id,
            details=details,
            correlation_id=correlation_id,
        )

    async def _reject_missing(
        self,
        operation: str,
        entity_id: str,
        correlation_id: Optional[UUID],
    ) -> None:
        self._logger.warning("entity_not_found", operation=operation, entity_id=entity_id)
        if self._audit_logger is not None:
            await self._audit_logger.log_not_found(
                entity_type=self.entity_type,
                entity_id=entity_id,
                operation=operation,
                correlation_id=correlation_id,
            )

    async def _reject_invalid(
        self,
        operation: str,
        error: ValidationFailedError,
        correlation_id: Optional[UUID],
    ) -> None:
        self._logger.warning(
            "validation_failed",
            operation=operation,
            issues=[issue.field for issue in error.issues],
        )
        if self._audit_logger is not None:
            await self._audit_logger.log_validation_failed(
                subject=self.entity_type,
                operation=operation,
                issues=error.issue_dicts(),
                correlation_id=correlation_id,
            )

    async def _report_fault(
        self,
        operation: str,
        error: UnexpectedStoreError,
        correlation_id: Optional[UUID],
    ) -> None:
        if self._audit_logger is not None:
            await self._audit_logger.log_error(
                error_type=type(error.__cause__ or error).__name__,
                error_message=str(error),
                details={"entity_type": self.entity_type, "operation": operation},
                correlation_id=correlation_id,
            )
