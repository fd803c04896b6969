"""Collaborator protocols for definition and task persistence.

The engine never talks to a database directly. Callers supply objects that
implement these protocols; every call made through `call_store` is logged and
any failure is re-raised as `CustomFieldStoreError`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar
from uuid import UUID

from customfields.core.logging import get_logger
from customfields.services.custom_fields.exceptions import (
    CustomFieldError,
    CustomFieldNotFoundError,
    CustomFieldStoreError,
)

if TYPE_CHECKING:
    from customfields.models.custom_fields import CustomFieldDefinition
    from customfields.models.tasks import TaskRecord
    from customfields.schemas.custom_fields import ReorderItem

logger = get_logger(__name__)

T = TypeVar("T")

CUSTOM_FIELD_NOT_FOUND_ERROR = "Custom field definition not found"


class FieldDefinitionStore(Protocol):
    """Persistence for custom field definitions."""

    async def create(self, definition: CustomFieldDefinition) -> CustomFieldDefinition: ...

    async def get_by_id(self, field_definition_id: UUID) -> CustomFieldDefinition | None: ...

    async def get_by_board(self, board_id: UUID) -> list[CustomFieldDefinition]:
        """Return the board's definitions ordered by position."""
        ...

    async def update(
        self,
        field_definition_id: UUID,
        updates: Mapping[str, Any],
    ) -> CustomFieldDefinition: ...

    async def delete(self, field_definition_id: UUID) -> None: ...

    async def reorder(
        self,
        board_id: UUID,
        positions: Sequence[ReorderItem],
    ) -> list[CustomFieldDefinition]:
        """Apply every position in one all-or-nothing write."""
        ...


class TaskRecordStore(Protocol):
    """Persistence for tasks carrying custom-field values."""

    async def list(self, *, field_definition_id: UUID | None = None) -> list[TaskRecord]:
        """Return tasks, optionally narrowed to those holding a value for a field.

        The filter is an optimization hint; callers re-check each record.
        """
        ...

    async def update(self, record_id: UUID, updates: Mapping[str, Any]) -> TaskRecord: ...


async def call_store(operation: str, awaitable: Awaitable[T], **extra: object) -> T:
    """Await a store call, translating unexpected failures to `CustomFieldStoreError`."""
    try:
        return await awaitable
    except CustomFieldError:
        raise
    except Exception as exc:
        logger.exception(
            "custom_field.store.failed",
            extra={"operation": operation, "error": str(exc), **extra},
        )
        raise CustomFieldStoreError(f"Failed to {operation}") from exc


async def require_field_definition(
    store: FieldDefinitionStore,
    field_definition_id: UUID,
) -> CustomFieldDefinition:
    """Fetch a definition or raise `CustomFieldNotFoundError`."""
    definition = await call_store(
        "load custom field",
        store.get_by_id(field_definition_id),
        field_definition_id=str(field_definition_id),
    )
    if definition is None:
        raise CustomFieldNotFoundError(CUSTOM_FIELD_NOT_FOUND_ERROR)
    return definition
