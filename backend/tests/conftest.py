# ruff: noqa: INP001
"""In-memory store fakes shared by the custom-field tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

import pytest

from customfields.models.custom_fields import CustomFieldDefinition
from customfields.models.tasks import TaskRecord
from customfields.schemas.custom_fields import ReorderItem


class StoreUnavailableError(RuntimeError):
    pass


@dataclass
class FakeDefinitionStore:
    definitions: dict[UUID, CustomFieldDefinition] = field(default_factory=dict)
    fail_on: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    reorder_calls: list[list[ReorderItem]] = field(default_factory=list)

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StoreUnavailableError(f"{operation} unavailable")

    async def create(self, definition: CustomFieldDefinition) -> CustomFieldDefinition:
        self._record("create")
        self.definitions[definition.id] = definition
        return definition

    async def get_by_id(self, field_definition_id: UUID) -> CustomFieldDefinition | None:
        self._record("get_by_id")
        return self.definitions.get(field_definition_id)

    async def get_by_board(self, board_id: UUID) -> list[CustomFieldDefinition]:
        self._record("get_by_board")
        return sorted(
            (item for item in self.definitions.values() if item.board_id == board_id),
            key=lambda item: item.position,
        )

    async def update(
        self,
        field_definition_id: UUID,
        updates: Mapping[str, Any],
    ) -> CustomFieldDefinition:
        self._record("update")
        existing = self.definitions[field_definition_id]
        updated = CustomFieldDefinition.model_validate({**existing.model_dump(), **updates})
        self.definitions[field_definition_id] = updated
        return updated

    async def delete(self, field_definition_id: UUID) -> None:
        self._record("delete")
        del self.definitions[field_definition_id]

    async def reorder(
        self,
        board_id: UUID,
        positions: Sequence[ReorderItem],
    ) -> list[CustomFieldDefinition]:
        self._record("reorder")
        self.reorder_calls.append(list(positions))
        for item in positions:
            existing = self.definitions[item.field_id]
            self.definitions[item.field_id] = CustomFieldDefinition.model_validate(
                {**existing.model_dump(), "position": item.position},
            )
        return await self.get_by_board(board_id)


@dataclass
class FakeTaskRecordStore:
    records: dict[UUID, TaskRecord] = field(default_factory=dict)
    fail_on_update: set[UUID] = field(default_factory=set)
    fail_on_list: bool = False
    updated: list[UUID] = field(default_factory=list)

    def add(self, values: dict[str, object | None]) -> TaskRecord:
        record = TaskRecord(custom_field_values=values)
        self.records[record.id] = record
        return record

    async def list(self, *, field_definition_id: UUID | None = None) -> list[TaskRecord]:
        if self.fail_on_list:
            raise StoreUnavailableError("list unavailable")
        # Unfiltered; the engine re-checks each record.
        return list(self.records.values())

    async def update(self, record_id: UUID, updates: Mapping[str, Any]) -> TaskRecord:
        if record_id in self.fail_on_update:
            raise StoreUnavailableError("update unavailable")
        existing = self.records[record_id]
        updated = TaskRecord.model_validate({**existing.model_dump(), **updates})
        self.records[record_id] = updated
        self.updated.append(record_id)
        return updated


AddDefinition = Callable[..., CustomFieldDefinition]


@pytest.fixture
def organization_id() -> UUID:
    return uuid4()


@pytest.fixture
def board_id() -> UUID:
    return uuid4()


@pytest.fixture
def definition_store() -> FakeDefinitionStore:
    return FakeDefinitionStore()


@pytest.fixture
def record_store() -> FakeTaskRecordStore:
    return FakeTaskRecordStore()


@pytest.fixture
def add_definition(
    definition_store: FakeDefinitionStore,
    board_id: UUID,
    organization_id: UUID,
) -> AddDefinition:
    """Seed a definition directly into the fake store, appended to the board."""

    def _add(
        field_type: str = "text",
        config: dict[str, Any] | None = None,
        *,
        name: str = "Field",
        required: bool = False,
    ) -> CustomFieldDefinition:
        siblings = [
            item for item in definition_store.definitions.values() if item.board_id == board_id
        ]
        definition = CustomFieldDefinition(
            board_id=board_id,
            organization_id=organization_id,
            name=name,
            field_type=field_type,
            config=config or {},
            required=required,
            position=len(siblings),
        )
        definition_store.definitions[definition.id] = definition
        return definition

    return _add
