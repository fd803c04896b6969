# ruff: noqa: INP001, S101
"""Tests for whole-board custom field reordering."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

import pytest

from customfields.services.custom_fields import (
    AuthContext,
    CustomFieldUnauthorizedError,
    CustomFieldValidationError,
    ReorderConsistencyError,
    list_field_definitions,
    reorder_field_definitions,
)


@pytest.mark.asyncio
async def test_reorder_applies_every_position(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    a = add_definition(name="A")
    b = add_definition(name="B")
    c = add_definition(name="C")

    reordered = await reorder_field_definitions(
        board_id,
        [
            {"field_id": str(a.id), "position": 2},
            {"field_id": str(b.id), "position": 0},
            {"field_id": str(c.id), "position": 1},
        ],
        definition_store,
    )

    assert [definition.name for definition in reordered] == ["B", "C", "A"]
    assert definition_store.calls.count("reorder") == 1
    listed = await list_field_definitions(board_id, definition_store)
    assert [definition.position for definition in listed] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reorder_rejects_empty_board(definition_store: Any, board_id: UUID) -> None:
    with pytest.raises(ReorderConsistencyError) as exc_info:
        await reorder_field_definitions(board_id, [], definition_store)
    assert exc_info.value.code == "BOARD_HAS_NO_FIELDS"


@pytest.mark.asyncio
async def test_reorder_rejects_empty_pairs(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    add_definition()

    with pytest.raises(ReorderConsistencyError, match="Reorder data cannot be empty"):
        await reorder_field_definitions(board_id, [], definition_store)


@pytest.mark.asyncio
async def test_reorder_rejects_foreign_fields(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    add_definition()

    with pytest.raises(ReorderConsistencyError) as exc_info:
        await reorder_field_definitions(
            board_id,
            [{"field_id": uuid4(), "position": 0}],
            definition_store,
        )
    assert exc_info.value.code == "FIELD_NOT_IN_BOARD"


@pytest.mark.asyncio
async def test_reorder_rejects_malformed_field_id(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    add_definition()

    with pytest.raises(CustomFieldValidationError, match="Invalid field_id"):
        await reorder_field_definitions(
            board_id,
            [{"field_id": "nope", "position": 0}],
            definition_store,
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("positions", "message"),
    [
        ([0], "Must provide positions for all fields"),
        ([0, 0, 1], "Duplicate positions detected"),
        ([1, 2, 3], "Positions must start at 0"),
        ([0, 1, 3], "Positions must be sequential starting from 0"),
    ],
)
async def test_reorder_requires_a_complete_gapless_permutation(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
    positions: list[int],
    message: str,
) -> None:
    definitions = [add_definition(name=f"F{index}") for index in range(3)]

    with pytest.raises(ReorderConsistencyError, match=message):
        await reorder_field_definitions(
            board_id,
            [
                {"field_id": definition.id, "position": position}
                for definition, position in zip(definitions, positions, strict=False)
            ],
            definition_store,
        )
    assert "reorder" not in definition_store.calls


@pytest.mark.asyncio
async def test_reorder_rejects_duplicate_field_ids(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    a = add_definition()
    add_definition()

    with pytest.raises(ReorderConsistencyError, match="Duplicate field ids detected"):
        await reorder_field_definitions(
            board_id,
            [{"field_id": a.id, "position": 0}, {"field_id": a.id, "position": 1}],
            definition_store,
        )


@pytest.mark.asyncio
async def test_reorder_checks_organization(
    definition_store: Any,
    add_definition: Any,
    board_id: UUID,
) -> None:
    a = add_definition()
    outsider = AuthContext(user_id=uuid4(), organization_ids={uuid4()})

    with pytest.raises(CustomFieldUnauthorizedError):
        await reorder_field_definitions(
            board_id,
            [{"field_id": a.id, "position": 0}],
            definition_store,
            auth_context=outsider,
        )
