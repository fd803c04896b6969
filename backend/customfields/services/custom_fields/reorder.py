"""Whole-board reordering of custom field definitions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from uuid import UUID

from customfields.core.logging import get_logger, log_operation
from customfields.models.custom_fields import CustomFieldDefinition
from customfields.schemas.custom_fields import ReorderItem
from customfields.services.custom_fields.authorization import (
    AuthContext,
    require_organization_access,
)
from customfields.services.custom_fields.exceptions import (
    CustomFieldValidationError,
    ReorderConsistencyError,
)
from customfields.services.custom_fields.payloads import coerce_uuid, parse_payload
from customfields.services.custom_fields.stores import FieldDefinitionStore, call_store

logger = get_logger(__name__)


def _parse_item(pair: ReorderItem | Mapping[str, object]) -> ReorderItem:
    if isinstance(pair, ReorderItem):
        return pair
    if not isinstance(pair, Mapping):
        raise CustomFieldValidationError("Reorder items must be objects")
    field_id = coerce_uuid(pair.get("field_id"), field_name="field_id")
    return parse_payload(ReorderItem, {**pair, "field_id": field_id})


def _check_positions(items: Sequence[ReorderItem], expected_count: int) -> None:
    if len(items) != expected_count:
        raise ReorderConsistencyError(
            "Must provide positions for all fields",
            code="INCOMPLETE_REORDER",
        )
    field_ids = [item.field_id for item in items]
    if len(set(field_ids)) != len(field_ids):
        raise ReorderConsistencyError(
            "Duplicate field ids detected",
            code="DUPLICATE_FIELD_IDS",
        )
    positions = sorted(item.position for item in items)
    if len(set(positions)) != len(positions):
        raise ReorderConsistencyError(
            "Duplicate positions detected",
            code="DUPLICATE_POSITIONS",
        )
    if positions[0] != 0:
        raise ReorderConsistencyError(
            "Positions must start at 0",
            code="INVALID_POSITIONS",
        )
    if positions != list(range(len(positions))):
        raise ReorderConsistencyError(
            "Positions must be sequential starting from 0",
            code="INVALID_POSITIONS",
        )


async def reorder_field_definitions(
    board_id: UUID | str,
    pairs: Sequence[ReorderItem | Mapping[str, object]],
    store: FieldDefinitionStore,
    auth_context: AuthContext | None = None,
) -> list[CustomFieldDefinition]:
    """Reposition every definition on a board in one store call.

    The pairs must cover the board exactly once and form the positions
    `0..n-1`; anything else is rejected before the store is written.
    """
    resolved_board_id = coerce_uuid(board_id, field_name="board_id")
    current = await call_store(
        "load custom fields",
        store.get_by_board(resolved_board_id),
        board_id=str(resolved_board_id),
    )
    if not current:
        raise ReorderConsistencyError(
            "Board has no custom fields",
            code="BOARD_HAS_NO_FIELDS",
        )
    if auth_context is not None:
        require_organization_access(auth_context, current[0].organization_id)
    if not pairs:
        raise ReorderConsistencyError(
            "Reorder data cannot be empty",
            code="EMPTY_REORDER",
        )

    items = [_parse_item(pair) for pair in pairs]
    board_field_ids = {definition.id for definition in current}
    for item in items:
        if item.field_id not in board_field_ids:
            raise ReorderConsistencyError(
                f"Field {item.field_id} does not belong to this board",
                code="FIELD_NOT_IN_BOARD",
            )
    _check_positions(items, len(current))

    with log_operation(
        logger,
        "custom_field.definition.reorder",
        board_id=str(resolved_board_id),
    ):
        reordered = await call_store(
            "reorder custom fields",
            store.reorder(resolved_board_id, items),
            board_id=str(resolved_board_id),
        )

    logger.info(
        "custom_field.definition.reordered",
        extra={"board_id": str(resolved_board_id), "field_count": len(items)},
    )
    return sorted(reordered, key=lambda definition: definition.position)
