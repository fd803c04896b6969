"""Create, update, delete, and list board custom field definitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from customfields.core.logging import get_logger, log_operation
from customfields.core.time import utcnow
from customfields.models.custom_fields import CustomFieldDefinition
from customfields.schemas.custom_field_configs import (
    normalize_config_keys,
    normalize_field_type,
    validate_field_config,
)
from customfields.schemas.custom_fields import (
    CustomFieldDefinitionCreate,
    CustomFieldDefinitionUpdate,
    ReorderItem,
)
from customfields.services.custom_fields.authorization import (
    AuthContext,
    require_admin_role,
    require_organization_access,
)
from customfields.services.custom_fields.exceptions import (
    CustomFieldConflictError,
    CustomFieldStoreError,
    CustomFieldValidationError,
    FieldTypeImmutableError,
)
from customfields.services.custom_fields.impact import (
    find_invalid_records,
    records_holding_field,
    records_with_values,
    strip_field_values,
)
from customfields.services.custom_fields.payloads import coerce_uuid, parse_payload
from customfields.services.custom_fields.stores import (
    FieldDefinitionStore,
    TaskRecordStore,
    call_store,
    require_field_definition,
)

logger = get_logger(__name__)

FIELD_TYPE_IMMUTABLE_ERROR = "Cannot change field type"
REQUIRED_FIELD_DELETE_ERROR = "Cannot delete a required field without force"
_TYPE_PATCH_KEYS = ("field_type", "type")


@dataclass(frozen=True, slots=True)
class UpdateOptions:
    """Opt-in impact analysis for definition updates.

    When both flags are set, `validate_existing_values` is applied first and
    invalid values are rejected, never cleared.
    """

    validate_existing_values: bool = False
    clear_invalid_values: bool = False
    auth_context: AuthContext | None = None


@dataclass(frozen=True, slots=True)
class DeleteOptions:
    cleanup_task_values: bool = False
    force: bool = False
    auth_context: AuthContext | None = None


@dataclass(frozen=True, slots=True)
class DeleteResult:
    field_definition_id: UUID
    affected_tasks_count: int = 0


def _authorize_create(data: object, auth_context: AuthContext | None) -> None:
    if auth_context is None:
        return
    if isinstance(data, CustomFieldDefinitionCreate):
        organization_id: object = data.organization_id
    elif isinstance(data, Mapping):
        organization_id = data.get("organization_id")
    else:
        organization_id = None
    require_organization_access(
        auth_context,
        coerce_uuid(organization_id, field_name="organization_id"),
    )


def _position_error(count: int) -> CustomFieldValidationError:
    return CustomFieldValidationError(f"Position must be between 0 and {count}")


async def create_field_definition(
    data: CustomFieldDefinitionCreate | Mapping[str, Any],
    store: FieldDefinitionStore,
    auth_context: AuthContext | None = None,
) -> CustomFieldDefinition:
    """Validate and persist a new definition at the end of its board.

    An explicit `position` inserts the definition there by shifting later
    siblings down in a single reorder call.
    """
    _authorize_create(data, auth_context)
    payload = parse_payload(CustomFieldDefinitionCreate, data)
    board_id = payload.board_id

    with log_operation(logger, "custom_field.definition.create", board_id=str(board_id)):
        siblings = await call_store(
            "load custom fields",
            store.get_by_board(board_id),
            board_id=str(board_id),
        )
        count = len(siblings)
        if payload.position is not None and payload.position > count:
            raise _position_error(count)

        definition = CustomFieldDefinition(
            board_id=board_id,
            organization_id=payload.organization_id,
            name=payload.name,
            field_type=payload.field_type,
            config=payload.config,
            required=payload.required,
            position=count,
        )
        created = await call_store(
            "create custom field",
            store.create(definition),
            board_id=str(board_id),
        )

        if payload.position is not None and payload.position != count:
            try:
                created = await _move_to_position(store, siblings, created, payload.position)
            except CustomFieldStoreError:
                await _discard_created(store, created)
                raise

    logger.info(
        "custom_field.definition.created",
        extra={
            "field_definition_id": str(created.id),
            "board_id": str(board_id),
            "field_type": created.field_type,
            "position": created.position,
        },
    )
    return created


async def _discard_created(
    store: FieldDefinitionStore,
    created: CustomFieldDefinition,
) -> None:
    """Undo the tail insert when the follow-up reorder failed."""
    logger.error(
        "custom_field.definition.create_rolled_back",
        extra={
            "field_definition_id": str(created.id),
            "board_id": str(created.board_id),
        },
    )
    await call_store(
        "remove custom field",
        store.delete(created.id),
        field_definition_id=str(created.id),
    )


async def _move_to_position(
    store: FieldDefinitionStore,
    siblings: list[CustomFieldDefinition],
    created: CustomFieldDefinition,
    position: int,
) -> CustomFieldDefinition:
    ordered = sorted(siblings, key=lambda item: item.position)
    ordered.insert(position, created)
    items = [
        ReorderItem(field_id=definition.id, position=index)
        for index, definition in enumerate(ordered)
    ]
    reordered = await call_store(
        "reorder custom fields",
        store.reorder(created.board_id, items),
        board_id=str(created.board_id),
    )
    for definition in reordered:
        if definition.id == created.id:
            return definition
    return CustomFieldDefinition.model_validate({**created.model_dump(), "position": position})


def _reject_type_change(existing: CustomFieldDefinition, patch: object) -> object:
    """Fail on any type change and drop a restated, unchanged type from the patch."""
    if not isinstance(patch, Mapping):
        return patch
    for key in _TYPE_PATCH_KEYS:
        if key not in patch:
            continue
        try:
            requested = normalize_field_type(patch[key])
        except ValueError:
            requested = None
        if requested != existing.field_type:
            raise FieldTypeImmutableError(FIELD_TYPE_IMMUTABLE_ERROR)
    return {key: value for key, value in patch.items() if key not in _TYPE_PATCH_KEYS}


def _merge_config(
    existing: CustomFieldDefinition,
    patch_config: Mapping[str, object],
) -> dict[str, object]:
    field_type = existing.field_type
    merged = {
        **normalize_config_keys(field_type, existing.config),
        **normalize_config_keys(field_type, patch_config),
    }
    try:
        return validate_field_config(field_type, merged)
    except ValueError as exc:
        raise CustomFieldValidationError(str(exc)) from exc


async def update_field_definition(
    field_definition_id: UUID | str,
    patch: CustomFieldDefinitionUpdate | Mapping[str, Any],
    store: FieldDefinitionStore,
    record_store: TaskRecordStore | None = None,
    options: UpdateOptions | None = None,
) -> CustomFieldDefinition:
    """Apply a partial update to a definition.

    The config patch is merged over the stored config and revalidated as a
    whole. Impact analysis only runs when one of the `UpdateOptions` flags
    is set, and then needs `record_store`.
    """
    options = options or UpdateOptions()
    scan_impact = options.validate_existing_values or options.clear_invalid_values
    resolved_id = coerce_uuid(field_definition_id, field_name="field_definition_id")

    existing = await require_field_definition(store, resolved_id)
    if options.auth_context is not None:
        require_organization_access(options.auth_context, existing.organization_id)
    if scan_impact and record_store is None:
        raise TypeError("record_store is required for impact analysis")
    sanitized = _reject_type_change(existing, patch)
    payload = parse_payload(CustomFieldDefinitionUpdate, sanitized)
    updates: dict[str, Any] = payload.model_dump(exclude_unset=True)
    if "config" in updates:
        updates["config"] = _merge_config(existing, updates["config"])

    cleared_count = 0
    with log_operation(
        logger,
        "custom_field.definition.update",
        field_definition_id=str(resolved_id),
    ):
        if scan_impact and record_store is not None:
            prospective = CustomFieldDefinition.model_validate(
                {**existing.model_dump(), **updates},
            )
            holding = records_with_values(
                await records_holding_field(record_store, prospective),
                prospective,
            )
            invalid = find_invalid_records(holding, prospective)
            if invalid and options.validate_existing_values:
                logger.debug(
                    "custom_field.definition.update_blocked",
                    extra={
                        "field_definition_id": str(resolved_id),
                        "invalid_count": len(invalid),
                    },
                )
                raise CustomFieldConflictError(
                    f"{len(invalid)} existing task value(s) are invalid "
                    "under the new field configuration",
                    code="EXISTING_VALUES_INVALID",
                )
            if invalid:
                cleared_count = await strip_field_values(record_store, invalid, prospective)

        updates["updated_at"] = utcnow()
        updated = await call_store(
            "update custom field",
            store.update(resolved_id, updates),
            field_definition_id=str(resolved_id),
        )

    logger.info(
        "custom_field.definition.updated",
        extra={
            "field_definition_id": str(resolved_id),
            "changed": sorted(key for key in updates if key != "updated_at"),
            "cleared_count": cleared_count,
        },
    )
    return updated


async def delete_field_definition(
    field_definition_id: UUID | str,
    store: FieldDefinitionStore,
    record_store: TaskRecordStore | None = None,
    options: DeleteOptions | None = None,
) -> DeleteResult:
    """Delete a definition, optionally stripping its values from tasks first.

    Task values are cleaned up before the definition is deleted; a cleanup
    failure aborts the delete. Without `force`, the in-use check needs
    `record_store`.
    """
    options = options or DeleteOptions()
    resolved_id = coerce_uuid(field_definition_id, field_name="field_definition_id")

    existing = await require_field_definition(store, resolved_id)
    if options.auth_context is not None:
        require_organization_access(options.auth_context, existing.organization_id)
        require_admin_role(options.auth_context)
    if record_store is None and (options.cleanup_task_values or not options.force):
        raise TypeError("record_store is required unless force is set without cleanup")

    if existing.required and not options.force:
        raise CustomFieldConflictError(
            REQUIRED_FIELD_DELETE_ERROR,
            code="CANNOT_DELETE_REQUIRED_FIELD",
        )

    affected = 0
    with log_operation(
        logger,
        "custom_field.definition.delete",
        field_definition_id=str(resolved_id),
    ):
        if record_store is not None:
            holding = await records_holding_field(record_store, existing)
            in_use = records_with_values(holding, existing)
            if in_use and not (options.cleanup_task_values or options.force):
                raise CustomFieldConflictError(
                    f"Field is in use by {len(in_use)} task(s)",
                    code="FIELD_IN_USE",
                )
            if options.cleanup_task_values and holding:
                affected = await strip_field_values(record_store, holding, existing)

        await call_store(
            "delete custom field",
            store.delete(resolved_id),
            field_definition_id=str(resolved_id),
        )

    logger.info(
        "custom_field.definition.deleted",
        extra={
            "field_definition_id": str(resolved_id),
            "board_id": str(existing.board_id),
            "affected_tasks_count": affected,
            "forced": options.force,
        },
    )
    return DeleteResult(field_definition_id=resolved_id, affected_tasks_count=affected)


async def list_field_definitions(
    board_id: UUID | str,
    store: FieldDefinitionStore,
    auth_context: AuthContext | None = None,
) -> list[CustomFieldDefinition]:
    """Return a board's definitions ordered by position."""
    resolved_board_id = coerce_uuid(board_id, field_name="board_id")
    definitions = await call_store(
        "load custom fields",
        store.get_by_board(resolved_board_id),
        board_id=str(resolved_board_id),
    )
    if auth_context is not None and definitions:
        require_organization_access(auth_context, definitions[0].organization_id)
    return sorted(definitions, key=lambda definition: definition.position)
