"""Runtime validation of custom-field values against stored definitions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID

from customfields.core.logging import get_logger
from customfields.models.custom_fields import CustomFieldDefinition
from customfields.schemas.custom_fields import CustomFieldValue
from customfields.services.custom_fields.exceptions import CustomFieldValueError
from customfields.services.custom_fields.payloads import coerce_uuid, parse_payload
from customfields.services.custom_fields.stores import (
    FieldDefinitionStore,
    call_store,
    require_field_definition,
)
from customfields.services.custom_fields.value_schemas import build_value_schema

logger = get_logger(__name__)

UNKNOWN_CUSTOM_FIELD_ERROR = "Unknown custom field"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class TaskValuesValidationResult:
    """Per-field messages for a whole task value map, keyed by definition id."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_value_against_definition(
    definition: CustomFieldDefinition,
    value: object | None,
) -> ValidationResult:
    """Check one value against a definition.

    A corrupt definition raises `InvalidFieldDefinitionError`; it is never
    reported as an invalid value.
    """
    schema = build_value_schema(
        definition.field_type,
        definition.config,
        required=definition.required,
    )
    try:
        schema.validate(value)
    except CustomFieldValueError as exc:
        return ValidationResult(is_valid=False, error=exc.detail)
    return ValidationResult(is_valid=True)


async def validate_field_value(
    value: CustomFieldValue | Mapping[str, object],
    store: FieldDefinitionStore,
) -> ValidationResult:
    """Validate a candidate value for the definition it names."""
    payload = parse_payload(CustomFieldValue, value)
    definition = await require_field_definition(store, payload.field_definition_id)
    result = validate_value_against_definition(definition, payload.value)
    if not result.is_valid:
        logger.debug(
            "custom_field.value.invalid",
            extra={
                "field_definition_id": str(definition.id),
                "field_type": definition.field_type,
                "error": result.error,
            },
        )
    return result


async def validate_task_custom_field_values(
    board_id: UUID | str,
    values: Mapping[str, object | None] | None,
    store: FieldDefinitionStore,
) -> TaskValuesValidationResult:
    """Validate a task's complete value map against its board's definitions.

    Keys that name no definition on the board are reported as unknown. A
    missing key counts as an absent value, so required fields fail with
    "Field is required".
    """
    resolved_board_id = coerce_uuid(board_id, field_name="board_id")
    definitions = await call_store(
        "load custom fields",
        store.get_by_board(resolved_board_id),
        board_id=str(resolved_board_id),
    )
    submitted = dict(values or {})
    errors: dict[str, str] = {}

    known_keys = {definition.value_key for definition in definitions}
    for key in submitted:
        if key not in known_keys:
            errors[key] = UNKNOWN_CUSTOM_FIELD_ERROR

    for definition in definitions:
        result = validate_value_against_definition(
            definition,
            submitted.get(definition.value_key),
        )
        if not result.is_valid and result.error is not None:
            errors[definition.value_key] = result.error

    if errors:
        logger.debug(
            "custom_field.task_values.invalid",
            extra={"board_id": str(resolved_board_id), "error_count": len(errors)},
        )
    return TaskValuesValidationResult(errors=errors)
