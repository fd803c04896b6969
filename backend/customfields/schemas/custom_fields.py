"""Schemas for custom field definition payloads, reorder items, and values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self
from uuid import UUID

from pydantic import ValidationInfo, field_validator, model_validator
from sqlmodel import Field, SQLModel

from customfields.schemas.custom_field_configs import (
    CustomFieldType,
    normalize_field_type,
    validate_field_config,
)

RUNTIME_ANNOTATION_TYPES = (UUID,)

FIELD_NAME_MAX_LENGTH = 100
FIELD_NAME_REQUIRED_ERROR = "Field name is required"
FIELD_NAME_TOO_LONG_ERROR = (
    f"Field name must be at most {FIELD_NAME_MAX_LENGTH} characters"
)


def normalize_field_name(value: object) -> str:
    """Trim a field name and enforce its length bounds."""
    if not isinstance(value, str):
        raise ValueError("Field name must be a string")
    normalized = value.strip()
    if not normalized:
        raise ValueError(FIELD_NAME_REQUIRED_ERROR)
    if len(normalized) > FIELD_NAME_MAX_LENGTH:
        raise ValueError(FIELD_NAME_TOO_LONG_ERROR)
    return normalized


class CustomFieldDefinitionCreate(SQLModel):
    """Payload for creating a board custom field definition.

    Field order matters: `config` is validated against the already-resolved
    `field_type`, and config errors are reported ahead of name errors.
    """

    board_id: UUID
    organization_id: UUID
    field_type: CustomFieldType
    config: dict[str, Any] = Field(default_factory=dict)
    name: str
    required: bool = False
    position: int | None = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def default_missing_config(cls, value: object) -> object:
        """Run config validation even when the payload omits `config`."""
        if isinstance(value, Mapping) and value.get("config") is None:
            return {**value, "config": {}}
        return value

    @field_validator("field_type", mode="before")
    @classmethod
    def normalize_type(cls, value: object) -> object:
        """Normalize field type aliases."""
        return normalize_field_type(value)

    @field_validator("config", mode="before")
    @classmethod
    def validate_config(cls, value: object, info: ValidationInfo) -> object:
        """Validate config for the field type and store it in canonical form."""
        field_type = info.data.get("field_type")
        if field_type is None:
            return value
        if value is not None and not isinstance(value, Mapping):
            raise ValueError("config must be an object")
        return validate_field_config(field_type, value)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: object) -> object:
        """Trim and bound the display name."""
        return normalize_field_name(value)


class CustomFieldDefinitionUpdate(SQLModel):
    """Payload for editing an existing definition.

    The field type is immutable and is checked against the stored definition
    before this payload is parsed, so it is not part of the schema.
    """

    name: str | None = None
    config: dict[str, Any] | None = None
    required: bool | None = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_optional_name(cls, value: object) -> object:
        """Trim and bound the display name when provided."""
        if value is None:
            return None
        return normalize_field_name(value)

    @field_validator("config", mode="before")
    @classmethod
    def require_config_object(cls, value: object) -> object:
        """Config patches are merged key-by-key, so they must be objects."""
        if value is not None and not isinstance(value, Mapping):
            raise ValueError("config must be an object")
        return value

    @model_validator(mode="after")
    def reject_null_for_non_nullable_fields(self) -> Self:
        """Reject explicit null for non-nullable update fields."""
        non_nullable_fields = ("name", "config", "required")
        invalid = [
            field_name
            for field_name in non_nullable_fields
            if field_name in self.model_fields_set and getattr(self, field_name) is None
        ]
        if invalid:
            raise ValueError(
                f"{', '.join(invalid)} cannot be null; omit the field to leave it unchanged",
            )
        return self

    @model_validator(mode="after")
    def require_some_update(self) -> Self:
        """Reject empty updates to avoid no-op requests."""
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self


class ReorderItem(SQLModel):
    """One `(field_id, position)` pair of a reorder request."""

    field_id: UUID
    position: int = Field(ge=0)


class CustomFieldValue(SQLModel):
    """A candidate value for one custom field definition."""

    field_definition_id: UUID
    value: object | None = None
