"""Value validators built from a field definition's type, config, and required flag.

`build_value_schema` returns one small frozen validator per field type. Each
`validate(value)` raises `CustomFieldValueError` with a user-facing message;
`None` is the absent value. A definition that cannot produce a validator
(unknown type, corrupt config) raises `InvalidFieldDefinitionError` instead.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from customfields.schemas.custom_field_configs import (
    CheckboxFieldConfig,
    DateFieldConfig,
    NumberFieldConfig,
    SelectFieldConfig,
    TextFieldConfig,
    parse_date_like,
    parse_field_config,
)
from customfields.services.custom_fields.exceptions import (
    CustomFieldValueError,
    InvalidFieldDefinitionError,
)

REQUIRED_ERROR = "Field is required"


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_absent(value: object | None, *, required: bool) -> bool:
    """Return True when there is nothing to validate; raise if that is not allowed."""
    if value is not None:
        return False
    if required:
        raise CustomFieldValueError(REQUIRED_ERROR)
    return True


@dataclass(frozen=True, slots=True)
class TextValueSchema:
    required: bool = False
    max_length: int | None = None

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if not isinstance(value, str):
            raise CustomFieldValueError("Value must be a string")
        if self.max_length is not None and len(value) > self.max_length:
            raise CustomFieldValueError(
                f"Value exceeds maximum length of {self.max_length}",
            )
        # An empty string is a valid string, but not a value for a required field.
        if self.required and not value.strip():
            raise CustomFieldValueError(REQUIRED_ERROR)


@dataclass(frozen=True, slots=True)
class NumberValueSchema:
    required: bool = False
    minimum: int | float | None = None
    maximum: int | float | None = None
    allow_decimals: bool = False

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CustomFieldValueError("Value must be a number")
        if isinstance(value, float) and not math.isfinite(value):
            raise CustomFieldValueError("Value must be a number")
        if self.minimum is not None and value < self.minimum:
            raise CustomFieldValueError(
                f"Value must be at least {_format_number(self.minimum)}",
            )
        if self.maximum is not None and value > self.maximum:
            raise CustomFieldValueError(
                f"Value must be at most {_format_number(self.maximum)}",
            )
        if not self.allow_decimals and isinstance(value, float) and not value.is_integer():
            raise CustomFieldValueError("Value must be an integer")


@dataclass(frozen=True, slots=True)
class DateValueSchema:
    required: bool = False
    minimum: date | None = None
    maximum: date | None = None

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if self.required and isinstance(value, str) and not value.strip():
            raise CustomFieldValueError(REQUIRED_ERROR)
        parsed = parse_date_like(value)
        if parsed is None:
            raise CustomFieldValueError("Value must be a valid date")
        if self.minimum is not None and parsed < self.minimum:
            raise CustomFieldValueError(
                f"Date must be on or after {self.minimum.isoformat()}",
            )
        if self.maximum is not None and parsed > self.maximum:
            raise CustomFieldValueError(
                f"Date must be on or before {self.maximum.isoformat()}",
            )


@dataclass(frozen=True, slots=True)
class SelectValueSchema:
    options: tuple[str, ...]
    required: bool = False

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if not isinstance(value, str) or value not in self.options:
            raise CustomFieldValueError(
                f"Value must be one of: {', '.join(self.options)}",
            )


@dataclass(frozen=True, slots=True)
class MultiSelectValueSchema:
    options: tuple[str, ...]
    required: bool = False

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if not isinstance(value, (list, tuple)):
            raise CustomFieldValueError("Value must be an array")
        # Only the offending entry is named, unlike single-select.
        for entry in value:
            if not isinstance(entry, str) or entry not in self.options:
                raise CustomFieldValueError(f"Invalid option: {entry}")
        if self.required and not value:
            raise CustomFieldValueError(REQUIRED_ERROR)


@dataclass(frozen=True, slots=True)
class CheckboxValueSchema:
    required: bool = False

    def validate(self, value: object | None) -> None:
        if _is_absent(value, required=self.required):
            return
        if not isinstance(value, bool):
            raise CustomFieldValueError("Value must be a boolean")


FieldValueSchema = (
    TextValueSchema
    | NumberValueSchema
    | DateValueSchema
    | SelectValueSchema
    | MultiSelectValueSchema
    | CheckboxValueSchema
)


def build_value_schema(
    field_type: object,
    config: Mapping[str, object] | None,
    *,
    required: bool,
) -> FieldValueSchema:
    """Construct the value validator for one field definition."""
    try:
        parsed = parse_field_config(field_type, config)
    except ValueError as exc:
        raise InvalidFieldDefinitionError(str(exc)) from exc

    if isinstance(parsed, TextFieldConfig):
        return TextValueSchema(required=required, max_length=parsed.max_length)
    if isinstance(parsed, NumberFieldConfig):
        return NumberValueSchema(
            required=required,
            minimum=parsed.min,
            maximum=parsed.max,
            allow_decimals=parsed.allow_decimals,
        )
    if isinstance(parsed, DateFieldConfig):
        return DateValueSchema(required=required, minimum=parsed.min, maximum=parsed.max)
    if isinstance(parsed, SelectFieldConfig):
        options = tuple(parsed.options)
        if parsed.multiple:
            return MultiSelectValueSchema(options=options, required=required)
        return SelectValueSchema(options=options, required=required)
    if isinstance(parsed, CheckboxFieldConfig):
        return CheckboxValueSchema(required=required)
    raise InvalidFieldDefinitionError(f"Unknown field type: {field_type}")
