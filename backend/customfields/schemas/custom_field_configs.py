"""Per-type configuration schemas for board custom fields."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Literal, Self

from pydantic import ValidationError, ValidationInfo, field_validator, model_validator
from sqlmodel import SQLModel

from customfields.schemas.common import first_error_message

CustomFieldType = Literal[
    "text",
    "number",
    "date",
    "select",
    "multi_select",
    "checkbox",
]
CUSTOM_FIELD_TYPES: tuple[CustomFieldType, ...] = (
    "text",
    "number",
    "date",
    "select",
    "multi_select",
    "checkbox",
)
CUSTOM_FIELD_TYPE_ALIASES: dict[str, CustomFieldType] = {
    "text": "text",
    "string": "text",
    "number": "number",
    "integer": "number",
    "decimal": "number",
    "date": "date",
    "select": "select",
    "single_select": "select",
    "multi_select": "multi_select",
    "multi-select": "multi_select",
    "multiselect": "multi_select",
    "checkbox": "checkbox",
    "boolean": "checkbox",
    "bool": "checkbox",
    "true/false": "checkbox",
}
# Legacy config spellings folded into the canonical key for each field type.
CONFIG_KEY_ALIASES: dict[CustomFieldType, dict[str, str]] = {
    "text": {"maxLength": "max_length"},
    "number": {
        "min_value": "min",
        "max_value": "max",
        "allowDecimals": "allow_decimals",
        "allow_decimal": "allow_decimals",
    },
    "date": {"min_date": "min", "max_date": "max"},
    "select": {},
    "multi_select": {},
    "checkbox": {},
}
OPTION_MAX_LENGTH = 100

MAX_LENGTH_NEGATIVE_ERROR = "max_length must be positive"
NUMBER_RANGE_ERROR = "min cannot be greater than max"
DATE_RANGE_ERROR = "min_date cannot be after max_date"
SELECT_OPTIONS_REQUIRED_ERROR = "Select field must have at least one option"
SELECT_OPTIONS_UNIQUE_ERROR = "Select options must be unique"


def parse_date_like(value: object) -> date | None:
    """Read a date, datetime, or ISO date/datetime string as a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if not normalized:
        return None
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        pass
    if normalized.endswith("Z"):
        normalized = f"{normalized[:-1]}+00:00"
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        return None


def normalize_field_type(value: object) -> CustomFieldType:
    """Resolve a field type or one of its aliases to the canonical literal."""
    if not isinstance(value, str):
        raise ValueError("field_type must be a string")
    resolved = CUSTOM_FIELD_TYPE_ALIASES.get(value.strip().lower())
    if resolved is None:
        raise ValueError(f"Unknown field type: {value}")
    return resolved


def normalize_config_keys(
    field_type: str,
    config: Mapping[str, object] | None,
) -> dict[str, object]:
    """Return a copy of `config` using canonical key names.

    When both spellings of a key are present the canonical one wins.
    """
    if config is None:
        return {}
    if not isinstance(config, Mapping):
        raise ValueError("config must be an object")
    aliases = CONFIG_KEY_ALIASES.get(field_type, {})  # type: ignore[call-overload]
    normalized: dict[str, object] = {
        aliases[key]: value for key, value in config.items() if key in aliases
    }
    normalized.update({key: value for key, value in config.items() if key not in aliases})
    return normalized


class TextFieldConfig(SQLModel):
    """Configuration for text fields."""

    max_length: int | None = None
    multiline: bool = False

    @field_validator("max_length")
    @classmethod
    def validate_max_length(cls, value: int | None) -> int | None:
        """Reject negative length limits."""
        if value is not None and value < 0:
            raise ValueError(MAX_LENGTH_NEGATIVE_ERROR)
        return value


class NumberFieldConfig(SQLModel):
    """Configuration for number fields."""

    min: int | float | None = None
    max: int | float | None = None
    allow_decimals: bool = False
    step: int | float | None = None

    @field_validator("min", "max", "step", mode="before")
    @classmethod
    def reject_boolean_bounds(cls, value: object, info: ValidationInfo) -> object:
        """Booleans coerce to numbers in lax mode; refuse them explicitly."""
        if isinstance(value, bool):
            raise ValueError(f"{info.field_name} must be a number")
        return value

    @field_validator("min", "max", "step")
    @classmethod
    def require_finite(
        cls,
        value: int | float | None,
        info: ValidationInfo,
    ) -> int | float | None:
        """Reject NaN and infinite bounds."""
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"{info.field_name} must be a finite number")
        return value

    @field_validator("step")
    @classmethod
    def validate_step(cls, value: int | float | None) -> int | float | None:
        """Require a positive step when provided."""
        if value is not None and value <= 0:
            raise ValueError("step must be positive")
        return value

    @model_validator(mode="after")
    def validate_bounds(self) -> Self:
        """Ensure the numeric range is not inverted."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(NUMBER_RANGE_ERROR)
        return self


class DateFieldConfig(SQLModel):
    """Configuration for date fields."""

    min: date | None = None
    max: date | None = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def truncate_datetime_bounds(cls, value: object) -> object:
        """Legacy rows store bounds as full ISO datetimes; keep only the day."""
        parsed = parse_date_like(value)
        return value if parsed is None else parsed

    @model_validator(mode="after")
    def validate_bounds(self) -> Self:
        """Ensure the date range is not inverted."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(DATE_RANGE_ERROR)
        return self


class SelectFieldConfig(SQLModel):
    """Configuration for single- and multi-select fields."""

    options: list[str]
    multiple: bool = False

    @model_validator(mode="before")
    @classmethod
    def require_options(cls, value: object) -> object:
        """Report a missing or empty option list with a dedicated message."""
        if isinstance(value, Mapping) and not value.get("options"):
            raise ValueError(SELECT_OPTIONS_REQUIRED_ERROR)
        return value

    @field_validator("options")
    @classmethod
    def validate_options(cls, value: list[str]) -> list[str]:
        """Options are matched exactly, so they must be non-blank and distinct."""
        if not value:
            raise ValueError(SELECT_OPTIONS_REQUIRED_ERROR)
        for option in value:
            if not option.strip():
                raise ValueError("Select options cannot be blank")
            if len(option) > OPTION_MAX_LENGTH:
                raise ValueError(
                    f"Select options must be at most {OPTION_MAX_LENGTH} characters",
                )
        if len(set(value)) != len(value):
            raise ValueError(SELECT_OPTIONS_UNIQUE_ERROR)
        return value


class CheckboxFieldConfig(SQLModel):
    """Configuration for checkbox fields."""

    default: bool | None = None


CustomFieldConfig = (
    TextFieldConfig
    | NumberFieldConfig
    | DateFieldConfig
    | SelectFieldConfig
    | CheckboxFieldConfig
)


def _config_model(field_type: CustomFieldType) -> type[CustomFieldConfig]:
    if field_type == "text":
        return TextFieldConfig
    if field_type == "number":
        return NumberFieldConfig
    if field_type == "date":
        return DateFieldConfig
    if field_type in {"select", "multi_select"}:
        return SelectFieldConfig
    if field_type == "checkbox":
        return CheckboxFieldConfig
    raise ValueError(f"Unknown field type: {field_type}")


def parse_field_config(
    field_type: object,
    config: Mapping[str, object] | None,
) -> CustomFieldConfig:
    """Parse `config` into the typed model for `field_type`.

    Raises `ValueError` carrying the first violated rule.
    """
    resolved = normalize_field_type(field_type)
    payload = normalize_config_keys(resolved, config)
    try:
        parsed = _config_model(resolved).model_validate(payload)
    except ValidationError as exc:
        raise ValueError(first_error_message(exc)) from exc
    if resolved == "multi_select" and isinstance(parsed, SelectFieldConfig):
        parsed.multiple = True
    return parsed


def validate_field_config(
    field_type: object,
    config: Mapping[str, object] | None,
) -> dict[str, object]:
    """Validate `config` for `field_type` and return its canonical JSON form."""
    return parse_field_config(field_type, config).model_dump(mode="json", exclude_none=True)
