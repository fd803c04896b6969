# ruff: noqa: INP001, S101
"""Tests for per-type custom field config schemas and definition payloads."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from customfields.schemas.custom_field_configs import (
    DATE_RANGE_ERROR,
    MAX_LENGTH_NEGATIVE_ERROR,
    NUMBER_RANGE_ERROR,
    SELECT_OPTIONS_REQUIRED_ERROR,
    SELECT_OPTIONS_UNIQUE_ERROR,
    SelectFieldConfig,
    normalize_config_keys,
    normalize_field_type,
    parse_field_config,
    validate_field_config,
)
from customfields.schemas.custom_fields import (
    FIELD_NAME_REQUIRED_ERROR,
    FIELD_NAME_TOO_LONG_ERROR,
    CustomFieldDefinitionCreate,
    CustomFieldDefinitionUpdate,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("text", "text"),
        ("String", "text"),
        ("integer", "number"),
        ("single_select", "select"),
        ("multi-select", "multi_select"),
        (" boolean ", "checkbox"),
    ],
)
def test_normalize_field_type_resolves_aliases(raw: str, expected: str) -> None:
    assert normalize_field_type(raw) == expected


def test_normalize_field_type_rejects_unknown_types() -> None:
    with pytest.raises(ValueError, match="Unknown field type: rating"):
        normalize_field_type("rating")
    with pytest.raises(ValueError, match="field_type must be a string"):
        normalize_field_type(3)


def test_normalize_config_keys_prefers_canonical_spelling() -> None:
    normalized = normalize_config_keys("number", {"min_value": 1, "min": 5, "max_value": 9})
    assert normalized == {"min": 5, "max": 9}


@pytest.mark.parametrize(
    ("field_type", "config", "message"),
    [
        ("text", {"max_length": -1}, MAX_LENGTH_NEGATIVE_ERROR),
        ("number", {"min": 10, "max": 1}, NUMBER_RANGE_ERROR),
        ("number", {"min_value": 10, "max_value": 1}, NUMBER_RANGE_ERROR),
        ("date", {"min": "2024-02-01", "max": "2024-01-01"}, DATE_RANGE_ERROR),
        ("date", {"min_date": "2024-02-01", "max_date": "2024-01-01"}, DATE_RANGE_ERROR),
        ("select", {"options": []}, SELECT_OPTIONS_REQUIRED_ERROR),
        ("multi_select", {}, SELECT_OPTIONS_REQUIRED_ERROR),
        ("select", {"options": ["a", "a"]}, SELECT_OPTIONS_UNIQUE_ERROR),
        ("select", {"options": ["a", "  "]}, "Select options cannot be blank"),
        ("number", {"step": 0}, "step must be positive"),
        ("number", {"min": True}, "min must be a number"),
        ("number", {"max": float("nan")}, "max must be a finite number"),
        ("number", {"min": float("-inf")}, "min must be a finite number"),
    ],
)
def test_validate_field_config_reports_first_violation(
    field_type: str,
    config: dict[str, object],
    message: str,
) -> None:
    with pytest.raises(ValueError) as exc_info:
        validate_field_config(field_type, config)
    assert str(exc_info.value) == message


def test_validate_field_config_returns_canonical_keys() -> None:
    assert validate_field_config("number", {"min_value": 1, "allowDecimals": True}) == {
        "min": 1,
        "allow_decimals": True,
    }
    assert validate_field_config("date", {"min_date": "2024-01-01"}) == {"min": "2024-01-01"}
    assert validate_field_config("text", {"maxLength": 0}) == {
        "max_length": 0,
        "multiline": False,
    }


def test_date_bounds_stored_as_datetimes_keep_the_calendar_day() -> None:
    assert validate_field_config(
        "date",
        {"min_date": "2024-01-01T10:00:00Z", "max_date": "2024-03-01T23:59:59+02:00"},
    ) == {"min": "2024-01-01", "max": "2024-03-01"}


def test_validate_field_config_is_stable_when_reapplied() -> None:
    first = validate_field_config("multi_select", {"options": ["red", "blue"]})
    assert validate_field_config("multi_select", first) == first
    assert first["multiple"] is True


def test_parse_field_config_allows_equal_numeric_bounds() -> None:
    parsed = parse_field_config("number", {"min": 3, "max": 3})
    assert parsed.min == parsed.max == 3


def test_parse_field_config_forces_multiple_for_multi_select() -> None:
    parsed = parse_field_config("multi_select", {"options": ["x"], "multiple": False})
    assert isinstance(parsed, SelectFieldConfig)
    assert parsed.multiple is True


def test_create_payload_normalizes_type_config_and_name() -> None:
    payload = CustomFieldDefinitionCreate.model_validate(
        {
            "board_id": str(uuid4()),
            "organization_id": str(uuid4()),
            "field_type": "integer",
            "config": {"max_value": 10},
            "name": "  Story points  ",
        },
    )
    assert payload.field_type == "number"
    assert payload.config == {"max": 10, "allow_decimals": False}
    assert payload.name == "Story points"
    assert payload.required is False
    assert payload.position is None


def test_create_payload_validates_missing_config_for_select() -> None:
    with pytest.raises(ValidationError, match=SELECT_OPTIONS_REQUIRED_ERROR):
        CustomFieldDefinitionCreate.model_validate(
            {
                "board_id": uuid4(),
                "organization_id": uuid4(),
                "field_type": "select",
                "name": "Priority",
            },
        )


@pytest.mark.parametrize(
    ("name", "message"),
    [("   ", FIELD_NAME_REQUIRED_ERROR), ("x" * 101, FIELD_NAME_TOO_LONG_ERROR)],
)
def test_create_payload_rejects_bad_names(name: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        CustomFieldDefinitionCreate.model_validate(
            {
                "board_id": uuid4(),
                "organization_id": uuid4(),
                "field_type": "text",
                "name": name,
            },
        )


def test_update_payload_rejects_explicit_nulls_and_empty_patches() -> None:
    with pytest.raises(ValidationError, match="name cannot be null"):
        CustomFieldDefinitionUpdate.model_validate({"name": None})
    with pytest.raises(ValidationError, match="At least one field is required"):
        CustomFieldDefinitionUpdate.model_validate({})


def test_update_payload_trims_name() -> None:
    payload = CustomFieldDefinitionUpdate.model_validate({"name": " Due "})
    assert payload.model_dump(exclude_unset=True) == {"name": "Due"}
