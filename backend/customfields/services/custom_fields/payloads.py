"""Helpers for turning caller input into validated schema objects."""

from __future__ import annotations

from typing import TypeVar
from uuid import UUID

from pydantic import ValidationError
from sqlmodel import SQLModel

from customfields.schemas.common import first_error_message
from customfields.services.custom_fields.exceptions import CustomFieldValidationError

ModelT = TypeVar("ModelT", bound=SQLModel)


def parse_payload(model: type[ModelT], data: object) -> ModelT:
    """Validate `data` as `model`, surfacing only the first violated rule."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CustomFieldValidationError(first_error_message(exc)) from exc


def coerce_uuid(value: object, *, field_name: str) -> UUID:
    """Accept a UUID or its string form."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError as exc:
            raise CustomFieldValidationError(f"Invalid {field_name}") from exc
    raise CustomFieldValidationError(f"Invalid {field_name}")
