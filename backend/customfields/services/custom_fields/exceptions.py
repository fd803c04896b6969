"""Custom-field exception definitions and HTTP mapping helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE = 422


class CustomFieldErrorKind(str, Enum):
    """Error categories used for consistent HTTP error mapping."""

    VALIDATION = "validation"
    INVALID_DEFINITION = "invalid_definition"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    IMMUTABLE = "immutable"
    CONFLICT = "conflict"
    CONSISTENCY = "consistency"
    STORE_FAILURE = "store_failure"


class CustomFieldError(Exception):
    """Base class for custom-field failures.

    `detail` is the human-readable reason; `code` is a stable identifier callers
    can branch on.
    """

    kind: ClassVar[CustomFieldErrorKind]
    default_code: ClassVar[str]

    def __init__(self, detail: str, *, code: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.code = code or self.default_code


class CustomFieldValidationError(CustomFieldError, ValueError):
    """Malformed definition input: name, type, config, or payload shape."""

    kind = CustomFieldErrorKind.VALIDATION
    default_code = "VALIDATION_FAILED"


class CustomFieldValueError(CustomFieldError, ValueError):
    """A candidate value does not satisfy its field definition."""

    kind = CustomFieldErrorKind.VALIDATION
    default_code = "INVALID_CUSTOM_FIELD_VALUE"


class InvalidFieldDefinitionError(CustomFieldError):
    """A stored definition cannot produce a value validator."""

    kind = CustomFieldErrorKind.INVALID_DEFINITION
    default_code = "INVALID_FIELD_DEFINITION"


class CustomFieldNotFoundError(CustomFieldError, LookupError):
    kind = CustomFieldErrorKind.NOT_FOUND
    default_code = "CUSTOM_FIELD_NOT_FOUND"


class CustomFieldUnauthorizedError(CustomFieldError):
    kind = CustomFieldErrorKind.UNAUTHORIZED
    default_code = "UNAUTHORIZED"


class CustomFieldForbiddenError(CustomFieldError):
    kind = CustomFieldErrorKind.FORBIDDEN
    default_code = "FORBIDDEN"


class FieldTypeImmutableError(CustomFieldError):
    kind = CustomFieldErrorKind.IMMUTABLE
    default_code = "CANNOT_CHANGE_FIELD_TYPE"


class CustomFieldConflictError(CustomFieldError):
    """Mutation blocked by the required flag or by values stored on tasks."""

    kind = CustomFieldErrorKind.CONFLICT
    default_code = "CONFLICT"


class ReorderConsistencyError(CustomFieldError):
    """Reorder payload is empty, incomplete, duplicated, gapped, or foreign."""

    kind = CustomFieldErrorKind.CONSISTENCY
    default_code = "INVALID_REORDER"


class CustomFieldStoreError(CustomFieldError):
    """A store call failed; the original exception is chained as `__cause__`."""

    kind = CustomFieldErrorKind.STORE_FAILURE
    default_code = "STORE_FAILURE"


@dataclass(frozen=True, slots=True)
class CustomFieldErrorPolicy:
    """HTTP policy for mapping custom-field failures."""

    status_code: int


_CUSTOM_FIELD_ERROR_POLICIES: dict[CustomFieldErrorKind, CustomFieldErrorPolicy] = {
    CustomFieldErrorKind.VALIDATION: CustomFieldErrorPolicy(
        status_code=HTTP_422_UNPROCESSABLE,
    ),
    CustomFieldErrorKind.INVALID_DEFINITION: CustomFieldErrorPolicy(
        status_code=HTTP_422_UNPROCESSABLE,
    ),
    CustomFieldErrorKind.NOT_FOUND: CustomFieldErrorPolicy(
        status_code=status.HTTP_404_NOT_FOUND,
    ),
    CustomFieldErrorKind.UNAUTHORIZED: CustomFieldErrorPolicy(
        status_code=status.HTTP_401_UNAUTHORIZED,
    ),
    CustomFieldErrorKind.FORBIDDEN: CustomFieldErrorPolicy(
        status_code=status.HTTP_403_FORBIDDEN,
    ),
    CustomFieldErrorKind.IMMUTABLE: CustomFieldErrorPolicy(
        status_code=status.HTTP_409_CONFLICT,
    ),
    CustomFieldErrorKind.CONFLICT: CustomFieldErrorPolicy(
        status_code=status.HTTP_409_CONFLICT,
    ),
    CustomFieldErrorKind.CONSISTENCY: CustomFieldErrorPolicy(
        status_code=HTTP_422_UNPROCESSABLE,
    ),
    CustomFieldErrorKind.STORE_FAILURE: CustomFieldErrorPolicy(
        status_code=status.HTTP_502_BAD_GATEWAY,
    ),
}


def map_custom_field_error_to_http_exception(exc: CustomFieldError) -> HTTPException:
    """Map a custom-field failure into a typed HTTP exception."""
    policy = _CUSTOM_FIELD_ERROR_POLICIES[exc.kind]
    return HTTPException(
        status_code=policy.status_code,
        detail={"code": exc.code, "message": exc.detail},
    )
