"""Board custom-field definitions, value validation, and impact analysis.

Prefer importing from this package when used by other modules.
"""

from customfields.services.custom_fields.authorization import AuthContext
from customfields.services.custom_fields.definitions import (
    DeleteOptions,
    DeleteResult,
    UpdateOptions,
    create_field_definition,
    delete_field_definition,
    list_field_definitions,
    update_field_definition,
)
from customfields.services.custom_fields.exceptions import (
    CustomFieldConflictError,
    CustomFieldError,
    CustomFieldErrorKind,
    CustomFieldForbiddenError,
    CustomFieldNotFoundError,
    CustomFieldStoreError,
    CustomFieldUnauthorizedError,
    CustomFieldValidationError,
    CustomFieldValueError,
    FieldTypeImmutableError,
    InvalidFieldDefinitionError,
    ReorderConsistencyError,
    map_custom_field_error_to_http_exception,
)
from customfields.services.custom_fields.reorder import reorder_field_definitions
from customfields.services.custom_fields.stores import FieldDefinitionStore, TaskRecordStore
from customfields.services.custom_fields.validation import (
    TaskValuesValidationResult,
    ValidationResult,
    validate_field_value,
    validate_task_custom_field_values,
    validate_value_against_definition,
)
from customfields.services.custom_fields.value_schemas import build_value_schema

__all__ = [
    "AuthContext",
    "CustomFieldConflictError",
    "CustomFieldError",
    "CustomFieldErrorKind",
    "CustomFieldForbiddenError",
    "CustomFieldNotFoundError",
    "CustomFieldStoreError",
    "CustomFieldUnauthorizedError",
    "CustomFieldValidationError",
    "CustomFieldValueError",
    "DeleteOptions",
    "DeleteResult",
    "FieldDefinitionStore",
    "FieldTypeImmutableError",
    "InvalidFieldDefinitionError",
    "ReorderConsistencyError",
    "TaskRecordStore",
    "TaskValuesValidationResult",
    "UpdateOptions",
    "ValidationResult",
    "build_value_schema",
    "create_field_definition",
    "delete_field_definition",
    "list_field_definitions",
    "map_custom_field_error_to_http_exception",
    "reorder_field_definitions",
    "update_field_definition",
    "validate_field_value",
    "validate_task_custom_field_values",
    "validate_value_against_definition",
]
