"""Scans and rewrites of task values affected by definition changes."""

from __future__ import annotations

from collections.abc import Sequence

from customfields.core.logging import get_logger
from customfields.models.custom_fields import CustomFieldDefinition
from customfields.models.tasks import TaskRecord
from customfields.services.custom_fields.exceptions import CustomFieldStoreError
from customfields.services.custom_fields.stores import TaskRecordStore, call_store
from customfields.services.custom_fields.validation import (
    validate_value_against_definition,
)

logger = get_logger(__name__)

CLEANUP_FAILED_ERROR = "Failed to clean up custom field values"


async def records_holding_field(
    record_store: TaskRecordStore,
    definition: CustomFieldDefinition,
) -> list[TaskRecord]:
    """Return every record whose value map contains the definition's key.

    The store filter is only a hint, so records are re-checked here.
    """
    key = definition.value_key
    records = await call_store(
        "load tasks",
        record_store.list(field_definition_id=definition.id),
        field_definition_id=key,
    )
    return [record for record in records if key in record.custom_field_values]


def records_with_values(
    records: Sequence[TaskRecord],
    definition: CustomFieldDefinition,
) -> list[TaskRecord]:
    """Narrow to records whose stored value is present (not `None`)."""
    key = definition.value_key
    return [
        record for record in records if record.custom_field_values.get(key) is not None
    ]


def find_invalid_records(
    records: Sequence[TaskRecord],
    definition: CustomFieldDefinition,
) -> list[TaskRecord]:
    """Return records whose stored value fails the (prospective) definition."""
    key = definition.value_key
    return [
        record
        for record in records
        if not validate_value_against_definition(
            definition,
            record.custom_field_values.get(key),
        ).is_valid
    ]


async def strip_field_values(
    record_store: TaskRecordStore,
    records: Sequence[TaskRecord],
    definition: CustomFieldDefinition,
) -> int:
    """Remove the definition's key from each record; return the number rewritten.

    Records are rewritten one at a time. The first failure aborts the scan and
    is raised as `CustomFieldStoreError`; records already rewritten stay so.
    """
    key = definition.value_key
    rewritten = 0
    for record in records:
        remaining = {
            name: value
            for name, value in record.custom_field_values.items()
            if name != key
        }
        try:
            await record_store.update(record.id, {"custom_field_values": remaining})
        except Exception as exc:
            logger.exception(
                "custom_field.definition.cleanup_failed",
                extra={
                    "field_definition_id": key,
                    "task_id": str(record.id),
                    "cleaned_count": rewritten,
                    "error": str(exc),
                },
            )
            raise CustomFieldStoreError(CLEANUP_FAILED_ERROR) from exc
        rewritten += 1
    return rewritten
