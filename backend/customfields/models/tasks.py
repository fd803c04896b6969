"""Task records as seen by custom-field impact analysis."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

RUNTIME_ANNOTATION_TYPES = (UUID,)


class TaskRecord(SQLModel):
    """A task carrying custom-field values keyed by definition id."""

    id: UUID = Field(default_factory=uuid4)
    board_id: UUID | None = None
    custom_field_values: dict[str, object | None] = Field(default_factory=dict)
