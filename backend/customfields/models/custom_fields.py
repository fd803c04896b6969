"""Board custom field definition entity."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from customfields.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class CustomFieldDefinition(SQLModel):
    """Typed custom field attached to a board.

    `field_type`, `board_id`, and `organization_id` never change after creation.
    `position` is the zero-based, gapless display index among the board's fields.
    """

    id: UUID = Field(default_factory=uuid4)
    board_id: UUID
    organization_id: UUID
    name: str
    field_type: str
    config: dict[str, Any] = Field(default_factory=dict)
    required: bool = Field(default=False)
    position: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def value_key(self) -> str:
        """Key under which tasks store this field's value."""
        return str(self.id)
