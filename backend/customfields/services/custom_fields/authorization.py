"""Caller authorization context and organization/role checks."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Literal
from uuid import UUID

from customfields.services.custom_fields.exceptions import (
    CustomFieldForbiddenError,
    CustomFieldUnauthorizedError,
)

CallerRole = Literal["owner", "admin", "member"]
ADMIN_ROLES: frozenset[str] = frozenset({"owner", "admin"})


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Identity and tenancy supplied by an outer authorization layer.

    Passing no context at all skips every check (the caller has already
    authorized the request).
    """

    user_id: UUID | str
    organization_ids: Collection[UUID] = field(default_factory=frozenset)
    role: CallerRole | None = None


def require_organization_access(auth_context: AuthContext, organization_id: UUID) -> None:
    """Reject callers outside the resource's organization."""
    if organization_id not in auth_context.organization_ids:
        raise CustomFieldUnauthorizedError("UNAUTHORIZED")


def require_admin_role(auth_context: AuthContext) -> None:
    """Reject non-admin roles; a context without a role is not restricted."""
    if auth_context.role is not None and auth_context.role not in ADMIN_ROLES:
        raise CustomFieldForbiddenError("FORBIDDEN")
