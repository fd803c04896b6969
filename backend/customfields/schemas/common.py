"""Common schema helpers shared by custom-field payloads."""

from __future__ import annotations

from pydantic import ValidationError

VALIDATION_FAILED_ERROR = "Validation failed"


def first_error_message(exc: ValidationError) -> str:
    """Return a readable message for the first error in a validation failure.

    Messages raised from our own validators (`ValueError`) are surfaced verbatim;
    structural pydantic errors are prefixed with their field location.
    """
    errors = exc.errors()
    if not errors:
        return VALIDATION_FAILED_ERROR
    first = errors[0]
    ctx = first.get("ctx") or {}
    if first.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    message = str(first.get("msg") or VALIDATION_FAILED_ERROR)
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {message}"
    return message
