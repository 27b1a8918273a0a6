"""Convert Pydantic validation errors to the project ToolError contract."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from models.errors import ToolError, create_validation_error


def _loc_to_field(loc: tuple[Any, ...], prefix: Optional[str]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    if prefix:
        parts.insert(0, prefix)
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    if message.startswith("Value error, "):
        return message[len("Value error, ") :]
    return message


def map_pydantic_validation_error(error: ValidationError, prefix: Optional[str] = None) -> ToolError:
    """
    Map a Pydantic ValidationError to a VALIDATION_ERROR ToolError.

    Only the first issue is reported; when more exist the message says how
    many were left out.

    Args:
        error: The validation error
        prefix: Optional field path prepended to the reported location
    """
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(tuple(first.get("loc", ())), prefix)
    message = _clean_pydantic_message(first.get("msg", "Invalid input"))
    if len(issues) > 1:
        message = f"{message} (and {len(issues) - 1} more)"

    if field:
        return create_validation_error(f"Invalid {field}: {message}")
    return create_validation_error(message)
