"""Shared schema primitives for records and tool request/response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def unwrap_reference(value: Any) -> Any:
    """Reduce a populated reference (``{"_id": ...}``) to its id string."""
    if isinstance(value, dict):
        value = value.get("_id", value.get("id"))
    if value is None:
        return None
    return str(value)


def text_or_none(value: Any) -> Optional[str]:
    """Coerce a scalar label (status, actor, comment) to text; None stays None."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


def validate_optional_non_empty_str(value: Optional[str], field_name: str) -> Optional[str]:
    """Validate optional string fields that cannot be empty/whitespace."""
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"Invalid {field_name}: cannot be empty")
    return value


class LenientRecord(BaseModel):
    """Base for records fetched from collaborators.

    Unknown keys are ignored, snake_case and camelCase keys are both
    accepted, and empty strings are normalised to None.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def empty_strings_to_none(cls, data: Any) -> Any:
        """Convert empty-string values to None."""
        if isinstance(data, dict):
            return {k: (None if v == "" else v) for k, v in data.items()}
        return data


class StrictIgnoreRequest(BaseModel):
    """Request base with ignored unknown fields."""

    model_config = ConfigDict(extra="ignore")


class StrictResponse(BaseModel):
    """Response/result base with forbidden unknown fields."""

    model_config = ConfigDict(extra="forbid")


class DateRangeInput(BaseModel):
    """Date window as supplied by a dashboard.

    ``start``/``end`` are calendar dates (``YYYY-MM-DD``); ``shortcut``
    (T/Y/W/L) is resolved by the tool handler and wins over both.
    """

    model_config = ConfigDict(extra="ignore")

    start: Optional[str] = None
    end: Optional[str] = None
    shortcut: Optional[str] = None

    @field_validator("start", "end", "shortcut", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ActingUserMixin(BaseModel):
    """Reusable acting_user_id field validation."""

    acting_user_id: str

    @field_validator("acting_user_id", mode="before")
    @classmethod
    def coerce_acting_user_id(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("acting_user_id")
    @classmethod
    def validate_acting_user_id(cls, value: str) -> str:
        return validate_optional_non_empty_str(value, "acting_user_id")
