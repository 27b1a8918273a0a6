"""
Request-level validation shared by the reporting tools.

The engine modules tolerate malformed records; these helpers reject
malformed *requests* (unknown acting user, unparseable dates, unknown
temporal mode or filter column) with VALIDATION_ERROR.
"""

from datetime import date, datetime, tzinfo
from typing import Any, Mapping, Optional, Sequence

from models.errors import create_validation_error
from models.status import TemporalMode
from schemas.common import DateRangeInput
from schemas.records import StaffUser
from utils.column_filters import ColumnFilters, SearchFilters
from utils.org_scope import find_staff
from utils.temporal_filter import DateRange, parse_date, resolve_date_shortcut


def validate_acting_user(acting_user_id: str, staff: Sequence[StaffUser]) -> StaffUser:
    """
    Look up the acting user in the staff list.

    Raises:
        ToolError: If the acting user is not a known staff member
    """
    acting_user = find_staff(acting_user_id, staff)
    if acting_user is None:
        raise create_validation_error(
            f"Invalid acting_user_id: '{acting_user_id}' is not in the staff list"
        )
    return acting_user


def validate_temporal_mode(value: Any) -> TemporalMode:
    """
    Validate the temporal mode (case-insensitive).

    Args:
        value: Raw mode, None for the default (creation)

    Raises:
        ToolError: If the mode is unknown
    """
    if value is None:
        return TemporalMode.CREATION
    if isinstance(value, TemporalMode):
        return value
    text = str(value).strip().lower()
    for mode in TemporalMode:
        if mode.value == text:
            return mode
    allowed = ", ".join(m.value for m in TemporalMode)
    raise create_validation_error(f"Invalid temporal_mode: '{value}'. Must be one of: {allowed}")


def resolve_today(today: Optional[date], tz: tzinfo) -> date:
    """Reference day for shortcuts and trends: explicit, or now in the report zone."""
    if today is not None:
        return today
    return datetime.now(tz).date()


def validate_date_range(date_range: Optional[DateRangeInput], today: date, tz: tzinfo) -> DateRange:
    """
    Turn a requested window into a DateRange.

    A shortcut (T/Y/W/L) wins over explicit bounds. Explicit bounds must
    parse as dates; a reversed window is allowed and matches nothing.

    Raises:
        ToolError: For unknown shortcuts or unparseable bounds
    """
    if date_range is None:
        return DateRange()

    if date_range.shortcut:
        try:
            return resolve_date_shortcut(date_range.shortcut, today)
        except ValueError as e:
            raise create_validation_error(f"Invalid date_range.shortcut: {e}") from e

    bounds = {}
    for name in ("start", "end"):
        raw = getattr(date_range, name)
        if raw is None:
            bounds[name] = None
            continue
        parsed = parse_date(raw, tz)
        if parsed is None:
            raise create_validation_error(f"Invalid date_range.{name}: '{raw}' is not a date")
        bounds[name] = parsed

    return DateRange(bounds["start"], bounds["end"])


def validate_column_filters(selections: Optional[Mapping[str, Any]]) -> ColumnFilters:
    """
    Build column filters from a request mapping.

    Raises:
        ToolError: For unknown columns
    """
    try:
        return ColumnFilters(selections)
    except ValueError as e:
        raise create_validation_error(f"Invalid column_filters: {e}") from e


def validate_search(terms: Optional[Mapping[str, Optional[str]]]) -> SearchFilters:
    """
    Build search filters from a request mapping.

    Raises:
        ToolError: For unknown columns
    """
    try:
        return SearchFilters(terms)
    except ValueError as e:
        raise create_validation_error(f"Invalid search: {e}") from e
