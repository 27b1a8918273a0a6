"""
Date-window predicates for report counting.

Date ranges are whole calendar days: ``start`` is inclusive from
00:00:00.000 and ``end`` is inclusive until 23:59:59.999 of its date, in
the report timezone. Timestamps are compared at millisecond precision.

Two temporal modes are supported (see ``models.status.TemporalMode``):

- creation: a candidate is dated by its ``created_at``
- status: a candidate is dated by when it reached the counted status,
  preferring ``joining_date``/``selection_date`` for Joined/Selected and
  falling back to ``created_at`` when no matching history entry exists
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, Optional

from models.status import CandidateStatus, TemporalMode
from schemas.records import Candidate
from utils.status_normalizer import normalize_status

DAY_END = time(23, 59, 59, 999000)

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Date shortcut codes used by the dashboards
SHORTCUT_NAMES = {
    "T": "T",
    "TODAY": "T",
    "Y": "Y",
    "YESTERDAY": "Y",
    "W": "W",
    "THIS_WEEK": "W",
    "L": "L",
    "LAST_WEEK": "L",
}


def _to_local_naive(value: datetime, tz: Optional[tzinfo]) -> datetime:
    if value.tzinfo is not None:
        if tz is not None:
            value = value.astimezone(tz)
        value = value.replace(tzinfo=None)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def parse_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse a record timestamp into a naive datetime in the report timezone.

    Accepts ``datetime``, ``date`` (midnight), epoch milliseconds and
    ISO 8601 strings (a trailing ``Z`` is UTC). Zone-aware values are
    converted into ``tz``; naive values are taken as already local.

    Args:
        value: Raw timestamp
        tz: Report timezone

    Returns:
        Naive local datetime truncated to milliseconds, or None if the
        value is missing or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _to_local_naive(value, tz)

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    if isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz or timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        return _to_local_naive(parsed, tz)

    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _to_local_naive(parsed, tz)


def parse_date(value: Any, tz: Optional[tzinfo] = None) -> Optional[date]:
    """
    Parse a range bound into a calendar date.

    Returns:
        The date, or None if the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value, tz).date()
    if isinstance(value, date):
        return value
    parsed = parse_timestamp(value, tz)
    return parsed.date() if parsed else None


class DateRange:
    """An optional [start, end] window of whole calendar days."""

    def __init__(self, start: Optional[date] = None, end: Optional[date] = None):
        self.start = start
        self.end = end

    @classmethod
    def from_values(cls, start: Any = None, end: Any = None, tz: Optional[tzinfo] = None) -> "DateRange":
        """Build a range from raw bounds; unparseable bounds are absent."""
        return cls(parse_date(start, tz), parse_date(end, tz))

    @property
    def is_active(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def lower(self) -> Optional[datetime]:
        """First instant of the window, inclusive."""
        return datetime.combine(self.start, time.min) if self.start else None

    @property
    def upper(self) -> Optional[datetime]:
        """Last instant of the window, inclusive."""
        return datetime.combine(self.end, DAY_END) if self.end else None

    def contains(self, timestamp: Any, tz: Optional[tzinfo] = None) -> bool:
        """
        Whether ``timestamp`` falls inside the window.

        A missing or unparseable timestamp is excluded whenever the range is
        active and included only when it is not.
        """
        if not self.is_active:
            return True

        moment = parse_timestamp(timestamp, tz)
        if moment is None:
            return False

        lower = self.lower
        upper = self.upper
        if lower is not None and moment < lower:
            return False
        if upper is not None and moment > upper:
            return False
        return True

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __repr__(self) -> str:
        return f"DateRange({self.start!r}, {self.end!r})"


def in_range(timestamp: Any, start: Any = None, end: Any = None, tz: Optional[tzinfo] = None) -> bool:
    """
    Test whether a timestamp falls inside [start, end].

    Args:
        timestamp: Record timestamp (any form ``parse_timestamp`` accepts)
        start: Optional first day of the window, inclusive from 00:00:00.000
        end: Optional last day of the window, inclusive until 23:59:59.999
        tz: Report timezone

    Returns:
        True when no bound is given; otherwise whether the timestamp is
        present and inside the window

    Examples:
        >>> in_range("2025-03-10T23:59:59.999", end="2025-03-10")
        True
        >>> in_range("2025-03-11T00:00:00.000", end="2025-03-10")
        False
        >>> in_range(None)
        True
    """
    return DateRange.from_values(start, end, tz).contains(timestamp, tz)


def status_timestamp(candidate: Candidate, status: CandidateStatus, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    When did ``candidate`` reach ``status``?

    Resolution order:
    1. ``joining_date`` for Joined, ``selection_date`` for Selected
    2. latest status-history entry whose status normalizes to ``status``
    3. the candidate's ``created_at``

    Returns:
        Naive local datetime, or None if nothing parseable is available
    """
    if status == CandidateStatus.JOINED and candidate.joining_date is not None:
        dedicated = parse_timestamp(candidate.joining_date, tz)
        if dedicated is not None:
            return dedicated
    if status == CandidateStatus.SELECTED and candidate.selection_date is not None:
        dedicated = parse_timestamp(candidate.selection_date, tz)
        if dedicated is not None:
            return dedicated

    latest: Optional[datetime] = None
    for entry in candidate.status_history:
        if normalize_status(entry.status) != status:
            continue
        moment = parse_timestamp(entry.timestamp, tz)
        if moment is not None and (latest is None or moment > latest):
            latest = moment

    if latest is not None:
        return latest
    return parse_timestamp(candidate.created_at, tz)


def relevant_timestamp(
    candidate: Candidate,
    status: Optional[CandidateStatus],
    mode: TemporalMode,
    tz: Optional[tzinfo] = None,
) -> Optional[datetime]:
    """
    Pick the timestamp a candidate is dated by for a given bucket.

    Args:
        candidate: The candidate being counted
        status: Status the bucket counts (ignored in creation mode)
        mode: Temporal mode of the report

    Returns:
        Naive local datetime or None
    """
    if mode == TemporalMode.STATUS and status is not None:
        return status_timestamp(candidate, status, tz)
    return parse_timestamp(candidate.created_at, tz)


def resolve_date_shortcut(shortcut: str, today: date) -> DateRange:
    """
    Resolve a dashboard date shortcut into a DateRange.

    Shortcuts:
    - T: today
    - Y: yesterday
    - W: Monday of this week through today
    - L: Monday through Sunday of last week

    Raises:
        ValueError: If the shortcut is unknown
    """
    code = SHORTCUT_NAMES.get(str(shortcut).strip().upper())
    if code is None:
        raise ValueError(
            f"Unknown date shortcut '{shortcut}'. Expected one of: T, Y, W, L"
        )

    if code == "T":
        return DateRange(today, today)
    if code == "Y":
        yesterday = today - timedelta(days=1)
        return DateRange(yesterday, yesterday)

    this_monday = today - timedelta(days=today.weekday())
    if code == "W":
        return DateRange(this_monday, today)

    last_monday = this_monday - timedelta(days=7)
    return DateRange(last_monday, last_monday + timedelta(days=6))


def format_day(value: Any, tz: Optional[tzinfo] = None) -> str:
    """
    Format a timestamp as the dashboards display it, e.g. ``12-Dec-25``.

    Returns:
        The formatted day, or ``N/A`` when the value is missing
    """
    moment = parse_timestamp(value, tz)
    if moment is None:
        return "N/A"
    return f"{moment.day:02d}-{_MONTH_ABBR[moment.month - 1]}-{moment.year % 100:02d}"
