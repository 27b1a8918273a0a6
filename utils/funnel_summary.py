"""
Hiring funnel summary for the manager reports page.

Headline metrics over the candidates and jobs visible to the acting user:
applications, hires (Selected or Joined), open positions, rejection rate,
the current-status funnel, the most applied-to positions and a six-month
application trend.
"""

from datetime import date, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence

from models.status import FUNNEL_STAGES, CandidateStatus, JobStatus
from schemas.records import Candidate, Job
from utils.org_scope import Scope, filter_in_scope
from utils.status_normalizer import normalize_status
from utils.temporal_filter import parse_timestamp

HIRED_STATUSES = frozenset({CandidateStatus.SELECTED, CandidateStatus.JOINED})
TOP_POSITIONS = 5
TREND_MONTHS = 6
UNKNOWN_JOB = "Unknown Job"

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage, rounded half-up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _is_hired(candidate: Candidate) -> bool:
    return normalize_status(candidate.status) in HIRED_STATUSES


def _last_months(today: date, count: int) -> List[tuple]:
    """(year, month) pairs for the ``count`` months ending with today's, oldest first."""
    months = []
    index = today.year * 12 + today.month - 1
    for offset in range(count - 1, -1, -1):
        year, month = divmod(index - offset, 12)
        months.append((year, month + 1))
    return months


def top_positions(candidates: Sequence[Candidate], jobs: Sequence[Job], limit: int = TOP_POSITIONS) -> List[Dict[str, Any]]:
    """Jobs with the most applications; ties keep first-appearance order."""
    titles = {job.id: job.title for job in jobs}
    stats: Dict[Optional[str], Dict[str, Any]] = {}
    for candidate in candidates:
        entry = stats.get(candidate.job_id)
        if entry is None:
            entry = {
                "job_id": candidate.job_id,
                "position": titles.get(candidate.job_id) or UNKNOWN_JOB,
                "applications": 0,
                "hired": 0,
            }
            stats[candidate.job_id] = entry
        entry["applications"] += 1
        if _is_hired(candidate):
            entry["hired"] += 1
    ranked = sorted(stats.values(), key=lambda e: -e["applications"])
    return ranked[:limit]


def monthly_trend(
    candidates: Sequence[Candidate],
    today: date,
    months: int = TREND_MONTHS,
    tz: Optional[tzinfo] = None,
) -> List[Dict[str, Any]]:
    """Applications and hires per creation month for the last ``months`` months."""
    buckets = {key: {"applications": 0, "hired": 0} for key in _last_months(today, months)}
    for candidate in candidates:
        created = parse_timestamp(candidate.created_at, tz)
        if created is None:
            continue
        bucket = buckets.get((created.year, created.month))
        if bucket is None:
            continue
        bucket["applications"] += 1
        if _is_hired(candidate):
            bucket["hired"] += 1

    return [
        {
            "month": _MONTH_ABBR[month - 1],
            "year": year,
            "applications": counts["applications"],
            "hired": counts["hired"],
        }
        for (year, month), counts in buckets.items()
    ]


def hiring_funnel(
    jobs: Sequence[Job],
    candidates: Sequence[Candidate],
    scope: Scope,
    today: date,
    tz: Optional[tzinfo] = None,
) -> Dict[str, Any]:
    """
    Compute the manager report summary.

    Jobs and candidates are both filtered to scope by their creator.

    Args:
        jobs: All fetched jobs
        candidates: All fetched candidates
        scope: Visibility scope of the acting user
        today: Last month of the trend
        tz: Report timezone

    Returns:
        Dict with total_applications, hired, active_positions,
        rejection_rate, stages, top_positions and monthly_trend
    """
    visible_jobs = filter_in_scope(jobs, scope)
    visible = filter_in_scope(candidates, scope)

    total = len(visible)
    statuses = [normalize_status(c.status) for c in visible]
    hired = sum(1 for s in statuses if s in HIRED_STATUSES)
    rejected = sum(1 for s in statuses if s == CandidateStatus.REJECTED)
    active_positions = sum(1 for job in visible_jobs if job.status == JobStatus.OPEN.value)

    stages = []
    for stage in FUNNEL_STAGES:
        count = sum(1 for s in statuses if s == stage)
        stages.append({"stage": stage.value, "count": count, "percentage": percentage(count, total)})

    return {
        "total_applications": total,
        "hired": hired,
        "active_positions": active_positions,
        "rejection_rate": percentage(rejected, total),
        "stages": stages,
        "top_positions": top_positions(visible, jobs),
        "monthly_trend": monthly_trend(visible, today, tz=tz),
    }
