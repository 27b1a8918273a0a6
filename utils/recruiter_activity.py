"""
Recruiter activity (daily upload) report.

One row per (recruiter, job) pair with the candidates that recruiter
uploaded to that job inside the window, broken down by current status.
Rows follow staff input order, then the order in which each recruiter's
jobs first appear among their uploads.
"""

from datetime import tzinfo
from typing import Any, Dict, List, Optional, Sequence

from models.status import CandidateStatus, Designation
from schemas.records import Candidate, Client, Job, StaffUser
from utils.column_filters import ColumnFilters
from utils.org_scope import Scope
from utils.pipeline_aggregator import UNKNOWN_CLIENT, client_name_index
from utils.status_normalizer import normalize_status
from utils.temporal_filter import DateRange, format_day

ACTIVITY_STATUSES = (
    CandidateStatus.NEW,
    CandidateStatus.SHORTLISTED,
    CandidateStatus.INTERVIEWED,
    CandidateStatus.SELECTED,
    CandidateStatus.JOINED,
    CandidateStatus.REJECTED,
)

REPORTING_DESIGNATIONS = frozenset({Designation.RECRUITER, Designation.ADMIN})


class ActivityRow:
    """Uploads of one recruiter to one job."""

    def __init__(self, recruiter: StaffUser, job: Job, client_name: str, date: str, uploads: List[Candidate]):
        self.recruiter_id = recruiter.id
        self.recruiter_name = recruiter.name or recruiter.id
        self.job_id = job.id
        self.job_title = job.title
        self.client_name = client_name
        self.date = date
        self.candidate_ids = [c.id for c in uploads]
        self.status_counts: Dict[str, int] = {status.value: 0 for status in ACTIVITY_STATUSES}
        for candidate in uploads:
            status = normalize_status(candidate.status)
            if status is not None and status.value in self.status_counts:
                self.status_counts[status.value] += 1

    @property
    def total(self) -> int:
        return len(self.candidate_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recruiter_id": self.recruiter_id,
            "recruiter_name": self.recruiter_name,
            "job_id": self.job_id,
            "job_title": self.job_title,
            "client_name": self.client_name,
            "date": self.date,
            "total": self.total,
            "status_counts": dict(self.status_counts),
            "candidate_ids": list(self.candidate_ids),
        }


class ActivityReport:
    """Activity rows and their totals."""

    def __init__(self, rows: List[ActivityRow]):
        self.rows = rows
        self.total = sum(row.total for row in rows)
        self.status_counts: Dict[str, int] = {status.value: 0 for status in ACTIVITY_STATUSES}
        for row in rows:
            for key, count in row.status_counts.items():
                self.status_counts[key] += count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "totals": {"total": self.total, "status_counts": dict(self.status_counts)},
        }


def recruiter_activity(
    staff: Sequence[StaffUser],
    jobs: Sequence[Job],
    candidates: Sequence[Candidate],
    clients: Sequence[Client],
    scope: Scope,
    date_range: DateRange,
    column_filters: Optional[ColumnFilters] = None,
    tz: Optional[tzinfo] = None,
) -> ActivityReport:
    """
    Build the per-(recruiter, job) upload report.

    Args:
        staff: Every staff user; only in-scope Recruiters and Admins get rows
        jobs: Jobs, for titles and clients (uploads to unknown jobs are skipped)
        candidates: Candidates, attributed to their creator
        clients: Clients, for names
        scope: Visibility scope of the acting user
        date_range: Upload (creation) window
        column_filters: Filters on date, recruiter, client, job, total
        tz: Report timezone

    Returns:
        ActivityReport
    """
    column_filters = column_filters or ColumnFilters()
    jobs_by_id = {job.id: job for job in jobs}
    client_names = client_name_index(clients)

    uploads_by_creator: Dict[str, List[Candidate]] = {}
    for candidate in candidates:
        if candidate.created_by_id is None or not date_range.contains(candidate.created_at, tz):
            continue
        uploads_by_creator.setdefault(candidate.created_by_id, []).append(candidate)

    rows: List[ActivityRow] = []
    for recruiter in staff:
        if recruiter.designation not in REPORTING_DESIGNATIONS or not scope.contains(recruiter.id):
            continue

        by_job: Dict[str, List[Candidate]] = {}
        for candidate in uploads_by_creator.get(recruiter.id, []):
            if candidate.job_id in jobs_by_id:
                by_job.setdefault(candidate.job_id, []).append(candidate)

        for job_id, uploads in by_job.items():
            job = jobs_by_id[job_id]
            client_name = client_names.get(job.client_id, UNKNOWN_CLIENT)
            date = format_day(job.created_at, tz)
            cells = {
                "date": date,
                "recruiter": recruiter.name or recruiter.id,
                "client": client_name,
                "job": job.title,
                "total": str(len(uploads)),
            }
            if column_filters.matches(cells):
                rows.append(ActivityRow(recruiter, job, client_name, date, uploads))

    return ActivityReport(rows)
