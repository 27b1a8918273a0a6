"""
Per-job pipeline report aggregation.

Produces one row per in-scope job with a count per bucket, plus grand
totals over the emitted rows. Used by every funnel-style dashboard so that
scope, temporal mode and attribution behave the same everywhere.

Order of operations per job:
1. scope / job-level narrowing (open jobs, assignment)
2. candidate set of the job (optionally narrowed to in-scope creators)
3. column filters and search on the row identity; failing rows are dropped
4. bucket counting under the temporal mode
5. totals over surviving rows only
"""

from datetime import tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from models.status import CandidateStatus, JobStatus, TemporalMode
from schemas.records import Candidate, Client, Job, StaffUser
from utils.attribution import RULE_EXPLICIT_UNKNOWN, attribute_negative
from utils.column_filters import ColumnFilters, SearchFilters
from utils.org_scope import Scope
from utils.status_groups import StatusGroup
from utils.status_normalizer import normalize_status
from utils.temporal_filter import DateRange, format_day, parse_timestamp, relevant_timestamp

UNKNOWN_CLIENT = "Unknown"


class PerJobRow:
    """One job's line in a pipeline report."""

    def __init__(
        self,
        job: Job,
        client_name: str,
        date: str,
        recruiters: List[str],
        uploaders: List[str],
        total_upload_ids: List[str],
        bucket_ids: Dict[str, List[str]],
        joined_key: Optional[str],
        tz: Optional[tzinfo] = None,
    ):
        self.job_id = job.id
        self.job_title = job.title
        self.job_status = job.status
        self.client_id = job.client_id
        self.client_name = client_name
        self.date = date
        created = parse_timestamp(job.created_at, tz)
        self.created_at = created.isoformat() if created else None
        self.recruiters = recruiters
        self.uploaders = uploaders
        self.positions = job.no_of_positions
        self.total_upload_ids = total_upload_ids
        self.candidate_ids = bucket_ids
        self.counts = {key: len(ids) for key, ids in bucket_ids.items()}
        joined = self.counts.get(joined_key, 0) if joined_key else 0
        self.positions_remaining = self.positions - joined

    @property
    def total_uploads(self) -> int:
        return len(self.total_upload_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert row to dictionary format."""
        return {
            "job_id": self.job_id,
            "job_title": self.job_title,
            "job_status": self.job_status,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "date": self.date,
            "created_at": self.created_at,
            "recruiters": list(self.recruiters),
            "uploaders": list(self.uploaders),
            "positions": self.positions,
            "positions_remaining": self.positions_remaining,
            "total_uploads": self.total_uploads,
            "total_upload_ids": list(self.total_upload_ids),
            "counts": dict(self.counts),
            "candidate_ids": {key: list(ids) for key, ids in self.candidate_ids.items()},
        }


class Totals:
    """Column-wise sums over emitted rows."""

    def __init__(self, bucket_keys: Sequence[str], rows: Iterable[PerJobRow]):
        self.counts: Dict[str, int] = {key: 0 for key in bucket_keys}
        self.positions = 0
        self.positions_remaining = 0
        self.total_uploads = 0
        for row in rows:
            for key in bucket_keys:
                self.counts[key] += row.counts.get(key, 0)
            self.positions += row.positions
            self.positions_remaining += row.positions_remaining
            self.total_uploads += row.total_uploads

    def to_dict(self) -> Dict[str, Any]:
        return {
            "counts": dict(self.counts),
            "positions": self.positions,
            "positions_remaining": self.positions_remaining,
            "total_uploads": self.total_uploads,
        }


class PipelineReport:
    """Rows, totals and diagnostics of one aggregation run."""

    def __init__(
        self,
        rows: List[PerJobRow],
        status_groups: Sequence[StatusGroup],
        temporal_mode: TemporalMode,
        date_range: DateRange,
        unclassified_ids: List[str],
    ):
        self.rows = rows
        self.bucket_keys = [group.key for group in status_groups]
        self.totals = Totals(self.bucket_keys, rows)
        self.temporal_mode = temporal_mode
        self.date_range = date_range
        self.unclassified_ids = unclassified_ids

    @property
    def unclassified(self) -> int:
        return len(self.unclassified_ids)

    def candidates_for(self, job_id: str, bucket_key: str) -> List[str]:
        """Drill-down: candidate ids behind one count."""
        for row in self.rows:
            if row.job_id == job_id:
                return list(row.candidate_ids.get(bucket_key, []))
        return []

    def to_dict(self, include_unclassified: bool = False) -> Dict[str, Any]:
        diagnostics: Dict[str, Any] = {"unclassified": self.unclassified}
        if include_unclassified:
            diagnostics["unclassified_ids"] = list(self.unclassified_ids)
        return {
            "rows": [row.to_dict() for row in self.rows],
            "totals": self.totals.to_dict(),
            "bucket_keys": list(self.bucket_keys),
            "temporal_mode": self.temporal_mode.value,
            "date_range": self.date_range.to_dict(),
            "diagnostics": diagnostics,
        }


def group_candidates_by_job(candidates: Iterable[Candidate]) -> Dict[str, List[Candidate]]:
    """Index candidates by job id, preserving input order."""
    by_job: Dict[str, List[Candidate]] = {}
    for candidate in candidates:
        if candidate.job_id is None:
            continue
        by_job.setdefault(candidate.job_id, []).append(candidate)
    return by_job


def client_name_index(clients: Iterable[Client]) -> Dict[str, str]:
    return {client.id: client.company_name or UNKNOWN_CLIENT for client in clients}


def staff_name_index(staff: Iterable[StaffUser]) -> Dict[str, str]:
    return {user.id: user.name or user.id for user in staff}


def find_joined_key(status_groups: Sequence[StatusGroup]) -> Optional[str]:
    """Key of the first bucket counting Joined, used for positions remaining."""
    for group in status_groups:
        if not group.is_special and CandidateStatus.JOINED in group.statuses:
            return group.key
    return None


def is_unclassified(candidate: Candidate) -> bool:
    """
    Whether a candidate cannot be counted in any bucket reliably.

    True for unrecognized statuses and for negative statuses whose explicit
    attribution value is not one the engine understands.
    """
    status = normalize_status(candidate.status)
    if status is None:
        return True
    if status in (CandidateStatus.REJECTED, CandidateStatus.DROPPED):
        return attribute_negative(candidate, status).rule == RULE_EXPLICIT_UNKNOWN
    return False


def count_buckets(
    candidates: Sequence[Candidate],
    status_groups: Sequence[StatusGroup],
    date_range: DateRange,
    temporal_mode: TemporalMode,
    tz: Optional[tzinfo] = None,
) -> Dict[str, List[str]]:
    """
    Place candidates into buckets.

    A candidate counts in a bucket when it matches the bucket and the
    timestamp selected by ``temporal_mode`` falls inside ``date_range``.

    Returns:
        Bucket key -> matching candidate ids (in candidate order)
    """
    bucket_ids: Dict[str, List[str]] = {}
    for group in status_groups:
        ids = []
        for candidate in candidates:
            dated_by = group.match(candidate)
            if dated_by is None:
                continue
            if date_range.is_active:
                moment = relevant_timestamp(candidate, dated_by, temporal_mode, tz)
                if not date_range.contains(moment, tz):
                    continue
            ids.append(candidate.id)
        bucket_ids[group.key] = ids
    return bucket_ids


def aggregate(
    jobs: Sequence[Job],
    candidates: Sequence[Candidate],
    scope: Scope,
    date_range: DateRange,
    temporal_mode: TemporalMode,
    status_groups: Sequence[StatusGroup],
    column_filters: Optional[ColumnFilters] = None,
    *,
    clients: Sequence[Client] = (),
    staff: Sequence[StaffUser] = (),
    restrict_to_creator: bool = False,
    only_open_jobs: bool = False,
    assigned_to: Optional[str] = None,
    search: Optional[SearchFilters] = None,
    tz: Optional[tzinfo] = None,
) -> PipelineReport:
    """
    Build a per-job pipeline report.

    Args:
        jobs: All fetched jobs
        candidates: All fetched candidates
        scope: Visibility scope of the acting user (jobs filtered on creator)
        date_range: Reporting window
        temporal_mode: Date candidates by creation or by status change
        status_groups: Ordered buckets to count
        column_filters: Multi-select filters on row columns
        clients: Clients, for client names
        staff: Staff users, for recruiter names
        restrict_to_creator: Count only candidates created by in-scope staff
            instead of every candidate on an in-scope job
        only_open_jobs: Keep only jobs with status Open
        assigned_to: Keep only jobs assigned to this recruiter id
        search: Free-text search on client, job and recruiter columns
        tz: Report timezone

    Returns:
        PipelineReport with rows in job input order
    """
    column_filters = column_filters or ColumnFilters()
    search = search or SearchFilters()

    client_names = client_name_index(clients)
    staff_names = staff_name_index(staff)
    by_job = group_candidates_by_job(candidates)
    joined_key = find_joined_key(status_groups)

    rows: List[PerJobRow] = []
    unclassified_ids: List[str] = []

    for job in jobs:
        if not scope.contains(job.created_by_id):
            continue
        if only_open_jobs and job.status != JobStatus.OPEN.value:
            continue
        if assigned_to is not None and assigned_to not in job.assigned_recruiter_ids:
            continue

        job_candidates = by_job.get(job.id, [])
        if restrict_to_creator:
            job_candidates = [c for c in job_candidates if scope.contains(c.created_by_id)]

        uploads = [c for c in job_candidates if date_range.contains(c.created_at, tz)]

        client_name = client_names.get(job.client_id, UNKNOWN_CLIENT)
        date = format_day(job.created_at, tz)
        recruiters = sorted({staff_names.get(rid, rid) for rid in job.assigned_recruiter_ids})
        uploaders = sorted(
            {staff_names.get(c.created_by_id, c.created_by_id) for c in uploads if c.created_by_id}
        )

        cells: Mapping[str, Any] = {
            "date": date,
            "client": client_name,
            "job": job.title,
            "recruiter": set(recruiters) | set(uploaders),
            "total": str(len(uploads)),
        }
        if not column_filters.matches(cells) or not search.matches(cells):
            continue

        bucket_ids = count_buckets(job_candidates, status_groups, date_range, temporal_mode, tz)
        unclassified_ids.extend(c.id for c in job_candidates if is_unclassified(c))

        rows.append(
            PerJobRow(
                job=job,
                client_name=client_name,
                date=date,
                recruiters=recruiters,
                uploaders=uploaders,
                total_upload_ids=[c.id for c in uploads],
                bucket_ids=bucket_ids,
                joined_key=joined_key,
                tz=tz,
            )
        )

    return PipelineReport(rows, status_groups, temporal_mode, date_range, unclassified_ids)
