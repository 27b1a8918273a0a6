"""Pydantic schemas for build_recruiter_activity_report."""

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from schemas.common import DateRangeInput, StrictResponse
from schemas.records import Candidate, Client, Job
from schemas.resolve_scope import ScopedRequest


class BuildRecruiterActivityRequest(ScopedRequest):
    """Request schema for build_recruiter_activity_report."""

    jobs: List[Job] = Field(default_factory=list)
    candidates: List[Candidate] = Field(default_factory=list)
    clients: List[Client] = Field(default_factory=list)
    date_range: Optional[DateRangeInput] = None
    today: Optional[dt.date] = None
    column_filters: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("column_filters", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class ActivityRowOutput(StrictResponse):
    """Uploads of one recruiter to one job."""

    recruiter_id: str
    recruiter_name: str
    job_id: str
    job_title: str
    client_name: str
    date: str
    total: int
    status_counts: Dict[str, int]
    candidate_ids: List[str]


class ActivityTotals(StrictResponse):
    total: int
    status_counts: Dict[str, int]


class BuildRecruiterActivityResponse(StrictResponse):
    """Response schema for build_recruiter_activity_report."""

    rows: List[ActivityRowOutput]
    totals: ActivityTotals
