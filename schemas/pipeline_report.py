"""Pydantic schemas for build_pipeline_report."""

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from schemas.common import DateRangeInput, StrictResponse, unwrap_reference
from schemas.records import Candidate, Client, Job
from schemas.resolve_scope import ScopedRequest


class BuildPipelineReportRequest(ScopedRequest):
    """Request schema for build_pipeline_report.

    ``status_groups`` (inline bucket definitions) wins over ``preset``;
    with neither, the configured default preset is used.
    """

    jobs: List[Job] = Field(default_factory=list)
    candidates: List[Candidate] = Field(default_factory=list)
    clients: List[Client] = Field(default_factory=list)
    date_range: Optional[DateRangeInput] = None
    today: Optional[dt.date] = None
    temporal_mode: Optional[str] = None
    preset: Optional[str] = None
    status_groups: Optional[List[Dict[str, Any]]] = None
    column_filters: Dict[str, List[str]] = Field(default_factory=dict)
    search: Dict[str, Optional[str]] = Field(default_factory=dict)
    restrict_to_creator: bool = False
    only_open_jobs: bool = False
    assigned_to: Optional[str] = None
    include_unclassified: Optional[bool] = None

    @field_validator("column_filters", "search", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("assigned_to", mode="before")
    @classmethod
    def unwrap_assigned_to(cls, value: Any) -> Any:
        return unwrap_reference(value) if value != "" else None


class PipelineRow(StrictResponse):
    """One job row of a pipeline report."""

    job_id: str
    job_title: str
    job_status: Optional[str] = None
    client_id: Optional[str] = None
    client_name: str
    date: str
    created_at: Optional[str] = None
    recruiters: List[str]
    uploaders: List[str]
    positions: int
    positions_remaining: int
    total_uploads: int
    total_upload_ids: List[str]
    counts: Dict[str, int]
    candidate_ids: Dict[str, List[str]]


class PipelineTotals(StrictResponse):
    """Column sums over the emitted rows."""

    counts: Dict[str, int]
    positions: int
    positions_remaining: int
    total_uploads: int


class DateRangeOutput(StrictResponse):
    """Resolved reporting window (ISO dates, inclusive)."""

    start: Optional[str] = None
    end: Optional[str] = None


class BuildPipelineReportResponse(StrictResponse):
    """Response schema for build_pipeline_report."""

    rows: List[PipelineRow]
    totals: PipelineTotals
    bucket_keys: List[str]
    temporal_mode: str
    date_range: DateRangeOutput
    diagnostics: Dict[str, Any]
