"""Pydantic schemas for build_hiring_funnel."""

import datetime as dt
from typing import List, Optional

from pydantic import Field

from schemas.common import StrictResponse
from schemas.records import Candidate, Job
from schemas.resolve_scope import ScopedRequest


class BuildHiringFunnelRequest(ScopedRequest):
    """Request schema for build_hiring_funnel."""

    jobs: List[Job] = Field(default_factory=list)
    candidates: List[Candidate] = Field(default_factory=list)
    today: Optional[dt.date] = None


class FunnelStage(StrictResponse):
    stage: str
    count: int
    percentage: int


class TopPosition(StrictResponse):
    job_id: Optional[str] = None
    position: str
    applications: int
    hired: int


class MonthlyTrendPoint(StrictResponse):
    month: str
    year: int
    applications: int
    hired: int


class BuildHiringFunnelResponse(StrictResponse):
    """Response schema for build_hiring_funnel."""

    total_applications: int
    hired: int
    active_positions: int
    rejection_rate: int
    stages: List[FunnelStage]
    top_positions: List[TopPosition]
    monthly_trend: List[MonthlyTrendPoint]
