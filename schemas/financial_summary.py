"""Pydantic schemas for compute_financial_summary."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import Field, field_validator

from schemas.common import StrictIgnoreRequest, StrictResponse
from schemas.records import Expense, Payment

Number = Union[int, float]


class ComputeFinancialSummaryRequest(StrictIgnoreRequest):
    """Request schema for compute_financial_summary."""

    payments: list[Payment] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    period: Literal["weekly", "monthly", "yearly", "all"] = "all"
    now: Optional[datetime] = None

    @field_validator("period", mode="before")
    @classmethod
    def normalize_period(cls, value: Any) -> Any:
        """Case-insensitive; missing means all time."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return "all"
        if isinstance(value, str):
            return value.strip().lower()
        return value


class ComputeFinancialSummaryResponse(StrictResponse):
    """Response schema for compute_financial_summary."""

    period: str
    since: Optional[str] = None
    total_income: Number
    total_expenses: Number
    net_profit: Number
    profit_margin: float
