"""Pydantic schemas for resolve_scope and the scoped request base."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from schemas.common import ActingUserMixin, StrictIgnoreRequest, StrictResponse
from schemas.records import StaffUser


class ScopedRequest(ActingUserMixin, StrictIgnoreRequest):
    """Request base for anything computed on behalf of an acting user."""

    staff: list[StaffUser] = Field(default_factory=list)


class ResolveScopeRequest(ScopedRequest):
    """Request schema for resolve_scope."""


class ResolveScopeResponse(StrictResponse):
    """Response schema for resolve_scope."""

    acting_user_id: str
    designation: Optional[str] = None
    unbounded: bool
    staff_ids: list[str] = Field(default_factory=list)
