"""
Centralized, type-safe enum definitions for the recruiting pipeline.

This module is the single source of truth for the fixed value sets the
reporting engine reads from staff, job, candidate and invoice records.

All Enums inherit from ``(str, Enum)`` so that members compare equal to the
plain strings stored by the collaborating services and serialize naturally
to JSON at tool boundaries.
"""

from enum import Enum


class CandidateStatus(str, Enum):
    """Canonical candidate statuses.

    Funnel order:
        New -> Shortlisted -> Interviewed -> Selected -> Joined

    ``Rejected`` and ``Dropped`` are terminal; ``Hold`` parks a candidate at
    any stage. Alias spellings are mapped onto these members by
    ``utils.status_normalizer``.
    """

    NEW = "New"
    SHORTLISTED = "Shortlisted"
    INTERVIEWED = "Interviewed"
    SELECTED = "Selected"
    JOINED = "Joined"
    HOLD = "Hold"
    REJECTED = "Rejected"
    DROPPED = "Dropped"


# Statuses attributed to an internal actor or the client
NEGATIVE_STATUSES = frozenset({CandidateStatus.REJECTED, CandidateStatus.DROPPED})

FUNNEL_STAGES = (
    CandidateStatus.NEW,
    CandidateStatus.SHORTLISTED,
    CandidateStatus.INTERVIEWED,
    CandidateStatus.SELECTED,
    CandidateStatus.JOINED,
)


class Designation(str, Enum):
    """Staff designations, from widest to narrowest visibility."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    MENTOR = "Mentor"
    RECRUITER = "Recruiter"
    FINANCE = "Finance"


class JobStatus(str, Enum):
    """Statuses a job requirement can be in."""

    OPEN = "Open"
    CLOSED = "Closed"
    ON_HOLD = "OnHold"


class PayoutOption(str, Enum):
    """How a placement fee is derived from the candidate CTC."""

    PERCENTAGE = "Percentage"
    FLAT = "Flat"
    BOTH = "Both"


class AttributionActor(str, Enum):
    """Who a rejection or drop is attributed to."""

    MANAGER = "Manager"
    CLIENT = "Client"


class TemporalMode(str, Enum):
    """Which timestamp a report counts candidates by.

    - ``creation``: when the candidate was uploaded.
    - ``status``: when the candidate reached the status being counted.
    """

    CREATION = "creation"
    STATUS = "status"
