"""
Canonical normalization of candidate statuses and attribution values.

Dashboards used to recognize different alias sets; every count in the
engine goes through ``normalize_status`` so a status means the same thing
in every report. Matching is case-sensitive after trimming whitespace.
"""

from typing import Any, Dict, FrozenSet, Optional

from models.status import AttributionActor, CandidateStatus


STATUS_ALIASES: Dict[str, CandidateStatus] = {
    "Screening": CandidateStatus.NEW,
    "Under Review": CandidateStatus.NEW,
    "Screen": CandidateStatus.SHORTLISTED,
    "Screened": CandidateStatus.SHORTLISTED,
    "Interview": CandidateStatus.INTERVIEWED,
    "Offer": CandidateStatus.SELECTED,
    "Hired": CandidateStatus.JOINED,
    "Reject": CandidateStatus.REJECTED,
    "Drop": CandidateStatus.DROPPED,
}

_CANONICAL: Dict[str, CandidateStatus] = {status.value: status for status in CandidateStatus}

# Explicit rejectedBy/droppedBy values; Mentor and Manager are both internal
ACTOR_ALIASES: Dict[str, AttributionActor] = {
    "Manager": AttributionActor.MANAGER,
    "Mentor": AttributionActor.MANAGER,
    "Client": AttributionActor.CLIENT,
}


def normalize_status(raw: Any) -> Optional[CandidateStatus]:
    """
    Map a raw status string onto its canonical CandidateStatus.

    Args:
        raw: Status as stored on a candidate or history entry

    Returns:
        The canonical status, or None if the value is not recognized

    Examples:
        >>> normalize_status("Offer")
        <CandidateStatus.SELECTED: 'Selected'>
        >>> normalize_status("offer") is None
        True
    """
    if isinstance(raw, CandidateStatus):
        return raw
    if raw is None:
        return None

    text = str(raw).strip()
    if text in _CANONICAL:
        return _CANONICAL[text]
    return STATUS_ALIASES.get(text)


def statuses_matching(status: CandidateStatus) -> FrozenSet[str]:
    """Return every raw spelling that normalizes to ``status``."""
    spellings = {status.value}
    spellings.update(alias for alias, target in STATUS_ALIASES.items() if target == status)
    return frozenset(spellings)


def normalize_actor(raw: Any) -> Optional[AttributionActor]:
    """
    Map an explicit rejectedBy/droppedBy value onto an AttributionActor.

    Returns:
        The actor, or None for values that cannot be attributed
    """
    if isinstance(raw, AttributionActor):
        return raw
    if raw is None:
        return None
    return ACTOR_ALIASES.get(str(raw).strip())
