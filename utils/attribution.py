"""
Attribution of negative outcomes (Rejected / Dropped).

Decides whether a rejection or drop belongs to internal screening
(Manager, which includes Mentors) or to the client. The decision table,
first applicable row wins:

1. status_mismatch: candidate is not in the requested negative status
2. explicit: ``rejected_by`` / ``dropped_by`` names Manager, Mentor or Client
3. explicit_unknown: the explicit field holds any other value (no guessing)
4. heuristic_interviewed: an Interviewed entry exists in the history -> Client
5. heuristic_not_interviewed: no Interviewed entry -> Manager

The heuristic keys on the presence of an Interviewed entry only, not on
whether it came before the rejection.
"""

from typing import Any, Dict, Optional

from models.status import NEGATIVE_STATUSES, AttributionActor, CandidateStatus
from schemas.records import Candidate
from utils.status_normalizer import normalize_actor, normalize_status

RULE_STATUS_MISMATCH = "status_mismatch"
RULE_EXPLICIT = "explicit"
RULE_EXPLICIT_UNKNOWN = "explicit_unknown"
RULE_HEURISTIC_INTERVIEWED = "heuristic_interviewed"
RULE_HEURISTIC_NOT_INTERVIEWED = "heuristic_not_interviewed"

# Which explicit attribution field belongs to which negative status
EXPLICIT_FIELDS = {
    CandidateStatus.REJECTED: "rejected_by",
    CandidateStatus.DROPPED: "dropped_by",
}


class Attribution:
    """Outcome of attributing one candidate's negative status."""

    def __init__(self, actor: Optional[AttributionActor], rule: str):
        """
        Initialize an attribution.

        Args:
            actor: Who the outcome is attributed to, None if not applicable
            rule: Name of the decision-table row that decided
        """
        self.actor = actor
        self.rule = rule

    @property
    def applicable(self) -> bool:
        return self.actor is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert attribution to dictionary format."""
        return {
            "actor": self.actor.value if self.actor else None,
            "rule": self.rule,
            "applicable": self.applicable,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attribution):
            return NotImplemented
        return (self.actor, self.rule) == (other.actor, other.rule)

    def __repr__(self) -> str:
        return f"Attribution({self.actor!r}, {self.rule!r})"


def has_interview_entry(candidate: Candidate) -> bool:
    """Whether any status-history entry is Interviewed (or Interview)."""
    return any(
        normalize_status(entry.status) == CandidateStatus.INTERVIEWED
        for entry in candidate.status_history
    )


def attribute_negative(candidate: Candidate, main_status: Any) -> Attribution:
    """
    Attribute a Rejected/Dropped candidate to Manager or Client.

    Args:
        candidate: The candidate to classify
        main_status: Rejected or Dropped (aliases Reject/Drop accepted)

    Returns:
        Attribution with the deciding rule; ``actor`` is None when the
        candidate does not belong to the bucket or cannot be attributed

    Examples:
        >>> c = Candidate(id="c1", status="Rejected",
        ...               status_history=[{"status": "Interviewed"}])
        >>> attribute_negative(c, "Rejected").actor
        <AttributionActor.CLIENT: 'Client'>
    """
    wanted = normalize_status(main_status)
    if wanted not in NEGATIVE_STATUSES:
        return Attribution(None, RULE_STATUS_MISMATCH)

    # Row 1: candidate must actually be in the negative status
    if normalize_status(candidate.status) != wanted:
        return Attribution(None, RULE_STATUS_MISMATCH)

    # Rows 2-3: explicit attribution wins, unknown values are not guessed
    explicit = getattr(candidate, EXPLICIT_FIELDS[wanted])
    if explicit is not None and str(explicit).strip():
        actor = normalize_actor(explicit)
        if actor is None:
            return Attribution(None, RULE_EXPLICIT_UNKNOWN)
        return Attribution(actor, RULE_EXPLICIT)

    # Rows 4-5: heuristic over the status history
    if has_interview_entry(candidate):
        return Attribution(AttributionActor.CLIENT, RULE_HEURISTIC_INTERVIEWED)
    return Attribution(AttributionActor.MANAGER, RULE_HEURISTIC_NOT_INTERVIEWED)


def matches_attribution(candidate: Candidate, main_status: Any, actor: Any) -> bool:
    """Whether ``candidate`` belongs to the (main_status, actor) bucket."""
    wanted_actor = normalize_actor(actor)
    if wanted_actor is None:
        return False
    return attribute_negative(candidate, main_status).actor == wanted_actor
