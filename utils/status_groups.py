"""
Report buckets and named bucket presets.

A bucket counts candidates either by normalized status or by attributed
negative outcome. Presets name an ordered list of buckets; the built-in
``performance`` preset is the recruiter performance table layout and
``funnel`` is the plain funnel. A YAML presets file may add presets or
replace built-in ones:

    presets:
      weekly:
        - key: New
          statuses: [New, Screening]
        - key: Rej (C)
          main_status: Rejected
          actor: Client
"""

from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from models.errors import create_file_not_found_error, create_validation_error
from models.status import AttributionActor, CandidateStatus
from schemas.records import Candidate
from schemas.status_groups import StatusGroupDefinition
from utils.attribution import attribute_negative
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_normalizer import normalize_status


class StatusGroup:
    """One named bucket of a report."""

    def __init__(
        self,
        key: str,
        statuses: Iterable[CandidateStatus] = (),
        main_status: Optional[CandidateStatus] = None,
        actor: Optional[AttributionActor] = None,
    ):
        self.key = key
        self.statuses: FrozenSet[CandidateStatus] = frozenset(statuses)
        self.main_status = main_status
        self.actor = actor

    @classmethod
    def from_definition(cls, definition: StatusGroupDefinition) -> "StatusGroup":
        return cls(
            key=definition.key,
            statuses=definition.statuses or (),
            main_status=definition.main_status,
            actor=definition.actor,
        )

    @property
    def is_special(self) -> bool:
        """True for attributed Rejected/Dropped buckets."""
        return self.main_status is not None

    def match(self, candidate: Candidate) -> Optional[CandidateStatus]:
        """
        Test whether ``candidate`` belongs to this bucket.

        Returns:
            The status the candidate should be dated by (its own status for
            direct buckets, main_status for attributed ones), or None when
            the candidate does not belong here
        """
        if self.is_special:
            attribution = attribute_negative(candidate, self.main_status)
            return self.main_status if attribution.actor == self.actor else None

        status = normalize_status(candidate.status)
        return status if status in self.statuses else None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_special:
            return {"key": self.key, "main_status": self.main_status.value, "actor": self.actor.value}
        return {"key": self.key, "statuses": sorted(s.value for s in self.statuses)}

    def __repr__(self) -> str:
        return f"StatusGroup({self.key!r})"


def _direct(key: str, *statuses: CandidateStatus) -> StatusGroup:
    return StatusGroup(key, statuses)


def _special(key: str, main_status: CandidateStatus, actor: AttributionActor) -> StatusGroup:
    return StatusGroup(key, main_status=main_status, actor=actor)


PERFORMANCE_PRESET: List[StatusGroup] = [
    _direct("New", CandidateStatus.NEW),
    _direct("Shortlisted", CandidateStatus.SHORTLISTED),
    _special("Drop (M)", CandidateStatus.DROPPED, AttributionActor.MANAGER),
    _special("Rej (M)", CandidateStatus.REJECTED, AttributionActor.MANAGER),
    _direct("Interviewed", CandidateStatus.INTERVIEWED),
    _direct("Selected", CandidateStatus.SELECTED),
    _direct("Joined", CandidateStatus.JOINED),
    _direct("Hold", CandidateStatus.HOLD),
    _special("Drop (C)", CandidateStatus.DROPPED, AttributionActor.CLIENT),
    _special("Rej (C)", CandidateStatus.REJECTED, AttributionActor.CLIENT),
]

FUNNEL_PRESET: List[StatusGroup] = [
    _direct("New", CandidateStatus.NEW),
    _direct("Shortlisted", CandidateStatus.SHORTLISTED),
    _direct("Interviewed", CandidateStatus.INTERVIEWED),
    _direct("Selected", CandidateStatus.SELECTED),
    _direct("Joined", CandidateStatus.JOINED),
    _direct("Rejected", CandidateStatus.REJECTED),
    _direct("Dropped", CandidateStatus.DROPPED),
]

BUILTIN_PRESETS: Dict[str, List[StatusGroup]] = {
    "performance": PERFORMANCE_PRESET,
    "funnel": FUNNEL_PRESET,
}


def parse_status_groups(definitions: List[Any]) -> List[StatusGroup]:
    """
    Validate inline bucket definitions.

    Raises:
        ToolError: VALIDATION_ERROR for malformed definitions or duplicate keys
    """
    if not isinstance(definitions, list) or not definitions:
        raise create_validation_error("Invalid status_groups: must be a non-empty list")

    groups: List[StatusGroup] = []
    seen = set()
    for raw in definitions:
        try:
            definition = StatusGroupDefinition.model_validate(raw)
        except ValidationError as e:
            raise map_pydantic_validation_error(e, prefix="status_groups") from e
        if definition.key in seen:
            raise create_validation_error(f"Invalid status_groups: duplicate key '{definition.key}'")
        seen.add(definition.key)
        groups.append(StatusGroup.from_definition(definition))
    return groups


def load_presets(path: Optional[Union[str, Path]] = None) -> Dict[str, List[StatusGroup]]:
    """
    Load bucket presets, merging a YAML file over the built-ins.

    Args:
        path: Optional presets file

    Returns:
        Mapping of preset name to ordered buckets

    Raises:
        ToolError: FILE_NOT_FOUND if the file is missing, VALIDATION_ERROR if
            it is malformed
    """
    presets = dict(BUILTIN_PRESETS)
    if path is None:
        return presets

    presets_path = Path(path)
    if not presets_path.exists():
        raise create_file_not_found_error(str(presets_path), "Presets file")

    try:
        data = yaml.safe_load(presets_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise create_validation_error(f"Invalid presets file: {e}") from e

    section = data.get("presets") if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise create_validation_error("Invalid presets file: missing 'presets' mapping")

    for name, definitions in section.items():
        presets[str(name)] = parse_status_groups(definitions)
    return presets


def resolve_status_groups(
    preset: Optional[str] = None,
    definitions: Optional[List[Any]] = None,
    presets: Optional[Dict[str, List[StatusGroup]]] = None,
    default_preset: str = "performance",
) -> List[StatusGroup]:
    """
    Pick the buckets for a report: inline definitions win over a preset name.

    Raises:
        ToolError: VALIDATION_ERROR for an unknown preset
    """
    if definitions:
        return parse_status_groups(definitions)

    available = presets if presets is not None else BUILTIN_PRESETS
    name = preset or default_preset
    if name not in available:
        raise create_validation_error(
            f"Unknown status group preset '{name}'. Available: {', '.join(sorted(available))}"
        )
    return list(available[name])
