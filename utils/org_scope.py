"""
Visibility scope resolution over the staff reporting hierarchy.

A scope is the set of staff ids whose records an acting user may see.
Admins see everything; Managers see two levels of reportees (Manager ->
Mentor -> Recruiter); everyone else sees their direct reportees. The
acting user always sees their own records.

The traversal is bounded to two levels, so cyclic or dangling
``reporter_id`` references can neither hang nor double count.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, TypeVar

from models.status import Designation
from schemas.records import StaffUser

T = TypeVar("T")


class Scope:
    """Resolved visibility scope for one acting user."""

    def __init__(self, acting_user_id: Optional[str], staff_ids: Iterable[str] = (), unbounded: bool = False):
        """
        Initialize a scope.

        Args:
            acting_user_id: Id of the user the scope was resolved for
            staff_ids: Visible staff ids (ignored when unbounded)
            unbounded: True when every record is visible
        """
        self.acting_user_id = acting_user_id
        self.unbounded = unbounded
        self._staff_ids: FrozenSet[str] = frozenset() if unbounded else frozenset(staff_ids)

    @classmethod
    def everything(cls, acting_user_id: Optional[str] = None) -> "Scope":
        """Build an unbounded scope."""
        return cls(acting_user_id, unbounded=True)

    @property
    def staff_ids(self) -> FrozenSet[str]:
        return self._staff_ids

    def contains(self, staff_id: Optional[str]) -> bool:
        """Whether records created by ``staff_id`` are visible."""
        if self.unbounded:
            return True
        if staff_id is None:
            return False
        return staff_id in self._staff_ids

    def to_dict(self) -> Dict[str, Any]:
        """Convert scope to dictionary format (ids sorted for display)."""
        return {
            "acting_user_id": self.acting_user_id,
            "unbounded": self.unbounded,
            "staff_ids": sorted(self._staff_ids),
        }

    def __repr__(self) -> str:
        if self.unbounded:
            return f"Scope({self.acting_user_id!r}, unbounded=True)"
        return f"Scope({self.acting_user_id!r}, {sorted(self._staff_ids)!r})"


def _build_reportee_index(all_staff: Sequence[StaffUser]) -> Dict[str, List[str]]:
    """Adjacency list: reporter id -> ids of users reporting to them."""
    index: Dict[str, List[str]] = {}
    for user in all_staff:
        if user.reporter_id is None or user.reporter_id == user.id:
            continue
        index.setdefault(user.reporter_id, []).append(user.id)
    return index


def resolve_scope(acting_user: StaffUser, all_staff: Sequence[StaffUser]) -> Scope:
    """
    Resolve whose records ``acting_user`` may see.

    Rules:
    1. Admin: unbounded scope
    2. Everyone else: direct reportees
    3. Manager: plus reportees of each direct reportee (one extra level only)
    4. The acting user's own id is always included

    Args:
        acting_user: The user the report is rendered for
        all_staff: Every staff user (the hierarchy source)

    Returns:
        Scope for the acting user

    Examples:
        >>> manager = StaffUser(id="m", designation="Manager")
        >>> mentor = StaffUser(id="t", designation="Mentor", reporter_id="m")
        >>> recruiter = StaffUser(id="r", designation="Recruiter", reporter_id="t")
        >>> sorted(resolve_scope(manager, [manager, mentor, recruiter]).staff_ids)
        ['m', 'r', 't']
    """
    if acting_user.designation == Designation.ADMIN:
        return Scope.everything(acting_user.id)

    index = _build_reportee_index(all_staff)

    visible: Set[str] = {acting_user.id}
    direct = index.get(acting_user.id, [])
    visible.update(direct)

    if acting_user.designation == Designation.MANAGER:
        for reportee_id in direct:
            visible.update(index.get(reportee_id, []))

    return Scope(acting_user.id, visible)


def find_staff(staff_id: Optional[str], all_staff: Sequence[StaffUser]) -> Optional[StaffUser]:
    """Look up a staff user by id."""
    for user in all_staff:
        if user.id == staff_id:
            return user
    return None


def is_record_in_scope(record: Any, scope: Scope) -> bool:
    """
    Whether a job or candidate is visible under ``scope``.

    Visibility derives from the record's ``created_by_id``.
    """
    return scope.contains(getattr(record, "created_by_id", None))


def filter_in_scope(records: Iterable[T], scope: Scope) -> List[T]:
    """Keep only the records visible under ``scope``, preserving order."""
    return [record for record in records if is_record_in_scope(record, scope)]
