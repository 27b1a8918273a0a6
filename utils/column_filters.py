"""
Multi-select column filters and free-text search for report rows.

A row is kept only if it passes every active filter. An empty selection
means the column is not filtered. Multi-valued cells (e.g. several
recruiters on a job) pass when any of their values is selected.
"""

from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

COLUMN_KEYS = ("date", "client", "job", "recruiter", "total")
SEARCH_KEYS = ("client", "job", "recruiter")

CellValue = Union[str, Iterable[str]]


def _as_values(cell: CellValue) -> FrozenSet[str]:
    if isinstance(cell, str):
        return frozenset({cell})
    return frozenset(str(v) for v in cell)


class ColumnFilters:
    """Selected values per column."""

    def __init__(self, selections: Optional[Mapping[str, Iterable[Any]]] = None):
        """
        Initialize filters.

        Args:
            selections: Column key -> selected display values

        Raises:
            ValueError: If a column key is not filterable
        """
        self._selections: Dict[str, FrozenSet[str]] = {}
        for key, values in (selections or {}).items():
            if key not in COLUMN_KEYS:
                raise ValueError(
                    f"Unknown filter column '{key}'. Expected one of: {', '.join(COLUMN_KEYS)}"
                )
            selected = frozenset(str(v) for v in (values or ()))
            if selected:
                self._selections[key] = selected

    @property
    def is_active(self) -> bool:
        return bool(self._selections)

    def matches(self, cells: Mapping[str, CellValue]) -> bool:
        """Whether a row with the given cell values passes every filter."""
        for key, selected in self._selections.items():
            values = _as_values(cells.get(key, ()))
            if not values & selected:
                return False
        return True

    def to_dict(self) -> Dict[str, list]:
        return {key: sorted(values) for key, values in self._selections.items()}


class SearchFilters:
    """Case-insensitive substring search over text columns."""

    def __init__(self, terms: Optional[Mapping[str, Optional[str]]] = None):
        self._terms: Dict[str, str] = {}
        for key, term in (terms or {}).items():
            if key not in SEARCH_KEYS:
                raise ValueError(
                    f"Unknown search column '{key}'. Expected one of: {', '.join(SEARCH_KEYS)}"
                )
            if term and term.strip():
                self._terms[key] = term.strip().lower()

    def matches(self, cells: Mapping[str, CellValue]) -> bool:
        """Whether every searched column has a value containing its term."""
        for key, term in self._terms.items():
            values = _as_values(cells.get(key, ()))
            if not any(term in value.lower() for value in values):
                return False
        return True
