"""Single-field sorting of loaded rows."""

import functools
import re
import unicodedata
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from reflex_admin_grid.columns import Column

SortDirection = Literal["asc", "desc"]

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class SortState:
    """At most one sorted field; ``field=None`` keeps the original order."""

    field: str | None = None
    direction: SortDirection = "asc"

    def toggle(self, column: Column) -> "SortState":
        """Header click on *column*.

        Clicking the active field flips its direction; clicking another
        field makes it active in ``asc``.  Non-sortable and action columns
        leave the state unchanged.  There is no click path back to
        unsorted; use :meth:`cleared`.
        """
        if not column.is_sortable:
            return self
        if self.field == column.id:
            return SortState(column.id, "desc" if self.direction == "asc" else "asc")
        return SortState(column.id, "asc")

    @classmethod
    def cleared(cls) -> "SortState":
        return cls()

    def apply_model(
        self, sort_model: Sequence[Mapping[str, Any]], columns: Mapping[str, Column]
    ) -> "SortState":
        """State after the grid reports *sort_model* for a header click.

        An empty model clears the sort.  Only the first entry's field is
        read; the direction comes from :meth:`toggle`.  Fields missing
        from *columns* leave the state unchanged.
        """
        if not sort_model:
            return self.cleared()
        column = columns.get(sort_model[0].get("field"))
        if column is None:
            return self
        return self.toggle(column)

    def to_model(self) -> list[dict[str, str]]:
        """MUI ``sortModel`` for this state."""
        if self.field is None:
            return []
        return [{"field": self.field, "sort": self.direction}]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def natural_key(value: Any) -> tuple[tuple[int, Any], ...]:
    """Numeric-aware, case- and accent-insensitive key for ``str(value)``."""
    parts = _DIGITS.split(_fold(str(value)))
    return tuple((0, int(p)) if p.isdigit() else (1, p) for p in parts if p != "")


def compare_values(a: Any, b: Any) -> int:
    """Ascending comparison of two non-null cell values."""
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    ka, kb = natural_key(a), natural_key(b)
    return (ka > kb) - (ka < kb)


def sort_rows(rows: Sequence[Mapping[str, Any]], state: SortState) -> Sequence[Mapping[str, Any]]:
    """Return *rows* ordered by *state*.

    The sort is stable.  Null or missing values always sort last, in both
    directions.  With no active field the input sequence is returned as is.
    """
    if state.field is None:
        return rows
    field = state.field
    sign = -1 if state.direction == "desc" else 1

    def cmp(ra: Mapping[str, Any], rb: Mapping[str, Any]) -> int:
        a, b = ra.get(field), rb.get(field)
        if a is None and b is None:
            return 0
        if a is None:
            return 1
        if b is None:
            return -1
        return sign * compare_values(a, b)

    return sorted(rows, key=functools.cmp_to_key(cmp))


class SortEngine:
    """Stateful holder around :class:`SortState`."""

    def __init__(self) -> None:
        self.state = SortState()

    def toggle(self, column: Column) -> SortState:
        self.state = self.state.toggle(column)
        return self.state

    def clear(self) -> None:
        self.state = SortState.cleared()

    def sort(self, rows: Sequence[Mapping[str, Any]]) -> Sequence[Mapping[str, Any]]:
        return sort_rows(rows, self.state)
