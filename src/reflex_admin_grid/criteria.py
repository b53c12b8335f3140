"""Typed search input per column and the sparse criteria built from it.

The functions here never mutate their input mapping: each setter returns a
new mapping in which exactly one column's entry differs.  That keeps them
usable both from plain Python (see :class:`FilterCriteriaStore`) and from
Reflex state, where a var must be re-assigned to trigger an update.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from reflex_admin_grid.columns import Column, ColumnKind, columns_by_id
from reflex_admin_grid.errors import ColumnKindError
from reflex_admin_grid.kinds import (
    Criterion,
    DateRange,
    NumberValue,
    SearchValue,
    handler_for,
    is_active_value,
)

logger = logging.getLogger(__name__)

SearchValues = Mapping[str, SearchValue]

_TEXT_KINDS = (ColumnKind.TEXT, ColumnKind.SELECT)
_DATE_KINDS = (ColumnKind.DATE, ColumnKind.DATETIME)


def _check_kind(column: Column, allowed: tuple[ColumnKind, ...], setter: str) -> None:
    if column.is_action_column or column.kind not in allowed:
        raise ColumnKindError(
            f"{setter}() does not apply to column {column.id!r} of kind {column.kind.value!r}"
        )


def _replace(values: SearchValues, column_id: str, value: SearchValue) -> dict[str, SearchValue]:
    updated = dict(values)
    updated[column_id] = value
    return updated


def _without(values: SearchValues, column_id: str) -> dict[str, SearchValue]:
    return {k: v for k, v in values.items() if k != column_id}


# ---------------------------------------------------------------------------
# Setters
# ---------------------------------------------------------------------------

def set_text(values: SearchValues, column: Column, value: str) -> dict[str, SearchValue]:
    """Store free text for a text or select column."""
    _check_kind(column, _TEXT_KINDS, "set_text")
    if column.uppercase_input:
        value = value.upper()
    return _replace(values, column.id, value)


def set_number(values: SearchValues, column: Column, raw: str) -> dict[str, SearchValue]:
    """Store the raw numeric text verbatim; ``""`` is a valid in-progress state."""
    _check_kind(column, (ColumnKind.NUMBER,), "set_number")
    return _replace(values, column.id, NumberValue(raw))


def set_date_range(
    values: SearchValues,
    column: Column,
    edge: str,
    value: str | None,
) -> dict[str, SearchValue]:
    """Set one edge (``"from"`` or ``"to"``) of a date column's range.

    Setting an edge to an empty value clears only that edge; the entry is
    dropped once neither edge is left.
    """
    _check_kind(column, _DATE_KINDS, "set_date_range")
    current = values.get(column.id)
    if not isinstance(current, DateRange):
        current = DateRange()
    updated = current.with_edge(edge, value)
    if updated.is_empty:
        return _without(values, column.id)
    return _replace(values, column.id, updated)


def set_boolean(values: SearchValues, column: Column, value: bool | None) -> dict[str, SearchValue]:
    """Set a tri-state boolean filter; ``None`` removes it."""
    _check_kind(column, (ColumnKind.BOOLEAN,), "set_boolean")
    if value is None:
        return _without(values, column.id)
    return _replace(values, column.id, bool(value))


def clear_all() -> dict[str, SearchValue]:
    return {}


# ---------------------------------------------------------------------------
# Activity and criteria
# ---------------------------------------------------------------------------

def active_columns(
    values: SearchValues,
    columns: Iterable[Column],
    disabled_fields: Iterable[str] = (),
) -> list[Column]:
    """Return the columns whose stored value currently filters, in schema order."""
    disabled = set(disabled_fields)
    return [
        col
        for col in columns
        if col.id in values
        and col.id not in disabled
        and is_active_value(col, values[col.id])
    ]


def build_criteria(
    values: SearchValues,
    columns: Iterable[Column],
    disabled_fields: Iterable[str] = (),
) -> dict[str, Criterion]:
    """Build the sparse payload sent to a search callback.

    Only active, non-disabled columns appear.  Text is trimmed, numbers are
    parsed (unparsable numbers are left out), date ranges keep only the
    edges that are set and booleans pass through.

    Returns:
        ``{column_id: criterion}``; empty when nothing is active.
    """
    criteria: dict[str, Criterion] = {}
    for col in active_columns(values, columns, disabled_fields):
        criterion = handler_for(col).to_criterion(values[col.id])
        if criterion is None:
            logger.debug("[QueryGrid] dropping unparsable criterion for %r", col.id)
            continue
        criteria[col.id] = criterion
    return criteria


# ---------------------------------------------------------------------------
# Serialisation (for UI state)
# ---------------------------------------------------------------------------

def dump_values(values: SearchValues) -> dict[str, Any]:
    """Convert search values to JSON-safe data."""
    out: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, NumberValue):
            out[key] = {"number": value.value}
        elif isinstance(value, DateRange):
            out[key] = {"from": value.from_ or "", "to": value.to or ""}
        else:
            out[key] = value
    return out


def load_values(data: Mapping[str, Any], columns: Iterable[Column]) -> dict[str, SearchValue]:
    """Inverse of :func:`dump_values`, guided by each column's kind."""
    index = columns_by_id(columns)
    out: dict[str, SearchValue] = {}
    for key, raw in data.items():
        col = index.get(key)
        if col is None or col.is_action_column:
            continue
        if col.kind is ColumnKind.NUMBER and isinstance(raw, dict):
            out[key] = NumberValue(str(raw.get("number", "")))
        elif col.kind in _DATE_KINDS and isinstance(raw, dict):
            rng = DateRange(from_=raw.get("from") or None, to=raw.get("to") or None)
            if not rng.is_empty:
                out[key] = rng
        elif col.kind is ColumnKind.BOOLEAN and isinstance(raw, bool):
            out[key] = raw
        elif col.kind in _TEXT_KINDS and isinstance(raw, str):
            out[key] = raw
    return out


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------

class FilterCriteriaStore:
    """Holds the search input of one grid.

    Example::

        store = FilterCriteriaStore(columns)
        store.set_text("symbol", "aapl")
        store.set_number("closePrice", "42")
        criteria = store.build_criteria(disabled_fields=["stockPe"])
    """

    def __init__(self, columns: Iterable[Column]) -> None:
        self.columns: list[Column] = list(columns)
        self._index = columns_by_id(self.columns)
        self.values: dict[str, SearchValue] = {}

    def _column(self, column_id: str) -> Column:
        try:
            return self._index[column_id]
        except KeyError:
            raise KeyError(f"Unknown column: {column_id!r}") from None

    def set_text(self, column_id: str, value: str) -> None:
        self.values = set_text(self.values, self._column(column_id), value)

    def set_number(self, column_id: str, raw: str) -> None:
        self.values = set_number(self.values, self._column(column_id), raw)

    def set_date_range(self, column_id: str, edge: str, value: str | None) -> None:
        self.values = set_date_range(self.values, self._column(column_id), edge, value)

    def set_boolean(self, column_id: str, value: bool | None) -> None:
        self.values = set_boolean(self.values, self._column(column_id), value)

    def clear_all(self) -> None:
        self.values = clear_all()

    def build_criteria(self, disabled_fields: Iterable[str] = ()) -> dict[str, Criterion]:
        return build_criteria(self.values, self.columns, disabled_fields)
