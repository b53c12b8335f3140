"""Framework-free half of the grid orchestrator.

Composes the sort and filter engines into the rendered row set, applies
local cell edits and keeps the per-page column schemas that cannot live in
UI state (columns carry callables).
"""

import inspect
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from reflex_admin_grid.columns import Column, columns_by_id
from reflex_admin_grid.criteria import SearchValues
from reflex_admin_grid.filtering import filter_rows
from reflex_admin_grid.kinds import format_cell
from reflex_admin_grid.sorting import SortState, sort_rows

logger = logging.getLogger(__name__)

ROW_ID_FIELD: str = "__row_id__"


# ---------------------------------------------------------------------------
# Schema registry
# ---------------------------------------------------------------------------

class GridSchema:
    """Columns of one grid plus a couple of derived lookups."""

    def __init__(self, columns: Iterable[Column]) -> None:
        self.columns: list[Column] = list(columns)
        self.by_id: dict[str, Column] = columns_by_id(self.columns)

    def column(self, column_id: str) -> Column:
        try:
            return self.by_id[column_id]
        except KeyError:
            raise KeyError(f"Unknown column: {column_id!r}") from None


_schema_registry: dict[str, GridSchema] = {}


def register_schema(key: str, columns: Iterable[Column]) -> GridSchema:
    """Register (or replace) the schema used by the grid state *key*."""
    schema = GridSchema(columns)
    _schema_registry[key] = schema
    return schema


def get_schema(key: str) -> GridSchema:
    try:
        return _schema_registry[key]
    except KeyError:
        raise KeyError(f"No grid schema registered for {key!r}") from None


# ---------------------------------------------------------------------------
# Row pipeline
# ---------------------------------------------------------------------------

def tag_rows(rows: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Copy *rows*, adding their source index as ``__row_id__``."""
    return [{**row, ROW_ID_FIELD: i} for i, row in enumerate(rows)]


def view_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Iterable[Column],
    values: SearchValues,
    disabled_fields: Iterable[str],
    sort: SortState,
) -> list[dict[str, Any]]:
    """Rows as displayed: tagged with their source index, sorted, then filtered."""
    tagged = tag_rows(rows)
    ordered = sort_rows(tagged, sort)
    return list(filter_rows(ordered, columns, values, disabled_fields))


def format_rows(rows: Iterable[Mapping[str, Any]], columns: Iterable[Column]) -> list[dict[str, Any]]:
    """Replace cell values by their display text (read-only grids)."""
    columns = [col for col in columns if not col.is_action_column]
    out: list[dict[str, Any]] = []
    for row in rows:
        shown = dict(row)
        for col in columns:
            if col.render_cell is None:
                shown[col.id] = format_cell(col, row.get(col.id))
        out.append(shown)
    return out


def merge_page(
    rows: Sequence[Mapping[str, Any]], page_rows: Iterable[Mapping[str, Any]], append: bool
) -> list[dict[str, Any]]:
    """Rows after a page arrives: appended for load-more, else replacing."""
    new_rows = [dict(r) for r in page_rows]
    if not append:
        return new_rows
    return [*(dict(r) for r in rows), *new_rows]


def mount_defaults(page_key: str, page_size: int) -> dict[str, Any]:
    """View values of a grid freshly mounted for *page_key*.

    Rows, search input, sort and any dialog or error left over from an
    earlier visit are cleared.
    """
    sort = SortState.cleared()
    return {
        "page_key": page_key,
        "page_size": page_size,
        "rows": [],
        "total": 0,
        "stats": "",
        "search_values": {},
        "sort_field": sort.field or "",
        "sort_direction": sort.direction,
        "settings_open": False,
        "draft_fields": [],
        "error": "",
        "persist_error": "",
    }


def add_empty_row(rows: Sequence[Mapping[str, Any]], columns: Iterable[Column]) -> list[dict[str, Any]]:
    """Append a row with an empty string for every column."""
    return [*(dict(r) for r in rows), {col.id: "" for col in columns}]


def apply_cell_edit(
    rows: Sequence[Mapping[str, Any]],
    row_id: int,
    column_id: str,
    value: Any,
) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    """Write *value* into one cell, returning the new rows and updated row."""
    if not 0 <= row_id < len(rows):
        raise IndexError(f"Row {row_id} out of range (have {len(rows)})")
    updated = {**rows[row_id], column_id: value}
    updated.pop(ROW_ID_FIELD, None)
    new_rows = [dict(r) for r in rows]
    new_rows[row_id] = updated
    return new_rows, updated


def changed_fields(old_row: Mapping[str, Any], new_row: Mapping[str, Any]) -> dict[str, Any]:
    """Fields whose value differs between two versions of a row."""
    return {
        key: value
        for key, value in new_row.items()
        if key != ROW_ID_FIELD and old_row.get(key) != value
    }


async def run_edit_hook(column: Column, value: Any, row: dict[str, Any]) -> bool:
    """Call ``column.on_edit`` after an optimistic local edit.

    Failures are logged and reported through the return value; the local
    edit is not rolled back.
    """
    if column.on_edit is None:
        return True
    try:
        result = column.on_edit(value, row)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("[QueryGrid] on_edit hook failed for column %r", column.id)
        return False
    return True
