"""Client-side filtering of already-loaded rows.

This is the live refinement path: it runs on every change of the search
input and never talks to the backend.  Re-querying the backend is the
separate, explicit Search action (see :func:`criteria.build_criteria`).
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from reflex_admin_grid.columns import Column
from reflex_admin_grid.criteria import SearchValues, active_columns
from reflex_admin_grid.kinds import handler_for

logger = logging.getLogger(__name__)


def _cell_matches(row: Mapping[str, Any], column: Column, value: Any) -> bool:
    try:
        return handler_for(column).matches(row.get(column.id), value, column)
    except (TypeError, ValueError, OverflowError) as exc:
        # A cell the handler cannot interpret is a non-match, not a crash.
        logger.debug("[QueryGrid] cell %r not comparable: %s", column.id, exc)
        return False


def row_matches(
    row: Mapping[str, Any],
    columns: Iterable[Column],
    values: SearchValues,
    disabled_fields: Iterable[str] = (),
) -> bool:
    """Return True if *row* satisfies every active criterion (logical AND)."""
    for col in active_columns(values, columns, disabled_fields):
        if not _cell_matches(row, col, values[col.id]):
            return False
    return True


def filter_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Iterable[Column],
    values: SearchValues,
    disabled_fields: Iterable[str] = (),
) -> Sequence[Mapping[str, Any]]:
    """Keep the rows matching all active criteria.

    When no criterion is active the input sequence itself is returned.
    """
    columns = list(columns)
    active = active_columns(values, columns, disabled_fields)
    if not active:
        return rows
    return [
        row
        for row in rows
        if all(_cell_matches(row, col, values[col.id]) for col in active)
    ]
