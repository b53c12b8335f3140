"""Column schema for the query grid.

A page describes its table once, as a list of :class:`Column` objects.
The schema is immutable for the life of the page and drives everything
else: which search inputs are rendered, how a search value is judged
active, how rows are matched and sorted, and how cells are displayed.
"""

import enum
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import reflex as rx

EditHook = Callable[[Any, dict[str, Any]], Awaitable[None] | None]


class ColumnKind(str, enum.Enum):
    """Closed set of column kinds understood by the grid."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    ACTION = "action"


# MUI DataGrid column ``type`` for each kind.
_GRID_TYPES: dict[ColumnKind, str] = {
    ColumnKind.TEXT: "string",
    ColumnKind.NUMBER: "number",
    ColumnKind.SELECT: "singleSelect",
    ColumnKind.DATE: "string",
    ColumnKind.DATETIME: "string",
    ColumnKind.BOOLEAN: "boolean",
    ColumnKind.ACTION: "actions",
}


@dataclass(frozen=True)
class SelectOption:
    label: str
    value: str | int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "value": str(self.value)}


@dataclass(frozen=True)
class Column:
    """One field of a grid schema.

    Attributes:
        id: Unique key of the field within a row.
        label: Header / search-field label.
        kind: Display and search type, see :class:`ColumnKind`.
        select_options: Allowed values for ``select`` columns.
        sortable: Whether clicking the header sorts.  Defaults to ``True``
            for every kind except ``action``.
        is_action_column: Excluded from search and sort.  Implied by
            ``kind=ACTION``.
        source_date_format: ``strptime`` pattern used to parse cell values
            of date columns.  ISO-8601 is assumed when ``None``.
        display_date_format: ``strftime`` pattern used to display dates.
        uppercase_input: Upper-case text typed into this column's search box.
        width: Column width in pixels (display only).
        on_edit: Hook called as ``on_edit(new_value, updated_row)`` after a
            cell edit has been applied to the local rows.  May be async.
        render_cell: Optional ``rx.Var`` cell renderer passed to MUI.
    """

    id: str
    label: str
    kind: ColumnKind = ColumnKind.TEXT
    select_options: tuple[SelectOption, ...] = ()
    sortable: bool | None = None
    is_action_column: bool = False
    source_date_format: str | None = None
    display_date_format: str | None = None
    uppercase_input: bool = False
    width: int | None = None
    on_edit: EditHook | None = field(default=None, compare=False, repr=False)
    render_cell: rx.Var | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ColumnKind):
            object.__setattr__(self, "kind", ColumnKind(self.kind))
        if self.kind is ColumnKind.ACTION:
            object.__setattr__(self, "is_action_column", True)
        if self.sortable is None:
            object.__setattr__(self, "sortable", not self.is_action_column)
        object.__setattr__(self, "select_options", tuple(self.select_options))

    @property
    def is_searchable(self) -> bool:
        return not self.is_action_column

    @property
    def is_sortable(self) -> bool:
        return bool(self.sortable) and not self.is_action_column

    def to_search_field(self) -> dict[str, Any]:
        """Serialise the parts of the column the search panel needs."""
        return {
            "id": self.id,
            "label": self.label,
            "kind": self.kind.value,
            "options": [opt.to_dict() for opt in self.select_options],
        }

    def to_grid_column(self, *, editable: bool = False) -> dict[str, Any]:
        """Build an MUI ``GridColDef`` dict for this column."""
        col_def: dict[str, Any] = {
            "field": self.id,
            "headerName": self.label,
            "type": _GRID_TYPES[self.kind],
            "sortable": self.is_sortable,
            "filterable": False,
            "editable": editable and not self.is_action_column,
        }
        if self.width is not None:
            col_def["width"] = self.width
        else:
            col_def["flex"] = 1
        if self.select_options:
            col_def["valueOptions"] = [opt.to_dict() for opt in self.select_options]
        if self.render_cell is not None:
            col_def["renderCell"] = self.render_cell
        return col_def


def columns_by_id(columns: Iterable[Column]) -> dict[str, Column]:
    """Index *columns* by id, rejecting duplicate ids."""
    index: dict[str, Column] = {}
    for col in columns:
        if col.id in index:
            raise ValueError(f"Duplicate column id: {col.id!r}")
        index[col.id] = col
    return index


def searchable_columns(
    columns: Iterable[Column],
    disabled_fields: Iterable[str] = (),
) -> list[Column]:
    """Return the columns shown in the search panel, in schema order."""
    disabled = set(disabled_fields)
    return [col for col in columns if col.is_searchable and col.id not in disabled]
