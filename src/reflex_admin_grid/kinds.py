"""Per-kind behaviour of search values, shared by the whole grid.

Every column kind gets exactly one :class:`KindHandler`.  The criteria
builder, the filter engine and the cell formatter all dispatch through
:data:`KIND_HANDLERS`, so supporting a new kind means adding one enum
member and one handler here.

Search values are a tagged union keyed by the column's kind:

* ``text`` / ``select``: ``str``
* ``number``: :class:`NumberValue` (the raw text the user typed)
* ``date`` / ``datetime``: :class:`DateRange`
* ``boolean``: ``bool`` or ``None`` (``None`` means "no filter")
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Union

from reflex_admin_grid.columns import Column, ColumnKind
from reflex_admin_grid.dates import (
    DEFAULT_DATE_DISPLAY,
    DEFAULT_DATETIME_DISPLAY,
    format_date,
    is_date_only,
    parse_datetime,
)


@dataclass(frozen=True)
class NumberValue:
    """Raw numeric search input, kept as text so partial input survives."""

    value: str = ""


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; either edge may be absent."""

    from_: str | None = None
    to: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.from_ and not self.to

    def with_edge(self, edge: str, value: str | None) -> "DateRange":
        """Return a copy with one edge replaced; empty *value* clears it."""
        value = value or None
        if edge == "from":
            return DateRange(from_=value, to=self.to)
        if edge == "to":
            return DateRange(from_=self.from_, to=value)
        raise ValueError(f"Unknown date range edge: {edge!r}")

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.from_:
            out["from"] = self.from_
        if self.to:
            out["to"] = self.to
        return out


SearchValue = Union[str, NumberValue, DateRange, bool, None]
Criterion = Union[str, int, float, dict[str, str], bool]


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------

def parse_number(value: Any) -> int | float | None:
    """Coerce *value* to a finite number, or ``None``.

    Integer literals stay ``int``; booleans are not numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


_TRUE_TOKENS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_TOKENS = frozenset({"false", "0", "no", "n", "off", ""})


def coerce_bool(value: Any) -> bool:
    """Coerce a cell value to ``bool`` for tri-state boolean filtering."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
    return bool(value)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KindHandler:
    """Search/display behaviour of one column kind.

    Attributes:
        value_types: Accepted Python types for the stored search value.
        is_active: Whether a stored value should filter at all.
        to_criterion: Normalised criterion for the search payload, or
            ``None`` when the value must be left out.
        matches: ``matches(cell, value, column)`` for an *active* value.
        format_cell: Display text for a cell.
    """

    value_types: tuple[type, ...]
    is_active: Callable[[Any], bool]
    to_criterion: Callable[[Any], Criterion | None]
    matches: Callable[[Any, Any, Column], bool]
    format_cell: Callable[[Any, Column], str]


def _plain_text(cell: Any, column: Column) -> str:
    if cell is None or cell == "":
        return "-"
    return str(cell)


# -- text / select

def _text_active(value: str) -> bool:
    return bool(value.strip())


def _text_criterion(value: str) -> str | None:
    text = value.strip()
    return text or None


def _text_matches(cell: Any, value: str, column: Column) -> bool:
    if cell is None:
        return False
    return value.strip().casefold() in str(cell).casefold()


def _select_display(cell: Any, column: Column) -> str:
    for opt in column.select_options:
        if str(opt.value) == str(cell):
            return opt.label
    return _plain_text(cell, column)


# -- number

def _number_active(value: NumberValue) -> bool:
    return value.value != ""


def _number_criterion(value: NumberValue) -> int | float | None:
    return parse_number(value.value)


def _number_matches(cell: Any, value: NumberValue, column: Column) -> bool:
    wanted = parse_number(value.value)
    if wanted is None:
        # Unparsable filter input never excludes rows.
        return True
    actual = parse_number(cell)
    if actual is None:
        return False
    return actual == wanted


# -- date / datetime

def _date_active(value: DateRange) -> bool:
    return not value.is_empty


def _date_criterion(value: DateRange) -> dict[str, str] | None:
    return value.to_dict() or None


def _bound(raw: str | None, *, upper: bool) -> datetime | None:
    if not raw:
        return None
    parsed = parse_datetime(raw)
    if parsed is None:
        return None
    if upper and is_date_only(raw):
        return datetime.combine(parsed.date(), time.max)
    return parsed


def _date_matches(cell: Any, value: DateRange, column: Column) -> bool:
    parsed = parse_datetime(cell, column.source_date_format)
    if parsed is None:
        return False
    lower = _bound(value.from_, upper=False)
    upper = _bound(value.to, upper=True)
    if column.kind is ColumnKind.DATE:
        day = parsed.date()
        if lower is not None and day < lower.date():
            return False
        if upper is not None and day > upper.date():
            return False
        return True
    if lower is not None and parsed < lower:
        return False
    if upper is not None and parsed > upper:
        return False
    return True


def _date_display(cell: Any, column: Column) -> str:
    default = DEFAULT_DATE_DISPLAY if column.kind is ColumnKind.DATE else DEFAULT_DATETIME_DISPLAY
    return format_date(cell, column.source_date_format, column.display_date_format or default)


# -- boolean

def _bool_active(value: bool | None) -> bool:
    return value is not None


def _bool_criterion(value: bool | None) -> bool | None:
    return value


def _bool_matches(cell: Any, value: bool, column: Column) -> bool:
    return coerce_bool(cell) is value


def _bool_display(cell: Any, column: Column) -> str:
    if cell is None or cell == "":
        return "-"
    return "Yes" if coerce_bool(cell) else "No"


_TEXT = KindHandler(
    value_types=(str,),
    is_active=_text_active,
    to_criterion=_text_criterion,
    matches=_text_matches,
    format_cell=_plain_text,
)

KIND_HANDLERS: dict[ColumnKind, KindHandler] = {
    ColumnKind.TEXT: _TEXT,
    ColumnKind.SELECT: KindHandler(
        value_types=(str,),
        is_active=_text_active,
        to_criterion=_text_criterion,
        matches=_text_matches,
        format_cell=_select_display,
    ),
    ColumnKind.NUMBER: KindHandler(
        value_types=(NumberValue,),
        is_active=_number_active,
        to_criterion=_number_criterion,
        matches=_number_matches,
        format_cell=_plain_text,
    ),
    ColumnKind.DATE: KindHandler(
        value_types=(DateRange,),
        is_active=_date_active,
        to_criterion=_date_criterion,
        matches=_date_matches,
        format_cell=_date_display,
    ),
    ColumnKind.DATETIME: KindHandler(
        value_types=(DateRange,),
        is_active=_date_active,
        to_criterion=_date_criterion,
        matches=_date_matches,
        format_cell=_date_display,
    ),
    ColumnKind.BOOLEAN: KindHandler(
        value_types=(bool, type(None)),
        is_active=_bool_active,
        to_criterion=_bool_criterion,
        matches=_bool_matches,
        format_cell=_bool_display,
    ),
    ColumnKind.ACTION: KindHandler(
        value_types=(),
        is_active=lambda value: False,
        to_criterion=lambda value: None,
        matches=lambda cell, value, column: True,
        format_cell=lambda cell, column: "",
    ),
}


def handler_for(column: Column) -> KindHandler:
    return KIND_HANDLERS[column.kind]


def is_active_value(column: Column, value: Any) -> bool:
    """Return True if *value* would filter rows for *column*.

    Values of the wrong shape for the column's kind are treated as empty.
    """
    if column.is_action_column:
        return False
    handler = handler_for(column)
    if not isinstance(value, handler.value_types):
        return False
    return handler.is_active(value)


def format_cell(column: Column, cell: Any) -> str:
    """Return the display text for *cell* in *column*."""
    return handler_for(column).format_cell(cell, column)
