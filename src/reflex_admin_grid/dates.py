"""Date parsing and formatting for date / datetime columns."""

from datetime import date, datetime, time, timezone
from typing import Any

DEFAULT_DATE_DISPLAY: str = "%Y-%m-%d"
DEFAULT_DATETIME_DISPLAY: str = "%Y-%m-%d %H:%M:%S"

_DATE_ONLY_LEN = len("2024-01-01")


def _naive(value: datetime) -> datetime:
    """Normalise aware datetimes to naive UTC so they compare with naive ones."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Any, source_format: str | None = None) -> datetime | None:
    """Parse a cell or bound value into a naive ``datetime``.

    ``datetime`` and ``date`` objects are accepted as-is.  Strings are
    parsed with *source_format* (``strptime`` syntax) when given, otherwise
    as ISO-8601 (a trailing ``Z`` is accepted).

    Returns:
        The parsed value, or ``None`` if *value* is empty or unparsable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        if source_format:
            return _naive(datetime.strptime(text, source_format))
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return _naive(datetime.fromisoformat(text))
    except ValueError:
        return None


def is_date_only(value: str) -> bool:
    """Return True for a bare ``YYYY-MM-DD`` string."""
    return len(value.strip()) == _DATE_ONLY_LEN and "T" not in value


def format_date(
    value: Any,
    source_format: str | None = None,
    display_format: str = DEFAULT_DATETIME_DISPLAY,
) -> str:
    """Format a cell value for display.

    Empty values render as ``"-"``.  Values that cannot be parsed are shown
    unchanged rather than hidden.
    """
    if value is None or value == "":
        return "-"
    parsed = parse_datetime(value, source_format)
    if parsed is None:
        return str(value)
    return parsed.strftime(display_format)
