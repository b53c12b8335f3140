"""Apply built search criteria to polars frames and page through them."""

from datetime import datetime, time
from typing import Any

import polars as pl

from reflex_admin_grid.dates import is_date_only, parse_datetime
from reflex_admin_grid.kinds import parse_number


def _is_temporal(dtype: pl.DataType) -> bool:
    return isinstance(dtype, (pl.Date, pl.Datetime))


def _is_string(dtype: pl.DataType) -> bool:
    return isinstance(dtype, (pl.String, pl.Categorical, pl.Enum))


def _range_bound(raw: Any, *, upper: bool) -> datetime | None:
    if raw is None or raw == "":
        return None
    bound = parse_datetime(raw)
    if bound is None:
        return None
    if upper and is_date_only(raw):
        bound = datetime.combine(bound.date(), time.max)
    return bound


# ---------------------------------------------------------------------------
# Criteria -> expressions
# ---------------------------------------------------------------------------

def _build_criterion_expr(field: str, criterion: Any, schema: pl.Schema) -> pl.Expr | None:
    """Translate one ``{field: criterion}`` entry into a polars expression.

    Args:
        field: Column name.
        criterion: A criterion as produced by
            :func:`reflex_admin_grid.criteria.build_criteria`: ``str`` for
            text/select, a number, ``{"from"?, "to"?}`` for dates, or
            ``bool``.
        schema: Frame schema, used to pick the comparison.

    Returns:
        A polars expression, or ``None`` if the entry cannot be applied
        (unknown column, or a criterion that does not fit the column type).
    """
    if field not in schema:
        return None
    col = pl.col(field)
    dtype = schema[field]

    if isinstance(criterion, bool):
        if isinstance(dtype, pl.Boolean):
            return col == criterion
        return None

    if isinstance(criterion, dict):
        if not _is_temporal(dtype):
            return None
        exprs: list[pl.Expr] = []
        lower = _range_bound(criterion.get("from"), upper=False)
        upper = _range_bound(criterion.get("to"), upper=True)
        as_date = isinstance(dtype, pl.Date)
        if lower is not None:
            exprs.append(col >= (lower.date() if as_date else lower))
        if upper is not None:
            exprs.append(col <= (upper.date() if as_date else upper))
        if not exprs:
            return None
        return pl.all_horizontal(exprs)

    if isinstance(criterion, (int, float)):
        if dtype.is_numeric():
            return col == criterion
        return None

    if isinstance(criterion, str):
        if dtype.is_numeric():
            number = parse_number(criterion)
            return None if number is None else col == number
        needle = criterion.strip().lower()
        if not needle:
            return None
        str_col = col if _is_string(dtype) else col.cast(pl.String)
        return str_col.str.to_lowercase().str.contains(needle, literal=True).fill_null(False)

    return None


def criteria_to_exprs(criteria: dict[str, Any], schema: pl.Schema) -> list[pl.Expr]:
    exprs = []
    for field, criterion in criteria.items():
        expr = _build_criterion_expr(field, criterion, schema)
        if expr is not None:
            exprs.append(expr)
    return exprs


def apply_criteria(lf: pl.LazyFrame, criteria: dict[str, Any]) -> pl.LazyFrame:
    """AND every applicable criterion onto *lf*; no collect."""
    if not criteria:
        return lf
    exprs = criteria_to_exprs(criteria, lf.collect_schema())
    if not exprs:
        return lf
    return lf.filter(pl.all_horizontal(exprs))


# ---------------------------------------------------------------------------
# Paging
# ---------------------------------------------------------------------------

def dataframe_to_dicts(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to JSON-safe dicts (temporal columns -> ISO strings)."""
    temporal = [name for name, dtype in df.schema.items() if _is_temporal(dtype)]
    if temporal:
        df = df.with_columns(
            pl.col(name).dt.strftime("%Y-%m-%d")
            if isinstance(df.schema[name], pl.Date)
            else pl.col(name).dt.strftime("%Y-%m-%dT%H:%M:%S")
            for name in temporal
        )
    return df.to_dicts()


def page_slice(lf: pl.LazyFrame, page: int, page_size: int) -> tuple[list[dict[str, Any]], int]:
    """Collect one 1-based page of *lf*.

    Returns:
        ``(rows, total)`` where *total* is the row count before slicing.
    """
    if page < 1 or page_size < 1:
        raise ValueError(f"page and page_size must be positive (got {page}, {page_size})")
    total = lf.select(pl.len()).collect().item()
    df = lf.slice((page - 1) * page_size, page_size).collect()
    return dataframe_to_dicts(df), total
