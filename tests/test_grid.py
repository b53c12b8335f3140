import pytest

from reflex_admin_grid.columns import Column, ColumnKind
from reflex_admin_grid.grid import (
    ROW_ID_FIELD,
    add_empty_row,
    apply_cell_edit,
    changed_fields,
    format_rows,
    get_schema,
    merge_page,
    mount_defaults,
    register_schema,
    run_edit_hook,
    view_rows,
)
from reflex_admin_grid.kinds import NumberValue
from reflex_admin_grid.sorting import SortState


def test_view_rows_sorts_then_filters_and_keeps_source_ids(columns, rows):
    result = view_rows(rows, columns, {"status": "ACTIVE"}, [], SortState("closePrice", "desc"))

    assert [r["symbol"] for r in result] == ["MSFT", "AAPL", "TSLA", "aapl.b"]
    assert [r[ROW_ID_FIELD] for r in result] == [1, 0, 3, 2]


def test_view_rows_disabled_field_ignored(columns, rows):
    result = view_rows(rows, columns, {"closePrice": NumberValue("1")}, ["closePrice"], SortState())
    assert len(result) == len(rows)


def test_format_rows_uses_display_text(columns, rows):
    shown = format_rows(rows[:3], columns)

    assert shown[0]["status"] == "Active"
    assert shown[0]["updatedAt"] == "2024-06-03 16:00:00"
    assert shown[0]["watched"] == "Yes"
    assert shown[2]["closePrice"] == "-"
    assert shown[2]["updatedAt"] == "not a date"
    assert rows[0]["watched"] is True


def test_add_empty_row(columns):
    result = add_empty_row([{"symbol": "A"}], columns[:2])
    assert result[-1] == {"symbol": "", "status": ""}


def test_apply_cell_edit_returns_updated_row():
    rows = [{"a": 1, ROW_ID_FIELD: 0}, {"a": 2, ROW_ID_FIELD: 1}]

    new_rows, updated = apply_cell_edit(rows, 1, "a", 5)

    assert updated == {"a": 5}
    assert new_rows[1] == {"a": 5}
    assert rows[1]["a"] == 2


def test_apply_cell_edit_out_of_range():
    with pytest.raises(IndexError):
        apply_cell_edit([], 0, "a", 1)


def test_changed_fields_ignores_row_id():
    old = {"a": 1, "b": 2, ROW_ID_FIELD: 0}
    new = {"a": 1, "b": 3, ROW_ID_FIELD: 9}
    assert changed_fields(old, new) == {"b": 3}


def test_schema_registry():
    schema = register_schema("test-grid", [Column("a", "A"), Column("b", "B", ColumnKind.NUMBER)])

    assert get_schema("test-grid") is schema
    assert schema.column("b").kind is ColumnKind.NUMBER
    with pytest.raises(KeyError):
        schema.column("z")
    with pytest.raises(KeyError):
        get_schema("never-registered")


def test_duplicate_column_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        register_schema("dup", [Column("a", "A"), Column("a", "Again")])


@pytest.mark.asyncio
async def test_run_edit_hook_sync_and_async():
    seen = []

    async def async_hook(value, row):
        seen.append(("async", value, row["a"]))

    sync_col = Column("a", "A", on_edit=lambda value, row: seen.append(("sync", value, row["a"])))
    async_col = Column("a", "A", on_edit=async_hook)

    assert await run_edit_hook(sync_col, 1, {"a": 1})
    assert await run_edit_hook(async_col, 2, {"a": 2})
    assert await run_edit_hook(Column("a", "A"), 3, {"a": 3})
    assert seen == [("sync", 1, 1), ("async", 2, 2)]


@pytest.mark.asyncio
async def test_run_edit_hook_failure_is_reported():
    def broken(value, row):
        raise RuntimeError("nope")

    assert await run_edit_hook(Column("a", "A", on_edit=broken), 1, {}) is False


def test_merge_page_appends_or_replaces():
    loaded = [{"symbol": "AAPL"}]
    page = [{"symbol": "MSFT"}]

    assert merge_page(loaded, page, append=True) == [{"symbol": "AAPL"}, {"symbol": "MSFT"}]
    assert merge_page(loaded, page, append=False) == [{"symbol": "MSFT"}]
    assert loaded == [{"symbol": "AAPL"}]


def test_mount_defaults_clear_rows_and_sort():
    view = mount_defaults("Watchlist", 25)

    assert view["page_key"] == "Watchlist"
    assert view["page_size"] == 25
    assert view["rows"] == []
    assert view["search_values"] == {}
    assert SortState(view["sort_field"] or None, view["sort_direction"]) == SortState()
    assert not view["settings_open"]
    assert view["error"] == view["persist_error"] == ""
