import pytest

from reflex_admin_grid.columns import columns_by_id
from reflex_admin_grid.criteria import (
    FilterCriteriaStore,
    active_columns,
    build_criteria,
    dump_values,
    load_values,
    set_boolean,
    set_date_range,
    set_number,
    set_text,
)
from reflex_admin_grid.errors import ColumnKindError
from reflex_admin_grid.kinds import DateRange, NumberValue


def _col(columns, column_id):
    return columns_by_id(columns)[column_id]


def test_setters_do_not_mutate_input(columns):
    original = {"status": "ACTIVE"}
    updated = set_text(original, _col(columns, "symbol"), "aapl")

    assert original == {"status": "ACTIVE"}
    assert updated == {"status": "ACTIVE", "symbol": "AAPL"}


def test_set_text_respects_uppercase_flag(columns):
    values = set_text({}, _col(columns, "status"), "active")
    assert values["status"] == "active"


@pytest.mark.parametrize(
    ("setter", "args", "column_id"),
    [
        (set_text, ("x",), "closePrice"),
        (set_number, ("1",), "symbol"),
        (set_date_range, ("from", "2024-01-01"), "watched"),
        (set_boolean, (True,), "quoteDate"),
        (set_text, ("x",), "actions"),
    ],
)
def test_setter_rejects_wrong_kind(columns, setter, args, column_id):
    with pytest.raises(ColumnKindError):
        setter({}, _col(columns, column_id), *args)


def test_number_keeps_raw_text(columns):
    values = set_number({}, _col(columns, "closePrice"), "4.")
    assert values["closePrice"] == NumberValue("4.")


def test_date_range_edges_are_independent(columns):
    quote_date = _col(columns, "quoteDate")
    values = set_date_range({}, quote_date, "from", "2024-06-01")
    values = set_date_range(values, quote_date, "to", "2024-06-30")
    assert values["quoteDate"] == DateRange(from_="2024-06-01", to="2024-06-30")

    values = set_date_range(values, quote_date, "from", "")
    assert values["quoteDate"] == DateRange(to="2024-06-30")

    values = set_date_range(values, quote_date, "to", None)
    assert "quoteDate" not in values


def test_unknown_date_edge_raises(columns):
    with pytest.raises(ValueError):
        set_date_range({}, _col(columns, "quoteDate"), "middle", "2024-01-01")


def test_boolean_none_removes_entry(columns):
    watched = _col(columns, "watched")
    values = set_boolean({}, watched, False)
    assert values == {"watched": False}
    assert set_boolean(values, watched, None) == {}


def test_build_criteria_is_sparse_and_normalised(columns):
    values = {
        "symbol": "  AAPL ",
        "status": "   ",
        "closePrice": NumberValue("190"),
        "quoteDate": DateRange(from_="2024-06-01"),
        "watched": False,
    }

    criteria = build_criteria(values, columns)

    assert criteria == {
        "symbol": "AAPL",
        "closePrice": 190,
        "quoteDate": {"from": "2024-06-01"},
        "watched": False,
    }


def test_build_criteria_drops_unparsable_numbers(columns):
    values = {"closePrice": NumberValue("12abc")}
    assert build_criteria(values, columns) == {}


def test_build_criteria_empty_when_nothing_active(columns):
    assert build_criteria({}, columns) == {}
    assert build_criteria({"closePrice": NumberValue("")}, columns) == {}


def test_disabled_fields_are_excluded(columns):
    values = {"symbol": "AAPL", "closePrice": NumberValue("1")}

    criteria = build_criteria(values, columns, disabled_fields=["symbol"])

    assert criteria == {"closePrice": 1}
    assert [c.id for c in active_columns(values, columns, ["symbol"])] == ["closePrice"]


def test_wrongly_shaped_value_is_inactive(columns):
    assert active_columns({"closePrice": "190"}, columns) == []


def test_dump_and_load_preserve_kinds(columns):
    values = {
        "symbol": "AAPL",
        "closePrice": NumberValue("1.5"),
        "quoteDate": DateRange(to="2024-06-30"),
        "watched": True,
    }

    dumped = dump_values(values)

    assert dumped["quoteDate"] == {"from": "", "to": "2024-06-30"}
    assert load_values(dumped, columns) == values


def test_load_values_skips_empty_ranges_and_mismatched_shapes(columns):
    data = {"quoteDate": {"from": "", "to": ""}, "watched": "yes", "nope": 1}
    assert load_values(data, columns) == {}


def test_store_round_trip(columns):
    store = FilterCriteriaStore(columns)
    store.set_text("symbol", "msft")
    store.set_number("closePrice", "420.5")
    store.set_boolean("watched", True)

    assert store.build_criteria(disabled_fields=["watched"]) == {
        "symbol": "MSFT",
        "closePrice": 420.5,
    }

    store.clear_all()
    assert store.values == {}
    assert store.build_criteria() == {}


def test_store_unknown_column(columns):
    store = FilterCriteriaStore(columns)
    with pytest.raises(KeyError, match="Unknown column"):
        store.set_text("missing", "x")
