from reflex_admin_grid.filtering import filter_rows, row_matches
from reflex_admin_grid.kinds import DateRange, NumberValue


def _symbols(rows):
    return [r["symbol"] for r in rows]


def test_no_active_criteria_returns_input(columns, rows):
    assert filter_rows(rows, columns, {}) is rows
    assert filter_rows(rows, columns, {"symbol": "  "}) is rows


def test_text_is_case_insensitive_substring(columns, rows):
    assert _symbols(filter_rows(rows, columns, {"symbol": "AAPL"})) == ["AAPL", "aapl.b"]


def test_select_matches_like_text(columns, rows):
    result = filter_rows(rows, columns, {"status": "inact"})
    assert _symbols(result) == ["MSFT"]


def test_number_equality_coerces_cells(columns, rows):
    result = filter_rows(rows, columns, {"closePrice": NumberValue("190")})
    assert _symbols(result) == ["AAPL", "TSLA"]


def test_unparsable_number_input_keeps_all_rows(columns, rows):
    result = filter_rows(rows, columns, {"closePrice": NumberValue("1e")})
    assert len(result) == len(rows)


def test_date_range_is_inclusive(columns, rows):
    values = {"quoteDate": DateRange(from_="2024-06-01", to="2024-06-03")}
    assert _symbols(filter_rows(rows, columns, values)) == ["AAPL", "MSFT"]


def test_date_only_upper_bound_covers_whole_day(columns, rows):
    values = {"updatedAt": DateRange(to="2024-06-01")}
    assert _symbols(filter_rows(rows, columns, values)) == ["MSFT", "TSLA"]


def test_open_ended_lower_bound(columns, rows):
    values = {"updatedAt": DateRange(from_="2024-06-01T12:00:00")}
    assert _symbols(filter_rows(rows, columns, values)) == ["AAPL"]


def test_boolean_coerces_truthy_cells(columns, rows):
    assert _symbols(filter_rows(rows, columns, {"watched": True})) == ["AAPL", "aapl.b"]
    assert _symbols(filter_rows(rows, columns, {"watched": False})) == ["MSFT", "TSLA"]


def test_criteria_combine_with_and(columns, rows):
    values = {"symbol": "A", "closePrice": NumberValue("190"), "watched": True}

    result = filter_rows(rows, columns, values)

    assert _symbols(result) == ["AAPL"]
    for row in result:
        assert row_matches(row, columns, values)


def test_filter_result_is_subset_in_original_order(columns, rows):
    values = {"status": "active"}
    result = filter_rows(rows, columns, values)

    assert all(r in rows for r in result)
    positions = [rows.index(r) for r in result]
    assert positions == sorted(positions)


def test_disabled_field_does_not_filter(columns, rows):
    values = {"symbol": "zzz"}
    assert filter_rows(rows, columns, values, disabled_fields=["symbol"]) is rows


def test_missing_cell_is_a_non_match(columns):
    assert not row_matches({}, columns, {"symbol": "A"})
    assert not row_matches({"closePrice": "n/a"}, columns, {"closePrice": NumberValue("1")})
