import pytest

from reflex_admin_grid.columns import Column, ColumnKind, SelectOption
from reflex_admin_grid.config import reset_settings_cache


@pytest.fixture
def columns() -> list[Column]:
    return [
        Column("symbol", "Symbol", uppercase_input=True),
        Column(
            "status",
            "Status",
            ColumnKind.SELECT,
            select_options=(SelectOption("Active", "ACTIVE"), SelectOption("Inactive", "INACTIVE")),
        ),
        Column("closePrice", "Close Price", ColumnKind.NUMBER),
        Column("quoteDate", "Quote Date", ColumnKind.DATE),
        Column("updatedAt", "Updated", ColumnKind.DATETIME),
        Column("watched", "Watched", ColumnKind.BOOLEAN),
        Column("actions", "Actions", ColumnKind.ACTION),
    ]


@pytest.fixture
def rows() -> list[dict]:
    return [
        {"symbol": "AAPL", "status": "ACTIVE", "closePrice": 190, "quoteDate": "2024-06-03",
         "updatedAt": "2024-06-03T16:00:00", "watched": True},
        {"symbol": "MSFT", "status": "INACTIVE", "closePrice": 420.5, "quoteDate": "2024-06-01",
         "updatedAt": "2024-06-01T09:30:00", "watched": False},
        {"symbol": "aapl.b", "status": "ACTIVE", "closePrice": None, "quoteDate": None,
         "updatedAt": "not a date", "watched": "yes"},
        {"symbol": "TSLA", "status": "ACTIVE", "closePrice": "190", "quoteDate": "2024-05-31",
         "updatedAt": "2024-05-31T23:59:59", "watched": 0},
    ]


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    for key in ("BACKEND", "API_BASE_URL", "PAGE_SIZE", "PANEL_MIN_HEIGHT", "PANEL_MAX_HEIGHT"):
        monkeypatch.delenv(f"ADMIN_GRID_{key}", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()
