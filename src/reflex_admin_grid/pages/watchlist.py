"""Stock watchlist."""

from typing import Any

import reflex as rx

from reflex_admin_grid.columns import Column, ColumnKind
from reflex_admin_grid.grid import register_schema
from reflex_admin_grid.pages.layout import page_shell, resolve_page_key
from reflex_admin_grid.query_grid import QueryGridMixin, query_grid
from reflex_admin_grid.services import get_services

STOCK_COLUMNS: list[Column] = [
    Column("symbol", "Symbol", uppercase_input=True),
    Column("quoteDate", "Quote Date", kind=ColumnKind.DATE),
    Column("closePrice", "Close Price", kind=ColumnKind.NUMBER),
    Column("stockPe", "P/E", kind=ColumnKind.NUMBER),
]


class WatchlistState(QueryGridMixin, rx.State):
    async def _qg_fetch_page(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> tuple[list[dict[str, Any]], int]:
        response = await get_services().search_stocks(page, page_size, criteria)
        return [snapshot.to_wire() for snapshot in response.stock_snapshots], response.total

    async def open_page(self, route: str):
        page_key = await resolve_page_key(route)
        return type(self).qg_start(page_key)


register_schema(WatchlistState.__name__, STOCK_COLUMNS)


def watchlist_page() -> rx.Component:
    return page_shell("Watchlist", query_grid(WatchlistState, STOCK_COLUMNS))
