"""The admin console Reflex app.

Routes come from the menu's page map: every path that maps to a page is
registered with that page's component and an ``on_load`` that loads the
menu and starts the page's grid.
"""

import reflex as rx

from reflex_admin_grid.config import get_settings
from reflex_admin_grid.logging_setup import configure_logging
from reflex_admin_grid.menu import JOBS_PAGE, PAGE_CONFIG_MAP, WATCHLIST_PAGE
from reflex_admin_grid.pages.jobs import JobConsoleState, jobs_page
from reflex_admin_grid.pages.layout import LayoutState
from reflex_admin_grid.pages.watchlist import WatchlistState, watchlist_page

configure_logging(get_settings().log_level)

_PAGES = {
    JOBS_PAGE: (jobs_page, JobConsoleState),
    WATCHLIST_PAGE: (watchlist_page, WatchlistState),
}


def index() -> rx.Component:
    return rx.center(rx.spinner(), height="100vh")


app = rx.App(theme=rx.theme(accent_color="blue"))
app.add_page(index, route="/", on_load=[LayoutState.load_menu, LayoutState.go_home])

for _path, _page_key in PAGE_CONFIG_MAP.items():
    _component, _state = _PAGES[_page_key]
    app.add_page(
        _component,
        route=_path,
        title=f"Batch Console · {_page_key.capitalize()}",
        on_load=[LayoutState.load_menu, _state.open_page(_path)],
    )
