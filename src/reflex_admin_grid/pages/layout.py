"""Console shell: menu sidebar and page-key lookup."""

import logging
from typing import Any

import reflex as rx

from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.menu import find_menu_entry, generate_routes
from reflex_admin_grid.services import get_services

logger = logging.getLogger(__name__)


async def resolve_page_key(route: str) -> str:
    """Name of the menu entry serving *route*; the route itself if there is none."""
    try:
        menu = await get_services().get_menu()
    except ApiError as exc:
        logger.warning("[menu] lookup for %s failed: %s", route, exc)
        return route
    entry = find_menu_entry(menu, route)
    return entry.name if entry is not None else route


class LayoutState(rx.State):
    menu_routes: list[dict[str, str]] = []
    menu_error: str = ""
    menu_loaded: bool = False

    async def load_menu(self) -> None:
        if self.menu_loaded:
            return
        try:
            menu = await get_services().get_menu()
        except ApiError as exc:
            self.menu_error = f"Menu unavailable: {exc}"
            return
        self.menu_routes = [
            {"name": r.name, "route": r.route} for r in generate_routes(menu)
        ]
        self.menu_error = ""
        self.menu_loaded = True

    def go_home(self):
        target = self.menu_routes[0]["route"] if self.menu_routes else "/jobConfig"
        return rx.redirect(target)


def sidebar() -> rx.Component:
    return rx.vstack(
        rx.heading("Batch Console", size="4", margin_bottom="0.5em"),
        rx.cond(
            LayoutState.menu_error != "",
            rx.text(LayoutState.menu_error, size="1", color="var(--red-9)"),
        ),
        rx.foreach(
            LayoutState.menu_routes,
            lambda item: rx.link(item["name"], href=item["route"], size="2"),
        ),
        spacing="2",
        padding="1em",
        min_width="200px",
        height="100vh",
        border_right="1px solid var(--gray-a5)",
    )


def page_shell(title: str, *children: rx.Component, **props: Any) -> rx.Component:
    return rx.hstack(
        sidebar(),
        rx.vstack(
            rx.heading(title, size="5"),
            *children,
            spacing="3",
            padding="1.5em",
            width="100%",
            **props,
        ),
        spacing="0",
        align="start",
        width="100%",
    )
