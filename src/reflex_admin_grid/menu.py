"""Menu tree to page routes."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from reflex_admin_grid.schemas import MenuTree

logger = logging.getLogger(__name__)

JOBS_PAGE = "jobs"
WATCHLIST_PAGE = "watchlist"

PAGE_CONFIG_MAP: dict[str, str] = {
    "/jobConfig": JOBS_PAGE,
    "/Home": JOBS_PAGE,
    "/watchlist": WATCHLIST_PAGE,
}


@dataclass(frozen=True)
class MenuRoute:
    menu_id: str
    name: str
    route: str
    page: str


def resolve_page(path: str) -> str | None:
    """Page key for a menu path, tolerating a missing or extra leading slash."""
    if not path:
        return None
    for candidate in (path, f"/{path}", path.lstrip("/")):
        if candidate in PAGE_CONFIG_MAP:
            return PAGE_CONFIG_MAP[candidate]
    return None


def _normalise(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def generate_routes(menu_trees: Iterable[MenuTree]) -> list[MenuRoute]:
    """Depth-first list of routes for every menu entry that maps to a page.

    Children are visited even when their parent has no page of its own.
    """
    routes: list[MenuRoute] = []

    def walk(nodes: Iterable[MenuTree]) -> None:
        for node in nodes:
            path = node.path or ""
            if path and path != "/":
                page = resolve_page(path)
                if page is not None:
                    routes.append(MenuRoute(node.menu_id, node.name, _normalise(path), page))
                else:
                    logger.debug("[menu] no page for %r", path)
            walk(node.children)

    walk(menu_trees)
    return routes


def find_menu_entry(menu_trees: Iterable[MenuTree], route: str) -> MenuRoute | None:
    """The menu entry serving *route*; its name doubles as the page key."""
    target = _normalise(route)
    for entry in generate_routes(menu_trees):
        if entry.route == target:
            return entry
    return None
