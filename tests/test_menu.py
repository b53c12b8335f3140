from reflex_admin_grid.local_backend import default_menu
from reflex_admin_grid.menu import (
    JOBS_PAGE,
    WATCHLIST_PAGE,
    MenuRoute,
    find_menu_entry,
    generate_routes,
    resolve_page,
)
from reflex_admin_grid.schemas import MenuTree


def test_resolve_page_tolerates_leading_slash():
    assert resolve_page("/jobConfig") == JOBS_PAGE
    assert resolve_page("jobConfig") == JOBS_PAGE
    assert resolve_page("watchlist") == WATCHLIST_PAGE
    assert resolve_page("/unknown") is None
    assert resolve_page("") is None


def test_generate_routes_walks_children_depth_first():
    routes = generate_routes(default_menu())

    assert routes == [
        MenuRoute("1", "Home", "/Home", JOBS_PAGE),
        MenuRoute("11", "Job Management", "/jobConfig", JOBS_PAGE),
        MenuRoute("12", "Watchlist", "/watchlist", WATCHLIST_PAGE),
    ]


def test_generate_routes_skips_root_and_unmapped_paths():
    tree = [
        MenuTree(
            menu_id="1",
            name="Root",
            path="/",
            children=[
                MenuTree(menu_id="2", name="Reports", path="/reports"),
                MenuTree(menu_id="3", name="Stocks", path="/watchlist"),
            ],
        ),
    ]

    assert [r.menu_id for r in generate_routes(tree)] == ["3"]


def test_find_menu_entry():
    menu = default_menu()
    assert find_menu_entry(menu, "watchlist").name == "Watchlist"
    assert find_menu_entry(menu, "/jobConfig").menu_id == "11"
    assert find_menu_entry(menu, "/nowhere") is None


def test_menu_tree_parses_camel_case():
    tree = MenuTree.model_validate(
        {"menuId": "5", "parentId": "1", "name": "Jobs", "path": "/jobConfig",
         "children": [{"menuId": "6", "name": "Leaf"}]}
    )
    assert tree.parent_id == "1"
    assert tree.children[0].path == ""
