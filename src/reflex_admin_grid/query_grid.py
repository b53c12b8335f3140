"""Reusable query grid: state mixin and UI helpers.

A page declares its columns once, registers them for its state class and
renders :func:`query_grid`::

    JOB_COLUMNS = [Column("jobName", "Job Name"), ...]

    class JobState(QueryGridMixin, rx.State):
        async def _qg_fetch_page(self, page, page_size, criteria):
            response = await get_services().get_job_list(page, page_size)
            return [job.to_wire() for job in response.job_task_list], response.total

    register_schema(JobState.__name__, JOB_COLUMNS)

    def index():
        return query_grid(JobState, JOB_COLUMNS)

``QueryGridMixin`` is a Reflex state mixin (``mixin=True``); every
subclass gets its own ``qg_*`` vars.  The state only holds JSON-safe
snapshots.  Sorting, filtering, criteria building, pagination and panel
resizing are delegated to the framework-free modules of this package.

Rows come from one of two sources.  In *external* mode (the default) the
host loads pages through :meth:`QueryGridMixin._qg_fetch_page`; the
explicit Search button loads page 1 with the built criteria and reaching
the last row loads the next page with the same criteria.  In *internal*
mode (``qg_internal_rows``) the grid owns its rows: cell edits and
"add row" change them locally and pagination is off.
"""

import logging
import time
from typing import Any

import reflex as rx

from reflex_admin_grid.columns import Column, ColumnKind, searchable_columns
from reflex_admin_grid.config import get_settings
from reflex_admin_grid.criteria import (
    active_columns,
    build_criteria,
    dump_values,
    load_values,
    set_boolean,
    set_date_range,
    set_number,
    set_text,
)
from reflex_admin_grid.datagrid import data_grid
from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.field_visibility import FieldVisibilityConfig, FieldVisibilityService
from reflex_admin_grid.grid import (
    ROW_ID_FIELD,
    GridSchema,
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
from reflex_admin_grid.kinds import DateRange, NumberValue
from reflex_admin_grid.pagination import GridPager
from reflex_admin_grid.resize import ResizablePanelController
from reflex_admin_grid.resize_handle import resize_handle
from reflex_admin_grid.services import get_services
from reflex_admin_grid.sorting import SortState

logger = logging.getLogger(__name__)

# Select value meaning "no filter" (Radix selects cannot hold "").
ANY_OPTION = "__any__"
_BOOL_CHOICES = {ANY_OPTION: None, "yes": True, "no": False}


class QueryGridMixin(rx.State, mixin=True):
    """Search panel + grid state for one page.

    Subclasses must also inherit from ``rx.State`` and register their
    columns with :func:`reflex_admin_grid.grid.register_schema` under the
    class name.  Override :meth:`_qg_fetch_page` to load rows,
    :meth:`_qg_on_action` to react to action-column clicks and
    :meth:`_qg_on_rows_changed` to observe local edits.
    """

    # -- Frontend state vars --
    qg_rows: list[dict[str, Any]] = []
    qg_search_values: dict[str, Any] = {}
    qg_disabled_fields: list[str] = []
    qg_draft_fields: list[str] = []
    qg_settings_open: bool = False
    qg_sort_field: str = ""
    qg_sort_direction: str = "asc"
    qg_page: int = 1
    qg_page_size: int = 10
    qg_total: int = 0
    qg_has_more: bool = True
    qg_loading: bool = False
    qg_pagination_enabled: bool = True
    qg_internal_rows: bool = False
    qg_editable: bool = False
    qg_panel_height: int = 160
    qg_dragging: bool = False
    qg_error: str = ""
    qg_persist_error: str = ""
    qg_page_key: str = ""
    qg_stats: str = ""

    # -- Backend-only vars --
    _qg_criteria: dict[str, Any] = {}
    _qg_request_id: int = 0
    _qg_fired_boundary: int = -1
    _qg_persist_id: int = 0
    _qg_panel_exact: float = 160.0

    # ------------------------------------------------------------------
    # Host hooks
    # ------------------------------------------------------------------

    async def _qg_fetch_page(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> tuple[list[dict[str, Any]], int]:
        """Load one page of rows; returns ``(rows, total)``."""
        return [], 0

    def _qg_on_action(self, column_id: str, row: dict[str, Any]) -> Any:
        """Called for clicks in an action column; may return events."""
        return None

    def _qg_on_rows_changed(self, rows: list[dict[str, Any]]) -> None:
        """Called after a local edit or added row (internal mode)."""

    def _qg_visibility_service(self) -> FieldVisibilityService:
        return get_services()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _qg_schema(self) -> GridSchema:
        return get_schema(type(self).__name__)

    def _qg_values(self) -> dict[str, Any]:
        return load_values(self.qg_search_values, self._qg_schema().columns)

    def _qg_store_values(self, values: dict[str, Any]) -> None:
        self.qg_search_values = dump_values(values)

    def _qg_sort(self) -> SortState:
        return SortState(self.qg_sort_field or None, self.qg_sort_direction)  # type: ignore[arg-type]

    def _qg_pager(self) -> GridPager:
        return GridPager.from_snapshot(
            {
                "page": self.qg_page,
                "has_more": self.qg_has_more,
                "is_loading": self.qg_loading,
                "enabled": self.qg_pagination_enabled and not self.qg_internal_rows,
                "fired_boundary": None if self._qg_fired_boundary < 0 else self._qg_fired_boundary,
                "request_id": self._qg_request_id,
            }
        )

    def _qg_store_pager(self, pager: GridPager) -> None:
        snap = pager.snapshot()
        self.qg_page = snap["page"]
        self.qg_has_more = snap["has_more"]
        self.qg_loading = snap["is_loading"]
        fired = snap["fired_boundary"]
        self._qg_fired_boundary = -1 if fired is None else int(fired)
        self._qg_request_id = snap["request_id"]

    def _qg_visibility(self) -> FieldVisibilityConfig:
        return FieldVisibilityConfig.from_snapshot(
            {
                "page_key": self.qg_page_key,
                "committed": self.qg_disabled_fields,
                "draft": self.qg_draft_fields if self.qg_settings_open else None,
                "persist_error": self.qg_persist_error or None,
                "persist_id": self._qg_persist_id,
            },
            self._qg_visibility_service(),
        )

    def _qg_store_visibility(self, config: FieldVisibilityConfig) -> None:
        snap = config.snapshot()
        self.qg_disabled_fields = snap["committed"]
        self.qg_settings_open = snap["draft"] is not None
        self.qg_draft_fields = snap["draft"] or []
        self.qg_persist_error = snap["persist_error"] or ""
        self._qg_persist_id = snap["persist_id"]

    def _qg_panel(self, height: float | None = None) -> ResizablePanelController:
        settings = get_settings()
        panel = ResizablePanelController(
            self._qg_panel_exact if height is None else height,
            min_height=settings.panel_min_height,
            max_height=settings.panel_max_height,
        )
        if self.qg_dragging and height is None:
            panel.state = "dragging"
        return panel

    def _qg_store_panel(self, panel: ResizablePanelController) -> None:
        self._qg_panel_exact = panel.exact_height
        self.qg_panel_height = panel.height
        self.qg_dragging = panel.is_dragging

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def qg_start(self, page_key: str):
        """Reset the grid for *page_key*, load its settings and first page."""
        settings = get_settings()
        for name, value in mount_defaults(page_key, settings.page_size).items():
            setattr(self, f"qg_{name}", value)
        self._qg_criteria = {}
        self._qg_store_panel(self._qg_panel(settings.panel_default_height))
        pager = self._qg_pager()
        pager.reset()
        self._qg_store_pager(pager)
        events: list[Any] = [type(self).qg_load_visibility]
        if not self.qg_internal_rows:
            events.append(type(self).qg_search)
        return events

    def qg_set_rows(self, rows: list[dict[str, Any]]) -> None:
        """Replace the rows (internal mode initial rows, or a host refresh)."""
        self.qg_rows = [{k: v for k, v in r.items() if k != ROW_ID_FIELD} for r in rows]

    # ------------------------------------------------------------------
    # Search input
    # ------------------------------------------------------------------

    def qg_set_text(self, column_id: str, value: str) -> None:
        if value == ANY_OPTION:
            value = ""
        column = self._qg_schema().column(column_id)
        self._qg_store_values(set_text(self._qg_values(), column, value))

    def qg_set_number(self, column_id: str, value: str) -> None:
        column = self._qg_schema().column(column_id)
        self._qg_store_values(set_number(self._qg_values(), column, value))

    def qg_set_date(self, column_id: str, edge: str, value: str) -> None:
        column = self._qg_schema().column(column_id)
        self._qg_store_values(set_date_range(self._qg_values(), column, edge, value or None))

    def qg_set_boolean(self, column_id: str, choice: str) -> None:
        column = self._qg_schema().column(column_id)
        self._qg_store_values(set_boolean(self._qg_values(), column, _BOOL_CHOICES.get(choice)))

    def qg_clear_search(self) -> None:
        self.qg_search_values = {}

    # ------------------------------------------------------------------
    # Search and paging
    # ------------------------------------------------------------------

    def qg_search(self):
        """Explicit search: page 1 with the criteria built from the panel."""
        schema = self._qg_schema()
        self._qg_criteria = build_criteria(
            self._qg_values(), schema.columns, self.qg_disabled_fields
        )
        if self.qg_internal_rows:
            return None
        pager = self._qg_pager()
        request_id = pager.search()
        self._qg_store_pager(pager)
        self.qg_error = ""
        logger.debug("[QueryGrid] %s search #%d %s", type(self).__name__, request_id, self._qg_criteria)
        return type(self).qg_load_page(request_id, 1, False)

    def qg_scroll_end(self, params: dict[str, Any]):
        """The last loaded row came into view."""
        pager = self._qg_pager()
        load = pager.scroll_end(int(params.get("rowCount", len(self.qg_rows))))
        self._qg_store_pager(pager)
        if load is None:
            return None
        request_id, page = load
        return type(self).qg_load_page(request_id, page, True)

    def qg_scroll_leave(self, params: dict[str, Any]) -> None:
        pager = self._qg_pager()
        pager.scroll_leave(int(params.get("rowCount", len(self.qg_rows))))
        self._qg_store_pager(pager)

    @rx.event(background=True)
    async def qg_load_page(self, request_id: int, page: int, append: bool):
        """Fetch *page* and apply it unless a newer request was issued."""
        async with self:
            criteria = dict(self._qg_criteria)
            page_size = self.qg_page_size

        t0 = time.perf_counter()
        try:
            rows, total = await self._qg_fetch_page(page, page_size, criteria)
        except ApiError as exc:
            logger.warning("[QueryGrid] page %d failed: %s", page, exc)
            async with self:
                pager = self._qg_pager()
                if pager.fail(request_id):
                    self._qg_store_pager(pager)
                    self.qg_error = f"Loading data failed: {exc}"
            return

        elapsed_ms = (time.perf_counter() - t0) * 1000
        async with self:
            pager = self._qg_pager()
            if not pager.is_current(request_id):
                logger.debug("[QueryGrid] dropping stale response #%d", request_id)
                return
            self.qg_rows = merge_page(self.qg_rows, rows, append)
            loaded = len(self.qg_rows)
            self.qg_total = total
            pager.complete(request_id, page, loaded, total)
            self._qg_store_pager(pager)
            self.qg_stats = f"{loaded:,} / {total:,} rows"
        logger.info(
            "[QueryGrid] %s page=%d +%d rows, loaded=%d/%d, elapsed=%.1fms",
            type(self).__name__, page, len(rows), loaded, total, elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def qg_handle_sort(self, sort_model: list[dict[str, Any]]) -> None:
        """Header click; the grid reports its new sort model."""
        new = self._qg_sort().apply_model(sort_model, self._qg_schema().by_id)
        self.qg_sort_field = new.field or ""
        self.qg_sort_direction = new.direction

    # ------------------------------------------------------------------
    # Field visibility
    # ------------------------------------------------------------------

    @rx.event(background=True)
    async def qg_load_visibility(self):
        async with self:
            config = self._qg_visibility()
        if not config.page_key:
            return
        disabled = await config.load()
        async with self:
            if self.qg_page_key != config.page_key:
                return
            if config.load_error:
                self.qg_error = f"Could not load search settings: {config.load_error}"
            else:
                self.qg_disabled_fields = disabled

    def qg_open_settings(self) -> None:
        config = self._qg_visibility()
        config.open_dialog()
        self._qg_store_visibility(config)

    def qg_toggle_draft_field(self, field_id: str) -> None:
        config = self._qg_visibility()
        if not config.dialog_open:
            return
        config.toggle(field_id)
        self._qg_store_visibility(config)

    def qg_cancel_settings(self) -> None:
        config = self._qg_visibility()
        config.cancel()
        self._qg_store_visibility(config)

    def qg_settings_open_change(self, is_open: bool):
        if is_open:
            self.qg_open_settings()
        else:
            self.qg_cancel_settings()

    def qg_save_settings(self):
        """Commit the draft now; persist in the background."""
        config = self._qg_visibility()
        if not config.dialog_open:
            return None
        request_id = config.commit()
        self._qg_store_visibility(config)
        return type(self).qg_persist_visibility(request_id)

    def qg_retry_persist(self):
        config = self._qg_visibility()
        if config.persist_error is None:
            return None
        request_id = config.begin_persist()
        self._qg_store_visibility(config)
        return type(self).qg_persist_visibility(request_id)

    @rx.event(background=True)
    async def qg_persist_visibility(self, request_id: int):
        """Send the committed list; only the newest persist sets the error."""
        async with self:
            config = self._qg_visibility()
        error = await config.send(list(config.committed))
        async with self:
            config = self._qg_visibility()
            config.record_persist(request_id, error)
            self._qg_store_visibility(config)

    # ------------------------------------------------------------------
    # Panel resize
    # ------------------------------------------------------------------

    def qg_resize_start(self) -> None:
        panel = self._qg_panel()
        panel.start()
        self._qg_store_panel(panel)

    def qg_resize_move(self, delta: float) -> None:
        panel = self._qg_panel()
        panel.move(delta)
        self._qg_store_panel(panel)

    def qg_resize_end(self) -> None:
        panel = self._qg_panel()
        panel.end()
        self._qg_store_panel(panel)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def qg_cell_click(self, params: dict[str, Any]):
        column_id = params.get("field")
        schema = self._qg_schema()
        if column_id not in schema.by_id or not schema.column(column_id).is_action_column:
            return None
        row = {k: v for k, v in (params.get("row") or {}).items() if k != ROW_ID_FIELD}
        row_id = (params.get("row") or {}).get(ROW_ID_FIELD)
        if isinstance(row_id, int) and 0 <= row_id < len(self.qg_rows):
            row = dict(self.qg_rows[row_id])
        return self._qg_on_action(column_id, row)

    async def qg_row_edit(self, update: dict[str, Any]) -> None:
        """Optimistic cell edit reported by the grid."""
        new_row = update.get("newRow") or {}
        old_row = update.get("oldRow") or {}
        row_id = new_row.get(ROW_ID_FIELD)
        if not isinstance(row_id, int):
            return
        schema = self._qg_schema()
        rows = self.qg_rows
        for column_id, value in changed_fields(old_row, new_row).items():
            if column_id not in schema.by_id:
                continue
            column = schema.column(column_id)
            try:
                rows, updated = apply_cell_edit(rows, row_id, column_id, value)
            except IndexError:
                logger.warning("[QueryGrid] edit for unknown row %r", row_id)
                return
            self.qg_rows = rows
            if not await run_edit_hook(column, value, dict(updated)):
                self.qg_error = f"Saving {column.label} failed"
        self._qg_on_rows_changed(list(self.qg_rows))

    def qg_add_row(self) -> None:
        self.qg_rows = add_empty_row(self.qg_rows, self._qg_schema().columns)
        self._qg_on_rows_changed(list(self.qg_rows))

    def qg_dismiss_error(self) -> None:
        self.qg_error = ""

    def qg_dismiss_persist_error(self) -> None:
        self.qg_persist_error = ""

    # ------------------------------------------------------------------
    # Computed vars
    # ------------------------------------------------------------------

    @rx.var
    def qg_view_rows(self) -> list[dict[str, Any]]:
        """Rows as rendered: sorted, then filtered live by the panel input."""
        schema = get_schema(type(self).__name__)
        values = load_values(self.qg_search_values, schema.columns)
        sort = SortState(self.qg_sort_field or None, self.qg_sort_direction)  # type: ignore[arg-type]
        rows = view_rows(self.qg_rows, schema.columns, values, self.qg_disabled_fields, sort)
        if self.qg_editable:
            return rows
        return format_rows(rows, schema.columns)

    @rx.var
    def qg_sort_model(self) -> list[dict[str, str]]:
        if not self.qg_sort_field:
            return []
        return [{"field": self.qg_sort_field, "sort": self.qg_sort_direction}]

    @rx.var
    def qg_search_fields(self) -> list[dict[str, Any]]:
        """Search inputs to render, with their current values."""
        schema = get_schema(type(self).__name__)
        values = load_values(self.qg_search_values, schema.columns)
        fields = []
        for col in searchable_columns(schema.columns, self.qg_disabled_fields):
            value = values.get(col.id)
            field = col.to_search_field()
            field["text"] = value if isinstance(value, str) else ""
            field["select"] = value if isinstance(value, str) and value else ANY_OPTION
            field["number"] = value.value if isinstance(value, NumberValue) else ""
            field["from"] = (value.from_ or "") if isinstance(value, DateRange) else ""
            field["to"] = (value.to or "") if isinstance(value, DateRange) else ""
            field["bool"] = (
                ANY_OPTION if not isinstance(value, bool) else ("yes" if value else "no")
            )
            field["input_type"] = "datetime-local" if col.kind is ColumnKind.DATETIME else "date"
            fields.append(field)
        return fields

    @rx.var
    def qg_settings_fields(self) -> list[dict[str, Any]]:
        schema = get_schema(type(self).__name__)
        return [
            {"id": col.id, "label": col.label, "visible": col.id not in self.qg_draft_fields}
            for col in schema.columns
            if col.is_searchable
        ]

    @rx.var
    def qg_active_count(self) -> int:
        schema = get_schema(type(self).__name__)
        values = load_values(self.qg_search_values, schema.columns)
        return len(active_columns(values, schema.columns, self.qg_disabled_fields))


# ---------------------------------------------------------------------------
# UI helpers
# ---------------------------------------------------------------------------

def _search_input(state_cls: type, field: rx.Var) -> rx.Component:
    field_id = field["id"].to(str)
    options = field["options"].to(list[dict[str, str]])
    return rx.match(
        field["kind"].to(str),
        (
            "number",
            rx.input(
                value=field["number"].to(str),
                on_change=lambda v: state_cls.qg_set_number(field_id, v),
                input_mode="decimal",
                placeholder="=",
                size="1",
            ),
        ),
        (
            "select",
            rx.select.root(
                rx.select.trigger(placeholder="Any", width="100%"),
                rx.select.content(
                    rx.select.item("Any", value=ANY_OPTION),
                    rx.foreach(
                        options,
                        lambda opt: rx.select.item(opt["label"], value=opt["value"]),
                    ),
                ),
                value=field["select"].to(str),
                on_change=lambda v: state_cls.qg_set_text(field_id, v),
                size="1",
            ),
        ),
        (
            "boolean",
            rx.select.root(
                rx.select.trigger(width="100%"),
                rx.select.content(
                    rx.select.item("Any", value=ANY_OPTION),
                    rx.select.item("Yes", value="yes"),
                    rx.select.item("No", value="no"),
                ),
                value=field["bool"].to(str),
                on_change=lambda v: state_cls.qg_set_boolean(field_id, v),
                size="1",
            ),
        ),
        (
            "date",
            _date_range_input(state_cls, field, field_id),
        ),
        (
            "datetime",
            _date_range_input(state_cls, field, field_id),
        ),
        rx.input(
            value=field["text"].to(str),
            on_change=lambda v: state_cls.qg_set_text(field_id, v),
            size="1",
        ),
    )


def _date_range_input(state_cls: type, field: rx.Var, field_id: rx.Var) -> rx.Component:
    input_type = field["input_type"].to(str)
    return rx.hstack(
        rx.input(
            type=input_type,
            value=field["from"].to(str),
            on_change=lambda v: state_cls.qg_set_date(field_id, "from", v),
            size="1",
        ),
        rx.text("–", size="1"),
        rx.input(
            type=input_type,
            value=field["to"].to(str),
            on_change=lambda v: state_cls.qg_set_date(field_id, "to", v),
            size="1",
        ),
        spacing="1",
        align="center",
    )


def query_grid_search_panel(state_cls: type) -> rx.Component:
    """Search inputs for the visible fields, Search / Clear / Settings buttons
    and the drag handle that resizes the panel.
    """
    fields = rx.grid(
        rx.foreach(
            state_cls.qg_search_fields,
            lambda field: rx.vstack(
                rx.text(field["label"].to(str), size="1", weight="medium"),
                _search_input(state_cls, field),
                spacing="1",
                width="100%",
            ),
        ),
        columns="4",
        spacing="3",
        width="100%",
    )
    buttons = rx.hstack(
        rx.button("Search", on_click=state_cls.qg_search, size="1"),
        rx.button("Clear", on_click=state_cls.qg_clear_search, size="1", variant="soft"),
        rx.cond(
            state_cls.qg_active_count > 0,
            rx.badge(state_cls.qg_active_count.to(str), " active", size="1"),
        ),
        rx.spacer(),
        rx.icon_button(
            rx.icon("settings", size=14),
            on_click=state_cls.qg_open_settings,
            size="1",
            variant="ghost",
        ),
        width="100%",
        align="center",
    )
    return rx.box(
        rx.box(
            rx.vstack(fields, buttons, spacing="3", width="100%"),
            height=f"{state_cls.qg_panel_height}px",
            overflow_y="auto",
            padding="0.75em",
        ),
        resize_handle(
            on_resize_start=state_cls.qg_resize_start,
            on_resize_move=state_cls.qg_resize_move,
            on_resize_end=state_cls.qg_resize_end,
            style={"background": "var(--gray-a3)"},
        ),
        border="1px solid var(--gray-a5)",
        border_radius="6px",
        width="100%",
    )


def query_grid_settings_dialog(state_cls: type) -> rx.Component:
    """Checkbox list of search fields; Save commits, Cancel discards."""
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title("Search fields"),
            rx.vstack(
                rx.foreach(
                    state_cls.qg_settings_fields,
                    lambda f: rx.checkbox(
                        f["label"].to(str),
                        checked=f["visible"].to(bool),
                        on_change=lambda _checked: state_cls.qg_toggle_draft_field(f["id"].to(str)),
                    ),
                ),
                spacing="2",
            ),
            rx.hstack(
                rx.button("Cancel", on_click=state_cls.qg_cancel_settings, variant="soft"),
                rx.button("Save", on_click=state_cls.qg_save_settings),
                justify="end",
                margin_top="1em",
            ),
        ),
        open=state_cls.qg_settings_open,
        on_open_change=state_cls.qg_settings_open_change,
    )


def query_grid_error_banner(state_cls: type) -> rx.Component:
    return rx.fragment(
        rx.cond(
            state_cls.qg_error != "",
            rx.callout.root(
                rx.hstack(
                    rx.callout.text(state_cls.qg_error),
                    rx.spacer(),
                    rx.button("Dismiss", on_click=state_cls.qg_dismiss_error, size="1", variant="ghost"),
                    width="100%",
                    align="center",
                ),
                color_scheme="red",
                size="1",
            ),
        ),
        rx.cond(
            state_cls.qg_persist_error != "",
            rx.callout.root(
                rx.hstack(
                    rx.callout.text("Search settings were not saved: ", state_cls.qg_persist_error),
                    rx.spacer(),
                    rx.button("Retry", on_click=state_cls.qg_retry_persist, size="1"),
                    rx.button(
                        "Dismiss", on_click=state_cls.qg_dismiss_persist_error, size="1", variant="ghost"
                    ),
                    width="100%",
                    align="center",
                ),
                color_scheme="amber",
                size="1",
            ),
        ),
    )


def query_grid_footer(state_cls: type) -> rx.Component:
    return rx.hstack(
        rx.cond(state_cls.qg_loading, rx.spinner(size="1")),
        rx.text(state_cls.qg_stats, size="1", color="var(--gray-9)"),
        rx.cond(
            ~state_cls.qg_has_more & (state_cls.qg_rows.length() > 0),  # type: ignore[union-attr]
            rx.text("No more rows", size="1", color="var(--gray-9)"),
        ),
        spacing="2",
        align="center",
        padding_y="0.25em",
    )


def query_grid(
    state_cls: type,
    columns: list[Column],
    *,
    height: str = "520px",
    width: str = "100%",
    show_search: bool = True,
    show_add_row: bool = False,
    debug_log: bool = False,
    **extra_props: Any,
) -> rx.Component:
    """Search panel + data grid + footer bound to a :class:`QueryGridMixin` state.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`QueryGridMixin`.
        columns: The page's column schema (also registered for the state).
        height: CSS height of the grid.
        width: CSS width of the whole block.
        show_search: Render the search panel.
        show_add_row: Render an "Add row" button (internal rows mode).
        debug_log: Browser console logging in the grid wrapper.
        **extra_props: Forwarded to :func:`~reflex_admin_grid.datagrid.data_grid`.
    """
    editable = extra_props.pop("editable", False)
    register_schema(state_cls.__name__, columns)
    if editable:
        extra_props["on_row_edit"] = state_cls.qg_row_edit
    grid = data_grid(
        rows=state_cls.qg_view_rows,
        columns=[col.to_grid_column(editable=editable) for col in columns],
        row_id_field=ROW_ID_FIELD,
        loading=state_cls.qg_loading,
        sort_model=state_cls.qg_sort_model,
        on_sort_model_change=state_cls.qg_handle_sort,
        on_rows_scroll_end=state_cls.qg_scroll_end,
        on_rows_scroll_leave=state_cls.qg_scroll_leave,
        on_cell_click=state_cls.qg_cell_click,
        debug_log=debug_log,
        height=height,
        width="100%",
        **extra_props,
    )
    parts: list[rx.Component] = [query_grid_error_banner(state_cls)]
    if show_search:
        parts.append(query_grid_search_panel(state_cls))
        parts.append(query_grid_settings_dialog(state_cls))
    if show_add_row:
        parts.append(rx.button("Add row", on_click=state_cls.qg_add_row, size="1", variant="outline"))
    parts.append(grid)
    parts.append(query_grid_footer(state_cls))
    return rx.vstack(*parts, spacing="2", width=width)
