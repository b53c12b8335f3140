"""Job scheduler console."""

import logging
from typing import Any

import reflex as rx

from reflex_admin_grid.columns import Column, ColumnKind, SelectOption
from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.grid import register_schema
from reflex_admin_grid.jobs import ACTIVE_STATUS_OPTIONS, TASK_GROUP_OPTIONS, ActiveStatus, JobStatus
from reflex_admin_grid.pages.job_create import job_create_dialog
from reflex_admin_grid.pages.layout import page_shell, resolve_page_key
from reflex_admin_grid.query_grid import QueryGridMixin, query_grid
from reflex_admin_grid.renderers import ActionCellRenderer, StatusCellRenderer
from reflex_admin_grid.services import get_services

logger = logging.getLogger(__name__)

JOB_COLUMNS: list[Column] = [
    Column("jobName", "Job Name", width=200),
    Column("taskGroup", "Task Group", kind=ColumnKind.SELECT, select_options=TASK_GROUP_OPTIONS),
    Column(
        "activeStatus",
        "Active Status",
        kind=ColumnKind.SELECT,
        select_options=ACTIVE_STATUS_OPTIONS,
        render_cell=StatusCellRenderer(
            {s.value: s.label for s in ActiveStatus},
            {ActiveStatus.ACTIVE.value: "green", ActiveStatus.INACTIVE.value: "red"},
        ),
    ),
    Column("lastExecutionTime", "Last Execution Time", kind=ColumnKind.DATETIME, width=180),
    Column(
        "lastExecutionStatus",
        "Last Execution Status",
        kind=ColumnKind.SELECT,
        select_options=tuple(SelectOption(s.label, s.value) for s in JobStatus),
        render_cell=StatusCellRenderer(
            {s.value: s.label for s in JobStatus},
            {s.value: s.color for s in JobStatus},
            tooltip_field="resultMessage",
        ),
    ),
    Column("actions", "Actions", kind=ColumnKind.ACTION, width=90, render_cell=ActionCellRenderer("Run")),
]


class JobConsoleState(QueryGridMixin, rx.State):
    create_open: bool = False

    async def _qg_fetch_page(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> tuple[list[dict[str, Any]], int]:
        response = await get_services().get_job_list(page, page_size)
        return [job.to_wire() for job in response.job_task_list], response.total

    def _qg_on_action(self, column_id: str, row: dict[str, Any]) -> Any:
        return type(self).launch_job(row)

    async def open_page(self, route: str):
        page_key = await resolve_page_key(route)
        return type(self).qg_start(page_key)

    async def launch_job(self, row: dict[str, Any]):
        job_name = row.get("jobName") or ""
        try:
            await get_services().launch_job(job_name, row.get("jobParams") or {}, row.get("taskGroup"))
        except ApiError as exc:
            logger.warning("[jobs] launch of %s failed: %s", job_name, exc)
            return rx.toast.error(f"Failed to launch {job_name}: {exc}")
        return [rx.toast.success(f"{job_name} launched"), type(self).qg_search]

    def set_create_open(self, is_open: bool) -> None:
        self.create_open = is_open

    def job_created(self):
        self.create_open = False
        return type(self).qg_search


register_schema(JobConsoleState.__name__, JOB_COLUMNS)


def jobs_page() -> rx.Component:
    return page_shell(
        "Job Management",
        rx.hstack(
            rx.spacer(),
            rx.button("Create", on_click=JobConsoleState.set_create_open(True)),
            width="100%",
        ),
        query_grid(JobConsoleState, JOB_COLUMNS),
        job_create_dialog(
            open=JobConsoleState.create_open,
            on_open_change=JobConsoleState.set_create_open,
        ),
    )
