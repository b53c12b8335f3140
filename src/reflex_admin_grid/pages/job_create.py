"""Create-job form with a cron schedule builder."""

import logging
from typing import Any

import reflex as rx

from reflex_admin_grid.errors import ApiError, JobFormError
from reflex_admin_grid.jobs import (
    TASK_GROUPS,
    WEEKDAY_LABELS,
    ActiveStatus,
    CronSchedule,
    JobForm,
    build_create_job_payload,
    build_cron_expression,
    toggle_day,
)
from reflex_admin_grid.services import get_services

logger = logging.getLogger(__name__)

_TEXT_FIELDS = frozenset({
    "task_group", "job_name", "task_description", "job_class_path", "job_params",
    "active_status", "frequency", "start_date", "start_time", "end_date",
})


class JobCreateState(rx.State):
    task_group: str = ""
    job_name: str = ""
    task_description: str = ""
    job_class_path: str = ""
    job_params: str = "{}"
    active_status: str = ActiveStatus.ACTIVE.value
    frequency: str = "daily"
    start_date: str = ""
    start_time: str = "12:00"
    selected_days: list[int] = []
    end_date: str = ""

    errors: dict[str, str] = {}
    submit_error: str = ""
    submitting: bool = False

    def _schedule(self) -> CronSchedule:
        return CronSchedule(
            frequency=self.frequency,  # type: ignore[arg-type]
            start_date=self.start_date,
            start_time=self.start_time,
            selected_days=tuple(self.selected_days),
            end_date=self.end_date,
        )

    @rx.var
    def cron_preview(self) -> str:
        return build_cron_expression(
            CronSchedule(
                frequency=self.frequency,  # type: ignore[arg-type]
                start_date=self.start_date,
                start_time=self.start_time,
                selected_days=tuple(self.selected_days),
            )
        ) or "-"

    def set_field(self, name: str, value: str) -> None:
        if name not in _TEXT_FIELDS:
            raise ValueError(f"Unknown form field: {name!r}")
        setattr(self, name, value)
        self.errors = {k: v for k, v in self.errors.items() if k != _error_key(name)}

    def toggle_weekday(self, day: int) -> None:
        self.selected_days = toggle_day(self.selected_days, day)

    def reset_form(self) -> None:
        self.reset()

    async def submit(self):
        form = JobForm(
            task_group=self.task_group,
            job_name=self.job_name,
            task_description=self.task_description,
            job_class_path=self.job_class_path,
            job_params=self.job_params,
            active_status=self.active_status,
            schedule=self._schedule(),
        )
        try:
            payload = build_create_job_payload(form)
        except JobFormError as exc:
            self.errors = exc.errors
            return

        self.errors = {}
        self.submitting = True
        yield
        try:
            await get_services().create_job(payload)
        except ApiError as exc:
            logger.warning("[jobs] create %s failed: %s", form.job_name, exc)
            self.submit_error = f"Failed to create job: {exc}"
            self.submitting = False
            return
        self.reset()
        # Imported here: the console page renders this form.
        from reflex_admin_grid.pages.jobs import JobConsoleState

        yield [rx.toast.success(f"{form.job_name} created"), JobConsoleState.job_created]


def _error_key(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _field(label: str, control: rx.Component, error_key: str | None = None) -> rx.Component:
    return rx.vstack(
        rx.text(label, size="2", weight="medium"),
        control,
        rx.cond(
            JobCreateState.errors.contains(error_key),
            rx.text(JobCreateState.errors[error_key], size="1", color="var(--red-9)"),
        ) if error_key else rx.fragment(),
        spacing="1",
        width="100%",
    )


def _text_input(name: str, **props: Any) -> rx.Component:
    return rx.input(
        value=getattr(JobCreateState, name),
        on_change=lambda v: JobCreateState.set_field(name, v),
        width="100%",
        **props,
    )


def job_create_form() -> rx.Component:
    weekday_buttons = rx.hstack(
        *[
            rx.button(
                label,
                size="1",
                variant=rx.cond(JobCreateState.selected_days.contains(day), "solid", "outline"),
                on_click=JobCreateState.toggle_weekday(day),
                type="button",
            )
            for day, label in enumerate(WEEKDAY_LABELS)
        ],
        spacing="1",
    )
    return rx.vstack(
        _field(
            "Task Group",
            rx.select(
                list(TASK_GROUPS),
                value=JobCreateState.task_group,
                on_change=lambda v: JobCreateState.set_field("task_group", v),
                placeholder="Select task group",
            ),
            "taskGroup",
        ),
        _field("Task Name", _text_input("job_name"), "jobName"),
        _field("Description", _text_input("task_description")),
        _field("Job Class Path", _text_input("job_class_path"), "jobClassPath"),
        _field(
            "Job Params (JSON)",
            rx.text_area(
                value=JobCreateState.job_params,
                on_change=lambda v: JobCreateState.set_field("job_params", v),
                font_family="monospace",
                width="100%",
            ),
            "jobParams",
        ),
        _field(
            "Active Status",
            rx.select(
                [s.value for s in ActiveStatus],
                value=JobCreateState.active_status,
                on_change=lambda v: JobCreateState.set_field("active_status", v),
            ),
        ),
        _field(
            "Frequency",
            rx.radio(
                ["daily", "weekly", "monthly"],
                value=JobCreateState.frequency,
                on_change=lambda v: JobCreateState.set_field("frequency", v),
                direction="row",
            ),
            "frequency",
        ),
        rx.cond(JobCreateState.frequency == "weekly", weekday_buttons),
        rx.hstack(
            _field("Start Date", _text_input("start_date", type="date"), "startDate"),
            _field("Start Time", _text_input("start_time", type="time"), "startTime"),
            _field("End Date", _text_input("end_date", type="date")),
            width="100%",
        ),
        rx.hstack(
            rx.text("Cron:", size="2", weight="medium"),
            rx.code(JobCreateState.cron_preview),
            align="center",
        ),
        rx.cond(
            JobCreateState.submit_error != "",
            rx.callout.root(rx.callout.text(JobCreateState.submit_error), color_scheme="red", size="1"),
        ),
        spacing="3",
        width="100%",
    )


def job_create_dialog(open: rx.Var, on_open_change: Any) -> rx.Component:
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title("Create Job"),
            job_create_form(),
            rx.hstack(
                rx.dialog.close(rx.button("Cancel", variant="soft", on_click=JobCreateState.reset_form)),
                rx.button("Submit", on_click=JobCreateState.submit, loading=JobCreateState.submitting),
                justify="end",
                margin_top="1em",
            ),
            max_width="640px",
        ),
        open=open,
        on_open_change=on_open_change,
    )
