"""Job scheduler domain: status labels, cron schedules and the create-job form."""

import enum
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from reflex_admin_grid.columns import SelectOption
from reflex_admin_grid.errors import JobFormError


class JobStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    RUNNING = "RUNNING"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_COLORS = {
    JobStatus.COMPLETED: "green",
    JobStatus.FAILED: "red",
    JobStatus.RUNNING: "blue",
}


def get_status_label(code: str | None) -> str:
    """Human label for a job status code ("-" when there is none)."""
    if not code:
        return "-"
    try:
        return JobStatus(code.upper()).label
    except ValueError:
        return code[:1].upper() + code[1:].lower()


class ActiveStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    @property
    def label(self) -> str:
        return self.value.capitalize()


ACTIVE_STATUS_OPTIONS: tuple[SelectOption, ...] = tuple(
    SelectOption(label=s.label, value=s.value) for s in ActiveStatus
)

TASK_GROUPS: tuple[str, ...] = ("DEFAULT", "STOCK", "REPORT", "MAINTENANCE")

TASK_GROUP_OPTIONS: tuple[SelectOption, ...] = tuple(
    SelectOption(label=g.capitalize(), value=g) for g in TASK_GROUPS
)

WEEKDAY_LABELS: tuple[str, ...] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


# ---------------------------------------------------------------------------
# Cron
# ---------------------------------------------------------------------------

Frequency = Literal["daily", "weekly", "monthly"]


@dataclass(frozen=True)
class CronSchedule:
    """Execution schedule chosen in the create-job form.

    Attributes:
        frequency: ``daily``, ``weekly`` or ``monthly``.
        start_date: ``YYYY-MM-DD``; the schedule is incomplete without it.
        start_time: ``HH:MM`` (24h).
        selected_days: Weekdays for ``weekly``, ``0`` = Sunday.
        end_date: Optional last run date (informational only).
    """

    frequency: Frequency = "daily"
    start_date: str = ""
    start_time: str = "12:00"
    selected_days: tuple[int, ...] = ()
    end_date: str = ""


def _quartz_weekday(day: int) -> int:
    # Quartz numbers weekdays 1 (SUN) .. 7 (SAT).
    return 1 if day == 0 else day + 1


def build_cron_expression(schedule: CronSchedule) -> str:
    """Quartz cron expression for *schedule*, or ``""`` when incomplete.

    >>> build_cron_expression(CronSchedule("daily", "2024-01-01", "09:05"))
    '0 5 9 * * ?'
    """
    if not schedule.start_date or not schedule.start_time:
        return ""
    try:
        hour_text, minute_text = schedule.start_time.split(":")[:2]
        hour, minute = int(hour_text), int(minute_text)
    except ValueError:
        return ""

    if schedule.frequency == "daily":
        return f"0 {minute} {hour} * * ?"
    if schedule.frequency == "weekly":
        if not schedule.selected_days:
            return ""
        days = ",".join(str(_quartz_weekday(d)) for d in sorted(schedule.selected_days))
        return f"0 {minute} {hour} ? * {days}"
    if schedule.frequency == "monthly":
        return f"0 {minute} {hour} 1 * ?"
    return ""


def toggle_day(days: Iterable[int], day: int) -> list[int]:
    current = set(days)
    current.symmetric_difference_update({day})
    return sorted(current)


# ---------------------------------------------------------------------------
# Create-job form
# ---------------------------------------------------------------------------

def parse_job_params(text: str | None) -> dict[str, Any]:
    """Parse the job-params text box; blank means ``{}``.

    Raises:
        JobFormError: when the text is not a JSON object.
    """
    if text is None or not text.strip():
        return {}
    try:
        params = json.loads(text)
    except json.JSONDecodeError:
        raise JobFormError({"jobParams": "Please enter valid JSON format"}) from None
    if not isinstance(params, dict):
        raise JobFormError({"jobParams": "Please enter valid JSON format"})
    return params


@dataclass
class JobForm:
    task_group: str = ""
    job_name: str = ""
    task_description: str = ""
    job_class_path: str = ""
    job_params: str = "{}"
    active_status: str = ActiveStatus.ACTIVE.value
    schedule: CronSchedule = field(default_factory=CronSchedule)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "JobForm":
        return cls(
            task_group=str(data.get("task_group", "")),
            job_name=str(data.get("job_name", "")),
            task_description=str(data.get("task_description", "")),
            job_class_path=str(data.get("job_class_path", "")),
            job_params=str(data.get("job_params", "{}")),
            active_status=str(data.get("active_status", ActiveStatus.ACTIVE.value)),
            schedule=CronSchedule(
                frequency=data.get("frequency", "daily"),
                start_date=str(data.get("start_date", "")),
                start_time=str(data.get("start_time", "")),
                selected_days=tuple(data.get("selected_days", ())),
                end_date=str(data.get("end_date", "")),
            ),
        )


def validate_job_form(form: JobForm) -> dict[str, str]:
    """Field-level messages for *form*; empty when it is valid."""
    errors: dict[str, str] = {}
    if not form.task_group.strip():
        errors["taskGroup"] = "Please select or enter Task Group"
    if not form.job_name.strip():
        errors["jobName"] = "Task name cannot be empty"
    if not form.job_class_path.strip():
        errors["jobClassPath"] = "Job Class Path cannot be empty"
    try:
        parse_job_params(form.job_params)
    except JobFormError as exc:
        errors.update(exc.errors)
    if not form.schedule.frequency:
        errors["frequency"] = "Please select execution frequency"
    if not form.schedule.start_date:
        errors["startDate"] = "Please select start date"
    if not form.schedule.start_time:
        errors["startTime"] = "Please select start time"
    return errors


def build_create_job_payload(form: JobForm) -> dict[str, Any]:
    """Validate *form* and build the ``job/update`` request body.

    The cron expression travels inside ``jobParams`` as ``cronExpression``.

    Raises:
        JobFormError: with every failing field.
    """
    errors = validate_job_form(form)
    if errors:
        raise JobFormError(errors)
    params = parse_job_params(form.job_params)
    params["cronExpression"] = build_cron_expression(form.schedule)
    return {
        "jobName": form.job_name.strip(),
        "taskGroup": form.task_group.strip(),
        "taskDescription": form.task_description,
        "jobClassPath": form.job_class_path.strip(),
        "jobParams": params,
        "activeStatus": form.active_status,
    }
