"""In-memory :class:`~reflex_admin_grid.services.AdminServices` on polars frames.

Used for demos and offline development (``ADMIN_GRID_BACKEND=local``).  Jobs
and stock snapshots live in eager DataFrames that are replaced on every
write; queries go through the same criteria translation a real backend
would apply.
"""

import asyncio
import json
import logging
import random
from datetime import date, datetime, timedelta
from typing import Any

import polars as pl

from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.jobs import ActiveStatus, JobStatus
from reflex_admin_grid.polars_utils import apply_criteria, page_slice
from reflex_admin_grid.schemas import (
    ApiResponse,
    EnquiryJobResponse,
    Job,
    MenuTree,
    StockSearchResponse,
    StockSnapshot,
)

logger = logging.getLogger(__name__)

_JOBS_SCHEMA = {
    "jobName": pl.String,
    "taskGroup": pl.String,
    "jobParams": pl.String,
    "activeStatus": pl.String,
    "lastExecutionStatus": pl.String,
    "lastExecutionTime": pl.Datetime("us"),
    "resultMessage": pl.String,
}


def default_menu() -> list[MenuTree]:
    return [
        MenuTree(
            menu_id="1",
            name="Home",
            path="/Home",
            children=[
                MenuTree(menu_id="11", parent_id="1", name="Job Management", path="/jobConfig"),
                MenuTree(menu_id="12", parent_id="1", name="Watchlist", path="watchlist"),
            ],
        ),
    ]


def sample_jobs() -> pl.DataFrame:
    now = datetime(2024, 6, 3, 9, 30)
    rows = [
        ("stockQuoteSync", "STOCK", {"market": "US"}, "ACTIVE", "COMPLETED", now, "Synced 512 quotes"),
        ("stockPeRefresh", "STOCK", {}, "ACTIVE", "FAILED", now - timedelta(hours=3), "Upstream timeout"),
        ("dailyReport", "REPORT", {"recipients": 4}, "ACTIVE", "COMPLETED", now - timedelta(days=1), None),
        ("weeklyDigest", "REPORT", {}, "INACTIVE", None, None, None),
        ("purgeAuditLog", "MAINTENANCE", {"keepDays": 90}, "ACTIVE", "RUNNING", now - timedelta(minutes=5), None),
        ("rebuildIndexes", "MAINTENANCE", {}, "INACTIVE", "COMPLETED", now - timedelta(days=7), "OK"),
    ]
    rows += [
        (f"batchTask{i:02d}", "DEFAULT", {"shard": i}, "ACTIVE" if i % 3 else "INACTIVE",
         "COMPLETED" if i % 4 else "FAILED", now - timedelta(hours=i), None)
        for i in range(1, 19)
    ]
    return pl.DataFrame(
        [
            {
                "jobName": name,
                "taskGroup": group,
                "jobParams": json.dumps(params),
                "activeStatus": active,
                "lastExecutionStatus": status,
                "lastExecutionTime": when,
                "resultMessage": message,
            }
            for name, group, params, active, status, when, message in rows
        ],
        schema=_JOBS_SCHEMA,
    )


def sample_stocks(seed: int = 7) -> pl.DataFrame:
    rng = random.Random(seed)
    symbols = [
        "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "META", "TSLA", "BRK.B", "JPM", "V",
        "UNH", "XOM", "JNJ", "WMT", "PG", "MA", "HD", "CVX", "KO", "PEP",
        "ABBV", "MRK", "COST", "AVGO", "TSM",
    ]
    quote_date = date(2024, 6, 3)
    return pl.DataFrame(
        {
            "symbol": symbols,
            "quoteDate": [quote_date - timedelta(days=i % 5) for i in range(len(symbols))],
            "closePrice": [round(rng.uniform(20, 900), 2) for _ in symbols],
            "stockPe": [round(rng.uniform(8, 70), 1) for _ in symbols],
        },
        schema={"symbol": pl.String, "quoteDate": pl.Date, "closePrice": pl.Float64, "stockPe": pl.Float64},
    )


def _job_from_row(row: dict[str, Any]) -> Job:
    data = dict(row)
    data["jobParams"] = json.loads(data.get("jobParams") or "{}")
    return Job.model_validate(data)


class LocalAdminServices:
    """:class:`AdminServices` backed by polars frames held in memory."""

    def __init__(
        self,
        jobs: pl.DataFrame | None = None,
        stocks: pl.DataFrame | None = None,
        menu: list[MenuTree] | None = None,
    ) -> None:
        self.jobs = jobs if jobs is not None else sample_jobs()
        self.stocks = stocks if stocks is not None else sample_stocks()
        self.menu = menu if menu is not None else default_menu()
        self.field_visibility: dict[str, list[str]] = {}

    async def get_menu(self) -> list[MenuTree]:
        return list(self.menu)

    async def get_field_visibility(self, page_key: str) -> list[str]:
        return list(self.field_visibility.get(page_key, []))

    async def set_field_visibility(self, page_key: str, disabled_fields: list[str]) -> None:
        self.field_visibility[page_key] = list(disabled_fields)
        logger.debug("[local] %s hides %s", page_key, disabled_fields)

    async def get_job_list(self, page: int, page_size: int) -> EnquiryJobResponse:
        rows, total = page_slice(self.jobs.lazy(), page, page_size)
        return EnquiryJobResponse(
            job_task_list=[_job_from_row(r) for r in rows],
            total=total,
            page=page,
            page_size=page_size,
        )

    def _set_job_status(self, job_name: str, status: JobStatus, message: str | None) -> None:
        match = pl.col("jobName") == job_name
        self.jobs = self.jobs.with_columns(
            pl.when(match).then(pl.lit(status.value)).otherwise(pl.col("lastExecutionStatus"))
            .alias("lastExecutionStatus"),
            pl.when(match).then(pl.lit(datetime.now().replace(microsecond=0)))
            .otherwise(pl.col("lastExecutionTime")).alias("lastExecutionTime"),
            pl.when(match).then(pl.lit(message, dtype=pl.String)).otherwise(pl.col("resultMessage"))
            .alias("resultMessage"),
        )

    async def launch_job(
        self, job_name: str, job_params: dict[str, Any], task_group: str | None = None
    ) -> ApiResponse:
        if self.jobs.filter(pl.col("jobName") == job_name).is_empty():
            raise ApiError(f"Job {job_name!r} not found", status_code=404)
        self._set_job_status(job_name, JobStatus.RUNNING, None)
        await asyncio.sleep(0)
        self._set_job_status(job_name, JobStatus.COMPLETED, f"Launched with {json.dumps(job_params)}")
        logger.info("[local] launched %s", job_name)
        return ApiResponse(code="0", message=f"{job_name} launched")

    async def create_job(self, payload: dict[str, Any]) -> ApiResponse:
        job_name = payload.get("jobName", "")
        if not job_name:
            raise ApiError("jobName is required", status_code=400)
        if not self.jobs.filter(pl.col("jobName") == job_name).is_empty():
            raise ApiError(f"Job {job_name!r} already exists", status_code=409)
        row = pl.DataFrame(
            [
                {
                    "jobName": job_name,
                    "taskGroup": payload.get("taskGroup") or "DEFAULT",
                    "jobParams": json.dumps(payload.get("jobParams") or {}),
                    "activeStatus": payload.get("activeStatus") or ActiveStatus.ACTIVE.value,
                    "lastExecutionStatus": None,
                    "lastExecutionTime": None,
                    "resultMessage": None,
                }
            ],
            schema=_JOBS_SCHEMA,
        )
        self.jobs = pl.concat([row, self.jobs])
        return ApiResponse(code="0", message=f"{job_name} created")

    async def search_stocks(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> StockSearchResponse:
        lf = apply_criteria(self.stocks.lazy(), criteria).sort("symbol")
        rows, total = page_slice(lf, page, page_size)
        return StockSearchResponse(
            stock_snapshots=[StockSnapshot.model_validate(r) for r in rows],
            total=total,
        )
