"""CLI for reflex-admin-grid -- run the batch admin console.

Usage::

    # Demo data held in memory (polars)
    reflex-admin-grid run

    # Against a batch API
    reflex-admin-grid run --backend http --api-base-url http://batch:8080/api

    # Preview a Quartz cron expression
    reflex-admin-grid cron weekly --date 2024-06-03 --time 09:30 --day 1 --day 3
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer

from reflex_admin_grid.jobs import CronSchedule, build_cron_expression

app = typer.Typer(
    name="reflex-admin-grid",
    help="Job scheduler console and stock watchlist in the browser.",
    no_args_is_help=True,
)

_APP_NAME = "admin_console"

_APP_SHIM = '''"""Generated entry point for the admin console."""

from reflex_admin_grid.pages.app import app  # noqa: F401
'''

_RXCONFIG_TEMPLATE = '''import reflex as rx

config = rx.Config(app_name="__APP_NAME__", frontend_port=__PORT__)
'''


def write_project(target: Path, port: int) -> Path:
    """Lay out a minimal Reflex project that serves the console from *target*."""
    app_pkg = target / _APP_NAME
    app_pkg.mkdir(parents=True, exist_ok=True)
    (app_pkg / "__init__.py").write_text("")
    (app_pkg / f"{_APP_NAME}.py").write_text(_APP_SHIM)
    rxconfig = _RXCONFIG_TEMPLATE.replace("__APP_NAME__", _APP_NAME).replace("__PORT__", str(port))
    (target / "rxconfig.py").write_text(rxconfig)
    return target


@app.command()
def run(
    backend: Annotated[str, typer.Option("--backend", "-b", help="'local' (in-memory demo data) or 'http'")] = "local",
    api_base_url: Annotated[Optional[str], typer.Option("--api-base-url", help="Batch API base URL for --backend http")] = None,
    port: Annotated[int, typer.Option("--port", "-p", help="Port for the Reflex frontend")] = 3000,
) -> None:
    """Start the admin console."""
    if backend not in ("local", "http"):
        typer.echo(f"Error: unknown backend {backend!r} (expected 'local' or 'http')", err=True)
        raise typer.Exit(code=1)

    # Settings are read from the environment by the Reflex worker processes.
    os.environ["ADMIN_GRID_BACKEND"] = backend
    if api_base_url:
        os.environ["ADMIN_GRID_API_BASE_URL"] = api_base_url

    tmp_dir = write_project(Path(tempfile.mkdtemp(prefix="admin_console_")), port)
    typer.echo(f"Backend: {backend} | Port: {port}")
    os.chdir(tmp_dir)

    # reflex's CLI calls sys.exit() on completion, hence the subprocess.
    typer.echo("Initializing Reflex project...")
    subprocess.run([sys.executable, "-m", "reflex", "init"], cwd=str(tmp_dir), check=True)

    typer.echo("Starting console...")
    os.execvp(sys.executable, [sys.executable, "-m", "reflex", "run"])


@app.command()
def cron(
    frequency: Annotated[str, typer.Argument(help="daily, weekly or monthly")],
    start_date: Annotated[str, typer.Option("--date", "-d", help="Start date, YYYY-MM-DD")],
    start_time: Annotated[str, typer.Option("--time", "-t", help="Start time, HH:MM")] = "12:00",
    days: Annotated[Optional[list[int]], typer.Option("--day", help="Weekday for weekly runs, 0 = Sunday")] = None,
) -> None:
    """Print the Quartz cron expression for a schedule."""
    if frequency not in ("daily", "weekly", "monthly"):
        typer.echo(f"Error: unknown frequency {frequency!r}", err=True)
        raise typer.Exit(code=1)
    schedule = CronSchedule(
        frequency=frequency,  # type: ignore[arg-type]
        start_date=start_date,
        start_time=start_time,
        selected_days=tuple(days or ()),
    )
    expression = build_cron_expression(schedule)
    if not expression:
        typer.echo("Error: incomplete schedule", err=True)
        raise typer.Exit(code=1)
    typer.echo(expression)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
