from typer.testing import CliRunner

from reflex_admin_grid.cli import app, write_project

runner = CliRunner()


def test_cron_daily():
    result = runner.invoke(app, ["cron", "daily", "--date", "2024-06-03", "--time", "07:15"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "0 15 7 * * ?"


def test_cron_weekly_days():
    result = runner.invoke(app, ["cron", "weekly", "-d", "2024-06-03", "--day", "5", "--day", "1"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "0 0 12 ? * 2,6"


def test_cron_incomplete_schedule_fails():
    result = runner.invoke(app, ["cron", "weekly", "-d", "2024-06-03"])
    assert result.exit_code == 1


def test_cron_unknown_frequency():
    result = runner.invoke(app, ["cron", "hourly", "-d", "2024-06-03"])
    assert result.exit_code == 1


def test_run_rejects_unknown_backend():
    result = runner.invoke(app, ["run", "--backend", "grpc"])
    assert result.exit_code == 1


def test_write_project(tmp_path):
    write_project(tmp_path, 3100)

    assert "frontend_port=3100" in (tmp_path / "rxconfig.py").read_text()
    assert 'app_name="admin_console"' in (tmp_path / "rxconfig.py").read_text()
    shim = (tmp_path / "admin_console" / "admin_console.py").read_text()
    assert "from reflex_admin_grid.pages.app import app" in shim
    assert (tmp_path / "admin_console" / "__init__.py").exists()
