import pytest

from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.local_backend import LocalAdminServices, sample_jobs, sample_stocks


@pytest.fixture
def services() -> LocalAdminServices:
    return LocalAdminServices()


def test_sample_data_shapes():
    assert sample_jobs().height == 24
    stocks = sample_stocks()
    assert stocks.height == 25
    assert stocks.equals(sample_stocks())


@pytest.mark.asyncio
async def test_job_pages_cover_all_rows(services):
    first = await services.get_job_list(1, 10)
    last = await services.get_job_list(3, 10)

    assert first.total == 24
    assert len(first.job_task_list) == 10
    assert first.job_task_list[0].job_name == "stockQuoteSync"
    assert first.job_task_list[0].job_params == {"market": "US"}
    assert first.job_task_list[0].last_execution_time == "2024-06-03T09:30:00"
    assert len(last.job_task_list) == 4


@pytest.mark.asyncio
async def test_launch_job_updates_status(services):
    response = await services.launch_job("weeklyDigest", {"force": True})

    assert response.message == "weeklyDigest launched"
    jobs = (await services.get_job_list(1, 10)).job_task_list
    digest = next(j for j in jobs if j.job_name == "weeklyDigest")
    assert digest.last_execution_status == "COMPLETED"
    assert digest.last_execution_time is not None
    assert digest.result_message == 'Launched with {"force": true}'


@pytest.mark.asyncio
async def test_launch_unknown_job(services):
    with pytest.raises(ApiError) as exc_info:
        await services.launch_job("nope", {})
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_create_job_prepends_row(services):
    await services.create_job(
        {"jobName": "newJob", "taskGroup": "REPORT", "jobParams": {"cronExpression": "0 0 1 * * ?"}}
    )

    first = (await services.get_job_list(1, 1)).job_task_list[0]
    assert first.job_name == "newJob"
    assert first.job_params == {"cronExpression": "0 0 1 * * ?"}
    assert first.last_execution_status is None
    assert services.jobs.height == 25


@pytest.mark.asyncio
async def test_create_job_rejects_missing_and_duplicate_names(services):
    with pytest.raises(ApiError) as missing:
        await services.create_job({})
    with pytest.raises(ApiError) as duplicate:
        await services.create_job({"jobName": "dailyReport"})

    assert missing.value.status_code == 400
    assert duplicate.value.status_code == 409


@pytest.mark.asyncio
async def test_search_stocks_filters_sorts_and_pages(services):
    everything = await services.search_stocks(1, 100, {})
    symbols = [s.symbol for s in everything.stock_snapshots]
    assert symbols == sorted(symbols)
    assert everything.total == 25

    found = await services.search_stocks(1, 10, {"symbol": "AA"})
    assert [s.symbol for s in found.stock_snapshots] == ["AAPL"]
    assert found.stock_snapshots[0].quote_date == "2024-06-03"

    dated = await services.search_stocks(1, 10, {"quoteDate": {"from": "2024-06-03", "to": "2024-06-03"}})
    assert dated.total == 5


@pytest.mark.asyncio
async def test_field_visibility_is_per_page(services):
    await services.set_field_visibility("Watchlist", ["stockPe"])

    assert await services.get_field_visibility("Watchlist") == ["stockPe"]
    assert await services.get_field_visibility("Job Management") == []


@pytest.mark.asyncio
async def test_menu(services):
    menu = await services.get_menu()
    assert menu[0].children[1].name == "Watchlist"
