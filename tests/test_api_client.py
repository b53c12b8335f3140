import json

import httpx
import pytest

from reflex_admin_grid.api_client import ApiClient
from reflex_admin_grid.config import AdminGridSettings
from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.services import HttpAdminServices

BASE_URL = "http://batch.test/api"


def _client(handler):
    return ApiClient(BASE_URL, transport=httpx.MockTransport(handler))


def _services(handler):
    return HttpAdminServices(_client(handler), AdminGridSettings())


class _Recorder:
    """MockTransport handler replaying queued responses and recording requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def bodies(self):
        return [json.loads(r.content) for r in self.requests]


# ---------------------------------------------------------------------------
# ApiClient
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_post_sends_json_and_decodes_body():
    recorder = _Recorder(httpx.Response(200, json={"code": "0"}))

    async with _client(recorder) as client:
        body = await client.post("/job/enquiry", {"page": 1})

    assert body == {"code": "0"}
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/job/enquiry"
    assert request.headers["content-type"] == "application/json"
    assert recorder.bodies == [{"page": 1}]


@pytest.mark.asyncio
async def test_http_error_status_carries_payload():
    recorder = _Recorder(httpx.Response(404, json={"message": "no such job"}))

    async with _client(recorder) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.post("/job/launch", {"jobName": "x"})

    error = exc_info.value
    assert error.status_code == 404
    assert error.payload == {"message": "no such job"}
    assert not error.is_transient


@pytest.mark.asyncio
async def test_transport_error_has_no_status():
    recorder = _Recorder(httpx.ConnectError("connection refused"))

    async with _client(recorder) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.post("/menu/enquiry")

    assert exc_info.value.status_code is None
    assert exc_info.value.is_transient
    assert exc_info.value.url == f"{BASE_URL}/menu/enquiry"


@pytest.mark.asyncio
async def test_invalid_json_body():
    recorder = _Recorder(httpx.Response(200, text="<html>oops</html>"))

    async with _client(recorder) as client:
        with pytest.raises(ApiError, match="not valid JSON"):
            await client.post("/menu/enquiry")


# ---------------------------------------------------------------------------
# HttpAdminServices
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_job_list_is_parsed_from_camel_case(clean_settings):
    recorder = _Recorder(
        httpx.Response(
            200,
            json={
                "jobTaskList": [
                    {"jobName": "dailyReport", "taskGroup": "REPORT", "jobParams": {"a": 1},
                     "lastExecutionStatus": "FAILED", "unknownField": True},
                ],
                "total": 11,
                "page": 2,
                "pageSize": 10,
            },
        )
    )
    services = _services(recorder)

    response = await services.get_job_list(2, 10)

    assert response.total == 11
    assert response.job_task_list[0].job_name == "dailyReport"
    assert response.job_task_list[0].last_execution_status == "FAILED"
    assert recorder.bodies == [{"page": 2, "pageSize": 10}]


@pytest.mark.asyncio
async def test_field_visibility_requests(clean_settings):
    recorder = _Recorder(httpx.Response(200, json={"disabledFields": ["stockPe"]}))
    services = _services(recorder)

    assert await services.get_field_visibility("Watchlist") == ["stockPe"]
    await services.set_field_visibility("Watchlist", ["symbol"])

    assert [r.url.path for r in recorder.requests] == [
        "/api/search-criteria/config",
        "/api/search-criteria/config/update",
    ]
    assert recorder.bodies == [
        {"pageKey": "Watchlist"},
        {"pageKey": "Watchlist", "disabledFields": ["symbol"]},
    ]


@pytest.mark.asyncio
async def test_launch_job_wire_format_and_no_retry(clean_settings):
    recorder = _Recorder(httpx.Response(503, json={}))
    services = _services(recorder)

    with pytest.raises(ApiError):
        await services.launch_job("dailyReport", {"x": 1})

    assert len(recorder.requests) == 1
    assert recorder.bodies == [{"jobName": "dailyReport", "jobParams": {"x": 1}}]


@pytest.mark.asyncio
async def test_transient_read_failure_is_retried_once(clean_settings):
    recorder = _Recorder(
        httpx.Response(502, text="bad gateway"),
        httpx.Response(200, json={"menuTrees": [{"menuId": "1", "name": "Home", "path": "/Home"}]}),
    )
    services = _services(recorder)

    menu = await services.get_menu()

    assert [m.name for m in menu] == ["Home"]
    assert len(recorder.requests) == 2


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(clean_settings):
    recorder = _Recorder(httpx.Response(400, json={"message": "bad"}))
    services = _services(recorder)

    with pytest.raises(ApiError) as exc_info:
        await services.search_stocks(1, 10, {"symbol": "A"})

    assert exc_info.value.status_code == 400
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_unexpected_shape_becomes_api_error(clean_settings):
    recorder = _Recorder(httpx.Response(200, json={"stockSnapshots": "not a list"}))
    services = _services(recorder)

    with pytest.raises(ApiError, match="Unexpected response shape"):
        await services.search_stocks(1, 10, {})
