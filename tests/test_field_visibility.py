import asyncio

import pytest

from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.field_visibility import FieldVisibilityConfig, toggle_field


class _FakeService:
    def __init__(self, stored=None, fail_reads=False, fail_writes=0, gate=None):
        self.stored = {"stocks": list(stored or [])}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.gate = gate
        self.writes = []

    async def get_field_visibility(self, page_key):
        if self.fail_reads:
            raise ApiError("HTTP 503 from /search-criteria/config", status_code=503)
        return list(self.stored.get(page_key, []))

    async def set_field_visibility(self, page_key, disabled_fields):
        first = not self.writes
        self.writes.append(list(disabled_fields))
        if first and self.gate is not None:
            await self.gate.wait()
        if self.fail_writes:
            self.fail_writes -= 1
            raise ApiError("Request failed")
        self.stored[page_key] = list(disabled_fields)


def _save(config, *fields):
    config.open_dialog()
    for field_id in fields:
        config.toggle(field_id)
    return config.save()


def test_toggle_field_preserves_order():
    assert toggle_field(["a", "b"], "c") == ["a", "b", "c"]
    assert toggle_field(["a", "b", "c"], "b") == ["a", "c"]


@pytest.mark.asyncio
async def test_load_reads_committed_list():
    config = FieldVisibilityConfig("stocks", _FakeService(["stockPe"]))
    assert await config.load() == ["stockPe"]
    assert config.load_error is None


@pytest.mark.asyncio
async def test_load_failure_keeps_previous_list():
    service = _FakeService(["stockPe"])
    config = FieldVisibilityConfig("stocks", service)
    await config.load()

    service.fail_reads = True
    assert await config.load() == ["stockPe"]
    assert "503" in config.load_error


@pytest.mark.asyncio
async def test_cancel_discards_draft():
    config = FieldVisibilityConfig("stocks", _FakeService())
    config.open_dialog()
    config.toggle("symbol")

    config.cancel()

    assert config.committed == []
    assert not config.dialog_open


@pytest.mark.asyncio
async def test_save_commits_before_persist_finishes():
    service = _FakeService()
    config = FieldVisibilityConfig("stocks", service)

    task = _save(config, "symbol", "stockPe")

    assert config.committed == ["symbol", "stockPe"]
    assert not config.dialog_open
    assert await task is True
    assert service.stored["stocks"] == ["symbol", "stockPe"]


@pytest.mark.asyncio
async def test_failed_persist_can_be_retried():
    service = _FakeService(fail_writes=1)
    config = FieldVisibilityConfig("stocks", service)

    assert await _save(config, "closePrice") is False
    assert config.committed == ["closePrice"]
    assert config.persist_error == "Request failed"

    assert await config.retry_persist() is True
    assert config.persist_error is None
    assert service.writes == [["closePrice"], ["closePrice"]]


@pytest.mark.asyncio
async def test_slow_failed_persist_does_not_override_newer_save():
    gate = asyncio.Event()
    service = _FakeService(fail_writes=1, gate=gate)
    config = FieldVisibilityConfig("stocks", service)

    first = _save(config, "a")
    second = _save(config, "b")
    await asyncio.sleep(0)
    gate.set()

    assert await first is False
    assert await second is True
    assert config.persist_error is None
    assert await config.retry_persist() is True
    assert service.writes == [["a"], ["a", "b"]]
    assert service.stored["stocks"] == config.committed == ["a", "b"]


@pytest.mark.asyncio
async def test_retry_sends_committed_list_after_newest_save_failed():
    service = _FakeService()
    config = FieldVisibilityConfig("stocks", service)
    assert await _save(config, "a") is True

    service.fail_writes = 1
    assert await _save(config, "b") is False
    assert config.persist_error == "Request failed"

    assert await config.retry_persist() is True
    assert service.stored["stocks"] == ["a", "b"]
    assert config.persist_error is None


def test_superseded_persist_result_is_ignored():
    config = FieldVisibilityConfig("stocks", _FakeService())
    stale = config.begin_persist()
    latest = config.begin_persist()

    assert config.record_persist(stale, ApiError("Request failed")) is False
    assert config.persist_error is None
    assert config.record_persist(latest, ApiError("Request failed")) is True
    assert config.persist_error == "Request failed"


@pytest.mark.asyncio
async def test_retry_without_failure_is_noop():
    service = _FakeService()
    config = FieldVisibilityConfig("stocks", service)
    assert await config.retry_persist() is True
    assert service.writes == []


def test_toggle_and_save_require_open_dialog():
    config = FieldVisibilityConfig("stocks", _FakeService())
    with pytest.raises(RuntimeError):
        config.toggle("symbol")
    with pytest.raises(RuntimeError):
        config.commit()


def test_snapshot_round_trip_keeps_persist_ids():
    service = _FakeService()
    config = FieldVisibilityConfig("stocks", service)
    config.open_dialog()
    config.toggle("symbol")
    stale = config.begin_persist()
    config.begin_persist()

    snap = config.snapshot()
    assert snap == {
        "page_key": "stocks",
        "committed": [],
        "draft": ["symbol"],
        "persist_error": None,
        "persist_id": 2,
    }

    restored = FieldVisibilityConfig.from_snapshot(snap, service)
    assert restored.draft == ["symbol"]
    assert restored.record_persist(stale, None) is False
    assert restored.begin_persist() == 3
