from reflex_admin_grid.pagination import GridPager, PaginationCoordinator, PaginationState, RequestTracker


def _coordinator(**state):
    calls = []
    coordinator = PaginationCoordinator(
        state=PaginationState(**state),
        on_load_more=lambda: calls.append(True),
    )
    return coordinator, calls


def test_fires_once_per_visibility_transition():
    coordinator, calls = _coordinator()

    assert coordinator.observe(10, True) is True
    coordinator.state.is_loading = False
    assert coordinator.observe(10, True) is False
    assert len(calls) == 1


def test_rearms_when_boundary_leaves_view():
    coordinator, calls = _coordinator()
    coordinator.observe(10, True)

    coordinator.observe(10, False)
    assert coordinator.observe(10, True) is True
    assert len(calls) == 2


def test_new_boundary_rearms():
    coordinator, calls = _coordinator()
    coordinator.observe(10, True)
    coordinator.complete_load(loaded=20, total=50)

    assert coordinator.observe(20, True) is True
    assert coordinator.state.page == 2
    assert len(calls) == 2


def test_does_not_fire_while_loading_or_exhausted_or_disabled():
    loading, _ = _coordinator(is_loading=True)
    exhausted, _ = _coordinator(has_more=False)
    disabled, calls = _coordinator()
    disabled.enabled = False

    assert loading.observe(10, True) is False
    assert exhausted.observe(10, True) is False
    assert disabled.observe(10, True) is False
    assert calls == []


def test_load_lifecycle_sets_has_more():
    coordinator, _ = _coordinator()

    assert coordinator.begin_load() == 2
    assert coordinator.state.is_loading

    coordinator.complete_load(loaded=20, total=20)
    assert coordinator.state == PaginationState(page=2, has_more=False, is_loading=False)


def test_complete_load_with_explicit_page():
    coordinator, _ = _coordinator(page=4)
    coordinator.complete_load(loaded=10, total=30, page=1)
    assert coordinator.state.page == 1
    assert coordinator.state.has_more


def test_failed_load_rearms_same_boundary():
    coordinator, calls = _coordinator()
    coordinator.observe(10, True)
    coordinator.begin_load()

    coordinator.fail_load()

    assert coordinator.observe(10, True) is True
    assert len(calls) == 2


def test_reset_starts_over():
    coordinator, _ = _coordinator(page=3, has_more=False)
    coordinator.observe(10, True)

    coordinator.reset()

    assert coordinator.state == PaginationState()
    assert coordinator.snapshot()["fired_boundary"] is None


def test_snapshot_round_trip():
    coordinator, _ = _coordinator(page=2)
    coordinator.observe(7, True)

    restored = PaginationCoordinator.from_snapshot(coordinator.snapshot())

    assert restored.state == coordinator.state
    assert restored.observe(7, True) is False


def test_request_tracker_keeps_only_latest():
    tracker = RequestTracker()
    first = tracker.issue()
    second = tracker.issue()

    assert second > first
    assert tracker.is_latest(second)
    assert not tracker.is_latest(first)


def test_request_tracker_start():
    tracker = RequestTracker(start=41)
    assert tracker.latest == 41
    assert tracker.issue() == 42


def test_pager_first_page_that_fits_still_loads_next():
    pager = GridPager()
    search = pager.search()
    assert pager.complete(search, 1, loaded=10, total=30)

    request_id, page = pager.scroll_end(10)
    assert page == 2
    assert pager.scroll_end(10) is None
    assert pager.complete(request_id, page, loaded=20, total=30)

    assert pager.scroll_end(20)[1] == 3


def test_pager_discards_response_of_superseded_search():
    pager = GridPager()
    old = pager.search()
    pager.complete(old, 1, loaded=10, total=30)
    load_more, _ = pager.scroll_end(10)

    new = pager.search()

    assert not pager.is_current(load_more)
    assert pager.complete(load_more, 2, loaded=20, total=30) is False
    assert pager.state == PaginationState(page=1, has_more=True, is_loading=True)
    assert pager.complete(new, 1, loaded=5, total=5) is True
    assert pager.state == PaginationState(page=1, has_more=False, is_loading=False)


def test_pager_ignores_failure_of_stale_request():
    pager = GridPager()
    old = pager.search()
    pager.search()

    assert pager.fail(old) is False
    assert pager.state.is_loading


def test_pager_failure_rearms_load_more():
    pager = GridPager()
    pager.complete(pager.search(), 1, loaded=10, total=30)
    request_id, _ = pager.scroll_end(10)

    assert pager.fail(request_id) is True
    assert pager.scroll_end(10) is not None


def test_pager_scroll_leave_rearms_boundary():
    pager = GridPager()
    pager.complete(pager.search(), 1, loaded=10, total=30)
    request_id, page = pager.scroll_end(10)
    pager.fail(request_id)
    pager.scroll_end(10)

    pager.state.is_loading = False
    assert pager.scroll_end(10) is None
    pager.scroll_leave(10)
    assert pager.scroll_end(10) is not None


def test_pager_reset_makes_in_flight_load_stale():
    pager = GridPager()
    request_id = pager.search()

    pager.reset()

    assert pager.complete(request_id, 1, loaded=10, total=10) is False
    assert pager.state == PaginationState()


def test_pager_snapshot_round_trip_keeps_request_ids():
    pager = GridPager()
    stale = pager.search()
    latest = pager.search()

    restored = GridPager.from_snapshot(pager.snapshot())

    assert restored.snapshot()["request_id"] == latest
    assert not restored.is_current(stale)
    assert restored.is_current(latest)
    assert restored.search() == latest + 1


def test_disabled_pager_never_loads_more():
    pager = GridPager(PaginationCoordinator(enabled=False))
    assert pager.scroll_end(10) is None
