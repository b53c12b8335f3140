"""Infinite-scroll pagination and stale-response protection."""

import itertools
import logging
from collections.abc import Callable, Hashable
from dataclasses import asdict, dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class PaginationState:
    page: int = 1
    has_more: bool = True
    is_loading: bool = False


@dataclass
class PaginationCoordinator:
    """Decides when reaching the last rendered row should load more rows.

    The UI reports visibility changes of the last row through
    :meth:`observe`, identifying it by a *boundary* key (typically the row
    count or the last row's id).  Load-more fires at most once per
    visibility transition of a boundary: it re-arms only when that
    boundary leaves view, or when a different boundary becomes the
    observed last row.

    Attributes:
        state: Current page / has-more / loading flags.
        enabled: Pagination switch for the page; ``False`` never loads.
        on_load_more: Optional callback invoked when a load should start.
    """

    state: PaginationState = field(default_factory=PaginationState)
    enabled: bool = True
    on_load_more: Callable[[], Any] | None = field(default=None, repr=False, compare=False)
    _fired_boundary: Hashable | None = field(default=None, repr=False)

    def can_load(self) -> bool:
        return self.enabled and self.state.has_more and not self.state.is_loading

    def observe(self, boundary: Hashable, visible: bool) -> bool:
        """Report that the last row *boundary* entered or left the viewport.

        Returns:
            True if this call triggered a load-more.
        """
        if not visible:
            if boundary == self._fired_boundary:
                self._fired_boundary = None
            return False
        if boundary == self._fired_boundary:
            return False
        if not self.can_load():
            return False
        self._fired_boundary = boundary
        logger.debug("[QueryGrid] load-more for boundary %r (page %d)", boundary, self.state.page)
        if self.on_load_more is not None:
            self.on_load_more()
        return True

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    def begin_load(self) -> int:
        """Mark a load as in flight and return the page being requested."""
        self.state.is_loading = True
        return self.state.page + 1

    def complete_load(self, loaded: int, total: int, *, page: int | None = None) -> None:
        """Record a finished page.

        Args:
            loaded: Rows held after the response has been applied.
            total: Total row count reported by the host.
            page: The page just loaded (defaults to the next page).
        """
        self.state.page = page if page is not None else self.state.page + 1
        self.state.has_more = loaded < total
        self.state.is_loading = False

    def fail_load(self) -> None:
        self.state.is_loading = False
        self._fired_boundary = None

    def reset(self) -> None:
        """Start over from page 1, e.g. after a new search."""
        self.state = PaginationState()
        self._fired_boundary = None

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        data = asdict(self.state)
        data["enabled"] = self.enabled
        data["fired_boundary"] = self._fired_boundary
        return data

    @classmethod
    def from_snapshot(
        cls,
        data: dict[str, Any],
        on_load_more: Callable[[], Any] | None = None,
    ) -> "PaginationCoordinator":
        coordinator = cls(
            state=PaginationState(
                page=int(data.get("page", 1)),
                has_more=bool(data.get("has_more", True)),
                is_loading=bool(data.get("is_loading", False)),
            ),
            enabled=bool(data.get("enabled", True)),
            on_load_more=on_load_more,
        )
        coordinator._fired_boundary = data.get("fired_boundary")
        return coordinator


class RequestTracker:
    """Tags outgoing requests so only the newest response is applied."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start + 1)
        self.latest: int = start

    def issue(self) -> int:
        self.latest = next(self._counter)
        return self.latest

    def is_latest(self, request_id: int) -> bool:
        return request_id == self.latest


class GridPager:
    """Pagination and request ids for one grid, as its host drives them.

    Every search, load-more and reset issues a fresh request id.  A
    response is applied only while its id is still the latest, so a slow
    page from an earlier search can never land on top of a newer result.
    """

    def __init__(
        self,
        coordinator: PaginationCoordinator | None = None,
        requests: RequestTracker | None = None,
    ) -> None:
        self.coordinator = coordinator or PaginationCoordinator()
        self.requests = requests or RequestTracker()

    @property
    def state(self) -> PaginationState:
        return self.coordinator.state

    def reset(self) -> None:
        """Back to page 1 with nothing loading; in-flight pages go stale."""
        self.coordinator.reset()
        self.requests.issue()

    def search(self) -> int:
        """Start a page-1 load and return its request id."""
        self.coordinator.reset()
        self.coordinator.state.is_loading = True
        return self.requests.issue()

    def scroll_end(self, boundary: Hashable) -> tuple[int, int] | None:
        """The last row *boundary* came into view.

        Returns:
            ``(request_id, page)`` of the load to start, or ``None``.
        """
        if not self.coordinator.observe(boundary, True):
            return None
        page = self.coordinator.begin_load()
        return self.requests.issue(), page

    def scroll_leave(self, boundary: Hashable) -> None:
        self.coordinator.observe(boundary, False)

    def is_current(self, request_id: int) -> bool:
        return self.requests.is_latest(request_id)

    def complete(self, request_id: int, page: int, loaded: int, total: int) -> bool:
        """Record a finished page; ``False`` if the response is stale."""
        if not self.is_current(request_id):
            logger.debug("[QueryGrid] dropping stale response #%d", request_id)
            return False
        self.coordinator.complete_load(loaded, total, page=page)
        return True

    def fail(self, request_id: int) -> bool:
        """Record a failed page; ``False`` if the request is stale."""
        if not self.is_current(request_id):
            logger.debug("[QueryGrid] ignoring failure of stale request #%d", request_id)
            return False
        self.coordinator.fail_load()
        return True

    def snapshot(self) -> dict[str, Any]:
        data = self.coordinator.snapshot()
        data["request_id"] = self.requests.latest
        return data

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "GridPager":
        return cls(
            PaginationCoordinator.from_snapshot(data),
            RequestTracker(start=int(data.get("request_id", 0))),
        )
