"""Per-page hidden search fields, with a draft/commit settings workflow.

The committed list is what the search panel shows.  The settings dialog
edits a draft copy; saving commits the draft at once (so the panel
updates without waiting for the network) and persists it in the
background.  Each persist is tagged with a request id and only the
newest one decides ``persist_error``; a retry re-sends the committed list.
Writes for the same page and service are sent one at a time, in order.
"""

import asyncio
import logging
import weakref
from collections.abc import Iterable
from typing import Any, Protocol

from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.pagination import RequestTracker

logger = logging.getLogger(__name__)


class FieldVisibilityService(Protocol):
    async def get_field_visibility(self, page_key: str) -> list[str]: ...

    async def set_field_visibility(self, page_key: str, disabled_fields: list[str]) -> None: ...


_write_locks: "weakref.WeakKeyDictionary[Any, dict[str, asyncio.Lock]]" = weakref.WeakKeyDictionary()


def _write_lock(service: FieldVisibilityService, page_key: str) -> asyncio.Lock:
    locks = _write_locks.setdefault(service, {})
    if page_key not in locks:
        locks[page_key] = asyncio.Lock()
    return locks[page_key]


def toggle_field(fields: Iterable[str], field_id: str) -> list[str]:
    """Add *field_id* to *fields* or remove it, preserving order."""
    current = list(fields)
    if field_id in current:
        return [f for f in current if f != field_id]
    return [*current, field_id]


class FieldVisibilityConfig:
    """Hidden search fields for one ``page_key``.

    Attributes:
        committed: Field ids currently hidden from the search panel.
        draft: Working copy while the settings dialog is open, else ``None``.
        load_error: Message from the last failed :meth:`load`.
        persist_error: Message from the newest persist, if it failed.
    """

    def __init__(
        self, page_key: str, service: FieldVisibilityService, *, last_persist: int = 0
    ) -> None:
        self.page_key = page_key
        self.service = service
        self.committed: list[str] = []
        self.draft: list[str] | None = None
        self.load_error: str | None = None
        self.persist_error: str | None = None
        self._persists = RequestTracker(start=last_persist)

    @property
    def dialog_open(self) -> bool:
        return self.draft is not None

    async def load(self) -> list[str]:
        """Fetch the committed list for this page."""
        try:
            self.committed = list(await self.service.get_field_visibility(self.page_key))
            self.load_error = None
        except ApiError as exc:
            logger.warning("[FieldVisibility] load failed for %r: %s", self.page_key, exc)
            self.load_error = str(exc)
        return self.committed

    # ------------------------------------------------------------------
    # Dialog workflow
    # ------------------------------------------------------------------

    def open_dialog(self) -> list[str]:
        self.draft = list(self.committed)
        return self.draft

    def toggle(self, field_id: str) -> list[str]:
        if self.draft is None:
            raise RuntimeError("Settings dialog is not open")
        self.draft = toggle_field(self.draft, field_id)
        return self.draft

    def cancel(self) -> None:
        self.draft = None

    def commit(self) -> int:
        """Commit the draft and close the dialog; returns the persist id."""
        if self.draft is None:
            raise RuntimeError("Settings dialog is not open")
        self.committed = list(self.draft)
        self.draft = None
        return self.begin_persist()

    def save(self) -> "asyncio.Task[bool]":
        """Commit the draft, close the dialog and persist in the background.

        Must be called with a running event loop.  The returned task
        resolves to whether this write succeeded; callers may ignore it.
        """
        request_id = self.commit()
        return asyncio.get_running_loop().create_task(
            self.persist(list(self.committed), request_id)
        )

    # ------------------------------------------------------------------
    # Persisting
    # ------------------------------------------------------------------

    def begin_persist(self) -> int:
        return self._persists.issue()

    async def send(self, disabled_fields: list[str]) -> ApiError | None:
        """Write *disabled_fields*; returns the error instead of raising it."""
        async with _write_lock(self.service, self.page_key):
            try:
                await self.service.set_field_visibility(self.page_key, disabled_fields)
            except ApiError as exc:
                logger.warning("[FieldVisibility] persist failed for %r: %s", self.page_key, exc)
                return exc
        return None

    def record_persist(self, request_id: int, error: ApiError | None) -> bool:
        """Apply the outcome of persist *request_id*.

        Returns:
            False if a newer persist has been issued since; the outcome is
            then ignored.
        """
        if not self._persists.is_latest(request_id):
            logger.debug("[FieldVisibility] ignoring superseded persist #%d", request_id)
            return False
        self.persist_error = None if error is None else str(error)
        return True

    async def persist(self, disabled_fields: list[str], request_id: int | None = None) -> bool:
        if request_id is None:
            request_id = self.begin_persist()
        error = await self.send(disabled_fields)
        self.record_persist(request_id, error)
        return error is None

    async def retry_persist(self) -> bool:
        """Re-send the committed list after a failed persist; a no-op otherwise."""
        if self.persist_error is None:
            return True
        return await self.persist(list(self.committed))

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return {
            "page_key": self.page_key,
            "committed": list(self.committed),
            "draft": None if self.draft is None else list(self.draft),
            "persist_error": self.persist_error,
            "persist_id": self._persists.latest,
        }

    @classmethod
    def from_snapshot(
        cls, data: dict[str, Any], service: FieldVisibilityService
    ) -> "FieldVisibilityConfig":
        config = cls(data["page_key"], service, last_persist=int(data.get("persist_id", 0)))
        config.committed = list(data.get("committed") or [])
        draft = data.get("draft")
        config.draft = None if draft is None else list(draft)
        config.persist_error = data.get("persist_error")
        return config
