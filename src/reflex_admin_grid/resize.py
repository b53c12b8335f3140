"""Drag-to-resize state machine for the search panel.

While a drag is in progress the controller holds two subscriptions on an
:class:`InputCapture` (pointer move and pointer up).  They are pushed onto
an :class:`contextlib.ExitStack`, and every way out of the ``dragging``
state closes that stack, so handlers never outlive the drag.

The running height is kept as a float so sub-pixel pointer deltas add up;
:attr:`ResizablePanelController.height` is the rounded value to display.
"""

import contextlib
import logging
from collections.abc import Callable
from typing import Any, Literal, Protocol

logger = logging.getLogger(__name__)

DEFAULT_MIN_HEIGHT: int = 80
DEFAULT_MAX_HEIGHT: int = 320

DragState = Literal["idle", "dragging"]


class InputCapture(Protocol):
    """Where pointer listeners are attached (the ``window`` of this model)."""

    def subscribe(
        self, event: str, handler: Callable[..., Any]
    ) -> contextlib.AbstractContextManager[Any]: ...


class ResizablePanelController:
    """Tracks the search panel height through pointer drags.

    Args:
        height: Initial panel height.
        min_height: Lower clamp.
        max_height: Upper clamp.
        capture: Where move/up listeners are attached during a drag.
            ``None`` means move/end are driven directly by the caller.
    """

    def __init__(
        self,
        height: float = 160,
        *,
        min_height: int = DEFAULT_MIN_HEIGHT,
        max_height: int = DEFAULT_MAX_HEIGHT,
        capture: InputCapture | None = None,
    ) -> None:
        if min_height > max_height:
            raise ValueError(f"min_height {min_height} exceeds max_height {max_height}")
        self.min_height = min_height
        self.max_height = max_height
        self.exact_height: float = self.clamp(height)
        self.state: DragState = "idle"
        self.baseline: int = self.height
        self._capture = capture
        self._listeners: contextlib.ExitStack | None = None

    @property
    def height(self) -> int:
        return round(self.exact_height)

    def clamp(self, value: float) -> float:
        return float(min(self.max_height, max(self.min_height, value)))

    @property
    def is_dragging(self) -> bool:
        return self.state == "dragging"

    def start(self) -> None:
        """Pointer down on the handle."""
        if self.is_dragging:
            return
        self.state = "dragging"
        self.baseline = self.height
        if self._capture is not None:
            stack = contextlib.ExitStack()
            try:
                stack.enter_context(self._capture.subscribe("pointermove", self.move))
                stack.enter_context(self._capture.subscribe("pointerup", self.end))
            except BaseException:
                stack.close()
                self.state = "idle"
                raise
            self._listeners = stack

    def move(self, delta: float) -> int:
        """Pointer move while dragging; returns the new display height."""
        if not self.is_dragging:
            return self.height
        self.exact_height = self.clamp(self.exact_height + delta)
        return self.height

    def end(self, *_: Any) -> None:
        """Pointer up; leaves ``dragging`` and releases the listeners."""
        self._release()
        self.state = "idle"

    def teardown(self) -> None:
        """Component teardown: release unconditionally.  Safe to repeat."""
        self.end()

    def _release(self) -> None:
        stack, self._listeners = self._listeners, None
        if stack is not None:
            stack.close()
            logger.debug("[ResizablePanel] drag listeners released")
