"""Drag handle under the search panel.

Pointer down on the handle attaches ``pointermove`` / ``pointerup``
listeners to ``window``; they are removed on pointer up and when the
handle unmounts mid-drag, which also cancels the pending move frame and
sends ``on_resize_end``.  Python receives ``on_resize_start``,
``on_resize_move(delta)`` (pixels since the previous move) and
``on_resize_end``.
"""

from typing import Any

import reflex as rx

_RESIZE_HANDLE_JS = """
const PanelResizeHandle = (props) => {
  const { onResizeStart, onResizeMove, onResizeEnd, style, ...rest } = props;
  const cleanupRef = React.useRef(null);
  const cbRef = React.useRef({});
  cbRef.current = { onResizeStart, onResizeMove, onResizeEnd };

  const release = React.useCallback(() => {
    const cleanup = cleanupRef.current;
    cleanupRef.current = null;
    if (cleanup) cleanup();
  }, []);

  const onPointerDown = React.useCallback((e) => {
    if (cleanupRef.current) return;
    e.preventDefault();
    let lastY = e.clientY;
    let pending = 0;
    let frame = 0;
    const flush = () => {
      frame = 0;
      if (pending !== 0 && typeof cbRef.current.onResizeMove === 'function') {
        cbRef.current.onResizeMove(pending);
      }
      pending = 0;
    };
    const move = (ev) => {
      pending += ev.clientY - lastY;
      lastY = ev.clientY;
      if (!frame) frame = requestAnimationFrame(flush);
    };
    const up = () => {
      if (frame) cancelAnimationFrame(frame);
      flush();
      release();
      if (typeof cbRef.current.onResizeEnd === 'function') cbRef.current.onResizeEnd();
    };
    window.addEventListener('pointermove', move);
    window.addEventListener('pointerup', up);
    cleanupRef.current = () => {
      if (frame) cancelAnimationFrame(frame);
      frame = 0;
      window.removeEventListener('pointermove', move);
      window.removeEventListener('pointerup', up);
    };
    if (typeof cbRef.current.onResizeStart === 'function') cbRef.current.onResizeStart();
  }, [release]);

  // Unmounting mid-drag ends the drag: no move lands after the end.
  React.useEffect(() => () => {
    if (!cleanupRef.current) return;
    release();
    if (typeof cbRef.current.onResizeEnd === 'function') cbRef.current.onResizeEnd();
  }, [release]);

  return React.createElement('div', {
    ...rest,
    role: 'separator',
    'aria-orientation': 'horizontal',
    onPointerDown: onPointerDown,
    style: { height: '8px', cursor: 'row-resize', touchAction: 'none', ...(style || {}) },
  });
};
"""


def _on_resize_move_spec(delta: rx.Var) -> list[rx.Var]:
    return [delta]


class ResizeHandle(rx.Component):
    """Horizontal drag bar; the component is defined in ``add_custom_code()``."""

    library: str = "react"
    tag: str = "PanelResizeHandle"
    is_default: bool = False

    @property
    def import_var(self) -> rx.ImportVar:
        return rx.ImportVar(tag=None, render=False)

    def add_imports(self) -> dict:
        return {"react": [rx.ImportVar(tag="React", is_default=True)]}

    def add_custom_code(self) -> list[str]:
        return [_RESIZE_HANDLE_JS]

    on_resize_start: rx.EventHandler[rx.event.no_args_event_spec]
    on_resize_move: rx.EventHandler[_on_resize_move_spec]
    on_resize_end: rx.EventHandler[rx.event.no_args_event_spec]


def resize_handle(**props: Any) -> rx.Component:
    return ResizeHandle.create(**props)
