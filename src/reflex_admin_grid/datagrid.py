"""Reflex wrapper for the MUI X DataGrid (v8) used by the query grid.

The wrapper component (``QueryDataGrid``) is injected into compiled pages
via ``add_imports()`` + ``add_custom_code()`` so the bare
``@mui/x-data-grid`` import resolves from ``.web/node_modules/``.

Compared to a plain DataGrid it adds three things:

* continuous scrolling over all loaded rows (no pagination footer), with
  the Community edition's 100-row page cap lifted;
* a last-row visibility signal: ``onRowsScrollEnd`` fires once when the
  end of the loaded rows comes into view and ``onRowsScrollLeave`` fires
  when it leaves again, both carrying the current row count;
* ``onRowEdit``: a ``processRowUpdate`` bridge that reports
  ``{newRow, oldRow}`` and keeps the edit on screen (optimistic).
"""

from typing import Any, Literal

import reflex as rx
from reflex.components.el import Div


# ---------------------------------------------------------------------------
# Event-handler argument helpers
# ---------------------------------------------------------------------------
# MUI callback params hold non-serializable references (api, colDef, DOM
# nodes); strip them before the value is sent to the Python backend.

def _js_strip_keys(event_var: str, exclude_keys: list[str]) -> str:
    keys = ", ".join(exclude_keys)
    return f"let {{{keys}, ...rest}} = {event_var}; return rest"


def _arrow_callback(js_body: str) -> rx.Var:
    return rx.Var(f"(() => {{{js_body}}})()")


def _on_cell_click_spec(event: rx.Var) -> list[rx.Var]:
    exclude = ["api", "colDef", "node", "event", "column", "cellMode", "hasFocus", "tabIndex"]
    return [_arrow_callback(_js_strip_keys(str(event), exclude))]


def _on_sort_model_change_spec(model: rx.Var) -> list[rx.Var]:
    return [model]


def _on_rows_scroll_spec(event: rx.Var) -> list[rx.Var]:
    return [event]


def _on_row_edit_spec(update: rx.Var) -> list[rx.Var]:
    return [update]


# ---------------------------------------------------------------------------
# Inline JS wrapper
# ---------------------------------------------------------------------------
_INLINE_WRAPPER_JS = """
// Lift the Community 100-row page cap: GridSignature_ shares its object
// with MuiDataGrid_ after pre-bundling, so renaming the signature makes the
// internal `=== GridSignature.DataGrid` checks fail.
let _qgPatchActive = false;
try {
  if (typeof GridSignature_ !== 'undefined' && GridSignature_ &&
      GridSignature_.DataGrid === 'DataGrid') {
    GridSignature_.DataGrid = 'DataGrid_Unlimited';
    _qgPatchActive = true;
  }
} catch (_e) { /* fall back to autoPageSize below */ }

class _QueryGridGuard extends React.Component {
  constructor(props) {
    super(props);
    this.state = { pageSizeError: false, otherError: null };
  }
  static getDerivedStateFromError(error) {
    const msg = error && typeof error.message === 'string' ? error.message : '';
    if (msg.indexOf('pageSize') !== -1 && msg.indexOf('100') !== -1) {
      return { pageSizeError: true, otherError: null };
    }
    return { pageSizeError: false, otherError: error };
  }
  render() {
    if (this.state.otherError) throw this.state.otherError;
    if (this.state.pageSizeError) return this.props.fallback();
    return this.props.children;
  }
}

const _qgLog = (enabled, ...args) => {
  if (enabled) console.log('%c[QueryGrid]', 'color:#2196f3;font-weight:bold', ...args);
};

function _qgGridProps(props, unlimited) {
  const {
    onRowsScrollEnd, onRowsScrollLeave, onRowEdit, scrollEndThreshold, debugLog, ...rest
  } = props;
  const ep = { ...rest };
  const rowCount = Array.isArray(rest.rows) ? rest.rows.length : 0;
  if (unlimited) {
    if (rowCount > 0) {
      ep.paginationModel = { page: 0, pageSize: rowCount };
      ep.pageSizeOptions = [rowCount];
    }
  } else {
    ep.autoPageSize = true;
  }
  if (ep.hideFooter === undefined) ep.hideFooter = unlimited;
  if (typeof onRowEdit === 'function') {
    ep.processRowUpdate = (newRow, oldRow) => {
      onRowEdit({ newRow: newRow, oldRow: oldRow });
      return newRow;
    };
    ep.onProcessRowUpdateError = (err) => console.error('[QueryGrid] row update', err);
  }
  return ep;
}

const QueryDataGrid = React.forwardRef((props, ref) => {
  const { onRowsScrollEnd, onRowsScrollLeave, scrollEndThreshold, debugLog } = props;
  const log = !!debugLog;
  const containerRef = React.useRef(null);
  const firedRef = React.useRef(false);
  const rowCount = Array.isArray(props.rows) ? props.rows.length : 0;
  const rowCountRef = React.useRef(rowCount);
  rowCountRef.current = rowCount;
  const checkRef = React.useRef(null);

  // A new last row is a new boundary: re-arm, then re-check on the next
  // frame.  Rows that fit without scrolling never emit a scroll event, so
  // the boundary must be tested here too or the next page never loads.
  React.useEffect(() => {
    firedRef.current = false;
    _qgLog(log, 'rows', rowCount);
    const rafId = requestAnimationFrame(() => {
      if (checkRef.current) checkRef.current();
    });
    return () => cancelAnimationFrame(rafId);
  }, [rowCount, log]);

  React.useEffect(() => {
    const container = containerRef.current;
    if (!container) return;
    const scroller = container.querySelector('.MuiDataGrid-virtualScroller');
    if (!scroller) return;
    const threshold = typeof scrollEndThreshold === 'number' ? scrollEndThreshold : 40;

    const onScroll = () => {
      if (rowCountRef.current === 0) return;
      const remaining = scroller.scrollHeight - scroller.scrollTop - scroller.clientHeight;
      if (remaining <= threshold) {
        if (!firedRef.current) {
          firedRef.current = true;
          _qgLog(log, 'last row visible', rowCountRef.current);
          if (typeof onRowsScrollEnd === 'function') {
            onRowsScrollEnd({ rowCount: rowCountRef.current, remaining: remaining });
          }
        }
      } else if (firedRef.current && remaining > threshold * 2) {
        firedRef.current = false;
        _qgLog(log, 'last row hidden', rowCountRef.current);
        if (typeof onRowsScrollLeave === 'function') {
          onRowsScrollLeave({ rowCount: rowCountRef.current, remaining: remaining });
        }
      }
    };

    checkRef.current = onScroll;
    scroller.addEventListener('scroll', onScroll, { passive: true });
    const rafId = requestAnimationFrame(onScroll);
    return () => {
      cancelAnimationFrame(rafId);
      if (checkRef.current === onScroll) checkRef.current = null;
      scroller.removeEventListener('scroll', onScroll);
    };
  }, [onRowsScrollEnd, onRowsScrollLeave, scrollEndThreshold, log]);

  const grid = React.createElement(MuiDataGrid_, { ..._qgGridProps(props, _qgPatchActive), ref });
  const fallback = () =>
    React.createElement(MuiDataGrid_, { ..._qgGridProps(props, false), ref });
  return React.createElement(
    'div',
    { ref: containerRef, style: { width: '100%', height: '100%' } },
    _qgPatchActive ? React.createElement(_QueryGridGuard, { fallback: fallback }, grid) : grid
  );
});
QueryDataGrid.displayName = 'QueryDataGrid';
"""


# ---------------------------------------------------------------------------
# DataGrid component
# ---------------------------------------------------------------------------

class DataGrid(rx.Component):
    """MUI X DataGrid (Community, v8) configured for the query grid.

    Requires a parent container with explicit dimensions; use
    :func:`data_grid` for a version wrapped in a sized ``<div>``.
    """

    library: str = "@mui/x-data-grid"
    tag: str = "QueryDataGrid"
    is_default: bool = False

    lib_dependencies: list[str] = [
        "@mui/material@^7.0.0",
        "@emotion/react@^11.14.0",
        "@emotion/styled@^11.14.0",
    ]

    @property
    def import_var(self) -> rx.ImportVar:
        """Install the npm package without importing ``QueryDataGrid`` from it.

        The tag is defined by ``add_custom_code()``, not by the package.
        """
        return rx.ImportVar(tag=None, render=False)

    def add_imports(self) -> dict:
        return {
            "@mui/x-data-grid": [
                rx.ImportVar(tag="DataGrid", alias="MuiDataGrid_"),
                rx.ImportVar(tag="GridSignature", alias="GridSignature_"),
            ],
            "react": [rx.ImportVar(tag="React", is_default=True)],
        }

    def add_custom_code(self) -> list[str]:
        return [_INLINE_WRAPPER_JS]

    # ---- data ----
    rows: rx.Var[list[dict[str, Any]]]
    columns: rx.Var[list[dict[str, Any]]]
    get_row_id: rx.Var[Any]

    # ---- display ----
    loading: rx.Var[bool]
    density: rx.Var[Literal["comfortable", "compact", "standard"]]
    row_height: rx.Var[int]
    hide_footer: rx.Var[bool]
    locale_text: rx.Var[dict[str, str]]
    debug_log: rx.Var[bool]

    # ---- scrolling ----
    scroll_end_threshold: rx.Var[int]

    # ---- sorting (driven from Python) ----
    sorting_mode: rx.Var[Literal["client", "server"]]
    sort_model: rx.Var[list[dict[str, Any]]]
    sorting_order: rx.Var[list[str | None]]

    # ---- disabled built-ins ----
    disable_column_filter: rx.Var[bool]
    disable_column_menu: rx.Var[bool]
    disable_row_selection_on_click: rx.Var[bool]

    # ---- event handlers ----
    on_cell_click: rx.EventHandler[_on_cell_click_spec]
    on_sort_model_change: rx.EventHandler[_on_sort_model_change_spec]
    on_rows_scroll_end: rx.EventHandler[_on_rows_scroll_spec]
    on_rows_scroll_leave: rx.EventHandler[_on_rows_scroll_spec]
    on_row_edit: rx.EventHandler[_on_row_edit_spec]

    @classmethod
    def create(
        cls,
        *children: rx.Component,
        row_id_field: str | None = None,
        **props: Any,
    ) -> rx.Component:
        """Create the grid.

        Args:
            *children: Unused.
            row_id_field: Shortcut for ``getRowId={(row) => row.<field>}``.
            **props: All other grid props.
        """
        if row_id_field is not None:
            props["get_row_id"] = rx.Var(f"(row) => row[{row_id_field!r}]")
        return super().create(*children, **props)


def data_grid(*children: rx.Component, **props: Any) -> rx.Component:
    """DataGrid inside a ``<div>`` of the given ``width`` / ``height``.

    Sorting is owned by Python (``sorting_mode="server"``, no unsorted
    state) and MUI's own column filter is switched off, since the search
    panel does the filtering.
    """
    width = props.pop("width", "100%")
    height = props.pop("height", "400px")
    props.setdefault("sorting_mode", "server")
    props.setdefault("sorting_order", ["asc", "desc"])
    props.setdefault("disable_column_filter", True)
    props.setdefault("disable_row_selection_on_click", True)
    props.setdefault("density", "compact")
    return Div.create(DataGrid.create(*children, **props), width=width, height=height)
