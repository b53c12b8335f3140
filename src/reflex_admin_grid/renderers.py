"""JS cell renderers for grid columns (``Column.render_cell``)."""

import json
import typing
from collections.abc import Mapping

import reflex as rx


def _make_var(cls: type, js_expr: str) -> typing.Any:
    instance = object.__new__(cls)
    object.__setattr__(instance, "_js_expr", js_expr)
    object.__setattr__(instance, "_var_type", typing.Any)
    object.__setattr__(instance, "_var_data", None)
    return instance


class StatusCellRenderer(rx.Var):
    """Render a status code as a coloured label.

    Args:
        labels: Display label per (upper-case) status code.  Unknown codes
            are shown capitalised; empty cells show ``"-"``.
        colors: CSS colour per status code.
        tooltip_field: Optional row field shown as the cell's ``title``
            (e.g. the last execution's result message).
    """

    def __new__(
        cls,
        labels: Mapping[str, str],
        colors: Mapping[str, str] | None = None,
        tooltip_field: str | None = None,
    ) -> "StatusCellRenderer":
        title_expr = (
            f"(params.row[{json.dumps(tooltip_field)}] || undefined)" if tooltip_field else "undefined"
        )
        js_expr = (
            "(params) => { "
            "const v = params.value; "
            "if (v === null || v === undefined || v === '') return '-'; "
            "const code = String(v).toUpperCase(); "
            f"const labels = {json.dumps(dict(labels))}; "
            f"const colors = {json.dumps(dict(colors or {}))}; "
            "const s = String(v); "
            "const label = labels[code] || (s.charAt(0).toUpperCase() + s.slice(1).toLowerCase()); "
            "return React.createElement('span', "
            f"{{title: {title_expr}, style: {{color: colors[code] || 'inherit', fontWeight: 500}}}}, label); "
            "}"
        )
        return _make_var(cls, js_expr)

    def __init__(self, *args: typing.Any, **kwargs: typing.Any) -> None:
        pass


class ActionCellRenderer(rx.Var):
    """Render a small button in an action column.

    Clicks reach Python through the grid's ``on_cell_click`` event.
    """

    def __new__(cls, label: str = "Run", color: str = "#1976d2") -> "ActionCellRenderer":
        js_expr = (
            "(params) => React.createElement('button', "
            f"{{type: 'button', style: {{padding: '2px 10px', border: '1px solid {color}', "
            f"borderRadius: '4px', background: 'transparent', color: '{color}', cursor: 'pointer'}}}}, "
            f"{json.dumps(label)})"
        )
        return _make_var(cls, js_expr)

    def __init__(self, *args: typing.Any, **kwargs: typing.Any) -> None:
        pass
