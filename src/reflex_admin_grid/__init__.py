"""reflex-admin-grid -- schema-driven query grid for Reflex admin consoles.

The engine (criteria, filtering, sorting, pagination, field visibility and
panel resizing) is plain Python; :class:`QueryGridMixin` and
:func:`query_grid` bind it to Reflex and the MUI X DataGrid.

Run the bundled job scheduler / watchlist console with::

    reflex-admin-grid run
"""

from reflex_admin_grid.columns import Column, ColumnKind, SelectOption, searchable_columns
from reflex_admin_grid.criteria import FilterCriteriaStore, build_criteria
from reflex_admin_grid.datagrid import DataGrid, data_grid
from reflex_admin_grid.errors import AdminGridError, ApiError, ColumnKindError, JobFormError
from reflex_admin_grid.field_visibility import FieldVisibilityConfig
from reflex_admin_grid.filtering import filter_rows
from reflex_admin_grid.grid import register_schema, view_rows
from reflex_admin_grid.kinds import DateRange, NumberValue
from reflex_admin_grid.pagination import GridPager, PaginationCoordinator, RequestTracker
from reflex_admin_grid.query_grid import (
    QueryGridMixin,
    query_grid,
    query_grid_error_banner,
    query_grid_footer,
    query_grid_search_panel,
    query_grid_settings_dialog,
)
from reflex_admin_grid.renderers import ActionCellRenderer, StatusCellRenderer
from reflex_admin_grid.resize import ResizablePanelController
from reflex_admin_grid.sorting import SortEngine, SortState
