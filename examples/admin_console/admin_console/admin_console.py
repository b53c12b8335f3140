"""Example console app: job scheduler and stock watchlist.

Uses the in-memory polars backend unless ``ADMIN_GRID_BACKEND=http`` is
set.  Run from this directory with ``reflex run``.
"""

from reflex_admin_grid.pages.app import app  # noqa: F401
