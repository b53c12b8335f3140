"""Settings for the admin console.

All values can be overridden through ``ADMIN_GRID_*`` environment
variables (or a ``.env`` file), e.g. ``ADMIN_GRID_BACKEND=http`` and
``ADMIN_GRID_API_BASE_URL=https://batch.example.com/api``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdminGridSettings(BaseSettings):
    """Validated configuration, read once at startup."""

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_GRID_",
        env_file=".env",
        extra="ignore",
    )

    # === Backend ===
    backend: Literal["http", "local"] = Field(
        default="local",
        description="'http' talks to the batch API; 'local' uses the in-memory polars backend",
    )
    api_base_url: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the batch API",
    )
    request_timeout_seconds: float = Field(
        default=100.0,
        gt=0,
        le=600,
        description="HTTP timeout per request in seconds",
    )

    # === Endpoints (relative to api_base_url) ===
    menu_enquiry_path: str = "/menu/enquiry"
    get_search_criteria_path: str = "/search-criteria/config"
    update_search_criteria_path: str = "/search-criteria/config/update"
    job_enquiry_path: str = "/job/enquiry"
    job_launch_path: str = "/job/launch"
    job_update_path: str = "/job/update"
    stock_search_path: str = "/stock/search"

    # === Grid ===
    page_size: int = Field(default=10, ge=1, le=500, description="Rows per load-more page")
    panel_min_height: int = Field(default=80, ge=0)
    panel_max_height: int = Field(default=320, ge=1)
    panel_default_height: int = Field(default=160, ge=0)

    # === Logging ===
    log_level: str = Field(default="INFO", description="Root log level for the console")

    @model_validator(mode="after")
    def _check_panel_bounds(self) -> "AdminGridSettings":
        if self.panel_min_height > self.panel_max_height:
            raise ValueError("panel_min_height must not exceed panel_max_height")
        return self


@lru_cache
def get_settings() -> AdminGridSettings:
    return AdminGridSettings()


def reset_settings_cache() -> None:
    """Forget the cached settings (tests, CLI overrides)."""
    get_settings.cache_clear()
