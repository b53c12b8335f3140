"""Backend services used by the console pages.

:class:`AdminServices` is what pages talk to.  Two implementations exist:
:class:`HttpAdminServices` (the batch API) and
:class:`~reflex_admin_grid.local_backend.LocalAdminServices` (in-memory
polars frames).  :func:`get_services` picks one from the settings.
"""

import logging
from functools import lru_cache
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from reflex_admin_grid.api_client import ApiClient
from reflex_admin_grid.config import AdminGridSettings, get_settings
from reflex_admin_grid.errors import ApiError
from reflex_admin_grid.local_backend import LocalAdminServices
from reflex_admin_grid.schemas import (
    ApiResponse,
    EnquiryJobResponse,
    LaunchJobRequest,
    MenuEnquiryResponse,
    MenuTree,
    SearchCriteriaConfigResponse,
    StockSearchResponse,
    UpdateCriteriaConfigRequest,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AdminServices(Protocol):
    async def get_menu(self) -> list[MenuTree]: ...

    async def get_field_visibility(self, page_key: str) -> list[str]: ...

    async def set_field_visibility(self, page_key: str, disabled_fields: list[str]) -> None: ...

    async def get_job_list(self, page: int, page_size: int) -> EnquiryJobResponse: ...

    async def launch_job(
        self, job_name: str, job_params: dict[str, Any], task_group: str | None = None
    ) -> ApiResponse: ...

    async def create_job(self, payload: dict[str, Any]) -> ApiResponse: ...

    async def search_stocks(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> StockSearchResponse: ...


def _is_transient(exc: BaseException) -> bool:
    if not isinstance(exc, ApiError) or isinstance(exc.__cause__, ValidationError):
        return False
    return exc.is_transient


# Reads and idempotent writes only.
retry_transient = retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(min=1, max=5),
    retry=retry_if_exception(_is_transient),
    reraise=True,
)


def _parse(model: type[ModelT], body: Any, path: str) -> ModelT:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ApiError(f"Unexpected response shape from {path}", payload=body) from exc


class HttpAdminServices:
    """:class:`AdminServices` over the batch HTTP API."""

    def __init__(self, client: ApiClient, settings: AdminGridSettings) -> None:
        self.client = client
        self.settings = settings

    async def _call(self, path: str, payload: dict[str, Any], model: type[ModelT]) -> ModelT:
        body = await self.client.post(path, payload)
        return _parse(model, body, path)

    @retry_transient
    async def get_menu(self) -> list[MenuTree]:
        response = await self._call(self.settings.menu_enquiry_path, {}, MenuEnquiryResponse)
        return response.menu_trees

    @retry_transient
    async def get_field_visibility(self, page_key: str) -> list[str]:
        response = await self._call(
            self.settings.get_search_criteria_path,
            {"pageKey": page_key},
            SearchCriteriaConfigResponse,
        )
        return response.disabled_fields

    @retry_transient
    async def set_field_visibility(self, page_key: str, disabled_fields: list[str]) -> None:
        request = UpdateCriteriaConfigRequest(page_key=page_key, disabled_fields=disabled_fields)
        await self._call(self.settings.update_search_criteria_path, request.to_wire(), ApiResponse)

    @retry_transient
    async def get_job_list(self, page: int, page_size: int) -> EnquiryJobResponse:
        return await self._call(
            self.settings.job_enquiry_path,
            {"page": page, "pageSize": page_size},
            EnquiryJobResponse,
        )

    async def launch_job(
        self, job_name: str, job_params: dict[str, Any], task_group: str | None = None
    ) -> ApiResponse:
        request = LaunchJobRequest(job_name=job_name, job_params=job_params, task_group=task_group)
        logger.info("[jobs] launching %s (%s)", job_name, task_group or "-")
        return await self._call(self.settings.job_launch_path, request.to_wire(), ApiResponse)

    async def create_job(self, payload: dict[str, Any]) -> ApiResponse:
        return await self._call(self.settings.job_update_path, payload, ApiResponse)

    @retry_transient
    async def search_stocks(
        self, page: int, page_size: int, criteria: dict[str, Any]
    ) -> StockSearchResponse:
        return await self._call(
            self.settings.stock_search_path,
            {"page": page, "pageSize": page_size, "criteria": criteria},
            StockSearchResponse,
        )


@lru_cache
def get_services() -> AdminServices:
    """Process-wide services for the configured backend."""
    settings = get_settings()
    if settings.backend == "http":
        logger.info("[services] using batch API at %s", settings.api_base_url)
        client = ApiClient(settings.api_base_url, timeout=settings.request_timeout_seconds)
        return HttpAdminServices(client, settings)

    logger.info("[services] using in-memory polars backend")
    return LocalAdminServices()
